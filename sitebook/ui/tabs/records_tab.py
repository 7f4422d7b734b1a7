# Rev 0.1.0: card list for one record kind; Edit/Delete only on editable cards
from __future__ import annotations
from html import escape
from typing import List, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QScrollArea,
    QFrame, QFormLayout, QProgressBar, QSizePolicy
)

from sitebook.models.entities import schema_for
from sitebook.viewmodels.cards import CardView


class RecordsTab(QWidget):
    addRequested = Signal(str)          # kind
    editRequested = Signal(str, str)    # kind, record_id
    deleteRequested = Signal(str, str)  # kind, record_id

    def __init__(self, kind: str, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._kind = kind
        self._schema = schema_for(kind)

        title = QLabel(f"<h2>{self._schema.collection.title()}</h2>")
        self._btn_add = QPushButton(f"Add {self._schema.label}")
        self._btn_add.clicked.connect(lambda: self.addRequested.emit(self._kind))

        header = QHBoxLayout()
        header.addWidget(title, 1)
        header.addWidget(self._btn_add, 0, Qt.AlignRight)

        self._list_layout = QVBoxLayout()
        self._list_layout.setContentsMargins(12, 8, 12, 12)
        self._list_layout.setSpacing(10)
        body = QWidget()
        body.setLayout(self._list_layout)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(body)

        root = QVBoxLayout(self)
        root.addLayout(header)
        root.addWidget(scroll, 1)

    @property
    def kind(self) -> str:
        return self._kind

    # ---- Public API
    def set_can_edit(self, can_edit: bool) -> None:
        self._btn_add.setVisible(can_edit)

    def set_cards(self, cards: List[CardView]) -> None:
        while (item := self._list_layout.takeAt(0)):
            w = item.widget()
            if w: w.deleteLater()
        if not cards:
            empty = QLabel(f"No {self._schema.collection} yet.")
            empty.setAlignment(Qt.AlignCenter)
            self._list_layout.addWidget(empty)
        for card in cards:
            self._list_layout.addWidget(self._make_card(card))
        self._list_layout.addStretch(1)

    # ---- Internals
    def _make_card(self, card: CardView) -> QWidget:
        box = QFrame()
        box.setObjectName("RecordCard")
        box.setFrameShape(QFrame.StyledPanel)
        outer = QVBoxLayout(box)
        outer.setContentsMargins(12, 8, 12, 8)

        top = QHBoxLayout()
        title = QLabel(f"<b>{escape(card.title)}</b>")
        title.setTextFormat(Qt.RichText)
        badge = QLabel(card.status)
        badge.setObjectName("StatusBadge")
        badge.setProperty("status", card.status)
        badge.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
        badge.setStyleSheet("QLabel#StatusBadge { border: 1px solid palette(mid); border-radius: 6px; padding: 2px 6px; }")
        top.addWidget(title, 1)
        top.addWidget(badge)
        if card.editable:
            rid = card.record_id
            btn_edit = QPushButton("Edit")
            btn_edit.clicked.connect(lambda _=False, r=rid: self.editRequested.emit(self._kind, r))
            btn_del = QPushButton("Delete")
            btn_del.clicked.connect(lambda _=False, r=rid: self.deleteRequested.emit(self._kind, r))
            top.addWidget(btn_edit)
            top.addWidget(btn_del)
        outer.addLayout(top)

        form = QFormLayout()
        for label, value in card.lines:
            val = QLabel(value)
            val.setWordWrap(True)
            val.setTextInteractionFlags(Qt.TextSelectableByMouse)
            form.addRow(f"{label}:", val)
        outer.addLayout(form)

        if card.progress is not None:
            bar = QProgressBar()
            bar.setRange(0, 100)
            bar.setValue(card.progress)
            outer.addWidget(bar)
        return box
