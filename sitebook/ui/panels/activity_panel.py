# Rev 0.1.0: recent activity cards, newest first
from __future__ import annotations
from html import escape
from typing import List

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel, QScrollArea, QFrame, QSizePolicy

from sitebook.viewmodels.cards import ActivityView


class ActivityPanel(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)

        self._title = QLabel("Recent Activity")
        self._title.setObjectName("ActivityPanelTitle")
        self._title.setSizePolicy(QSizePolicy.Preferred, QSizePolicy.Fixed)

        header = QHBoxLayout()
        header.addWidget(self._title, 1)

        self._list_layout = QVBoxLayout()
        self._list_layout.setContentsMargins(12, 8, 12, 12)
        self._list_layout.setSpacing(8)

        body = QWidget()
        body.setObjectName("ActivityPanelBody")
        body.setLayout(self._list_layout)

        self._scroll = QScrollArea()
        self._scroll.setWidgetResizable(True)
        self._scroll.setWidget(body)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.addLayout(header)
        root.addWidget(self._scroll, 1)

        self.set_entries([])

    # ---- Public API
    def set_entries(self, entries: List[ActivityView]) -> None:
        self._clear()
        if not entries:
            self._list_layout.addWidget(self._empty_state())
            self._list_layout.addStretch(1)
            return
        for e in entries:
            self._list_layout.addWidget(self._make_card(e))
        self._list_layout.addStretch(1)

    # ---- Internals
    def _clear(self) -> None:
        while (item := self._list_layout.takeAt(0)):
            w = item.widget()
            if w: w.deleteLater()

    def _empty_state(self) -> QWidget:
        box = QFrame()
        box.setFrameShape(QFrame.StyledPanel)
        lay = QVBoxLayout(box)
        lbl = QLabel("No activity yet. Add or edit a record to see it here.")
        lbl.setAlignment(Qt.AlignCenter)
        lbl.setObjectName("ActivityEmpty")
        lay.addWidget(lbl)
        return box

    def _make_card(self, e: ActivityView) -> QWidget:
        card = QFrame()
        card.setObjectName("ActivityCard")
        card.setFrameShape(QFrame.StyledPanel)

        outer = QVBoxLayout(card)
        outer.setContentsMargins(12, 8, 12, 8)
        outer.setSpacing(4)

        ts_lbl = QLabel(e.when); ts_lbl.setObjectName("ActivityTimestamp"); ts_lbl.setProperty("dim", True)
        outer.addWidget(ts_lbl)

        line = QLabel(f"<b>{escape(e.user)}:</b> {escape(e.action)}")
        line.setTextFormat(Qt.RichText)
        line.setWordWrap(True)
        line.setObjectName("ActivitySummary")
        outer.addWidget(line)
        return card
