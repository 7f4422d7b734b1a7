# sitebook/ui/dialogs/record_editor_dialog.py
# Rev 0.1.0: one editor for every record kind, laid out from the kind schema
from __future__ import annotations
from typing import Any, Dict, Mapping, Optional

from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QFormLayout, QComboBox, QTextEdit, QSpinBox,
    QDialogButtonBox, QMessageBox, QLineEdit, QWidget
)

from sitebook.models.entities import FieldSpec, schema_for


class RecordEditorDialog(QDialog):
    """
    Add/Edit form for one record.
      text/date/number -> QLineEdit (the store coerces numbers, dates are kept as typed)
      int              -> QSpinBox within the field's bounds
      status           -> QComboBox of the kind's statuses
      longtext         -> QTextEdit

    values() returns the raw field mapping; the caller hands it to the view-model.
    """

    def __init__(self, *, kind: str, values: Mapping[str, Any], is_edit: bool, parent: QWidget | None = None):
        super().__init__(parent)
        self._schema = schema_for(kind)
        verb = "Edit" if is_edit else "Add"
        self.setWindowTitle(f"{verb} {self._schema.label}")
        self._widgets: Dict[str, QWidget] = {}

        form = QFormLayout()
        for spec in self._schema.fields:
            w = self._make_widget(spec, values.get(spec.key, spec.default))
            self._widgets[spec.key] = w
            label = f"{spec.label} *" if spec.required else spec.label
            form.addRow(f"{label}:", w)

        btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        btns.button(QDialogButtonBox.Ok).setText(f"{'Update' if is_edit else 'Create'} {self._schema.label}")
        btns.accepted.connect(self._accept_if_valid)
        btns.rejected.connect(self.reject)

        lay = QVBoxLayout(self)
        lay.addLayout(form)
        lay.addWidget(btns)
        self.resize(480, 0)

    # ----- widgets -----
    def _make_widget(self, spec: FieldSpec, value: Any) -> QWidget:
        if spec.type == "status":
            cmb = QComboBox()
            for status in self._schema.statuses:
                cmb.addItem(status.replace("-", " ").title(), status)
            i = cmb.findData(value)
            cmb.setCurrentIndex(i if i >= 0 else 0)
            return cmb
        if spec.type == "int":
            spin = QSpinBox()
            spin.setRange(int(spec.minimum or 0), int(spec.maximum) if spec.maximum is not None else 1_000_000)
            try:
                spin.setValue(int(value or 0))
            except (TypeError, ValueError):
                spin.setValue(0)
            return spin
        if spec.type == "longtext":
            txt = QTextEdit()
            txt.setAcceptRichText(False)
            txt.setPlainText(str(value or ""))
            txt.setFixedHeight(90)
            return txt
        edit = QLineEdit()
        if spec.type == "date":
            edit.setPlaceholderText("YYYY-MM-DD")
        elif spec.type == "number":
            edit.setPlaceholderText("0")
        text = "" if value is None else str(value)
        if spec.type == "number" and text in ("0", "0.0"):
            text = ""
        edit.setText(text)
        return edit

    # ----- data -----
    def values(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for key, w in self._widgets.items():
            if isinstance(w, QComboBox):
                out[key] = w.currentData()
            elif isinstance(w, QSpinBox):
                out[key] = w.value()
            elif isinstance(w, QTextEdit):
                out[key] = w.toPlainText().strip()
            else:
                out[key] = w.text().strip()
        return out

    def _accept_if_valid(self) -> None:
        name: Optional[str] = self.values().get("name")
        if not name:
            QMessageBox.warning(self, "Missing name", f"{self._schema.label} name is required.")
            self._widgets["name"].setFocus()
            return
        self.accept()
