# Rev 0.1.0
# sitebook: Main Window
# Tabs: Dashboard | Projects | Architects | Supervisors | Contractors

from __future__ import annotations
from pathlib import Path
from typing import Dict

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QComboBox,
    QLabel, QTabWidget, QDockWidget, QFileDialog, QMessageBox
)

from sitebook.app_context import AppContext
from sitebook.models.entities import schema_for
from sitebook.models.types import ENTITY_KINDS
from sitebook.services.snapshot_io import export_filename
from sitebook.ui.dialogs.record_editor_dialog import RecordEditorDialog
from sitebook.ui.diagnostics_panel import DiagnosticsPanel
from sitebook.ui.tabs.dashboard_tab import DashboardTab
from sitebook.ui.tabs.records_tab import RecordsTab
from sitebook.utils.logging_setup import get_logger


class MainWindow(QMainWindow):
    def __init__(self, ctx: AppContext, parent=None):
        super().__init__(parent)
        self._log = get_logger("MainWindow")
        self._ctx = ctx
        self._vm = ctx.records
        self._sync = ctx.sync

        size = ctx.settings.get("main_window", {})
        self.setWindowTitle("sitebook — Construction Management")
        self.resize(int(size.get("width", 1200)), int(size.get("height", 760)))

        # ---- central ----
        central = QWidget(self)
        v = QVBoxLayout(central)

        top_bar = QHBoxLayout()
        top_bar.addWidget(QLabel("Role:"))
        self._cmb_role = QComboBox()
        for role in self._vm.roles:
            self._cmb_role.addItem(role.title(), role)
        self._cmb_role.currentIndexChanged.connect(self._on_role_selected)
        top_bar.addWidget(self._cmb_role)
        top_bar.addStretch(1)

        self._btn_export = QPushButton("Export")
        self._btn_export.clicked.connect(self._export)
        self._btn_import = QPushButton("Import")
        self._btn_import.clicked.connect(self._import)
        self._btn_sync = QPushButton("Sync to GitHub")
        self._btn_sync.clicked.connect(self._start_sync)
        for b in (self._btn_export, self._btn_import, self._btn_sync):
            top_bar.addWidget(b)
        v.addLayout(top_bar)

        self._tabs = QTabWidget(self)
        self._dashboard = DashboardTab(self)
        self._tabs.addTab(self._dashboard, "Dashboard")
        self._record_tabs: Dict[str, RecordsTab] = {}
        for kind in ENTITY_KINDS:
            tab = RecordsTab(kind, self)
            tab.addRequested.connect(self._add_record)
            tab.editRequested.connect(self._edit_record)
            tab.deleteRequested.connect(self._delete_record)
            self._record_tabs[kind] = tab
            self._tabs.addTab(tab, schema_for(kind).collection.title())
        self._tabs.currentChanged.connect(self._on_tab_changed)
        v.addWidget(self._tabs, 1)
        self.setCentralWidget(central)

        # ---- diagnostics dock ----
        dock = QDockWidget("Diagnostics", self)
        dock.setObjectName("DiagnosticsDock")
        dock.setAllowedAreas(Qt.BottomDockWidgetArea | Qt.TopDockWidgetArea)
        dock.setWidget(DiagnosticsPanel(ctx.logfile, self))
        self.addDockWidget(Qt.BottomDockWidgetArea, dock)
        dock.setVisible(bool(ctx.settings.get("ui", {}).get("diagnostics_dock_visible", True)))

        # ---- view-model wiring ----
        self._vm.recordsReloaded.connect(self._on_records)
        self._vm.dashboardUpdated.connect(self._dashboard.set_summary)
        self._vm.activityReloaded.connect(self._dashboard.set_activity)
        self._vm.roleChanged.connect(self._on_role_changed)
        self._vm.permissionDenied.connect(self._on_permission_denied)
        self._vm.errorRaised.connect(self._on_error)
        self._vm.persistWarning.connect(self._on_persist_warning)
        self._sync.started.connect(self._on_sync_started)
        self._sync.finished.connect(self._on_sync_finished)
        self._sync.cancelled.connect(self._on_sync_cancelled)

        self._vm.reload_all()

    # -------------------- view-model slots --------------------

    def _on_records(self, kind: str, cards: list):
        tab = self._record_tabs.get(kind)
        if tab is not None:
            tab.set_cards(cards)

    def _on_role_changed(self, role: str, can_edit: bool):
        i = self._cmb_role.findData(role)
        if i >= 0 and i != self._cmb_role.currentIndex():
            self._cmb_role.blockSignals(True)
            self._cmb_role.setCurrentIndex(i)
            self._cmb_role.blockSignals(False)
        for tab in self._record_tabs.values():
            tab.set_can_edit(can_edit)
        self._btn_import.setEnabled(can_edit)

    def _on_permission_denied(self, message: str):
        QMessageBox.warning(self, "Permission denied", message)

    def _on_error(self, title: str, message: str):
        QMessageBox.warning(self, title, message)

    def _on_persist_warning(self, message: str):
        self.statusBar().showMessage(message, 10_000)

    # -------------------- actions --------------------

    def _on_role_selected(self, _index: int):
        role = self._cmb_role.currentData()
        if role:
            self._vm.set_role(role)

    def _on_tab_changed(self, index: int):
        if self._tabs.widget(index) is self._dashboard:
            self._vm.reload_dashboard()

    def _add_record(self, kind: str):
        if not self._vm.begin_edit(kind):
            return
        dlg = RecordEditorDialog(kind=kind, values=self._vm.editor_values(kind), is_edit=False, parent=self)
        if dlg.exec():
            self._vm.save_record(kind, None, dlg.values())

    def _edit_record(self, kind: str, record_id: str):
        if not self._vm.begin_edit(kind):
            return
        values = self._vm.editor_values(kind, record_id)
        if values is None:
            return
        dlg = RecordEditorDialog(kind=kind, values=values, is_edit=True, parent=self)
        if dlg.exec():
            self._vm.save_record(kind, record_id, dlg.values())

    def _delete_record(self, kind: str, record_id: str):
        if not self._vm.begin_edit(kind):
            return
        label = schema_for(kind).label.lower()
        name = self._vm.display_name(kind, record_id)
        answer = QMessageBox.question(self, "Confirm delete", f'Delete {label} "{name}"?')
        if answer == QMessageBox.Yes:
            self._vm.delete_record(kind, record_id)

    def _export(self):
        suggested = str(Path.home() / export_filename())
        path, _ = QFileDialog.getSaveFileName(self, "Export data", suggested, "JSON files (*.json)")
        if not path:
            return
        target = self._vm.export_to(path)
        if target is not None:
            self.statusBar().showMessage(f"Exported to {target}", 5_000)

    def _import(self):
        if not self._vm.begin_import():
            return
        path, _ = QFileDialog.getOpenFileName(self, "Import data", str(Path.home()), "JSON files (*.json)")
        if path and self._vm.import_from(path):
            QMessageBox.information(self, "Import", "Data imported successfully!")

    def _start_sync(self):
        self._sync.start()

    def _on_sync_started(self):
        self._btn_sync.setEnabled(False)
        self.statusBar().showMessage("Syncing with GitHub…")

    def _on_sync_finished(self, _entry: dict):
        self._btn_sync.setEnabled(True)
        self.statusBar().showMessage("GitHub sync completed (simulated)", 5_000)
        self._vm.reload_dashboard()

    def _on_sync_cancelled(self):
        self._btn_sync.setEnabled(True)
        self.statusBar().clearMessage()

    # -------------------- lifecycle --------------------

    def closeEvent(self, event):
        self._sync.cancel()
        super().closeEvent(event)
