# Rev 0.1.0: summary counters + recent activity
from typing import Any, Dict, List

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QWidget, QLabel, QVBoxLayout, QGroupBox, QGridLayout

from sitebook.ui.panels.activity_panel import ActivityPanel
from sitebook.viewmodels.cards import ActivityView

_COUNTERS = [
    ("active_projects", "Active Projects"),
    ("team_members", "Team Members"),
    ("completed_tasks", "Completed Tasks"),
    ("overdue_items", "Overdue Items"),
    ("average_progress", "Average Progress (%)"),
]


class DashboardTab(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self._values: Dict[str, QLabel] = {}
        self._init_ui()

    def _init_ui(self):
        root = QVBoxLayout(self)
        root.setContentsMargins(12, 12, 12, 12)
        root.setSpacing(10)

        grid = QGridLayout()
        for col, (key, label) in enumerate(_COUNTERS):
            value = QLabel("0")
            value.setObjectName("DashboardCounter")
            value.setAlignment(Qt.AlignCenter)
            value.setStyleSheet("QLabel#DashboardCounter { font-size: 22pt; font-weight: bold; }")
            caption = QLabel(label)
            caption.setAlignment(Qt.AlignCenter)
            grid.addWidget(value, 0, col)
            grid.addWidget(caption, 1, col)
            self._values[key] = value

        box = QGroupBox("Overview")
        box.setLayout(grid)
        root.addWidget(box)

        self._activity = ActivityPanel(self)
        root.addWidget(self._activity, 1)

    # ---------- Public API ----------
    def set_summary(self, summary: Dict[str, Any]) -> None:
        for key, lbl in self._values.items():
            lbl.setText(str(summary.get(key, 0)))

    def set_activity(self, entries: List[ActivityView]) -> None:
        self._activity.set_entries(entries)
