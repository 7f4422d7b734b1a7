# Rev 0.1.0

# sitebook/main.py  (Rev 0.1.0)
import sys
from PySide6.QtGui import QGuiApplication, QFont
from PySide6.QtCore import Qt, QCoreApplication
from PySide6.QtWidgets import QApplication

from sitebook.app_context import AppContext
from sitebook.ui.main_window import MainWindow
from sitebook.utils.logging_setup import setup_logging, get_logger
from sitebook.utils.paths import DB_PATH, ensure_dirs


def main():
    QGuiApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )
    app = QApplication(sys.argv)
    QCoreApplication.setOrganizationName("sitebook")
    QCoreApplication.setApplicationName("sitebook")

    ensure_dirs()
    logfile = setup_logging("sitebook")
    print(f"[logging] Writing to: {logfile}")

    # --- DI wiring ---
    ctx = AppContext.create(DB_PATH, logfile=logfile)

    # --- UI ---
    win = MainWindow(ctx)
    win.show()
    app.setFont(QFont("Sans Serif", 10))

    rc = app.exec()
    ctx.close()
    get_logger("main").info("Exited with %s", rc)
    return rc


if __name__ == "__main__":
    sys.exit(main())
