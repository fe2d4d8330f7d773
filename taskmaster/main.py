from __future__ import annotations

import logging
import sys
from pathlib import Path

from PySide6.QtGui import QColor, QFont, QPalette
from PySide6.QtWidgets import QApplication, QMessageBox, QStyleFactory

from taskmaster.config import PROJECT_ROOT
from taskmaster.infra.db import init_db
from taskmaster.infra.logging import setup_logging
from taskmaster.infra.repository import KeyValueRepository
from taskmaster.services.ai_service import AIService
from taskmaster.services.task_service import TaskService
from taskmaster.services.task_store import TaskStore
from taskmaster.ui.main_window import MainWindow
from taskmaster.ui.workers import AsyncRunner

logger = logging.getLogger(__name__)


def _apply_light_palette(app: QApplication) -> None:
    palette = QPalette()
    palette.setColor(QPalette.Window, QColor("#F8FAFC"))
    palette.setColor(QPalette.WindowText, QColor("#1E293B"))
    palette.setColor(QPalette.Base, QColor("#FFFFFF"))
    palette.setColor(QPalette.AlternateBase, QColor("#F1F5F9"))
    palette.setColor(QPalette.Text, QColor("#1E293B"))
    palette.setColor(QPalette.Button, QColor("#FFFFFF"))
    palette.setColor(QPalette.ButtonText, QColor("#334155"))
    palette.setColor(QPalette.Highlight, QColor("#4F46E5"))
    palette.setColor(QPalette.HighlightedText, QColor("#FFFFFF"))
    app.setPalette(palette)


def _find_qss_path() -> Path | None:
    candidates = [
        Path(__file__).resolve().parent / "ui" / "styles.qss",
        PROJECT_ROOT / "taskmaster" / "ui" / "styles.qss",
    ]

    if getattr(sys, "frozen", False):
        meipass = getattr(sys, "_MEIPASS", None)
        if meipass:
            candidates.append(Path(meipass) / "taskmaster" / "ui" / "styles.qss")

    for path in candidates:
        if path.exists():
            return path
    return None


def load_styles(app: QApplication) -> None:
    qss_path = _find_qss_path()
    if not qss_path:
        return
    app.setStyleSheet(qss_path.read_text(encoding="utf-8"))


def main() -> None:
    setup_logging()
    try:
        init_db()
    except Exception as exc:  # noqa: BLE001
        logger.exception("Database initialisation failed")
        app = QApplication(sys.argv)
        QMessageBox.critical(None, "DB error", str(exc))
        return

    store = TaskStore(KeyValueRepository())
    store.load()
    service = TaskService(store, AIService())

    app = QApplication(sys.argv)
    app.setStyle(QStyleFactory.create("Fusion"))
    _apply_light_palette(app)
    app.setFont(QFont("Segoe UI", 10))
    load_styles(app)

    runner = AsyncRunner()
    window = MainWindow(service, runner)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
