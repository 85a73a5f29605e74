"""DermaVision AI: skin lesion photo and symptom screening assistant.

Entry point for the desktop client. The report endpoint runs separately:
``python -m api``.
"""

import os
import sys

from PyQt6.QtWidgets import QApplication

import i18n
from core.config import get_settings
from core.log import configure_logging


def main():
    """Application entry point."""
    # Handle PyInstaller frozen app
    if getattr(sys, "frozen", False):
        os.chdir(os.path.dirname(sys.executable))

    settings = get_settings()
    configure_logging(settings.log_level)

    app = QApplication(sys.argv)
    app.setApplicationName("DermaVision AI")
    app.setApplicationVersion("1.0.0")

    i18n.init()

    # Import main window after i18n so widget labels resolve
    from ui.main_window import MainWindow

    window = MainWindow(settings)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
