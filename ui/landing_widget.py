"""Landing screen: entry to the scan flow and the static pages."""

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from i18n import t


class LandingWidget(QWidget):

    start_clicked = pyqtSignal()
    information_clicked = pyqtSignal()
    about_clicked = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(48, 32, 48, 32)
        layout.setSpacing(20)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        logo = QLabel(t("app.title"))
        logo.setAlignment(Qt.AlignmentFlag.AlignCenter)
        logo.setStyleSheet("font-size: 24px; font-weight: bold; color: #115E59;")

        title = QLabel(t("landing.hero_title"))
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        title.setStyleSheet("font-size: 32px; font-weight: 800;")

        subtitle = QLabel(t("landing.hero_subtitle"))
        subtitle.setAlignment(Qt.AlignmentFlag.AlignCenter)
        subtitle.setWordWrap(True)
        subtitle.setMaximumWidth(460)
        subtitle.setStyleSheet("font-size: 15px; color: #444;")

        start_btn = QPushButton(f"{t('landing.start_scan')}  →")
        start_btn.setObjectName("primaryButton")
        start_btn.setMinimumHeight(48)
        start_btn.clicked.connect(self.start_clicked.emit)

        links = QHBoxLayout()
        info_btn = QPushButton(t("landing.information"))
        info_btn.clicked.connect(self.information_clicked.emit)
        about_btn = QPushButton(t("landing.about"))
        about_btn.clicked.connect(self.about_clicked.emit)
        links.addStretch()
        links.addWidget(info_btn)
        links.addWidget(about_btn)
        links.addStretch()

        layout.addWidget(logo)
        layout.addStretch()
        layout.addWidget(title)
        layout.addWidget(subtitle, alignment=Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(start_btn)
        layout.addLayout(links)
        layout.addStretch()
