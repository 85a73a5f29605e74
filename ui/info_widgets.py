"""Static Information and About screens, reachable only from the landing screen."""

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import QLabel, QPushButton, QVBoxLayout, QWidget

from i18n import t

APP_VERSION = "1.0.0"


class _StaticPage(QWidget):
    """Title, body paragraphs, and a back button."""

    back_clicked = pyqtSignal()

    def __init__(self, title: str, paragraphs, back_text: str, icon: str = "", parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(48, 32, 48, 32)
        layout.setSpacing(12)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        if icon:
            icon_label = QLabel(icon)
            icon_label.setStyleSheet("font-size: 48px;")
            icon_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            layout.addWidget(icon_label)

        title_label = QLabel(title)
        title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        title_label.setStyleSheet("font-size: 22px; font-weight: bold;")
        layout.addWidget(title_label)

        for text in paragraphs:
            label = QLabel(text)
            label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            label.setWordWrap(True)
            label.setMaximumWidth(520)
            layout.addWidget(label, alignment=Qt.AlignmentFlag.AlignCenter)

        layout.addStretch()
        back_btn = QPushButton(back_text)
        back_btn.clicked.connect(self.back_clicked.emit)
        layout.addWidget(back_btn, alignment=Qt.AlignmentFlag.AlignCenter)


class InformationWidget(_StaticPage):
    def __init__(self, parent=None):
        super().__init__(
            t("information.title"),
            [t("information.body")],
            t("information.back"),
            parent=parent,
        )


class AboutWidget(_StaticPage):
    def __init__(self, parent=None):
        super().__init__(
            t("about.title"),
            [
                t("about.version", version=APP_VERSION),
                t("about.description"),
                t("about.privacy"),
            ],
            t("about.back"),
            icon="\U0001fa7a",
            parent=parent,
        )
