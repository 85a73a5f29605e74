"""Capture screen: pick the lesion photo."""

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import QHBoxLayout, QLabel, QMessageBox, QPushButton, QVBoxLayout, QWidget

from core.image_preprocessor import ImagePreprocessor
from core.utils import validate_lesion_image
from i18n import t
from ui.components.image_drop_zone import ImageDropZone


class CaptureWidget(QWidget):
    """Validates the chosen file and hands it on as a data URI."""

    image_captured = pyqtSignal(str)  # data URI
    back_clicked = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(32, 24, 32, 24)
        layout.setSpacing(16)

        header = QHBoxLayout()
        back_btn = QPushButton("✕")
        back_btn.setFixedWidth(40)
        back_btn.setToolTip(t("capture.back"))
        back_btn.clicked.connect(self.back_clicked.emit)
        title = QLabel(t("capture.title"))
        title.setStyleSheet("font-size: 20px; font-weight: bold;")
        header.addWidget(back_btn)
        header.addWidget(title)
        header.addStretch()

        subtitle = QLabel(t("capture.subtitle"))
        subtitle.setWordWrap(True)
        subtitle.setStyleSheet("color: #666;")

        self._drop_zone = ImageDropZone()
        self._drop_zone.file_selected.connect(self._on_file_selected)

        layout.addLayout(header)
        layout.addWidget(subtitle)
        layout.addWidget(self._drop_zone, 1)

    def _on_file_selected(self, path: str):
        validation = validate_lesion_image(path)
        if not validation.valid:
            QMessageBox.warning(self, t("common.error"), validation.error_message)
            return
        try:
            data_uri = ImagePreprocessor.to_data_uri(path)
        except OSError as e:
            QMessageBox.warning(self, t("common.error"), str(e))
            return
        self.image_captured.emit(data_uri)
