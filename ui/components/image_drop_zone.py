"""Drag-and-drop zone for picking the lesion photo."""

from pathlib import Path
from typing import List, Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QColor, QDragEnterEvent, QDropEvent, QPainter, QPen
from PyQt6.QtWidgets import QFileDialog, QLabel, QVBoxLayout, QWidget

from core.utils import SUPPORTED_IMAGE_EXTENSIONS
from i18n import t


class ImageDropZone(QWidget):
    """Accepts one image by drop or file dialog and reports its path."""

    file_selected = pyqtSignal(str)

    def __init__(
        self,
        accepted_extensions: Optional[List[str]] = None,
        placeholder_text: str = "",
        parent=None,
    ):
        super().__init__(parent)
        self._accepted_extensions = accepted_extensions or sorted(SUPPORTED_IMAGE_EXTENSIONS)
        self._placeholder_text = placeholder_text or t("capture.drop_text")
        self._drag_over = False
        self.setAcceptDrops(True)
        self.setObjectName("imageDropZone")
        self.setMinimumHeight(220)
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        icon_label = QLabel("\U0001f4f7")
        icon_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        icon_label.setStyleSheet("font-size: 40px;")

        text_label = QLabel(self._placeholder_text)
        text_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        text_label.setWordWrap(True)

        layout.addWidget(icon_label)
        layout.addWidget(text_label)

    def _validate_extension(self, file_path: str) -> bool:
        return Path(file_path).suffix.lower() in self._accepted_extensions

    def _browse_file(self):
        ext_filter = " ".join(f"*{e}" for e in self._accepted_extensions)
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            t("capture.title"),
            "",
            f"{t('capture.file_filter')} ({ext_filter})",
        )
        if file_path and self._validate_extension(file_path):
            self.file_selected.emit(file_path)

    # --- Drag and drop ---

    def dragEnterEvent(self, event: QDragEnterEvent):
        if event.mimeData().hasUrls():
            urls = event.mimeData().urls()
            if urls and self._validate_extension(urls[0].toLocalFile()):
                event.acceptProposedAction()
                self._drag_over = True
                self.update()

    def dragLeaveEvent(self, event):
        self._drag_over = False
        self.update()

    def dropEvent(self, event: QDropEvent):
        self._drag_over = False
        urls = event.mimeData().urls()
        if urls:
            file_path = urls[0].toLocalFile()
            if self._validate_extension(file_path):
                self.file_selected.emit(file_path)
        self.update()

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self._browse_file()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        color = "#0F766E" if self._drag_over else "#888888"
        pen = QPen(QColor(color), 2, Qt.PenStyle.DashLine)
        pen.setDashPattern([8, 4])
        painter.setPen(pen)
        painter.drawRoundedRect(self.rect().adjusted(1, 1, -1, -1), 12, 12)
        painter.end()
