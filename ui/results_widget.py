"""Results screen: image analysis, generated report, export."""

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QPixmap
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)

from core.session import ReportStatus, VisionStatus, WizardState
from core.utils import decode_data_uri, format_confidences
from i18n import t
from ui.components.disclaimer_banner import DisclaimerBanner


class ResultsWidget(QWidget):
    """Shows the report in its pending, failed, or ready state."""

    export_requested = pyqtSignal()
    retry_requested = pyqtSignal()
    new_scan_requested = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._shown_image = None
        self._setup_ui()

    def _setup_ui(self):
        scroll = QScrollArea(self)
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QScrollArea.Shape.NoFrame)

        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(32, 24, 32, 24)
        layout.setSpacing(16)

        title = QLabel(t("results.title"))
        title.setStyleSheet("font-size: 22px; font-weight: bold;")

        # Image + classification summary
        vision_row = QHBoxLayout()
        vision_row.setSpacing(16)
        self._thumbnail = QLabel()
        self._thumbnail.setFixedSize(120, 120)
        self._thumbnail.setAlignment(Qt.AlignmentFlag.AlignCenter)

        vision_col = QVBoxLayout()
        vision_title = QLabel(t("results.vision_title"))
        vision_title.setStyleSheet("font-size: 16px; font-weight: bold;")
        self._vision_label = QLabel()
        self._vision_label.setWordWrap(True)
        vision_col.addWidget(vision_title)
        vision_col.addWidget(self._vision_label)
        vision_col.addStretch()

        vision_row.addWidget(self._thumbnail)
        vision_row.addLayout(vision_col, 1)

        # Report
        verdict_title = QLabel(f"\U0001fa7a  {t('results.verdict_title')}")
        verdict_title.setStyleSheet("font-size: 18px; font-weight: bold; color: #312E81;")

        self._status_label = QLabel()
        self._status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._status_label.setWordWrap(True)

        self._retry_btn = QPushButton(t("results.retry"))
        self._retry_btn.clicked.connect(self.retry_requested.emit)

        self._report_view = QTextBrowser()
        self._report_view.setMinimumHeight(260)

        # Actions
        self._export_btn = QPushButton(f"\U0001f4c4  {t('results.download_pdf')}")
        self._export_btn.setMinimumHeight(40)
        self._export_btn.clicked.connect(self.export_requested.emit)

        new_scan_btn = QPushButton(t("results.new_scan"))
        new_scan_btn.setObjectName("primaryButton")
        new_scan_btn.setMinimumHeight(40)
        new_scan_btn.clicked.connect(self.new_scan_requested.emit)

        layout.addWidget(title)
        layout.addLayout(vision_row)
        layout.addWidget(verdict_title)
        layout.addWidget(self._status_label)
        layout.addWidget(self._retry_btn, alignment=Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._report_view, 1)
        layout.addWidget(DisclaimerBanner())
        layout.addWidget(self._export_btn)
        layout.addWidget(new_scan_btn)

        scroll.setWidget(container)
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.addWidget(scroll)

    def render(self, state: WizardState):
        session = state.session
        self._render_thumbnail(session.image_url)

        vision = state.vision_status
        if vision == VisionStatus.DONE:
            lines = [f"<b>{session.vision_result.label}</b>"] + format_confidences(session.vision_result)
            self._vision_label.setText("<br/>".join(lines))
        elif vision == VisionStatus.RUNNING:
            self._vision_label.setText(t("results.vision_running"))
        else:
            self._vision_label.setText(t("results.vision_unavailable"))

        status = session.report_status
        if status == ReportStatus.READY:
            self._status_label.hide()
            self._retry_btn.hide()
            self._report_view.setMarkdown(session.llm_report)
            self._report_view.show()
        elif status == ReportStatus.ERROR:
            self._status_label.setText(f"{t('results.failed')}\n{session.error}")
            self._status_label.setStyleSheet("color: #B91C1C;")
            self._status_label.show()
            self._retry_btn.setVisible(not state.report_pending)
            self._report_view.hide()
        else:
            self._status_label.setText(f"{t('results.generating')}\n{t('results.generating_hint')}")
            self._status_label.setStyleSheet("color: #4B5563;")
            self._status_label.show()
            self._retry_btn.hide()
            self._report_view.hide()

        self._export_btn.setEnabled(status == ReportStatus.READY)

    def _render_thumbnail(self, image_url):
        if image_url == self._shown_image:
            return
        self._shown_image = image_url
        pixmap = QPixmap()
        if image_url and pixmap.loadFromData(decode_data_uri(image_url)):
            self._thumbnail.setPixmap(pixmap.scaled(
                120, 120,
                Qt.AspectRatioMode.KeepAspectRatio,
                Qt.TransformationMode.SmoothTransformation,
            ))
        else:
            self._thumbnail.clear()
