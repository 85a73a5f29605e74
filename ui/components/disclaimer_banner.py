"""Medical disclaimer shown on the symptom and results screens."""

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QHBoxLayout, QLabel, QWidget

from i18n import t


class DisclaimerBanner(QWidget):
    """Amber notice that the report is not a diagnosis. Cannot be dismissed."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("disclaimerBanner")
        self.setStyleSheet(
            "#disclaimerBanner { background: #FEF3C7; border: 1px solid #F59E0B; border-radius: 8px; }"
        )
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(16, 12, 16, 12)
        layout.setSpacing(10)

        icon_label = QLabel("⚠")
        icon_label.setFixedWidth(24)
        icon_label.setAlignment(Qt.AlignmentFlag.AlignTop)

        text_label = QLabel(f"<b>Disclaimer:</b> {t('disclaimer.banner')}")
        text_label.setStyleSheet("color: #92400E; font-size: 12px;")
        text_label.setWordWrap(True)

        layout.addWidget(icon_label)
        layout.addWidget(text_label, 1)
