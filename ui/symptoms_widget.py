"""Symptom entry screen."""

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QTextCursor
from PyQt6.QtWidgets import (
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from core.session import RED_FLAG_SUGGESTIONS, VisionStatus, WizardState, parse_symptoms
from i18n import t
from ui.components.disclaimer_banner import DisclaimerBanner


class SymptomsWidget(QWidget):
    """Free-text symptoms with suggestion toggles and removable tags.

    The vision status line reflects the background classification; the
    submit button stays enabled while it runs.
    """

    text_changed = pyqtSignal(str)
    suggestion_toggled = pyqtSignal(str)
    tag_removed = pyqtSignal(int)
    submitted = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._suggestion_buttons = {}
        self._setup_ui()

    def _setup_ui(self):
        scroll = QScrollArea(self)
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QScrollArea.Shape.NoFrame)

        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(32, 24, 32, 24)
        layout.setSpacing(14)

        title = QLabel(t("symptoms.title"))
        title.setStyleSheet("font-size: 22px; font-weight: bold;")

        self._vision_status = QLabel()
        self._vision_status.setContentsMargins(10, 8, 10, 8)

        clinical = QLabel(t("symptoms.clinical"))
        clinical.setStyleSheet("font-size: 16px; font-weight: bold;")
        hint = QLabel(t("symptoms.hint"))
        hint.setStyleSheet("color: #666;")

        self._editor = QPlainTextEdit()
        self._editor.setPlaceholderText(t("symptoms.placeholder"))
        self._editor.setFixedHeight(100)
        self._editor.textChanged.connect(
            lambda: self.text_changed.emit(self._editor.toPlainText())
        )

        suggestions_label = QLabel(t("symptoms.suggestions"))
        suggestions_label.setStyleSheet("font-weight: 600;")
        grid = QGridLayout()
        grid.setSpacing(6)
        for i, suggestion in enumerate(RED_FLAG_SUGGESTIONS):
            btn = QPushButton(suggestion)
            btn.setCheckable(True)
            btn.clicked.connect(lambda checked, s=suggestion: self.suggestion_toggled.emit(s))
            grid.addWidget(btn, i // 3, i % 3)
            self._suggestion_buttons[suggestion] = btn

        self._tags_label = QLabel(t("symptoms.entered"))
        self._tags_label.setStyleSheet("font-weight: 600;")
        self._tags_row = QHBoxLayout()
        self._tags_row.setSpacing(6)
        self._tags_row.setAlignment(Qt.AlignmentFlag.AlignLeft)

        self._notice = QLabel()
        self._notice.setStyleSheet("color: #B91C1C; font-weight: 600;")
        self._notice.hide()

        self._submit_btn = QPushButton(f"{t('symptoms.generate_report')}  →")
        self._submit_btn.setObjectName("primaryButton")
        self._submit_btn.setMinimumHeight(44)
        self._submit_btn.clicked.connect(self.submitted.emit)

        layout.addWidget(title)
        layout.addWidget(self._vision_status)
        layout.addWidget(clinical)
        layout.addWidget(hint)
        layout.addWidget(self._editor)
        layout.addWidget(suggestions_label)
        layout.addLayout(grid)
        layout.addWidget(self._tags_label)
        layout.addLayout(self._tags_row)
        layout.addWidget(self._notice)
        layout.addStretch()
        layout.addWidget(DisclaimerBanner())
        layout.addWidget(self._submit_btn)

        scroll.setWidget(container)
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.addWidget(scroll)

    def render(self, state: WizardState):
        if self._editor.toPlainText() != state.symptoms_input:
            self._editor.blockSignals(True)
            self._editor.setPlainText(state.symptoms_input)
            self._editor.moveCursor(QTextCursor.MoveOperation.End)
            self._editor.blockSignals(False)

        vision = state.vision_status
        if vision == VisionStatus.RUNNING:
            self._vision_status.setText(f"⟳  {t('symptoms.vision_running')}")
            self._vision_status.setStyleSheet("background: #EFF6FF; color: #1D4ED8; border-radius: 6px;")
        elif vision == VisionStatus.DONE:
            self._vision_status.setText(f"✓  {t('symptoms.vision_done')}")
            self._vision_status.setStyleSheet("background: #F0FDF4; color: #15803D; border-radius: 6px;")
        else:
            self._vision_status.setText(t("symptoms.vision_unavailable"))
            self._vision_status.setStyleSheet("background: #FFFBEB; color: #92400E; border-radius: 6px;")

        entered = parse_symptoms(state.symptoms_input)
        for suggestion, btn in self._suggestion_buttons.items():
            btn.setChecked(suggestion in entered)

        self._render_tags(state.symptoms_input)

        if state.notice:
            self._notice.setText(state.notice)
            self._notice.show()
        else:
            self._notice.hide()

    def _render_tags(self, text: str):
        while self._tags_row.count():
            item = self._tags_row.takeAt(0)
            if item.widget():
                item.widget().deleteLater()

        # Indexes follow the raw comma split so removal hits the right entry.
        has_tags = False
        for idx, raw in enumerate(text.split(",")):
            symptom = raw.strip()
            if not symptom:
                continue
            tag = QPushButton(f"{symptom}  ×")
            tag.setStyleSheet(
                "background: #CCFBF1; border: 1px solid #0F766E; border-radius: 10px; padding: 2px 10px;"
            )
            tag.clicked.connect(lambda checked, i=idx: self.tag_removed.emit(i))
            self._tags_row.addWidget(tag)
            has_tags = True
        self._tags_label.setVisible(has_tags)
