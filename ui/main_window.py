"""Main window: stacked wizard screens driven by the session reducer."""

import logging
from pathlib import Path

from PyQt6.QtCore import QTimer
from PyQt6.QtGui import QAction
from PyQt6.QtWidgets import (
    QApplication,
    QFileDialog,
    QMainWindow,
    QMessageBox,
    QStackedWidget,
)

from core.classifier import LesionClassifier
from core.config import Settings
from core.report_client import ReportClient
from core.session import (
    BackToLanding,
    ClassificationFailed,
    ClassificationSucceeded,
    ImageCaptured,
    Notify,
    ReportDue,
    ReportFailed,
    ReportStatus,
    ReportSucceeded,
    RequestReport,
    Reset,
    RetryReport,
    RunClassification,
    ScheduleReport,
    Screen,
    ShowAbout,
    ShowInformation,
    StartScan,
    SubmitSymptoms,
    SymptomsEdited,
    SymptomTagRemoved,
    SymptomToggled,
    WizardState,
    transition,
)
from i18n import t
from ui.capture_widget import CaptureWidget
from ui.info_widgets import AboutWidget, InformationWidget
from ui.landing_widget import LandingWidget
from ui.results_widget import ResultsWidget
from ui.symptoms_widget import SymptomsWidget
from workers.classification_worker import ClassificationWorker
from workers.export_worker import ExportWorker
from workers.report_worker import ReportWorker

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Owns the wizard state; every user action and worker result goes through dispatch()."""

    def __init__(self, settings: Settings):
        super().__init__()
        self._settings = settings
        self._state = WizardState()
        self._classifier = LesionClassifier(space=settings.classifier_space)
        self._report_client = ReportClient(settings.api_url, timeout_s=settings.client_timeout_s)
        self._workers = []
        self._export_worker: ExportWorker = None

        self.setWindowTitle(t("app.title"))
        self.setMinimumSize(720, 640)
        self.resize(860, 760)
        self._setup_ui()
        self._connect_signals()
        self._setup_menu_bar()
        self._render()

    def _setup_ui(self):
        self._stack = QStackedWidget()
        self.setCentralWidget(self._stack)

        self._landing = LandingWidget()
        self._capture = CaptureWidget()
        self._symptoms = SymptomsWidget()
        self._results = ResultsWidget()
        self._information = InformationWidget()
        self._about = AboutWidget()

        self._pages = {
            Screen.LANDING: self._landing,
            Screen.CAPTURE: self._capture,
            Screen.SYMPTOMS: self._symptoms,
            Screen.RESULTS: self._results,
            Screen.INFORMATION: self._information,
            Screen.ABOUT: self._about,
        }
        for page in self._pages.values():
            self._stack.addWidget(page)

    def _connect_signals(self):
        self._landing.start_clicked.connect(lambda: self.dispatch(StartScan()))
        self._landing.information_clicked.connect(lambda: self.dispatch(ShowInformation()))
        self._landing.about_clicked.connect(lambda: self.dispatch(ShowAbout()))

        self._capture.back_clicked.connect(lambda: self.dispatch(BackToLanding()))
        self._capture.image_captured.connect(lambda image: self.dispatch(ImageCaptured(image)))

        self._symptoms.text_changed.connect(lambda text: self.dispatch(SymptomsEdited(text)))
        self._symptoms.suggestion_toggled.connect(lambda s: self.dispatch(SymptomToggled(s)))
        self._symptoms.tag_removed.connect(lambda idx: self.dispatch(SymptomTagRemoved(idx)))
        self._symptoms.submitted.connect(lambda: self.dispatch(SubmitSymptoms()))

        self._results.retry_requested.connect(lambda: self.dispatch(RetryReport()))
        self._results.new_scan_requested.connect(lambda: self.dispatch(Reset()))
        self._results.export_requested.connect(self._export_pdf)

        self._information.back_clicked.connect(lambda: self.dispatch(BackToLanding()))
        self._about.back_clicked.connect(lambda: self.dispatch(BackToLanding()))

    def _setup_menu_bar(self):
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu(t("menu.file"))
        quit_action = QAction(t("menu.quit"), self)
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    # --- State machine plumbing ---

    def dispatch(self, event):
        """Apply an event, run the effects it produced, and redraw."""
        self._state, effects = transition(self._state, event)
        for effect in effects:
            self._run_effect(effect)
        self._render()

    def _run_effect(self, effect):
        if isinstance(effect, RunClassification):
            worker = ClassificationWorker(effect.image, effect.generation, self._classifier, parent=self)
            worker.finished.connect(lambda result, gen: self.dispatch(ClassificationSucceeded(result, gen)))
            worker.error.connect(lambda message, gen: self.dispatch(ClassificationFailed(message, gen)))
            self._start_worker(worker)
        elif isinstance(effect, ScheduleReport):
            QTimer.singleShot(effect.delay_ms, lambda gen=effect.generation: self.dispatch(ReportDue(gen)))
        elif isinstance(effect, RequestReport):
            worker = ReportWorker(effect.payload, effect.generation, self._report_client, parent=self)
            worker.finished.connect(lambda text, gen: self.dispatch(ReportSucceeded(text, gen)))
            worker.error.connect(lambda message, gen: self.dispatch(ReportFailed(message, gen)))
            self._start_worker(worker)
        elif isinstance(effect, Notify):
            logger.warning(effect.message)
            self.statusBar().showMessage(effect.message, 8000)
        else:
            raise ValueError(f"Unknown effect: {effect!r}")

    def _start_worker(self, worker):
        self._workers.append(worker)
        worker.finished.connect(lambda *args, w=worker: self._forget_worker(w))
        worker.error.connect(lambda *args, w=worker: self._forget_worker(w))
        worker.start()

    def _forget_worker(self, worker):
        if worker in self._workers:
            self._workers.remove(worker)

    def _render(self):
        page = self._pages[self._state.screen]
        self._stack.setCurrentWidget(page)
        if self._state.screen == Screen.SYMPTOMS:
            self._symptoms.render(self._state)
        elif self._state.screen == Screen.RESULTS:
            self._results.render(self._state)

    # --- Export ---

    def _export_pdf(self):
        session = self._state.session
        if session.report_status != ReportStatus.READY:
            QMessageBox.information(self, t("common.error"), t("export.no_report"))
            return
        default_path = str(Path.home() / "dermavision_report.pdf")
        path, _ = QFileDialog.getSaveFileName(self, t("export.save_pdf_title"), default_path, "*.pdf")
        if not path:
            return
        self._export_worker = ExportWorker(session, path, parent=self)
        self._export_worker.progress.connect(
            lambda step, total, message: self.statusBar().showMessage(f"{message} ({step}/{total})")
        )
        self._export_worker.finished.connect(
            lambda p: QMessageBox.information(self, t("common.success"), t("export.success"))
        )
        self._export_worker.error.connect(
            lambda e: QMessageBox.warning(self, t("common.error"), e)
        )
        self._export_worker.start()

    def closeEvent(self, event):
        """Wait for background requests before closing."""
        workers = list(self._workers)
        if self._export_worker:
            workers.append(self._export_worker)
        still_running = wait_for_workers(workers)
        if still_running:
            logger.warning("%d background request(s) still running at exit", len(still_running))
        QApplication.processEvents()
        event.accept()


def wait_for_workers(workers, timeout_ms: int = 3000):
    """Give each running worker a bounded wait. Returns the ones still running."""
    still_running = []
    for worker in workers:
        if worker.isRunning() and not worker.wait(timeout_ms):
            still_running.append(worker)
    return still_running
