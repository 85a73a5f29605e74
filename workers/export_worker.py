"""Background worker for PDF export."""

from PyQt6.QtCore import QThread, pyqtSignal

from core.report_generator import ReportGenerator
from core.session import Session


class ExportWorker(QThread):
    """Writes the PDF report in a background thread."""

    progress = pyqtSignal(int, int, str)
    finished = pyqtSignal(str)            # output_path
    error = pyqtSignal(str)

    def __init__(self, session: Session, output_path: str, parent=None):
        super().__init__(parent)
        self._session = session
        self._output_path = output_path

    def run(self):
        from i18n import t

        try:
            generator = ReportGenerator()
            success = generator.generate_pdf(
                self._session, self._output_path,
                on_progress=lambda s, total, m: self.progress.emit(s, total, m),
            )
            if success:
                self.finished.emit(self._output_path)
            else:
                self.error.emit(t("export.failed"))
        except Exception as e:
            self.error.emit(str(e))
