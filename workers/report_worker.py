"""Background worker for the report-generation request."""

from PyQt6.QtCore import QThread, pyqtSignal

from core.report_client import ReportClient


class ReportWorker(QThread):
    """Posts the session snapshot to the report endpoint."""

    finished = pyqtSignal(str, int)  # report text, generation
    error = pyqtSignal(str, int)     # error message, generation

    def __init__(self, payload: dict, generation: int, client: ReportClient, parent=None):
        super().__init__(parent)
        self._payload = payload
        self._generation = generation
        self._client = client

    def run(self):
        try:
            text = self._client.request_report(self._payload)
            self.finished.emit(text, self._generation)
        except Exception as e:
            self.error.emit(str(e), self._generation)
