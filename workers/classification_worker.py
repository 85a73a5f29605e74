"""Background worker for the image classification request."""

from PyQt6.QtCore import QThread, pyqtSignal

from core.classifier import LesionClassifier
from core.utils import decode_data_uri, parse_data_uri


class ClassificationWorker(QThread):
    """Classifies the captured photo without blocking navigation."""

    finished = pyqtSignal(object, int)  # ClassificationResult, generation
    error = pyqtSignal(str, int)        # error message, generation

    def __init__(self, image: str, generation: int, classifier: LesionClassifier, parent=None):
        super().__init__(parent)
        self._image = image
        self._generation = generation
        self._classifier = classifier

    def run(self):
        try:
            mime_type = parse_data_uri(self._image).mime_type
            suffix = "." + mime_type.split("/")[-1].replace("jpeg", "jpg")
            result = self._classifier.classify(decode_data_uri(self._image), suffix=suffix)
            self.finished.emit(result, self._generation)
        except Exception as e:
            self.error.emit(str(e), self._generation)
