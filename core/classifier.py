"""Skin lesion classification through the hosted Gradio Space."""

import logging
import os
import tempfile
from typing import Callable, Optional

from gradio_client import Client, handle_file

from core.config import DEFAULT_CLASSIFIER_SPACE
from core.errors import CollaboratorFailure
from core.utils import ClassificationResult

logger = logging.getLogger(__name__)


def parse_prediction(prediction) -> ClassificationResult:
    """Normalize the Space's Label output into a ClassificationResult.

    The Label component answers with ``{"label", "confidences"}``; some
    client versions wrap single outputs in a list or tuple.
    """
    if isinstance(prediction, (list, tuple)):
        if not prediction:
            raise ValueError("Empty prediction")
        prediction = prediction[0]
    return ClassificationResult.from_dict(prediction)


class LesionClassifier:
    """Sends raw image bytes to the classification Space."""

    API_NAME = "/predict"

    _clients: dict = {}  # Class-level cache, one connection per Space

    def __init__(self, space: str = DEFAULT_CLASSIFIER_SPACE, client_factory: Optional[Callable] = None):
        self._space = space
        self._client_factory = client_factory or Client

    def classify(self, image_bytes: bytes, suffix: str = ".jpg") -> ClassificationResult:
        """Classify one photo.

        Raises:
            CollaboratorFailure: the Space is unreachable, errors out, or
                answers with something that is not a label.
        """
        if not image_bytes:
            raise CollaboratorFailure("No image to classify")

        tmp = tempfile.NamedTemporaryFile(suffix=suffix, delete=False)
        try:
            tmp.write(image_bytes)
            tmp.close()

            logger.info("Sending image to %s", self._space)
            prediction = self._get_client().predict(handle_file(tmp.name), api_name=self.API_NAME)
            result = parse_prediction(prediction)
        except CollaboratorFailure:
            raise
        except Exception as e:
            logger.error("Vision AI failed: %s", e)
            raise CollaboratorFailure(f"AI model connection failed: {e}") from e
        finally:
            if not tmp.closed:
                tmp.close()
            os.unlink(tmp.name)

        logger.info("Vision AI result: %s", result.label)
        return result

    def _get_client(self):
        client = LesionClassifier._clients.get(self._space)
        if client is None:
            logger.info("Connecting to %s", self._space)
            client = self._client_factory(self._space)
            LesionClassifier._clients[self._space] = client
        return client

    @classmethod
    def clear_cache(cls):
        cls._clients.clear()
