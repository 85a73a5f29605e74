"""Shared dataclasses, data URI helpers, and image validation."""

import base64
import binascii
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional


# --- Type aliases ---

ProgressCallback = Callable[[int, int, str], None]  # (step, total, message)


DISCLAIMER = (
    "Educational purposes only. This is NOT a medical diagnosis. "
    "Always consult a qualified dermatologist."
)

DEFAULT_MIME_TYPE = "image/jpeg"


# --- Dataclasses ---

@dataclass(frozen=True)
class LabelConfidence:
    """One class score from the classification service."""
    label: str
    confidence: float


@dataclass(frozen=True)
class ClassificationResult:
    """Top label plus the ordered score distribution for one image."""
    label: str
    confidences: tuple = ()

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "confidences": [
                {"label": c.label, "confidence": c.confidence} for c in self.confidences
            ],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ClassificationResult":
        """Build from a ``{"label", "confidences": [{"label", "confidence"}]}`` mapping."""
        if not isinstance(data, dict) or not data.get("label"):
            raise ValueError(f"Unexpected classification payload: {data!r}")
        confidences = tuple(
            LabelConfidence(label=str(c["label"]), confidence=float(c["confidence"]))
            for c in data.get("confidences") or []
            if isinstance(c, dict) and "label" in c and "confidence" in c
        )
        return cls(label=str(data["label"]), confidences=confidences)


@dataclass(frozen=True)
class InlineImage:
    """An image payload as sent inline to the text model."""
    mime_type: str
    data: str  # base64, no data URI prefix

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data)


@dataclass
class ValidationResult:
    """Result of image validation."""
    valid: bool
    error_message: str = ""
    image_width: int = 0
    image_height: int = 0
    file_size_bytes: int = 0
    mime_type: str = ""


# --- Data URIs ---

def parse_data_uri(image: str) -> InlineImage:
    """Split ``data:<mime>;base64,<data>`` into MIME type and payload.

    A string without a comma is taken as bare base64 data. The MIME type
    falls back to JPEG when the prefix does not name one.
    """
    if not image:
        return InlineImage(mime_type=DEFAULT_MIME_TYPE, data="")

    if "," not in image:
        return InlineImage(mime_type=DEFAULT_MIME_TYPE, data=image)

    header, data = image.split(",", 1)
    mime_type = ""
    if header.startswith("data:"):
        mime_type = header[len("data:"):].split(";")[0]
    return InlineImage(mime_type=mime_type or DEFAULT_MIME_TYPE, data=data)


def encode_data_uri(payload: bytes, mime_type: str = DEFAULT_MIME_TYPE) -> str:
    """Encode raw bytes as a base64 data URI."""
    encoded = base64.b64encode(payload).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def decode_data_uri(image: str) -> bytes:
    """Return the raw bytes of a data URI (or bare base64 string)."""
    inline = parse_data_uri(image)
    try:
        return inline.to_bytes()
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 image data: {e}") from e


# --- Validation ---

SUPPORTED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".bmp", ".webp"}

MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".bmp": "image/bmp",
    ".webp": "image/webp",
}

# Phone cameras often write multi-picture JPEGs, which Pillow decodes as MPO.
_JPEG_FORMATS = {"JPEG", "MPO"}


def mime_type_for(image_format: Optional[str], ext: str = "") -> str:
    """MIME type for a decoded image, limited to the supported set.

    The JPEG family maps to ``image/jpeg``; any other format Pillow names
    outside :data:`MIME_TYPES` falls back to the file extension.
    """
    if image_format in _JPEG_FORMATS:
        return "image/jpeg"
    from PIL import Image
    Image.init()
    mime_type = Image.MIME.get(image_format or "")
    if mime_type in MIME_TYPES.values():
        return mime_type
    return MIME_TYPES.get(ext.lower(), DEFAULT_MIME_TYPE)


def validate_lesion_image(file_path: str) -> ValidationResult:
    """Check that a file is a readable photo in a supported format."""
    from i18n import t

    if not file_path:
        return ValidationResult(valid=False, error_message=t("validation.no_file"))

    path = Path(file_path)

    if not path.exists():
        return ValidationResult(valid=False, error_message=t("validation.file_not_found"))

    if not path.is_file():
        return ValidationResult(valid=False, error_message=t("validation.not_a_file"))

    file_size = path.stat().st_size
    if file_size == 0:
        return ValidationResult(valid=False, error_message=t("validation.empty_file"))

    ext = path.suffix.lower()
    if ext not in SUPPORTED_IMAGE_EXTENSIONS:
        return ValidationResult(
            valid=False,
            error_message=t("validation.unsupported_format", ext=ext),
        )

    try:
        from PIL import Image
        with Image.open(str(path)) as img:
            width, height = img.size
            mime_type = mime_type_for(img.format, ext)
    except Exception:
        return ValidationResult(
            valid=False,
            error_message=t("validation.cannot_read_image"),
        )

    return ValidationResult(
        valid=True,
        image_width=width,
        image_height=height,
        file_size_bytes=file_size,
        mime_type=mime_type,
    )


# --- Formatting ---

def format_confidences(result: Optional[ClassificationResult], limit: int = 3) -> List[str]:
    """Render the top scores as ``"label: 87.0%"`` lines."""
    if result is None:
        return []
    return [f"{c.label}: {c.confidence * 100:.1f}%" for c in result.confidences[:limit]]
