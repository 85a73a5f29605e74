"""Loading captured lesion photos and producing thumbnails."""

import io
from pathlib import Path
from typing import Tuple, Union

from PIL import Image

from core.utils import decode_data_uri, encode_data_uri, mime_type_for

ImageSource = Union[str, bytes]


class ImagePreprocessor:
    """Converts capture files into the payloads sent to the AI services."""

    @staticmethod
    def to_data_uri(image_path: str) -> str:
        """Read an image file and return it as a base64 data URI.

        The MIME type comes from the decoded image format, falling back to
        the file extension.
        """
        path = Path(image_path)
        payload = path.read_bytes()
        with Image.open(io.BytesIO(payload)) as img:
            mime_type = mime_type_for(img.format, path.suffix)
        return encode_data_uri(payload, mime_type)

    @staticmethod
    def open_image(source: ImageSource) -> Image.Image:
        """Open a file path, data URI, or raw bytes as a PIL image."""
        if isinstance(source, bytes):
            return Image.open(io.BytesIO(source))
        if source.startswith("data:"):
            return Image.open(io.BytesIO(decode_data_uri(source)))
        return Image.open(source)

    @staticmethod
    def create_thumbnail(source: ImageSource, size: Tuple[int, int] = (128, 128)) -> bytes:
        """Create a JPEG thumbnail and return as bytes."""
        img = ImagePreprocessor.open_image(source)
        img.thumbnail(size, Image.Resampling.LANCZOS)
        if img.mode != "RGB":
            img = img.convert("RGB")

        buffer = io.BytesIO()
        img.save(buffer, format="JPEG", quality=80)
        return buffer.getvalue()
