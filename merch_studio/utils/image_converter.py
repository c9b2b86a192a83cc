from __future__ import annotations
from typing import Optional, Tuple
import base64
import binascii
import io
from PIL import Image, UnidentifiedImageError

#formats every provider accepts as-is; anything else is re-encoded to PNG
PASSTHROUGH_MIME_TYPES = {"image/png", "image/jpeg", "image/webp"}

_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/svg+xml": "svg",
}


def to_base64(image_data: bytes) -> str:
    return base64.b64encode(image_data).decode('utf-8')


def to_data_uri(image_data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{to_base64(image_data)}"


def from_data_uri(data_uri: str) -> Tuple[bytes, str]:
    """Split a base64 data URI back into (bytes, mime type)."""
    header, sep, payload = data_uri.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Not a base64 data URI")
    mime_type = header[len("data:"):-len(";base64")] or "application/octet-stream"
    try:
        return base64.b64decode(payload, validate=True), mime_type
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


def extension_for(mime_type: str) -> str:
    return _EXTENSIONS.get(mime_type, mime_type.split("/")[-1] or "png")


def sniff_mime_type(image_data: bytes) -> Optional[str]:
    """Return the mime type Pillow detects for the bytes, or None if it can't tell."""
    if b"<svg" in image_data[:1024]:
        return "image/svg+xml"
    try:
        with Image.open(io.BytesIO(image_data)) as img:
            return Image.MIME.get(img.format)
    except (UnidentifiedImageError, OSError):
        return None


def normalize_image(image_data: bytes, declared_mime: Optional[str] = None) -> Tuple[bytes, str]:
    mime_type = sniff_mime_type(image_data) or declared_mime or "application/octet-stream"

    if mime_type in PASSTHROUGH_MIME_TYPES or mime_type == "image/svg+xml":
        return image_data, mime_type

    try:
        with Image.open(io.BytesIO(image_data)) as img:
            if img.mode not in ('RGB', 'RGBA'):
                img = img.convert('RGBA')

            buffer = io.BytesIO()
            img.save(buffer, format='PNG')
            return buffer.getvalue(), "image/png"
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Unsupported image data ({mime_type}): {e}") from e
