"""Image payload helpers shared by the inference backends and front ends."""
import base64
import mimetypes
from pathlib import Path


def encode_image(image_bytes: bytes) -> str:
    return base64.standard_b64encode(image_bytes).decode()


def data_url(image_bytes: bytes, mime_type: str) -> str:
    """Inline `data:` URL, used both as request payload and as the preview string."""
    return f"data:{mime_type};base64,{encode_image(image_bytes)}"


def guess_mime_type(path: Path) -> str | None:
    mime, _ = mimetypes.guess_type(path.name)
    match mime:
        case str() as m if m.startswith("image/"):
            return m
        case _:
            return None
