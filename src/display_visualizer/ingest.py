from __future__ import annotations

import hashlib
import io
import os
import uuid

from PIL import Image, UnidentifiedImageError

from display_visualizer.creative import ImageVariant


class ImageDecodeError(ValueError):
    pass


def _safe_filename(name: str) -> str:
    return os.path.basename(name or "").replace("..", "_") or "upload.bin"


def decode_upload(filename: str, content: bytes, content_type: str | None = None) -> ImageVariant:
    """
    Check that an uploaded file is an image Pillow can read and wrap it as a
    creative variant. The original bytes are kept as-is.
    """
    if not content:
        raise ImageDecodeError("empty upload")
    try:
        with Image.open(io.BytesIO(content)) as img:
            img.verify()
        # verify() leaves the image unusable; reopen for the real size.
        with Image.open(io.BytesIO(content)) as img:
            width, height = img.size
            fmt = (img.format or "").lower()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise ImageDecodeError(f"could not decode image {filename!r}: {exc}") from exc

    if not content_type or not content_type.startswith("image/"):
        content_type = f"image/{fmt or 'png'}"

    return ImageVariant(
        variant_id=uuid.uuid4().hex[:12],
        filename=_safe_filename(filename),
        content_type=content_type,
        content=content,
        width=width,
        height=height,
        sha256=hashlib.sha256(content).hexdigest(),
    )
