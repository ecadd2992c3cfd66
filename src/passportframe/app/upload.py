"""Upload validation and decoding."""
from __future__ import annotations

import logging
import mimetypes
import os
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError
from pillow_heif import register_heif_opener

from passportframe.app.errors import InvalidInputFile
from passportframe.core.models import FramingParams

logger = logging.getLogger(__name__)

register_heif_opener()

ALLOWED_MIME_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/heic", "image/heif")
ALLOWED_EXTENSIONS = (".jpg", ".jpeg", ".png", ".heic", ".heif")


def validate_upload(
    filename: str,
    size_bytes: int,
    mime_type: Optional[str] = None,
    params: FramingParams = FramingParams(),
) -> None:
    """
    Raise InvalidInputFile unless the file looks like a supported image within the
    size limit. Either a known MIME type or a known extension is enough.
    """
    if mime_type is None:
        mime_type, _ = mimetypes.guess_type(filename)
    type_ok = (mime_type or "").lower() in ALLOWED_MIME_TYPES
    ext_ok = filename.lower().endswith(ALLOWED_EXTENSIONS)
    if not (type_ok or ext_ok):
        raise InvalidInputFile("Please upload a valid image file (JPG, JPEG, PNG, HEIC, HEIF)")

    if size_bytes > params.max_upload_bytes:
        limit_mb = params.max_upload_bytes // (1024 * 1024)
        raise InvalidInputFile(f"File size must be less than {limit_mb}MB")


def load_image_rgb(path: str, params: FramingParams = FramingParams()) -> Image.Image:
    """Validate, load, apply EXIF orientation and return an RGB PIL Image."""
    try:
        size_bytes = os.path.getsize(path)
    except OSError as e:
        raise InvalidInputFile(f"Could not read file: {e}") from e

    validate_upload(os.path.basename(path), size_bytes, params=params)

    try:
        img = Image.open(path)
        img = ImageOps.exif_transpose(img)
        if img.mode != "RGB":
            img = img.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise InvalidInputFile(f"Could not open image: {e}") from e

    logger.info("Loaded %s (%dx%d)", os.path.basename(path), img.width, img.height)
    return img
