from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Union

from PIL import Image

from passportframe.core.models import FramingParams

logger = logging.getLogger(__name__)

JPEG_SUFFIXES = (".jpg", ".jpeg")


def export_filename(width: int, height: int) -> str:
    return f"passport-photo-{width}x{height}.jpg"


def export_jpeg(
    frame: Image.Image,
    destination: Union[str, Path],
    params: FramingParams = FramingParams(),
) -> Path:
    """
    Save a rendered frame as JPEG.

    `destination` is a .jpg/.jpeg file path or a directory (created if needed,
    conventional file name used). Returns the written path.
    """
    raw = str(destination)
    dest = Path(destination)
    # Trailing separator or no JPEG suffix means a directory, existing or not
    if dest.is_dir() or raw.endswith((os.sep, "/")) or dest.suffix.lower() not in JPEG_SUFFIXES:
        dest.mkdir(parents=True, exist_ok=True)
        dest = dest / export_filename(frame.width, frame.height)
    dest.parent.mkdir(parents=True, exist_ok=True)

    if frame.mode != "RGB":
        frame = frame.convert("RGB")
    frame.save(dest, format="JPEG", quality=params.jpeg_quality, optimize=True)
    logger.info("Exported %s", dest)
    return dest
