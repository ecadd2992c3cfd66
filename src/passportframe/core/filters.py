"""
Background post-filters applied to a rendered frame.

These are best-effort heuristics for lightening plain, bright backgrounds. They do
not segment the subject and can whiten bright, unsaturated skin or clothing too.
Each filter takes and returns an RGB PIL image so they can be swapped freely.
"""
from __future__ import annotations

import io
import logging
from typing import Callable, Dict

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

BackgroundFilter = Callable[[Image.Image], Image.Image]

BRIGHTNESS_THRESHOLD = 180
SATURATION_THRESHOLD = 50


def threshold_white_background(
    pil_rgb: Image.Image,
    brightness_threshold: int = BRIGHTNESS_THRESHOLD,
    saturation_threshold: int = SATURATION_THRESHOLD,
) -> Image.Image:
    """
    Replace bright, low-saturation pixels with opaque white.

    Per pixel: brightness = (r+g+b)/3, saturation = max(r,g,b) - min(r,g,b).
    A pixel is whitened when brightness > brightness_threshold and
    saturation < saturation_threshold.
    """
    rgb = np.asarray(pil_rgb.convert("RGB")).astype(np.int16)
    brightness = rgb.sum(axis=-1) / 3.0
    saturation = rgb.max(axis=-1) - rgb.min(axis=-1)
    mask = (brightness > brightness_threshold) & (saturation < saturation_threshold)

    out = rgb.astype(np.uint8)
    out[mask] = 255
    return Image.fromarray(out, "RGB")


def rembg_white_background(pil_rgb: Image.Image) -> Image.Image:
    """
    Remove background using rembg and composite onto a white background.
    If rembg isn't installed or fails, returns the frame unchanged.
    """
    try:
        from rembg import remove  # type: ignore
    except ImportError:
        logger.warning("rembg is not installed; background left as is")
        return pil_rgb

    try:
        cut = remove(pil_rgb)
        if isinstance(cut, bytes):
            cut = Image.open(io.BytesIO(cut))
        cut = cut.convert("RGBA")

        white = Image.new("RGBA", cut.size, (255, 255, 255, 255))
        return Image.alpha_composite(white, cut).convert("RGB")
    except Exception:
        logger.exception("rembg background removal failed")
        return pil_rgb


BACKGROUND_FILTERS: Dict[str, BackgroundFilter] = {
    "threshold": threshold_white_background,
    "rembg": rembg_white_background,
}


def get_background_filter(name: str) -> BackgroundFilter:
    try:
        return BACKGROUND_FILTERS[name]
    except KeyError:
        raise KeyError(
            f"Unknown background filter {name!r}; expected one of {sorted(BACKGROUND_FILTERS)}"
        ) from None


def register_background_filter(name: str, fn: BackgroundFilter) -> None:
    BACKGROUND_FILTERS[name] = fn
