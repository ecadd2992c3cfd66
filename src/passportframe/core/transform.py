"""
Viewport transform core.

All functions are pure: they take a TransformState plus the CoverMetadata for the
current image/viewport pair and return a new, clamped TransformState. Nothing here
raises on odd input; out-of-range values are projected back into the valid region
so the scaled image always covers the whole viewport.
"""
from __future__ import annotations

import logging
import math

from passportframe.core.models import CoverMetadata, ImageSize, TransformState, Viewport

logger = logging.getLogger(__name__)


def cover_min_zoom(image: ImageSize, viewport: Viewport) -> float:
    """Smallest zoom at which the image fills the viewport (CSS object-fit: cover)."""
    if image.width <= 0 or image.height <= 0:
        raise ValueError(f"Image size must be positive, got {image.width}x{image.height}")
    return max(viewport.width / image.width, viewport.height / image.height)


def _clamp(value: float, lo: float, hi: float) -> float:
    if math.isnan(value):
        value = hi
    return max(lo, min(hi, value))


def clamp_zoom(zoom: float, cover: CoverMetadata) -> float:
    # Cover wins over max_zoom when the image is smaller than the viewport.
    upper = max(cover.max_zoom, cover.min_zoom)
    if math.isnan(zoom):
        return cover.min_zoom
    return _clamp(zoom, cover.min_zoom, upper)


def clamp_transform(state: TransformState, cover: CoverMetadata) -> TransformState:
    """
    Project `state` onto the nearest state satisfying the cover invariant.

    Zoom is clamped first because the pan bounds depend on it.
    """
    zoom = clamp_zoom(state.zoom, cover)

    min_x = min(cover.viewport_width - cover.image_width * zoom, 0.0)
    min_y = min(cover.viewport_height - cover.image_height * zoom, 0.0)

    pan_x = _clamp(state.pan_x, min_x, 0.0)
    pan_y = _clamp(state.pan_y, min_y, 0.0)
    return TransformState(zoom=zoom, pan_x=pan_x, pan_y=pan_y)


def pan(state: TransformState, cover: CoverMetadata, dx: float, dy: float) -> TransformState:
    """Shift the image by (dx, dy) viewport pixels."""
    if not (math.isfinite(dx) and math.isfinite(dy)):
        return clamp_transform(state, cover)
    moved = TransformState(state.zoom, state.pan_x + dx, state.pan_y + dy)
    return clamp_transform(moved, cover)


def zoom_about(
    state: TransformState,
    cover: CoverMetadata,
    anchor_x: float,
    anchor_y: float,
    factor: float,
) -> TransformState:
    """
    Multiply zoom by `factor`, keeping the image point under (anchor_x, anchor_y) fixed.

    Used for wheel zoom (anchor = pointer) and pinch zoom (anchor = touch centroid).
    """
    current = clamp_transform(state, cover)
    if not math.isfinite(factor) or factor <= 0:
        return current

    new_zoom = clamp_zoom(current.zoom * factor, cover)
    if new_zoom == current.zoom:
        return current

    ratio = new_zoom / current.zoom
    pan_x = anchor_x - (anchor_x - current.pan_x) * ratio
    pan_y = anchor_y - (anchor_y - current.pan_y) * ratio
    logger.debug("zoom %.4f -> %.4f about (%.1f, %.1f)", current.zoom, new_zoom, anchor_x, anchor_y)
    return clamp_transform(TransformState(new_zoom, pan_x, pan_y), cover)


def viewport_to_image(state: TransformState, x: float, y: float) -> tuple[float, float]:
    """Map a viewport point to source-image pixel coordinates."""
    return (x - state.pan_x) / state.zoom, (y - state.pan_y) / state.zoom


def image_to_viewport(state: TransformState, x: float, y: float) -> tuple[float, float]:
    """Map a source-image point to viewport coordinates."""
    return state.pan_x + x * state.zoom, state.pan_y + y * state.zoom
