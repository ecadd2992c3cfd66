from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Tuple

from passportframe.core.models import (
    CoverMetadata,
    FaceBox,
    FramingParams,
    ImageSize,
    TransformState,
    Viewport,
)
from passportframe.core.transform import clamp_transform, cover_min_zoom

logger = logging.getLogger(__name__)


def initial_frame(
    image: ImageSize,
    viewport: Viewport,
    face_box: Optional[FaceBox] = None,
    scale_factor: float = 1.0,
    params: FramingParams = FramingParams(),
) -> Tuple[TransformState, CoverMetadata]:
    """
    Compute the starting transform for a freshly loaded image.

    Args:
      image: natural size of the source image
      viewport: output frame size
      face_box: optional face box in detector space
      scale_factor: multiplier from detector space to image pixels
        (e.g. image.width / preview.width when detection ran on a preview)
      params: framing ratios and zoom bounds

    Returns (state, cover). The state is already clamped and is also stored in
    `cover` as the recenter baseline.
    """
    min_zoom = cover_min_zoom(image, viewport)

    face = face_box.scaled(scale_factor) if face_box is not None else None
    if face is not None and face.width <= 0:
        logger.warning("Ignoring degenerate face box %s", face_box)
        face = None

    if face is not None:
        # Face takes a fixed share of the viewport width, never below cover fit
        desired_face_width = viewport.width * params.face_width_ratio
        face_zoom = desired_face_width / face.width
        zoom = max(min_zoom, face_zoom)

        # Horizontally centered, vertically above center to leave headroom
        pan_x = viewport.width / 2.0 - face.center_x * zoom
        pan_y = viewport.height * params.face_center_y_ratio - face.center_y * zoom
    else:
        zoom = min_zoom
        pan_x = (viewport.width - image.width * zoom) / 2.0
        pan_y = (viewport.height - image.height * zoom) / 2.0

    cover = CoverMetadata(
        image_width=image.width,
        image_height=image.height,
        viewport_width=viewport.width,
        viewport_height=viewport.height,
        min_zoom=min_zoom,
        max_zoom=params.max_zoom,
        initial_zoom=zoom,
        initial_pan_x=pan_x,
        initial_pan_y=pan_y,
    )
    state = clamp_transform(TransformState(zoom, pan_x, pan_y), cover)
    cover = replace(
        cover,
        initial_zoom=state.zoom,
        initial_pan_x=state.pan_x,
        initial_pan_y=state.pan_y,
    )
    logger.info(
        "Initial frame %s: zoom=%.4f pan=(%.1f, %.1f) min_zoom=%.4f",
        "on face" if face is not None else "centered",
        state.zoom, state.pan_x, state.pan_y, min_zoom,
    )
    return state, cover
