"""
Cover-draw rendering.

The whole source image is scaled by `zoom` and placed with its top-left corner at
(pan_x, pan_y); the viewport shows whatever overlaps it. Pillow only needs the
visible part, so the draw is done as a resample of `DrawSpec.source_box` straight
into the viewport-sized output. Everything is recomputed from state on each call.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from PIL import Image, ImageEnhance

from passportframe.core.filters import BackgroundFilter, get_background_filter
from passportframe.core.models import CoverMetadata, DrawSpec, RenderSettings, TransformState
from passportframe.core.transform import clamp_transform

BACKGROUND_FILL = (240, 240, 240)  # #f0f0f0


@dataclass(frozen=True)
class RenderedFrame:
    spec: DrawSpec
    image: Image.Image


def compute_draw_spec(state: TransformState, cover: CoverMetadata) -> DrawSpec:
    state = clamp_transform(state, cover)
    zoom = state.zoom
    vw, vh = cover.viewport_width, cover.viewport_height
    iw, ih = cover.image_width, cover.image_height

    left = max(0.0, -state.pan_x / zoom)
    top = max(0.0, -state.pan_y / zoom)
    right = min(float(iw), (vw - state.pan_x) / zoom)
    bottom = min(float(ih), (vh - state.pan_y) / zoom)

    return DrawSpec(
        dest_x=state.pan_x,
        dest_y=state.pan_y,
        dest_width=iw * zoom,
        dest_height=ih * zoom,
        source_box=(left, top, right, bottom),
        output_size=(vw, vh),
    )


def _draw(image: Image.Image, spec: DrawSpec, resample: int) -> Image.Image:
    out = Image.new("RGB", spec.output_size, BACKGROUND_FILL)
    left, top, right, bottom = spec.source_box
    if right <= left or bottom <= top:
        return out

    # Destination of the visible source box; equals the full viewport once clamped
    dx0 = int(round(spec.dest_x + left * spec.dest_width / image.width))
    dy0 = int(round(spec.dest_y + top * spec.dest_height / image.height))
    dx1 = int(round(spec.dest_x + right * spec.dest_width / image.width))
    dy1 = int(round(spec.dest_y + bottom * spec.dest_height / image.height))
    size = (max(1, dx1 - dx0), max(1, dy1 - dy0))

    src = image if image.mode == "RGB" else image.convert("RGB")
    patch = src.resize(size, resample=resample, box=spec.source_box)
    out.paste(patch, (dx0, dy0))
    return out


def render(
    state: TransformState,
    settings: RenderSettings,
    image: Image.Image,
    cover: CoverMetadata,
    resample: int = Image.LANCZOS,
    background_filter: Optional[BackgroundFilter] = None,
) -> RenderedFrame:
    """
    Render the viewport for `state`.

    Brightness is applied as a multiplicative enhancement of the drawn image. If
    settings.background_removal is set, the named post-filter (or
    `background_filter`, when given) runs on the finished frame.
    """
    spec = compute_draw_spec(state, cover)
    frame = _draw(image, spec, resample)

    if settings.brightness != 1.0:
        frame = ImageEnhance.Brightness(frame).enhance(settings.brightness)

    if settings.background_removal:
        post = background_filter or get_background_filter(settings.background_filter)
        frame = post(frame)

    return RenderedFrame(spec=spec, image=frame)
