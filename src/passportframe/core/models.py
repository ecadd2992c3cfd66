from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class FramingParams:
    """
    Parameters that control framing, interaction and export.

    viewport_width / viewport_height:
        Output frame in pixels. Default 400x514.
    max_zoom:
        Upper zoom bound. The cover minimum still wins for tiny images.
    face_width_ratio:
        Desired detected face width as a fraction of viewport width.
    face_center_y_ratio:
        Where the face center lands vertically, as a fraction of viewport height
        (0.4 leaves headroom above the face).
    wheel_zoom_step:
        Zoom-in factor per wheel tick. Zoom-out uses its reciprocal.
    """
    viewport_width: int = 400
    viewport_height: int = 514
    max_zoom: float = 5.0
    face_width_ratio: float = 0.4
    face_center_y_ratio: float = 0.4
    wheel_zoom_step: float = 1.1
    jpeg_quality: int = 95
    max_upload_bytes: int = 8 * 1024 * 1024
    preview_max_side: int = 400
    min_detection_confidence: float = 0.3
    status_clear_ms: int = 5000

    @property
    def viewport(self) -> "Viewport":
        return Viewport(self.viewport_width, self.viewport_height)


@dataclass(frozen=True)
class ImageSize:
    width: int
    height: int


@dataclass(frozen=True)
class Viewport:
    width: int
    height: int


@dataclass(frozen=True)
class FaceBox:
    """Face bounding box in the pixel space of the image the detector saw."""
    x: float
    y: float
    width: float
    height: float

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2.0

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2.0

    def scaled(self, factor: float) -> "FaceBox":
        return FaceBox(
            x=self.x * factor,
            y=self.y * factor,
            width=self.width * factor,
            height=self.height * factor,
        )


@dataclass(frozen=True)
class TransformState:
    """
    Zoom and top-left offset of the scaled image, in viewport pixels.
    """
    zoom: float
    pan_x: float
    pan_y: float


@dataclass(frozen=True)
class CoverMetadata:
    """
    Per image/viewport constants plus the baseline used by recenter.
    """
    image_width: int
    image_height: int
    viewport_width: int
    viewport_height: int
    min_zoom: float
    max_zoom: float
    initial_zoom: float
    initial_pan_x: float
    initial_pan_y: float

    def baseline(self) -> TransformState:
        return TransformState(self.initial_zoom, self.initial_pan_x, self.initial_pan_y)

    def covers(self, state: TransformState, tol: float = 1e-6) -> bool:
        """True if `state` leaves no viewport pixel uncovered."""
        return (
            state.pan_x <= tol
            and state.pan_y <= tol
            and state.pan_x + self.image_width * state.zoom >= self.viewport_width - tol
            and state.pan_y + self.image_height * state.zoom >= self.viewport_height - tol
        )


@dataclass(frozen=True)
class RenderSettings:
    """
    brightness:
        Multiplicative factor (1.0 = unchanged).
    background_removal:
        If True, run the selected background post-filter on the rendered frame.
    background_filter:
        Name of a filter registered in passportframe.core.filters.
    """
    brightness: float = 1.0
    background_removal: bool = False
    background_filter: str = "threshold"


@dataclass(frozen=True)
class DrawSpec:
    """
    Cover-draw parameters for one frame.

    dest_*: where the whole scaled image lands in viewport space.
    source_box: the visible part of the source image (left, top, right, bottom),
    clipped to the image bounds.
    """
    dest_x: float
    dest_y: float
    dest_width: float
    dest_height: float
    source_box: Tuple[float, float, float, float]
    output_size: Tuple[int, int]
