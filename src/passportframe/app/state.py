from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, Union, TYPE_CHECKING

from PIL import Image

from passportframe.app.errors import NotFramedError, StaleResult
from passportframe.app.export import export_jpeg
from passportframe.app.status import StatusKind, StatusMessage, status_for
from passportframe.core import transform as tf
from passportframe.core.framing import initial_frame
from passportframe.core.models import (
    CoverMetadata,
    FaceBox,
    FramingParams,
    ImageSize,
    RenderSettings,
    TransformState,
)
from passportframe.core.render import RenderedFrame, render

if TYPE_CHECKING:  # detection pulls in cv2
    from passportframe.detection.face_detector import DetectionOutcome

logger = logging.getLogger(__name__)

MIN_BRIGHTNESS = 0.0
MAX_BRIGHTNESS = 3.0


@dataclass
class FramingSession:
    """
    Mutable state for a single framing session.

    Owns the uploaded image, its CoverMetadata, the live TransformState and the
    render settings. Transform math lives in passportframe.core; this object only
    keeps the current values and hands them to those pure functions.
    """
    params: FramingParams = field(default_factory=FramingParams)

    # Input
    image: Optional["Image.Image"] = None
    image_id: int = 0

    # Framing
    face_box: Optional[FaceBox] = None
    cover: Optional[CoverMetadata] = None
    transform: Optional[TransformState] = None

    # User settings
    settings: RenderSettings = field(default_factory=RenderSettings)

    # Last status for the status line
    status: Optional[StatusMessage] = None

    # ---------- Lifecycle ----------

    @property
    def has_image(self) -> bool:
        return self.image is not None and self.cover is not None and self.transform is not None

    @property
    def zoom(self) -> float:
        return self.transform.zoom if self.transform is not None else 1.0

    def begin_upload(self, image: "Image.Image") -> int:
        """
        Install a new image and return its token. Framing is cleared until
        apply_detection() runs with that token.
        """
        self.image_id += 1
        self.image = image
        self.face_box = None
        self.cover = None
        self.transform = None
        self.status = None
        logger.info("Upload #%d: %dx%d", self.image_id, image.width, image.height)
        return self.image_id

    def is_current(self, token: int) -> bool:
        return self.image is not None and token == self.image_id

    def _require_current(self, token: int) -> None:
        if not self.is_current(token):
            raise StaleResult(f"Result for upload #{token} superseded by #{self.image_id}")

    def apply_detection(self, token: int, outcome: "DetectionOutcome") -> bool:
        """
        Frame the current image from a detection outcome.

        Returns False (and changes nothing) if the outcome belongs to an image that
        has since been replaced or reset.
        """
        try:
            self._require_current(token)
        except StaleResult as e:
            logger.debug("Discarding detection: %s", e)
            return False

        self.frame(outcome.face_box, outcome.scale_factor)
        self.status = status_for(outcome.kind)
        return True

    def frame(self, face_box: Optional[FaceBox] = None, scale_factor: float = 1.0) -> None:
        """Compute and store the initial transform and recenter baseline."""
        if self.image is None:
            raise NotFramedError("No image loaded.")
        size = ImageSize(self.image.width, self.image.height)
        self.face_box = face_box.scaled(scale_factor) if face_box is not None else None
        self.transform, self.cover = initial_frame(
            size,
            self.params.viewport,
            face_box=face_box,
            scale_factor=scale_factor,
            params=self.params,
        )

    def reset(self) -> None:
        """Clear all session state (used by a Reset button)."""
        # Bump the token so in-flight detections for the old image are dropped
        self.image_id += 1
        self.image = None
        self.face_box = None
        self.cover = None
        self.transform = None
        self.status = None
        self.settings = RenderSettings()

    # ---------- Interaction ----------

    def pan(self, dx: float, dy: float) -> None:
        if not self.has_image:
            return
        self.transform = tf.pan(self.transform, self.cover, dx, dy)

    def zoom_about(self, anchor_x: float, anchor_y: float, factor: float) -> None:
        if not self.has_image:
            return
        self.transform = tf.zoom_about(self.transform, self.cover, anchor_x, anchor_y, factor)

    def recenter(self) -> None:
        """Restore the zoom and pan computed at framing time."""
        if not self.has_image:
            return
        self.transform = self.cover.baseline()

    def set_brightness(self, brightness: float) -> None:
        brightness = max(MIN_BRIGHTNESS, min(MAX_BRIGHTNESS, float(brightness)))
        self.settings = replace(self.settings, brightness=brightness)

    def set_background_removal(self, enabled: bool, filter_name: Optional[str] = None) -> None:
        settings = replace(self.settings, background_removal=bool(enabled))
        if filter_name is not None:
            settings = replace(settings, background_filter=filter_name)
        self.settings = settings

    def set_status(self, kind: StatusKind, text: Optional[str] = None) -> StatusMessage:
        self.status = status_for(kind, text)
        return self.status

    # ---------- Output ----------

    def render(self, preview: bool = False) -> RenderedFrame:
        if not self.has_image:
            raise NotFramedError("Upload and frame a photo first.")
        resample = Image.BILINEAR if preview else Image.LANCZOS
        return render(self.transform, self.settings, self.image, self.cover, resample=resample)

    def export(self, destination: Union[str, Path]) -> Path:
        frame = self.render()
        path = export_jpeg(frame.image, destination, self.params)
        self.set_status(StatusKind.EXPORTED)
        return path
