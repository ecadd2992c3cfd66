from __future__ import annotations

import enum
from dataclasses import dataclass


class StatusKind(enum.Enum):
    FACE_DETECTED = "face-detected"
    NO_FACE_MANUAL = "no-face-manual"
    DETECTOR_UNAVAILABLE = "detector-unavailable"
    INVALID_INPUT = "invalid-input"
    EXPORTED = "exported"
    GUIDES_ENABLED = "guides-enabled"


class StatusLevel(enum.Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class StatusMessage:
    """
    A message for the status line. Success messages are transient and get cleared
    by the UI after FramingParams.status_clear_ms; the rest stay until replaced.
    """
    kind: StatusKind
    text: str
    level: StatusLevel

    @property
    def transient(self) -> bool:
        return self.level is StatusLevel.SUCCESS


_DEFAULTS = {
    StatusKind.FACE_DETECTED: (
        "Face detected! You can drag the photo to adjust position.",
        StatusLevel.SUCCESS,
    ),
    StatusKind.NO_FACE_MANUAL: (
        "No face detected. Please position manually by dragging the photo.",
        StatusLevel.WARNING,
    ),
    StatusKind.DETECTOR_UNAVAILABLE: (
        "Face detection unavailable. Please position manually by dragging the photo.",
        StatusLevel.WARNING,
    ),
    StatusKind.INVALID_INPUT: (
        "Please upload a valid image file (JPG, JPEG, PNG, HEIC, HEIF).",
        StatusLevel.ERROR,
    ),
    StatusKind.EXPORTED: ("Photo saved successfully!", StatusLevel.SUCCESS),
    StatusKind.GUIDES_ENABLED: (
        "Head outline enabled - align your photo to the green guides.",
        StatusLevel.SUCCESS,
    ),
}


def status_for(kind: StatusKind, text: str | None = None) -> StatusMessage:
    default_text, level = _DEFAULTS[kind]
    return StatusMessage(kind=kind, text=text or default_text, level=level)
