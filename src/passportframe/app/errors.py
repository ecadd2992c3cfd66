from __future__ import annotations


class PassportFrameError(Exception):
    """Base class for expected, user-facing failures."""


class InvalidInputFile(PassportFrameError):
    """Upload rejected before decoding: wrong type, too large or unreadable."""


class DetectionUnavailable(PassportFrameError):
    """Face detector could not run. Framing falls back to manual."""


class NoFaceFound(PassportFrameError):
    """Detector ran but found no face. Framing falls back to manual."""


class StaleResult(PassportFrameError):
    """A result arrived for an image that has since been replaced."""


class NotFramedError(PassportFrameError):
    """Render/export requested before an image has been framed."""
