"""
MediaPipe face detector adapter.

Detection runs on a downscaled preview (longest side <= FramingParams.preview_max_side)
and reports the face box in preview pixels together with the preview -> image
scale factor. initial_frame does the conversion.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import cv2
import numpy as np
from PIL import Image

from passportframe.app.errors import DetectionUnavailable, NoFaceFound
from passportframe.app.status import StatusKind
from passportframe.core.models import FaceBox, FramingParams

logger = logging.getLogger(__name__)

# Short-range model first, full-range model as fallback
_MODEL_SELECTIONS = (0, 1)


@dataclass(frozen=True)
class Detection:
    box: FaceBox  # preview pixels
    scale_factor: float  # preview -> original image pixels
    score: float


@dataclass(frozen=True)
class DetectionOutcome:
    kind: StatusKind
    face_box: Optional[FaceBox] = None
    scale_factor: float = 1.0


def _preview_rgb(img: Image.Image, max_side: int) -> Tuple[np.ndarray, float]:
    """Downscale (never upscale) for detection. Returns (RGB array, scale_factor)."""
    arr = np.asarray(img.convert("RGB"))
    h, w = arr.shape[:2]
    scale = min(max_side / w, max_side / h, 1.0)
    if scale >= 1.0:
        return arr, 1.0

    new_w = max(1, int(round(w * scale)))
    new_h = max(1, int(round(h * scale)))
    preview = cv2.resize(arr, (new_w, new_h), interpolation=cv2.INTER_AREA)
    return preview, w / float(new_w)


def _best_face(results, width: int, height: int) -> Optional[Tuple[FaceBox, float]]:
    if not results.detections:
        return None

    best = None
    for det in results.detections:
        rbox = det.location_data.relative_bounding_box
        score = float(det.score[0]) if det.score else 0.0
        box = FaceBox(
            x=max(0.0, rbox.xmin) * width,
            y=max(0.0, rbox.ymin) * height,
            width=max(0.0, rbox.width) * width,
            height=max(0.0, rbox.height) * height,
        )
        if box.width <= 0 or box.height <= 0:
            continue
        if best is None or score > best[1]:
            best = (box, score)
    return best


def detect_face(img: Image.Image, params: FramingParams = FramingParams()) -> Detection:
    """
    Detect the most confident face.

    Raises DetectionUnavailable if MediaPipe can't be loaded and NoFaceFound if no
    model finds a face.
    """
    try:
        import mediapipe as mp
        mp_face = mp.solutions.face_detection
    except (ImportError, AttributeError) as e:
        raise DetectionUnavailable(f"MediaPipe face detection is not available: {e}") from e

    preview, scale_factor = _preview_rgb(img, params.preview_max_side)
    h, w = preview.shape[:2]

    for model_selection in _MODEL_SELECTIONS:
        with mp_face.FaceDetection(
            model_selection=model_selection,
            min_detection_confidence=params.min_detection_confidence,
        ) as detector:
            results = detector.process(preview)

        found = _best_face(results, w, h)
        if found is not None:
            box, score = found
            logger.info("Face found (model %d, score %.2f): %s", model_selection, score, box)
            return Detection(box=box, scale_factor=scale_factor, score=score)

    raise NoFaceFound("No face detected. Try a clearer, front-facing photo with good lighting.")


def detect_for_framing(
    img: Image.Image,
    params: FramingParams = FramingParams(),
    detector: Callable[[Image.Image, FramingParams], Detection] = detect_face,
) -> DetectionOutcome:
    """
    Run `detector` and fold every failure into a manual-framing outcome.
    Never raises for detector problems.
    """
    try:
        det = detector(img, params)
    except NoFaceFound:
        logger.info("No face detected; manual framing")
        return DetectionOutcome(kind=StatusKind.NO_FACE_MANUAL)
    except DetectionUnavailable as e:
        logger.warning("%s", e)
        return DetectionOutcome(kind=StatusKind.DETECTOR_UNAVAILABLE)
    except Exception:
        logger.exception("Face detection failed")
        return DetectionOutcome(kind=StatusKind.DETECTOR_UNAVAILABLE)

    return DetectionOutcome(
        kind=StatusKind.FACE_DETECTED,
        face_box=det.box,
        scale_factor=det.scale_factor,
    )
