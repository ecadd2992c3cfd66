"""
Pointer / touch / wheel gesture interpreter.

The interpreter only sees plain coordinates (viewport pixels). Whatever toolkit
delivers the events converts them first, then calls the matching method here.
Transform changes are delegated to a target exposing:

    has_image: bool
    zoom: float
    pan(dx, dy)
    zoom_about(anchor_x, anchor_y, factor)

FramingSession implements that interface.
"""
from __future__ import annotations

import enum
import logging
import math
from typing import Optional, Protocol, Sequence, Tuple

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


class TransformTarget(Protocol):
    @property
    def has_image(self) -> bool: ...

    @property
    def zoom(self) -> float: ...

    def pan(self, dx: float, dy: float) -> None: ...

    def zoom_about(self, anchor_x: float, anchor_y: float, factor: float) -> None: ...


class GesturePhase(enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    PINCHING = "pinching"


def _distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def _centroid(a: Point, b: Point) -> Point:
    return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)


class GestureInterpreter:
    def __init__(self, target: TransformTarget, wheel_zoom_step: float = 1.1):
        self.target = target
        self.wheel_zoom_step = wheel_zoom_step

        self.phase = GesturePhase.IDLE
        self._last: Optional[Point] = None
        self._pinch_distance = 0.0
        self._pinch_zoom = 1.0

    # ---------- Pointer (mouse / single pointer) ----------

    def pointer_down(self, x: float, y: float) -> None:
        if not self.target.has_image:
            return
        self._start_drag((x, y))

    def pointer_move(self, x: float, y: float) -> None:
        if self.phase is not GesturePhase.DRAGGING or self._last is None:
            return
        # Incremental: delta from the previous move, not from the press
        dx = x - self._last[0]
        dy = y - self._last[1]
        self._last = (x, y)
        self.target.pan(dx, dy)

    def pointer_up(self) -> None:
        self._to_idle()

    # ---------- Touch ----------

    def touch_start(self, points: Sequence[Point]) -> None:
        if not self.target.has_image or not points:
            return
        if len(points) == 1:
            self._start_drag(points[0])
        else:
            self._start_pinch(points[0], points[1])

    def touch_move(self, points: Sequence[Point]) -> None:
        if not self.target.has_image or not points:
            return

        if len(points) >= 2:
            if self.phase is not GesturePhase.PINCHING:
                # Second finger arrived without a touch_start of its own
                self._start_pinch(points[0], points[1])
                return
            self._pinch_move(points[0], points[1])
        elif self.phase is GesturePhase.DRAGGING:
            self.pointer_move(*points[0])

    def touch_end(self, remaining: Sequence[Point] = ()) -> None:
        if len(remaining) == 1 and self.target.has_image:
            self._start_drag(remaining[0])
        elif len(remaining) >= 2 and self.target.has_image:
            self._start_pinch(remaining[0], remaining[1])
        else:
            self._to_idle()

    # ---------- Wheel ----------

    def wheel(self, x: float, y: float, delta_y: float) -> None:
        """One wheel tick at (x, y); negative delta_y zooms in."""
        if not self.target.has_image or delta_y == 0:
            return
        factor = self.wheel_zoom_step if delta_y < 0 else 1.0 / self.wheel_zoom_step
        self.target.zoom_about(x, y, factor)

    # ---------- Internals ----------

    def _start_drag(self, point: Point) -> None:
        self.phase = GesturePhase.DRAGGING
        self._last = (float(point[0]), float(point[1]))
        self._pinch_distance = 0.0

    def _start_pinch(self, a: Point, b: Point) -> None:
        self.phase = GesturePhase.PINCHING
        self._last = None
        self._pinch_distance = _distance(a, b)
        self._pinch_zoom = self.target.zoom
        logger.debug("pinch start: distance=%.1f zoom=%.4f", self._pinch_distance, self._pinch_zoom)

    def _pinch_move(self, a: Point, b: Point) -> None:
        if self._pinch_distance <= 0:
            return
        scale = _distance(a, b) / self._pinch_distance
        # Absolute target from gesture start, applied as a relative factor (no drift)
        new_zoom = self._pinch_zoom * scale
        cx, cy = _centroid(a, b)
        self.target.zoom_about(cx, cy, new_zoom / self.target.zoom)

    def _to_idle(self) -> None:
        self.phase = GesturePhase.IDLE
        self._last = None
        self._pinch_distance = 0.0
