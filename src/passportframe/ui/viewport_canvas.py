from __future__ import annotations

import sys
import tkinter as tk
from tkinter import ttk
from typing import Callable, Optional

from PIL import Image, ImageTk

from passportframe.core.gestures import GestureInterpreter


class ViewportCanvas(ttk.Frame):
    """
    Fixed-size output frame. Mouse drag pans, the wheel zooms about the pointer.

    Events are translated to plain canvas coordinates and fed to a
    GestureInterpreter; `on_change` is called after each interaction so the owner
    can re-render.
    """

    def __init__(
        self,
        master,
        gestures: GestureInterpreter,
        width: int,
        height: int,
        *,
        on_change: Optional[Callable[[], None]] = None,
        bg: str = "#f0f0f0",
        guide_color: str = "#00c853",
    ):
        super().__init__(master)
        self.gestures = gestures
        self.on_change = on_change
        self._width = width
        self._height = height
        self._guide_color = guide_color

        self._canvas = tk.Canvas(
            self, width=width, height=height, highlightthickness=1,
            highlightbackground="#bbb", bg=bg, cursor="fleur",
        )
        self._canvas.pack()

        self._photo: Optional[ImageTk.PhotoImage] = None
        self._image_id = self._canvas.create_image(0, 0, anchor="nw")
        self._guides_visible = False

        self._canvas.bind("<ButtonPress-1>", self._on_press)
        self._canvas.bind("<B1-Motion>", self._on_drag)
        self._canvas.bind("<ButtonRelease-1>", self._on_release)

        self._canvas.bind("<MouseWheel>", self._on_wheel)      # Windows/macOS
        self._canvas.bind("<Button-4>", self._on_wheel_linux)  # Linux scroll up
        self._canvas.bind("<Button-5>", self._on_wheel_linux)  # Linux scroll down

    # ---- Public API ----

    def show(self, frame: Optional[Image.Image]) -> None:
        if frame is None:
            self._photo = None
            self._canvas.itemconfigure(self._image_id, image="")
            return
        self._photo = ImageTk.PhotoImage(frame)
        self._canvas.itemconfigure(self._image_id, image=self._photo)
        self._canvas.tag_raise("guide")

    def set_guides_visible(self, visible: bool) -> None:
        self._guides_visible = visible
        self._canvas.delete("guide")
        if visible:
            self._draw_guides()

    # ---- Internals ----

    def _draw_guides(self) -> None:
        w, h = self._width, self._height
        # Head oval sized for the default face framing (face center at 40% height)
        cx, cy = w / 2.0, h * 0.4
        rx, ry = w * 0.25, h * 0.27
        self._canvas.create_oval(
            cx - rx, cy - ry, cx + rx, cy + ry,
            outline=self._guide_color, width=2, dash=(6, 4), tags=("guide",),
        )
        for frac in (0.1, 0.7):
            self._canvas.create_line(
                0, h * frac, w, h * frac,
                fill=self._guide_color, dash=(2, 4), tags=("guide",),
            )

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def _on_press(self, evt) -> None:
        self._canvas.configure(cursor="hand2")
        self.gestures.pointer_down(evt.x, evt.y)

    def _on_drag(self, evt) -> None:
        self.gestures.pointer_move(evt.x, evt.y)
        self._changed()

    def _on_release(self, _evt) -> None:
        self._canvas.configure(cursor="fleur")
        self.gestures.pointer_up()

    def _on_wheel(self, evt) -> None:
        # Tk reports wheel-up as positive delta; the interpreter expects DOM-style sign
        delta = -evt.delta
        if sys.platform != "darwin":
            delta = delta / 120.0
        self.gestures.wheel(evt.x, evt.y, delta)
        self._changed()

    def _on_wheel_linux(self, evt) -> None:
        self.gestures.wheel(evt.x, evt.y, -1.0 if evt.num == 4 else 1.0)
        self._changed()
