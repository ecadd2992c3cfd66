from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Optional, Tuple

from PIL import Image, ImageTk

from passportframe.core.models import FaceBox


class ImageCanvas(ttk.Frame):
    """A resizable canvas showing the uploaded photo scaled to fit, with the detected face box."""

    def __init__(self, master, *, bg: str = "#f3f3f3", box_color: str = "#2e7d32"):
        super().__init__(master)
        self._canvas = tk.Canvas(self, highlightthickness=0, bg=bg)
        self._canvas.pack(fill="both", expand=True)

        self._photo: Optional[ImageTk.PhotoImage] = None
        self._pil: Optional[Image.Image] = None
        self._face: Optional[FaceBox] = None
        self._box_color = box_color

        self._canvas.bind("<Configure>", lambda _evt: self._redraw())

        self._placeholder_id = self._canvas.create_text(
            10, 10, anchor="nw",
            text="No image loaded",
            fill="#555",
            font=("TkDefaultFont", 11),
        )

    def set_image(self, pil: Optional[Image.Image], face_box: Optional[FaceBox] = None) -> None:
        """`face_box` is in the image's own pixel coordinates."""
        self._pil = pil
        self._face = face_box
        self._redraw()

    def set_face_box(self, face_box: Optional[FaceBox]) -> None:
        self._face = face_box
        self._redraw()

    def clear(self) -> None:
        self.set_image(None)

    def _fit(self, img_w: int, img_h: int, box_w: int, box_h: int) -> Tuple[float, int, int]:
        if img_w <= 0 or img_h <= 0 or box_w <= 2 or box_h <= 2:
            return 0.0, 1, 1
        scale = min(box_w / img_w, box_h / img_h)
        return scale, max(1, int(img_w * scale)), max(1, int(img_h * scale))

    def _redraw(self) -> None:
        self._canvas.delete("img")
        if self._pil is None:
            self._canvas.itemconfigure(self._placeholder_id, state="normal")
            return

        self._canvas.itemconfigure(self._placeholder_id, state="hidden")

        w = max(1, self._canvas.winfo_width())
        h = max(1, self._canvas.winfo_height())

        pil = self._pil
        scale, new_w, new_h = self._fit(pil.width, pil.height, w, h)
        if scale <= 0:
            return
        resized = pil.resize((new_w, new_h), Image.LANCZOS)

        self._photo = ImageTk.PhotoImage(resized)
        x = (w - new_w) // 2
        y = (h - new_h) // 2
        self._canvas.create_image(x, y, anchor="nw", image=self._photo, tags=("img",))

        if self._face is not None:
            f = self._face
            self._canvas.create_rectangle(
                x + f.x * scale, y + f.y * scale,
                x + (f.x + f.width) * scale, y + (f.y + f.height) * scale,
                outline=self._box_color, width=2, tags=("img",),
            )
