from __future__ import annotations

import logging
import os
import threading
import tkinter as tk
from tkinter import filedialog, messagebox, ttk
from typing import Optional

from passportframe.app.errors import InvalidInputFile, NotFramedError
from passportframe.app.export import export_filename
from passportframe.app.state import FramingSession
from passportframe.app.status import StatusKind, StatusLevel, StatusMessage
from passportframe.app.upload import load_image_rgb
from passportframe.core.gestures import GestureInterpreter
from passportframe.detection.face_detector import detect_for_framing
from passportframe.ui.image_canvas import ImageCanvas
from passportframe.ui.viewport_canvas import ViewportCanvas

logger = logging.getLogger(__name__)

_STATUS_COLORS = {
    StatusLevel.SUCCESS: "#2e7d32",
    StatusLevel.WARNING: "#b26a00",
    StatusLevel.ERROR: "#c62828",
}


class PassportFrameApp(ttk.Frame):
    """Upload, frame, adjust and export a passport photo."""

    def __init__(self, master: tk.Tk, session: FramingSession):
        super().__init__(master)
        self.master = master
        self.session = session
        self.gestures = GestureInterpreter(session, wheel_zoom_step=session.params.wheel_zoom_step)

        self._status_clear_job: Optional[str] = None

        self._build_style()
        self._build_layout()
        self._bind_shortcuts()

        self.set_status("Ready. Upload a photo to begin.")
        self._set_buttons_state()

    # ---------- UI construction ----------

    def _build_style(self) -> None:
        style = ttk.Style(self.master)
        if "clam" in style.theme_names():
            style.theme_use("clam")

    def _build_layout(self) -> None:
        self.pack(fill="both", expand=True)

        # Top toolbar
        toolbar = ttk.Frame(self, padding=(10, 8))
        toolbar.pack(side="top", fill="x")

        self.btn_upload = ttk.Button(toolbar, text="Upload", command=self.on_upload)
        self.btn_recenter = ttk.Button(toolbar, text="Re-center", command=self.on_recenter)
        self.btn_save = ttk.Button(toolbar, text="Save/Export", command=self.on_save)
        self.btn_reset = ttk.Button(toolbar, text="Reset", command=self.on_reset)

        self.btn_upload.pack(side="left")
        ttk.Separator(toolbar, orient="vertical").pack(side="left", fill="y", padx=8)
        self.btn_recenter.pack(side="left")
        self.btn_save.pack(side="left", padx=(6, 0))
        self.btn_reset.pack(side="left", padx=(12, 0))

        self.progress = ttk.Progressbar(toolbar, mode="indeterminate", length=120)
        self.progress.pack(side="right")

        # Main split area
        main = ttk.PanedWindow(self, orient="horizontal")
        main.pack(side="top", fill="both", expand=True, padx=10, pady=(0, 10))

        # Left pane: Original
        left = ttk.Frame(main)
        main.add(left, weight=1)

        lf_orig = ttk.LabelFrame(left, text="Original", padding=8)
        lf_orig.pack(fill="both", expand=True)

        self.original_canvas = ImageCanvas(lf_orig)
        self.original_canvas.pack(fill="both", expand=True)

        self.original_meta = ttk.Label(lf_orig, text="No file loaded.")
        self.original_meta.pack(side="bottom", anchor="w", pady=(6, 0))

        # Right pane: Passport frame + settings
        right = ttk.Frame(main)
        main.add(right, weight=1)

        params = self.session.params
        lf_frame = ttk.LabelFrame(
            right, text=f"Passport photo ({params.viewport_width}x{params.viewport_height})", padding=8
        )
        lf_frame.pack(fill="both", expand=True)

        self.viewport = ViewportCanvas(
            lf_frame,
            self.gestures,
            params.viewport_width,
            params.viewport_height,
            on_change=self.refresh_preview,
        )
        self.viewport.pack(anchor="n")

        ttk.Label(lf_frame, text="Drag to move, scroll to zoom.").pack(anchor="w", pady=(6, 0))

        settings = ttk.LabelFrame(right, text="Adjustments", padding=8)
        settings.pack(fill="x", pady=(8, 0))
        settings.columnconfigure(1, weight=1)

        ttk.Label(settings, text="Brightness:").grid(row=0, column=0, sticky="w", pady=3)
        self.var_brightness = tk.DoubleVar(value=self.session.settings.brightness)
        self.scale_brightness = ttk.Scale(
            settings, from_=0.5, to=1.5, variable=self.var_brightness, command=self.on_brightness
        )
        self.scale_brightness.grid(row=0, column=1, sticky="ew", pady=3)
        self.brightness_label = ttk.Label(settings, text="100%", width=6)
        self.brightness_label.grid(row=0, column=2, sticky="e", pady=3)

        self.var_remove_bg = tk.BooleanVar(value=self.session.settings.background_removal)
        self.chk_remove_bg = ttk.Checkbutton(
            settings, text="Whiten light background", variable=self.var_remove_bg,
            command=self.on_toggle_background,
        )
        self.chk_remove_bg.grid(row=1, column=0, columnspan=3, sticky="w", pady=3)

        self.var_guides = tk.BooleanVar(value=False)
        self.chk_guides = ttk.Checkbutton(
            settings, text="Show head outline", variable=self.var_guides, command=self.on_toggle_guides
        )
        self.chk_guides.grid(row=2, column=0, columnspan=3, sticky="w", pady=3)

        # Status bar
        status = ttk.Frame(self, padding=(10, 6))
        status.pack(side="bottom", fill="x")

        self.status_var = tk.StringVar(value="")
        self.status_label = ttk.Label(status, textvariable=self.status_var)
        self.status_label.pack(side="left")

    def _bind_shortcuts(self) -> None:
        self.master.bind_all("<Control-o>", lambda e: self.on_upload())
        self.master.bind_all("<Command-o>", lambda e: self.on_upload())

        self.master.bind_all("<Control-s>", lambda e: self.on_save())
        self.master.bind_all("<Command-s>", lambda e: self.on_save())

    # ---------- Utilities ----------

    def set_status(self, text: str, color: str = "") -> None:
        self._cancel_status_clear()
        self.status_var.set(text)
        self.status_label.configure(foreground=color)

    def show_status(self, message: Optional[StatusMessage]) -> None:
        if message is None:
            return
        self.set_status(message.text, _STATUS_COLORS[message.level])
        if message.transient:
            self._status_clear_job = self.master.after(
                self.session.params.status_clear_ms, lambda: self.set_status("")
            )

    def _cancel_status_clear(self) -> None:
        if self._status_clear_job is not None:
            self.master.after_cancel(self._status_clear_job)
            self._status_clear_job = None

    def _set_buttons_state(self, busy: bool = False) -> None:
        framed = self.session.has_image and not busy
        # Upload/Reset stay enabled: a newer upload supersedes a pending detection
        for btn in (self.btn_recenter, self.btn_save):
            btn.state(["!disabled"] if framed else ["disabled"])
        if busy:
            self.progress.start(12)
        else:
            self.progress.stop()

    def refresh_preview(self) -> None:
        if not self.session.has_image:
            self.viewport.show(None)
            return
        frame = self.session.render(preview=True)
        self.viewport.show(frame.image)

    # ---------- Upload + detection ----------

    def on_upload(self) -> None:
        path = filedialog.askopenfilename(
            title="Select a photo",
            filetypes=[
                ("Image files", "*.jpg *.jpeg *.png *.heic *.heif"),
                ("All files", "*.*"),
            ],
        )
        if not path:
            return

        try:
            pil = load_image_rgb(path, self.session.params)
        except InvalidInputFile as e:
            messagebox.showerror("Upload failed", str(e))
            self.show_status(self.session.set_status(StatusKind.INVALID_INPUT, str(e)))
            return

        token = self.session.begin_upload(pil)

        self.original_canvas.set_image(pil)
        self.original_meta.configure(text=f"File: {os.path.basename(path)}   Size: {pil.width}x{pil.height}")
        self.viewport.show(None)

        self._set_buttons_state(busy=True)
        self.set_status("Detecting face…")

        params = self.session.params

        def worker() -> None:
            outcome = detect_for_framing(pil, params)

            def finish_on_ui_thread() -> None:
                if not self.session.apply_detection(token, outcome):
                    return  # a newer upload or reset took over
                self.original_canvas.set_face_box(self.session.face_box)
                self._set_buttons_state()
                self.refresh_preview()
                self.show_status(self.session.status)

            self.master.after(0, finish_on_ui_thread)

        threading.Thread(target=worker, daemon=True).start()

    # ---------- Adjustments ----------

    def on_brightness(self, _value: str) -> None:
        self.session.set_brightness(self.var_brightness.get())
        self.brightness_label.configure(text=f"{round(self.session.settings.brightness * 100)}%")
        self.refresh_preview()

    def on_toggle_background(self) -> None:
        self.session.set_background_removal(self.var_remove_bg.get())
        self.refresh_preview()

    def on_toggle_guides(self) -> None:
        visible = bool(self.var_guides.get())
        self.viewport.set_guides_visible(visible)
        if visible:
            self.show_status(self.session.set_status(StatusKind.GUIDES_ENABLED))

    def on_recenter(self) -> None:
        self.session.recenter()
        self.refresh_preview()

    # ---------- Export / reset ----------

    def on_save(self) -> None:
        if not self.session.has_image:
            messagebox.showwarning("Not ready", "Upload a photo first.")
            return

        params = self.session.params
        path = filedialog.asksaveasfilename(
            title="Save passport photo",
            defaultextension=".jpg",
            initialfile=export_filename(params.viewport_width, params.viewport_height),
            filetypes=[("JPEG", "*.jpg *.jpeg")],
        )
        if not path:
            return

        try:
            saved = self.session.export(path)
        except (NotFramedError, OSError) as e:
            logger.exception("Export failed")
            messagebox.showerror("Save failed", str(e))
            self.set_status("Save failed.")
            return

        self.show_status(self.session.status)
        logger.info("Saved %s", saved)

    def on_reset(self) -> None:
        self.session.reset()
        self.gestures.pointer_up()

        self.original_canvas.clear()
        self.original_meta.configure(text="No file loaded.")
        self.viewport.show(None)

        self.var_brightness.set(self.session.settings.brightness)
        self.brightness_label.configure(text="100%")
        self.var_remove_bg.set(self.session.settings.background_removal)
        self.var_guides.set(False)
        self.viewport.set_guides_visible(False)

        self._set_buttons_state()
        self.set_status("Reset complete.")


def run() -> None:
    root = tk.Tk()
    root.title("PassportFrame")
    root.geometry("1100x760")
    root.minsize(900, 700)

    session = FramingSession()
    PassportFrameApp(root, session)

    root.mainloop()
