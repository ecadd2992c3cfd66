#!/usr/bin/env python3
"""
passport_photo.py

Frame and export a 400x514 passport photo without the GUI:
- Loads and validates the input (JPG/PNG/HEIC, up to 8MB)
- Detects a face (MediaPipe) and frames it, or centers the image if none is found
- Renders with the requested brightness and optional background whitening
- Saves passport-photo-400x514.jpg (JPEG quality 95)

Usage:
  python passport_photo.py --input /path/in.jpg
  python passport_photo.py --input in.jpg --output out_dir/ --brightness 1.1
  python passport_photo.py --input in.jpg --output out.jpg --remove-bg --bg-filter rembg
  python passport_photo.py --input in.jpg --no-detect

Notes:
- Background whitening is a brightness/saturation heuristic, not segmentation.
  Always check the result against the official photo requirements.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from passportframe.app.errors import PassportFrameError
from passportframe.app.logging_setup import configure_logging
from passportframe.app.state import FramingSession
from passportframe.app.status import StatusKind
from passportframe.app.upload import load_image_rgb
from passportframe.core.filters import BACKGROUND_FILTERS
from passportframe.core.models import FramingParams
from passportframe.detection.face_detector import DetectionOutcome, detect_for_framing

logger = logging.getLogger("passportframe.cli")


def frame_passport_photo(
    input_path: str,
    output: str = ".",
    brightness: float = 1.0,
    remove_background: bool = False,
    background_filter: str = "threshold",
    detect: bool = True,
    params: FramingParams = FramingParams(),
) -> tuple[Path, FramingSession]:
    """
    Run upload -> detect -> frame -> render -> export.

    Args:
      input_path: path to input image
      output: output directory or .jpg path
      brightness: multiplicative brightness (1.0 = unchanged)
      remove_background: whiten a light background after rendering
      background_filter: name of the post-filter to use
      detect: if False, skip face detection and center the image
    Returns (saved path, session).
    """
    pil = load_image_rgb(input_path, params)

    session = FramingSession(params=params)
    token = session.begin_upload(pil)

    if detect:
        outcome = detect_for_framing(pil, params)
    else:
        outcome = DetectionOutcome(kind=StatusKind.NO_FACE_MANUAL)
    session.apply_detection(token, outcome)

    session.set_brightness(brightness)
    session.set_background_removal(remove_background, background_filter)

    saved = session.export(output)
    return saved, session


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Frame a photo into a 400x514 passport photo.")
    p.add_argument("--input", "-i", required=True, help="Path to input image (jpg/png/heic)")
    p.add_argument("--output", "-o", default=".", help="Output directory or .jpg path (default: current dir)")
    p.add_argument("--brightness", type=float, default=1.0, help="Brightness factor (default: 1.0)")
    p.add_argument("--remove-bg", action="store_true", help="Whiten a light background")
    p.add_argument(
        "--bg-filter", choices=sorted(BACKGROUND_FILTERS), default="threshold",
        help="Background filter used with --remove-bg (default: threshold)",
    )
    p.add_argument("--no-detect", action="store_true", help="Skip face detection; center the image")
    p.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        saved, session = frame_passport_photo(
            input_path=args.input,
            output=args.output,
            brightness=args.brightness,
            remove_background=args.remove_bg,
            background_filter=args.bg_filter,
            detect=not args.no_detect,
        )
    except (PassportFrameError, OSError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    t = session.transform
    print(f"Framing: zoom={t.zoom:.3f} pan=({t.pan_x:.1f}, {t.pan_y:.1f})")
    print(f"Saved: {saved}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
