import tempfile
import unittest
from pathlib import Path

from PIL import Image

from tests._test_path import SRC  # noqa: F401

from passportframe.app.errors import NotFramedError
from passportframe.app.state import FramingSession
from passportframe.app.status import StatusKind
from passportframe.core.gestures import GestureInterpreter
from passportframe.core.models import FaceBox, RenderSettings, TransformState
from passportframe.detection.face_detector import DetectionOutcome


def _image(w=800, h=1200):
    return Image.new("RGB", (w, h), (120, 110, 100))


class TestFramingSession(unittest.TestCase):
    def test_new_session_has_no_image(self):
        s = FramingSession()
        self.assertFalse(s.has_image)
        s.pan(10, 10)
        s.zoom_about(0, 0, 2.0)
        s.recenter()
        self.assertIsNone(s.transform)
        with self.assertRaises(NotFramedError):
            s.render()

    def test_detection_outcome_frames_image(self):
        s = FramingSession()
        token = s.begin_upload(_image())
        outcome = DetectionOutcome(
            kind=StatusKind.FACE_DETECTED,
            face_box=FaceBox(75, 50, 50, 50),
            scale_factor=4.0,
        )
        self.assertTrue(s.apply_detection(token, outcome))
        self.assertTrue(s.has_image)
        self.assertAlmostEqual(s.transform.zoom, 0.8)
        self.assertEqual(s.face_box, FaceBox(300, 200, 200, 200))
        self.assertEqual(s.status.kind, StatusKind.FACE_DETECTED)
        self.assertTrue(s.status.transient)

    def test_manual_outcome_status_persists(self):
        s = FramingSession()
        token = s.begin_upload(_image())
        s.apply_detection(token, DetectionOutcome(kind=StatusKind.DETECTOR_UNAVAILABLE))
        self.assertAlmostEqual(s.transform.pan_y, -43.0)
        self.assertEqual(s.status.kind, StatusKind.DETECTOR_UNAVAILABLE)
        self.assertFalse(s.status.transient)

    def test_stale_detection_is_discarded(self):
        s = FramingSession()
        old = s.begin_upload(_image())
        new = s.begin_upload(_image(1000, 1000))

        stale = DetectionOutcome(kind=StatusKind.FACE_DETECTED, face_box=FaceBox(0, 0, 50, 50))
        self.assertFalse(s.apply_detection(old, stale))
        self.assertIsNone(s.transform)

        self.assertTrue(s.apply_detection(new, DetectionOutcome(kind=StatusKind.NO_FACE_MANUAL)))
        self.assertEqual(s.cover.image_width, 1000)

    def test_detection_after_reset_is_discarded(self):
        s = FramingSession()
        token = s.begin_upload(_image())
        s.reset()
        self.assertFalse(s.apply_detection(token, DetectionOutcome(kind=StatusKind.NO_FACE_MANUAL)))
        self.assertIsNone(s.image)

    def test_recenter_restores_baseline_exactly(self):
        s = FramingSession()
        token = s.begin_upload(_image())
        s.apply_detection(token, DetectionOutcome(
            kind=StatusKind.FACE_DETECTED, face_box=FaceBox(300, 200, 200, 200)
        ))
        initial = s.transform

        s.pan(-37.3, 12.9)
        s.zoom_about(120.5, 80.25, 1.7)
        GestureInterpreter(s, s.params.wheel_zoom_step).wheel(10, 10, 1)
        s.pan(500, -500)
        self.assertNotEqual(s.transform, initial)

        s.recenter()
        self.assertEqual(s.transform, initial)
        self.assertEqual(s.transform, s.cover.baseline())

    def test_interactions_keep_cover(self):
        s = FramingSession()
        token = s.begin_upload(_image())
        s.apply_detection(token, DetectionOutcome(kind=StatusKind.NO_FACE_MANUAL))
        s.transform = TransformState(0.01, 1e6, -1e6)
        s.pan(0, 0)
        self.assertTrue(s.cover.covers(s.transform))

    def test_brightness_and_background_settings(self):
        s = FramingSession()
        s.set_brightness(9.0)
        self.assertEqual(s.settings.brightness, 3.0)
        s.set_brightness(-1)
        self.assertEqual(s.settings.brightness, 0.0)
        s.set_background_removal(True, "rembg")
        self.assertTrue(s.settings.background_removal)
        self.assertEqual(s.settings.background_filter, "rembg")

    def test_reset_clears_fields_and_restores_defaults(self):
        s = FramingSession()
        token = s.begin_upload(_image())
        s.apply_detection(token, DetectionOutcome(kind=StatusKind.NO_FACE_MANUAL))
        s.set_brightness(1.4)

        s.reset()

        self.assertIsNone(s.image)
        self.assertIsNone(s.cover)
        self.assertIsNone(s.transform)
        self.assertIsNone(s.status)
        self.assertEqual(s.settings, RenderSettings())
        self.assertFalse(s.is_current(token))

    def test_render_and_export(self):
        s = FramingSession()
        token = s.begin_upload(_image())
        s.apply_detection(token, DetectionOutcome(kind=StatusKind.NO_FACE_MANUAL))

        frame = s.render()
        self.assertEqual(frame.image.size, (400, 514))

        with tempfile.TemporaryDirectory() as d:
            path = s.export(d)
            self.assertEqual(path, Path(d) / "passport-photo-400x514.jpg")
            with Image.open(path) as saved:
                self.assertEqual(saved.format, "JPEG")
                self.assertEqual(saved.size, (400, 514))
        self.assertEqual(s.status.kind, StatusKind.EXPORTED)


if __name__ == "__main__":
    unittest.main()
