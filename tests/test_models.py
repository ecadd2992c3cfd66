import unittest
from dataclasses import FrozenInstanceError, replace

from tests._test_path import SRC  # noqa: F401  (ensures src on path)

from passportframe.core.models import (
    CoverMetadata,
    FaceBox,
    FramingParams,
    RenderSettings,
    TransformState,
    Viewport,
)


class TestFramingParams(unittest.TestCase):
    def test_defaults(self):
        p = FramingParams()
        self.assertEqual((p.viewport_width, p.viewport_height), (400, 514))
        self.assertAlmostEqual(p.max_zoom, 5.0)
        self.assertAlmostEqual(p.face_width_ratio, 0.4)
        self.assertAlmostEqual(p.face_center_y_ratio, 0.4)
        self.assertEqual(p.jpeg_quality, 95)
        self.assertEqual(p.max_upload_bytes, 8 * 1024 * 1024)
        self.assertEqual(p.viewport, Viewport(400, 514))

    def test_frozen(self):
        p = FramingParams()
        with self.assertRaises(FrozenInstanceError):
            p.max_zoom = 8.0  # type: ignore[misc]

    def test_replace(self):
        p = FramingParams()
        p2 = replace(p, viewport_width=600, viewport_height=600)
        self.assertEqual(p2.viewport, Viewport(600, 600))
        # original unchanged
        self.assertEqual(p.viewport_width, 400)


class TestValueTypes(unittest.TestCase):
    def test_face_box_center_and_scale(self):
        box = FaceBox(x=75, y=50, width=50, height=50)
        self.assertEqual((box.center_x, box.center_y), (100.0, 75.0))
        big = box.scaled(4.0)
        self.assertEqual(big, FaceBox(300, 200, 200, 200))

    def test_render_settings_defaults(self):
        s = RenderSettings()
        self.assertEqual(s.brightness, 1.0)
        self.assertFalse(s.background_removal)
        self.assertEqual(s.background_filter, "threshold")

    def test_cover_baseline_and_covers(self):
        cover = CoverMetadata(
            image_width=800, image_height=1200,
            viewport_width=400, viewport_height=514,
            min_zoom=0.5, max_zoom=5.0,
            initial_zoom=0.5, initial_pan_x=0.0, initial_pan_y=-43.0,
        )
        self.assertEqual(cover.baseline(), TransformState(0.5, 0.0, -43.0))
        self.assertTrue(cover.covers(cover.baseline()))
        self.assertFalse(cover.covers(TransformState(0.5, 10.0, -43.0)))
        self.assertFalse(cover.covers(TransformState(0.5, 0.0, -100.0)))


if __name__ == "__main__":
    unittest.main()
