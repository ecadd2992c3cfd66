import unittest

from tests._test_path import SRC  # noqa: F401

from passportframe.core.framing import initial_frame
from passportframe.core.models import FaceBox, FramingParams, ImageSize, Viewport

VIEWPORT = Viewport(400, 514)


class TestInitialFrame(unittest.TestCase):
    def test_no_face_centers_cover_fit(self):
        state, cover = initial_frame(ImageSize(800, 1200), VIEWPORT)
        self.assertAlmostEqual(cover.min_zoom, 0.5)
        self.assertAlmostEqual(state.zoom, 0.5)
        self.assertAlmostEqual(state.pan_x, 0.0)
        self.assertAlmostEqual(state.pan_y, -43.0)

    def test_same_aspect_no_face_has_zero_pan(self):
        state, cover = initial_frame(ImageSize(800, 1028), VIEWPORT)
        self.assertEqual(state.zoom, cover.min_zoom)
        self.assertEqual((state.pan_x, state.pan_y), (0.0, 0.0))

    def test_face_box_zooms_and_positions_face(self):
        face = FaceBox(x=300, y=200, width=200, height=200)
        state, cover = initial_frame(ImageSize(800, 1200), VIEWPORT, face_box=face)
        self.assertAlmostEqual(cover.min_zoom, 0.5)
        self.assertAlmostEqual(state.zoom, 0.8)
        self.assertAlmostEqual(state.pan_x, -120.0)
        self.assertAlmostEqual(state.pan_y, -34.4)

    def test_face_box_from_downscaled_preview(self):
        # Detector saw a 200x300 preview of the 800x1200 image
        preview_face = FaceBox(x=75, y=50, width=50, height=50)
        state, _ = initial_frame(ImageSize(800, 1200), VIEWPORT, face_box=preview_face, scale_factor=4.0)
        self.assertAlmostEqual(state.zoom, 0.8)
        self.assertAlmostEqual(state.pan_x, -120.0)
        self.assertAlmostEqual(state.pan_y, -34.4)

    def test_large_face_never_below_cover(self):
        face = FaceBox(x=0, y=0, width=800, height=900)
        state, cover = initial_frame(ImageSize(800, 1200), VIEWPORT, face_box=face)
        self.assertEqual(state.zoom, cover.min_zoom)
        self.assertTrue(cover.covers(state))

    def test_face_near_edge_is_clamped(self):
        face = FaceBox(x=0, y=0, width=100, height=100)
        state, cover = initial_frame(ImageSize(800, 1200), VIEWPORT, face_box=face)
        self.assertAlmostEqual(state.zoom, 1.6)
        self.assertEqual((state.pan_x, state.pan_y), (0.0, 0.0))
        self.assertTrue(cover.covers(state))

    def test_tiny_face_capped_at_max_zoom(self):
        face = FaceBox(x=390, y=590, width=10, height=10)
        state, _ = initial_frame(ImageSize(800, 1200), VIEWPORT, face_box=face)
        self.assertEqual(state.zoom, 5.0)

    def test_degenerate_face_box_falls_back_to_center(self):
        face = FaceBox(x=10, y=10, width=0, height=0)
        state, _ = initial_frame(ImageSize(800, 1200), VIEWPORT, face_box=face)
        self.assertAlmostEqual(state.zoom, 0.5)
        self.assertAlmostEqual(state.pan_y, -43.0)

    def test_baseline_matches_clamped_state(self):
        face = FaceBox(x=0, y=0, width=100, height=100)
        state, cover = initial_frame(ImageSize(800, 1200), VIEWPORT, face_box=face)
        self.assertEqual(cover.baseline(), state)

    def test_params_change_framing_ratios(self):
        params = FramingParams(face_width_ratio=0.5)
        face = FaceBox(x=300, y=200, width=200, height=200)
        state, _ = initial_frame(ImageSize(800, 1200), VIEWPORT, face_box=face, params=params)
        self.assertAlmostEqual(state.zoom, 1.0)


if __name__ == "__main__":
    unittest.main()
