import contextlib
import io
import tempfile
import unittest
from pathlib import Path
from unittest import skipIf

from PIL import Image

from tests._test_path import SRC  # noqa: F401


def _can_import_passport_photo() -> bool:
    try:
        import passport_photo  # noqa: F401
        return True
    except Exception:
        return False


@skipIf(not _can_import_passport_photo(), "passport_photo.py dependencies (cv2/pillow-heif) not available")
class TestPassportPhotoCli(unittest.TestCase):
    def setUp(self):
        import passport_photo
        self.pp = passport_photo
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.input = self.tmp / "in.png"
        Image.new("RGB", (800, 1200), (150, 140, 130)).save(self.input)

    def tearDown(self):
        self._tmp.cleanup()

    def _main(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = self.pp.main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_no_detect_writes_centered_frame(self):
        code, out, _ = self._main("--input", str(self.input), "--output", str(self.tmp), "--no-detect")
        self.assertEqual(code, 0)
        saved = self.tmp / "passport-photo-400x514.jpg"
        self.assertTrue(saved.exists())
        self.assertIn("zoom=0.500", out)
        self.assertIn("pan=(0.0, -43.0)", out)
        with Image.open(saved) as img:
            self.assertEqual(img.size, (400, 514))

    def test_frame_function_applies_settings(self):
        saved, session = self.pp.frame_passport_photo(
            str(self.input), str(self.tmp / "out.jpg"),
            brightness=1.2, remove_background=True, detect=False,
        )
        self.assertEqual(saved.name, "out.jpg")
        self.assertAlmostEqual(session.settings.brightness, 1.2)
        self.assertTrue(session.settings.background_removal)

    def test_output_directory_with_trailing_slash(self):
        out_dir = str(self.tmp / "exports") + "/"
        code, out, _ = self._main("--input", str(self.input), "--output", out_dir, "--no-detect")
        self.assertEqual(code, 0)
        self.assertTrue((self.tmp / "exports" / "passport-photo-400x514.jpg").is_file())

    def test_invalid_input_exit_code(self):
        bad = self.tmp / "notes.txt"
        bad.write_text("hello")
        code, _, err = self._main("--input", str(bad), "--output", str(self.tmp), "--no-detect")
        self.assertEqual(code, 2)
        self.assertIn("ERROR:", err)


if __name__ == "__main__":
    unittest.main()
