import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from repcoach.config import Settings

from tests.helpers import make_settings


class SettingsTest(unittest.TestCase):
    def test_defaults(self):
        settings = make_settings()
        self.assertEqual(settings.velocity_window_size, 5)
        self.assertEqual(settings.rom_window_size, 3)
        self.assertEqual(settings.min_keypoint_confidence, 0.1)
        self.assertEqual(settings.extraction_side, "auto")
        self.assertFalse(settings.count_every_hold_frame)

    def test_environment_override(self):
        env = {"REPCOACH_ROM_WINDOW_SIZE": "4", "REPCOACH_EXTRACTION_SIDE": "right"}
        with patch.dict(os.environ, env):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.rom_window_size, 4)
        self.assertEqual(settings.extraction_side, "right")

    def test_invalid_side_rejected(self):
        with self.assertRaises(ValidationError):
            make_settings(extraction_side="middle")

    def test_empty_window_rejected(self):
        with self.assertRaises(ValidationError):
            make_settings(velocity_window_size=0)


if __name__ == "__main__":
    unittest.main()
