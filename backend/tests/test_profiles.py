import json
import os
import tempfile
import unittest

from repcoach.exceptions import ProfileConfigError
from repcoach.models.movement import MovementPattern
from repcoach.profiles.registry import ProfileRegistry

from tests.helpers import make_profile


def profile_dict(**overrides):
    return make_profile(**overrides).model_dump(mode="json")


class ShippedDataTest(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.registry = ProfileRegistry.load()

    def test_catalog_entries_have_profiles(self):
        catalog = self.registry.catalog()
        self.assertGreater(len(catalog), 20)
        self.assertEqual(len(catalog), len(set(catalog)))
        for exercise_id in catalog:
            self.assertIsNotNone(self.registry.get(exercise_id))

    def test_every_counting_pattern_is_represented(self):
        patterns = {self.registry.get(eid).pattern for eid in self.registry.catalog()}
        self.assertEqual(patterns, set(MovementPattern) - {MovementPattern.ISOLATION})

    def test_catalog_offers_no_neutral_exercises(self):
        # ISOLATION never counts a rep; offering it would show a dead counter
        for exercise_id in self.registry.catalog():
            self.assertNotEqual(
                self.registry.get(exercise_id).pattern, MovementPattern.ISOLATION, exercise_id
            )

    def test_unknown_exercise_is_none(self):
        self.assertIsNone(self.registry.get("underwater-basket-weaving"))
        self.assertNotIn("underwater-basket-weaving", self.registry)

    def test_by_muscle_group(self):
        chest = self.registry.by_muscle_group("chest")
        self.assertIn("pushup", [p.id for p in chest])
        self.assertTrue(all(p.muscle_group == "chest" for p in chest))
        self.assertIn("chest", self.registry.muscle_groups())


class ValidationTest(unittest.TestCase):
    def test_joint_not_produced_by_region(self):
        with self.assertRaises(ProfileConfigError):
            ProfileRegistry.from_dicts([profile_dict(primary_joint="knee_flexion")])

    def test_stabilization_joint_checked(self):
        with self.assertRaises(ProfileConfigError):
            ProfileRegistry.from_dicts([profile_dict(stabilization_joint="body_line")])

    def test_lockout_pattern_needs_lockout_angle(self):
        with self.assertRaises(ProfileConfigError):
            ProfileRegistry.from_dicts([profile_dict(lockout_angle=None)])

    def test_stretch_pattern_needs_stretch_angle(self):
        with self.assertRaises(ProfileConfigError):
            ProfileRegistry.from_dicts([profile_dict(pattern="leg_raise", lockout_angle=None)])

    def test_engagement_weights_capped(self):
        data = profile_dict()
        data["engagement"] = {"primary": 0.7, "stabilization": 0.4}
        with self.assertRaises(ProfileConfigError):
            ProfileRegistry.from_dicts([data])

    def test_unknown_pattern_rejected(self):
        data = profile_dict()
        data["pattern"] = "interpretive_dance"
        with self.assertRaises(ProfileConfigError):
            ProfileRegistry.from_dicts([data])

    def test_unknown_violation_code_rejected(self):
        data = profile_dict()
        data["rules"] = [{"kind": "max", "joint": "elbow_flexion", "value": 1.0, "code": "bad_vibes"}]
        with self.assertRaises(ProfileConfigError):
            ProfileRegistry.from_dicts([data])

    def test_inverted_rom_range_rejected(self):
        data = profile_dict()
        data["range_min"], data["range_max"] = 180.0, 60.0
        with self.assertRaises(ProfileConfigError):
            ProfileRegistry.from_dicts([data])

    def test_duplicate_profile_rejected(self):
        with self.assertRaises(ProfileConfigError):
            ProfileRegistry.from_dicts([profile_dict(), profile_dict()])

    def test_error_is_a_value_error(self):
        with self.assertRaises(ValueError):
            ProfileRegistry.from_dicts([profile_dict(lockout_angle=None)])


class CatalogTest(unittest.TestCase):
    def test_catalog_defaults_to_profiles(self):
        registry = ProfileRegistry.from_dicts([profile_dict()])
        self.assertEqual(registry.catalog(), ["test-press"])

    def test_catalog_entry_without_profile_rejected(self):
        with self.assertRaises(ProfileConfigError):
            ProfileRegistry.from_dicts([profile_dict()], ["test-press", "ghost"])

    def test_duplicate_catalog_entries_collapsed(self):
        with self.assertLogs("repcoach.profiles.registry", level="WARNING"):
            registry = ProfileRegistry.from_dicts([profile_dict()], ["test-press", "test-press"])
        self.assertEqual(registry.catalog(), ["test-press"])

    def test_uncatalogued_profile_stays_usable(self):
        with self.assertLogs("repcoach.profiles.registry", level="WARNING"):
            registry = ProfileRegistry.from_dicts(
                [profile_dict(), profile_dict(id="hidden-press")], ["test-press"]
            )
        self.assertIsNotNone(registry.get("hidden-press"))
        self.assertEqual(registry.catalog(), ["test-press"])


class LoadTest(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def write(self, name, content):
        path = os.path.join(self.tmpdir.name, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content if isinstance(content, str) else json.dumps(content))
        return path

    def test_load_from_paths(self):
        profiles = self.write("profiles.json", {"exercises": [profile_dict()]})
        catalog = self.write("catalog.json", {"exercises": ["test-press"]})
        registry = ProfileRegistry.load(profiles, catalog)
        self.assertEqual(len(registry), 1)
        self.assertEqual(registry.get("test-press").lockout_angle, 170.0)

    def test_bad_json_rejected(self):
        profiles = self.write("profiles.json", "{not json")
        catalog = self.write("catalog.json", {"exercises": []})
        with self.assertRaises(ProfileConfigError):
            ProfileRegistry.load(profiles, catalog)

    def test_missing_file_rejected(self):
        with self.assertRaises(ProfileConfigError):
            ProfileRegistry.load(os.path.join(self.tmpdir.name, "nope.json"))

    def test_wrong_shape_rejected(self):
        profiles = self.write("profiles.json", [profile_dict()])
        catalog = self.write("catalog.json", {"exercises": []})
        with self.assertRaises(ProfileConfigError):
            ProfileRegistry.load(profiles, catalog)


if __name__ == "__main__":
    unittest.main()
