import unittest

from repcoach.cv.form_checker import FormChecker
from repcoach.models.movement import MovementPhase
from repcoach.models.violation import ViolationCode, ViolationKind

from tests.helpers import make_profile, make_settings


def checker(**overrides):
    return FormChecker(make_profile(**overrides), make_settings())


class RangeCheckTest(unittest.TestCase):
    def setUp(self):
        self.checker = checker(target_ranges={"elbow_flexion": [60.0, 175.0]})

    def test_in_range_is_clean(self):
        self.assertEqual(self.checker.check({"elbow_flexion": 120.0}), [])

    def test_too_low(self):
        (violation,) = self.checker.check({"elbow_flexion": 40.0})
        self.assertEqual(violation.kind, ViolationKind.TOO_LOW)
        self.assertEqual(violation.joint, "elbow_flexion")
        self.assertEqual(violation.observed, 40.0)
        self.assertEqual(violation.boundary, 60.0)
        self.assertEqual(violation.code, ViolationCode.ANGLE_TOO_LOW)

    def test_too_high(self):
        (violation,) = self.checker.check({"elbow_flexion": 179.0})
        self.assertEqual(violation.kind, ViolationKind.TOO_HIGH)
        self.assertEqual(violation.boundary, 175.0)

    def test_missing_angle_is_skipped(self):
        self.assertEqual(self.checker.check({"shoulder_stability": 180.0}), [])

    def test_zero_from_low_confidence_is_reported(self):
        (violation,) = self.checker.check({"elbow_flexion": 0.0})
        self.assertEqual(violation.kind, ViolationKind.TOO_LOW)


class StabilizationCheckTest(unittest.TestCase):
    def setUp(self):
        # (1 - 0.8) * 30 = 6 degrees allowed
        self.checker = checker(stabilization_joint="shoulder_stability", stabilization=0.8)

    def test_within_tolerance(self):
        self.assertEqual(self.checker.check({"shoulder_stability": 176.0}), [])

    def test_drift_reported(self):
        (violation,) = self.checker.check({"shoulder_stability": 170.0})
        self.assertEqual(violation.kind, ViolationKind.UNSTABLE)
        self.assertEqual(violation.code, ViolationCode.POOR_STABILIZATION)
        self.assertAlmostEqual(violation.boundary, 6.0)


class LockoutCompletenessTest(unittest.TestCase):
    def test_hold_short_of_lockout(self):
        form = checker(lockout_requirement=0.9)
        (violation,) = form.check({"elbow_flexion": 160.0}, MovementPhase.STATIC_HOLD)
        self.assertEqual(violation.kind, ViolationKind.INCOMPLETE_LOCKOUT)
        self.assertEqual(violation.boundary, 170.0)

    def test_only_while_holding(self):
        form = checker(lockout_requirement=0.9)
        self.assertEqual(form.check({"elbow_flexion": 160.0}, MovementPhase.CONCENTRIC), [])
        self.assertEqual(form.check({"elbow_flexion": 160.0}), [])

    def test_lenient_requirement_skips_check(self):
        form = checker(lockout_requirement=0.8)
        self.assertEqual(form.check({"elbow_flexion": 160.0}, MovementPhase.STATIC_HOLD), [])

    def test_full_lockout_is_clean(self):
        form = checker(lockout_requirement=0.9)
        self.assertEqual(form.check({"elbow_flexion": 175.0}, MovementPhase.STATIC_HOLD), [])


class ExerciseRuleTest(unittest.TestCase):
    def rule_violations(self, rule, angles):
        return checker(rules=[rule]).check(angles)

    def test_min_and_max(self):
        rule = {"kind": "max", "joint": "forearm_tilt", "value": 30.0, "code": "wrist_not_straight"}
        self.assertEqual(self.rule_violations(rule, {"forearm_tilt": 20.0}), [])
        (violation,) = self.rule_violations(rule, {"forearm_tilt": 40.0})
        self.assertEqual(violation.kind, ViolationKind.RULE)
        self.assertEqual(violation.code, ViolationCode.WRIST_NOT_STRAIGHT)

        rule = {"kind": "min", "joint": "elbow_flexion", "value": 150.0, "code": "incomplete_overhead_reach"}
        self.assertEqual(len(self.rule_violations(rule, {"elbow_flexion": 140.0})), 1)

    def test_abs_rules(self):
        rule = {"kind": "abs_max", "joint": "elbow_travel", "value": 10.0, "code": "elbow_drift"}
        self.assertEqual(len(self.rule_violations(rule, {"elbow_travel": -15.0})), 1)
        self.assertEqual(self.rule_violations(rule, {"elbow_travel": -5.0}), [])

        rule = {"kind": "abs_min", "joint": "elbow_travel", "value": 10.0, "code": "elbow_drift"}
        self.assertEqual(len(self.rule_violations(rule, {"elbow_travel": -5.0})), 1)

    def test_target(self):
        rule = {"kind": "target", "joint": "elbow_travel", "value": 30.0,
                "tolerance": 10.0, "code": "elbow_drift"}
        self.assertEqual(self.rule_violations(rule, {"elbow_travel": 35.0}), [])
        self.assertEqual(len(self.rule_violations(rule, {"elbow_travel": 45.0})), 1)

    def test_diff_max(self):
        profile_rule = {"kind": "diff_max", "joint": "hip_extension", "other_joint": "knee_flexion",
                        "value": 30.0, "code": "hip_knee_desync"}
        form = FormChecker(
            make_profile(region="lower_body", primary_joint="hip_extension", rules=[profile_rule]),
            make_settings(),
        )
        (violation,) = form.check({"hip_extension": 100.0, "knee_flexion": 150.0})
        self.assertEqual(violation.observed, 50.0)
        self.assertEqual(form.check({"hip_extension": 100.0}), [])

    def test_layers_concatenate(self):
        form = checker(
            target_ranges={"elbow_flexion": [60.0, 180.0]},
            rules=[{"kind": "max", "joint": "elbow_travel", "value": 20.0, "code": "elbow_drift"}],
        )
        violations = form.check({"elbow_flexion": 30.0, "elbow_travel": 40.0})
        self.assertEqual(
            [v.code for v in violations],
            [ViolationCode.ANGLE_TOO_LOW, ViolationCode.ELBOW_DRIFT],
        )


class NeutralTest(unittest.TestCase):
    def test_unknown_exercise_has_no_violations(self):
        form = FormChecker(None, make_settings())
        self.assertEqual(form.check({"elbow_flexion": 0.0, "body_line": 90.0}), [])

    def test_description_is_human_readable(self):
        (violation,) = checker(target_ranges={"elbow_flexion": [60.0, 180.0]}).check({"elbow_flexion": 10.0})
        self.assertEqual(violation.description, ViolationCode.get_description(ViolationCode.ANGLE_TOO_LOW))
        self.assertEqual(violation.to_dict()["kind"], "too_low")


if __name__ == "__main__":
    unittest.main()
