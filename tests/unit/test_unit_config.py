"""
Unit tests for nml.nml_config.

The autouse fixture in conftest.py resets the configuration around every
test, so each test starts from the defaults.
"""

import unittest
import warnings

from nml import Matrix4x4, NMLConfig, Quaternion, Vector3, get_config, reset_config, set_config


class ConfigTests(unittest.TestCase):
    """Tests for reading, replacing and validating the configuration"""

    def testDefaults(self):
        config = get_config()
        self.assertEqual(config.normalised_tolerance, 1e-6)
        self.assertEqual(config.normalise_threshold, 1e-6)
        self.assertEqual(config.slerp_threshold, 1e-6)
        self.assertEqual(config.axis_angle_threshold, 1e-6)
        self.assertFalse(config.warn_on_degenerate)

    def testSetOverrides(self):
        result = set_config(normalised_tolerance=1e-3)
        self.assertIs(result, get_config())
        self.assertEqual(get_config().normalised_tolerance, 1e-3)
        self.assertEqual(get_config().slerp_threshold, 1e-6, "Other fields keep their values")

    def testSetWholeConfig(self):
        set_config(NMLConfig(warn_on_degenerate=True, slerp_threshold=1e-4))
        self.assertTrue(get_config().warn_on_degenerate)
        self.assertEqual(get_config().slerp_threshold, 1e-4)

    def testSetConfigWithOverrides(self):
        set_config(NMLConfig(slerp_threshold=1e-4), slerp_threshold=1e-5)
        self.assertEqual(get_config().slerp_threshold, 1e-5)

    def testReset(self):
        set_config(normalise_threshold=0.5, warn_on_degenerate=True)
        reset_config()
        self.assertEqual(get_config(), NMLConfig())

    def testUnknownOptionRaises(self):
        with self.assertRaises(ValueError):
            set_config(tolerance=1e-3)

    def testInvalidThresholdRaises(self):
        """Thresholds must be finite, non-negative numbers"""
        for value in (-1e-6, float('nan'), float('inf'), 'small', None):
            with self.assertRaises(ValueError, msg=f"expected ValueError for {value!r}"):
                set_config(normalise_threshold=value)

    def testWarnOnDegenerateMustBeBool(self):
        for value in ("no", 0, 1, None):
            with self.assertRaises(ValueError, msg=f"expected ValueError for {value!r}"):
                set_config(warn_on_degenerate=value)
        self.assertFalse(get_config().warn_on_degenerate)

    def testFailedSetLeavesConfigUnchanged(self):
        set_config(normalised_tolerance=1e-3)
        with self.assertRaises(ValueError):
            set_config(normalised_tolerance=1e-2, slerp_threshold=-1.0)
        self.assertEqual(get_config().normalised_tolerance, 1e-3)


class ConfigEffectTests(unittest.TestCase):
    """Tests that the math types follow the active configuration"""

    def testNormalisedTolerance(self):
        v = Vector3(1.001, 0, 0)
        self.assertFalse(v.is_normalised())
        set_config(normalised_tolerance=0.01)
        self.assertTrue(v.is_normalised())

    def testNormaliseThreshold(self):
        v = Vector3(0.1, 0, 0)
        self.assertEqual(v.normalised(), Vector3(1, 0, 0))
        set_config(normalise_threshold=0.5)
        self.assertTrue(Vector3(0, 0.5, 0).normalised().equals_exact(Vector3(1, 0, 0)),
                        "Squared length 0.25 is under the raised threshold")

    def testAxisAngleThreshold(self):
        """A small rotation keeps its axis by default and loses it under a raised threshold"""
        q = Quaternion.rotate_axis(Vector3.unit_y(), 0.05)
        r = q.get_axis_angle()
        self.assertAlmostEqual(r.y, 1.0, places=4)
        self.assertAlmostEqual(r.w, 0.05, places=4)

        set_config(axis_angle_threshold=0.1)
        r = q.get_axis_angle()
        self.assertEqual((r.x, r.y, r.z), (1.0, 0.0, 0.0))
        self.assertAlmostEqual(r.w, 0.05, places=4, msg="The angle is still reported")

    def testSlerpThreshold(self):
        """Below the threshold slerp gives the nlerp result"""
        a = Quaternion.identity()
        b = Quaternion.rotate_axis(Vector3.unit_z(), 2.0)
        nlerp = a.nlerp(b, 0.25)

        default = a.slerp(b, 0.25)
        self.assertFalse(default.equals_within(nlerp, 1e-3),
                         "slerp and nlerp differ by about 0.016 at this angle")

        # sin(theta) is about 0.84 for this pair
        set_config(slerp_threshold=0.9)
        self.assertTrue(a.slerp(b, 0.25).equals_within(nlerp, 1e-6))

    def testWarnOnDegenerateOff(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            Matrix4x4(list(range(1, 17))).inverted()
            Quaternion().normalised()
            Quaternion().inverted()

    def testWarnOnSingularInverse(self):
        set_config(warn_on_degenerate=True)
        with self.assertWarns(RuntimeWarning):
            Matrix4x4(list(range(1, 17))).inverted()

    def testWarnOnZeroQuaternion(self):
        set_config(warn_on_degenerate=True)
        with self.assertWarns(RuntimeWarning):
            r = Quaternion().normalised()
        self.assertEqual(r, Quaternion(1, 0, 0, 0))
        with self.assertWarns(RuntimeWarning):
            Quaternion().inverted()


if __name__ == '__main__':
    unittest.main()
