"""Tests for the RegionModel."""

import math
import random
import unittest
from unittest.mock import Mock

from cliptrimmer.region import Region, RegionModel


class TestRegionModelInitialState(unittest.TestCase):
    def test_provisional_region(self):
        model = RegionModel()
        self.assertEqual(model.region, Region(0.0, 30.0))
        self.assertIsNone(model.duration)
        self.assertFalse(model.has_duration)

    def test_custom_provisional_end(self):
        model = RegionModel(12.5)
        self.assertEqual(model.end, 12.5)

    def test_invalid_provisional_end(self):
        for value in (0, -1, float("nan"), float("inf")):
            with self.assertRaises(ValueError):
                RegionModel(value)


class TestSetDuration(unittest.TestCase):
    def setUp(self):
        self.model = RegionModel()

    def test_clamps_end(self):
        self.assertTrue(self.model.set_duration(20.0))
        self.assertEqual(self.model.region, Region(0.0, 20.0))

    def test_keeps_end_within_duration(self):
        self.assertTrue(self.model.set_duration(42.0))
        self.assertEqual(self.model.region, Region(0.0, 30.0))
        self.assertEqual(self.model.duration, 42.0)

    def test_resets_start_when_collapsed(self):
        self.model.set_region(25.0, 30.0)
        self.assertTrue(self.model.set_duration(20.0))
        self.assertEqual(self.model.region, Region(0.0, 20.0))

    def test_rejects_invalid(self):
        for value in (0, -5, float("nan"), float("inf"), None, "10"):
            self.assertFalse(self.model.set_duration(value))
        self.assertIsNone(self.model.duration)


class TestMutators(unittest.TestCase):
    def setUp(self):
        self.model = RegionModel()
        self.model.set_duration(60.0)
        self.listener = Mock()
        self.model.add_listener(self.listener)

    def test_set_start(self):
        self.assertTrue(self.model.set_start(5.0))
        self.assertEqual(self.model.start, 5.0)
        self.listener.assert_called_once_with(Region(5.0, 30.0))

    def test_negative_zero_start_is_normalized(self):
        self.model.set_start(5.0)
        self.assertTrue(self.model.set_start(-0.0))
        self.assertEqual(math.copysign(1.0, self.model.start), 1.0)

    def test_set_start_rejects_out_of_range(self):
        self.assertFalse(self.model.set_start(-1.0))
        self.assertFalse(self.model.set_start(30.0))
        self.assertFalse(self.model.set_start(45.0))
        self.assertEqual(self.model.start, 0.0)
        self.listener.assert_not_called()

    def test_set_end(self):
        self.assertTrue(self.model.set_end(50.0))
        self.assertEqual(self.model.end, 50.0)

    def test_set_end_rejects_out_of_range(self):
        self.model.set_start(10.0)
        self.listener.reset_mock()
        self.assertFalse(self.model.set_end(10.0))
        self.assertFalse(self.model.set_end(5.0))
        self.assertFalse(self.model.set_end(61.0))
        self.listener.assert_not_called()

    def test_set_region_reversed_is_rejected(self):
        self.assertFalse(self.model.set_region(10.0, 5.0))
        self.assertEqual(self.model.region, Region(0.0, 30.0))
        self.listener.assert_not_called()

    def test_set_region_degenerate_is_rejected(self):
        self.assertFalse(self.model.set_region(10.0, 10.0))

    def test_set_region_beyond_duration_is_rejected(self):
        self.assertFalse(self.model.set_region(10.0, 61.0))

    def test_set_region_is_atomic(self):
        # Would be invalid if applied one bound at a time
        self.model.set_region(5.0, 10.0)
        self.assertTrue(self.model.set_region(40.0, 50.0))
        self.assertEqual(self.model.region, Region(40.0, 50.0))

    def test_set_region_idempotent(self):
        self.assertTrue(self.model.set_region(5.0, 20.0))
        self.assertTrue(self.model.set_region(5.0, 20.0))
        self.assertEqual(self.model.region, Region(5.0, 20.0))

    def test_non_finite_values_rejected(self):
        self.assertFalse(self.model.set_start(float("nan")))
        self.assertFalse(self.model.set_end(float("inf")))
        self.assertFalse(self.model.set_region(float("nan"), 10.0))

    def test_end_unbounded_without_duration(self):
        model = RegionModel()
        self.assertTrue(model.set_end(500.0))

    def test_remove_listener(self):
        self.model.remove_listener(self.listener)
        self.model.set_start(1.0)
        self.listener.assert_not_called()


class TestNudge(unittest.TestCase):
    def setUp(self):
        self.model = RegionModel()
        self.model.set_duration(40.0)

    def test_nudge_start(self):
        self.assertTrue(self.model.nudge_start(0.1))
        self.assertAlmostEqual(self.model.start, 0.1)

    def test_nudge_start_clamped_at_zero(self):
        self.assertFalse(self.model.nudge_start(-0.1))
        self.assertEqual(self.model.start, 0.0)

    def test_nudge_start_keeps_gap(self):
        self.model.set_region(9.95, 10.0)
        self.assertTrue(self.model.nudge_start(-0.01))
        self.model.set_region(5.0, 10.0)
        self.model.nudge_start(100.0)
        self.assertAlmostEqual(self.model.start, 9.9)
        self.assertLess(self.model.start, self.model.end)

    def test_nudge_end_clamped_at_duration(self):
        self.model.set_end(39.95)
        self.assertTrue(self.model.nudge_end(0.1))
        self.assertEqual(self.model.end, 40.0)
        self.assertFalse(self.model.nudge_end(0.1))

    def test_nudge_end_keeps_gap(self):
        self.model.set_region(10.0, 12.0)
        self.model.nudge_end(-100.0)
        self.assertAlmostEqual(self.model.end, 10.1)


class TestReset(unittest.TestCase):
    def test_reset(self):
        model = RegionModel()
        model.set_duration(10.0)
        model.set_region(2.0, 3.0)
        model.reset(15.0)
        self.assertEqual(model.region, Region(0.0, 15.0))
        self.assertIsNone(model.duration)


class TestRandomizedSequences(unittest.TestCase):
    """Random mutation sequences never break the region invariant."""

    def _check(self, model):
        self.assertGreaterEqual(model.start, 0.0)
        self.assertLess(model.start, model.end)
        if model.duration is not None:
            self.assertLessEqual(model.end, model.duration)
        self.assertTrue(math.isfinite(model.start) and math.isfinite(model.end))

    def test_invariant_holds(self):
        rng = random.Random(1234)
        values = [-10.0, 0.0, 0.05, 1.0, 29.9, 30.0, 59.0, 120.0, float("nan")]

        for _ in range(50):
            model = RegionModel()
            for _ in range(200):
                op = rng.randrange(6)
                a = rng.choice(values + [rng.uniform(-5, 130)])
                b = rng.choice(values + [rng.uniform(-5, 130)])
                if op == 0:
                    model.set_duration(a)
                elif op == 1:
                    model.set_start(a)
                elif op == 2:
                    model.set_end(a)
                elif op == 3:
                    model.set_region(a, b)
                elif op == 4:
                    model.nudge_start(rng.choice([-0.1, 0.1, a]))
                else:
                    model.nudge_end(rng.choice([-0.1, 0.1, a]))
                self._check(model)


if __name__ == "__main__":
    unittest.main()
