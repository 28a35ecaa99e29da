"""
Test cases for landmark and handedness queries over the result cache.
"""
import unittest

from mphand.cache import HandResultCache
from mphand.devices_mock import sample_hands
from mphand.queries import HandQueries
from mphand.types import Category, HandFrameResult, Landmark


class TestHandFrameResult(unittest.TestCase):
    """Test the result invariants."""

    def test_empty_result(self):
        """Test that the empty result has no hands."""
        result = HandFrameResult.empty()
        self.assertEqual(result.num_hands, 0)
        self.assertTrue(result.is_empty())

    def test_mismatched_lengths_rejected(self):
        """Test that a partially populated result cannot be built."""
        hand = tuple(Landmark(0.5, 0.5, 0.0) for _ in range(21))
        with self.assertRaises(ValueError):
            HandFrameResult(handedness=(Category("Left", 0.9),), landmarks=(hand,), world_landmarks=())

    def test_wrong_landmark_count_rejected(self):
        """Test that each hand must have exactly 21 landmarks."""
        short = tuple(Landmark(0.5, 0.5, 0.0) for _ in range(20))
        with self.assertRaises(ValueError):
            HandFrameResult(handedness=(Category("Left", 0.9),), landmarks=(short,), world_landmarks=(short,))


class TestHandQueries(unittest.TestCase):
    """Test queries with two cached hands."""

    def setUp(self):
        """Cache the two-hand sample."""
        self.cache = HandResultCache()
        self.data = sample_hands()
        self.cache.replace(self.data)
        self.queries = HandQueries(self.cache)

    def test_number_of_hands(self):
        self.assertEqual(self.queries.number_of_hands(), 2)

    def test_handedness(self):
        """Test that hand numbers are 1-based."""
        self.assertEqual(self.queries.handedness(1), "Right")
        self.assertEqual(self.queries.handedness(2), "Left")

    def test_handedness_score(self):
        self.assertAlmostEqual(self.queries.handedness_score(1), 0.95)
        self.assertEqual(self.queries.handedness_score(3), 0.0)

    def test_wrist_scenario(self):
        """Test right wrist at (0.5, 0.6, 0.1) in display space."""
        self.assertAlmostEqual(self.queries.landmark_x(1, 0), 0.0)
        self.assertAlmostEqual(self.queries.landmark_y(1, 0), -36.0)
        self.assertAlmostEqual(self.queries.landmark_z(1, 0), 20.0)

    def test_display_space_formulas(self):
        """Test every landmark of both hands against the conversion formulas."""
        for hand in (1, 2):
            for index in range(21):
                lm = self.data.landmarks[hand - 1][index]
                self.assertAlmostEqual(self.queries.landmark_x(hand, index), (lm.x - 0.5) * 480)
                self.assertAlmostEqual(self.queries.landmark_y(hand, index), (0.5 - lm.y) * 360)
                self.assertAlmostEqual(self.queries.landmark_z(hand, index), lm.z * 200)

    def test_relative_coordinates(self):
        """Test world landmarks pass through with Y inverted."""
        for hand in (1, 2):
            for index in (0, 4, 8, 20):
                lm = self.data.world_landmarks[hand - 1][index]
                self.assertEqual(self.queries.relative_landmark_x(hand, index), lm.x)
                self.assertEqual(self.queries.relative_landmark_y(hand, index), -lm.y)
                self.assertEqual(self.queries.relative_landmark_z(hand, index), lm.z)

    def test_out_of_range_hand(self):
        """Test that hand numbers outside [1, count] give empty values."""
        for hand in (0, -1, 3, 10):
            self.assertEqual(self.queries.handedness(hand), " ")
            self.assertEqual(self.queries.landmark_x(hand, 0), 0)
            self.assertEqual(self.queries.landmark_y(hand, 0), 0)
            self.assertEqual(self.queries.landmark_z(hand, 0), 0)
            self.assertEqual(self.queries.relative_landmark_x(hand, 0), 0)
            self.assertEqual(self.queries.relative_landmark_y(hand, 0), 0)
            self.assertEqual(self.queries.relative_landmark_z(hand, 0), 0)

    def test_out_of_range_landmark(self):
        """Test that landmark indices outside 0-20 give 0."""
        for index in (-1, 21, 25):
            self.assertEqual(self.queries.landmark_x(1, index), 0)
            self.assertEqual(self.queries.relative_landmark_x(1, index), 0)

    def test_last_landmark_is_valid(self):
        lm = self.data.landmarks[0][20]
        self.assertAlmostEqual(self.queries.landmark_x(1, 20), (lm.x - 0.5) * 480)


class TestEmptyCache(unittest.TestCase):
    """Test queries with nothing cached."""

    def test_empty_values(self):
        queries = HandQueries(HandResultCache())
        self.assertEqual(queries.number_of_hands(), 0)
        self.assertEqual(queries.handedness(1), " ")
        self.assertEqual(queries.landmark_x(1, 0), 0)
        self.assertEqual(queries.relative_landmark_y(1, 0), 0)

    def test_clear_after_replace(self):
        """Test that clearing drops every hand."""
        cache = HandResultCache()
        cache.replace(sample_hands())
        cache.clear()
        queries = HandQueries(cache)
        self.assertEqual(queries.number_of_hands(), 0)
        self.assertEqual(queries.landmark_z(1, 0), 0)

    def test_replace_with_none(self):
        cache = HandResultCache()
        cache.replace(sample_hands())
        cache.replace(None)
        self.assertEqual(cache.num_hands, 0)


if __name__ == '__main__':
    unittest.main()
