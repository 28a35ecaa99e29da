"""
Test cases for the polling detection loop.
"""
import asyncio
import unittest

from mphand.cache import HandResultCache
from mphand.detection import DetectionLoop, LoopPhase
from mphand.devices_mock import MockDetector, MockStage, MockVideoDevice, sample_hands
from mphand.types import VideoState
from mphand.video_display import VideoDisplaySync


async def wait_until(predicate, timeout: float = 1.0):
    """Poll until predicate() is true or fail after timeout seconds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not met before timeout")
        await asyncio.sleep(0.001)


class TestDetectionLoop(unittest.IsolatedAsyncioTestCase):
    """Test start/stop and the detection cycle."""

    async def asyncSetUp(self):
        """Set up a loop with mock devices and no polling delay."""
        self.detector = MockDetector()
        self.video = MockVideoDevice()
        self.stage = MockStage()
        self.cache = HandResultCache()
        self.display = VideoDisplaySync(self.video, lambda: self.stage)
        self.loop = DetectionLoop(self.detector, self.video, self.cache, self.display, interval_ms=0)

    async def asyncTearDown(self):
        self.loop.stop()
        if self.detector.gate is not None:
            self.detector.gate.set()
        await asyncio.sleep(0.01)

    def test_defaults(self):
        """Test a fresh loop is idle with a 100ms interval."""
        loop = DetectionLoop(self.detector, self.video, self.cache, self.display)
        self.assertFalse(loop.is_running())
        self.assertEqual(loop.interval_ms, 100)
        self.assertEqual(loop.phase, LoopPhase.IDLE)

    def test_interval_clamped(self):
        """Test that negative intervals clamp to 0."""
        self.loop.interval_ms = 200
        self.assertEqual(self.loop.interval_ms, 200)
        self.loop.interval_ms = -5
        self.assertEqual(self.loop.interval_ms, 0)

    async def test_start_turns_camera_on(self):
        """Test that starting with the display off enables a mirrored camera."""
        self.loop.start()
        self.assertTrue(self.loop.is_running())
        self.assertEqual(self.video.enable_count, 1)
        self.assertTrue(self.video.mirror)
        self.assertEqual(self.stage.state, VideoState.ON)

    async def test_start_twice_enables_once(self):
        """Test that a second start() has no side effects."""
        self.loop.start()
        self.loop.start()
        self.assertEqual(self.video.enable_count, 1)

    async def test_start_with_display_on(self):
        """Test that the camera is left alone when the display is already on."""
        self.stage.state = VideoState.ON_FLIPPED
        self.loop.start()
        self.assertEqual(self.video.enable_count, 0)
        self.assertFalse(self.video.mirror)
        self.assertEqual(self.stage.state, VideoState.ON_FLIPPED)

    async def test_cycle_fills_cache(self):
        """Test that a cycle stores the detected hands."""
        self.loop.start()
        await wait_until(lambda: self.cache.num_hands == 2)
        self.assertEqual(self.video.frame_requests[0], ("image-data", (480, 360)))
        self.assertEqual(self.detector.running_modes[0], "VIDEO")

    async def test_zero_hands_clears_cache(self):
        """Test that an empty detection clears the previous result."""
        self.loop.start()
        await wait_until(lambda: self.cache.num_hands == 2)
        self.detector.clear_hands()
        await wait_until(lambda: self.cache.num_hands == 0)
        self.assertTrue(self.loop.is_running())

    async def test_failure_keeps_previous_result(self):
        """Test that a detector error is survived and the cache is kept."""
        self.loop.start()
        await wait_until(lambda: self.cache.num_hands == 2)
        self.detector.fail_with("model exploded")
        count = self.detector.detect_count
        await wait_until(lambda: self.detector.detect_count >= count + 3)
        self.assertTrue(self.loop.is_running())
        self.assertEqual(self.cache.num_hands, 2)
        self.assertGreaterEqual(self.loop.failures, 1)
        self.assertEqual(self.loop.last_error, "model exploded")

    async def test_no_frame_skips_detector(self):
        """Test that cycles without a frame do not call the detector."""
        self.video.frame_available = False
        self.loop.start()
        await wait_until(lambda: len(self.video.frame_requests) >= 3)
        self.assertEqual(self.detector.detect_count, 0)

        self.video.frame_available = True
        await wait_until(lambda: self.detector.detect_count >= 1)

    async def test_stop_clears_cache_and_halts(self):
        """Test that stop() empties the cache and no new cycle starts."""
        self.loop.start()
        await wait_until(lambda: self.cache.num_hands == 2)
        self.loop.stop()
        self.assertFalse(self.loop.is_running())
        self.assertEqual(self.cache.num_hands, 0)
        self.assertEqual(self.loop.phase, LoopPhase.IDLE)

        count = self.detector.detect_count
        await asyncio.sleep(0.02)
        self.assertEqual(self.detector.detect_count, count)

    def test_stop_when_idle(self):
        """Test that stop() on an idle loop is harmless."""
        self.cache.replace(sample_hands())
        self.loop.stop()
        self.loop.stop()
        self.assertFalse(self.loop.is_running())
        self.assertEqual(self.cache.num_hands, 0)

    async def test_result_after_stop_is_discarded(self):
        """Test that a call resolving after stop() never writes the cache."""
        self.detector.gate = asyncio.Event()
        self.loop.start()
        await wait_until(lambda: self.detector.in_flight == 1)
        self.assertEqual(self.loop.phase, LoopPhase.IN_FLIGHT)

        self.loop.stop()
        self.detector.gate.set()
        await wait_until(lambda: self.detector.in_flight == 0)
        await asyncio.sleep(0.01)

        self.assertEqual(self.cache.num_hands, 0)
        self.assertEqual(self.detector.detect_count, 1)

    async def test_one_call_in_flight(self):
        """Test that a slow detector never has overlapping calls."""
        self.detector.gate = asyncio.Event()
        self.loop.start()
        await wait_until(lambda: self.detector.in_flight == 1)
        await asyncio.sleep(0.02)
        self.assertEqual(self.detector.detect_count, 1)

        self.detector.gate.set()
        await wait_until(lambda: self.detector.detect_count >= 3)
        self.assertEqual(self.detector.max_in_flight, 1)

    async def test_restart_waits_for_pending_call(self):
        """Test that stop() then start() never overlaps with a pending call."""
        self.detector.gate = asyncio.Event()
        self.loop.start()
        await wait_until(lambda: self.detector.in_flight == 1)

        self.loop.stop()
        self.loop.start()
        await asyncio.sleep(0.05)
        self.assertEqual(self.detector.detect_count, 1)
        self.assertEqual(self.detector.max_in_flight, 1)

        self.detector.gate.set()
        await wait_until(lambda: self.detector.detect_count >= 3)
        self.assertEqual(self.detector.max_in_flight, 1)
        await wait_until(lambda: self.cache.num_hands == 2)

    async def test_restart_after_stop(self):
        """Test that the loop can be started again after stopping."""
        self.loop.start()
        await wait_until(lambda: self.cache.num_hands == 2)
        self.loop.stop()
        self.loop.start()
        self.assertTrue(self.loop.is_running())
        await wait_until(lambda: self.cache.num_hands == 2)

    async def test_snapshot(self):
        self.loop.start()
        await wait_until(lambda: self.loop.cycles >= 1)
        snap = self.loop.snapshot()
        self.assertTrue(snap.running)
        self.assertEqual(snap.interval_ms, 0)
        self.assertGreaterEqual(snap.cycles, 1)


class TestStartOutsideEventLoop(unittest.TestCase):

    def test_start_without_loop_leaves_state_untouched(self):
        """Test that a failed start() can be retried later."""
        video = MockVideoDevice()
        stage = MockStage()
        cache = HandResultCache()
        loop = DetectionLoop(MockDetector(), video, cache, VideoDisplaySync(video, lambda: stage))

        with self.assertRaises(RuntimeError):
            loop.start()
        self.assertFalse(loop.is_running())
        self.assertEqual(loop.phase, LoopPhase.IDLE)
        self.assertEqual(stage.state, VideoState.OFF)
        self.assertEqual(video.enable_count, 0)
        self.assertFalse(video.mirror)


if __name__ == '__main__':
    unittest.main()
