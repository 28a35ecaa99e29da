"""
Polling detection loop that keeps the hand result cache up to date.
"""
import asyncio
import logging
from enum import Enum
from typing import Optional, Tuple

from .cache import HandResultCache
from .imaging import DETECTION_SIZE
from .types import DetectorProto, SessionSnapshot, VideoDeviceProto, VideoState
from .video_display import VideoDisplaySync

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MS = 100.0


class LoopPhase(str, Enum):
    IDLE = "idle"
    SCHEDULED = "scheduled"
    IN_FLIGHT = "in_flight"


class DetectionLoop:
    """
    Repeatedly grabs a video frame, runs the detector on it and stores the
    result in the cache.

    Features:
    - One detector call in flight at a time; the next cycle is scheduled
      only after the previous call settles, and the first cycle after a
      restart waits for a call left over from the stopped session
    - Detector failures are logged and the previous result is kept
    - Cooperative stop: every session gets a generation number, checked
      before scheduling and again before committing a result, so a call
      that resolves after stop() never writes the cache
    """

    def __init__(self, detector: DetectorProto, video: VideoDeviceProto, cache: HandResultCache,
                 display: VideoDisplaySync, interval_ms: float = DEFAULT_INTERVAL_MS,
                 frame_size: Tuple[int, int] = DETECTION_SIZE):
        self.detector = detector
        self.video = video
        self.cache = cache
        self.display = display
        self.frame_size = frame_size
        self._interval_ms = max(0.0, float(interval_ms))

        self._running = False
        self._generation = 0
        self._phase = LoopPhase.IDLE
        self._timer: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task] = None

        self.cycles = 0
        self.failures = 0
        self.last_error: Optional[str] = None

    @property
    def interval_ms(self) -> float:
        return self._interval_ms

    @interval_ms.setter
    def interval_ms(self, value: float) -> None:
        # applies from the next scheduled cycle
        self._interval_ms = max(0.0, float(value))

    @property
    def phase(self) -> LoopPhase:
        return self._phase

    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """
        Start polling. Turns the camera on (mirrored) when the display is off.
        Calling start() while running does nothing.
        """
        if self._running:
            return
        # raises before any side effect when called outside an event loop
        asyncio.get_running_loop()

        if self.display.state is VideoState.OFF:
            self.display.state = VideoState.ON
            self.video.enable()
            self.video.mirror = True

        self._running = True
        self._generation += 1
        logger.info(f"🖐 Hand detection started (interval={self._interval_ms}ms)")
        self._schedule(self._generation)

    def stop(self) -> None:
        """Stop polling and clear the cache. Safe to call when stopped."""
        was_running = self._running
        self._running = False
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._phase = LoopPhase.IDLE
        self.cache.clear()
        if was_running:
            logger.info("Hand detection stopped")

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            running=self._running,
            interval_ms=self._interval_ms,
            phase=self._phase.value,
            cycles=self.cycles,
            failures=self.failures,
            last_error=self.last_error
        )

    def _is_current(self, generation: int) -> bool:
        return self._running and generation == self._generation

    def _schedule(self, generation: int) -> None:
        if not self._is_current(generation):
            return
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._interval_ms / 1000.0, self._fire, generation)
        self._phase = LoopPhase.SCHEDULED

    def _fire(self, generation: int) -> None:
        if not self._is_current(generation):
            return
        self._timer = None
        previous = self._task
        self._task = asyncio.ensure_future(self._run_cycle(generation, previous))

    async def _run_cycle(self, generation: int, previous: Optional[asyncio.Task] = None) -> None:
        if previous is not None and not previous.done():
            # a call from a stopped session is still pending
            await asyncio.wait([previous])
        if not self._is_current(generation):
            return

        try:
            image = self.video.get_frame("image-data", self.frame_size)
        except Exception as e:
            logger.error(f"❌ Error reading video frame: {e}")
            image = None

        if image is None:
            self._schedule(generation)
            return

        self._phase = LoopPhase.IN_FLIGHT
        try:
            result = await self.detector.detect(image, "VIDEO")
        except Exception as e:
            self.failures += 1
            self.last_error = str(e)
            logger.error(f"❌ Error detecting hand: {e}")
        else:
            if self._is_current(generation):
                # an empty result clears the cache
                self.cache.replace(result if result.num_hands > 0 else None)
            else:
                logger.debug("Discarding detection result that resolved after stop")
        finally:
            self.cycles += 1
            self._schedule(generation)
