"""
Mock detector and devices for running without a camera or a model.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import numpy as np

from .imaging import encode_data_url
from .types import Category, DetectorError, HandFrameResult, Landmark, RunningMode, VideoState

logger = logging.getLogger(__name__)


_RIGHT_HAND = [
    (0.5, 0.6, 0.1),     # wrist
    (0.55, 0.58, 0.08),  # thumb
    (0.6, 0.56, 0.05),
    (0.65, 0.54, 0.02),
    (0.7, 0.52, -0.01),
    (0.53, 0.5, 0.03),   # index
    (0.57, 0.45, 0.0),
    (0.61, 0.42, -0.03),
    (0.65, 0.39, -0.05),
    (0.51, 0.52, 0.03),  # middle
    (0.54, 0.47, 0.0),
    (0.57, 0.44, -0.03),
    (0.6, 0.41, -0.05),
    (0.49, 0.54, 0.03),  # ring
    (0.51, 0.49, 0.0),
    (0.53, 0.46, -0.03),
    (0.55, 0.43, -0.05),
    (0.47, 0.56, 0.03),  # pinky
    (0.48, 0.51, 0.0),
    (0.49, 0.48, -0.03),
    (0.5, 0.45, -0.05),
]


def _mirror(points: List[Tuple[float, float, float]], axis: float) -> List[Tuple[float, float, float]]:
    return [(round(2 * axis - x, 4), y, z) for x, y, z in points]


def _world_hand(sign: float) -> Tuple[Landmark, ...]:
    return tuple(
        Landmark(
            x=sign * (0.01 - i * 0.001),
            y=-0.01 - (i % 5) * 0.002,
            z=-0.005 - (i // 5) * 0.002
        )
        for i in range(21)
    )


def sample_hands() -> HandFrameResult:
    """Two hands: a right hand first, then a left hand."""
    left = _mirror(_RIGHT_HAND, 0.4)
    return HandFrameResult(
        handedness=(Category("Right", 0.95), Category("Left", 0.92)),
        landmarks=(
            tuple(Landmark(*p) for p in _RIGHT_HAND),
            tuple(Landmark(*p) for p in left),
        ),
        world_landmarks=(_world_hand(1.0), _world_hand(-1.0))
    )


class MockDetector:
    """
    Detector that returns canned results.

    ``result`` is returned by every detect() call; ``error`` (when set) is
    raised instead. ``gate`` (when set) is awaited before returning so tests
    can hold a call in flight.
    """

    def __init__(self, result: Optional[HandFrameResult] = None):
        self.result = result if result is not None else sample_hands()
        self.error: Optional[Exception] = None
        self.gate: Optional[asyncio.Event] = None
        self.reconfigure_error: Optional[Exception] = None
        self.model_path: Optional[str] = None
        self.max_num_hands: Optional[int] = None
        self.detect_count = 0
        self.reconfigure_count = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self.running_modes: List[RunningMode] = []

    async def detect(self, image: np.ndarray, running_mode: RunningMode = "IMAGE") -> HandFrameResult:
        self.detect_count += 1
        self.running_modes.append(running_mode)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.gate is not None:
                await self.gate.wait()
            else:
                await asyncio.sleep(0)
            if self.error is not None:
                raise self.error
            return self.result
        finally:
            self.in_flight -= 1

    async def reconfigure(self, model_path: str, max_num_hands: int) -> None:
        self.reconfigure_count += 1
        await asyncio.sleep(0)
        if self.reconfigure_error is not None:
            raise self.reconfigure_error
        self.model_path = model_path
        self.max_num_hands = max_num_hands

    def clear_hands(self) -> None:
        """Simulate no hands in view."""
        self.result = HandFrameResult.empty()

    def fail_with(self, message: str = "mock detector failure") -> None:
        self.error = DetectorError(message)


class MockVideoDevice:
    """Video device that serves a blank frame and records calls."""

    def __init__(self, frame: Optional[np.ndarray] = None):
        self.mirror = False
        self.enabled = False
        self.ghost: Optional[float] = None
        self.frame_available = True
        self.enable_count = 0
        self.disable_count = 0
        self.frame_requests: List[Tuple[str, Tuple[int, int]]] = []
        self._frame = frame

    def enable(self) -> None:
        self.enable_count += 1
        self.enabled = True
        logger.debug(f"[MockVideoDevice] enable (call #{self.enable_count})")

    def disable(self) -> None:
        self.disable_count += 1
        self.enabled = False
        logger.debug(f"[MockVideoDevice] disable (call #{self.disable_count})")

    def get_frame(self, fmt: str, size: Tuple[int, int]) -> Optional[np.ndarray]:
        self.frame_requests.append((fmt, size))
        if not self.frame_available:
            return None
        if self._frame is not None:
            return self._frame
        width, height = size
        return np.zeros((height, width, 3), dtype=np.uint8)

    def apply_ghost(self, value: float) -> None:
        self.ghost = value

    def reset_counters(self) -> None:
        self.enable_count = 0
        self.disable_count = 0
        self.frame_requests.clear()


class MockRenderer:
    """Renderer whose snapshot is a plain grey image (or ``data_url``)."""

    def __init__(self, data_url: Optional[str] = None):
        self.data_url = data_url or encode_data_url(np.full((360, 480, 3), 128, dtype=np.uint8))
        self.snapshot_count = 0

    def request_snapshot(self, callback: Callable[[str], object]) -> None:
        self.snapshot_count += 1
        callback(self.data_url)


@dataclass
class MockStage:
    """Display target holding the shared video state."""
    transparency: float = 50
    state: VideoState = VideoState.OFF


class MockCostume:
    def __init__(self, name: str, data_url: Optional[str] = None):
        self.name = name
        self.data_url = data_url or encode_data_url(np.full((120, 160, 3), 200, dtype=np.uint8))

    def to_data_url(self, fmt: str = "png") -> str:
        return self.data_url


class MockTarget:
    def __init__(self, costumes: List[MockCostume]):
        self.costumes = costumes

    def get_costumes(self) -> List[MockCostume]:
        return self.costumes
