"""
Type definitions for the hand-pose sensing blocks.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Literal, Optional, Protocol, Tuple, runtime_checkable

import numpy as np


NUM_LANDMARKS = 21

RunningMode = Literal["IMAGE", "VIDEO"]


class DetectorError(Exception):
    """Raised by a detector when inference fails."""


class ImageDecodeError(ValueError):
    """Raised when an encoded image cannot be decoded into pixels."""


class VideoState(str, Enum):
    """States the shared video display can be set to."""
    OFF = "off"
    ON = "on"  # mirrored preview
    ON_FLIPPED = "on-flipped"


class CameraDirection(str, Enum):
    MIRRORED = "mirrored"
    FLIPPED = "flipped"


@dataclass(frozen=True)
class Landmark:
    """One landmark coordinate."""
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class Category:
    """Handedness classification of one hand."""
    label: Literal["Left", "Right"]
    score: float


@dataclass(frozen=True)
class HandFrameResult:
    """
    Snapshot of one detection.

    ``landmarks`` are normalized image coordinates (x, y in [0..1], z relative
    depth). ``world_landmarks`` are metric coordinates centred on the hand.
    All three sequences hold one entry per detected hand.
    """
    handedness: Tuple[Category, ...] = ()
    landmarks: Tuple[Tuple[Landmark, ...], ...] = ()
    world_landmarks: Tuple[Tuple[Landmark, ...], ...] = ()

    def __post_init__(self):
        if not (len(self.handedness) == len(self.landmarks) == len(self.world_landmarks)):
            raise ValueError(
                f"Inconsistent hand counts: handedness={len(self.handedness)}, "
                f"landmarks={len(self.landmarks)}, world_landmarks={len(self.world_landmarks)}"
            )
        for hand in (*self.landmarks, *self.world_landmarks):
            if len(hand) != NUM_LANDMARKS:
                raise ValueError(f"Expected {NUM_LANDMARKS} landmarks per hand, got {len(hand)}")

    @classmethod
    def empty(cls) -> "HandFrameResult":
        return cls()

    @property
    def num_hands(self) -> int:
        return len(self.handedness)

    def is_empty(self) -> bool:
        return self.num_hands == 0


class ConfigStatus(str, Enum):
    SUCCESS = "success"
    REJECTED = "rejected"
    INVALID_INPUT = "invalid_input"


@dataclass(frozen=True)
class ConfigResult:
    """Outcome of a model configuration change."""
    status: ConfigStatus
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is ConfigStatus.SUCCESS

    @classmethod
    def success(cls, message: str) -> "ConfigResult":
        return cls(ConfigStatus.SUCCESS, message)

    @classmethod
    def rejected(cls, message: str) -> "ConfigResult":
        return cls(ConfigStatus.REJECTED, message)

    @classmethod
    def invalid_input(cls) -> "ConfigResult":
        return cls(ConfigStatus.INVALID_INPUT)


@runtime_checkable
class DetectorProto(Protocol):
    """Abstract protocol for hand landmark detectors."""

    async def detect(self, image: np.ndarray, running_mode: RunningMode = "IMAGE") -> HandFrameResult:
        """Detect hands in an RGB image. Raises DetectorError on failure."""
        ...

    async def reconfigure(self, model_path: str, max_num_hands: int) -> None:
        """Replace the live detector with one built from the given settings."""
        ...


@runtime_checkable
class VideoDeviceProto(Protocol):
    """Abstract protocol for the video capture device."""
    mirror: bool

    def enable(self) -> None:
        ...

    def disable(self) -> None:
        ...

    def get_frame(self, fmt: str, size: Tuple[int, int]) -> Optional[np.ndarray]:
        """Return the current frame resized to ``size`` or None when unavailable."""
        ...

    def apply_ghost(self, value: float) -> None:
        """Apply preview transparency (0..100)."""
        ...


@runtime_checkable
class RendererProto(Protocol):
    """Abstract protocol for the renderer that takes stage snapshots."""

    def request_snapshot(self, callback: Callable[[str], Any]) -> None:
        """Deliver one data URL of the rendered stage to ``callback``."""
        ...


@runtime_checkable
class CostumeProto(Protocol):
    name: str

    def to_data_url(self, fmt: str = "png") -> str:
        ...


@runtime_checkable
class CostumeTargetProto(Protocol):
    """A sprite-like target owning a list of named images."""

    def get_costumes(self) -> List[CostumeProto]:
        ...


@runtime_checkable
class DisplayTargetProto(Protocol):
    """Shared display state owned outside this package."""
    transparency: float
    state: VideoState


DisplayTargetProvider = Callable[[], Optional[DisplayTargetProto]]


@dataclass
class SessionSnapshot:
    """Read-only view of the detection session, for status displays."""
    running: bool
    interval_ms: float
    phase: str
    cycles: int = 0
    failures: int = 0
    last_error: Optional[str] = field(default=None)
