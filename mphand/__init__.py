"""
Hand-Pose Sensing Blocks

Keeps the latest MediaPipe hand landmark result for a block-programming
environment: a polling detection loop, one-shot detection on stage snapshots
and costumes, and bounds-safe landmark/handedness queries.
"""

__version__ = "0.1.0"
__author__ = "Hand-Pose Sensing Blocks Team"

from .types import (
    Category,
    CameraDirection,
    ConfigResult,
    ConfigStatus,
    DetectorError,
    DetectorProto,
    HandFrameResult,
    Landmark,
    VideoDeviceProto,
    VideoState,
)
from .config import load_config, Cfg
from .cache import HandResultCache
from .detection import DetectionLoop, LoopPhase
from .oneshot import OneShotDetector
from .model_config import ModelConfigManager
from .video_display import VideoDisplaySync
from .queries import HandQueries
from .extension import HandExtension

__all__ = [
    "Category",
    "CameraDirection",
    "ConfigResult",
    "ConfigStatus",
    "DetectorError",
    "DetectorProto",
    "HandFrameResult",
    "Landmark",
    "VideoDeviceProto",
    "VideoState",
    "load_config",
    "Cfg",
    "HandResultCache",
    "DetectionLoop",
    "LoopPhase",
    "OneShotDetector",
    "ModelConfigManager",
    "VideoDisplaySync",
    "HandQueries",
    "HandExtension",
]
