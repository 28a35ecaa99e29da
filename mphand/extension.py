"""
Block-style command surface for the hand-pose sensing blocks.

Each method maps to one block. Arguments are accepted the way blocks pass
them (numbers may arrive as text) and coerced with mphand.cast.
"""
import logging
from typing import Any, Optional

from .cache import HandResultCache
from .cast import to_index, to_number, to_string
from .config import Cfg, default_config
from .detection import DetectionLoop
from .model_config import ModelConfigManager
from .oneshot import OneShotDetector
from .queries import NO_HAND, HandQueries
from .types import (
    ConfigStatus,
    CostumeTargetProto,
    DetectorProto,
    DisplayTargetProvider,
    RendererProto,
    VideoDeviceProto,
    VideoState,
)
from .video_display import VideoDisplaySync

logger = logging.getLogger(__name__)

EXTENSION_ID = "xcxMPHand"


class HandExtension:
    """
    Wires the detector, the devices and the cache together and exposes one
    method per block.
    """

    def __init__(self, detector: DetectorProto, video: VideoDeviceProto, renderer: RendererProto,
                 display_target: Optional[DisplayTargetProvider] = None, cfg: Optional[Cfg] = None):
        """
        Initialize the extension.

        Args:
            detector: Hand landmark detector
            video: Video capture device
            renderer: Stage renderer used for snapshots
            display_target: Returns the object holding the shared video
                transparency/state, or None when there is none
            cfg: Configuration; built-in defaults when None
        """
        self.cfg = cfg or default_config()
        self.cache = HandResultCache()
        self.display = VideoDisplaySync(video, display_target)
        self.loop = DetectionLoop(
            detector, video, self.cache, self.display,
            interval_ms=self.cfg.detection.interval_ms,
            frame_size=(self.cfg.stage.width, self.cfg.stage.height)
        )
        self.oneshot = OneShotDetector(detector, self.cache, renderer)
        self.model = ModelConfigManager.from_config(detector, self.cfg.model)
        self.queries = HandQueries(self.cache, self.cfg.stage)

    def on_project_loaded(self) -> None:
        """Push the stored display settings to the camera after a project load."""
        self.display.sync_display_to_device()

    # Detection loop

    def start_hand_detection(self) -> None:
        self.loop.start()

    def stop_hand_detection(self) -> None:
        self.loop.stop()

    def is_hand_detecting(self) -> bool:
        return self.loop.is_running()

    def get_detection_interval_time(self) -> float:
        return self.loop.interval_ms

    def set_detection_interval_time(self, time: Any) -> None:
        self.loop.interval_ms = to_number(time)

    # Video display

    def set_video_transparency(self, transparency: Any) -> None:
        self.display.apply_video_transparency(to_number(transparency))

    def video_toggle(self, video_state: Any) -> None:
        try:
            state = VideoState(to_string(video_state))
        except ValueError:
            logger.warning(f"Unknown video state: {video_state!r}")
            return
        self.display.video_toggle(state)

    def set_camera_direction(self, direction: Any) -> None:
        try:
            self.display.set_camera_direction(to_string(direction))
        except ValueError:
            logger.warning(f"Unknown camera direction: {direction!r}")

    # One-shot detection

    async def detect_hand_on_stage(self) -> str:
        return await self.oneshot.detect_from_display_snapshot()

    async def detect_hand_in_costume(self, costume: Any, target: CostumeTargetProto) -> str:
        return await self.oneshot.detect_from_named_image(to_string(costume), target)

    # Queries

    def number_of_hands(self) -> int:
        return self.queries.number_of_hands()

    def handedness(self, hand_number: Any) -> str:
        hand = to_index(hand_number)
        if hand is None:
            return NO_HAND
        return self.queries.handedness(hand)

    def handedness_score(self, hand_number: Any) -> float:
        hand = to_index(hand_number)
        if hand is None:
            return 0.0
        return self.queries.handedness_score(hand)

    def _indices(self, hand_number: Any, landmark: Any):
        return to_index(hand_number), to_index(landmark)

    def hand_landmark_x(self, hand_number: Any, landmark: Any) -> float:
        hand, index = self._indices(hand_number, landmark)
        if hand is None or index is None:
            return 0.0
        return self.queries.landmark_x(hand, index)

    def hand_landmark_y(self, hand_number: Any, landmark: Any) -> float:
        hand, index = self._indices(hand_number, landmark)
        if hand is None or index is None:
            return 0.0
        return self.queries.landmark_y(hand, index)

    def hand_landmark_z(self, hand_number: Any, landmark: Any) -> float:
        hand, index = self._indices(hand_number, landmark)
        if hand is None or index is None:
            return 0.0
        return self.queries.landmark_z(hand, index)

    def hand_landmark_relative_x(self, hand_number: Any, landmark: Any) -> float:
        hand, index = self._indices(hand_number, landmark)
        if hand is None or index is None:
            return 0.0
        return self.queries.relative_landmark_x(hand, index)

    def hand_landmark_relative_y(self, hand_number: Any, landmark: Any) -> float:
        hand, index = self._indices(hand_number, landmark)
        if hand is None or index is None:
            return 0.0
        return self.queries.relative_landmark_y(hand, index)

    def hand_landmark_relative_z(self, hand_number: Any, landmark: Any) -> float:
        hand, index = self._indices(hand_number, landmark)
        if hand is None or index is None:
            return 0.0
        return self.queries.relative_landmark_z(hand, index)

    # Model configuration

    async def set_model_path(self, path: Any) -> Optional[str]:
        """Returns the outcome message, or None when the path was blank."""
        result = await self.model.set_model_path(to_string(path))
        if result.status is ConfigStatus.INVALID_INPUT:
            return None
        return result.message

    def get_model_path(self) -> str:
        return self.model.get_model_path()

    async def set_num_hands(self, num: Any) -> Optional[str]:
        """Returns the outcome message, or None when num was below 1."""
        result = await self.model.set_num_hands(int(to_number(num)))
        if result.status is ConfigStatus.INVALID_INPUT:
            return None
        return result.message

    def get_num_hands(self) -> int:
        return self.model.get_num_hands()
