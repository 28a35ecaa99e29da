"""
Keeps the shared video display state and the video device in step.
"""
import logging
from typing import Optional, Union

from .types import CameraDirection, DisplayTargetProto, DisplayTargetProvider, VideoDeviceProto, VideoState

logger = logging.getLogger(__name__)

DEFAULT_TRANSPARENCY = 50.0
DEFAULT_STATE = VideoState.OFF


class VideoDisplaySync:
    """
    Proxy for the transparency/state record owned by the display target.

    The target is looked up through an injected provider on every access so
    that a target created or replaced later is picked up. Without a target,
    reads return the defaults and writes are dropped.
    """

    def __init__(self, video: VideoDeviceProto, display_target: Optional[DisplayTargetProvider] = None):
        self.video = video
        self._display_target = display_target or (lambda: None)

    def _target(self) -> Optional[DisplayTargetProto]:
        return self._display_target()

    @property
    def transparency(self) -> float:
        target = self._target()
        if target is None:
            return DEFAULT_TRANSPARENCY
        return target.transparency

    @transparency.setter
    def transparency(self, value: float) -> None:
        target = self._target()
        if target is not None:
            target.transparency = value

    @property
    def state(self) -> VideoState:
        target = self._target()
        if target is None:
            return DEFAULT_STATE
        return VideoState(target.state)

    @state.setter
    def state(self, value: Union[VideoState, str]) -> None:
        target = self._target()
        if target is not None:
            target.state = VideoState(value)

    def apply_video_transparency(self, value: float) -> None:
        """Store the transparency and apply it to the capture preview."""
        self.transparency = value
        self.video.apply_ghost(value)

    def video_toggle(self, state: Union[VideoState, str]) -> None:
        """Store the display state and switch the device to match."""
        state = VideoState(state)
        self.state = state
        if state is VideoState.OFF:
            self.video.disable()
        else:
            self.video.enable()
            self.video.mirror = state is VideoState.ON

    def set_camera_direction(self, direction: Union[CameraDirection, str]) -> None:
        """
        Set the device mirror flag. Does not touch the on/off state.

        Raises:
            ValueError: for a direction other than mirrored/flipped
        """
        self.video.mirror = CameraDirection(direction) is CameraDirection.MIRRORED

    def sync_display_to_device(self) -> None:
        """Apply the stored transparency and state to the device in one step."""
        transparency, state = self.transparency, self.state
        logger.info(f"Syncing video display: state={state.value}, transparency={transparency}")
        self.apply_video_transparency(transparency)
        self.video_toggle(state)
