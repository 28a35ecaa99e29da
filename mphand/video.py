"""
Webcam video device backed by OpenCV.
"""
import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from .config import CameraConfig

logger = logging.getLogger(__name__)


class OpenCVVideoDevice:
    """
    Video device reading from a cv2.VideoCapture.

    Frames are returned as RGB arrays at the requested size, flipped
    horizontally while ``mirror`` is set. The capture is opened on enable()
    and released on disable().
    """

    def __init__(self, cfg: CameraConfig):
        self.cfg = cfg
        self.mirror = True
        self.ghost = 50.0
        self.cap: Optional[cv2.VideoCapture] = None
        self.last_frame: Optional[np.ndarray] = None

    @property
    def enabled(self) -> bool:
        return self.cap is not None and self.cap.isOpened()

    def enable(self) -> None:
        if self.enabled:
            return
        self.cap = cv2.VideoCapture(self.cfg.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.cfg.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.cfg.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.cfg.fps)

        if not self.cap.isOpened():
            logger.error(f"❌ Failed to open camera {self.cfg.index}")
            self.cap = None
            return
        logger.info(f"📷 Camera {self.cfg.index} enabled")

    def disable(self) -> None:
        if self.cap is not None:
            self.cap.release()
            self.cap = None
            logger.info(f"Camera {self.cfg.index} disabled")

    def get_frame(self, fmt: str, size: Tuple[int, int]) -> Optional[np.ndarray]:
        """
        Read one frame.

        Args:
            fmt: Only "image-data" (RGB array) is supported
            size: (width, height) of the returned frame

        Returns:
            HxWx3 uint8 RGB array, or None when the camera is off or the read failed
        """
        if fmt != "image-data":
            raise ValueError(f"Unsupported frame format: {fmt}")
        if not self.enabled:
            return None

        ret, frame = self.cap.read()
        if not ret:
            return None

        frame = cv2.resize(frame, size)
        if self.mirror:
            frame = cv2.flip(frame, 1)
        self.last_frame = frame
        return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

    def apply_ghost(self, value: float) -> None:
        self.ghost = max(0.0, min(100.0, float(value)))

    def preview(self, frame_bgr: np.ndarray) -> np.ndarray:
        """Blend a frame towards white by the current ghost value."""
        alpha = 1.0 - self.ghost / 100.0
        white = np.full_like(frame_bgr, 255)
        return cv2.addWeighted(frame_bgr, alpha, white, 1.0 - alpha, 0)

    def __del__(self):
        """Cleanup resources."""
        if getattr(self, 'cap', None) is not None:
            self.cap.release()
