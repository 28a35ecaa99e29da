"""
Hand landmark detection using the MediaPipe Tasks HandLandmarker.
"""
import asyncio
import logging
import threading
import time
from pathlib import Path
from typing import Optional

import mediapipe as mp
import numpy as np
import requests
from mediapipe.tasks.python import vision as mp_vision
from mediapipe.tasks.python.core.base_options import BaseOptions

from .config import ModelConfig
from .types import Category, DetectorError, HandFrameResult, Landmark, RunningMode

logger = logging.getLogger(__name__)

MODEL_DOWNLOAD_TIMEOUT_S = 30


def read_model_asset(model_path: str) -> bytes:
    """
    Load a .task model from a local file or an http(s) URL.

    Args:
        model_path: File path or URL of the model asset

    Returns:
        Raw model bytes
    """
    if model_path.startswith(("http://", "https://")):
        logger.info(f"📥 Downloading hand landmarker model from {model_path}")
        response = requests.get(model_path, timeout=MODEL_DOWNLOAD_TIMEOUT_S)
        response.raise_for_status()
        return response.content

    path = Path(model_path).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"Model asset not found: {path}")
    return path.read_bytes()


def to_hand_frame_result(result) -> HandFrameResult:
    """Convert a MediaPipe HandLandmarkerResult into a HandFrameResult."""
    handedness = tuple(
        Category(label=categories[0].category_name, score=float(categories[0].score))
        for categories in result.handedness
    )
    landmarks = tuple(
        tuple(Landmark(float(lm.x), float(lm.y), float(lm.z)) for lm in hand)
        for hand in result.hand_landmarks
    )
    world_landmarks = tuple(
        tuple(Landmark(float(lm.x), float(lm.y), float(lm.z)) for lm in hand)
        for hand in result.hand_world_landmarks
    )
    return HandFrameResult(
        handedness=handedness,
        landmarks=landmarks,
        world_landmarks=world_landmarks
    )


class MediaPipeHandDetector:
    """
    Hand landmark detector backed by MediaPipe Tasks.

    Two landmarkers are kept: one in VIDEO running mode for the detection
    loop (timestamps must increase) and one in IMAGE mode for one-shot
    detection. Inference runs in a worker thread.
    """

    def __init__(self, cfg: ModelConfig):
        """
        Initialize the detector.

        Args:
            cfg: Model settings; model_path and max_num_hands can be changed
                later with reconfigure()
        """
        self.cfg = cfg
        self._lock = threading.Lock()
        self._last_video_ts_ms = 0
        self._video_landmarker, self._image_landmarker = self._build(cfg.model_path, cfg.max_num_hands)

    def _options(self, model_asset: bytes, running_mode, max_num_hands: int):
        delegate = BaseOptions.Delegate.GPU if self.cfg.delegate == "GPU" else BaseOptions.Delegate.CPU
        return mp_vision.HandLandmarkerOptions(
            base_options=BaseOptions(model_asset_buffer=model_asset, delegate=delegate),
            running_mode=running_mode,
            num_hands=max_num_hands,
            min_hand_detection_confidence=self.cfg.min_detection_confidence,
            min_hand_presence_confidence=self.cfg.min_presence_confidence,
            min_tracking_confidence=self.cfg.min_tracking_confidence
        )

    def _build(self, model_path: str, max_num_hands: int):
        model_asset = read_model_asset(model_path)
        video = mp_vision.HandLandmarker.create_from_options(
            self._options(model_asset, mp_vision.RunningMode.VIDEO, max_num_hands)
        )
        image = mp_vision.HandLandmarker.create_from_options(
            self._options(model_asset, mp_vision.RunningMode.IMAGE, max_num_hands)
        )
        logger.info(f"✅ HandLandmarker ready (num_hands={max_num_hands})")
        return video, image

    def _next_video_timestamp(self) -> int:
        ts = int(time.monotonic() * 1000)
        if ts <= self._last_video_ts_ms:
            ts = self._last_video_ts_ms + 1
        self._last_video_ts_ms = ts
        return ts

    def _detect_sync(self, image: np.ndarray, running_mode: RunningMode) -> HandFrameResult:
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=np.ascontiguousarray(image, dtype=np.uint8))
        with self._lock:
            try:
                if running_mode == "VIDEO":
                    result = self._video_landmarker.detect_for_video(mp_image, self._next_video_timestamp())
                else:
                    result = self._image_landmarker.detect(mp_image)
            except Exception as e:
                raise DetectorError(str(e)) from e
        return to_hand_frame_result(result)

    async def detect(self, image: np.ndarray, running_mode: RunningMode = "IMAGE") -> HandFrameResult:
        """
        Detect hands in an RGB image.

        Args:
            image: HxWx3 uint8 RGB array
            running_mode: "VIDEO" for loop frames, "IMAGE" for stills

        Returns:
            HandFrameResult, empty when no hand was found
        """
        return await asyncio.to_thread(self._detect_sync, image, running_mode)

    def _reconfigure_sync(self, model_path: str, max_num_hands: int) -> None:
        video, image = self._build(model_path, max_num_hands)
        with self._lock:
            old = (self._video_landmarker, self._image_landmarker)
            self._video_landmarker, self._image_landmarker = video, image
            self._last_video_ts_ms = 0
            self.cfg.model_path = model_path
            self.cfg.max_num_hands = max_num_hands
        for landmarker in old:
            landmarker.close()

    async def reconfigure(self, model_path: str, max_num_hands: int) -> None:
        """Rebuild both landmarkers with a new model and hand count."""
        await asyncio.to_thread(self._reconfigure_sync, model_path, max_num_hands)

    def close(self) -> None:
        with self._lock:
            self._video_landmarker.close()
            self._image_landmarker.close()


def create_detector(cfg: ModelConfig) -> Optional[MediaPipeHandDetector]:
    """Create the MediaPipe detector, logging and returning None on failure."""
    try:
        return MediaPipeHandDetector(cfg)
    except Exception as e:
        logger.error(f"❌ Failed to create hand landmarker: {e}")
        return None
