"""
Model path and hand count settings for the live detector.
"""
import asyncio
import logging
from typing import Optional

from .config import ModelConfig
from .types import ConfigResult, DetectorProto

logger = logging.getLogger(__name__)

MODEL_PATH_SET = "Model asset path set successfully"
NUM_HANDS_SET = "Number of hands set successfully"


class ModelConfigManager:
    """
    Owns model_path/max_num_hands and pushes changes to the detector.

    Stored values change immediately; the detector follows once its
    reconfiguration finishes. Reconfigurations run one at a time and always
    apply the latest stored values, so the detector ends up on whatever
    get_model_path()/get_num_hands() report.
    """

    def __init__(self, detector: DetectorProto, model_path: str, max_num_hands: int = 4):
        self.detector = detector
        self._model_path = model_path
        self._max_num_hands = max_num_hands
        self._lock: Optional[asyncio.Lock] = None

    @classmethod
    def from_config(cls, detector: DetectorProto, cfg: ModelConfig) -> "ModelConfigManager":
        return cls(detector, cfg.model_path, cfg.max_num_hands)

    def get_model_path(self) -> str:
        return self._model_path

    def get_num_hands(self) -> int:
        return self._max_num_hands

    async def _reconfigure(self) -> None:
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            await self.detector.reconfigure(self._model_path, self._max_num_hands)

    async def set_model_path(self, path: str) -> ConfigResult:
        """
        Switch to another model asset.

        Args:
            path: File path or URL; surrounding whitespace is ignored

        Returns:
            ConfigResult; INVALID_INPUT for a blank path, REJECTED with the
            error message when the detector could not be rebuilt
        """
        path = path.strip()
        if not path:
            return ConfigResult.invalid_input()

        self._model_path = path
        try:
            await self._reconfigure()
        except Exception as e:
            logger.error(f"❌ Failed to load model from {path}: {e}")
            return ConfigResult.rejected(str(e))
        logger.info(f"✅ Model asset path set to {path}")
        return ConfigResult.success(MODEL_PATH_SET)

    async def set_num_hands(self, num_hands: int) -> ConfigResult:
        """Change the maximum number of hands; values below 1 are ignored."""
        if num_hands < 1:
            return ConfigResult.invalid_input()

        self._max_num_hands = int(num_hands)
        try:
            await self._reconfigure()
        except Exception as e:
            logger.error(f"❌ Failed to set number of hands to {num_hands}: {e}")
            return ConfigResult.rejected(str(e))
        return ConfigResult.success(NUM_HANDS_SET)
