"""
Single detections on a stage snapshot or on a target's named image.
"""
import asyncio
import logging

from .cache import HandResultCache
from .costumes import costume_by_name_or_number
from .imaging import DETECTION_SIZE, decode_data_url
from .types import CostumeTargetProto, DetectorProto, RendererProto

logger = logging.getLogger(__name__)

HAND_DETECTED = "Hand detected"
COSTUME_NOT_FOUND = "Costume not found"


async def request_snapshot(renderer: RendererProto) -> str:
    """Ask the renderer for one snapshot and wait for its callback."""
    loop = asyncio.get_running_loop()
    future: asyncio.Future = loop.create_future()

    def on_snapshot(data_url: str) -> None:
        if not future.done():
            loop.call_soon_threadsafe(_resolve, data_url)

    def _resolve(data_url: str) -> None:
        if not future.done():
            future.set_result(data_url)

    renderer.request_snapshot(on_snapshot)
    return await future


class OneShotDetector:
    """
    Runs the detector once outside the polling loop and replaces the cache
    with whatever it finds, including an empty result.

    Neither entry point raises: failures come back as the error message.
    """

    def __init__(self, detector: DetectorProto, cache: HandResultCache, renderer: RendererProto):
        self.detector = detector
        self.cache = cache
        self.renderer = renderer

    async def _detect_data_url(self, data_url: str) -> None:
        image = decode_data_url(data_url, DETECTION_SIZE)
        result = await self.detector.detect(image, "IMAGE")
        self.cache.replace(result)

    async def detect_from_display_snapshot(self) -> str:
        """
        Detect hands in a snapshot of the rendered stage.

        Returns:
            "Hand detected" once the cache was updated, otherwise the error message
        """
        try:
            data_url = await request_snapshot(self.renderer)
            await self._detect_data_url(data_url)
        except Exception as e:
            logger.error(f"❌ Error detecting hand on stage: {e}")
            return str(e)
        return HAND_DETECTED

    async def detect_from_named_image(self, name: str, target: CostumeTargetProto) -> str:
        """
        Detect hands in one of the target's costumes.

        Args:
            name: Costume name, or its 1-based number when no name matches
            target: Owner of the costumes

        Returns:
            "Hand detected", "Costume not found", or the error message
        """
        try:
            costume = costume_by_name_or_number(target, name)
            if costume is None:
                return COSTUME_NOT_FOUND
            await self._detect_data_url(costume.to_data_url("png"))
        except Exception as e:
            logger.error(f"❌ Error detecting hand in costume '{name}': {e}")
            return str(e)
        return HAND_DETECTED
