"""
Read-only queries over the cached hand result.

Hand numbers are 1-based, landmark indices 0-20. Any out-of-range index,
or an empty cache, gives 0 for coordinates and " " for handedness.
"""
from typing import Callable, Optional

from . import transform
from .cache import HandResultCache
from .config import StageConfig
from .types import Landmark

NO_HAND = " "


class HandQueries:
    """Coordinate and handedness queries in display and hand-relative space."""

    def __init__(self, cache: HandResultCache, stage: Optional[StageConfig] = None):
        self.cache = cache
        self.width = stage.width if stage else transform.STAGE_WIDTH
        self.height = stage.height if stage else transform.STAGE_HEIGHT
        self.depth_scale = stage.depth_scale if stage else transform.DEPTH_SCALE

    def number_of_hands(self) -> int:
        return self.cache.num_hands

    def handedness(self, hand_number: int) -> str:
        label = self.cache.handedness_label(hand_number - 1)
        return NO_HAND if label is None else label

    def handedness_score(self, hand_number: int) -> float:
        score = self.cache.handedness_score(hand_number - 1)
        return 0.0 if score is None else score

    def _image(self, hand_number: int, landmark_index: int,
               convert: Callable[[Landmark], float]) -> float:
        landmark = self.cache.landmark(hand_number - 1, landmark_index)
        return 0.0 if landmark is None else convert(landmark)

    def _world(self, hand_number: int, landmark_index: int,
               convert: Callable[[Landmark], float]) -> float:
        landmark = self.cache.world_landmark(hand_number - 1, landmark_index)
        return 0.0 if landmark is None else convert(landmark)

    def landmark_x(self, hand_number: int, landmark_index: int) -> float:
        return self._image(hand_number, landmark_index, lambda lm: transform.stage_x(lm, self.width))

    def landmark_y(self, hand_number: int, landmark_index: int) -> float:
        return self._image(hand_number, landmark_index, lambda lm: transform.stage_y(lm, self.height))

    def landmark_z(self, hand_number: int, landmark_index: int) -> float:
        return self._image(hand_number, landmark_index, lambda lm: transform.stage_z(lm, self.depth_scale))

    def relative_landmark_x(self, hand_number: int, landmark_index: int) -> float:
        return self._world(hand_number, landmark_index, transform.relative_x)

    def relative_landmark_y(self, hand_number: int, landmark_index: int) -> float:
        return self._world(hand_number, landmark_index, transform.relative_y)

    def relative_landmark_z(self, hand_number: int, landmark_index: int) -> float:
        return self._world(hand_number, landmark_index, transform.relative_z)
