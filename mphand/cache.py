"""
Holder for the most recent detection result.
"""
import logging
from typing import Optional

from .types import HandFrameResult, Landmark, NUM_LANDMARKS

logger = logging.getLogger(__name__)


class HandResultCache:
    """
    Latest HandFrameResult shared by the detection loop, the one-shot
    detectors and every query.

    Writers always replace the whole result; there is no partial update.
    Hand indices here are 0-based.
    """

    def __init__(self):
        self._result: HandFrameResult = HandFrameResult.empty()

    @property
    def result(self) -> HandFrameResult:
        return self._result

    def replace(self, result: Optional[HandFrameResult]) -> None:
        """Store a new result. None stores the empty result."""
        self._result = result if result is not None else HandFrameResult.empty()
        logger.debug(f"Cache updated: {self._result.num_hands} hand(s)")

    def clear(self) -> None:
        self._result = HandFrameResult.empty()

    @property
    def num_hands(self) -> int:
        return self._result.num_hands

    def has_hand(self, hand_index: int) -> bool:
        return 0 <= hand_index < self._result.num_hands

    def handedness_label(self, hand_index: int) -> Optional[str]:
        if not self.has_hand(hand_index):
            return None
        return self._result.handedness[hand_index].label

    def handedness_score(self, hand_index: int) -> Optional[float]:
        if not self.has_hand(hand_index):
            return None
        return self._result.handedness[hand_index].score

    def landmark(self, hand_index: int, landmark_index: int) -> Optional[Landmark]:
        """Image-space landmark, or None when either index is out of range."""
        if not self.has_hand(hand_index) or not 0 <= landmark_index < NUM_LANDMARKS:
            return None
        return self._result.landmarks[hand_index][landmark_index]

    def world_landmark(self, hand_index: int, landmark_index: int) -> Optional[Landmark]:
        """World-space landmark, or None when either index is out of range."""
        if not self.has_hand(hand_index) or not 0 <= landmark_index < NUM_LANDMARKS:
            return None
        return self._result.world_landmarks[hand_index][landmark_index]
