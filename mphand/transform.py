"""
Coordinate conversion from detector output to the block display conventions.

Display space has its origin at the stage centre with Y pointing up.
"""
from .types import Landmark


STAGE_WIDTH = 480
STAGE_HEIGHT = 360
DEPTH_SCALE = 200.0


def stage_x(landmark: Landmark, width: float = STAGE_WIDTH) -> float:
    """
    Map a normalized image X (0 = left) into display space.

    Args:
        landmark: Landmark in normalized image coordinates
        width: Stage width in display units

    Returns:
        X in [-width/2, width/2], right is positive
    """
    return (landmark.x - 0.5) * width


def stage_y(landmark: Landmark, height: float = STAGE_HEIGHT) -> float:
    """
    Map a normalized image Y (0 = top) into display space.

    Args:
        landmark: Landmark in normalized image coordinates
        height: Stage height in display units

    Returns:
        Y in [-height/2, height/2], up is positive
    """
    return (0.5 - landmark.y) * height


def stage_z(landmark: Landmark, scale: float = DEPTH_SCALE) -> float:
    """Scale relative depth. Negative values are closer to the camera."""
    return landmark.z * scale


def relative_x(landmark: Landmark) -> float:
    return landmark.x


def relative_y(landmark: Landmark) -> float:
    # world Y points down
    return -landmark.y


def relative_z(landmark: Landmark) -> float:
    return landmark.z
