"""
Configuration management for the hand-pose sensing blocks.
"""
import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass

from dotenv import load_dotenv

from .types import VideoState


CONFIG_ENV_VAR = "MPHAND_CONFIG"

DEFAULT_MODEL_PATH = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/1/hand_landmarker.task"
)


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int
    width: int
    height: int
    fps: int


@dataclass
class DetectionConfig:
    """Detection loop settings."""
    interval_ms: float


@dataclass
class ModelConfig:
    """MediaPipe HandLandmarker configuration settings."""
    model_path: str
    max_num_hands: int
    min_detection_confidence: float
    min_presence_confidence: float
    min_tracking_confidence: float
    delegate: str  # "CPU" or "GPU"


@dataclass
class StageConfig:
    """Display-space geometry used by the absolute landmark queries."""
    width: int
    height: int
    depth_scale: float


@dataclass
class DisplayConfig:
    """Defaults for the shared video display state."""
    transparency: float
    state: VideoState
    window_name: str


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    detection: DetectionConfig
    model: ModelConfig
    stage: StageConfig
    display: DisplayConfig


def default_config_path() -> Path:
    return Path(__file__).parent / "config.default.yaml"


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses $MPHAND_CONFIG (a .env file
            is honoured) or the packaged config.default.yaml

    Returns:
        Configuration object with all settings
    """
    if path is None:
        load_dotenv()
        path = os.getenv(CONFIG_ENV_VAR) or default_config_path()

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    return _dict_to_config(data or {})


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    camera_data = data.get('camera', {})
    camera = CameraConfig(
        index=int(camera_data.get('index', 0)),
        width=int(camera_data.get('width', 640)),
        height=int(camera_data.get('height', 480)),
        fps=int(camera_data.get('fps', 30))
    )

    detection_data = data.get('detection', {})
    detection = DetectionConfig(
        interval_ms=max(0.0, float(detection_data.get('interval_ms', 100)))
    )

    model_data = data.get('model', {})
    max_num_hands = int(model_data.get('max_num_hands', 4))
    if max_num_hands < 1:
        raise ValueError(f"model.max_num_hands must be >= 1, got {max_num_hands}")
    model_path = str(model_data.get('model_path') or DEFAULT_MODEL_PATH).strip()
    model = ModelConfig(
        model_path=model_path,
        max_num_hands=max_num_hands,
        min_detection_confidence=float(model_data.get('min_detection_confidence', 0.5)),
        min_presence_confidence=float(model_data.get('min_presence_confidence', 0.5)),
        min_tracking_confidence=float(model_data.get('min_tracking_confidence', 0.5)),
        delegate=str(model_data.get('delegate', 'CPU')).upper()
    )

    stage_data = data.get('stage', {})
    stage = StageConfig(
        width=int(stage_data.get('width', 480)),
        height=int(stage_data.get('height', 360)),
        depth_scale=float(stage_data.get('depth_scale', 200))
    )

    display_data = data.get('display', {})
    display = DisplayConfig(
        transparency=float(display_data.get('transparency', 50)),
        state=VideoState(display_data.get('state', VideoState.OFF.value)),
        window_name=str(display_data.get('window_name', 'Hand Landmarks'))
    )

    return Cfg(
        camera=camera,
        detection=detection,
        model=model,
        stage=stage,
        display=display
    )


def default_config() -> Cfg:
    """Configuration built from built-in defaults only, without reading any file."""
    return _dict_to_config({})
