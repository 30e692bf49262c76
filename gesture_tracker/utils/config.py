"""
Configuration Management

Handles loading and merging configuration files.

Gesture thresholds and animation timings are fixed constants in their
modules and are deliberately not part of the configuration.

Usage:
    from gesture_tracker.utils.config import load_config

    config = load_config('configs/default.yaml')
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, field


DEFAULT_MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/1/hand_landmarker.task"
)


@dataclass
class DetectorConfig:
    """Hand landmark detector configuration."""
    model_path: Optional[str] = None
    model_url: str = DEFAULT_MODEL_URL
    cache_dir: str = "./models"
    num_hands: int = 2
    delegate: str = "GPU"                  # "GPU" falls back to "CPU" on failure
    min_hand_detection_confidence: float = 0.5
    min_hand_presence_confidence: float = 0.5
    min_tracking_confidence: float = 0.5


@dataclass
class CameraConfig:
    """Camera acquisition configuration."""
    index: int = 0
    width: int = 1280
    height: int = 720


@dataclass
class DisplayConfig:
    """Window shell configuration."""
    window_name: str = "Hand Gesture Tracker"
    mirror: bool = True
    quit_key: str = "q"


@dataclass
class Config:
    """Main configuration container."""
    project_name: str = "hand-gesture-tracker"
    version: str = "1.0.0"

    # Sub-configurations
    detector: DetectorConfig = field(default_factory=DetectorConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'Config':
        """Create Config from dictionary."""
        config = cls()
        config_dict = config_dict or {}

        # Project settings
        project = config_dict.get('project', {})
        config.project_name = project.get('name', config.project_name)
        config.version = project.get('version', config.version)

        # Detector config
        detector = config_dict.get('detector', {})
        confidence = detector.get('confidence', {})
        defaults = DetectorConfig()
        config.detector = DetectorConfig(
            model_path=detector.get('model_path', defaults.model_path),
            model_url=detector.get('model_url', defaults.model_url),
            cache_dir=detector.get('cache_dir', defaults.cache_dir),
            num_hands=detector.get('num_hands', defaults.num_hands),
            delegate=detector.get('delegate', defaults.delegate),
            min_hand_detection_confidence=confidence.get(
                'hand_detection', defaults.min_hand_detection_confidence),
            min_hand_presence_confidence=confidence.get(
                'hand_presence', defaults.min_hand_presence_confidence),
            min_tracking_confidence=confidence.get(
                'tracking', defaults.min_tracking_confidence)
        )

        # Camera config
        camera = config_dict.get('camera', {})
        config.camera = CameraConfig(
            index=camera.get('index', 0),
            width=camera.get('width', 1280),
            height=camera.get('height', 720)
        )

        # Display config
        display = config_dict.get('display', {})
        config.display = DisplayConfig(
            window_name=display.get('window_name', config.display.window_name),
            mirror=display.get('mirror', True),
            quit_key=display.get('quit_key', 'q')
        )

        # Logging
        logging_cfg = config_dict.get('logging', {})
        config.log_level = logging_cfg.get('level', config.log_level)
        config.log_file = logging_cfg.get('file', config.log_file)

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Inverse of from_dict."""
        return {
            'project': {
                'name': self.project_name,
                'version': self.version
            },
            'detector': {
                'model_path': self.detector.model_path,
                'model_url': self.detector.model_url,
                'cache_dir': self.detector.cache_dir,
                'num_hands': self.detector.num_hands,
                'delegate': self.detector.delegate,
                'confidence': {
                    'hand_detection': self.detector.min_hand_detection_confidence,
                    'hand_presence': self.detector.min_hand_presence_confidence,
                    'tracking': self.detector.min_tracking_confidence
                }
            },
            'camera': {
                'index': self.camera.index,
                'width': self.camera.width,
                'height': self.camera.height
            },
            'display': {
                'window_name': self.display.window_name,
                'mirror': self.display.mirror,
                'quit_key': self.display.quit_key
            },
            'logging': {
                'level': self.log_level,
                'file': self.log_file
            }
        }


def load_config(config_path: str) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML config file

    Returns:
        Config object
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, 'r') as f:
        config_dict = yaml.safe_load(f)

    return Config.from_dict(config_dict)


def merge_configs(base: Dict, override: Dict) -> Dict:
    """
    Merge two config dictionaries.

    Args:
        base: Base configuration
        override: Override values

    Returns:
        Merged configuration
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def save_config(config: Config, path: str):
    """Save configuration to YAML file."""
    with open(path, 'w') as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False)
