"""
Live Hand Landmark Detection via MediaPipe Tasks

Wraps the MediaPipe ``HandLandmarker`` task in VIDEO running mode and
returns plain numpy landmark arrays, one ``(21, 3)`` array per hand in
the order the model reports them.

Key behaviour:
    - Model file downloaded once into a cache directory when no local
      path is configured
    - GPU delegate requested first, CPU delegate as fallback
    - Strictly increasing timestamps, as VIDEO mode requires
    - Startup failures raised as InitializationError, per-frame failures
      as DetectionError

Usage:
    from gesture_tracker.hand.detector import HandLandmarkDetector

    detector = HandLandmarkDetector()
    result = detector.detect(frame_bgr, timestamp_ms)
    for hand in result.hands:  # (21, 3) float arrays, normalized
        ...
    detector.close()
"""

import cv2
import numpy as np
import requests
from pathlib import Path
from typing import List, Optional
from dataclasses import dataclass, field
from tqdm import tqdm

from ..errors import InitializationError, DetectionError
from ..utils.config import DetectorConfig
from ..utils.logging_utils import get_logger
from .landmarks import to_landmark_array

try:
    import mediapipe as mp
except ImportError:
    mp = None

logger = get_logger(__name__)


@dataclass
class DetectionResult:
    """Landmarks for every hand found in one frame."""
    hands: List[np.ndarray] = field(default_factory=list)  # each (21, 3)
    handedness: List[str] = field(default_factory=list)    # 'Left' / 'Right'

    @property
    def num_hands(self) -> int:
        return len(self.hands)


def ensure_model(config: DetectorConfig) -> Path:
    """
    Resolve the hand landmarker model file, downloading it if needed.

    Args:
        config: Detector configuration

    Returns:
        Path to a ``.task`` model file
    """
    if config.model_path:
        path = Path(config.model_path).expanduser()
        if not path.exists():
            raise InitializationError(
                f"Failed to initialize model: model file not found: {path}"
            )
        return path

    cache_dir = Path(config.cache_dir)
    model_path = cache_dir / config.model_url.split('/')[-1]
    if model_path.exists():
        return model_path

    cache_dir.mkdir(parents=True, exist_ok=True)
    tmp_path = model_path.with_suffix('.tmp')
    logger.info(f"Downloading hand landmarker model to {model_path}")

    try:
        response = requests.get(config.model_url, stream=True, timeout=60)
        response.raise_for_status()

        total_size = int(response.headers.get('content-length', 0))

        with open(tmp_path, 'wb') as f:
            with tqdm(total=total_size, unit='B', unit_scale=True) as pbar:
                for chunk in response.iter_content(chunk_size=8192):
                    f.write(chunk)
                    pbar.update(len(chunk))
        tmp_path.replace(model_path)
    except (requests.RequestException, OSError) as exc:
        tmp_path.unlink(missing_ok=True)
        raise InitializationError(
            f"Failed to initialize model: could not download {config.model_url}: {exc}"
        ) from exc

    return model_path


class HandLandmarkDetector:
    """
    Landmark source backed by MediaPipe ``HandLandmarker``.

    The underlying model is created once in ``__init__`` and released by
    ``close()``; ``close()`` may be called any number of times.
    """

    def __init__(self, config: Optional[DetectorConfig] = None):
        if mp is None:
            raise InitializationError(
                "mediapipe is required for hand detection. "
                "Install with: pip install mediapipe"
            )
        self.config = config or DetectorConfig()
        self.delegate = None
        self._last_timestamp_ms = -1

        model_path = ensure_model(self.config)
        self._landmarker = self._create_landmarker(model_path)
        logger.info(
            f"Hand landmarker ready (model={model_path.name}, "
            f"delegate={self.delegate}, num_hands={self.config.num_hands})"
        )

    def _create_landmarker(self, model_path: Path):
        vision = mp.tasks.vision
        delegates = [self.config.delegate.upper()]
        if delegates[0] != "CPU":
            delegates.append("CPU")

        last_error = None
        for name in delegates:
            options = vision.HandLandmarkerOptions(
                base_options=mp.tasks.BaseOptions(
                    model_asset_path=str(model_path),
                    delegate=getattr(mp.tasks.BaseOptions.Delegate, name),
                ),
                running_mode=vision.RunningMode.VIDEO,
                num_hands=self.config.num_hands,
                min_hand_detection_confidence=self.config.min_hand_detection_confidence,
                min_hand_presence_confidence=self.config.min_hand_presence_confidence,
                min_tracking_confidence=self.config.min_tracking_confidence,
            )
            try:
                landmarker = vision.HandLandmarker.create_from_options(options)
            except (RuntimeError, ValueError, NotImplementedError) as exc:
                logger.warning(f"{name} delegate unavailable: {exc}")
                last_error = exc
                continue
            self.delegate = name
            return landmarker

        raise InitializationError(
            f"Failed to initialize model: {last_error}"
        ) from last_error

    @property
    def is_closed(self) -> bool:
        return self._landmarker is None

    def _next_timestamp_ms(self, timestamp_ms: float) -> int:
        ts = int(timestamp_ms)
        if ts <= self._last_timestamp_ms:
            ts = self._last_timestamp_ms + 1
        self._last_timestamp_ms = ts
        return ts

    def detect(self, frame: np.ndarray, timestamp_ms: float) -> DetectionResult:
        """
        Detect hands in one BGR frame.

        Args:
            frame: BGR image, shape (H, W, 3)
            timestamp_ms: Frame time in milliseconds

        Returns:
            DetectionResult with normalized (21, 3) landmark arrays
        """
        if self._landmarker is None:
            raise DetectionError("Detector has been closed")

        # MediaPipe expects RGB
        frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame_rgb)

        try:
            results = self._landmarker.detect_for_video(
                mp_image, self._next_timestamp_ms(timestamp_ms)
            )
        except (RuntimeError, ValueError) as exc:
            raise DetectionError(f"Hand detection failed: {exc}") from exc

        detection = DetectionResult()
        for i, hand in enumerate(results.hand_landmarks or []):
            detection.hands.append(to_landmark_array(hand))
            if results.handedness and i < len(results.handedness):
                detection.handedness.append(results.handedness[i][0].category_name)

        return detection

    def close(self) -> None:
        """Release the model. Safe to call more than once."""
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None
            logger.info("Hand landmarker closed")
