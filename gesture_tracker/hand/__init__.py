"""Hand landmark processing and gesture classification module."""

from .landmarks import HandLandmarks, FINGER_MAPPING, HAND_CONNECTIONS
from .features import FeatureExtractor, FeatureSet
from .classifier import GestureClassifier, GestureLabel, classify, recognize_gesture
from .gesture_state import PerHandState
from .detector import HandLandmarkDetector, DetectionResult

__all__ = [
    "HandLandmarks",
    "FINGER_MAPPING",
    "HAND_CONNECTIONS",
    "FeatureExtractor",
    "FeatureSet",
    "GestureClassifier",
    "GestureLabel",
    "classify",
    "recognize_gesture",
    "PerHandState",
    "HandLandmarkDetector",
    "DetectionResult",
]
