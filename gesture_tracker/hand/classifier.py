"""
Static Gesture Classifier

Maps a FeatureSet to one of three static gestures using fixed thresholds.

Rules are checked most-specific-first because they overlap:
    1. Pointing:  index extended, middle/ring curled, pinky curled (looser)
    2. Open Palm: all four fingers extended
    3. Fist:      all four fingers tightly curled
    4. otherwise no gesture

The thresholds are empirical tuning constants. Changing them changes what
is recognized.

Usage:
    from gesture_tracker.hand.classifier import GestureClassifier

    classifier = GestureClassifier()
    label = classifier.classify_landmarks(landmarks)
"""

from enum import Enum
from typing import Optional, Sequence, Union
import numpy as np

from .features import FeatureExtractor, FeatureSet


EXTENDED_THRESHOLD = 0.6
CURLED_THRESHOLD = 0.4
PINKY_CURLED_THRESHOLD = 0.45
FIST_THRESHOLD = 0.35


class GestureLabel(Enum):
    """Per-hand, per-frame classifier output."""
    POINTING = 'Pointing'
    OPEN_PALM = 'Open Palm'
    FIST = 'Fist'
    NONE = 'None'

    @property
    def text(self) -> Optional[str]:
        """Banner text, or None when there is nothing to show."""
        if self is GestureLabel.NONE:
            return None
        return self.value

    def __bool__(self) -> bool:
        return self is not GestureLabel.NONE


def classify(features: Optional[FeatureSet]) -> GestureLabel:
    """
    Classify a feature set.

    Pure function: the same input always yields the same label.

    Args:
        features: FeatureSet, or None for an indeterminate hand

    Returns:
        GestureLabel
    """
    if features is None:
        return GestureLabel.NONE

    index, middle, ring, pinky = features.as_tuple()

    # Pointing (most specific, check first)
    if (
        index > EXTENDED_THRESHOLD
        and middle < CURLED_THRESHOLD
        and ring < CURLED_THRESHOLD
        and pinky < PINKY_CURLED_THRESHOLD  # pinky curls less than the others
    ):
        return GestureLabel.POINTING

    if all(d > EXTENDED_THRESHOLD for d in (index, middle, ring, pinky)):
        return GestureLabel.OPEN_PALM

    if all(d < FIST_THRESHOLD for d in (index, middle, ring, pinky)):
        return GestureLabel.FIST

    return GestureLabel.NONE


class GestureClassifier:
    """Feature extraction followed by rule-based classification."""

    def __init__(self, extractor: Optional[FeatureExtractor] = None):
        self.extractor = extractor or FeatureExtractor()

    def classify(self, features: Optional[FeatureSet]) -> GestureLabel:
        return classify(features)

    def classify_landmarks(
        self,
        landmarks: Union[np.ndarray, Sequence, None]
    ) -> GestureLabel:
        """
        Classify one hand directly from its 21 landmarks.

        Args:
            landmarks: Array of shape (21, 3) or sequence of points

        Returns:
            GestureLabel (NONE for missing or degenerate hands)
        """
        return classify(self.extractor.extract(landmarks))


def recognize_gesture(landmarks: Union[np.ndarray, Sequence, None]) -> GestureLabel:
    """Classify one hand with the default extractor."""
    return classify(FeatureExtractor().extract(landmarks))
