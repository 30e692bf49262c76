"""
Geometric Feature Extractor

Computes scale-invariant finger extension features for one hand.

Each feature is the 2D distance from a fingertip to the approximate palm
center (middle finger MCP), divided by the hand size reference (index MCP
to pinky MCP). Depth (z) is ignored here; it is only used for shading.
The thumb is not part of the feature set.

Usage:
    from gesture_tracker.hand.features import FeatureExtractor

    extractor = FeatureExtractor()
    features = extractor.extract(landmarks)  # None if the hand is degenerate
"""

import math
import numpy as np
from typing import Optional, Sequence, Union
from dataclasses import dataclass

from .landmarks import (
    NUM_LANDMARKS,
    INDEX_MCP,
    PINKY_MCP,
    PALM_CENTER,
    INDEX_TIP,
    MIDDLE_TIP,
    RING_TIP,
    PINKY_TIP,
    to_landmark_array,
)

# Below this palm width (normalized units) the hand is too small to classify
MIN_HAND_SIZE = 0.05


@dataclass(frozen=True)
class FeatureSet:
    """Normalized fingertip-to-palm distances for one hand."""
    index_dist: float
    middle_dist: float
    ring_dist: float
    pinky_dist: float

    def as_tuple(self):
        return (self.index_dist, self.middle_dist, self.ring_dist, self.pinky_dist)


def distance_2d(p1: Sequence[float], p2: Sequence[float]) -> float:
    """Euclidean distance using only x and y."""
    return math.hypot(p1[0] - p2[0], p1[1] - p2[1])


def hand_size(landmarks: np.ndarray) -> float:
    """Palm width reference: index MCP to pinky MCP."""
    return distance_2d(landmarks[INDEX_MCP], landmarks[PINKY_MCP])


class FeatureExtractor:
    """
    Extracts a FeatureSet from MediaPipe hand landmarks.

    Landmarks used:
        5: Index MCP   \\ hand size reference
        17: Pinky MCP  /
        9: Middle MCP (palm center)
        8, 12, 16, 20: Index, middle, ring, pinky tips
    """

    def __init__(self, min_hand_size: float = MIN_HAND_SIZE):
        """
        Args:
            min_hand_size: Hand size below which extraction is indeterminate
        """
        self.min_hand_size = min_hand_size

    def extract(
        self,
        landmarks: Union[np.ndarray, Sequence, None]
    ) -> Optional[FeatureSet]:
        """
        Compute features for one hand.

        Args:
            landmarks: 21 landmarks (array of shape (21, 3) or sequence)

        Returns:
            FeatureSet, or None when the input is missing or degenerate
        """
        if landmarks is None or len(landmarks) != NUM_LANDMARKS:
            return None

        lm = to_landmark_array(landmarks)

        size = hand_size(lm)
        if size < self.min_hand_size:
            return None

        palm = lm[PALM_CENTER]
        return FeatureSet(
            index_dist=distance_2d(lm[INDEX_TIP], palm) / size,
            middle_dist=distance_2d(lm[MIDDLE_TIP], palm) / size,
            ring_dist=distance_2d(lm[RING_TIP], palm) / size,
            pinky_dist=distance_2d(lm[PINKY_TIP], palm) / size,
        )
