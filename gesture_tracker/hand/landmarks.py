"""
Hand Landmark Topology

Fixed 21-keypoint hand structure produced by MediaPipe Hands.

MediaPipe 21-Keypoint Structure:
    0: Wrist
    1-4: Thumb (CMC, MCP, IP, TIP)
    5-8: Index (MCP, PIP, DIP, TIP)
    9-12: Middle (MCP, PIP, DIP, TIP)
    13-16: Ring (MCP, PIP, DIP, TIP)
    17-20: Pinky (MCP, PIP, DIP, TIP)

The indexing is an external contract of the landmark model and must not
be reordered.

Usage:
    from gesture_tracker.hand.landmarks import HandLandmarks, to_landmark_array

    hand = HandLandmarks(to_landmark_array(result.hand_landmarks[0]))
    tip = hand.index_tip
"""

import numpy as np
from typing import List, Sequence, Tuple, Union
from dataclasses import dataclass


NUM_LANDMARKS = 21

LANDMARK_NAMES = [
    'wrist',
    'thumb_cmc', 'thumb_mcp', 'thumb_ip', 'thumb_tip',
    'index_mcp', 'index_pip', 'index_dip', 'index_tip',
    'middle_mcp', 'middle_pip', 'middle_dip', 'middle_tip',
    'ring_mcp', 'ring_pip', 'ring_dip', 'ring_tip',
    'pinky_mcp', 'pinky_pip', 'pinky_dip', 'pinky_tip'
]

# Named landmark indices
THUMB_TIP = 4
INDEX_MCP = 5
INDEX_TIP = 8
MIDDLE_MCP = 9
MIDDLE_TIP = 12
RING_TIP = 16
PINKY_MCP = 17
PINKY_TIP = 20

# Middle finger knuckle stands in for the palm centroid
PALM_CENTER = MIDDLE_MCP

# (display name, tip landmark index), thumb first
FINGER_MAPPING: List[Tuple[str, int]] = [
    ('Thumb', THUMB_TIP),
    ('Index', INDEX_TIP),
    ('Middle', MIDDLE_TIP),
    ('Ring', RING_TIP),
    ('Pinky', PINKY_TIP),
]

FINGERTIP_INDICES = [tip for _, tip in FINGER_MAPPING]

# Skeleton edges, same topology as mediapipe HandLandmarksConnections
HAND_CONNECTIONS: List[Tuple[int, int]] = [
    # Palm
    (0, 1), (0, 5), (9, 13), (13, 17), (5, 9), (0, 17),
    # Thumb
    (1, 2), (2, 3), (3, 4),
    # Index
    (5, 6), (6, 7), (7, 8),
    # Middle
    (9, 10), (10, 11), (11, 12),
    # Ring
    (13, 14), (14, 15), (15, 16),
    # Pinky
    (17, 18), (18, 19), (19, 20),
]


@dataclass
class HandLandmarks:
    """Landmarks of one detected hand in one frame."""
    landmarks: np.ndarray  # Shape (21, 3) - normalized (x, y, z)

    @property
    def palm_center(self) -> np.ndarray:
        """Approximate palm center (middle finger MCP)."""
        return self.landmarks[PALM_CENTER]

    @property
    def index_tip(self) -> np.ndarray:
        return self.landmarks[INDEX_TIP]

    @property
    def fingertips(self) -> np.ndarray:
        """Get all fingertip positions. Shape (5, 3)."""
        return self.landmarks[FINGERTIP_INDICES]

    @property
    def depth_range(self) -> Tuple[float, float]:
        """(min z, max z) over all landmarks of the hand."""
        z = self.landmarks[:, 2]
        return float(z.min()), float(z.max())

    def to_pixels(self, width: int, height: int) -> np.ndarray:
        """
        Scale normalized x/y to pixel coordinates.

        Args:
            width: Frame width in pixels
            height: Frame height in pixels

        Returns:
            Float array of shape (21, 2)
        """
        return self.landmarks[:, :2] * np.array([width, height], dtype=np.float64)


def to_landmark_array(
    hand: Union[np.ndarray, Sequence]
) -> np.ndarray:
    """
    Convert one hand into a (21, 3) float array.

    Accepts an existing array, a sequence of (x, y, z) tuples, or a
    sequence of objects with ``x``, ``y``, ``z`` attributes (MediaPipe
    ``NormalizedLandmark``).

    Args:
        hand: Landmarks of one hand

    Returns:
        Array of shape (21, 3)
    """
    if isinstance(hand, np.ndarray):
        arr = np.asarray(hand, dtype=np.float64)
    else:
        rows = []
        for lm in hand:
            if hasattr(lm, 'x'):
                rows.append([lm.x, lm.y, getattr(lm, 'z', 0.0) or 0.0])
            else:
                rows.append(list(lm[:3]) + [0.0] * (3 - len(lm)))
        arr = np.array(rows, dtype=np.float64)

    if arr.shape != (NUM_LANDMARKS, 3):
        raise ValueError(
            f"Expected {NUM_LANDMARKS} landmarks with 3 coordinates, got shape {arr.shape}"
        )
    return arr
