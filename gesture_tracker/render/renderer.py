"""
Frame Renderer

Draws hand skeletons and gesture feedback onto a RenderSurface.

Per hand, in order:
    1. Skeleton connectors (pulsing under Fist)
    2. Depth-shaded landmark dots
    3. Fingertip glow (all tips for Open Palm, index tip for Pointing)
    4. Finger name labels
    5. Gesture banner (left for the first hand, right for the others)

The displayed frame is mirrored horizontally for a selfie view. Shapes are
drawn in camera coordinates and mirror with the frame, but text would read
backwards, so every label is drawn into a local patch that is flipped
before it is composited (the counter-mirror).

Usage:
    from gesture_tracker.render import FrameRenderer, RenderSurface

    surface = RenderSurface(width, height)
    renderer = FrameRenderer()
    renderer.render(surface, detection.hands, gesture_state, now_ms)
    display = cv2.flip(surface.composite(frame), 1)
"""

import cv2
import numpy as np
from typing import Optional, Sequence, Tuple

from ..hand.classifier import GestureLabel
from ..hand.landmarks import FINGER_MAPPING, HAND_CONNECTIONS, HandLandmarks
from .animation import (
    AnimationClock,
    connector_style,
    depth_intensity,
    dot_style,
    glow_style,
    glow_tips,
    radial_glow_alpha,
)
from .surface import RenderSurface

BGRA = Tuple[int, int, int, int]

FONT = cv2.FONT_HERSHEY_SIMPLEX
TEXT_COLOR: BGRA = (240, 232, 226, 255)  # #e2e8f0

# Finger name labels
LABEL_FONT_SCALE = 0.5
LABEL_THICKNESS = 1
LABEL_PADDING = 5
LABEL_BOX_HEIGHT = 22
LABEL_BOX_OFFSET_Y = -35  # box top relative to the fingertip
LABEL_CORNER_RADIUS = 8
LABEL_BACKGROUND: BGRA = (42, 23, 15, 179)  # rgba(15, 23, 42, 0.7)

# Gesture banner
BANNER_FONT_SCALE = 0.75
BANNER_THICKNESS = 2
BANNER_PADDING = 10
BANNER_BOX_HEIGHT = 40
BANNER_EDGE_MARGIN = 20
BANNER_TOP = 20
BANNER_CORNER_RADIUS = 12
BANNER_BACKGROUND: BGRA = (42, 23, 15, 191)  # rgba(15, 23, 42, 0.75)


def _rounded_rect(img: np.ndarray, x: int, y: int, w: int, h: int, radius: int, color) -> None:
    """Filled rectangle with rounded corners."""
    r = max(0, min(radius, w // 2, h // 2))
    cv2.rectangle(img, (x + r, y), (x + w - 1 - r, y + h - 1), color, -1)
    cv2.rectangle(img, (x, y + r), (x + w - 1, y + h - 1 - r), color, -1)
    for cx, cy in (
        (x + r, y + r),
        (x + w - 1 - r, y + r),
        (x + r, y + h - 1 - r),
        (x + w - 1 - r, y + h - 1 - r),
    ):
        cv2.circle(img, (cx, cy), r, color, -1)


def text_box_patch(
    text: str,
    font_scale: float,
    thickness: int,
    padding: int,
    box_height: int,
    corner_radius: int,
    background: BGRA,
    mirrored: bool = True,
) -> np.ndarray:
    """
    Render a rounded text badge into its own BGRA patch.

    Args:
        text: Label text
        font_scale: OpenCV font scale
        thickness: Glyph stroke thickness
        padding: Horizontal padding on each side of the text
        box_height: Patch height
        corner_radius: Corner radius of the badge
        background: Badge colour with alpha
        mirrored: Flip the patch horizontally (counter-mirror for a
            mirrored display)

    Returns:
        BGRA uint8 array of shape (box_height, text_width + 2 * padding, 4)
    """
    (text_w, text_h), _ = cv2.getTextSize(text, FONT, font_scale, thickness)
    box_w = text_w + padding * 2

    patch = np.zeros((box_height, box_w, 4), dtype=np.uint8)
    _rounded_rect(patch, 0, 0, box_w, box_height, corner_radius, background)

    # Baseline origin that centres the glyphs in the box
    org = ((box_w - text_w) // 2, (box_height + text_h) // 2)
    cv2.putText(patch, text, org, FONT, font_scale, TEXT_COLOR, thickness, cv2.LINE_AA)

    if mirrored:
        patch = cv2.flip(patch, 1)
    return patch


class FrameRenderer:
    """
    Stateless drawing of landmarks and gesture feedback.

    The only input beyond landmarks and labels is the time reading, taken
    from ``clock`` unless passed explicitly to ``render``.
    """

    def __init__(self, clock: Optional[AnimationClock] = None, mirrored: bool = True):
        """
        Args:
            clock: Time source for animations
            mirrored: Whether the display flips frames horizontally
        """
        self.clock = clock or AnimationClock()
        self.mirrored = mirrored

    def render(
        self,
        surface: RenderSurface,
        hands: Sequence[np.ndarray],
        gestures: Sequence[GestureLabel],
        now_ms: Optional[float] = None,
    ) -> RenderSurface:
        """
        Clear the surface and draw every hand.

        Args:
            surface: Target surface, already sized to the video frame
            hands: (21, 3) normalized landmark arrays, in detector order
            gestures: Label per hand slot (PerHandState or a list)
            now_ms: Animation time; read from the clock when omitted

        Returns:
            The same surface
        """
        if now_ms is None:
            now_ms = self.clock.now_ms()

        surface.clear()

        for slot, landmarks in enumerate(hands):
            gesture = gestures[slot] if slot < len(gestures) else GestureLabel.NONE
            self.draw_hand(surface, np.asarray(landmarks, dtype=np.float64), gesture, slot, now_ms)

        return surface

    def draw_hand(
        self,
        surface: RenderSurface,
        landmarks: np.ndarray,
        gesture: GestureLabel,
        slot: int,
        now_ms: float,
    ) -> None:
        points = HandLandmarks(landmarks).to_pixels(surface.width, surface.height)

        self.draw_connectors(surface, points, gesture, now_ms)
        self.draw_landmarks(surface, points, landmarks[:, 2])
        self.draw_glow(surface, points, gesture, now_ms)
        self.draw_finger_labels(surface, points)
        if gesture:
            self.draw_gesture_banner(surface, gesture, slot)

    def draw_connectors(
        self,
        surface: RenderSurface,
        points: np.ndarray,
        gesture: GestureLabel,
        now_ms: float,
    ) -> None:
        style = connector_style(gesture, now_ms)
        color = style.color + (255,)
        width = max(1, int(round(style.width)))

        for start, end in HAND_CONNECTIONS:
            p1 = tuple(int(round(v)) for v in points[start])
            p2 = tuple(int(round(v)) for v in points[end])
            cv2.line(surface.image, p1, p2, color, width, cv2.LINE_AA)

    def draw_landmarks(
        self,
        surface: RenderSurface,
        points: np.ndarray,
        z: np.ndarray,
    ) -> None:
        """Dots shaded by depth: nearer landmarks are larger and lighter."""
        for point, intensity in zip(points, depth_intensity(z)):
            color, radius = dot_style(float(intensity))
            center = tuple(int(round(v)) for v in point)
            cv2.circle(surface.image, center, int(round(radius)), color + (255,), -1, cv2.LINE_AA)

    def draw_glow(
        self,
        surface: RenderSurface,
        points: np.ndarray,
        gesture: GestureLabel,
        now_ms: float,
    ) -> None:
        tips = glow_tips(gesture)
        if not tips:
            return

        style = glow_style(now_ms)
        alpha = radial_glow_alpha(style.radius, style.alpha)
        size = alpha.shape[0]

        patch = np.zeros((size, size, 4), dtype=np.uint8)
        patch[..., :3] = style.color
        patch[..., 3] = np.clip(alpha * 255.0 + 0.5, 0, 255).astype(np.uint8)

        for tip in tips:
            x, y = points[tip]
            surface.blend_patch(int(round(x)) - size // 2, int(round(y)) - size // 2, patch)

    def draw_finger_labels(self, surface: RenderSurface, points: np.ndarray) -> None:
        """Name badge above each fingertip, drawn for every gesture."""
        for name, tip in FINGER_MAPPING:
            x, y = points[tip]
            patch = text_box_patch(
                name,
                LABEL_FONT_SCALE,
                LABEL_THICKNESS,
                LABEL_PADDING,
                LABEL_BOX_HEIGHT,
                LABEL_CORNER_RADIUS,
                LABEL_BACKGROUND,
                mirrored=self.mirrored,
            )
            box_w = patch.shape[1]
            surface.blend_patch(
                int(round(x - box_w / 2)),
                int(round(y)) + LABEL_BOX_OFFSET_Y,
                patch,
            )

    def draw_gesture_banner(self, surface: RenderSurface, gesture: GestureLabel, slot: int) -> None:
        text = gesture.text
        if not text:
            return

        patch = text_box_patch(
            text,
            BANNER_FONT_SCALE,
            BANNER_THICKNESS,
            BANNER_PADDING,
            BANNER_BOX_HEIGHT,
            BANNER_CORNER_RADIUS,
            BANNER_BACKGROUND,
            mirrored=self.mirrored,
        )
        x0, y0 = banner_origin(surface.width, patch.shape[1], slot)
        surface.blend_patch(x0, y0, patch)


def banner_origin(canvas_width: int, box_width: int, slot: int) -> Tuple[int, int]:
    """
    Top-left corner of the gesture banner for a hand slot.

    The first hand is anchored to the left edge, every other hand to the
    right edge.
    """
    if slot == 0:
        center_x = BANNER_EDGE_MARGIN + box_width / 2
    else:
        center_x = canvas_width - BANNER_EDGE_MARGIN - box_width / 2
    return int(round(center_x - box_width / 2)), BANNER_TOP
