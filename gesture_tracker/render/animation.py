"""
Animation and Shading Rules

Every visual parameter here is a pure function of its inputs and of an
elapsed-time reading in milliseconds. Nothing is carried from one frame to
the next, so pausing and resuming needs no phase bookkeeping, and tests
can pass fixed timestamps.

Colours are returned in OpenCV BGR order.
"""

import colorsys
import math
import time
import numpy as np
from typing import Callable, List, Optional, Tuple
from dataclasses import dataclass

from ..hand.classifier import GestureLabel
from ..hand.landmarks import FINGERTIP_INDICES, INDEX_TIP

BGR = Tuple[int, int, int]

# Connector pulse under Fist
FIST_PULSE_PERIOD_MS = 150.0
CONNECTOR_HUE = 190
CONNECTOR_SATURATION = 95
CONNECTOR_LIGHTNESS = 43          # hsl(190, 95%, 43%), cyan-500
CONNECTOR_LIGHTNESS_GAIN = 15
CONNECTOR_WIDTH = 5.0
CONNECTOR_WIDTH_GAIN = 3.0

# Depth-shaded landmark dots
DOT_HUE = 187
DOT_SATURATION = 91
DOT_LIGHTNESS_MIN = 60
DOT_LIGHTNESS_GAIN = 25
DOT_RADIUS_MIN = 3.0
DOT_RADIUS_GAIN = 4.0

# Fingertip glow under Open Palm / Pointing
GLOW_PULSE_PERIOD_MS = 200.0
GLOW_RADIUS = 15.0
GLOW_RADIUS_GAIN = 10.0
GLOW_ALPHA = 0.4
GLOW_ALPHA_GAIN = 0.2
GLOW_COLOR: BGR = (249, 232, 103)  # rgb(103, 232, 249)
GLOW_SOLID_STOP = 0.3


class AnimationClock:
    """Monotonic elapsed time in milliseconds since construction."""

    def __init__(self, time_fn: Callable[[], float] = time.perf_counter):
        self._time_fn = time_fn
        self._start = time_fn()

    def now_ms(self) -> float:
        return (self._time_fn() - self._start) * 1000.0


@dataclass(frozen=True)
class ConnectorStyle:
    color: BGR
    width: float


@dataclass(frozen=True)
class GlowStyle:
    color: BGR
    radius: float
    alpha: float


def hsl_to_bgr(hue: float, saturation: float, lightness: float) -> BGR:
    """Convert CSS-style hsl (degrees, percent, percent) to a BGR tuple."""
    r, g, b = colorsys.hls_to_rgb(hue / 360.0, lightness / 100.0, saturation / 100.0)
    return (int(round(b * 255)), int(round(g * 255)), int(round(r * 255)))


def pulse(now_ms: float, period_ms: float) -> float:
    """Sine oscillation mapped to [0, 1]."""
    return (math.sin(now_ms / period_ms) + 1.0) / 2.0


def connector_style(gesture: GestureLabel, now_ms: float) -> ConnectorStyle:
    """Skeleton line colour and width; only a Fist pulses."""
    if gesture is not GestureLabel.FIST:
        return ConnectorStyle(
            color=hsl_to_bgr(CONNECTOR_HUE, CONNECTOR_SATURATION, CONNECTOR_LIGHTNESS),
            width=CONNECTOR_WIDTH,
        )

    factor = pulse(now_ms, FIST_PULSE_PERIOD_MS)
    return ConnectorStyle(
        color=hsl_to_bgr(
            CONNECTOR_HUE,
            CONNECTOR_SATURATION,
            CONNECTOR_LIGHTNESS + factor * CONNECTOR_LIGHTNESS_GAIN,
        ),
        width=CONNECTOR_WIDTH + factor * CONNECTOR_WIDTH_GAIN,
    )


def depth_intensity(z: np.ndarray) -> np.ndarray:
    """
    Per-landmark nearness in [0, 1] (1 = closest to the camera).

    A flat hand (all z equal) uses a unit range, giving uniform shading.
    """
    z = np.asarray(z, dtype=np.float64)
    z_min, z_max = float(z.min()), float(z.max())
    z_range = (z_max - z_min) or 1.0
    return 1.0 - (z - z_min) / z_range


def dot_style(intensity: float) -> Tuple[BGR, float]:
    """Colour and radius of a landmark dot for a given nearness."""
    lightness = DOT_LIGHTNESS_MIN + intensity * DOT_LIGHTNESS_GAIN
    radius = DOT_RADIUS_MIN + intensity * DOT_RADIUS_GAIN
    return hsl_to_bgr(DOT_HUE, DOT_SATURATION, lightness), radius


def glow_tips(gesture: GestureLabel) -> List[int]:
    """Fingertip landmark indices that glow for a gesture."""
    if gesture is GestureLabel.OPEN_PALM:
        return list(FINGERTIP_INDICES)
    if gesture is GestureLabel.POINTING:
        return [INDEX_TIP]
    return []


def glow_style(now_ms: float) -> GlowStyle:
    factor = pulse(now_ms, GLOW_PULSE_PERIOD_MS)
    return GlowStyle(
        color=GLOW_COLOR,
        radius=GLOW_RADIUS + factor * GLOW_RADIUS_GAIN,
        alpha=GLOW_ALPHA - factor * GLOW_ALPHA_GAIN,
    )


def radial_glow_alpha(radius: float, peak_alpha: float, size: Optional[int] = None) -> np.ndarray:
    """
    Alpha mask of a radial gradient centred in a square patch.

    Full ``peak_alpha`` up to ``GLOW_SOLID_STOP`` of the radius, then a
    linear fade to zero at the radius.

    Args:
        radius: Gradient radius in pixels
        peak_alpha: Alpha at the centre, in [0, 1]
        size: Patch side length (defaults to 2 * ceil(radius) + 1)

    Returns:
        float32 array of shape (size, size)
    """
    if size is None:
        size = 2 * int(math.ceil(radius)) + 1
    center = (size - 1) / 2.0
    yy, xx = np.mgrid[0:size, 0:size]
    d = np.hypot(xx - center, yy - center) / max(radius, 1e-6)

    fade = (1.0 - d) / (1.0 - GLOW_SOLID_STOP)
    alpha = np.clip(fade, 0.0, 1.0) * peak_alpha
    return alpha.astype(np.float32)
