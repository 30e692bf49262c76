"""Tests for rendering and animation module."""

import math
import pytest
import numpy as np
import cv2
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from gesture_tracker.hand.classifier import GestureClassifier, GestureLabel
from gesture_tracker.hand.gesture_state import PerHandState
from gesture_tracker.render.animation import (
    AnimationClock,
    connector_style,
    depth_intensity,
    dot_style,
    glow_style,
    glow_tips,
    hsl_to_bgr,
    pulse,
    radial_glow_alpha,
)
from gesture_tracker.render.renderer import FrameRenderer, banner_origin, text_box_patch
from gesture_tracker.render.surface import RenderSurface

WIDTH, HEIGHT = 640, 480

# now_ms values at the peak and trough of each pulse
FIST_PEAK = 150 * math.pi / 2
FIST_TROUGH = 150 * 3 * math.pi / 2
GLOW_PEAK = 200 * math.pi / 2


@pytest.fixture
def open_hand():
    """Spread open hand, fingertips well separated."""
    return np.array([
        [0.50, 0.80, 0.00],   # 0 wrist
        [0.44, 0.74, -0.01],  # 1 thumb
        [0.39, 0.68, -0.02],
        [0.35, 0.62, -0.03],
        [0.30, 0.56, -0.04],  # 4 thumb tip
        [0.42, 0.55, -0.01],  # 5 index mcp
        [0.41, 0.45, -0.02],
        [0.405, 0.38, -0.03],
        [0.40, 0.30, -0.04],  # 8 index tip
        [0.50, 0.53, -0.01],  # 9 middle mcp
        [0.50, 0.43, -0.02],
        [0.50, 0.35, -0.03],
        [0.50, 0.27, -0.04],  # 12 middle tip
        [0.57, 0.55, -0.01],  # 13 ring mcp
        [0.58, 0.45, -0.02],
        [0.59, 0.37, -0.03],
        [0.60, 0.30, -0.04],  # 16 ring tip
        [0.63, 0.60, -0.01],  # 17 pinky mcp
        [0.66, 0.52, -0.02],
        [0.68, 0.46, -0.03],
        [0.70, 0.40, -0.04],  # 20 pinky tip
    ])


def render(hands, labels, now_ms=0.0):
    surface = RenderSurface(WIDTH, HEIGHT)
    state = PerHandState()
    state.replace(labels)
    FrameRenderer().render(surface, hands, state, now_ms=now_ms)
    return surface


class TestAnimation:
    """Tests for pure animation and shading rules."""

    def test_hsl_to_bgr(self):
        """Test HSL to BGR conversion."""
        assert hsl_to_bgr(0, 100, 50) == (0, 0, 255)
        assert hsl_to_bgr(240, 100, 50) == (255, 0, 0)
        assert hsl_to_bgr(0, 0, 100) == (255, 255, 255)

    def test_pulse_range(self):
        """Test that the pulse stays within [0, 1]."""
        values = [pulse(t, 150) for t in np.linspace(0, 5000, 200)]
        assert min(values) >= 0.0
        assert max(values) <= 1.0
        assert pulse(0, 150) == pytest.approx(0.5)

    def test_static_connectors_outside_fist(self):
        """Test that connectors only animate for Fist."""
        for gesture in (GestureLabel.NONE, GestureLabel.OPEN_PALM, GestureLabel.POINTING):
            a = connector_style(gesture, 0)
            b = connector_style(gesture, FIST_PEAK)
            assert a == b
            assert a.width == 5.0
            assert a.color == hsl_to_bgr(190, 95, 43)

    def test_fist_connectors_pulse(self):
        """Test Fist connector width and color at peak and trough."""
        peak = connector_style(GestureLabel.FIST, FIST_PEAK)
        trough = connector_style(GestureLabel.FIST, FIST_TROUGH)

        assert peak.width == pytest.approx(8.0)
        assert trough.width == pytest.approx(5.0)
        assert peak.color == hsl_to_bgr(190, 95, 58)
        assert trough.color == hsl_to_bgr(190, 95, 43)

    def test_fist_width_stays_in_range(self):
        """Test Fist connector width bounds."""
        for t in np.linspace(0, 3000, 97):
            width = connector_style(GestureLabel.FIST, t).width
            assert 5.0 <= width <= 8.0

    def test_depth_intensity(self):
        """Test depth normalization."""
        z = np.array([-0.1, 0.0, 0.1])
        assert depth_intensity(z) == pytest.approx([1.0, 0.5, 0.0])

    def test_flat_hand_uniform_shading(self):
        """Test shading when all landmarks share one depth."""
        assert depth_intensity(np.full(21, 0.02)) == pytest.approx(np.ones(21))

    def test_nearer_dots_larger_and_lighter(self):
        """Test dot size and lightness by depth."""
        near_color, near_radius = dot_style(1.0)
        far_color, far_radius = dot_style(0.0)

        assert near_radius == pytest.approx(7.0)
        assert far_radius == pytest.approx(3.0)
        assert sum(near_color) > sum(far_color)

    def test_glow_tips(self):
        """Test which fingertips glow per gesture."""
        assert glow_tips(GestureLabel.OPEN_PALM) == [4, 8, 12, 16, 20]
        assert glow_tips(GestureLabel.POINTING) == [8]
        assert glow_tips(GestureLabel.FIST) == []
        assert glow_tips(GestureLabel.NONE) == []

    def test_glow_style(self):
        """Test glow radius and alpha bounds."""
        peak = glow_style(GLOW_PEAK)
        assert peak.radius == pytest.approx(25.0)
        assert peak.alpha == pytest.approx(0.2)

        for t in np.linspace(0, 3000, 50):
            style = glow_style(t)
            assert 0.2 - 1e-9 <= style.alpha <= 0.4 + 1e-9
            assert 15.0 - 1e-9 <= style.radius <= 25.0 + 1e-9

    def test_radial_glow_alpha(self):
        """Test the radial gradient mask."""
        alpha = radial_glow_alpha(10.0, 0.4)
        center = alpha.shape[0] // 2

        assert alpha.shape == (21, 21)
        assert alpha[center, center] == pytest.approx(0.4)
        assert alpha[center, center + 2] == pytest.approx(0.4)
        assert alpha[0, 0] == 0.0
        assert alpha[center, center + 6] < 0.4

    def test_clock_uses_injected_time(self):
        """Test AnimationClock with an injected time source."""
        times = iter([10.0, 10.25])
        clock = AnimationClock(time_fn=lambda: next(times))
        assert clock.now_ms() == pytest.approx(250.0)


class TestRenderSurface:
    """Tests for RenderSurface."""

    def test_resize_and_clear(self):
        """Test surface resize and clear."""
        surface = RenderSurface()
        surface.resize(WIDTH, HEIGHT)
        assert surface.image.shape == (HEIGHT, WIDTH, 4)

        surface.image[10, 10] = 255
        assert not surface.is_blank()
        surface.clear()
        assert surface.is_blank()

    def test_blend_opaque_patch(self):
        """Test blending an opaque patch."""
        surface = RenderSurface(20, 20)
        patch = np.zeros((4, 4, 4), dtype=np.uint8)
        patch[:] = (10, 20, 30, 255)

        surface.blend_patch(2, 3, patch)

        assert tuple(surface.image[3, 2]) == (10, 20, 30, 255)
        assert surface.image[0, 0, 3] == 0

    def test_blend_patch_clipped(self):
        """Test that patches are clipped at the surface edges."""
        surface = RenderSurface(10, 10)
        patch = np.full((6, 6, 4), 255, dtype=np.uint8)

        surface.blend_patch(-3, -3, patch)
        surface.blend_patch(50, 50, patch)

        assert surface.image[0, 0, 3] == 255
        assert surface.image[3, 3, 3] == 0

    def test_composite_transparent_keeps_frame(self):
        """Test that a blank surface leaves the frame unchanged."""
        surface = RenderSurface(8, 8)
        frame = np.random.randint(0, 255, (8, 8, 3), dtype=np.uint8)

        assert np.array_equal(surface.composite(frame), frame)


class TestFrameRenderer:
    """Tests for FrameRenderer."""

    def test_no_hands_draws_nothing(self):
        """Test rendering with no hands."""
        assert render([], []).is_blank()

    def test_hand_is_drawn(self, open_hand):
        """Test that a hand is drawn."""
        surface = render([open_hand], [GestureLabel.NONE])
        assert not surface.is_blank()

    def test_surface_fully_redrawn(self, open_hand):
        """Test that each render starts from a clear surface."""
        surface = render([open_hand], [GestureLabel.OPEN_PALM])
        FrameRenderer().render(surface, [], PerHandState(), now_ms=0.0)
        assert surface.is_blank()

    def test_fixture_classifies_as_open_palm(self, open_hand):
        """Test that the open hand fixture is an Open Palm."""
        assert GestureClassifier().classify_landmarks(open_hand) is GestureLabel.OPEN_PALM

    def test_glow_only_for_glowing_gestures(self, open_hand):
        """Test that glow appears only for glowing gestures."""
        tip_x, tip_y = int(0.40 * WIDTH), int(0.30 * HEIGHT)
        sample = (tip_y + 8, tip_x + 12)

        glowing = render([open_hand], [GestureLabel.OPEN_PALM])
        plain = render([open_hand], [GestureLabel.NONE])

        assert glowing.image[sample][3] > 0
        assert plain.image[sample][3] == 0

    def test_banner_drawn_only_for_gesture(self, open_hand):
        """Test that the banner is drawn only for a recognized gesture."""
        sample = (40, 25)

        with_banner = render([open_hand], [GestureLabel.POINTING])
        without_banner = render([open_hand], [GestureLabel.NONE])

        assert with_banner.image[sample][3] > 0
        assert without_banner.image[sample][3] == 0

    def test_second_hand_banner_on_right(self, open_hand):
        """Test that the second hand's banner is on the right."""
        surface = render([open_hand, open_hand], [GestureLabel.NONE, GestureLabel.FIST])

        assert surface.image[40, WIDTH - 25][3] > 0
        assert surface.image[40, 25][3] == 0

    def test_banner_origin(self):
        """Test banner anchoring per hand slot."""
        assert banner_origin(WIDTH, 100, 0) == (20, 20)
        assert banner_origin(WIDTH, 100, 1) == (WIDTH - 120, 20)
        assert banner_origin(WIDTH, 100, 3) == (WIDTH - 120, 20)

    def test_text_patch_is_counter_mirrored(self):
        """Test that text patches are flipped for a mirrored display."""
        args = ('Index', 0.5, 1, 5, 22, 8, (42, 23, 15, 179))
        plain = text_box_patch(*args, mirrored=False)
        mirrored = text_box_patch(*args, mirrored=True)

        assert plain.shape[0] == 22
        assert np.array_equal(cv2.flip(plain, 1), mirrored)
        assert not np.array_equal(plain, mirrored)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
