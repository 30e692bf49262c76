"""
Render Surface

A transparent BGRA canvas the size of the video frame. The renderer draws
opaque primitives straight into it with OpenCV and alpha-blends
translucent patches (glows, label boxes) with ``blend_patch``. The display
layer then composites it over the camera frame.
"""

import cv2
import numpy as np


class RenderSurface:
    """BGRA uint8 overlay, cleared and redrawn every frame."""

    def __init__(self, width: int = 0, height: int = 0):
        self.image = np.zeros((height, width, 4), dtype=np.uint8)

    @property
    def width(self) -> int:
        return self.image.shape[1]

    @property
    def height(self) -> int:
        return self.image.shape[0]

    def matches(self, width: int, height: int) -> bool:
        return self.width == width and self.height == height

    def resize(self, width: int, height: int) -> None:
        """Reallocate to the given size; contents are discarded."""
        if not self.matches(width, height):
            self.image = np.zeros((height, width, 4), dtype=np.uint8)

    def clear(self) -> None:
        self.image[:] = 0

    def is_blank(self) -> bool:
        return not self.image[..., 3].any()

    def blend_patch(self, x0: int, y0: int, patch: np.ndarray) -> None:
        """
        Alpha-composite a BGRA patch over the surface ("over" operator).

        Args:
            x0: Left edge of the patch in surface pixels (may be negative)
            y0: Top edge of the patch in surface pixels (may be negative)
            patch: BGRA uint8 array
        """
        h, w = patch.shape[:2]
        sx0, sy0 = max(x0, 0), max(y0, 0)
        sx1, sy1 = min(x0 + w, self.width), min(y0 + h, self.height)
        if sx0 >= sx1 or sy0 >= sy1:
            return

        src = patch[sy0 - y0:sy1 - y0, sx0 - x0:sx1 - x0].astype(np.float32) / 255.0
        dst = self.image[sy0:sy1, sx0:sx1].astype(np.float32) / 255.0

        src_a = src[..., 3:4]
        dst_a = dst[..., 3:4]
        out_a = src_a + dst_a * (1.0 - src_a)
        out_c = (src[..., :3] * src_a + dst[..., :3] * dst_a * (1.0 - src_a)) / np.maximum(out_a, 1e-6)

        out = np.concatenate([out_c, out_a], axis=-1)
        self.image[sy0:sy1, sx0:sx1] = np.clip(out * 255.0 + 0.5, 0, 255).astype(np.uint8)

    def composite(self, frame: np.ndarray) -> np.ndarray:
        """
        Blend the overlay over a BGR frame of the same size.

        Args:
            frame: BGR uint8 image

        Returns:
            New BGR uint8 image
        """
        if frame.shape[:2] != self.image.shape[:2]:
            frame = cv2.resize(frame, (self.width, self.height))
        alpha = self.image[..., 3:4].astype(np.float32) / 255.0
        out = frame.astype(np.float32) * (1.0 - alpha) + self.image[..., :3].astype(np.float32) * alpha
        return np.clip(out + 0.5, 0, 255).astype(np.uint8)
