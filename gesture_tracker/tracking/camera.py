"""
Camera Source

Live video acquisition through OpenCV, with failures split into
"permission denied" and "device error".

Usage:
    from gesture_tracker.tracking.camera import Camera

    with Camera(index=0).open(1280, 720) as camera:
        frame = camera.read()
"""

import os
import sys
import cv2
import numpy as np
from pathlib import Path
from typing import Optional, Tuple

from ..errors import CameraDeviceError, CameraPermissionError
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)


class Camera:
    """
    Webcam stream backed by ``cv2.VideoCapture``.

    ``release()`` stops the stream and may be called at any time, including
    before ``open()`` or more than once.
    """

    def __init__(self, index: int = 0):
        """
        Args:
            index: OpenCV device index
        """
        self.index = index
        self._cap = None

    @property
    def is_open(self) -> bool:
        return self._cap is not None

    def _device_path(self) -> Optional[Path]:
        if sys.platform.startswith('linux'):
            return Path(f"/dev/video{self.index}")
        return None

    def open(self, width: int = 1280, height: int = 720) -> 'Camera':
        """
        Start the stream at the requested resolution.

        Args:
            width: Desired frame width
            height: Desired frame height

        Returns:
            Self for method chaining
        """
        if self._cap is not None:
            return self

        device = self._device_path()
        if device is not None and device.exists() and not os.access(device, os.R_OK | os.W_OK):
            raise CameraPermissionError(f"Permission denied for {device}")

        cap = cv2.VideoCapture(self.index)
        if not cap.isOpened():
            cap.release()
            raise CameraDeviceError(f"Could not open camera {self.index}")

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        self._cap = cap

        logger.info(f"Camera {self.index} opened at {self.frame_size[0]}x{self.frame_size[1]}")
        return self

    @property
    def frame_size(self) -> Tuple[int, int]:
        """(width, height) reported by the device, (0, 0) when closed."""
        if self._cap is None:
            return (0, 0)
        return (
            int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )

    def read(self) -> Optional[np.ndarray]:
        """
        Grab the next frame.

        Returns:
            BGR frame, or None if no frame is available
        """
        if self._cap is None:
            return None
        ret, frame = self._cap.read()
        return frame if ret else None

    def release(self) -> None:
        """Stop the stream and free the device."""
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.info(f"Camera {self.index} released")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
