"""
Hand Gesture Tracker Application

OpenCV window shell around the tracking loop.

Usage:
    python -m gesture_tracker --config configs/default.yaml

Keys:
    SPACE  start / stop tracking
    q      quit
"""

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from .hand.detector import HandLandmarkDetector
from .render.renderer import text_box_patch
from .render.surface import RenderSurface
from .tracking.camera import Camera
from .tracking.controller import TrackingController, TrackerState
from .utils.config import Config, load_config
from .utils.logging_utils import setup_logging, get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG = "configs/default.yaml"
TOGGLE_KEY = ord(' ')

STATUS_TEXT = {
    TrackerState.IDLE: "Initializing Hand Tracking Model...",
    TrackerState.LOADING: "Initializing Hand Tracking Model...",
    TrackerState.READY: "Ready to Track - press SPACE to start",
    TrackerState.STOPPED: "Ready to Track - press SPACE to start",
}


class GestureTrackerApp:
    """Window, key handling and the event loop that drives the controller."""

    def __init__(self, config: Config):
        self.config = config
        self.controller = TrackingController(
            detector_factory=lambda: HandLandmarkDetector(config.detector),
            camera=Camera(config.camera.index),
            frame_sink=self._show,
            camera_size=(config.camera.width, config.camera.height),
            mirror=config.display.mirror,
        )
        self._running = False

    def _show(self, frame: np.ndarray) -> None:
        cv2.imshow(self.config.display.window_name, frame)

    def _status_frame(self) -> np.ndarray:
        width, height = self.config.camera.width, self.config.camera.height
        state = self.controller.state
        if state is TrackerState.ERROR:
            text = f"Error: {self.controller.error_message}"
        else:
            text = STATUS_TEXT.get(state, "")

        surface = RenderSurface(width, height)
        if text:
            patch = text_box_patch(text, 0.6, 1, 12, 40, 10, (59, 41, 30, 255), mirrored=False)
            surface.blend_patch((width - patch.shape[1]) // 2, (height - patch.shape[0]) // 2, patch)
        return surface.composite(np.full((height, width, 3), 23, dtype=np.uint8))

    async def run(self) -> None:
        """Event loop: poll keys, show status while not tracking."""
        self._running = True
        cv2.namedWindow(self.config.display.window_name)
        self._show(self._status_frame())
        cv2.waitKey(1)

        self.controller.initialize()
        quit_key = ord(self.config.display.quit_key)

        try:
            while self._running:
                if not self.controller.is_tracking:
                    self._show(self._status_frame())

                key = cv2.waitKey(1) & 0xFF
                if key == quit_key:
                    break
                if key == TOGGLE_KEY:
                    self.controller.toggle()

                # Yield so scheduled frame cycles can run
                await asyncio.sleep(0 if self.controller.is_tracking else 0.03)
        finally:
            self.close()

    def close(self) -> None:
        self._running = False
        self.controller.close()
        cv2.destroyAllWindows()


def main():
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Real-time hand gesture tracker"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help=f"Configuration file (default: {DEFAULT_CONFIG} if present)"
    )
    parser.add_argument(
        "--camera",
        type=int,
        default=None,
        help="Camera device index"
    )
    parser.add_argument(
        "--model-path",
        type=str,
        default=None,
        help="Local hand_landmarker.task file"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args()

    config_path: Optional[str] = args.config
    if config_path is None and Path(DEFAULT_CONFIG).exists():
        config_path = DEFAULT_CONFIG
    config = load_config(config_path) if config_path else Config()

    if args.camera is not None:
        config.camera.index = args.camera
    if args.model_path:
        config.detector.model_path = args.model_path

    setup_logging(
        level=logging.DEBUG if args.verbose else config.log_level,
        log_file=config.log_file
    )
    logger.info(f"{config.project_name} {config.version}")

    app = GestureTrackerApp(config)
    try:
        asyncio.run(app.run())
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        app.close()


if __name__ == "__main__":
    main()
