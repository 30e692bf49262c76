"""
Tracking Loop Controller

Owns the detector, the camera and the per-frame cycle:

    acquire frame -> detect -> extract/classify -> update PerHandState -> render

Lifecycle:
    IDLE -> LOADING -> READY -> TRACKING <-> STOPPED
    LOADING or camera acquisition -> ERROR

Each cycle runs to completion and then asks the scheduler for the next
one. Stopping cancels the pending cycle, releases the camera before
returning and clears the canvas. ``close()`` is the single teardown
routine for every exit path and is safe to call repeatedly.

Usage:
    controller = TrackingController(
        detector_factory=lambda: HandLandmarkDetector(config.detector),
        camera=Camera(config.camera.index),
        frame_sink=show_frame,
    )
    controller.initialize()
    controller.toggle()   # start tracking
    ...
    controller.close()
"""

from enum import Enum
from typing import Callable, Optional, Tuple
import cv2
import numpy as np

from ..errors import (
    CameraError,
    CameraPermissionError,
    DetectionError,
    InitializationError,
)
from ..hand.classifier import GestureClassifier
from ..hand.detector import DetectionResult
from ..hand.gesture_state import PerHandState
from ..render.animation import AnimationClock
from ..render.renderer import FrameRenderer
from ..render.surface import RenderSurface
from ..utils.logging_utils import get_logger
from .scheduler import FrameScheduler

logger = get_logger(__name__)

PERMISSION_DENIED_MESSAGE = (
    "Webcam access was denied. Please allow camera access in your system "
    "settings and try again."
)


class TrackerState(Enum):
    IDLE = 'idle'
    LOADING = 'loading'
    READY = 'ready'
    TRACKING = 'tracking'
    STOPPED = 'stopped'
    ERROR = 'error'


class TrackingController:
    """
    Frame-driven gesture tracking loop.

    Collaborators are injected so the loop can run against fakes:
        detector_factory: zero-argument callable returning an object with
            ``detect(frame, timestamp_ms)`` and ``close()``
        camera: object with ``open(width, height)``, ``read()``,
            ``release()``
        scheduler: object with ``request(callback)`` and ``cancel(handle)``
        frame_sink: called with the composited display frame every cycle
    """

    def __init__(
        self,
        detector_factory: Callable[[], object],
        camera,
        renderer: Optional[FrameRenderer] = None,
        scheduler=None,
        frame_sink: Optional[Callable[[np.ndarray], None]] = None,
        clock: Optional[AnimationClock] = None,
        camera_size: Tuple[int, int] = (1280, 720),
        mirror: bool = True,
    ):
        self.detector_factory = detector_factory
        self.camera = camera
        self.clock = clock or AnimationClock()
        self.renderer = renderer or FrameRenderer(mirrored=mirror)
        self.scheduler = scheduler or FrameScheduler()
        self.frame_sink = frame_sink
        self.camera_size = camera_size
        self.mirror = mirror

        self.classifier = GestureClassifier()
        self.gestures = PerHandState()
        self.surface = RenderSurface()

        self.state = TrackerState.IDLE
        self.error_message: Optional[str] = None
        self.error_reason: Optional[str] = None
        self.last_detection: Optional[DetectionResult] = None
        self.frames_processed = 0

        self._detector = None
        self._detector_released = False
        self._pending = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_tracking(self) -> bool:
        return self.state is TrackerState.TRACKING

    @property
    def detector(self):
        return self._detector

    def initialize(self) -> TrackerState:
        """Create the detector once (IDLE -> LOADING -> READY / ERROR)."""
        if self.state is not TrackerState.IDLE:
            return self.state

        self.state = TrackerState.LOADING
        logger.info("Initializing hand tracking model")

        try:
            self._detector = self.detector_factory()
        except InitializationError as exc:
            self._fail(str(exc), reason='initialization')
            return self.state
        except Exception as exc:
            logger.exception("Unexpected error while creating the detector")
            self._fail(f"Failed to initialize model: {exc}", reason='initialization')
            return self.state

        self.state = TrackerState.READY
        logger.info("Hand tracking model ready")
        return self.state

    def toggle(self) -> TrackerState:
        """Start tracking if idle, stop it if running."""
        if self.state is TrackerState.LOADING or self._detector is None:
            return self.state

        if self.is_tracking:
            self.stop()
        else:
            self.start()
        return self.state

    def start(self) -> None:
        if self._detector is None or self._detector_released or self.is_tracking:
            return

        self.error_message = None
        self.error_reason = None

        width, height = self.camera_size
        try:
            self.camera.open(width, height)
        except CameraPermissionError as exc:
            logger.debug(f"Camera permission error: {exc}")
            self._fail(PERMISSION_DENIED_MESSAGE, reason=exc.reason)
            return
        except CameraError as exc:
            self._fail(f"Error accessing webcam: {exc}", reason=exc.reason)
            return

        self.state = TrackerState.TRACKING
        logger.info("Tracking started")
        self._schedule()

    def stop(self) -> None:
        """Halt the loop, release the camera and clear the canvas."""
        self._cancel_pending()
        self.camera.release()
        self.surface.clear()
        self.gestures.clear()
        if self.is_tracking:
            self.state = TrackerState.STOPPED
            logger.info(f"Tracking stopped after {self.frames_processed} frames")

    def close(self) -> None:
        """
        Teardown: cancel pending work and release camera and detector.

        Runs unconditionally and is idempotent; the detector is closed at
        most once.
        """
        self._cancel_pending()
        self.camera.release()
        if self.is_tracking:
            self.state = TrackerState.STOPPED

        if self._detector is not None and not self._detector_released:
            self._detector_released = True
            self._detector.close()
            logger.info("Detector released")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _fail(self, message: str, reason: str) -> None:
        self._cancel_pending()
        self.camera.release()
        self.state = TrackerState.ERROR
        self.error_message = message
        self.error_reason = reason
        logger.error(message)

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    def _schedule(self) -> None:
        self._pending = self.scheduler.request(self._run_cycle)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self.scheduler.cancel(self._pending)
            self._pending = None

    def _run_cycle(self) -> None:
        self._pending = None
        if not self.is_tracking:
            return

        try:
            self.process_frame()
        except Exception:
            logger.exception("Frame processing failed, skipping frame")

        if self.is_tracking:
            self._schedule()

    def process_frame(self) -> bool:
        """
        Run one detect -> classify -> render cycle.

        Returns:
            True if a frame was processed, False if it was skipped
        """
        frame = self.camera.read()
        if frame is None:
            logger.debug("No frame available, skipping cycle")
            return False

        height, width = frame.shape[:2]
        self.surface.resize(width, height)

        try:
            detection = self._detector.detect(frame, self.clock.now_ms())
        except DetectionError as exc:
            logger.warning(f"Skipping frame: {exc}")
            return False

        self.last_detection = detection
        self.gestures.replace(
            self.classifier.classify_landmarks(hand) for hand in detection.hands
        )
        self.renderer.render(self.surface, detection.hands, self.gestures)
        self.frames_processed += 1

        if self.frame_sink is not None:
            self.frame_sink(self.compose(frame))

        return True

    def compose(self, frame: np.ndarray) -> np.ndarray:
        """Overlay the rendered surface on a frame and mirror for display."""
        out = self.surface.composite(frame)
        if self.mirror:
            out = cv2.flip(out, 1)
        return out
