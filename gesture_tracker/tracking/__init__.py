"""Camera acquisition and the per-frame tracking loop."""

from .camera import Camera
from .scheduler import FrameScheduler
from .controller import TrackingController, TrackerState

__all__ = [
    "Camera",
    "FrameScheduler",
    "TrackingController",
    "TrackerState",
]
