"""
Error Types

Exception hierarchy shared by the detector, camera and tracking loop.

    GestureTrackerError
    ├── InitializationError     model / resource could not be created
    ├── CameraError
    │   ├── CameraPermissionError   access refused by the OS or user
    │   └── CameraDeviceError       busy, missing or unreadable device
    └── DetectionError          a single frame could not be processed

A degenerate hand (palm too small to classify) is not an error: it simply
classifies as no gesture for that frame.
"""


class GestureTrackerError(Exception):
    """Base class for all gesture tracker errors."""


class InitializationError(GestureTrackerError):
    """The landmark model or another startup resource is unavailable."""


class CameraError(GestureTrackerError):
    """The live video stream could not be acquired."""

    reason = "device"


class CameraPermissionError(CameraError):
    """Camera access was denied."""

    reason = "denied"


class CameraDeviceError(CameraError):
    """Camera is busy, missing or failed to deliver frames."""

    reason = "device"


class DetectionError(GestureTrackerError):
    """Landmark detection failed for one frame."""
