"""
Hand Gesture Tracker

Real-time recognition of static hand gestures (Pointing, Open Palm, Fist)
from MediaPipe hand landmarks, with animated on-screen feedback.
"""

__version__ = "1.0.0"

from . import hand
from . import render
from . import tracking
from . import utils
