"""Utility functions and classes."""

from .config import load_config, Config
from .logging_utils import setup_logging, get_logger

__all__ = [
    "load_config",
    "Config",
    "setup_logging",
    "get_logger",
]
