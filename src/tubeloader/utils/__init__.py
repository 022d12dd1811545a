"""Utility functions and classes for tubeloader."""

from .config import Config
from .paths import sanitize_filename, default_output_path
from .logging import log_error

__all__ = ["Config", "sanitize_filename", "default_output_path", "log_error"]
