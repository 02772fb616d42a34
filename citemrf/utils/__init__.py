"""
Utility functions and helpers for citemrf.

This package provides configuration management, input validation
and exception handling.
"""

from .config import Config, Settings, MRFParams
from .validators import InputValidator
from .exceptions import (
    CiteMRFError,
    ValidationError,
    ConfigurationError,
    ProcessingError,
    InferenceError,
    FileFormatError,
)

__all__ = [
    "Config",
    "Settings",
    "MRFParams",
    "InputValidator",
    "CiteMRFError",
    "ValidationError",
    "ConfigurationError",
    "ProcessingError",
    "InferenceError",
    "FileFormatError",
]
