"""
Custom exceptions for the citemrf citation context classifier.

This module defines the exception hierarchy used throughout the
package for error handling and reporting.
"""

from __future__ import annotations


def _details(*parts) -> str:
    """Join the non-empty (label, value) parts as ``label: value, ...``."""
    return ", ".join(f"{label}: {value}" for label, value in parts if value not in ("", None))


class CiteMRFError(Exception):
    """
    Base exception class for citemrf.

    All custom exceptions in the package inherit from this base class.
    """

    def __init__(self, message: str = "", details: str = "") -> None:
        """
        Initialize exception.

        Args:
            message: Main error message
            details: Additional error details
        """
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        """String representation of the exception."""
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class ValidationError(CiteMRFError):
    """
    Raised when dataset content or a probability vector is malformed.

    ``field`` names the offending location, e.g. ``cited.main_author`` or
    ``citers[2].sentences[0]``, so the bad entry can be found in the file.
    """

    def __init__(self, message: str = "Validation failed", field: str = "", value: str = "") -> None:
        super().__init__(message, _details(("field", field), ("value", value)))
        self.field = field
        self.value = value


class ConfigurationError(CiteMRFError):
    """
    Raised for an invalid configuration value.

    Raised before any document is processed; fatal for the whole run.
    """

    def __init__(self, message: str = "Configuration error", config_key: str = "",
                 config_value: str = "") -> None:
        """
        Initialize configuration error.

        Args:
            message: Configuration error message
            config_key: Setting that caused the error, e.g. ``neighbourhood``
            config_value: Rejected value
        """
        super().__init__(message, _details(("key", config_key), ("value", config_value)))
        self.config_key = config_key
        self.config_value = config_value


class ProcessingError(CiteMRFError):
    """
    Raised when building features or classifying a document fails.
    """

    def __init__(self, message: str = "Processing failed", operation: str = "",
                 original_error: str = "") -> None:
        super().__init__(message, _details(("operation", operation), ("error", original_error)))
        self.operation = operation
        self.original_error = original_error


class InferenceError(ProcessingError):
    """
    Raised when inference over a single document must abort.

    Typically a NaN similarity produced by an upstream feature. Only the
    affected document is dropped from corpus aggregation.
    """

    def __init__(self, message: str = "Inference failed", sentence_index: int = -1,
                 original_error: str = "") -> None:
        super().__init__(message, operation="inference", original_error=original_error)
        self.sentence_index = sentence_index
        if sentence_index >= 0:
            self.details = _details(("sentence", sentence_index), ("operation", "inference"),
                                    ("error", original_error))


class FileFormatError(CiteMRFError):
    """
    Raised for a dataset file that cannot be read or is not valid JSON.

    ``line`` and ``column`` locate a JSON syntax error; they are 0 when
    the file could not be read at all.
    """

    def __init__(self, message: str = "File format error", file_path: str = "",
                 line: int = 0, column: int = 0) -> None:
        position = f"{line}:{column}" if line else ""
        super().__init__(message, _details(("file", file_path), ("at", position)))
        self.file_path = file_path
        self.line = line
        self.column = column


def get_error_context(exception: Exception) -> str:
    """Format an exception for a log line."""
    if isinstance(exception, CiteMRFError):
        return str(exception)
    return f"{type(exception).__name__}: {exception}"


def log_exception(logger, exception: Exception, context: str = "") -> None:
    """
    Log an exception with a level matching its type.

    Bad input and configuration are warnings; everything else is an error.

    Args:
        logger: Logger instance
        exception: Exception to log
        context: Prefix naming what was being done
    """
    message = get_error_context(exception)
    if context:
        message = f"{context} - {message}"

    if isinstance(exception, (ValidationError, ConfigurationError)):
        logger.warning(message)
    else:
        logger.error(message)
