"""
Custom exception classes for PaperUpdater.

This module defines the exception hierarchy used throughout the application
for consistent error handling and reporting.
"""

from typing import Optional


class UpdaterError(Exception):
    """Base exception class for all PaperUpdater errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message} (caused by: {self.cause})"
        return self.message


class ValidationError(UpdaterError):
    """Raised when input validation fails."""
    pass


class ConfigurationError(UpdaterError):
    """Raised when configuration is invalid or missing."""
    pass


class VersionNotFoundError(UpdaterError):
    """Raised when a Minecraft version is not known upstream."""
    pass


class MetadataUnavailableError(UpdaterError):
    """Raised when build metadata cannot be fetched or parsed."""

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, cause)
        self.status_code = status_code


class CorruptHistoryError(UpdaterError):
    """Raised when the local history file exists but cannot be parsed."""
    pass


class DownloadError(UpdaterError):
    """Raised when file download fails."""
    pass


class IntegrityMismatchError(UpdaterError):
    """Raised when a downloaded artifact does not match its expected digest."""

    def __init__(self, message: str, expected: str, actual: str):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class IOFailureError(UpdaterError):
    """Raised when a local filesystem operation fails."""
    pass
