"""
Common validation utilities for PaperUpdater.

This module provides shared validation functions used by the data model,
the API response parsers and the CLI to enforce consistent validation
patterns.
"""

import re
from pathlib import Path
from typing import Any, Optional

from ..constants import (
    MAX_VERSION_LENGTH, SHA256_PATTERN, SUPPORTED_PROJECTS, VALID_VERSION_CHARS
)
from ..exceptions import ValidationError


class BaseValidator:
    """Base validator class with common validation methods."""

    @staticmethod
    def validate_non_empty_string(value: Any, field_name: str) -> str:
        """Validate that value is a non-empty string."""
        if not isinstance(value, str):
            raise ValidationError(f"{field_name} must be a string")

        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{field_name} cannot be empty")

        return stripped

    @staticmethod
    def validate_integer_range(
        value: Any,
        field_name: str,
        min_value: int,
        max_value: Optional[int] = None
    ) -> int:
        """Validate that value is an integer within the specified range.

        A max_value of None leaves the range open above.
        """
        # bool is an int subclass but never a valid count
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValidationError(f"{field_name} must be an integer")

        if max_value is None:
            if value < min_value:
                raise ValidationError(f"{field_name} must be at least {min_value}")
        elif value < min_value or value > max_value:
            raise ValidationError(
                f"{field_name} must be between {min_value} and {max_value}"
            )

        return value

    @staticmethod
    def validate_string_length(
        value: str,
        field_name: str,
        max_length: int,
        min_length: int = 1
    ) -> str:
        """Validate string length constraints."""
        if len(value) < min_length:
            raise ValidationError(f"{field_name} must be at least {min_length} characters")

        if len(value) > max_length:
            raise ValidationError(f"{field_name} must be no more than {max_length} characters")

        return value

    @staticmethod
    def validate_regex_pattern(
        value: str,
        field_name: str,
        pattern: str,
        pattern_description: str = "valid format"
    ) -> str:
        """Validate that value matches the given regex pattern."""
        if not re.match(pattern, value):
            raise ValidationError(f"{field_name} must have {pattern_description}")

        return value


class UpdateValidator(BaseValidator):
    """Validator for update-specific inputs."""

    @staticmethod
    def validate_version(version: Any) -> str:
        """Validate Minecraft version string."""
        version_str = UpdateValidator.validate_non_empty_string(version, "Version")

        version_str = UpdateValidator.validate_string_length(
            version_str, "Version", MAX_VERSION_LENGTH
        )

        version_str = UpdateValidator.validate_regex_pattern(
            version_str,
            "Version",
            VALID_VERSION_CHARS,
            "valid characters (alphanumeric, dots, dashes, underscores, plus signs only)"
        )

        return version_str

    @staticmethod
    def validate_build_number(build: Any) -> int:
        """Validate build number input."""
        return UpdateValidator.validate_integer_range(build, "Build number", 0)

    @staticmethod
    def validate_sha256(digest: Any) -> str:
        """Validate a SHA256 hex digest and return it lowercased."""
        digest_str = UpdateValidator.validate_non_empty_string(digest, "SHA256 digest")
        UpdateValidator.validate_regex_pattern(
            digest_str, "SHA256 digest", SHA256_PATTERN, "exactly 64 hexadecimal characters"
        )
        return digest_str.lower()

    @staticmethod
    def validate_filename(filename: Any) -> str:
        """Validate a download filename reported by the API."""
        name = UpdateValidator.validate_non_empty_string(filename, "Download filename")
        if "/" in name or "\\" in name or name in (".", ".."):
            raise ValidationError(f"Download filename must not contain path separators: {name}")
        return name

    @staticmethod
    def validate_project(project: Any) -> str:
        """Validate PaperMC project name."""
        project_str = UpdateValidator.validate_non_empty_string(project, "Project").lower()
        if project_str not in SUPPORTED_PROJECTS:
            raise ValidationError(
                f"Project must be one of: {', '.join(SUPPORTED_PROJECTS)}"
            )
        return project_str


class PathValidator(BaseValidator):
    """Validator for local file paths."""

    @staticmethod
    def validate_destination(destination: Optional[str]) -> Path:
        """Validate the destination JAR path."""
        if destination is None:
            raise ValidationError("Destination path is required")

        path = Path(destination).expanduser()
        if path.exists() and path.is_dir():
            raise ValidationError(f"Destination must be a file, not a directory: {path}")

        parent = path.parent if str(path.parent) else Path(".")
        if not parent.exists():
            raise ValidationError(f"Destination directory does not exist: {parent}")

        return path

    @staticmethod
    def validate_history_file(history_file: Optional[str], destination: Path, default_name: str) -> Path:
        """Resolve the history file path, defaulting to a file beside the destination."""
        if history_file is None:
            return destination.parent / default_name

        path = Path(history_file).expanduser()
        if path.exists() and path.is_dir():
            raise ValidationError(f"History file must be a file, not a directory: {path}")
        return path
