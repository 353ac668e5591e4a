"""
Data model for PaperUpdater.

This module defines the records passed between the metadata client, the
resolver, the installer and the history store.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from .constants import DEFAULT_PROJECT
from .exceptions import ValidationError
from .utils.validation import UpdateValidator


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class UpdateAction(str, Enum):
    """What the installer has to do for a resolved target."""

    SKIP = "skip"
    DOWNLOAD = "download"


@dataclass(frozen=True)
class BuildMetadata:
    """Artifact metadata for one build, as reported by the build API."""

    minecraft_version: str
    build_number: int
    download_filename: str
    expected_sha256: str
    project: str = DEFAULT_PROJECT

    @property
    def label(self) -> str:
        return f"{self.project} {self.minecraft_version} build {self.build_number}"


@dataclass(frozen=True)
class VersionRecord:
    """
    Snapshot of the currently installed artifact.

    The digest is normalised to lowercase hex on construction.
    """

    minecraft_version: str
    build_number: int
    sha256: str
    recorded_at: datetime = field(default_factory=utc_now)
    project: str = DEFAULT_PROJECT

    def __post_init__(self) -> None:
        UpdateValidator.validate_version(self.minecraft_version)
        UpdateValidator.validate_build_number(self.build_number)
        object.__setattr__(self, "sha256", UpdateValidator.validate_sha256(self.sha256))
        if not isinstance(self.recorded_at, datetime):
            raise ValidationError("Recorded time must be a datetime")
        if self.recorded_at.tzinfo is None:
            object.__setattr__(self, "recorded_at", self.recorded_at.replace(tzinfo=timezone.utc))

    @classmethod
    def for_build(cls, target: BuildMetadata, sha256: str) -> "VersionRecord":
        """Create a fresh record for an installed build."""
        return cls(
            minecraft_version=target.minecraft_version,
            build_number=target.build_number,
            sha256=sha256,
            project=target.project,
        )

    def matches(self, target: BuildMetadata) -> bool:
        """True when this record describes exactly the given build."""
        return (
            self.project == target.project
            and self.minecraft_version == target.minecraft_version
            and self.build_number == target.build_number
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project": self.project,
            "minecraft_version": self.minecraft_version,
            "build_number": self.build_number,
            "sha256": self.sha256,
            "recorded_at": self.recorded_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "VersionRecord":
        """
        Build a record from its JSON form.

        Raises:
            ValidationError: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ValidationError("Version record must be a JSON object")

        missing = [
            key for key in ("minecraft_version", "build_number", "sha256", "recorded_at")
            if key not in data
        ]
        if missing:
            raise ValidationError(f"Version record is missing fields: {', '.join(missing)}")

        recorded_at = data["recorded_at"]
        if not isinstance(recorded_at, str):
            raise ValidationError("Recorded time must be an ISO 8601 string")
        try:
            parsed_at = datetime.fromisoformat(recorded_at)
        except ValueError as e:
            raise ValidationError(f"Invalid recorded time: {recorded_at}", e) from e

        return cls(
            minecraft_version=data["minecraft_version"],
            build_number=data["build_number"],
            sha256=data["sha256"],
            recorded_at=parsed_at,
            project=UpdateValidator.validate_non_empty_string(
                data.get("project", DEFAULT_PROJECT), "Project"
            ),
        )


@dataclass(frozen=True)
class UpdateDecision:
    """Resolver output: the target build and whether it must be downloaded."""

    target: BuildMetadata
    action: UpdateAction
    current: Optional[VersionRecord] = None

    @property
    def needs_download(self) -> bool:
        return self.action is UpdateAction.DOWNLOAD


@dataclass(frozen=True)
class UpdateResult:
    """Outcome of a full update run."""

    decision: UpdateDecision
    record: Optional[VersionRecord]

    @property
    def installed(self) -> bool:
        return self.decision.needs_download
