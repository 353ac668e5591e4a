"""
API utilities for fetching Paper build information and artifacts.

This module provides the PaperAPI client for the PaperMC build API. Every
response is checked against the shape the tool depends on and anything
unexpected is reported as MetadataUnavailableError.
"""

import logging
from typing import Any, List, Optional

from ..constants import (
    DEFAULT_PROJECT, DEFAULT_TIMEOUT_SECONDS, DOWNLOAD_TIMEOUT_SECONDS, PAPER_API_URL
)
from ..exceptions import MetadataUnavailableError, ValidationError, VersionNotFoundError
from ..models import BuildMetadata
from .base_api import BaseVersionAPI
from .validation import UpdateValidator

logger = logging.getLogger(__name__)


class PaperAPI(BaseVersionAPI):
    """API client for Paper-family projects."""

    def __init__(
        self,
        project: str = DEFAULT_PROJECT,
        base_url: str = PAPER_API_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        download_timeout: float = DOWNLOAD_TIMEOUT_SECONDS,
        **kwargs: Any,
    ) -> None:
        super().__init__(base_url, timeout=timeout, download_timeout=download_timeout, **kwargs)
        self.project = project

    @classmethod
    def from_config(cls, config: Any, project: Optional[str] = None) -> "PaperAPI":
        """
        Create a client from the application configuration.

        Raises:
            ConfigurationError: If a timeout setting is unusable
        """
        return cls(
            project=project or config.get("api.project", DEFAULT_PROJECT),
            base_url=config.get("api.base_url", PAPER_API_URL),
            timeout=config.get_number("api.timeout", DEFAULT_TIMEOUT_SECONDS, float),
            download_timeout=config.get_number("downloads.timeout", DOWNLOAD_TIMEOUT_SECONDS, float),
        )

    def list_minecraft_versions(self) -> List[str]:
        """Get available Minecraft versions for the project, oldest first."""
        url = self.build_url(f"projects/{self.project}")
        data = self.get_json(url)
        versions = self.require_field(data, "versions", list, url)

        if not all(isinstance(v, str) for v in versions):
            raise MetadataUnavailableError(f"Field 'versions' from {url} must contain only strings")

        logger.debug(f"{self.project} offers {len(versions)} versions")
        return versions

    def list_builds(self, minecraft_version: str) -> List[int]:
        """
        Get build numbers published for a Minecraft version.

        Raises:
            VersionNotFoundError: If the API does not know the version
            MetadataUnavailableError: On any other failure
        """
        url = self.build_url(f"projects/{self.project}/versions/{minecraft_version}")
        try:
            data = self.get_json(url)
        except MetadataUnavailableError as e:
            if e.status_code == 404:
                raise VersionNotFoundError(
                    f"Minecraft version {minecraft_version} is not available for {self.project}"
                ) from e
            raise

        builds = self.require_field(data, "builds", list, url)
        if not builds:
            raise MetadataUnavailableError(f"No builds published for {self.project} {minecraft_version}")
        if not all(isinstance(b, int) and not isinstance(b, bool) and b >= 0 for b in builds):
            raise MetadataUnavailableError(
                f"Field 'builds' from {url} must contain only non-negative integers"
            )
        return builds

    def latest_build(self, minecraft_version: str) -> BuildMetadata:
        """Get artifact metadata for the newest build of a Minecraft version."""
        build = max(self.list_builds(minecraft_version))
        logger.debug(f"Latest {self.project} build for {minecraft_version} is {build}")
        return self.build_metadata(minecraft_version, build)

    def build_metadata(self, minecraft_version: str, build_number: int) -> BuildMetadata:
        """Get artifact metadata for one build."""
        url = self.build_url(
            f"projects/{self.project}/versions/{minecraft_version}/builds/{build_number}"
        )
        data = self.get_json(url)
        downloads = self.require_field(data, "downloads", dict, url)
        application = self.require_field(downloads, "application", dict, url)
        name = self.require_field(application, "name", str, url)
        sha256 = self.require_field(application, "sha256", str, url)

        # Anything that could not later be stored in the version record is
        # rejected here, before a download starts
        try:
            UpdateValidator.validate_version(minecraft_version)
            UpdateValidator.validate_build_number(build_number)
            filename = UpdateValidator.validate_filename(name)
            digest = UpdateValidator.validate_sha256(sha256)
        except ValidationError as e:
            raise MetadataUnavailableError(f"Invalid artifact metadata from {url}", e) from e

        return BuildMetadata(
            minecraft_version=minecraft_version,
            build_number=build_number,
            download_filename=filename,
            expected_sha256=digest,
            project=self.project,
        )

    def download_url(
        self, minecraft_version: str, build_number: int, filename: Optional[str] = None
    ) -> str:
        """Build the artifact download URL without touching the network."""
        if filename is None:
            filename = f"{self.project}-{minecraft_version}-{build_number}.jar"

        return self.build_url(
            f"projects/{self.project}/versions/{minecraft_version}/"
            f"builds/{build_number}/downloads/{filename}"
        )
