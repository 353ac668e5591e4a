"""
Update resolution for PaperUpdater.

The resolver turns a requested version constraint and the installed record
into an UpdateDecision. It only reads from the metadata source and never
touches the filesystem.
"""

import logging
from typing import List, Optional

from packaging.version import InvalidVersion, Version

from .exceptions import MetadataUnavailableError, VersionNotFoundError
from .models import BuildMetadata, UpdateAction, UpdateDecision, VersionRecord
from .utils.base_api import MetadataSource

logger = logging.getLogger(__name__)


def decide(current: Optional[VersionRecord], target: BuildMetadata) -> UpdateDecision:
    """Compare the installed record against a target build."""
    if current is not None and current.matches(target):
        return UpdateDecision(target=target, action=UpdateAction.SKIP, current=current)
    return UpdateDecision(target=target, action=UpdateAction.DOWNLOAD, current=current)


def is_stable_release(version_str: str) -> bool:
    """True for plain release versions such as 1.20.4 (not pre-releases or snapshots)."""
    try:
        parsed = Version(version_str)
    except InvalidVersion:
        return False
    return not (parsed.is_prerelease or parsed.is_devrelease or parsed.local)


class UpdateResolver:
    """Decides which build to install and whether a download is needed."""

    def __init__(self, client: MetadataSource, stable_only: bool = False) -> None:
        self.client = client
        self.stable_only = stable_only

    def resolve_version(self, requested_version: Optional[str] = None) -> str:
        """
        Resolve the Minecraft version to target.

        Raises:
            VersionNotFoundError: If the requested version is not published
            MetadataUnavailableError: If the version list is empty or unavailable
        """
        versions = self.client.list_minecraft_versions()

        if requested_version is not None:
            if requested_version not in versions:
                raise VersionNotFoundError(
                    f"Minecraft version {requested_version} is not available upstream"
                )
            return requested_version

        if not versions:
            raise MetadataUnavailableError("The build API returned no versions")

        return self._latest(versions)

    def _latest(self, versions: List[str]) -> str:
        if self.stable_only:
            stable = [v for v in versions if is_stable_release(v)]
            if stable:
                return stable[-1]
            logger.warning("No stable release found upstream, using the newest version")
        return versions[-1]

    def resolve(
        self,
        requested_version: Optional[str] = None,
        current: Optional[VersionRecord] = None,
    ) -> UpdateDecision:
        """Resolve the target build and decide whether it must be downloaded."""
        target_version = self.resolve_version(requested_version)
        logger.info(f"Target Minecraft version: {target_version}")

        target = self.client.latest_build(target_version)
        decision = decide(current, target)

        if decision.needs_download:
            if current is None:
                logger.info(f"No installed build recorded, {target.label} will be installed")
            else:
                logger.info(
                    f"Installed {current.minecraft_version} build {current.build_number}, "
                    f"{target.label} is available"
                )
        else:
            logger.info(f"{target.label} is already installed")

        return decision
