"""
Update orchestration for PaperUpdater.

This module ties the history store, the resolver and the installer together
into a single update run.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .constants import DOWNLOAD_CHUNK_SIZE
from .exceptions import CorruptHistoryError
from .history import VersionHistoryStore
from .installer import ArtifactInstaller
from .models import UpdateDecision, UpdateResult, VersionRecord
from .resolver import UpdateResolver
from .utils.base_api import MetadataSource, ProgressCallback

logger = logging.getLogger(__name__)


class ServerUpdater:
    """Runs one update of a server JAR."""

    def __init__(
        self,
        client: MetadataSource,
        destination: Union[str, Path],
        history_path: Union[str, Path],
        stable_only: bool = False,
        chunk_size: int = DOWNLOAD_CHUNK_SIZE,
    ) -> None:
        self.client = client
        self.destination = Path(destination)
        self.store = VersionHistoryStore(history_path)
        self.resolver = UpdateResolver(client, stable_only=stable_only)
        self.installer = ArtifactInstaller(client, chunk_size=chunk_size)

    def load_current(self) -> Optional[VersionRecord]:
        """Load the installed record, treating a corrupt history file as absent."""
        try:
            return self.store.load()
        except CorruptHistoryError as e:
            logger.warning(f"Ignoring unusable version history: {e}")
            return None

    def check(
        self,
        requested_version: Optional[str] = None,
        keep_version: bool = False,
    ) -> UpdateDecision:
        """
        Resolve the update without installing anything.

        Args:
            requested_version: Minecraft version to target, newest when None
            keep_version: Stay on the installed Minecraft version when no
                version is requested
        """
        current = self.load_current()

        if requested_version is None and keep_version and current is not None:
            requested_version = current.minecraft_version
            logger.info(f"Looking for the latest build of installed version {requested_version}")

        return self.resolver.resolve(requested_version, current)

    def update(
        self,
        requested_version: Optional[str] = None,
        keep_version: bool = False,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> UpdateResult:
        """Resolve, install when needed and record the installed build."""
        decision = self.check(requested_version, keep_version)
        record = self.installer.install(decision, self.destination, progress_callback)

        if decision.needs_download and record is not None:
            self.store.save(record)

        return UpdateResult(decision=decision, record=record)
