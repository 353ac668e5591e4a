"""
Artifact installation for PaperUpdater.

Downloads a resolved build next to the destination JAR, verifies its SHA256
digest and renames it over the destination. The destination is never written
to directly, so a failed or interrupted run leaves it as it was.
"""

import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from .constants import DOWNLOAD_CHUNK_SIZE, TEMP_FILE_SUFFIX
from .exceptions import IntegrityMismatchError, IOFailureError, UpdaterError
from .models import UpdateDecision, VersionRecord
from .utils.base_api import MetadataSource, ProgressCallback

logger = logging.getLogger(__name__)


class ArtifactInstaller:
    """Installs the artifact chosen by the resolver."""

    def __init__(self, client: MetadataSource, chunk_size: int = DOWNLOAD_CHUNK_SIZE) -> None:
        self.client = client
        self.chunk_size = chunk_size

    def install(
        self,
        decision: UpdateDecision,
        destination: Union[str, Path],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> Optional[VersionRecord]:
        """
        Install the decided build at destination.

        Args:
            decision: Resolver output
            destination: Path of the server JAR to replace
            progress_callback: Optional callback for download progress

        Returns:
            The existing record for a skip, otherwise a new record for the target

        Raises:
            IntegrityMismatchError: If the download does not match the expected digest
            ValidationError: If the target cannot be recorded; the destination is left untouched
            DownloadError: If the artifact cannot be downloaded
            IOFailureError: If the artifact cannot be written or moved into place
        """
        if not decision.needs_download:
            logger.info(f"Skipping download, {decision.target.label} is current")
            return decision.current

        destination = Path(destination)
        target = decision.target
        url = self.client.download_url(
            target.minecraft_version, target.build_number, target.download_filename
        )
        directory = destination.parent if str(destination.parent) else Path(".")

        logger.info(f"Downloading {target.label} from {url}")

        tmp_path: Optional[Path] = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{destination.name}.", suffix=TEMP_FILE_SUFFIX, dir=directory
            )
            tmp_path = Path(tmp_name)

            digest = hashlib.sha256()
            with os.fdopen(fd, 'wb') as f:
                for chunk in self.client.iter_bytes(url, self.chunk_size, progress_callback):
                    f.write(chunk)
                    digest.update(chunk)
                f.flush()
                os.fsync(f.fileno())

            actual = digest.hexdigest()
            expected = target.expected_sha256.lower()
            if actual != expected:
                logger.error(f"Hash mismatch for {target.label}: expected {expected}, got {actual}")
                raise IntegrityMismatchError(
                    f"Downloaded {target.label} failed verification: "
                    f"expected SHA256 {expected}, got {actual}",
                    expected=expected,
                    actual=actual,
                )
            logger.info(f"Hash verified for {target.label}")

            record = VersionRecord.for_build(target, actual)
            os.replace(tmp_path, destination)
            tmp_path = None

        except UpdaterError:
            raise
        except OSError as e:
            logger.error(f"Failed to install {target.label} to {destination}: {e}")
            raise IOFailureError(f"Failed to install {target.label} to {destination}", e) from e
        finally:
            if tmp_path is not None:
                _discard(tmp_path)

        logger.info(f"Installed {target.label} to {destination}")
        return record


def _discard(path: Path) -> None:
    """Remove a temporary download, logging instead of raising."""
    try:
        path.unlink()
        logger.debug(f"Removed temporary file {path}")
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove temporary file {path}: {e}")


def sha256_file(path: Union[str, Path], chunk_size: int = 1024 * 1024) -> str:
    """Compute the lowercase hex SHA256 of a file."""
    sha = hashlib.sha256()
    with open(path, "rb") as handle:
        for chunk in iter(lambda: handle.read(chunk_size), b""):
            sha.update(chunk)
    return sha.hexdigest()
