"""
Version history store for PaperUpdater.

The history file holds a single JSON object describing the artifact that is
currently installed. It is replaced as a whole on every successful install.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from .constants import TEMP_FILE_SUFFIX
from .exceptions import CorruptHistoryError, IOFailureError, ValidationError
from .models import VersionRecord

logger = logging.getLogger(__name__)


class VersionHistoryStore:
    """Reads and writes the installed-version record."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load(self) -> Optional[VersionRecord]:
        """
        Load the installed-version record.

        Returns:
            The record, or None when no history file exists

        Raises:
            CorruptHistoryError: If the file exists but does not hold a valid record
        """
        if not self.path.exists():
            logger.debug(f"No history file at {self.path}")
            return None

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError) as e:
            raise CorruptHistoryError(f"Cannot read history file {self.path}", e) from e
        except ValueError as e:
            raise CorruptHistoryError(f"History file {self.path} is not valid JSON", e) from e

        try:
            record = VersionRecord.from_dict(data)
        except ValidationError as e:
            raise CorruptHistoryError(f"History file {self.path} holds an invalid record", e) from e

        logger.debug(
            f"Loaded history: {record.project} {record.minecraft_version} build {record.build_number}"
        )
        return record

    def save(self, record: VersionRecord) -> None:
        """
        Write the record, replacing any previous content atomically.

        Raises:
            IOFailureError: If the file cannot be written or renamed into place
        """
        payload = json.dumps(record.to_dict(), indent=2) + "\n"
        directory = self.path.parent if str(self.path.parent) else Path(".")

        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=TEMP_FILE_SUFFIX, dir=directory
            )
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            logger.error(f"Failed to write history file {self.path}: {e}")
            raise IOFailureError(f"Failed to write history file {self.path}", e) from e
        finally:
            if tmp_name is not None:
                _remove_quietly(Path(tmp_name))

        logger.info(f"Recorded {record.project} {record.minecraft_version} build {record.build_number}")


def _remove_quietly(path: Path) -> None:
    """Best-effort removal of a leftover temporary file."""
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove temporary file {path}: {e}")
