"""
Logging configuration for PaperUpdater.

Console output goes through rich when attached to a terminal and to a plain
stderr stream otherwise. File logging with rotation is opt-in.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from ..exceptions import ConfigurationError
from .settings import config

# Global console for rich output
console = Console()

SIZE_UNITS = (
    ('GB', 1024 ** 3),
    ('MB', 1024 ** 2),
    ('KB', 1024),
    ('B', 1),
)


def setup_logging(
    log_level: Optional[str] = None,
    enable_file_logging: Optional[bool] = None,
    enable_rich_logging: Optional[bool] = None,
) -> None:
    """Setup logging configuration."""

    log_level = log_level or config.get("logging.level", "INFO")
    enable_file_logging = enable_file_logging if enable_file_logging is not None else config.get("logging.file_logging", False)
    enable_rich_logging = enable_rich_logging if enable_rich_logging is not None else config.get("ui.colored_output", True)

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(numeric_level)

    if enable_rich_logging and sys.stdout.isatty():
        console_handler = RichHandler(
            console=console,
            show_time=False,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        console_handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        # stdout carries the command's own output
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    console_handler.setLevel(numeric_level)
    root_logger.addHandler(console_handler)

    if enable_file_logging:
        try:
            log_file = Path(config.get("logging.log_file"))
            log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=parse_size(config.get("logging.max_log_size", "10MB")),
                backupCount=config.get("logging.backup_count", 5),
                encoding='utf-8'
            )
            file_handler.setFormatter(logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            ))
            file_handler.setLevel(logging.DEBUG)
            root_logger.addHandler(file_handler)

        except (OSError, ConfigurationError) as e:
            logging.getLogger(__name__).warning(f"Failed to setup file logging: {e}")

    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging setup complete. Level: {log_level}, File: {enable_file_logging}"
    )


def parse_size(size_str: str) -> int:
    """
    Parse a size string like '10MB' to bytes.

    Raises:
        ConfigurationError: If the string has no known unit or no number
    """
    text = str(size_str).strip().upper()

    # Longest suffixes first so '10MB' is not read as '10M' + 'B'
    for suffix, multiplier in SIZE_UNITS:
        if text.endswith(suffix):
            try:
                return int(float(text[:-len(suffix)]) * multiplier)
            except ValueError as e:
                raise ConfigurationError(f"Invalid log size: {size_str!r}", e) from e

    raise ConfigurationError(f"Invalid log size: {size_str!r} (expected a value like '10MB')")
