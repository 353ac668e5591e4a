"""
Constants used throughout PaperUpdater.

This module contains all hardcoded values used across the application
for easy maintenance and configuration.
"""

from typing import List

# Network settings
DEFAULT_TIMEOUT_SECONDS: float = 30.0
DOWNLOAD_TIMEOUT_SECONDS: float = 300.0
DOWNLOAD_CHUNK_SIZE: int = 8192

# API URLs
PAPER_API_URL: str = "https://api.papermc.io/v2"
DEFAULT_PROJECT: str = "paper"

# Projects served by the PaperMC build API with the same response shapes
SUPPORTED_PROJECTS: List[str] = ["paper", "folia", "velocity", "waterfall"]

# Local files
DEFAULT_DESTINATION: str = "server.jar"
DEFAULT_HISTORY_FILENAME: str = "update_history.json"
TEMP_FILE_SUFFIX: str = ".part"

# Limits
MAX_VERSION_LENGTH: int = 100

# Validation patterns
VALID_VERSION_CHARS: str = r'^[a-zA-Z0-9._+\-]+$'
SHA256_PATTERN: str = r'^[0-9a-fA-F]{64}$'

# Number of versions shown by the versions command
DEFAULT_VERSIONS_LIMIT: int = 20
