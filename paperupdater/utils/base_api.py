"""
Base API classes with common functionality.

This module provides base classes for API clients to reduce code duplication
and provide consistent interfaces.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterator, List, Optional, Protocol

import requests

from ..constants import DEFAULT_TIMEOUT_SECONDS, DOWNLOAD_CHUNK_SIZE, DOWNLOAD_TIMEOUT_SECONDS
from ..exceptions import DownloadError, MetadataUnavailableError
from ..models import BuildMetadata

logger = logging.getLogger(__name__)


class ProgressCallback(Protocol):
    """Protocol for progress callback functions."""

    def __call__(self, downloaded: int, total: int) -> None:
        """Called with download progress information."""
        ...


class MetadataSource(Protocol):
    """What the resolver and installer need from a build API client."""

    def list_minecraft_versions(self) -> List[str]:
        ...

    def latest_build(self, minecraft_version: str) -> BuildMetadata:
        ...

    def download_url(
        self, minecraft_version: str, build_number: int, filename: Optional[str] = None
    ) -> str:
        ...

    def iter_bytes(
        self,
        url: str,
        chunk_size: int = DOWNLOAD_CHUNK_SIZE,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> Iterator[bytes]:
        ...


class BaseHTTPClient(ABC):
    """Base class for HTTP clients with common functionality."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        download_timeout: float = DOWNLOAD_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the HTTP client.

        Args:
            timeout: Default timeout for metadata requests in seconds
            download_timeout: Timeout for artifact downloads in seconds
            session: Optional pre-built session (used by tests)
        """
        self.timeout = timeout
        self.download_timeout = download_timeout
        self._session: Optional[requests.Session] = session

    @property
    def session(self) -> requests.Session:
        """Get or create synchronous HTTP session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def get_json(self, url: str, **kwargs: Any) -> Any:
        """
        Perform synchronous GET request and return the decoded JSON body.

        Args:
            url: URL to request
            **kwargs: Additional arguments passed to session.get

        Returns:
            Decoded JSON document

        Raises:
            MetadataUnavailableError: If the request fails, returns a non-2xx
                status or a body that is not JSON
        """
        kwargs.setdefault("timeout", self.timeout)
        try:
            response = self.session.get(url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"HTTP request failed for {url}: {e}")
            raise MetadataUnavailableError(f"Failed to fetch data from {url}", e) from e

        if not 200 <= response.status_code < 300:
            logger.debug(f"HTTP {response.status_code} from {url}")
            raise MetadataUnavailableError(
                f"Unexpected HTTP status {response.status_code} from {url}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON response from {url}: {e}")
            raise MetadataUnavailableError(f"Invalid JSON response from {url}", e) from e

    def iter_bytes(
        self,
        url: str,
        chunk_size: int = DOWNLOAD_CHUNK_SIZE,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> Iterator[bytes]:
        """
        Stream a response body in chunks.

        Args:
            url: URL to download from
            chunk_size: Size of chunks to read at once
            progress_callback: Optional callback for progress updates

        Yields:
            Non-empty chunks of the body

        Raises:
            DownloadError: If the request fails or returns a non-2xx status
        """
        try:
            with self.session.get(url, stream=True, timeout=self.download_timeout) as response:
                if not 200 <= response.status_code < 300:
                    raise DownloadError(
                        f"Unexpected HTTP status {response.status_code} downloading {url}"
                    )

                total_size = int(response.headers.get("content-length", 0) or 0)
                downloaded = 0

                for chunk in response.iter_content(chunk_size=chunk_size):
                    if not chunk:
                        continue
                    downloaded += len(chunk)
                    if progress_callback and total_size > 0:
                        progress_callback(downloaded, total_size)
                    yield chunk

                logger.debug(f"Streamed {downloaded} bytes from {url}")

        except requests.RequestException as e:
            logger.error(f"Failed to download {url}: {e}")
            raise DownloadError(f"Failed to download {url}", e) from e

    def close(self) -> None:
        """Close HTTP connections."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self) -> 'BaseHTTPClient':
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()


class BaseVersionAPI(BaseHTTPClient):
    """Base class for version-fetching APIs."""

    def __init__(self, base_url: str, **kwargs: Any) -> None:
        """
        Initialize the version API client.

        Args:
            base_url: Base URL for the API
            **kwargs: Passed through to BaseHTTPClient
        """
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip('/')

    @abstractmethod
    def list_minecraft_versions(self) -> List[str]:
        """Get list of available versions, oldest first."""
        pass

    @abstractmethod
    def latest_build(self, minecraft_version: str) -> BuildMetadata:
        """Get metadata for the newest build of a version."""
        pass

    def build_url(self, endpoint: str) -> str:
        """
        Build full URL from endpoint.

        Args:
            endpoint: API endpoint (without leading slash)

        Returns:
            Full URL
        """
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    @staticmethod
    def require_field(data: Any, key: str, expected_type: type, url: str) -> Any:
        """
        Fetch a typed field from a decoded JSON object.

        Raises:
            MetadataUnavailableError: If data is not an object or the field is
                missing or of the wrong type
        """
        if not isinstance(data, dict):
            raise MetadataUnavailableError(f"Expected a JSON object from {url}")
        if key not in data:
            raise MetadataUnavailableError(f"Response from {url} is missing '{key}'")
        value = data[key]
        if not isinstance(value, expected_type) or (expected_type is int and isinstance(value, bool)):
            raise MetadataUnavailableError(
                f"Field '{key}' from {url} must be of type {expected_type.__name__}"
            )
        return value
