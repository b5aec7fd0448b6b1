"""
Base classes for off-chain data fetchers.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from ..errors import TVLError

logger = logging.getLogger(__name__)


class FetchError(TVLError):
    """Base exception for fetch-related errors."""
    pass


class RegistryUnavailable(FetchError):
    """Raised when the pool registry is unreachable or returns a malformed body."""
    pass


class RegistryAlignmentError(RegistryUnavailable):
    """Raised when the registry does not line up index-for-index with the pool list."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Registry has {actual} entries but the pool list has {expected}; "
            "refusing to align by index"
        )


class PriceSourceUnavailable(FetchError):
    """Raised when the price source is unreachable or returns a malformed body."""
    pass


class HttpJsonFetcher:
    """
    Shared GET-and-parse-JSON plumbing for the HTTP clients.

    The requests.Session is injected so tests and callers control transport.
    """

    error_class = FetchError

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = 30.0):
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None, **json_kwargs) -> Any:
        """
        GET a URL and decode the JSON body.

        Raises:
            error_class: On connection failure, non-2xx status or invalid JSON
        """
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Request to {url} failed: {e}")
            raise self.error_class(f"Request to {url} failed: {e}") from e

        try:
            return response.json(**json_kwargs)
        except ValueError as e:
            raise self.error_class(f"Response from {url} is not valid JSON: {e}") from e

    def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session:
            self.session.close()

    async def _run_blocking(self, func, *args):
        """Run a blocking client call in a worker thread."""
        return await asyncio.to_thread(func, *args)
