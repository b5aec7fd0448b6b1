"""
Pool registry client.

The registry is a JSON array aligned by index with the static pool list:

    [{"ampFactor": "50", "paused": false,
      "fees": {"trade": "2000000", "admin": "5000000000",
               "deposit": "0", "withdraw": "0"}}, ...]

Fees are integer numerators over 10**10.
"""

from fractions import Fraction
from typing import Any, Dict, List, Optional, Sequence

import requests

from ..core.models import Fees, Pool, RegistryEntry
from .base import HttpJsonFetcher, RegistryAlignmentError, RegistryUnavailable

FEE_BASE = 10 ** 10
FEE_FIELDS = ("trade", "admin", "deposit", "withdraw")


def _parse_int(value: Any, name: str, index: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise RegistryUnavailable(f"Registry entry {index}: {name} must be an integer string, got {value!r}")
    try:
        return int(value)
    except ValueError as e:
        raise RegistryUnavailable(f"Registry entry {index}: {name} is not an integer: {value!r}") from e


def parse_registry_entry(raw: Dict[str, Any], index: int) -> RegistryEntry:
    """Convert one raw registry element into a RegistryEntry."""
    if not isinstance(raw, dict):
        raise RegistryUnavailable(f"Registry entry {index} is not an object")

    try:
        amp = raw["ampFactor"]
        paused = raw["paused"]
        fees = raw["fees"]
    except KeyError as e:
        raise RegistryUnavailable(f"Registry entry {index} is missing {e}") from e

    if not isinstance(paused, bool):
        raise RegistryUnavailable(f"Registry entry {index}: paused must be a boolean")
    if not isinstance(fees, dict):
        raise RegistryUnavailable(f"Registry entry {index}: fees must be an object")

    fractions = {}
    for name in FEE_FIELDS:
        if name not in fees:
            raise RegistryUnavailable(f"Registry entry {index} is missing fees.{name}")
        fractions[name] = Fraction(_parse_int(fees[name], f"fees.{name}", index), FEE_BASE)

    return RegistryEntry(
        amp_factor=_parse_int(amp, "ampFactor", index),
        paused=paused,
        fees=Fees(**fractions),
    )


class PoolRegistryClient(HttpJsonFetcher):
    """Fetches per-pool amplification factor, pause flag and fees."""

    error_class = RegistryUnavailable

    def __init__(
        self,
        url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ):
        super().__init__(session, timeout)
        self.url = url

    def fetch(self) -> List[RegistryEntry]:
        """
        Fetch and parse the registry.

        Raises:
            RegistryUnavailable: If the source is unreachable or malformed
        """
        body = self._get_json(self.url)
        if not isinstance(body, list):
            raise RegistryUnavailable(
                f"Registry at {self.url} must be a JSON array, got {type(body).__name__}"
            )
        entries = [parse_registry_entry(raw, i) for i, raw in enumerate(body)]
        self.logger.info(f"Fetched {len(entries)} registry entries")
        return entries

    def fetch_aligned(self, pools: Sequence[Pool]) -> List[RegistryEntry]:
        """
        Fetch the registry and check it lines up with the pool list.

        Raises:
            RegistryAlignmentError: If the lengths differ
        """
        entries = self.fetch()
        if len(entries) != len(pools):
            raise RegistryAlignmentError(expected=len(pools), actual=len(entries))
        return entries

    async def fetch_async(self, pools: Sequence[Pool]) -> List[RegistryEntry]:
        """Aligned fetch in a worker thread."""
        return await self._run_blocking(self.fetch_aligned, pools)
