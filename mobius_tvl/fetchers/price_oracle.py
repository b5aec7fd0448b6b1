"""
USD spot prices from the CoinGecko simple/price endpoint.

Prices are parsed from the JSON text as Decimal and turned into exact
Fractions, so no binary float rounding reaches the TVL math.
"""

from decimal import Decimal, InvalidOperation
from fractions import Fraction
from typing import Any, Dict, Iterable, Optional, Set

import requests

from ..core.models import Pool, Token
from .base import HttpJsonFetcher, PriceSourceUnavailable

PriceTable = Dict[str, Fraction]


def collect_price_ids(pools: Iterable[Pool]) -> Set[str]:
    """Every coingecko id used by the pools' tokens; tokens without one are skipped."""
    return {
        token.coingecko_id
        for pool in pools
        for token in pool.tokens
        if token.coingecko_id
    }


def get_price(token: Token, prices: PriceTable) -> Optional[Fraction]:
    """Direct USD price of a token, or None when there is none."""
    if not token.coingecko_id:
        return None
    return prices.get(token.coingecko_id)


def _to_fraction(value: Any) -> Optional[Fraction]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, Decimal)):
        return Fraction(value)
    if isinstance(value, (float, str)):
        try:
            return Fraction(Decimal(str(value)))
        except (InvalidOperation, ValueError):
            return None
    return None


class CoinGeckoPriceClient(HttpJsonFetcher):
    """Fetches USD prices for a set of CoinGecko ids in a single request."""

    error_class = PriceSourceUnavailable

    def __init__(
        self,
        base_url: str = "https://api.coingecko.com/api/v3",
        session: Optional[requests.Session] = None,
        vs_currency: str = "usd",
        timeout: float = 30.0,
    ):
        super().__init__(session, timeout)
        self.base_url = base_url.rstrip("/")
        self.vs_currency = vs_currency

    def fetch_prices(self, ids: Iterable[str]) -> PriceTable:
        """
        Fetch prices for the given ids.

        Ids missing from the response, and zero or unparsable prices, are left
        out of the table. They are not errors.

        Raises:
            PriceSourceUnavailable: If the source is unreachable or malformed
        """
        ids = sorted(set(ids))
        if not ids:
            self.logger.info("No price ids requested")
            return {}

        body = self._get_json(
            f"{self.base_url}/simple/price",
            params={"ids": ",".join(ids), "vs_currencies": self.vs_currency},
            parse_float=Decimal,
        )
        if not isinstance(body, dict):
            raise PriceSourceUnavailable(
                f"Price response must be a JSON object, got {type(body).__name__}"
            )

        prices: PriceTable = {}
        for price_id in ids:
            quote = body.get(price_id)
            if not isinstance(quote, dict):
                self.logger.warning(f"No price returned for {price_id}")
                continue
            price = _to_fraction(quote.get(self.vs_currency))
            if price is None or price <= 0:
                self.logger.warning(f"Unusable {self.vs_currency} price for {price_id}: {quote!r}")
                continue
            prices[price_id] = price

        self.logger.info(f"Fetched {len(prices)}/{len(ids)} prices")
        return prices

    def fetch_pool_prices(self, pools: Iterable[Pool]) -> PriceTable:
        """Prices for every token id referenced by the pools."""
        return self.fetch_prices(collect_price_ids(pools))

    async def fetch_prices_async(self, pools: Iterable[Pool]) -> PriceTable:
        """fetch_pool_prices in a worker thread."""
        return await self._run_blocking(self.fetch_pool_prices, list(pools))
