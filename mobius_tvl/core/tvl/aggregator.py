"""
Per-pool USD price resolution and the TVL fold.

Each token takes its direct USD price when one exists. A token without one
is priced through the pool's own exchange rate and the other token's price;
a pool with no direct price on either side is skipped.
"""

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction
from typing import Iterable, List, Optional, Tuple

from ...errors import UnresolvablePrice
from ...fetchers.price_oracle import PriceTable, get_price
from ..models import ExchangeSnapshot, Pool
from ..stableswap import calculate_swap_price

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolValuation:
    """USD valuation of one pool."""

    pool: Pool
    value: Fraction
    price0: Optional[Fraction] = None
    price1: Optional[Fraction] = None
    resolved: bool = True
    reason: Optional[str] = None


@dataclass
class TVLReport:
    """Result of one aggregation."""

    total: Fraction = field(default_factory=lambda: Fraction(0))
    valuations: List[PoolValuation] = field(default_factory=list)

    @property
    def resolved_count(self) -> int:
        return sum(1 for v in self.valuations if v.resolved)

    @property
    def skipped(self) -> List[PoolValuation]:
        return [v for v in self.valuations if not v.resolved]

    @property
    def display(self) -> str:
        return format_usd(self.total)


def format_usd(value: Fraction) -> str:
    """Two decimals with thousands separators, e.g. '1,234,567.89'."""
    quantized = (Decimal(value.numerator) / Decimal(value.denominator)).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )
    return f"{quantized:,.2f}"


def derive_price(known_price: Fraction, rate: Fraction, derive_token: int) -> Fraction:
    """
    Price one token from the other through the pool rate.

    rate is token-1 per token-0. Deriving token 1 multiplies the token-0
    price by the rate; deriving token 0 divides the token-1 price by it.
    """
    if derive_token == 1:
        return known_price * rate
    if derive_token == 0:
        return known_price / rate
    raise ValueError(f"derive_token must be 0 or 1, got {derive_token}")


def resolve_prices(
    snapshot: ExchangeSnapshot,
    prices: PriceTable,
    include_fees: bool = False,
) -> Tuple[Fraction, Fraction]:
    """
    USD price of both tokens of a pool.

    Raises:
        UnresolvablePrice: If neither token has a direct price, or the pool
            rate needed for the derivation cannot be computed
    """
    token0, token1 = snapshot.pool.tokens
    price0 = get_price(token0, prices)
    price1 = get_price(token1, prices)

    if price0 is None and price1 is None:
        raise UnresolvablePrice(snapshot.pool.name, "no direct price for either token")

    if price0 is not None and price1 is not None:
        return price0, price1

    rate = calculate_swap_price(snapshot, include_fees=include_fees)
    if price0 is None:
        price0 = derive_price(price1, rate, derive_token=0)
    else:
        price1 = derive_price(price0, rate, derive_token=1)
    return price0, price1


def value_pool(
    snapshot: ExchangeSnapshot,
    prices: PriceTable,
    include_fees: bool = False,
) -> PoolValuation:
    """USD value of a pool's reserves; unresolvable pools are valued at zero."""
    pool = snapshot.pool
    try:
        price0, price1 = resolve_prices(snapshot, prices, include_fees)
    except UnresolvablePrice as e:
        logger.warning(f"Skipping pool {pool.name}: {e.reason}")
        return PoolValuation(pool=pool, value=Fraction(0), resolved=False, reason=e.reason)

    if snapshot.registry.paused:
        logger.debug(f"Pool {pool.name} is paused; its reserves are still counted")

    reserve0, reserve1 = snapshot.reserves
    value = price0 * reserve0.value + price1 * reserve1.value
    return PoolValuation(pool=pool, value=value, price0=price0, price1=price1)


class TVLAggregator:
    """Folds per-pool valuations into a single exact total."""

    def __init__(self, include_fees: bool = False):
        self.include_fees = include_fees
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def aggregate(self, snapshots: Iterable[ExchangeSnapshot], prices: PriceTable) -> TVLReport:
        report = TVLReport()
        for snapshot in snapshots:
            valuation = value_pool(snapshot, prices, self.include_fees)
            report.valuations.append(valuation)
            report.total += valuation.value

        self.logger.info(
            f"Valued {report.resolved_count}/{len(report.valuations)} pools, "
            f"skipped {len(report.skipped)}"
        )
        return report
