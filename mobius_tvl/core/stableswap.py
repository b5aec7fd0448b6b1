"""
Two-coin stable-swap invariant math.

Reserves are normalised to a common precision before solving the invariant

    A*n^n*sum(x) + D = A*D*n^n + D^(n+1) / (n^n * prod(x))

with Newton iterations on integers (at most 20 rounds, stopping when the
estimate moves by one unit or less). The resulting swap price is exact:
a Fraction of normalised integer amounts.
"""

import logging
from dataclasses import dataclass
from fractions import Fraction

from ..errors import UnresolvablePrice
from .models import ExchangeSnapshot

logger = logging.getLogger(__name__)

N_COINS = 2
MAX_ITERATIONS = 20
PRECISION_DECIMALS = 18
MIN_INPUT_AMOUNT = 10_000


def compute_d(amp: int, amount_a: int, amount_b: int) -> int:
    """Invariant D for the given normalised reserves."""
    total = amount_a + amount_b
    if total == 0:
        return 0
    if amount_a <= 0 or amount_b <= 0:
        raise ValueError("compute_d needs both reserves to be positive")

    ann = amp * N_COINS
    d_prev = 0
    d = total
    for _ in range(MAX_ITERATIONS):
        if abs(d - d_prev) <= 1:
            break
        d_prev = d
        d_p = d
        d_p = d_p * d // (amount_a * N_COINS)
        d_p = d_p * d // (amount_b * N_COINS)
        numerator = d * (ann * total + d_p * N_COINS)
        denominator = d * (ann - 1) + d_p * (N_COINS + 1)
        d = numerator // denominator
    return d


def compute_y(amp: int, x: int, d: int) -> int:
    """Balance of the other coin that keeps D constant when this coin holds x."""
    if x <= 0:
        raise ValueError("compute_y needs a positive input reserve")

    ann = amp * N_COINS
    b = x + d // ann - d
    c = d * d * d // (N_COINS * (N_COINS * x * ann))

    y_prev = 0
    y = d
    for _ in range(MAX_ITERATIONS):
        if abs(y - y_prev) <= 1:
            break
        y_prev = y
        y = (y * y + c) // (N_COINS * y + b)
    return y


@dataclass(frozen=True)
class SwapEstimate:
    """Token-1 output for a token-0 input, in raw token units."""

    input_amount: int
    output_before_fees: int
    fee: Fraction
    output_after_fees: Fraction
    # exact normalised ratio, token 1 per token 0 in whole units
    rate_before_fees: Fraction
    rate_after_fees: Fraction


def _normaliser(decimals: int, precision: int) -> int:
    return 10 ** (precision - decimals)


def estimate_swap_output(snapshot: ExchangeSnapshot, amount_in: int) -> SwapEstimate:
    """
    Estimate swapping amount_in raw units of token 0 into token 1.

    Raises:
        UnresolvablePrice: If the pool cannot quote (empty reserves, bad amp)
    """
    pool = snapshot.pool
    amp = snapshot.registry.amp_factor
    reserve0, reserve1 = snapshot.reserves

    if amp <= 0:
        raise UnresolvablePrice(pool.name, f"amplification factor must be positive, got {amp}")
    if reserve0.raw <= 0 or reserve1.raw <= 0:
        raise UnresolvablePrice(pool.name, "pool has an empty reserve")
    if amount_in <= 0:
        raise UnresolvablePrice(pool.name, "swap input must be positive")

    precision = max(PRECISION_DECIMALS, reserve0.token.decimals, reserve1.token.decimals)
    scale0 = _normaliser(reserve0.token.decimals, precision)
    scale1 = _normaliser(reserve1.token.decimals, precision)

    x0 = reserve0.raw * scale0
    x1 = reserve1.raw * scale1
    dx = amount_in * scale0

    d = compute_d(amp, x0, x1)
    new_y = compute_y(amp, x0 + dx, d)
    dy = x1 - new_y
    if dy <= 0:
        raise UnresolvablePrice(pool.name, "swap estimate produced no output")

    trade_fee = snapshot.registry.fees.trade
    rate_before = Fraction(dy, dx)
    rate_after = rate_before * (1 - trade_fee)
    output_before = dy // scale1
    fee = Fraction(dy, scale1) * trade_fee

    return SwapEstimate(
        input_amount=amount_in,
        output_before_fees=output_before,
        fee=fee,
        output_after_fees=Fraction(dy, scale1) - fee,
        rate_before_fees=rate_before,
        rate_after_fees=rate_after,
    )


def swap_input_amount(snapshot: ExchangeSnapshot) -> int:
    """
    Raw token-0 amount used to probe the price.

    One percent of the token-0 reserve, capped at one whole token and never
    below MIN_INPUT_AMOUNT raw units.
    """
    reserve0 = snapshot.reserves[0]
    return max(MIN_INPUT_AMOUNT, min(reserve0.token.scale, reserve0.raw // 100))


def calculate_swap_price(snapshot: ExchangeSnapshot, include_fees: bool = False) -> Fraction:
    """
    Price of token 0 expressed in token 1 (token-1 per token-0, whole units).

    Raises:
        UnresolvablePrice: If the pool cannot quote
    """
    estimate = estimate_swap_output(snapshot, swap_input_amount(snapshot))
    rate = estimate.rate_after_fees if include_fees else estimate.rate_before_fees
    logger.debug(f"{snapshot.pool.name}: swap price {float(rate):.6f} (fees included: {include_fees})")
    return rate
