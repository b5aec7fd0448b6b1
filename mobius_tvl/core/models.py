"""
Domain types for the TVL pipeline.

Every amount, fee and price is an exact integer or Fraction; floats are only
produced when the final figure is serialised.
"""

from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Dict, Optional, Tuple

from ..utils.address import require_address


@dataclass(frozen=True)
class Token:
    """ERC-20 token with its decimal precision and optional CoinGecko id."""

    address: str
    decimals: int
    symbol: str = ""
    coingecko_id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "address", require_address(self.address))
        if not isinstance(self.decimals, int) or self.decimals < 0:
            raise ValueError(f"Token {self.symbol or self.address} has invalid decimals: {self.decimals}")

    @property
    def scale(self) -> int:
        return 10 ** self.decimals

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Token":
        return cls(
            address=data["address"],
            decimals=int(data["decimals"]),
            symbol=data.get("symbol", ""),
            coingecko_id=data.get("coingecko_id") or None,
        )


@dataclass(frozen=True)
class TokenAmount:
    """Raw on-chain integer amount of a token."""

    token: Token
    raw: int

    @property
    def value(self) -> Fraction:
        """Amount in whole token units."""
        return Fraction(self.raw, self.token.scale)


@dataclass(frozen=True)
class Pool:
    """Two-token stable-swap pool and its LP token."""

    name: str
    address: str
    lp_token: Token
    tokens: Tuple[Token, Token]

    def __post_init__(self):
        object.__setattr__(self, "address", require_address(self.address))
        tokens = tuple(self.tokens)
        if len(tokens) != 2:
            raise ValueError(f"Pool {self.name} must have exactly two tokens, got {len(tokens)}")
        object.__setattr__(self, "tokens", tokens)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pool":
        return cls(
            name=data["name"],
            address=data["address"],
            lp_token=Token.from_dict(data["lp_token"]),
            tokens=tuple(Token.from_dict(t) for t in data["tokens"]),
        )


@dataclass(frozen=True)
class ReadCall:
    """One read-only contract call: target address plus ABI-encoded call data."""

    target: str
    call_data: bytes

    def as_multicall_arg(self) -> Tuple[str, bytes]:
        return (self.target, self.call_data)


@dataclass(frozen=True)
class Fees:
    """Fee fractions of a pool."""

    trade: Fraction
    admin: Fraction
    deposit: Fraction
    withdraw: Fraction


@dataclass(frozen=True)
class RegistryEntry:
    """Off-chain pool metadata, aligned by index with the pool list."""

    amp_factor: int
    paused: bool
    fees: Fees


@dataclass(frozen=True)
class ReserveSnapshot:
    """Decoded on-chain state of one pool."""

    lp_total_supply: TokenAmount
    reserves: Tuple[TokenAmount, TokenAmount]


@dataclass(frozen=True)
class ExchangeSnapshot:
    """Pool state handed to price resolution and valuation."""

    pool: Pool
    registry: RegistryEntry
    lp_total_supply: TokenAmount
    reserves: Tuple[TokenAmount, TokenAmount]

    @classmethod
    def combine(cls, pool: Pool, registry: RegistryEntry, reserves: ReserveSnapshot) -> "ExchangeSnapshot":
        return cls(
            pool=pool,
            registry=registry,
            lp_total_supply=reserves.lp_total_supply,
            reserves=reserves.reserves,
        )
