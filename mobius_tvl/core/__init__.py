"""
Core domain types and TVL computation.
"""

from .models import (
    ExchangeSnapshot,
    Fees,
    Pool,
    ReadCall,
    RegistryEntry,
    ReserveSnapshot,
    Token,
    TokenAmount,
)

__all__ = [
    "Token",
    "TokenAmount",
    "Pool",
    "ReadCall",
    "Fees",
    "RegistryEntry",
    "ReserveSnapshot",
    "ExchangeSnapshot",
]
