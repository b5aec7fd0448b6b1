"""
Address validation returning a typed result instead of a falsy sentinel.

Example:
    result = validate_address("0x765de816845861e75a25fca122bb6898b8b1282a")
    if result.is_ok:
        checksummed = result.unwrap()
"""

from dataclasses import dataclass
from typing import Any, Union

from eth_utils import (
    is_address,
    is_checksum_address,
    is_checksum_formatted_address,
    to_checksum_address,
)

from ..errors import InvalidAddress


@dataclass(frozen=True)
class Ok:
    """Successful validation carrying the checksummed address."""

    value: str

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> str:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed validation carrying the InvalidAddress error."""

    error: InvalidAddress

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> str:
        raise self.error


Result = Union[Ok, Err]


def validate_address(value: Any) -> Result:
    """
    Validate and checksum an address.

    Lower-case and upper-case hex are accepted; mixed case must carry a valid
    EIP-55 checksum.

    Args:
        value: Candidate address

    Returns:
        Ok(checksummed) or Err(InvalidAddress)
    """
    if not isinstance(value, str):
        return Err(InvalidAddress(value, f"expected str, got {type(value).__name__}"))
    if not is_address(value):
        return Err(InvalidAddress(value, "not a 20-byte hex address"))
    if is_checksum_formatted_address(value) and not is_checksum_address(value):
        return Err(InvalidAddress(value, "bad EIP-55 checksum"))
    return Ok(to_checksum_address(value))


def require_address(value: Any) -> str:
    """Return the checksummed address or raise InvalidAddress."""
    return validate_address(value).unwrap()
