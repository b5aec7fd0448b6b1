"""Small shared helpers."""

from .address import Err, Ok, Result, require_address, validate_address

__all__ = ["Ok", "Err", "Result", "validate_address", "require_address"]
