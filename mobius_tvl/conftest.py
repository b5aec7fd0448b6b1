"""Shared pytest fixtures."""

from typing import Any, Dict

import pytest


@pytest.fixture
def registry_payload() -> Dict[str, Any]:
    return {
        "ampFactor": "100",
        "paused": False,
        "fees": {
            "trade": "4000000",
            "admin": "5000000000",
            "deposit": "0",
            "withdraw": "0",
        },
    }
