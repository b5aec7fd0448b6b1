"""
Unit tests for the pool registry client.

Tests use a mocked requests.Session and make no network calls.
"""

import asyncio
from fractions import Fraction
from unittest.mock import patch

import pytest
import requests

from mobius_tvl.fetchers import (
    FEE_BASE,
    PoolRegistryClient,
    RegistryAlignmentError,
    RegistryUnavailable,
    parse_registry_entry,
)
from mobius_tvl.tests.factories import make_pool, mock_response, mock_session

REGISTRY_URL = "https://registry.example/pools.json"


class TestParseRegistryEntry:

    def test_fees_are_exact_fractions(self, registry_payload):
        entry = parse_registry_entry(registry_payload, 0)
        assert entry.amp_factor == 100
        assert entry.paused is False
        assert entry.fees.trade == Fraction(4_000_000, FEE_BASE)
        assert entry.fees.admin == Fraction(1, 2)
        assert entry.fees.deposit == 0
        assert isinstance(entry.fees.withdraw, Fraction)

    def test_missing_key(self, registry_payload):
        del registry_payload["ampFactor"]
        with pytest.raises(RegistryUnavailable, match="entry 3 is missing"):
            parse_registry_entry(registry_payload, 3)

    def test_missing_fee(self, registry_payload):
        del registry_payload["fees"]["withdraw"]
        with pytest.raises(RegistryUnavailable, match="fees.withdraw"):
            parse_registry_entry(registry_payload, 0)

    def test_non_integer_fee(self, registry_payload):
        registry_payload["fees"]["trade"] = "0.0004"
        with pytest.raises(RegistryUnavailable, match="not an integer"):
            parse_registry_entry(registry_payload, 0)

    def test_paused_must_be_bool(self, registry_payload):
        registry_payload["paused"] = "no"
        with pytest.raises(RegistryUnavailable, match="paused"):
            parse_registry_entry(registry_payload, 0)

    def test_entry_must_be_object(self):
        with pytest.raises(RegistryUnavailable, match="not an object"):
            parse_registry_entry(["100"], 0)


class TestPoolRegistryClient:

    def test_fetch(self, registry_payload):
        session = mock_session(mock_response([registry_payload, registry_payload]))
        client = PoolRegistryClient(REGISTRY_URL, session=session, timeout=5)

        entries = client.fetch()

        assert len(entries) == 2
        session.get.assert_called_once_with(REGISTRY_URL, params=None, timeout=5)

    def test_aligned_fetch(self, registry_payload):
        pools = [make_pool(0), make_pool(1)]
        session = mock_session(mock_response([registry_payload, registry_payload]))
        entries = PoolRegistryClient(REGISTRY_URL, session=session).fetch_aligned(pools)
        assert len(entries) == len(pools)

    def test_short_registry_is_alignment_error(self, registry_payload):
        pools = [make_pool(0), make_pool(1)]
        session = mock_session(mock_response([registry_payload]))

        with pytest.raises(RegistryAlignmentError) as exc_info:
            PoolRegistryClient(REGISTRY_URL, session=session).fetch_aligned(pools)

        assert exc_info.value.expected == 2
        assert exc_info.value.actual == 1
        assert isinstance(exc_info.value, RegistryUnavailable)

    def test_long_registry_is_alignment_error(self, registry_payload):
        session = mock_session(mock_response([registry_payload] * 3))
        with pytest.raises(RegistryAlignmentError):
            PoolRegistryClient(REGISTRY_URL, session=session).fetch_aligned([make_pool(0)])

    def test_unreachable(self):
        session = mock_session(requests.exceptions.ConnectionError("connection refused"))
        with pytest.raises(RegistryUnavailable, match="connection refused"):
            PoolRegistryClient(REGISTRY_URL, session=session).fetch()

    def test_http_error(self):
        session = mock_session(mock_response(status=503))
        with pytest.raises(RegistryUnavailable, match="503"):
            PoolRegistryClient(REGISTRY_URL, session=session).fetch()

    def test_invalid_json(self):
        session = mock_session(mock_response(json_error=True))
        with pytest.raises(RegistryUnavailable, match="not valid JSON"):
            PoolRegistryClient(REGISTRY_URL, session=session).fetch()

    def test_non_array_body(self):
        session = mock_session(mock_response({"pools": []}))
        with pytest.raises(RegistryUnavailable, match="JSON array"):
            PoolRegistryClient(REGISTRY_URL, session=session).fetch()

    def test_fetch_async(self, registry_payload):
        session = mock_session(mock_response([registry_payload]))
        client = PoolRegistryClient(REGISTRY_URL, session=session)
        entries = asyncio.run(client.fetch_async([make_pool(0)]))
        assert entries[0].amp_factor == 100


class TestSessionOwnership:

    def test_own_session_closed(self):
        client = PoolRegistryClient(REGISTRY_URL)
        with patch.object(client.session, "close") as mock_close:
            client.close()
        mock_close.assert_called_once()

    def test_injected_session_left_open(self):
        session = mock_session()
        PoolRegistryClient(REGISTRY_URL, session=session).close()
        session.close.assert_not_called()
