"""
Tests for the chunked Multicall2 batch caller.

A FakeEth double answers each aggregate() with one payload per call, so
ordering across chunk boundaries can be checked without a node.
"""

import asyncio

import pytest
from eth_abi import encode

from mobius_tvl.batchers import BatchCallError, BatchConfig, ChunkedBatchCaller
from mobius_tvl.batchers.base import BatchError
from mobius_tvl.core.models import ReadCall
from mobius_tvl.errors import InvalidAddress
from mobius_tvl.tests.factories import MULTICALL_ADDRESS, FakeEth, FakeWeb3, uint


def make_calls(n):
    """n calls whose call data carries their own position."""
    return [
        ReadCall(target=f"0x{(i % 7) + 1:040x}", call_data=i.to_bytes(4, "big"))
        for i in range(n)
    ]


def echo(target, call_data):
    """Return the position encoded in the call data."""
    return uint(int.from_bytes(call_data, "big"))


def decode_positions(results):
    return [int.from_bytes(r, "big") for r in results]


class TestChunkedBatchCaller:

    @pytest.mark.parametrize("n,chunk_size", [
        (1, 1),
        (5, 1),
        (10, 3),
        (10, 10),
        (10, 100),
        (250, 100),
        (301, 7),
    ])
    def test_order_and_length_preserved(self, n, chunk_size):
        eth = FakeEth(echo)
        caller = ChunkedBatchCaller(FakeWeb3(eth), MULTICALL_ADDRESS, BatchConfig(batch_size=chunk_size))

        results = asyncio.run(caller.aggregate(make_calls(n)))

        assert len(results) == n
        assert decode_positions(results) == list(range(n))
        assert len(eth.requests) == -(-n // chunk_size)
        assert all(len(chunk) <= chunk_size for chunk in eth.requests)

    def test_order_kept_when_chunks_finish_out_of_order(self):
        n, chunk_size = 25, 5
        n_chunks = n // chunk_size
        answered = []

        def chunk_index(calls):
            _, call_data = calls[0]
            return int.from_bytes(call_data, "big") // chunk_size

        def slower_first(calls):
            # chunk 0 answers last, the final chunk first
            return 0.05 * (n_chunks - chunk_index(calls))

        def recording_echo(target, call_data):
            answered.append(int.from_bytes(call_data, "big"))
            return echo(target, call_data)

        eth = FakeEth(recording_echo, delay=slower_first)
        caller = ChunkedBatchCaller(FakeWeb3(eth), MULTICALL_ADDRESS, BatchConfig(batch_size=chunk_size))

        results = asyncio.run(caller.aggregate(make_calls(n)))

        assert answered[0] // chunk_size != 0
        assert answered[-1] // chunk_size == 0
        assert decode_positions(results) == list(range(n))

    def test_empty_input_makes_no_call(self):
        eth = FakeEth(echo)
        caller = ChunkedBatchCaller(FakeWeb3(eth), MULTICALL_ADDRESS)
        assert asyncio.run(caller.aggregate([])) == []
        assert eth.requests == []

    def test_targets_forwarded_to_multicall(self):
        eth = FakeEth(echo)
        caller = ChunkedBatchCaller(FakeWeb3(eth), MULTICALL_ADDRESS, BatchConfig(batch_size=2))
        calls = make_calls(3)

        asyncio.run(caller.aggregate(calls))

        sent = [target.lower() for chunk in eth.requests for target, _ in chunk]
        assert sorted(sent) == sorted(call.target.lower() for call in calls)

    def test_batch_result_metadata(self):
        eth = FakeEth(echo, block_number=777)
        caller = ChunkedBatchCaller(FakeWeb3(eth), MULTICALL_ADDRESS, BatchConfig(batch_size=4))

        result = asyncio.run(caller.batch_call(make_calls(9)))

        assert result.chunk_count == 3
        assert result.block_range == (777, 777)

    def test_failing_chunk_fails_whole_batch(self):
        eth = FakeEth(echo, fail_on_call=1)
        caller = ChunkedBatchCaller(FakeWeb3(eth), MULTICALL_ADDRESS, BatchConfig(batch_size=2))

        with pytest.raises(BatchCallError, match="aggregate\\(\\) failed"):
            asyncio.run(caller.aggregate(make_calls(6)))

    def test_short_response_rejected(self):
        class ShortEth(FakeEth):
            def call(self, transaction, block_identifier="latest"):
                super().call(transaction, block_identifier)
                return encode(["uint256", "bytes[]"], [1, [uint(0)]])

        caller = ChunkedBatchCaller(FakeWeb3(ShortEth(echo)), MULTICALL_ADDRESS, BatchConfig(batch_size=5))
        with pytest.raises(BatchCallError, match="got 1 results"):
            asyncio.run(caller.aggregate(make_calls(3)))

    def test_garbage_response_rejected(self):
        class GarbageEth(FakeEth):
            def call(self, transaction, block_identifier="latest"):
                return b"\x01\x02"

        caller = ChunkedBatchCaller(FakeWeb3(GarbageEth(echo)), MULTICALL_ADDRESS)
        with pytest.raises(BatchCallError, match="Malformed aggregate"):
            asyncio.run(caller.aggregate(make_calls(2)))

    def test_invalid_multicall_address(self):
        with pytest.raises(InvalidAddress):
            ChunkedBatchCaller(FakeWeb3(FakeEth(echo)), "0x1234")

    def test_non_positive_chunk_size(self):
        with pytest.raises(BatchError, match="batch_size must be positive"):
            BatchConfig(batch_size=0)
