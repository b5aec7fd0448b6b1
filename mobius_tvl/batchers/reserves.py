"""
Per-pool reserve reads: building the call list and decoding the flat result.

Each pool contributes exactly three consecutive calls, in this order:
LP totalSupply(), getTokenBalance(0), getTokenBalance(1). Pool i therefore
owns positions 3i, 3i+1 and 3i+2 of the flattened return data.
"""

import logging
from typing import List, Sequence

from ..core.models import Pool, ReadCall, ReserveSnapshot, TokenAmount
from .abi import LP_TOKEN_ABI, SWAP_ABI, ContractCodec
from .errors import DecodeError

logger = logging.getLogger(__name__)

CALLS_PER_POOL = 3
RESERVE_FIELDS = ("lp_total_supply", "reserve0", "reserve1")


def build_reserve_calls(
    pools: Sequence[Pool],
    lp_codec: ContractCodec = None,
    swap_codec: ContractCodec = None,
) -> List[ReadCall]:
    """Build the three reads of every pool, preserving pool order."""
    lp_codec = lp_codec or ContractCodec(LP_TOKEN_ABI)
    swap_codec = swap_codec or ContractCodec(SWAP_ABI)

    total_supply = lp_codec.encode_function_data("totalSupply")
    balance0 = swap_codec.encode_function_data("getTokenBalance", [0])
    balance1 = swap_codec.encode_function_data("getTokenBalance", [1])

    calls = []
    for pool in pools:
        calls.extend([
            ReadCall(target=pool.lp_token.address, call_data=total_supply),
            ReadCall(target=pool.address, call_data=balance0),
            ReadCall(target=pool.address, call_data=balance1),
        ])
    return calls


class ReserveDecoder:
    """Decode flattened batch results into one ReserveSnapshot per pool."""

    def __init__(self, lp_codec: ContractCodec = None, swap_codec: ContractCodec = None):
        self.lp_codec = lp_codec or ContractCodec(LP_TOKEN_ABI)
        self.swap_codec = swap_codec or ContractCodec(SWAP_ABI)

    def decode(self, pools: Sequence[Pool], raw: Sequence[bytes]) -> List[ReserveSnapshot]:
        """
        Decode the return data of build_reserve_calls(pools).

        Args:
            pools: Pools in the same order used to build the calls
            raw: Flat return data, CALLS_PER_POOL entries per pool

        Returns:
            ReserveSnapshots in pool order

        Raises:
            DecodeError: On a length mismatch or a payload of the wrong shape
        """
        expected = CALLS_PER_POOL * len(pools)
        if len(raw) != expected:
            raise DecodeError(
                f"Expected {expected} results for {len(pools)} pools, got {len(raw)}"
            )

        snapshots = []
        for i, pool in enumerate(pools):
            window = raw[CALLS_PER_POOL * i : CALLS_PER_POOL * (i + 1)]
            snapshots.append(self.decode_window(i, pool, window))

        logger.debug(f"Decoded reserves for {len(snapshots)} pools")
        return snapshots

    def decode_window(self, index: int, pool: Pool, window: Sequence[bytes]) -> ReserveSnapshot:
        """Decode the three payloads belonging to a single pool."""
        supply_data, reserve0_data, reserve1_data = window

        supply = self._decode_uint(self.lp_codec, "totalSupply", supply_data, index, pool, "lp_total_supply")
        reserve0 = self._decode_uint(self.swap_codec, "getTokenBalance", reserve0_data, index, pool, "reserve0")
        reserve1 = self._decode_uint(self.swap_codec, "getTokenBalance", reserve1_data, index, pool, "reserve1")

        return ReserveSnapshot(
            lp_total_supply=TokenAmount(pool.lp_token, supply),
            reserves=(
                TokenAmount(pool.tokens[0], reserve0),
                TokenAmount(pool.tokens[1], reserve1),
            ),
        )

    @staticmethod
    def _decode_uint(
        codec: ContractCodec,
        function: str,
        data: bytes,
        index: int,
        pool: Pool,
        field: str,
    ) -> int:
        try:
            (value,) = codec.decode_function_result(function, data)
        except DecodeError as e:
            raise DecodeError(
                f"Cannot decode {field} of pool {pool.name}: {e}",
                pool_index=index,
                field=field,
            ) from e
        return value
