"""
Blockchain batch calling utilities.

Encodes read calls, aggregates them through Multicall2 in fixed-size chunks
and decodes the per-pool return data.
"""

from .abi import LP_TOKEN_ABI, MULTICALL2_ABI, SWAP_ABI, ContractCodec
from .base import BaseBatcher, BatchConfig, BatchResult
from .errors import BatchCallError, BatchError, DecodeError
from .multicall import ChunkedBatchCaller
from .reserves import CALLS_PER_POOL, ReserveDecoder, build_reserve_calls

__all__ = [
    'ContractCodec',
    'LP_TOKEN_ABI',
    'SWAP_ABI',
    'MULTICALL2_ABI',
    'BaseBatcher',
    'BatchConfig',
    'BatchResult',
    'BatchError',
    'BatchCallError',
    'DecodeError',
    'ChunkedBatchCaller',
    'ReserveDecoder',
    'build_reserve_calls',
    'CALLS_PER_POOL',
]
