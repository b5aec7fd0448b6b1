"""
Chunked Multicall2 batch caller.

Splits any number of read calls into groups of `batch_size`, issues one
Multicall2 aggregate() per group through eth_call, and stitches the return
data back together in input order.
"""

import asyncio
from typing import List, Sequence, Union

from web3 import Web3

from ..core.models import ReadCall
from ..utils.address import require_address
from .abi import MULTICALL2_ABI, ContractCodec
from .base import BaseBatcher, BatchConfig, BatchResult
from .errors import BatchCallError, DecodeError


class ChunkedBatchCaller(BaseBatcher):
    """
    Batch caller backed by a Multicall2 deployment.

    All chunks are sent concurrently; the result is only assembled once every
    chunk has answered. Any failing chunk fails the batch, and nothing is
    retried here.
    """

    def __init__(self, web3: Web3, multicall_address: str, config: BatchConfig = None):
        super().__init__(web3, config)
        self.multicall_address = require_address(multicall_address)
        self.codec = ContractCodec(MULTICALL2_ABI)

    async def aggregate(
        self, calls: Sequence[ReadCall], block_identifier: Union[int, str] = "latest"
    ) -> List[bytes]:
        """Return one payload per call, in the order the calls were given."""
        result = await self.batch_call(calls, block_identifier)
        return result.return_data

    async def batch_call(
        self, calls: Sequence[ReadCall], block_identifier: Union[int, str] = "latest"
    ) -> BatchResult:
        """
        Execute all calls in chunks.

        Args:
            calls: Read calls to aggregate
            block_identifier: Block to call at

        Returns:
            BatchResult with return data in input order

        Raises:
            BatchCallError: If any chunk fails
        """
        if not calls:
            return BatchResult(return_data=[])

        chunks = self._chunk(calls)
        self.logger.info(
            f"Aggregating {len(calls)} calls in {len(chunks)} chunks "
            f"(chunk size {self.config.batch_size})"
        )

        responses = await asyncio.gather(
            *(
                asyncio.to_thread(self._call_chunk, index, chunk, block_identifier)
                for index, chunk in enumerate(chunks)
            )
        )

        return_data: List[bytes] = []
        block_numbers: List[int] = []
        for block_number, chunk_data in responses:
            block_numbers.append(block_number)
            return_data.extend(chunk_data)

        if len(return_data) != len(calls):
            raise BatchCallError(
                f"Expected {len(calls)} results, got {len(return_data)}"
            )

        return BatchResult(
            return_data=return_data,
            block_numbers=block_numbers,
            chunk_count=len(chunks),
        )

    def _call_chunk(
        self,
        index: int,
        chunk: List[ReadCall],
        block_identifier: Union[int, str],
    ):
        """Run one aggregate() through eth_call and decode its return data."""
        call_data = self.codec.encode_function_data(
            "aggregate", [[call.as_multicall_arg() for call in chunk]]
        )
        self.logger.debug(f"Chunk {index}: sending {len(chunk)} calls")

        try:
            raw = self.web3.eth.call(
                {"to": self.multicall_address, "data": call_data},
                block_identifier,
            )
        except Exception as e:
            self.logger.error(f"Chunk {index} aggregate() failed: {e}")
            raise BatchCallError(f"aggregate() failed: {e}", chunk_index=index) from e

        try:
            block_number, chunk_data = self.codec.decode_function_result("aggregate", bytes(raw))
        except DecodeError as e:
            raise BatchCallError(f"Malformed aggregate() response: {e}", chunk_index=index) from e

        if len(chunk_data) != len(chunk):
            raise BatchCallError(
                f"Sent {len(chunk)} calls, got {len(chunk_data)} results",
                chunk_index=index,
            )

        return block_number, [bytes(item) for item in chunk_data]
