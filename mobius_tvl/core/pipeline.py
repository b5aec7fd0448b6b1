"""
End-to-end TVL run.

    static pools -> read calls -> chunked multicall -> reserve decoding
                 -> (concurrently) registry fetch, price fetch
                 -> join -> TVL fold -> output file

All collaborators are passed in; build_pipeline() wires the real ones from
configuration.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from web3 import Web3

from ..batchers import BatchConfig, ChunkedBatchCaller, ReserveDecoder, build_reserve_calls
from ..config import ConfigManager
from ..fetchers import CoinGeckoPriceClient, PoolRegistryClient, PriceTable
from .models import ExchangeSnapshot, Pool, RegistryEntry, ReserveSnapshot
from .storage import JsonStorage, StorageBase
from .tvl import TVLAggregator, TVLReport, format_usd

logger = logging.getLogger(__name__)


class TVLPipeline:
    """Runs one TVL computation over a fixed pool list."""

    def __init__(
        self,
        pools: Sequence[Pool],
        batch_caller: ChunkedBatchCaller,
        registry_client: PoolRegistryClient,
        price_client: CoinGeckoPriceClient,
        storage: StorageBase,
        output_file: str = "pools.json",
        decoder: Optional[ReserveDecoder] = None,
        aggregator: Optional[TVLAggregator] = None,
    ):
        self.pools = list(pools)
        self.batch_caller = batch_caller
        self.registry_client = registry_client
        self.price_client = price_client
        self.storage = storage
        self.output_file = output_file
        self.decoder = decoder or ReserveDecoder()
        self.aggregator = aggregator or TVLAggregator()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        """Release the HTTP sessions held by the clients."""
        self.registry_client.close()
        self.price_client.close()

    async def fetch_reserves(self) -> List[ReserveSnapshot]:
        """Batch-read and decode LP supply and reserves of every pool."""
        calls = build_reserve_calls(self.pools, self.decoder.lp_codec, self.decoder.swap_codec)
        result = await self.batch_caller.batch_call(calls)
        if result.block_range:
            low, high = result.block_range
            self.logger.info(f"Reserves read at blocks {low}-{high}")
        return self.decoder.decode(self.pools, result.return_data)

    async def collect(self):
        """Run the three independent reads concurrently and wait for all of them."""
        reserves, registry, prices = await asyncio.gather(
            self.fetch_reserves(),
            self.registry_client.fetch_async(self.pools),
            self.price_client.fetch_prices_async(self.pools),
        )
        return reserves, registry, prices

    def build_snapshots(
        self,
        reserves: Sequence[ReserveSnapshot],
        registry: Sequence[RegistryEntry],
    ) -> List[ExchangeSnapshot]:
        return [
            ExchangeSnapshot.combine(pool, entry, reserve)
            for pool, entry, reserve in zip(self.pools, registry, reserves)
        ]

    def compute(
        self,
        reserves: Sequence[ReserveSnapshot],
        registry: Sequence[RegistryEntry],
        prices: PriceTable,
    ) -> TVLReport:
        return self.aggregator.aggregate(self.build_snapshots(reserves, registry), prices)

    async def run(self, write_output: bool = True) -> TVLReport:
        """
        Compute the TVL and write it out.

        Any fatal error propagates before the output file is touched.
        """
        self.logger.info(f"Computing TVL for {len(self.pools)} pools")
        reserves, registry, prices = await self.collect()
        report = self.compute(reserves, registry, prices)

        if write_output:
            self.storage.save(self.output_file, float(report.total))

        self.logger.info(f"TVL: ${format_usd(report.total)}")
        return report


def build_pipeline(
    config: ConfigManager,
    pools_file: Optional[str] = None,
    chunk_size: Optional[int] = None,
    output_dir: Optional[Union[str, Path]] = None,
    output_file: Optional[str] = None,
    include_fees: bool = False,
) -> TVLPipeline:
    """
    Wire a TVLPipeline from configuration.

    The pool list is loaded and every address validated before any client
    is created, so a bad address aborts without network traffic.
    """
    pools = config.get_pools(pools_file)

    web3 = Web3(
        Web3.HTTPProvider(
            config.chain.RPC_URL,
            request_kwargs={"timeout": config.chain.RPC_TIMEOUT},
        )
    )
    batch_caller = ChunkedBatchCaller(
        web3,
        config.chain.MULTICALL_ADDRESS,
        BatchConfig(batch_size=chunk_size or config.chain.MULTICALL_CHUNK_SIZE),
    )
    registry_client = PoolRegistryClient(
        config.feeds.POOL_REGISTRY_URL, timeout=config.feeds.HTTP_TIMEOUT
    )
    price_client = CoinGeckoPriceClient(
        config.feeds.COINGECKO_API_URL,
        vs_currency=config.feeds.PRICE_CURRENCY,
        timeout=config.feeds.HTTP_TIMEOUT,
    )
    storage = JsonStorage(output_dir or config.base.DATA_DIR)

    return TVLPipeline(
        pools=pools,
        batch_caller=batch_caller,
        registry_client=registry_client,
        price_client=price_client,
        storage=storage,
        output_file=output_file or config.feeds.OUTPUT_FILE,
        aggregator=TVLAggregator(include_fees=include_fees),
    )
