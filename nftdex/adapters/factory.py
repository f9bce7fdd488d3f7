# /nftdex/adapters/factory.py
from typing import Any, Dict, List

from web3 import Web3

from nftdex.abis import PAIR_FACTORY_ABI
from nftdex.core import calls
from nftdex.core.chain import ChainClient
from nftdex.core.errors import ValidationError
from nftdex.core.logger import get_logger
from nftdex.core.registry import ContractRegistry, ContractRole
from nftdex.core.tx import TransactionManager

log = get_logger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class FactoryAdapter:
    def __init__(self, chain: ChainClient, tx_manager: TransactionManager, registry: ContractRegistry):
        self.chain = chain
        self.tx_manager = tx_manager
        self.registry = registry

    def _factory(self) -> str:
        return self.registry.require(ContractRole.FACTORY)

    async def create_pool(self, nft_address: str) -> Dict[str, Any]:
        """Create a pool through the factory and return its address once mined."""
        factory = self._factory()
        tx_hash = await self.tx_manager.execute(calls.create_pool(factory, nft_address))
        pool_address = await self.get_pool(nft_address)
        if pool_address is not None:
            self.registry.set(ContractRole.PAIR, pool_address)
        log.info("POOL_CREATED", nft_contract=nft_address, pool=pool_address, tx_hash=tx_hash)
        return {"txHash": tx_hash, "poolAddress": pool_address}

    async def get_pool(self, nft_address: str) -> str | None:
        if not Web3.is_address(nft_address):
            raise ValidationError(f"Invalid NFT contract address: {nft_address!r}")
        pool = await self.chain.read(
            self._factory(), PAIR_FACTORY_ABI, "getPoolAddress", [Web3.to_checksum_address(nft_address)]
        )
        if not pool or Web3.to_checksum_address(pool) == ZERO_ADDRESS:
            return None
        return Web3.to_checksum_address(pool)

    async def all_pools(self) -> List[Dict[str, str]]:
        events = await self.chain.get_event_logs(self._factory(), PAIR_FACTORY_ABI, "PoolCreated")
        return [{"poolAddress": e["poolAddress"], "nftContract": e["nftContract"]} for e in events]
