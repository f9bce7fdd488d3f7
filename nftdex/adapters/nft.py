# /nftdex/adapters/nft.py
import asyncio
from typing import Any, Dict

from nftdex.abis import STANDARD_NFT_ABI
from nftdex.core import calls
from nftdex.core.calls import Ether
from nftdex.core.chain import ChainClient
from nftdex.core.logger import get_logger
from nftdex.core.registry import ContractRegistry, ContractRole
from nftdex.core.tx import TransactionManager

log = get_logger(__name__)


class NftAdapter:
    def __init__(self, chain: ChainClient, tx_manager: TransactionManager, registry: ContractRegistry):
        self.chain = chain
        self.tx_manager = tx_manager
        self.registry = registry

    def _nft(self, nft_address: str | None = None) -> str:
        return nft_address or self.registry.require(ContractRole.NFT)

    async def info(self, nft_address: str | None = None) -> Dict[str, Any]:
        nft = self._nft(nft_address)
        name, symbol, total_supply, balance = await asyncio.gather(
            self.chain.read(nft, STANDARD_NFT_ABI, "name"),
            self.chain.read(nft, STANDARD_NFT_ABI, "symbol"),
            self.chain.read(nft, STANDARD_NFT_ABI, "totalSupply"),
            self.chain.read(nft, STANDARD_NFT_ABI, "balanceOf", [self.tx_manager.address]),
        )
        return {
            "contractAddress": nft,
            "name": name,
            "symbol": symbol,
            "totalSupply": str(total_supply),
            "balance": str(balance),
        }

    async def mint(self, to: str, uri: str = "", price: Ether | None = None, nft_address: str | None = None) -> str:
        call = calls.mint(self._nft(nft_address), to, uri, price or Ether.parse(0))
        tx_hash = await self.tx_manager.execute(call)
        log.info("NFT_MINTED", to=to, tx_hash=tx_hash)
        return tx_hash

    async def premint(self, to: str, count: int, nft_address: str | None = None) -> str:
        tx_hash = await self.tx_manager.execute(calls.premint(self._nft(nft_address), to, count))
        log.info("NFT_PREMINTED", to=to, count=count, tx_hash=tx_hash)
        return tx_hash

    async def approve_operator(self, operator: str, approved: bool = True, nft_address: str | None = None) -> str:
        """Grant or revoke ``operator`` (usually a pair) control over all of the service account's tokens."""
        call = calls.set_approval_for_all(self._nft(nft_address), operator, approved)
        return await self.tx_manager.execute(call)
