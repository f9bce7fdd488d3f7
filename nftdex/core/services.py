# /nftdex/core/services.py
# Wires the process-wide objects together once at startup. Nothing here is a global.
from dataclasses import dataclass

from nftdex.adapters.deployer import DeploymentService
from nftdex.adapters.factory import FactoryAdapter
from nftdex.adapters.nft import NftAdapter
from nftdex.adapters.pair import PairAdapter
from nftdex.core.artifacts import ArtifactLoader
from nftdex.core.chain import ChainClient
from nftdex.core.logger import get_logger
from nftdex.core.registry import ContractRegistry
from nftdex.core.tx import TransactionManager

log = get_logger(__name__)


@dataclass
class Services:
    chain: ChainClient
    tx_manager: TransactionManager
    loader: ArtifactLoader
    registry: ContractRegistry
    deployer: DeploymentService
    nft: NftAdapter
    pair: PairAdapter
    factory: FactoryAdapter

    @classmethod
    def assemble(cls, chain, tx_manager, loader, registry) -> "Services":
        return cls(
            chain=chain,
            tx_manager=tx_manager,
            loader=loader,
            registry=registry,
            deployer=DeploymentService(chain, tx_manager, loader, registry),
            nft=NftAdapter(chain, tx_manager, registry),
            pair=PairAdapter(chain, tx_manager, registry),
            factory=FactoryAdapter(chain, tx_manager, registry),
        )

    async def close(self):
        await self.tx_manager.close()
        await self.chain.close()
        log.info("SERVICES_CLOSED")


def build_services(settings) -> Services:
    chain = ChainClient.from_settings(settings)
    return Services.assemble(
        chain,
        TransactionManager.from_settings(settings, chain),
        ArtifactLoader(settings.ARTIFACTS_DIR),
        ContractRegistry.from_settings(settings),
    )
