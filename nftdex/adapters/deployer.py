# /nftdex/adapters/deployer.py
from typing import Any, Dict, List, Sequence

from pydantic import BaseModel
from web3 import Web3

from nftdex.core.artifacts import ArtifactLoader
from nftdex.core.calls import Ether, format_ether
from nftdex.core.chain import ChainClient
from nftdex.core.errors import BlockchainError, ValidationError
from nftdex.core.logger import get_logger
from nftdex.core.registry import ContractRegistry, ContractRole
from nftdex.core.tx import TransactionManager

log = get_logger(__name__)


class DeploymentResult(BaseModel):
    contract_name: str
    address: str
    tx_hash: str
    block_number: int | None = None
    gas_used: int
    deployment_cost: str

    def as_response(self) -> Dict[str, Any]:
        return {
            "contractName": self.contract_name,
            "contractAddress": self.address,
            "txHash": self.tx_hash,
            "blockNumber": self.block_number,
            "gasUsed": str(self.gas_used),
            "deploymentCost": self.deployment_cost,
        }


class DeploymentService:
    """Deploys contracts from build artifacts and records the known roles in the registry."""

    def __init__(self, chain: ChainClient, tx_manager: TransactionManager, loader: ArtifactLoader, registry: ContractRegistry):
        self.chain = chain
        self.tx_manager = tx_manager
        self.loader = loader
        self.registry = registry

    async def deploy(
        self,
        contract_name: str,
        args: Sequence[Any] = (),
        value: Ether | None = None,
        source_name: str | None = None,
    ) -> DeploymentResult:
        artifact = await self.loader.load(contract_name, source_name)
        log.info("DEPLOYING_CONTRACT", contract=contract_name, args_count=len(args))

        tx_hash = await self.tx_manager.submit_deployment(
            artifact.abi, artifact.bytecode, args, value, label=f"deploy:{contract_name}"
        )
        receipt = await self.tx_manager.wait(tx_hash)
        address = receipt.get("contractAddress")
        if not address:
            raise BlockchainError(f"Deployment of {contract_name} mined without a contract address: {tx_hash}")

        gas_used = receipt.get("gasUsed") or 0
        gas_price = receipt.get("effectiveGasPrice") or 0
        result = DeploymentResult(
            contract_name=contract_name,
            address=Web3.to_checksum_address(address),
            tx_hash=tx_hash,
            block_number=receipt.get("blockNumber"),
            gas_used=gas_used,
            deployment_cost=format_ether(gas_used * gas_price),
        )
        log.info(
            "CONTRACT_DEPLOYED",
            contract=contract_name,
            address=result.address,
            tx_hash=tx_hash,
            gas_used=gas_used,
            cost=result.deployment_cost,
        )
        return result

    async def deploy_nft(
        self,
        name: str,
        symbol: str,
        base_uri: str,
        max_supply: int,
        max_mint_per_address: int,
        mint_price: Ether,
    ) -> DeploymentResult:
        if max_supply <= 0:
            raise ValidationError("maxSupply must be positive")
        if max_mint_per_address <= 0:
            raise ValidationError("maxMintPerAddress must be positive")
        result = await self.deploy(
            "StandardNFT", [name, symbol, base_uri, max_supply, max_mint_per_address, mint_price]
        )
        self.registry.set(ContractRole.NFT, result.address)
        return result

    async def deploy_pair(self, nft_address: str) -> DeploymentResult:
        if not Web3.is_address(nft_address):
            raise ValidationError(f"Invalid NFT contract address: {nft_address!r}")
        result = await self.deploy("Pair", [Web3.to_checksum_address(nft_address)])
        self.registry.set(ContractRole.PAIR, result.address)
        return result

    async def deploy_factory(self) -> DeploymentResult:
        result = await self.deploy("PairFactory")
        self.registry.set(ContractRole.FACTORY, result.address)
        return result

    async def verify_deployment(self, address: str) -> Dict[str, Any]:
        if not Web3.is_address(address):
            raise ValidationError(f"Invalid contract address: {address!r}")
        code = await self.chain.get_code(address)
        result = {
            "contractAddress": Web3.to_checksum_address(address),
            "isDeployed": len(code) > 0,
            "codeSize": len(code),
        }
        log.info("CONTRACT_VERIFIED", **result)
        return result

    def list_artifacts(self) -> List[str]:
        return self.loader.list_available()

    async def artifact_info(self, contract_name: str, source_name: str | None = None) -> Dict[str, Any]:
        artifact = await self.loader.load(contract_name, source_name)
        return {
            "contractName": artifact.contract_name,
            "sourceName": artifact.source_name,
            "abi": artifact.abi,
            # hex chars after the 0x prefix, two per byte
            "bytecodeSize": (len(artifact.bytecode) - 2) // 2,
        }

    def cache_status(self) -> Dict[str, Any]:
        return self.loader.cache_status()

    def clear_cache(self):
        self.loader.clear_cache()
