# /nftdex/api/routes/deploy.py
from fastapi import APIRouter, Depends

from nftdex.api.deps import get_services
from nftdex.api.responses import success_response
from nftdex.api.schemas import DeployContractRequest, DeployNftRequest, DeployPairRequest, UpdateContractsRequest
from nftdex.core.calls import Ether
from nftdex.core.registry import ContractRole
from nftdex.core.services import Services

router = APIRouter(prefix="/deploy", tags=["deploy"])


@router.post("/nft")
async def deploy_nft(body: DeployNftRequest, services: Services = Depends(get_services)):
    result = await services.deployer.deploy_nft(
        body.name,
        body.symbol,
        body.baseURI,
        body.maxSupply,
        body.maxMintPerAddress,
        Ether.parse(body.mintPrice),
    )
    data = {**result.as_response(), **body.model_dump()}
    return success_response(data, "NFT contract deployed successfully")


@router.post("/pair")
async def deploy_pair(body: DeployPairRequest, services: Services = Depends(get_services)):
    result = await services.deployer.deploy_pair(body.nftContractAddress)
    data = {**result.as_response(), "nftContractAddress": body.nftContractAddress}
    return success_response(data, "Pair contract deployed successfully")


@router.post("/factory")
async def deploy_factory(services: Services = Depends(get_services)):
    result = await services.deployer.deploy_factory()
    return success_response(result.as_response(), "PairFactory contract deployed successfully")


@router.post("/contract")
async def deploy_contract(body: DeployContractRequest, services: Services = Depends(get_services)):
    """Deploy any artifact by name. Constructor arguments are passed through as given."""
    value = Ether.parse(body.value) if body.value is not None else None
    result = await services.deployer.deploy(body.contractName, body.constructorArgs, value, body.sourceName)
    return success_response(result.as_response(), f"{body.contractName} deployed successfully")


@router.get("/contracts")
async def get_contracts(services: Services = Depends(get_services)):
    return success_response(services.registry.snapshot(), "Deployed contract addresses retrieved successfully")


@router.put("/contracts")
async def update_contracts(body: UpdateContractsRequest, services: Services = Depends(get_services)):
    addresses = services.registry.update({
        ContractRole.NFT: body.nftContract,
        ContractRole.PAIR: body.pairContract,
        ContractRole.FACTORY: body.pairFactory,
    })
    return success_response(addresses, "Contract addresses updated successfully")


@router.get("/artifacts")
async def list_artifacts(services: Services = Depends(get_services)):
    contracts = services.deployer.list_artifacts()
    data = {"contracts": contracts, "count": len(contracts), "cache": services.deployer.cache_status()}
    return success_response(data, "Available contracts retrieved successfully")


# Registered before /artifacts/{name} so "cache" is not taken as a contract name.
@router.delete("/artifacts/cache")
async def clear_artifact_cache(services: Services = Depends(get_services)):
    services.deployer.clear_cache()
    return success_response(services.deployer.cache_status(), "Artifact cache cleared")


@router.get("/artifacts/{name}")
async def artifact_info(name: str, sourceName: str | None = None, services: Services = Depends(get_services)):
    info = await services.deployer.artifact_info(name, sourceName)
    return success_response(info, "Contract info retrieved successfully")


@router.get("/verify/{address}")
async def verify_deployment(address: str, services: Services = Depends(get_services)):
    result = await services.deployer.verify_deployment(address)
    return success_response(result, "Contract verification completed")
