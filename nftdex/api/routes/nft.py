# /nftdex/api/routes/nft.py
from fastapi import APIRouter, Depends

from nftdex.api.deps import get_services
from nftdex.api.responses import success_response
from nftdex.api.schemas import ApproveRequest, MintRequest, PremintRequest
from nftdex.core.calls import Ether
from nftdex.core.registry import ContractRole
from nftdex.core.services import Services

router = APIRouter(prefix="/nft", tags=["nft"])


@router.get("/info")
async def nft_info(services: Services = Depends(get_services)):
    return success_response(await services.nft.info(), "NFT info retrieved successfully")


@router.post("/mint")
async def mint(body: MintRequest, services: Services = Depends(get_services)):
    to = body.to or services.tx_manager.address
    price = Ether.parse(body.price) if body.price is not None else None
    tx_hash = await services.nft.mint(to, body.uri, price)
    return success_response({"txHash": tx_hash, "to": to, "price": body.price}, "NFT minted successfully")


@router.post("/premint")
async def premint(body: PremintRequest, services: Services = Depends(get_services)):
    to = body.to or services.tx_manager.address
    tx_hash = await services.nft.premint(to, body.count)
    return success_response({"txHash": tx_hash, "to": to, "count": body.count}, "NFTs preminted successfully")


@router.post("/approve")
async def approve(body: ApproveRequest, services: Services = Depends(get_services)):
    operator = body.operator or services.registry.require(ContractRole.PAIR)
    tx_hash = await services.nft.approve_operator(operator, body.approved)
    data = {"txHash": tx_hash, "operator": operator, "approved": body.approved}
    return success_response(data, "Operator approval updated successfully")
