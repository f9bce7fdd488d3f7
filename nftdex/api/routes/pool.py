# /nftdex/api/routes/pool.py
import asyncio

from fastapi import APIRouter, Depends

from nftdex.api.deps import get_services
from nftdex.api.responses import success_response
from nftdex.api.schemas import CreatePoolRequest, LiquidityRequest, PairAddressQuery, RemoveLiquidityRequest
from nftdex.core.calls import Ether
from nftdex.core.errors import NoLiquidityError
from nftdex.core.services import Services

router = APIRouter(prefix="/pool", tags=["pool"])


def _ether(value: str | None) -> Ether | None:
    return Ether.parse(value) if value is not None else None


@router.post("/create")
async def create_pool(body: CreatePoolRequest, services: Services = Depends(get_services)):
    result = await services.factory.create_pool(body.nftContractAddress)
    return success_response({**result, "nftContractAddress": body.nftContractAddress}, "Pool created successfully")


@router.post("/add-initial-liquidity")
async def add_initial_liquidity(body: LiquidityRequest, services: Services = Depends(get_services)):
    tx_hash = await services.pair.add_initial_liquidity(body.nftTokenIds, _ether(body.ethAmount), body.pairAddress)
    data = {"txHash": tx_hash, "nftTokenIds": body.nftTokenIds, "ethAmount": body.ethAmount}
    return success_response(data, "Initial liquidity added successfully")


@router.post("/add-liquidity")
async def add_liquidity(body: LiquidityRequest, services: Services = Depends(get_services)):
    tx_hash = await services.pair.add_liquidity(body.nftTokenIds, _ether(body.ethAmount), body.pairAddress)
    data = {"txHash": tx_hash, "nftTokenIds": body.nftTokenIds, "ethAmount": body.ethAmount}
    return success_response(data, "Liquidity added successfully")


@router.post("/remove-liquidity")
async def remove_liquidity(body: RemoveLiquidityRequest, services: Services = Depends(get_services)):
    tx_hash = await services.pair.remove_liquidity(Ether.parse(body.lpTokenAmount), body.nftTokenIds, body.pairAddress)
    data = {"txHash": tx_hash, "lpTokenAmount": body.lpTokenAmount, "nftTokenIds": body.nftTokenIds}
    return success_response(data, "Liquidity removed successfully")


@router.get("")
async def all_pools(services: Services = Depends(get_services)):
    pools = await services.factory.all_pools()
    return success_response({"pools": pools, "count": len(pools)}, "All pools retrieved successfully")


@router.get("/reserves")
async def pool_reserves(pairAddress: PairAddressQuery = None, services: Services = Depends(get_services)):
    return success_response(await services.pair.reserves(pairAddress), "Pool reserves retrieved successfully")


@router.get("/{nft_address}")
async def pool_info(nft_address: str, services: Services = Depends(get_services)):
    pool = await services.factory.get_pool(nft_address)
    if pool is None:
        return success_response({"exists": False, "nftContractAddress": nft_address}, "Pool does not exist")

    reserves = await services.pair.reserves(pool)
    try:
        current, sell, buy = await asyncio.gather(
            services.pair.current_price(pool),
            services.pair.sell_price(pool),
            services.pair.buy_quote(pool),
        )
        prices = {"current": current, "sell": sell, "buy": buy}
    except NoLiquidityError:
        prices = None
    data = {
        "exists": True,
        "nftContractAddress": nft_address,
        "poolAddress": pool,
        "reserves": reserves,
        "prices": prices,
    }
    return success_response(data, "Pool info retrieved successfully")
