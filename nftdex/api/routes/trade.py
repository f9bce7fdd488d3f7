# /nftdex/api/routes/trade.py
import asyncio
from typing import Literal

from fastapi import APIRouter, Depends, Query

from nftdex.api.deps import get_services
from nftdex.api.responses import paginated_response, success_response
from nftdex.api.schemas import BuyRequest, PairAddressQuery, SellRequest
from nftdex.core.calls import Ether
from nftdex.core.services import Services

router = APIRouter(prefix="/trade", tags=["trade"])


@router.post("/buy")
async def buy(body: BuyRequest, services: Services = Depends(get_services)):
    tx_hash = await services.pair.buy(Ether.parse(body.maxPrice), body.pairAddress)
    return success_response({"txHash": tx_hash, "maxPrice": body.maxPrice, "type": "buy"}, "NFT bought successfully")


@router.post("/sell")
async def sell(body: SellRequest, services: Services = Depends(get_services)):
    tx_hash = await services.pair.sell(body.tokenId, Ether.parse(body.minPrice), body.pairAddress)
    data = {"txHash": tx_hash, "tokenId": body.tokenId, "minPrice": body.minPrice, "type": "sell"}
    return success_response(data, "NFT sold successfully")


@router.get("/price")
async def price(
    type: Literal["current", "sell", "buy", "all"] = "current",
    pairAddress: PairAddressQuery = None,
    services: Services = Depends(get_services),
):
    pair = services.pair
    if type == "current":
        data = {"current": await pair.current_price(pairAddress)}
    elif type == "sell":
        data = {"sell": await pair.sell_price(pairAddress)}
    elif type == "buy":
        data = {"buy": await pair.buy_quote(pairAddress)}
    else:
        current, sell_price, buy_quote = await asyncio.gather(
            pair.current_price(pairAddress), pair.sell_price(pairAddress), pair.buy_quote(pairAddress)
        )
        data = {"current": current, "sell": sell_price, "buy": buy_quote}
    return success_response(data, "Price retrieved successfully")


@router.get("/history")
async def history(
    limit: int = Query(50, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    pairAddress: PairAddressQuery = None,
    services: Services = Depends(get_services),
):
    trades = await services.pair.trade_history(pairAddress)
    return paginated_response(trades[offset:offset + limit], len(trades), limit, offset, "Trade history retrieved successfully")


@router.get("/recent")
async def recent(
    count: int = Query(10, ge=1, le=1000),
    pairAddress: PairAddressQuery = None,
    services: Services = Depends(get_services),
):
    trades = await services.pair.recent_trades(count, pairAddress)
    return success_response({"trades": trades, "count": len(trades)}, "Recent trades retrieved successfully")


@router.get("/quote")
async def quote(pairAddress: PairAddressQuery = None, services: Services = Depends(get_services)):
    return success_response(await services.pair.buy_quote(pairAddress), "Buy quote retrieved successfully")


@router.get("/reserves")
async def reserves(pairAddress: PairAddressQuery = None, services: Services = Depends(get_services)):
    return success_response(await services.pair.reserves(pairAddress), "Pool reserves retrieved successfully")


@router.get("/fees")
async def fees(pairAddress: PairAddressQuery = None, services: Services = Depends(get_services)):
    data = {"accumulatedFees": await services.pair.accumulated_fees(pairAddress)}
    return success_response(data, "Accumulated fees retrieved successfully")
