# /nftdex/api/routes/web3.py
# Node and signing-account status, plus the operator view of dispatched transactions.
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from nftdex.api.deps import get_services
from nftdex.api.responses import success_response
from nftdex.core.calls import format_ether
from nftdex.core.errors import NotFoundError
from nftdex.core.services import Services
from nftdex.core.state import TxStatus

router = APIRouter(prefix="/web3", tags=["web3"])


def _network(info: dict) -> dict:
    return {
        "chainId": info["chain_id"],
        "blockNumber": info["block_number"],
        "gasPrice": str(info["gas_price"]),
    }


@router.get("/health")
async def health(services: Services = Depends(get_services)):
    info = await services.chain.check_connectivity()
    data = {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "network": _network(info),
        "unconfirmedTransactions": len(services.tx_manager.ledger.unconfirmed()),
    }
    return success_response(data, "Node is reachable")


@router.get("/network")
async def network(services: Services = Depends(get_services)):
    info = await services.chain.get_network_info()
    return success_response(_network(info), "Network info retrieved successfully")


@router.get("/balance")
async def balance(services: Services = Depends(get_services)):
    wei = await services.tx_manager.balance()
    data = {"address": services.tx_manager.address, "balance": format_ether(wei)}
    return success_response(data, "Balance retrieved successfully")


@router.post("/reset-nonce")
async def reset_nonce(services: Services = Depends(get_services)):
    await services.tx_manager.reset_nonce()
    return success_response(None, "Nonce reset successfully")


@router.get("/transactions")
async def transactions(status: TxStatus | None = None, services: Services = Depends(get_services)):
    entries = services.tx_manager.ledger.list(status)
    data = {"transactions": [e.model_dump(mode="json") for e in entries], "count": len(entries)}
    return success_response(data, "Tracked transactions retrieved successfully")


@router.get("/transactions/{tx_hash}")
async def transaction(tx_hash: str, services: Services = Depends(get_services)):
    entry = services.tx_manager.ledger.get(tx_hash)
    if entry is None:
        raise NotFoundError(f"Transaction {tx_hash} was not dispatched by this service")
    return success_response(entry.model_dump(mode="json"), "Transaction retrieved successfully")
