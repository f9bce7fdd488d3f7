# /nftdex/adapters/pair.py
# Trading and liquidity against a Pair contract. Chain integers are returned as ether decimals.
from typing import Any, Dict, List, Sequence

from web3 import Web3

from nftdex.abis import PAIR_ABI
from nftdex.core import calls
from nftdex.core.calls import Ether, format_ether
from nftdex.core.chain import ChainClient
from nftdex.core.errors import NoLiquidityError, ValidationError
from nftdex.core.logger import get_logger
from nftdex.core.registry import ContractRegistry, ContractRole
from nftdex.core.tx import TransactionManager

log = get_logger(__name__)


def decode_trade(trade: Any) -> Dict[str, Any]:
    if isinstance(trade, dict):
        trader, is_buy, price, timestamp = trade["trader"], trade["isBuy"], trade["price"], trade["timestamp"]
    else:
        trader, is_buy, price, timestamp = trade
    return {
        "trader": trader,
        "isBuy": bool(is_buy),
        "price": format_ether(price),
        "timestamp": int(timestamp),
    }


class PairAdapter:
    def __init__(self, chain: ChainClient, tx_manager: TransactionManager, registry: ContractRegistry):
        self.chain = chain
        self.tx_manager = tx_manager
        self.registry = registry

    def _pair(self, pair_address: str | None = None) -> str:
        if not pair_address:
            return self.registry.require(ContractRole.PAIR)
        if not Web3.is_address(pair_address):
            raise ValidationError(f"Invalid pair address: {pair_address!r}")
        return pair_address

    async def _read(self, method: str, args: Sequence[Any] = (), pair_address: str | None = None) -> Any:
        return await self.chain.read(self._pair(pair_address), PAIR_ABI, method, args)

    # --- Trading ---

    async def buy(self, max_price: Ether, pair_address: str | None = None) -> str:
        tx_hash = await self.tx_manager.execute(calls.buy_nft(self._pair(pair_address), max_price))
        log.info("NFT_BOUGHT", max_price=str(max_price), tx_hash=tx_hash)
        return tx_hash

    async def sell(self, token_id: int, min_price: Ether, pair_address: str | None = None) -> str:
        tx_hash = await self.tx_manager.execute(calls.sell_nft(self._pair(pair_address), token_id, min_price))
        log.info("NFT_SOLD", token_id=token_id, min_price=str(min_price), tx_hash=tx_hash)
        return tx_hash

    # --- Liquidity ---

    async def add_initial_liquidity(
        self, token_ids: Sequence[int], eth_amount: Ether | None = None, pair_address: str | None = None
    ) -> str:
        call = calls.add_initial_liquidity(self._pair(pair_address), token_ids, eth_amount)
        tx_hash = await self.tx_manager.execute(call)
        log.info("INITIAL_LIQUIDITY_ADDED", token_ids=list(token_ids), eth_amount=str(eth_amount), tx_hash=tx_hash)
        return tx_hash

    async def add_liquidity(
        self, token_ids: Sequence[int], eth_amount: Ether | None = None, pair_address: str | None = None
    ) -> str:
        tx_hash = await self.tx_manager.execute(calls.add_liquidity(self._pair(pair_address), token_ids, eth_amount))
        log.info("LIQUIDITY_ADDED", token_ids=list(token_ids), eth_amount=str(eth_amount), tx_hash=tx_hash)
        return tx_hash

    async def remove_liquidity(self, lp_amount: Ether, token_ids: Sequence[int], pair_address: str | None = None) -> str:
        call = calls.remove_liquidity(self._pair(pair_address), lp_amount, token_ids)
        tx_hash = await self.tx_manager.execute(call)
        log.info("LIQUIDITY_REMOVED", lp_amount=str(lp_amount), token_ids=list(token_ids), tx_hash=tx_hash)
        return tx_hash

    async def withdraw_fees(self, pair_address: str | None = None) -> str:
        return await self.tx_manager.execute(calls.withdraw_fees(self._pair(pair_address)))

    # --- Queries ---

    async def reserves(self, pair_address: str | None = None) -> Dict[str, Any]:
        eth_reserve, nft_reserve = await self._read("getPoolReserves", pair_address=pair_address)
        return {"ethReserve": format_ether(eth_reserve), "nftReserve": int(nft_reserve)}

    async def _require_liquidity(self, pair_address: str | None):
        eth_reserve, nft_reserve = await self._read("getPoolReserves", pair_address=pair_address)
        if eth_reserve == 0 or nft_reserve == 0:
            raise NoLiquidityError("Pool has no liquidity; add initial liquidity before pricing")

    async def current_price(self, pair_address: str | None = None) -> str:
        await self._require_liquidity(pair_address)
        return format_ether(await self._read("getCurrentPrice", pair_address=pair_address))

    async def sell_price(self, pair_address: str | None = None) -> str:
        await self._require_liquidity(pair_address)
        return format_ether(await self._read("getSellPrice", pair_address=pair_address))

    async def buy_quote(self, pair_address: str | None = None) -> Dict[str, str]:
        await self._require_liquidity(pair_address)
        total_cost, fee = await self._read("getBuyQuote", pair_address=pair_address)
        return {"totalCost": format_ether(total_cost), "fee": format_ether(fee)}

    async def trade_history(self, pair_address: str | None = None) -> List[Dict[str, Any]]:
        trades = await self._read("getTradeHistory", pair_address=pair_address)
        return [decode_trade(t) for t in trades]

    async def recent_trades(self, count: int = 10, pair_address: str | None = None) -> List[Dict[str, Any]]:
        trades = await self._read("getRecentTrades", [count], pair_address=pair_address)
        return [decode_trade(t) for t in trades]

    async def accumulated_fees(self, pair_address: str | None = None) -> str:
        return format_ether(await self._read("getAccumulatedFees", pair_address=pair_address))
