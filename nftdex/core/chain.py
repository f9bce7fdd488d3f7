# /nftdex/core/chain.py
# All direct interaction with the blockchain node: reads, transaction building,
# raw submission and confirmation polling. Nonces and signing live elsewhere.
import asyncio
from typing import Any, Dict, List, Sequence

import aiohttp
from web3 import AsyncWeb3, Web3
from web3.exceptions import (
    ContractLogicError,
    MismatchedABI,
    TransactionNotFound,
    Web3TypeError,
    Web3ValidationError,
)
from web3.middleware import ExtraDataToPOAMiddleware

from nftdex.core.errors import (
    BlockchainError,
    ChainIdMismatchError,
    ConfirmationTimeoutError,
    ConnectivityError,
    ContractCallError,
    ContractError,
    TransactionRejectedError,
    TransactionRevertedError,
    ValidationError,
)
from nftdex.core.logger import get_logger

log = get_logger(__name__)

# Raised by web3 when call or constructor arguments do not fit the ABI.
ARGUMENT_ERRORS = (Web3ValidationError, Web3TypeError, MismatchedABI)


def revert_reason(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc)


class ChainClient:
    def __init__(
        self,
        w3: AsyncWeb3,
        expected_chain_id: int | None = None,
        poll_interval: float = 1.0,
        default_timeout: float = 120.0,
    ):
        self.w3 = w3
        self.expected_chain_id = expected_chain_id
        self.poll_interval = poll_interval
        self.default_timeout = default_timeout

    @classmethod
    def from_settings(cls, settings) -> "ChainClient":
        provider = AsyncWeb3.AsyncHTTPProvider(
            settings.RPC_URL,
            request_kwargs={"timeout": aiohttp.ClientTimeout(total=settings.RPC_TIMEOUT_SECONDS)},
        )
        w3 = AsyncWeb3(provider)
        w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
        log.info("CHAIN_CLIENT_INITIALIZED", rpc_url=settings.RPC_URL, chain_id=settings.CHAIN_ID)
        return cls(
            w3,
            expected_chain_id=settings.CHAIN_ID,
            poll_interval=settings.TX_POLL_INTERVAL_SECONDS,
            default_timeout=settings.TX_TIMEOUT_SECONDS,
        )

    @property
    def endpoint(self) -> str:
        return getattr(self.w3.provider, "endpoint_uri", "unknown")

    def contract(self, address: str, abi: list):
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)

    def _function(self, address: str, abi: list, method: str, args: Sequence[Any]):
        contract = self.contract(address, abi)
        try:
            func = getattr(contract.functions, method)
        except AttributeError as e:
            raise ContractError(f"Method {method} is not part of the contract interface") from e
        try:
            return func(*args)
        except ARGUMENT_ERRORS as e:
            raise ValidationError(f"Invalid arguments for {method}: {e}") from e

    # --- Reads ---

    async def read(self, address: str, abi: list, method: str, args: Sequence[Any] = ()) -> Any:
        """Call a view function against the latest state. No nonce, no signature."""
        func = self._function(address, abi, method, args)
        try:
            result = await func.call()
        except ContractLogicError as e:
            log.warning("CONTRACT_CALL_REVERTED", contract=address, method=method, reason=revert_reason(e))
            raise ContractCallError(f"Contract call {method} reverted: {revert_reason(e)}") from e
        except Exception as e:
            log.error("CONTRACT_CALL_FAILED", contract=address, method=method, error=str(e))
            raise BlockchainError(f"Contract call {method} failed: {e}") from e
        log.debug("CONTRACT_CALL_OK", contract=address, method=method)
        return result

    async def get_event_logs(self, address: str, abi: list, event_name: str, from_block: int = 0) -> List[Dict[str, Any]]:
        contract = self.contract(address, abi)
        try:
            event = getattr(contract.events, event_name)
        except AttributeError as e:
            raise ContractError(f"Event {event_name} is not part of the contract interface") from e
        try:
            entries = await event().get_logs(from_block=from_block)
        except Exception as e:
            log.error("EVENT_LOG_QUERY_FAILED", contract=address, event=event_name, error=str(e))
            raise BlockchainError(f"Failed to read {event_name} logs: {e}") from e
        return [dict(entry["args"]) for entry in entries]

    async def get_transaction_count(self, address: str, block_identifier: str = "pending") -> int:
        try:
            return await self.w3.eth.get_transaction_count(Web3.to_checksum_address(address), block_identifier)
        except Exception as e:
            raise BlockchainError(f"Failed to read {block_identifier} transaction count: {e}") from e

    async def estimate_gas(self, transaction: Dict[str, Any]) -> int:
        try:
            return await self.w3.eth.estimate_gas(transaction)
        except ContractLogicError as e:
            raise TransactionRejectedError(f"Gas estimation reverted: {revert_reason(e)}") from e
        except Exception as e:
            log.error("GAS_ESTIMATION_FAILED", error=str(e))
            raise BlockchainError(f"Failed to estimate gas: {e}") from e

    async def get_balance(self, address: str) -> int:
        try:
            return await self.w3.eth.get_balance(Web3.to_checksum_address(address))
        except Exception as e:
            log.error("BALANCE_QUERY_FAILED", address=address, error=str(e))
            raise BlockchainError(f"Failed to get account balance: {e}") from e

    async def get_code(self, address: str) -> bytes:
        try:
            return bytes(await self.w3.eth.get_code(Web3.to_checksum_address(address)))
        except Exception as e:
            log.error("CODE_QUERY_FAILED", address=address, error=str(e))
            raise BlockchainError(f"Failed to get contract code: {e}") from e

    async def is_contract_deployed(self, address: str) -> bool:
        return len(await self.get_code(address)) > 0

    async def get_network_info(self) -> Dict[str, int]:
        try:
            chain_id, block_number, gas_price = await asyncio.gather(
                self.w3.eth.chain_id,
                self.w3.eth.block_number,
                self.w3.eth.gas_price,
            )
        except Exception as e:
            log.error("NETWORK_INFO_FAILED", error=str(e))
            raise BlockchainError(f"Failed to get network information: {e}") from e
        return {"chain_id": chain_id, "block_number": block_number, "gas_price": gas_price}

    async def check_connectivity(self) -> Dict[str, int]:
        """Verify the node answers and serves the configured chain. Startup refuses to proceed otherwise."""
        try:
            connected = await self.w3.is_connected()
        except Exception as e:
            raise ConnectivityError(f"RPC node at {self.endpoint} is unreachable: {e}") from e
        if not connected:
            raise ConnectivityError(f"RPC node at {self.endpoint} is unreachable")
        try:
            info = await self.get_network_info()
        except BlockchainError as e:
            raise ConnectivityError(f"RPC node at {self.endpoint} is unresponsive: {e.message}") from e
        if self.expected_chain_id is not None and info["chain_id"] != self.expected_chain_id:
            raise ChainIdMismatchError(
                f"Chain id mismatch: node reports {info['chain_id']}, expected {self.expected_chain_id}"
            )
        log.info("NODE_CONNECTIVITY_OK", endpoint=self.endpoint, **info)
        return info

    # --- Writes ---

    async def build_call_transaction(
        self,
        address: str,
        abi: list,
        method: str,
        args: Sequence[Any],
        sender: str,
        value: int = 0,
    ) -> Dict[str, Any]:
        """Encode a write call and let the node fill gas and fee fields. The nonce is left unset."""
        func = self._function(address, abi, method, args)
        params: Dict[str, Any] = {"from": sender}
        if value:
            params["value"] = value
        try:
            return dict(await func.build_transaction(params))
        except ContractLogicError as e:
            log.warning("TX_SIMULATION_REVERTED", contract=address, method=method, reason=revert_reason(e))
            raise TransactionRejectedError(f"{method} reverted in simulation: {revert_reason(e)}") from e
        except Exception as e:
            log.error("TX_BUILD_FAILED", contract=address, method=method, error=str(e))
            raise TransactionRejectedError(f"Failed to build {method} transaction: {e}") from e

    async def build_deploy_transaction(
        self,
        abi: list,
        bytecode: str,
        args: Sequence[Any],
        sender: str,
        value: int = 0,
    ) -> Dict[str, Any]:
        factory = self.w3.eth.contract(abi=abi, bytecode=bytecode)
        params: Dict[str, Any] = {"from": sender}
        if value:
            params["value"] = value
        try:
            constructor = factory.constructor(*args)
        except ARGUMENT_ERRORS as e:
            raise ValidationError(f"Invalid constructor arguments: {e}") from e
        try:
            return dict(await constructor.build_transaction(params))
        except ContractLogicError as e:
            log.warning("DEPLOY_SIMULATION_REVERTED", reason=revert_reason(e))
            raise TransactionRejectedError(f"Deployment reverted in simulation: {revert_reason(e)}") from e
        except Exception as e:
            log.error("DEPLOY_BUILD_FAILED", error=str(e))
            raise TransactionRejectedError(f"Failed to build deployment transaction: {e}") from e

    async def send_raw_transaction(self, raw_transaction: bytes) -> str:
        try:
            tx_hash = await self.w3.eth.send_raw_transaction(raw_transaction)
        except Exception as e:
            raise TransactionRejectedError(f"Node rejected transaction: {revert_reason(e)}") from e
        return Web3.to_hex(tx_hash)

    async def wait_for_confirmation(
        self,
        tx_hash: str,
        confirmations: int = 1,
        timeout: float | None = None,
    ) -> Dict[str, Any]:
        """Poll until the transaction is mined ``confirmations`` blocks deep.

        Raises TransactionRevertedError for a receipt with status 0, and
        ConfirmationTimeoutError if nothing conclusive is seen within ``timeout``.
        """
        timeout = timeout or self.default_timeout
        log.info("WAITING_FOR_CONFIRMATION", tx_hash=tx_hash, confirmations=confirmations)
        try:
            receipt = await asyncio.wait_for(self._wait_mined(tx_hash, max(confirmations, 1)), timeout)
        except asyncio.TimeoutError:
            log.warning("CONFIRMATION_TIMEOUT", tx_hash=tx_hash, timeout=timeout)
            raise ConfirmationTimeoutError(tx_hash, timeout) from None
        log.info(
            "TX_CONFIRMED",
            tx_hash=tx_hash,
            block_number=receipt.get("blockNumber"),
            gas_used=receipt.get("gasUsed"),
        )
        return receipt

    async def _wait_mined(self, tx_hash: str, confirmations: int) -> Dict[str, Any]:
        receipt = None
        while receipt is None:
            try:
                receipt = await self.w3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                receipt = None
            except Exception as e:
                log.warning("RECEIPT_POLL_FAILED", tx_hash=tx_hash, error=str(e))
                receipt = None
            if receipt is None:
                await asyncio.sleep(self.poll_interval)

        receipt = dict(receipt)
        if receipt.get("status") == 0:
            reason = await self._revert_reason(tx_hash, receipt)
            log.error("TX_REVERTED", tx_hash=tx_hash, block_number=receipt.get("blockNumber"), reason=reason)
            raise TransactionRevertedError(tx_hash, receipt, reason)

        target_block = receipt["blockNumber"] + confirmations - 1
        while await self.w3.eth.block_number < target_block:
            await asyncio.sleep(self.poll_interval)
        return receipt

    async def _revert_reason(self, tx_hash: str, receipt: Dict[str, Any]) -> str | None:
        # Replays the call at the mined block; nodes only return the reason for calls.
        try:
            tx = await self.w3.eth.get_transaction(tx_hash)
            call = {"from": tx["from"], "data": tx["input"], "value": tx["value"]}
            if tx.get("to"):
                call["to"] = tx["to"]
            await self.w3.eth.call(call, receipt["blockNumber"])
        except ContractLogicError as e:
            return revert_reason(e)
        except Exception as e:
            log.debug("REVERT_REASON_UNAVAILABLE", tx_hash=tx_hash, error=str(e))
        return None

    async def close(self):
        await self.w3.provider.disconnect()
