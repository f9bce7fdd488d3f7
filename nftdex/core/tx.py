# /nftdex/core/tx.py
# Contract write gateway: build, sequence, sign and broadcast; confirmation is a separate step.
from typing import Any, Dict, Sequence

from eth_account import Account
from eth_account.signers.local import LocalAccount

from nftdex.core.calls import ContractCall, Ether, coerce_args
from nftdex.core.chain import ChainClient
from nftdex.core.errors import (
    ConfirmationTimeoutError,
    TransactionRejectedError,
    TransactionRevertedError,
)
from nftdex.core.logger import get_logger, TX_SUBMITTED, TX_REJECTED, TX_REVERTED, TX_CONFIRMATION_TIMEOUTS
from nftdex.core.nonce_manager import NonceSequencer
from nftdex.core.state import TransactionLedger

log = get_logger(__name__)


def to_wei_value(value: Ether | int | str | None) -> int:
    if value is None:
        return 0
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return Ether.parse(value).to_wei()


class TransactionManager:
    """Submits signed transactions for the service's single account."""

    def __init__(
        self,
        chain: ChainClient,
        account: LocalAccount,
        sequencer: NonceSequencer,
        ledger: TransactionLedger,
        confirmations: int = 1,
        coerce_decimal_strings: bool = False,
    ):
        self.chain = chain
        self.account = account
        self.address = account.address
        self.sequencer = sequencer
        self.ledger = ledger
        self.confirmations = confirmations
        self.coerce_decimal_strings = coerce_decimal_strings

    @classmethod
    def from_settings(cls, settings, chain: ChainClient) -> "TransactionManager":
        account = Account.from_key(settings.executor_key)
        sequencer = NonceSequencer(
            chain,
            account.address,
            redis_url=settings.NONCE_LOCK_REDIS_URL,
            lock_timeout=settings.NONCE_LOCK_TIMEOUT_SECONDS,
        )
        log.info("TRANSACTION_MANAGER_INITIALIZED", address=account.address)
        return cls(
            chain,
            account,
            sequencer,
            TransactionLedger(settings.MAX_TRACKED_TRANSACTIONS),
            confirmations=settings.TX_CONFIRMATIONS,
            coerce_decimal_strings=settings.COERCE_DECIMAL_STRINGS,
        )

    async def submit(self, call: ContractCall) -> str:
        return await self.submit_write(call.address, call.abi, call.method.value, call.args, call.value, label=call.label)

    async def submit_write(
        self,
        address: str,
        abi: list,
        method: str,
        args: Sequence[Any] = (),
        value: Ether | int | str | None = None,
        label: str | None = None,
    ) -> str:
        """Build, sign and broadcast a contract write. Returns the hash without waiting for mining."""
        label = label or method
        tx = await self.chain.build_call_transaction(
            address,
            abi,
            method,
            coerce_args(args, self.coerce_decimal_strings),
            sender=self.address,
            value=to_wei_value(value),
        )
        return await self._dispatch(tx, label)

    async def submit_deployment(
        self,
        abi: list,
        bytecode: str,
        args: Sequence[Any] = (),
        value: Ether | int | str | None = None,
        label: str = "deploy",
    ) -> str:
        tx = await self.chain.build_deploy_transaction(
            abi,
            bytecode,
            coerce_args(args, self.coerce_decimal_strings),
            sender=self.address,
            value=to_wei_value(value),
        )
        return await self._dispatch(tx, label)

    async def _dispatch(self, tx: Dict[str, Any], label: str) -> str:
        # Building (and its gas simulation) happens before this point, so a
        # reverting call never takes the submission slot.
        async with self.sequencer.reserve() as nonce:
            full_tx = {**tx, "nonce": nonce, "chainId": tx.get("chainId") or self.chain.expected_chain_id}
            try:
                signed = self.account.sign_transaction(full_tx)
                tx_hash = await self.chain.send_raw_transaction(signed.raw_transaction)
            except TransactionRejectedError as e:
                e.nonce = nonce
                TX_REJECTED.labels(label).inc()
                log.error("TX_REJECTED", label=label, nonce=nonce, error=e.message)
                raise
            except (TypeError, ValueError) as e:
                TX_REJECTED.labels(label).inc()
                log.error("TX_SIGNING_FAILED", label=label, nonce=nonce, error=str(e))
                raise TransactionRejectedError(f"Could not sign {label} transaction: {e}", nonce=nonce) from e
            self.ledger.record_submitted(tx_hash, nonce, label, to=full_tx.get("to"))

        TX_SUBMITTED.labels(label).inc()
        log.info("TX_BROADCAST", label=label, tx_hash=tx_hash, nonce=nonce)
        return tx_hash

    async def wait(self, tx_hash: str, confirmations: int | None = None, timeout: float | None = None) -> Dict[str, Any]:
        """Wait for ``tx_hash`` to be mined and keep the ledger in step with the outcome."""
        try:
            receipt = await self.chain.wait_for_confirmation(tx_hash, confirmations or self.confirmations, timeout)
        except TransactionRevertedError as e:
            TX_REVERTED.inc()
            self.ledger.mark_reverted(tx_hash, e.receipt, e.reason)
            raise
        except ConfirmationTimeoutError as e:
            TX_CONFIRMATION_TIMEOUTS.inc()
            self.ledger.mark_timed_out(tx_hash, e.message)
            raise
        self.ledger.mark_confirmed(tx_hash, receipt)
        return receipt

    async def execute(self, call: ContractCall) -> str:
        """Submit ``call`` and wait for it to be mined. Returns the transaction hash."""
        tx_hash = await self.submit(call)
        await self.wait(tx_hash)
        return tx_hash

    async def reset_nonce(self):
        await self.sequencer.reset()

    async def balance(self) -> int:
        return await self.chain.get_balance(self.address)

    async def close(self):
        await self.sequencer.close()
