# /nftdex/core/errors.py
# Typed failures surfaced by the core. The HTTP layer maps status_code to the response.
from typing import Any, Dict


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


# --- Node / chain ---

class ConnectivityError(AppError):
    """Node unreachable, unresponsive, or on the wrong chain."""
    status_code = 503


class ChainIdMismatchError(ConnectivityError):
    """Node answers but serves a different chain."""


class BlockchainError(AppError):
    status_code = 502


class NonceUnavailableError(BlockchainError):
    """Neither the pending nor the latest transaction count could be read."""


class TransactionRejectedError(BlockchainError):
    """The node refused the transaction: bad nonce, insufficient funds, reverted simulation."""

    def __init__(self, message: str, nonce: int | None = None):
        super().__init__(message)
        self.nonce = nonce


class TransactionRevertedError(BlockchainError):
    """Mined, but execution failed."""

    def __init__(self, tx_hash: str, receipt: Dict[str, Any] | None = None, reason: str | None = None):
        self.tx_hash = tx_hash
        self.receipt = receipt or {}
        self.reason = reason
        message = f"Transaction reverted: {tx_hash}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class ConfirmationTimeoutError(BlockchainError):
    status_code = 504

    def __init__(self, tx_hash: str, timeout: float):
        self.tx_hash = tx_hash
        self.timeout = timeout
        super().__init__(f"Transaction {tx_hash} not confirmed within {timeout:g}s; it may still be mined")


# --- Contracts ---

class ContractError(AppError):
    status_code = 400


class ContractCallError(ContractError):
    """A read call reverted."""


class ContractAddressNotSetError(ContractError):
    status_code = 409


class NoLiquidityError(ContractError):
    status_code = 409


class ArtifactError(ContractError):
    pass


class ArtifactNotFoundError(ArtifactError):
    status_code = 404


class ArtifactInvalidError(ArtifactError):
    status_code = 422


class ValidationError(AppError):
    status_code = 400


class NotFoundError(AppError):
    status_code = 404
