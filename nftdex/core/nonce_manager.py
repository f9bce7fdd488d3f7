# /nftdex/core/nonce_manager.py
# Hands out one nonce per write for the single signing account.

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

import redis.asyncio as redis
from redis.exceptions import LockError

from nftdex.core.errors import BlockchainError, NonceUnavailableError
from nftdex.core.logger import get_logger, NONCE_RESETS

log = get_logger(__name__)


class NonceSequencer:
    """
    Serializes nonce assignment for one account.

    Discipline: a single slot (``asyncio.Lock``) guards the region from the
    chain query through signing and broadcast. Inside the slot the nonce is the
    larger of the node's pending-inclusive transaction count and a local floor
    (last committed nonce + 1). The floor only advances when the reserving body
    finishes without raising, so a broadcast the node refused does not leave a
    gap. All writes from this process are therefore serialized.

    With ``redis_url`` set, a redis lock named ``nonce_lock:<address>`` is held
    for the same region so several replicas sharing one key do not collide.
    """

    def __init__(self, chain, address: str, redis_url: str | None = None, lock_timeout: int = 30):
        self.chain = chain
        self.address = address
        self._lock = asyncio.Lock()
        self._next: int | None = None
        self._lock_timeout = lock_timeout
        self._redis = redis.Redis.from_url(redis_url) if redis_url else None

    @property
    def local_floor(self) -> int | None:
        return self._next

    @asynccontextmanager
    async def reserve(self) -> AsyncIterator[int]:
        """Hold the submission slot and yield the nonce to use inside it."""
        async with self._lock:
            async with self._cross_process_lock():
                nonce = await self._next_nonce()
                yield nonce
                self._next = nonce + 1
                log.debug("NONCE_COMMITTED", address=self.address, nonce=nonce)

    async def acquire(self) -> int:
        """Reserve and immediately commit one nonce."""
        async with self.reserve() as nonce:
            return nonce

    async def reset(self):
        """Forget the local floor; the next reservation trusts only the chain."""
        async with self._lock:
            previous = self._next
            self._next = None
        NONCE_RESETS.inc()
        log.warning("NONCE_RESET", address=self.address, previous_floor=previous)

    async def close(self):
        if self._redis is not None:
            await self._redis.aclose()

    @asynccontextmanager
    async def _cross_process_lock(self) -> AsyncIterator[None]:
        if self._redis is None:
            yield
            return
        lock = self._redis.lock(
            f"nonce_lock:{self.address}",
            timeout=self._lock_timeout,
            blocking_timeout=self._lock_timeout,
        )
        try:
            acquired = await lock.acquire()
        except LockError as e:
            raise NonceUnavailableError(f"Could not acquire nonce lock for {self.address}: {e}") from e
        if not acquired:
            raise NonceUnavailableError(f"Timed out waiting for nonce lock for {self.address}")
        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError as e:
                # Expired while held; the next holder re-reads the chain anyway.
                log.warning("NONCE_LOCK_RELEASE_FAILED", address=self.address, error=str(e))

    async def _next_nonce(self) -> int:
        observed = await self._observe()
        if self._next is None:
            log.info("NONCE_FROM_RPC", address=self.address, nonce=observed)
            return observed
        if self._next > observed:
            log.debug("NONCE_LOCAL_FLOOR_AHEAD", address=self.address, observed=observed, floor=self._next)
            return self._next
        if observed > self._next:
            log.info("NONCE_ADVANCED_EXTERNALLY", address=self.address, observed=observed, floor=self._next)
        return observed

    async def _observe(self) -> int:
        try:
            return await self.chain.get_transaction_count(self.address, "pending")
        except BlockchainError as e:
            log.warning("NONCE_PENDING_QUERY_FAILED", address=self.address, error=e.message)
        try:
            return await self.chain.get_transaction_count(self.address, "latest")
        except BlockchainError as e:
            log.error("NONCE_LATEST_QUERY_FAILED", address=self.address, error=e.message)
            raise NonceUnavailableError(f"Could not determine nonce for {self.address}: {e.message}") from e
