# /nftdex/core/state.py - record of every transaction this process dispatched
from collections import OrderedDict
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from nftdex.core.logger import get_logger

log = get_logger(__name__)


class TxStatus(str, Enum):
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    REVERTED = "reverted"
    TIMED_OUT = "timed_out"


class TrackedTransaction(BaseModel):
    model_config = ConfigDict(frozen=True)

    tx_hash: str
    nonce: int
    label: str
    to: str | None = None
    submitted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: TxStatus = TxStatus.SUBMITTED
    block_number: int | None = None
    gas_used: int | None = None
    error: str | None = None

    @property
    def unconfirmed(self) -> bool:
        return self.status in (TxStatus.SUBMITTED, TxStatus.TIMED_OUT)


class TransactionLedger:
    """
    Process-lifetime record of dispatched transactions.

    A transaction the node accepted but never mined stays ``submitted`` (or
    ``timed_out`` once a caller gave up waiting) so operators can see what is
    outstanding. Once full, the oldest settled entries are evicted first;
    unconfirmed entries are never evicted.
    """

    def __init__(self, max_entries: int = 1000):
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, TrackedTransaction]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def record_submitted(self, tx_hash: str, nonce: int, label: str, to: str | None = None) -> TrackedTransaction:
        entry = TrackedTransaction(tx_hash=tx_hash, nonce=nonce, label=label, to=to)
        self._entries[tx_hash] = entry
        self._evict()
        log.info("TX_TRACKED", tx_hash=tx_hash, nonce=nonce, label=label)
        return entry

    def mark_confirmed(self, tx_hash: str, receipt: Dict[str, Any]) -> TrackedTransaction | None:
        return self._update(
            tx_hash,
            status=TxStatus.CONFIRMED,
            block_number=receipt.get("blockNumber"),
            gas_used=receipt.get("gasUsed"),
            error=None,
        )

    def mark_reverted(self, tx_hash: str, receipt: Dict[str, Any], reason: str | None = None) -> TrackedTransaction | None:
        return self._update(
            tx_hash,
            status=TxStatus.REVERTED,
            block_number=receipt.get("blockNumber"),
            gas_used=receipt.get("gasUsed"),
            error=reason or "execution reverted",
        )

    def mark_timed_out(self, tx_hash: str, error: str) -> TrackedTransaction | None:
        return self._update(tx_hash, status=TxStatus.TIMED_OUT, error=error)

    def get(self, tx_hash: str) -> TrackedTransaction | None:
        return self._entries.get(tx_hash)

    def list(self, status: TxStatus | None = None) -> List[TrackedTransaction]:
        entries = list(self._entries.values())
        if status is not None:
            entries = [e for e in entries if e.status == status]
        return entries

    def unconfirmed(self) -> List[TrackedTransaction]:
        return [e for e in self._entries.values() if e.unconfirmed]

    def _update(self, tx_hash: str, **changes) -> TrackedTransaction | None:
        entry = self._entries.get(tx_hash)
        if entry is None:
            # Hash submitted outside this process, e.g. passed in by an operator.
            log.debug("TX_NOT_TRACKED", tx_hash=tx_hash)
            return None
        updated = entry.model_copy(update=changes)
        self._entries[tx_hash] = updated
        log.info("TX_STATUS_UPDATED", tx_hash=tx_hash, status=updated.status.value)
        return updated

    def _evict(self):
        if len(self._entries) <= self.max_entries:
            return
        for tx_hash in [h for h, e in self._entries.items() if not e.unconfirmed]:
            if len(self._entries) <= self.max_entries:
                break
            del self._entries[tx_hash]
