from nftdex.core.state import TransactionLedger, TxStatus


def _hash(i):
    return "0x" + f"{i:064x}"


def test_lifecycle():
    ledger = TransactionLedger()
    ledger.record_submitted(_hash(1), 0, "Pair.buyNFT")
    ledger.record_submitted(_hash(2), 1, "Pair.sellNFT")
    ledger.record_submitted(_hash(3), 2, "deploy:Pair")

    ledger.mark_confirmed(_hash(1), {"blockNumber": 5, "gasUsed": 21000})
    ledger.mark_reverted(_hash(2), {"blockNumber": 6, "gasUsed": 30000}, "execution reverted: slippage")
    ledger.mark_timed_out(_hash(3), "not confirmed within 120s")

    assert ledger.get(_hash(1)).status == TxStatus.CONFIRMED
    assert ledger.get(_hash(2)).error == "execution reverted: slippage"
    assert [e.tx_hash for e in ledger.unconfirmed()] == [_hash(3)]
    assert [e.tx_hash for e in ledger.list(TxStatus.REVERTED)] == [_hash(2)]


def test_late_confirmation_after_timeout():
    ledger = TransactionLedger()
    ledger.record_submitted(_hash(1), 0, "Pair.buyNFT")
    ledger.mark_timed_out(_hash(1), "timeout")
    ledger.mark_confirmed(_hash(1), {"blockNumber": 9, "gasUsed": 1})
    entry = ledger.get(_hash(1))
    assert entry.status == TxStatus.CONFIRMED
    assert entry.error is None


def test_unknown_hash_is_ignored():
    ledger = TransactionLedger()
    assert ledger.mark_confirmed(_hash(9), {"blockNumber": 1}) is None
    assert len(ledger) == 0


def test_eviction_keeps_unconfirmed():
    ledger = TransactionLedger(max_entries=2)
    ledger.record_submitted(_hash(1), 0, "a")
    ledger.record_submitted(_hash(2), 1, "b")
    ledger.mark_confirmed(_hash(2), {"blockNumber": 1})
    ledger.record_submitted(_hash(3), 2, "c")

    assert ledger.get(_hash(1)) is not None
    assert ledger.get(_hash(2)) is None
    assert len(ledger) == 2
