"""Tests for newest-first transaction history."""

from decimal import Decimal

from fagf.envelope import GovernanceEnvelope, Transaction
from fagf.history import TransactionHistory


NOW = 1_700_000_000.0


def entry(seconds_ago, amount=10.0, merchant="NTUC FairPrice"):
    return GovernanceEnvelope(
        transaction=Transaction(
            amount=amount,
            destination="fairprice",
            merchant_name=merchant,
            category="Groceries",
            payment_method="PayNow",
            timestamp=NOW - seconds_ago,
        )
    )


def test_orders_newest_first():
    history = TransactionHistory([entry(300), entry(10), entry(120)])
    assert [NOW - e.transaction.timestamp for e in history] == [10, 120, 300]
    assert history.most_recent().transaction.timestamp == NOW - 10


def test_append_keeps_order():
    history = TransactionHistory([entry(300), entry(10)])
    history.append(entry(100))
    history.append(entry(1))
    assert [NOW - e.transaction.timestamp for e in history] == [1, 10, 100, 300]
    assert len(history) == 4


def test_empty_history():
    history = TransactionHistory()
    assert history.most_recent() is None
    assert history.count_since(0) == 0
    assert len(history) == 0


def test_count_since_is_strict():
    history = TransactionHistory([entry(3600), entry(3599), entry(10)])
    assert history.count_since(NOW - 3600) == 2


def test_total_since_sums_exactly():
    history = TransactionHistory([entry(10, amount=0.1), entry(20, amount=0.2), entry(9999, amount=50)])
    assert history.total_since(NOW - 100) == Decimal("0.3")


def test_of_wraps_sequences_and_passes_through_instances():
    history = TransactionHistory([entry(1)])
    assert TransactionHistory.of(history) is history
    assert len(TransactionHistory.of([entry(1), entry(2)])) == 2
    assert len(TransactionHistory.of(None)) == 0


def test_snapshot_is_independent():
    history = TransactionHistory([entry(10)])
    snap = history.snapshot()
    history.append(entry(1))
    assert len(snap) == 1
    assert history.merchants() == {"NTUC FairPrice"}
