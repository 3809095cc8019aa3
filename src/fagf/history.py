"""Accepted-transaction history with an enforced newest-first ordering."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Iterator, Optional

from .envelope import GovernanceEnvelope
from .money import sum_amounts


class TransactionHistory:
    """Previously accepted envelopes, always ordered newest first.

    Velocity checks read "most recent" and "count in window" through this
    class instead of relying on callers to keep a list sorted.
    """

    def __init__(self, envelopes: Iterable[GovernanceEnvelope] = ()):
        # sorted() is stable, so equal timestamps keep caller order
        self._entries: list[GovernanceEnvelope] = sorted(
            envelopes, key=lambda e: e.transaction.timestamp, reverse=True
        )

    @classmethod
    def of(cls, history: TransactionHistory | Iterable[GovernanceEnvelope] | None) -> TransactionHistory:
        if isinstance(history, TransactionHistory):
            return history
        return cls(history or ())

    def append(self, envelope: GovernanceEnvelope) -> None:
        ts = envelope.transaction.timestamp
        index = 0
        while index < len(self._entries) and self._entries[index].transaction.timestamp > ts:
            index += 1
        self._entries.insert(index, envelope)

    def most_recent(self) -> Optional[GovernanceEnvelope]:
        return self._entries[0] if self._entries else None

    def since(self, instant: float) -> list[GovernanceEnvelope]:
        """Entries timestamped strictly after ``instant``."""
        return [e for e in self._entries if e.transaction.timestamp > instant]

    def count_since(self, instant: float) -> int:
        return len(self.since(instant))

    def total_since(self, instant: float) -> Decimal:
        """Sum of accepted amounts at or after ``instant``."""
        return sum_amounts(
            e.transaction.amount for e in self._entries if e.transaction.timestamp >= instant
        )

    def merchants(self) -> set[str]:
        return {e.transaction.merchant_name for e in self._entries}

    def snapshot(self) -> TransactionHistory:
        copy = TransactionHistory()
        copy._entries = list(self._entries)
        return copy

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[GovernanceEnvelope]:
        return iter(list(self._entries))
