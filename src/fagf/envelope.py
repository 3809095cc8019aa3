"""Governance envelope: a proposed transaction plus agent rationale and risk context."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from .money import format_amount


@dataclass(frozen=True)
class Transaction:
    """A payment proposal."""

    amount: float
    destination: str
    merchant_name: str
    category: str
    payment_method: str
    timestamp: float = field(default_factory=time.time)

    @property
    def amount_display(self) -> str:
        return format_amount(self.amount)

    def to_dict(self) -> dict:
        return {
            "amount": self.amount,
            "destination": self.destination,
            "merchant_name": self.merchant_name,
            "category": self.category,
            "payment_method": self.payment_method,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class EnvelopeContext:
    """Caller-computed risk signals. Only ``is_new_merchant`` drives a check."""

    is_new_merchant: bool = False
    history_depth: int = 0
    risk_score: float = 0.0


@dataclass(frozen=True)
class GovernanceEnvelope:
    """The unit of evaluation."""

    transaction: Transaction
    reasoning: str = ""
    context: EnvelopeContext = field(default_factory=EnvelopeContext)

    def to_dict(self) -> dict:
        return {
            "transaction": self.transaction.to_dict(),
            "reasoning": self.reasoning,
            "context": {
                "is_new_merchant": self.context.is_new_merchant,
                "history_depth": self.context.history_depth,
                "risk_score": self.context.risk_score,
            },
        }

    @classmethod
    def from_dict(cls, d: dict) -> GovernanceEnvelope:
        tx = d["transaction"]
        ctx = d.get("context", {})
        return cls(
            transaction=Transaction(
                amount=tx["amount"],
                destination=tx.get("destination", ""),
                merchant_name=tx["merchant_name"],
                category=tx["category"],
                payment_method=tx["payment_method"],
                timestamp=tx.get("timestamp", time.time()),
            ),
            reasoning=d.get("reasoning", ""),
            context=EnvelopeContext(
                is_new_merchant=bool(ctx.get("is_new_merchant", False)),
                history_depth=int(ctx.get("history_depth", 0)),
                risk_score=float(ctx.get("risk_score", 0.0)),
            ),
        )
