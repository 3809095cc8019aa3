"""Storyline transactions used by the demo and the ``scenarios`` command."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

from .envelope import EnvelopeContext, GovernanceEnvelope, Transaction


@dataclass(frozen=True)
class Scenario:
    key: str
    title: str
    amount: float
    destination: str
    merchant_name: str
    category: str
    payment_method: str
    reasoning: str
    is_new_merchant: bool
    history_depth: int
    risk_score: float

    def envelope(self, timestamp: Optional[float] = None) -> GovernanceEnvelope:
        return GovernanceEnvelope(
            transaction=Transaction(
                amount=self.amount,
                destination=self.destination,
                merchant_name=self.merchant_name,
                category=self.category,
                payment_method=self.payment_method,
                timestamp=time.time() if timestamp is None else timestamp,
            ),
            reasoning=self.reasoning,
            context=EnvelopeContext(
                is_new_merchant=self.is_new_merchant,
                history_depth=self.history_depth,
                risk_score=self.risk_score,
            ),
        )


SCENARIOS = [
    Scenario(
        key="cost-optimization",
        title="Routine cloud cost optimization",
        amount=15,
        destination="aws_devops",
        merchant_name="AWS Cloud Services",
        category="SaaS / API",
        payment_method="Corporate Card",
        reasoning="Cost optimization through automated resource scaling",
        is_new_merchant=False,
        history_depth=24,
        risk_score=1,
    ),
    Scenario(
        key="urgent-travel",
        title="Urgent travel booking above the autonomous limit",
        amount=1250,
        destination="singapore_airlines",
        merchant_name="Singapore Airlines",
        category="Travel / Logistics",
        payment_method="Corporate Card",
        reasoning="Urgent talent relocation for project launch",
        is_new_merchant=False,
        history_depth=50,
        risk_score=2,
    ),
    Scenario(
        key="yield-staking",
        title="Compromised agent routing funds to a restricted category",
        amount=50,
        destination="binance_global",
        merchant_name="Binance Exchange",
        category="Ungoverned Gambling",
        payment_method="Corporate Card",
        reasoning="Yield generation via staking platform",
        is_new_merchant=True,
        history_depth=0,
        risk_score=5,
    ),
]


def get_scenario(key: str) -> Optional[Scenario]:
    for scenario in SCENARIOS:
        if scenario.key == key:
            return scenario
    return None
