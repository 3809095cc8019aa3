"""
Deterministic mandate evaluation.

Checks run in a fixed order and stop at the first violation, so every
verdict names at most one mandate:

    category block -> new merchant -> confirmation threshold
    -> (daily aggregate, opt-in) -> rate limit -> cooldown -> payment method

The category restriction is always a hard block. Every other mandate's
outcome follows its ``enforcement`` field.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, Optional

from .envelope import GovernanceEnvelope
from .history import TransactionHistory
from .mandate import EnforcementAction, FinancialMandates, Mandate, Severity
from .money import format_amount, is_over, to_decimal

logger = logging.getLogger(__name__)


RATE_WINDOW_SECONDS = 3600


class Verdict(str, Enum):
    APPROVED = "approved"
    HITL_REQUIRED = "hitl_required"
    BLOCKED = "blocked"


@dataclass
class ValidationResult:
    allowed: bool
    requires_approval: bool
    reason: Optional[str] = None
    mitigation_risk: Optional[str] = None
    severity: Optional[Severity] = None
    triggered_mandates: list[str] = field(default_factory=list)

    @property
    def verdict(self) -> Verdict:
        if self.allowed:
            return Verdict.APPROVED
        if self.requires_approval:
            return Verdict.HITL_REQUIRED
        return Verdict.BLOCKED

    def to_dict(self) -> dict:
        d = {
            "verdict": self.verdict.value,
            "allowed": self.allowed,
            "requires_approval": self.requires_approval,
            "reason": self.reason,
            "mitigation_risk": self.mitigation_risk,
            "severity": self.severity.value if self.severity else None,
            "triggered_mandates": list(self.triggered_mandates),
        }
        return {k: v for k, v in d.items() if v is not None}


def _approved() -> ValidationResult:
    return ValidationResult(allowed=True, requires_approval=False)


def _hard_block(mandate: Mandate, reason: str) -> ValidationResult:
    return ValidationResult(
        allowed=False,
        requires_approval=False,
        reason=reason,
        mitigation_risk=mandate.risk_disclosure,
        severity=mandate.severity,
        triggered_mandates=[mandate.id],
    )


def _start_of_utc_day(now: float) -> float:
    day = datetime.fromtimestamp(now, tz=timezone.utc).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    return day.timestamp()


class GovernanceValidator:
    """Evaluates a proposed transaction against a mandate configuration."""

    @staticmethod
    def validate(
        envelope: GovernanceEnvelope,
        mandates: FinancialMandates,
        history: TransactionHistory | Iterable[GovernanceEnvelope] | None = None,
        now: Optional[float] = None,
        enforce_daily_limit: bool = False,
    ) -> ValidationResult:
        now = time.time() if now is None else now
        history = TransactionHistory.of(history)
        tx = envelope.transaction

        # Hard block regardless of the mandate's declared enforcement
        blocked = mandates.blocked_categories
        if tx.category in blocked.parameter:
            result = _hard_block(
                blocked, f"FAGF-FS Block: Category '{tx.category}' is strictly restricted."
            )
            logger.debug("Blocked %s: category %r", tx.merchant_name, tx.category)
            return result

        for mandate, detail in GovernanceValidator._soft_checks(
            envelope, mandates, history, now, enforce_daily_limit
        ):
            result = GovernanceValidator._enforce(mandate, detail)
            if result is not None:
                logger.debug(
                    "%s for %s: %s", result.verdict.value, tx.merchant_name, mandate.id
                )
                return result

        logger.debug("Approved %s %s", tx.amount_display, tx.merchant_name)
        return _approved()

    @staticmethod
    def _soft_checks(envelope, mandates, history, now, enforce_daily_limit):
        """Yield (mandate, reason detail) for each check that fires, in order."""
        tx = envelope.transaction

        auth = mandates.new_merchant_auth
        if envelope.context.is_new_merchant and auth.parameter:
            yield auth, f"New merchant '{tx.merchant_name}' requires manual authorization."

        threshold = mandates.confirmation_threshold
        if is_over(tx.amount, threshold.parameter):
            yield threshold, (
                f"Transaction amount {format_amount(tx.amount)} exceeds autonomous limit "
                f"({format_amount(threshold.parameter)})."
            )

        if enforce_daily_limit:
            daily = mandates.daily_aggregate_limit
            spent = history.total_since(_start_of_utc_day(now))
            projected = spent + to_decimal(tx.amount)
            if is_over(projected, daily.parameter):
                yield daily, (
                    f"Daily aggregate {format_amount(spent)} + {format_amount(tx.amount)} "
                    f"exceeds daily limit ({format_amount(daily.parameter)})."
                )

        rate = mandates.rate_limit_per_hour
        if history.count_since(now - RATE_WINDOW_SECONDS) >= rate.parameter:
            yield rate, f"Velocity limit exceeded ({rate.parameter} tx/hr)."

        cooldown = mandates.cooldown_seconds
        last = history.most_recent()
        if last is not None:
            elapsed = now - last.transaction.timestamp
            if elapsed < cooldown.parameter:
                remaining = cooldown.parameter - elapsed
                wait = f"{math.ceil(remaining)}s" if math.isfinite(remaining) else "indefinitely"
                yield cooldown, f"Cooling period active. Wait {wait}."

        methods = mandates.allowed_methods
        if tx.payment_method not in methods.parameter:
            yield methods, f"Payment method '{tx.payment_method}' is untrusted for autonomous use."

    @staticmethod
    def _enforce(mandate: Mandate, detail: str) -> Optional[ValidationResult]:
        if mandate.enforcement == EnforcementAction.SHADOW_LOG:
            logger.warning("Shadow violation %s: %s", mandate.id, detail)
            return None
        if mandate.enforcement == EnforcementAction.BLOCK:
            return _hard_block(mandate, f"FAGF-FS Block: {detail}")
        return ValidationResult(
            allowed=False,
            requires_approval=True,
            reason=f"FAGF-FS HITL: {detail}",
            mitigation_risk=mandate.risk_disclosure,
            severity=mandate.severity,
            triggered_mandates=[mandate.id],
        )


def validate(
    envelope: GovernanceEnvelope,
    mandates: FinancialMandates,
    history: TransactionHistory | Iterable[GovernanceEnvelope] | None = None,
    now: Optional[float] = None,
    enforce_daily_limit: bool = False,
) -> ValidationResult:
    """Module-level shortcut for :meth:`GovernanceValidator.validate`."""
    return GovernanceValidator.validate(
        envelope, mandates, history, now=now, enforce_daily_limit=enforce_daily_limit
    )


def shadow_violations(
    envelope: GovernanceEnvelope,
    mandates: FinancialMandates,
    history: TransactionHistory | Iterable[GovernanceEnvelope] | None = None,
    now: Optional[float] = None,
    enforce_daily_limit: bool = False,
) -> list[str]:
    """Ids of shadow-logged mandates that would have fired before the verdict."""
    now = time.time() if now is None else now
    history = TransactionHistory.of(history)
    if envelope.transaction.category in mandates.blocked_categories.parameter:
        return []
    fired = []
    for mandate, _detail in GovernanceValidator._soft_checks(
        envelope, mandates, history, now, enforce_daily_limit
    ):
        if mandate.enforcement != EnforcementAction.SHADOW_LOG:
            break
        fired.append(mandate.id)
    return fired
