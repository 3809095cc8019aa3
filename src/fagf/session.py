"""
Governance session: the caller side of the validator.

Holds the deployed and pending (draft) mandate configurations, the merchant
trust list, the accepted-transaction history and the queue of proposals
waiting for a human. Validation and history commits happen under one lock
so rate-limit and cooldown checks always see a consistent snapshot.
"""

from __future__ import annotations

import hashlib
import logging
import os
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from .audit import AuditTrail, EventType
from .envelope import EnvelopeContext, GovernanceEnvelope, Transaction
from .errors import HardBlockError, NoPendingConfigError, ProposalNotFoundError
from .history import TransactionHistory
from .mandate import FinancialMandates
from .profiles import DEFAULT_MAS_MANDATES
from .validator import GovernanceValidator, ValidationResult, Verdict, shadow_violations

logger = logging.getLogger(__name__)

# Recent hard-block ids remembered so approve() can refuse them explicitly
MAX_BLOCKED_IDS = 1024


class ProposalStatus(str, Enum):
    COMMITTED = "committed"
    AWAITING_APPROVAL = "awaiting_approval"
    REJECTED = "rejected"
    BLOCKED = "blocked"


@dataclass
class Proposal:
    """An evaluated envelope and what became of it."""

    proposal_id: str
    envelope: GovernanceEnvelope
    result: ValidationResult
    status: ProposalStatus
    evaluated_at: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return {
            "proposal_id": self.proposal_id,
            "status": self.status.value,
            "evaluated_at": self.evaluated_at,
            "envelope": self.envelope.to_dict(),
            "result": self.result.to_dict(),
        }


class GovernanceSession:
    """Evaluates, queues and commits agent transactions for one agent."""

    def __init__(
        self,
        mandates: Optional[FinancialMandates] = None,
        trusted_merchants: Iterable[str] = (),
        audit: Optional[AuditTrail] = None,
        enforce_daily_limit: bool = False,
    ):
        mandates = mandates or DEFAULT_MAS_MANDATES
        mandates.check_unique_ids()
        self.deployed = mandates
        self.pending: Optional[FinancialMandates] = None
        self.audit = audit or AuditTrail()
        self.enforce_daily_limit = enforce_daily_limit
        self._trusted = set(trusted_merchants)
        self._history = TransactionHistory()
        self._awaiting: dict[str, Proposal] = {}
        self._blocked_reasons: OrderedDict[str, str] = OrderedDict()
        self.max_blocked_ids = MAX_BLOCKED_IDS
        self._lock = threading.Lock()

    # ── Configuration (draft / deploy) ─────────────────────────────

    def stage(self, mandates: FinancialMandates) -> None:
        mandates.check_unique_ids()
        with self._lock:
            self.pending = mandates
        self.audit.log(EventType.MANDATES_STAGED, details={"ids": mandates.ids()})
        logger.info("Mandate configuration staged (%d mandates)", len(mandates.ids()))

    def deploy(self) -> FinancialMandates:
        with self._lock:
            if self.pending is None:
                raise NoPendingConfigError("No staged mandate configuration to deploy")
            self.deployed, self.pending = self.pending, None
            deployed = self.deployed
        self.audit.log(EventType.MANDATES_DEPLOYED, details=deployed.to_dict())
        logger.info("Mandate configuration deployed")
        return deployed

    def discard_pending(self) -> None:
        with self._lock:
            self.pending = None

    # ── Merchant trust / history ───────────────────────────────────

    def is_trusted(self, merchant_name: str) -> bool:
        return merchant_name in self._trusted

    def trust_merchant(self, merchant_name: str) -> None:
        with self._lock:
            self._trusted.add(merchant_name)

    @property
    def history(self) -> TransactionHistory:
        with self._lock:
            return self._history.snapshot()

    def pending_approvals(self) -> list[Proposal]:
        with self._lock:
            return sorted(self._awaiting.values(), key=lambda p: p.evaluated_at)

    def build_envelope(
        self,
        amount: float,
        merchant_name: str,
        category: str,
        payment_method: str,
        destination: Optional[str] = None,
        reasoning: str = "",
        risk_score: float = 0.0,
        timestamp: Optional[float] = None,
    ) -> GovernanceEnvelope:
        """Build an envelope with context signals computed from this session."""
        with self._lock:
            is_new = merchant_name not in self._trusted
            depth = len(self._history)
        return GovernanceEnvelope(
            transaction=Transaction(
                amount=amount,
                destination=destination or merchant_name,
                merchant_name=merchant_name,
                category=category,
                payment_method=payment_method,
                timestamp=time.time() if timestamp is None else timestamp,
            ),
            reasoning=reasoning,
            context=EnvelopeContext(
                is_new_merchant=is_new,
                history_depth=depth,
                risk_score=risk_score,
            ),
        )

    # ── Proposals ──────────────────────────────────────────────────

    def propose(self, envelope: GovernanceEnvelope, now: Optional[float] = None) -> Proposal:
        """Validate against the deployed mandates and act on the verdict."""
        tx = envelope.transaction
        now = time.time() if now is None else now
        with self._lock:
            result = GovernanceValidator.validate(
                envelope,
                self.deployed,
                self._history,
                now=now,
                enforce_daily_limit=self.enforce_daily_limit,
            )
            shadowed = shadow_violations(
                envelope,
                self.deployed,
                self._history,
                now=now,
                enforce_daily_limit=self.enforce_daily_limit,
            )
            proposal = Proposal(
                proposal_id=self._generate_proposal_id(),
                envelope=envelope,
                result=result,
                status=ProposalStatus.COMMITTED,
            )
            if result.verdict == Verdict.APPROVED:
                self._commit(envelope)
            elif result.verdict == Verdict.HITL_REQUIRED:
                proposal.status = ProposalStatus.AWAITING_APPROVAL
                self._awaiting[proposal.proposal_id] = proposal
            else:
                proposal.status = ProposalStatus.BLOCKED
                self._remember_block(proposal)

        for mandate_id in shadowed:
            self.audit.log(
                EventType.SHADOW_VIOLATION,
                mandate_id=mandate_id,
                proposal_id=proposal.proposal_id,
                amount=tx.amount,
                merchant=tx.merchant_name,
            )
        self.audit.log(
            _VERDICT_EVENTS[result.verdict],
            mandate_id=result.triggered_mandates[0] if result.triggered_mandates else None,
            proposal_id=proposal.proposal_id,
            amount=tx.amount,
            merchant=tx.merchant_name,
            success=result.allowed,
            reason=result.reason,
        )
        logger.info(
            "Proposal %s (%s %s): %s",
            proposal.proposal_id,
            tx.amount_display,
            tx.merchant_name,
            result.verdict.value,
        )
        return proposal

    def approve(self, proposal_id: str) -> Proposal:
        """Human override: commit a proposal that was escalated for approval."""
        with self._lock:
            proposal = self._take_awaiting(proposal_id)
            self._commit(proposal.envelope)
            proposal.status = ProposalStatus.COMMITTED
        tx = proposal.envelope.transaction
        self.audit.log(
            EventType.HUMAN_APPROVED,
            mandate_id=proposal.result.triggered_mandates[0],
            proposal_id=proposal_id,
            amount=tx.amount,
            merchant=tx.merchant_name,
        )
        logger.info("Proposal %s approved by human", proposal_id)
        return proposal

    def reject(self, proposal_id: str) -> Proposal:
        with self._lock:
            proposal = self._take_awaiting(proposal_id)
            proposal.status = ProposalStatus.REJECTED
        tx = proposal.envelope.transaction
        self.audit.log(
            EventType.HUMAN_REJECTED,
            mandate_id=proposal.result.triggered_mandates[0],
            proposal_id=proposal_id,
            amount=tx.amount,
            merchant=tx.merchant_name,
            success=False,
        )
        logger.info("Proposal %s rejected by human", proposal_id)
        return proposal

    def _take_awaiting(self, proposal_id: str) -> Proposal:
        if proposal_id in self._blocked_reasons:
            raise HardBlockError(proposal_id, self._blocked_reasons[proposal_id])
        proposal = self._awaiting.pop(proposal_id, None)
        if proposal is None:
            raise ProposalNotFoundError(f"No proposal awaiting approval: {proposal_id}")
        return proposal

    def _remember_block(self, proposal: Proposal) -> None:
        # caller holds self._lock
        self._blocked_reasons[proposal.proposal_id] = proposal.result.reason or ""
        while len(self._blocked_reasons) > self.max_blocked_ids:
            self._blocked_reasons.popitem(last=False)

    def _commit(self, envelope: GovernanceEnvelope) -> None:
        # caller holds self._lock
        self._history.append(envelope)
        self._trusted.add(envelope.transaction.merchant_name)

    def _generate_proposal_id(self) -> str:
        entropy = f"{time.time()}-{os.urandom(16).hex()}"
        return f"pr-{hashlib.sha256(entropy.encode()).hexdigest()[:12]}"


_VERDICT_EVENTS = {
    Verdict.APPROVED: EventType.AUTO_APPROVED,
    Verdict.HITL_REQUIRED: EventType.APPROVAL_REQUIRED,
    Verdict.BLOCKED: EventType.HARD_BLOCKED,
}
