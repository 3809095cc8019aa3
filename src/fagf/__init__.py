"""
FAGF — Foundational Agentic Governance Framework for financial services.

Deterministic mandate enforcement for autonomous agent payments:
Agent proposes → Mandates decide (approve / human approval / block) → Caller commits.
"""

__version__ = "0.1.0"

from .mandate import (
    EnforcementAction,
    FinancialMandates,
    GovernanceCategory,
    Mandate,
    Severity,
)
from .envelope import EnvelopeContext, GovernanceEnvelope, Transaction
from .history import TransactionHistory
from .profiles import DEFAULT_MAS_MANDATES, load_mandates
from .validator import GovernanceValidator, ValidationResult, Verdict, validate
from .session import GovernanceSession, Proposal, ProposalStatus
from .audit import AuditTrail, EventType

__all__ = [
    "Mandate", "FinancialMandates", "Severity", "EnforcementAction", "GovernanceCategory",
    "Transaction", "EnvelopeContext", "GovernanceEnvelope", "TransactionHistory",
    "DEFAULT_MAS_MANDATES", "load_mandates",
    "GovernanceValidator", "ValidationResult", "Verdict", "validate",
    "GovernanceSession", "Proposal", "ProposalStatus",
    "AuditTrail", "EventType",
]
