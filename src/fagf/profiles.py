"""
Reference mandate profiles and JSON profile loading.

Profiles on disk may be partial: slots they name override the default
MAS profile, the rest are inherited.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from .errors import MandateConfigError
from .mandate import (
    EnforcementAction,
    FinancialMandates,
    GovernanceCategory,
    Mandate,
    Severity,
)


MANDATES_PATH_ENV = "FAGF_MANDATES_PATH"


# Singapore-aligned (MAS) reference profile.
DEFAULT_MAS_MANDATES = FinancialMandates(
    new_merchant_auth=Mandate(
        id="fagf-auth-01",
        category=GovernanceCategory.AUTHORIZATION,
        parameter=True,
        enforcement=EnforcementAction.APPROVAL_REQUIRED,
        severity=Severity.HIGH,
        risk_disclosure="Prevents Phishing & Merchant Impersonation",
        description="Requires manual verification for merchants not in the agent's historical trust list.",
    ),
    confirmation_threshold=Mandate(
        id="fagf-limit-01",
        category=GovernanceCategory.SPENDING_LIMIT,
        parameter=50.0,
        enforcement=EnforcementAction.APPROVAL_REQUIRED,
        severity=Severity.MEDIUM,
        risk_disclosure="Mitigates Large Unauthorized Outbound Transfers",
        description="Autonomous payments above S$50 require explicit user approval.",
    ),
    daily_aggregate_limit=Mandate(
        id="fagf-limit-02",
        category=GovernanceCategory.SPENDING_LIMIT,
        parameter=200.0,
        enforcement=EnforcementAction.BLOCK,
        severity=Severity.HIGH,
        risk_disclosure="Limits Total Daily Exposure for Autonomous Agents",
        description="Strict block if the total daily spending exceeds S$200.",
    ),
    rate_limit_per_hour=Mandate(
        id="fagf-velocity-01",
        category=GovernanceCategory.VELOCITY,
        parameter=5,
        enforcement=EnforcementAction.APPROVAL_REQUIRED,
        severity=Severity.MEDIUM,
        risk_disclosure="Prevents API Runaway / Autonomous Fail-loops",
        description="Max 5 autonomous transactions per hour.",
    ),
    cooldown_seconds=Mandate(
        id="fagf-velocity-02",
        category=GovernanceCategory.VELOCITY,
        parameter=60.0,
        enforcement=EnforcementAction.APPROVAL_REQUIRED,
        severity=Severity.LOW,
        risk_disclosure="Ensures Observation Period Between Actions",
        description="Minimum 60-second delay between consecutive autonomous executions.",
    ),
    blocked_categories=Mandate(
        id="fagf-cat-01",
        category=GovernanceCategory.CATEGORY_RESTRICTION,
        parameter=("Ungoverned Gambling", "Unregulated Crypto", "Offshore Investment", "Job Scams"),
        enforcement=EnforcementAction.BLOCK,
        severity=Severity.HIGH,
        risk_disclosure="Regulatory Compliance & High-Risk Mitigation",
        description="Strictly blocks transactions to restricted or illegal categories.",
    ),
    allowed_methods=Mandate(
        id="fagf-auth-02",
        category=GovernanceCategory.AUTHORIZATION,
        parameter=("PayNow", "NETS", "FAST", "DBS PayLah!"),
        enforcement=EnforcementAction.APPROVAL_REQUIRED,
        severity=Severity.MEDIUM,
        risk_disclosure="Restricts Payment to Verified Local Channels",
        description="Only allows autonomous usage of verified Singapore payment channels.",
    ),
)


def load_mandates(path: Path, base: FinancialMandates = DEFAULT_MAS_MANDATES) -> FinancialMandates:
    """Load a JSON mandate profile, filling unnamed slots from ``base``."""
    try:
        with open(path) as f:
            raw = json.load(f)
    except OSError as exc:
        raise MandateConfigError(f"Cannot read mandate profile {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise MandateConfigError(f"Mandate profile {path} is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise MandateConfigError(f"Mandate profile {path} must be a JSON object")
    # Exported profiles may wrap slots under a "mandates" key
    if "mandates" in raw and isinstance(raw["mandates"], dict):
        raw = raw["mandates"]
    return FinancialMandates.from_dict(raw, base=base)


def save_mandates(mandates: FinancialMandates, path: Path) -> Path:
    with open(path, "w") as f:
        json.dump(mandates.to_dict(), f, indent=2)
    return path


def resolve_mandates(path: Optional[Path] = None) -> FinancialMandates:
    """Pick the active profile: explicit path, then $FAGF_MANDATES_PATH, then the default."""
    if path is None:
        override = os.getenv(MANDATES_PATH_ENV)
        path = Path(override) if override else None
    if path is None:
        return DEFAULT_MAS_MANDATES
    return load_mandates(path)
