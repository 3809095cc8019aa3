"""
Mandate definitions and the seven-slot financial mandate configuration.

A Mandate is one governance rule: an identifier, a tunable parameter and
the risk metadata surfaced alongside any verdict it produces.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace as dc_replace
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from .errors import DuplicateMandateIdError, MandateConfigError, UnknownMandateSlotError


T = TypeVar("T")


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EnforcementAction(str, Enum):
    BLOCK = "block"
    APPROVAL_REQUIRED = "approval_required"
    SHADOW_LOG = "shadow_log"


class GovernanceCategory(str, Enum):
    AUTHORIZATION = "authorization"
    SPENDING_LIMIT = "spending_limit"
    CATEGORY_RESTRICTION = "category_restriction"
    VELOCITY = "velocity"


@dataclass(frozen=True)
class Mandate(Generic[T]):
    """A single governance rule."""

    id: str
    category: GovernanceCategory
    parameter: T
    enforcement: EnforcementAction
    severity: Severity
    risk_disclosure: str
    description: str

    def with_parameter(self, value: T) -> Mandate[T]:
        return dc_replace(self, parameter=value)

    def to_dict(self) -> dict:
        parameter = self.parameter
        if isinstance(parameter, tuple):
            parameter = list(parameter)
        return {
            "id": self.id,
            "category": self.category.value,
            "parameter": parameter,
            "enforcement": self.enforcement.value,
            "severity": self.severity.value,
            "risk_disclosure": self.risk_disclosure,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, d: dict) -> Mandate:
        try:
            return cls(
                id=str(d["id"]),
                category=GovernanceCategory(d["category"]),
                parameter=d["parameter"],
                enforcement=EnforcementAction(d["enforcement"]),
                severity=Severity(d["severity"]),
                risk_disclosure=d.get("risk_disclosure", d.get("riskDisclosure", "")),
                description=d.get("description", ""),
            )
        except (KeyError, ValueError) as exc:
            raise MandateConfigError(f"Invalid mandate definition: {exc}") from exc


# Slot name -> camelCase name used by exported profiles.
SLOT_ALIASES = {
    "new_merchant_auth": "newMerchantAuth",
    "confirmation_threshold": "confirmationThreshold",
    "daily_aggregate_limit": "dailyAggregateLimit",
    "rate_limit_per_hour": "rateLimitPerHour",
    "cooldown_seconds": "cooldownSeconds",
    "blocked_categories": "blockedCategories",
    "allowed_methods": "allowedMethods",
}
_ALIAS_TO_SLOT = {v: k for k, v in SLOT_ALIASES.items()}


def _coerce_parameter(slot: str, value: Any) -> Any:
    """Pin a raw parameter to the type its slot requires."""
    try:
        if slot == "new_merchant_auth":
            if not isinstance(value, bool):
                raise TypeError("expected a boolean")
            return value
        if slot == "rate_limit_per_hour":
            if isinstance(value, bool):
                raise TypeError("expected a number")
            return int(value)
        if slot in ("confirmation_threshold", "daily_aggregate_limit", "cooldown_seconds"):
            if isinstance(value, bool):
                raise TypeError("expected a number")
            return float(value)
        if isinstance(value, str) or not hasattr(value, "__iter__"):
            raise TypeError("expected a list of strings")
        return tuple(str(item) for item in value)
    except (TypeError, ValueError) as exc:
        raise MandateConfigError(f"Invalid parameter for {slot}: {exc}") from exc


@dataclass(frozen=True)
class FinancialMandates:
    """The full set of mandates in force for one validation call."""

    new_merchant_auth: Mandate[bool]
    confirmation_threshold: Mandate[float]
    daily_aggregate_limit: Mandate[float]
    rate_limit_per_hour: Mandate[int]
    cooldown_seconds: Mandate[float]
    blocked_categories: Mandate[tuple[str, ...]]
    allowed_methods: Mandate[tuple[str, ...]]

    @staticmethod
    def slots() -> list[str]:
        return [f.name for f in fields(FinancialMandates)]

    def all(self) -> list[Mandate]:
        return [getattr(self, slot) for slot in self.slots()]

    def ids(self) -> list[str]:
        return [m.id for m in self.all()]

    def get(self, mandate_id: str) -> Optional[Mandate]:
        for mandate in self.all():
            if mandate.id == mandate_id:
                return mandate
        return None

    def check_unique_ids(self) -> None:
        seen: set[str] = set()
        for mandate_id in self.ids():
            if mandate_id in seen:
                raise DuplicateMandateIdError(mandate_id)
            seen.add(mandate_id)

    def replace(self, slot: str, mandate: Mandate) -> FinancialMandates:
        slot = _resolve_slot(slot)
        mandate = mandate.with_parameter(_coerce_parameter(slot, mandate.parameter))
        return dc_replace(self, **{slot: mandate})

    def with_parameter(self, slot: str, value: Any) -> FinancialMandates:
        slot = _resolve_slot(slot)
        return self.replace(slot, getattr(self, slot).with_parameter(value))

    def to_dict(self) -> dict:
        return {slot: getattr(self, slot).to_dict() for slot in self.slots()}

    @classmethod
    def from_dict(cls, d: dict, base: Optional[FinancialMandates] = None) -> FinancialMandates:
        """Build a configuration from slot definitions.

        Slots may use snake_case or the camelCase names of exported
        profiles. With ``base`` given, missing slots are taken from it;
        otherwise all seven must be present.
        """
        resolved: dict[str, Mandate] = {}
        for key, raw in d.items():
            slot = _resolve_slot(key)
            if not isinstance(raw, dict):
                raise MandateConfigError(f"Mandate slot {key} must be an object")
            mandate = Mandate.from_dict(raw)
            resolved[slot] = mandate.with_parameter(_coerce_parameter(slot, mandate.parameter))

        missing = [slot for slot in cls.slots() if slot not in resolved]
        if missing and base is None:
            raise MandateConfigError(f"Missing mandate slots: {', '.join(missing)}")
        for slot in missing:
            resolved[slot] = getattr(base, slot)

        mandates = cls(**resolved)
        mandates.check_unique_ids()
        return mandates


def _resolve_slot(name: str) -> str:
    if name in SLOT_ALIASES:
        return name
    if name in _ALIAS_TO_SLOT:
        return _ALIAS_TO_SLOT[name]
    raise UnknownMandateSlotError(name)
