"""
Audit trail for governance decisions.

Events are append-only and held in memory; callers that need durable
storage export them with ``to_json``.
"""

from __future__ import annotations

import json
import threading
import time
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Optional


class EventType(str, Enum):
    AUTO_APPROVED = "auto_approved"
    APPROVAL_REQUIRED = "approval_required"
    HARD_BLOCKED = "hard_blocked"
    HUMAN_APPROVED = "human_approved"
    HUMAN_REJECTED = "human_rejected"
    SHADOW_VIOLATION = "shadow_violation"
    MANDATES_STAGED = "mandates_staged"
    MANDATES_DEPLOYED = "mandates_deployed"


@dataclass
class AuditEvent:
    """A single audit trail entry."""

    event_type: str
    timestamp: float
    mandate_id: Optional[str] = None
    proposal_id: Optional[str] = None
    amount: Optional[float] = None
    merchant: Optional[str] = None
    success: bool = True
    reason: Optional[str] = None
    details: Optional[dict[str, Any]] = None

    def to_json(self) -> str:
        d = {k: v for k, v in asdict(self).items() if v is not None}
        return json.dumps(d, separators=(",", ":"))


class AuditTrail:
    """Append-only in-memory audit log."""

    def __init__(self):
        self._events: list[AuditEvent] = []
        self._lock = threading.Lock()

    def log(
        self,
        event_type: EventType,
        mandate_id: Optional[str] = None,
        proposal_id: Optional[str] = None,
        amount: Optional[float] = None,
        merchant: Optional[str] = None,
        success: bool = True,
        reason: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        event = AuditEvent(
            event_type=event_type.value,
            timestamp=time.time(),
            mandate_id=mandate_id,
            proposal_id=proposal_id,
            amount=amount,
            merchant=merchant,
            success=success,
            reason=reason,
            details=details,
        )
        with self._lock:
            self._events.append(event)
        return event

    def read_events(
        self,
        mandate_id: Optional[str] = None,
        event_type: Optional[EventType] = None,
        limit: int = 100,
    ) -> list[AuditEvent]:
        with self._lock:
            events = list(self._events)
        if mandate_id:
            events = [e for e in events if e.mandate_id == mandate_id]
        if event_type:
            events = [e for e in events if e.event_type == event_type.value]
        return events[-limit:]

    def summary(self, mandate_id: Optional[str] = None) -> dict:
        events = self.read_events(mandate_id=mandate_id, limit=10000)
        by_type: dict[str, int] = {}
        for e in events:
            by_type[e.event_type] = by_type.get(e.event_type, 0) + 1
        failures = [e for e in events if not e.success]
        return {
            "total_events": len(events),
            "by_type": by_type,
            "failures": len(failures),
            "last_event": events[-1].to_json() if events else None,
        }

    def to_json(self) -> str:
        """Export the whole trail as JSON lines."""
        with self._lock:
            events = list(self._events)
        return "\n".join(e.to_json() for e in events)

    def __len__(self) -> int:
        return len(self._events)
