"""Tests for the in-memory audit trail."""

import json

from fagf.audit import AuditTrail, EventType


def test_log_and_filter():
    trail = AuditTrail()
    trail.log(EventType.AUTO_APPROVED, amount=15.0, merchant="AWS Cloud Services")
    trail.log(EventType.APPROVAL_REQUIRED, mandate_id="fagf-auth-01", success=False)
    trail.log(EventType.HUMAN_APPROVED, mandate_id="fagf-auth-01")

    assert len(trail) == 3
    assert [e.event_type for e in trail.read_events(mandate_id="fagf-auth-01")] == [
        "approval_required",
        "human_approved",
    ]
    assert len(trail.read_events(event_type=EventType.AUTO_APPROVED)) == 1
    assert len(trail.read_events(limit=1)) == 1


def test_summary_counts_failures():
    trail = AuditTrail()
    trail.log(EventType.HARD_BLOCKED, mandate_id="fagf-cat-01", success=False)
    trail.log(EventType.AUTO_APPROVED)
    summary = trail.summary()
    assert summary["total_events"] == 2
    assert summary["failures"] == 1
    assert json.loads(summary["last_event"])["event_type"] == "auto_approved"


def test_export_drops_empty_fields():
    trail = AuditTrail()
    trail.log(EventType.MANDATES_DEPLOYED)
    line = json.loads(trail.to_json())
    assert set(line) == {"event_type", "timestamp", "success"}
