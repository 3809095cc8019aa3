"""Tests for envelope serialization and storyline scenarios."""

from fagf.envelope import GovernanceEnvelope
from fagf.profiles import DEFAULT_MAS_MANDATES
from fagf.scenarios import SCENARIOS, get_scenario
from fagf.session import GovernanceSession
from fagf.validator import Verdict, validate


NOW = 1_700_000_000.0


def test_envelope_dict_round_trip():
    envelope = get_scenario("urgent-travel").envelope(timestamp=NOW)
    restored = GovernanceEnvelope.from_dict(envelope.to_dict())
    assert restored == envelope
    assert restored.transaction.amount_display == "$1250"


def test_from_dict_defaults_context():
    envelope = GovernanceEnvelope.from_dict({
        "transaction": {
            "amount": 3.5,
            "merchant_name": "Kopitiam",
            "category": "Food",
            "payment_method": "NETS",
            "timestamp": NOW,
        }
    })
    assert not envelope.context.is_new_merchant
    assert envelope.reasoning == ""
    assert validate(envelope, DEFAULT_MAS_MANDATES, [], now=NOW).allowed


def test_storyline_verdicts():
    verdicts = {
        s.key: validate(s.envelope(timestamp=NOW), DEFAULT_MAS_MANDATES, [], now=NOW)
        for s in SCENARIOS
    }
    # Corporate Card is not a verified local channel
    assert verdicts["cost-optimization"].triggered_mandates == ["fagf-auth-02"]
    assert verdicts["urgent-travel"].triggered_mandates == ["fagf-limit-01"]
    assert verdicts["yield-staking"].verdict == Verdict.BLOCKED
    assert get_scenario("missing") is None


def test_proposal_to_dict():
    session = GovernanceSession()
    envelope = get_scenario("yield-staking").envelope(timestamp=NOW)
    proposal = session.propose(envelope, now=NOW)
    data = proposal.to_dict()
    assert data["status"] == "blocked"
    assert data["result"]["verdict"] == "blocked"
    assert data["envelope"]["transaction"]["merchant_name"] == "Binance Exchange"
