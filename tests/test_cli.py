"""Tests for the fagf command line."""

import json

from click.testing import CliRunner

from fagf.cli import main
from fagf.profiles import DEFAULT_MAS_MANDATES, MANDATES_PATH_ENV


def invoke(*args, env=None):
    runner = CliRunner()
    return runner.invoke(main, list(args), env={MANDATES_PATH_ENV: None, **(env or {})})


def test_evaluate_clean_pass():
    result = invoke(
        "evaluate", "--amount", "15", "--merchant", "AWS Cloud Services",
        "--category", "SaaS / API", "--method", "PayNow",
    )
    assert result.exit_code == 0
    assert json.loads(result.output)["verdict"] == "approved"


def test_evaluate_hitl_exit_code():
    result = invoke(
        "evaluate", "--amount", "1250", "--merchant", "Singapore Airlines",
        "--category", "Travel / Logistics", "--method", "PayNow",
    )
    assert result.exit_code == 2
    payload = json.loads(result.output)
    assert payload["triggered_mandates"] == ["fagf-limit-01"]
    assert payload["severity"] == "medium"


def test_evaluate_block_exit_code():
    result = invoke(
        "evaluate", "--amount", "1", "--merchant", "Binance Exchange",
        "--category", "Ungoverned Gambling", "--method", "PayNow", "--new-merchant",
    )
    assert result.exit_code == 3
    assert json.loads(result.output)["triggered_mandates"] == ["fagf-cat-01"]


def test_evaluate_rejects_negative_amount():
    result = invoke(
        "evaluate", "--amount=-5", "--merchant", "x", "--category", "y", "--method", "PayNow",
    )
    assert result.exit_code != 0
    assert "non-negative" in result.output


def test_config_file_is_applied(tmp_path):
    path = tmp_path / "profile.json"
    path.write_text(json.dumps({
        "allowedMethods": {
            **DEFAULT_MAS_MANDATES.allowed_methods.to_dict(),
            "parameter": ["Corporate Card"],
        }
    }))
    result = invoke(
        "evaluate", "--amount", "15", "--merchant", "AWS Cloud Services",
        "--category", "SaaS / API", "--method", "Corporate Card", "--config", str(path),
    )
    assert result.exit_code == 0


def test_bad_config_reports_error(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("nope")
    result = invoke("mandates", "--config", str(path))
    assert result.exit_code == 1
    assert "not valid JSON" in result.output


def test_mandates_export(tmp_path):
    out = tmp_path / "mandates.json"
    result = invoke("mandates", "--output", str(out))
    assert result.exit_code == 0
    data = json.loads(out.read_text())
    assert data["blocked_categories"]["id"] == "fagf-cat-01"


def test_scenarios():
    result = invoke("scenarios")
    assert result.exit_code == 0
    assert "BLOCKED" in result.output
    assert "HITL_REQUIRED" in result.output
    assert "fagf-cat-01" in result.output


def test_unknown_scenario():
    result = invoke("scenarios", "nope")
    assert result.exit_code != 0
    assert "Unknown scenario" in result.output
