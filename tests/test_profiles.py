"""Tests for mandate profile loading."""

import json

import pytest

from fagf.errors import MandateConfigError
from fagf.profiles import (
    DEFAULT_MAS_MANDATES,
    MANDATES_PATH_ENV,
    load_mandates,
    resolve_mandates,
    save_mandates,
)


def test_partial_profile_overrides_named_slots(tmp_path):
    path = tmp_path / "profile.json"
    path.write_text(json.dumps({
        "mandates": {
            "confirmationThreshold": {
                **DEFAULT_MAS_MANDATES.confirmation_threshold.to_dict(),
                "parameter": 500,
            }
        }
    }))
    mandates = load_mandates(path)
    assert mandates.confirmation_threshold.parameter == 500.0
    assert mandates.allowed_methods == DEFAULT_MAS_MANDATES.allowed_methods


def test_save_then_load(tmp_path):
    path = save_mandates(DEFAULT_MAS_MANDATES, tmp_path / "out.json")
    assert load_mandates(path) == DEFAULT_MAS_MANDATES


def test_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(MandateConfigError, match="not valid JSON"):
        load_mandates(path)


def test_missing_file(tmp_path):
    with pytest.raises(MandateConfigError, match="Cannot read"):
        load_mandates(tmp_path / "absent.json")


def test_non_object_profile(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[]")
    with pytest.raises(MandateConfigError, match="JSON object"):
        load_mandates(path)


def test_resolve_uses_environment(tmp_path, monkeypatch):
    path = tmp_path / "env.json"
    path.write_text(json.dumps({
        "cooldown_seconds": {**DEFAULT_MAS_MANDATES.cooldown_seconds.to_dict(), "parameter": 5}
    }))
    monkeypatch.setenv(MANDATES_PATH_ENV, str(path))
    assert resolve_mandates().cooldown_seconds.parameter == 5.0


def test_resolve_defaults(monkeypatch):
    monkeypatch.delenv(MANDATES_PATH_ENV, raising=False)
    assert resolve_mandates() is DEFAULT_MAS_MANDATES
