"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from fixtory import FactorySettings, get_settings


def test_library_defaults():
    settings = FactorySettings(_env_file=None)

    assert settings.cycle_sequences is False
    assert settings.sequence_seed == 0
    assert settings.token_length == 12
    assert settings.admin_identity == "fixture-admin"
    assert settings.defaults_path is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("FIXTORY_CYCLE_SEQUENCES", "true")
    monkeypatch.setenv("FIXTORY_SEQUENCE_SEED", "100")
    monkeypatch.setenv("FIXTORY_TOKEN_LENGTH", "8")
    monkeypatch.setenv("FIXTORY_ADMIN_IDENTITY", "ops")
    monkeypatch.setenv("FIXTORY_DEFAULTS_PATH", "defaults.yaml")

    settings = FactorySettings(_env_file=None)

    assert settings.cycle_sequences is True
    assert settings.sequence_seed == 100
    assert settings.token_length == 8
    assert settings.admin_identity == "ops"
    assert settings.defaults_path == "defaults.yaml"


def test_env_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("FIXTORY_TOKEN_LENGTH=6\nUNRELATED=1\n")

    assert FactorySettings(_env_file=env_file).token_length == 6


@pytest.mark.parametrize("field, value", [("token_length", 0), ("sequence_seed", -1)])
def test_invalid_values(field, value):
    with pytest.raises(ValidationError):
        FactorySettings(_env_file=None, **{field: value})


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
