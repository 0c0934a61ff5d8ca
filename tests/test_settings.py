"""Tests for settings loading."""

from pathlib import Path

from lambdabased.settings import get_settings, reload_settings


def test_defaults():
    settings = reload_settings()

    assert settings.aws_profile is None
    assert settings.aws_region is None
    assert settings.stack_name == "dev"
    assert settings.pulumi_state_dir == Path(".lambdabased/state")
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("LB_STACK_NAME", "prod")
    monkeypatch.setenv("LB_LOG_LEVEL", "DEBUG")

    settings = reload_settings()

    assert settings.stack_name == "prod"
    assert settings.log_level == "DEBUG"


def test_standard_pulumi_passphrase_variable(monkeypatch):
    monkeypatch.setenv("PULUMI_CONFIG_PASSPHRASE", "s3cret")

    assert reload_settings().pulumi_config_passphrase == "s3cret"


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
    first = get_settings()
    assert reload_settings() is not first
