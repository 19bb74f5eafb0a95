import importlib

from config import get_settings_module

from src.attend.attend.core.enums import AccuracyPolicy
from src.attend.attend.main import eligibility_config_from


def test_settings_module_follows_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    assert get_settings_module() == "config.production"

    monkeypatch.setenv("APP_ENV", "TEST")
    assert get_settings_module() == "config.testing"

    monkeypatch.delenv("APP_ENV")
    assert get_settings_module() == "config.development"


def test_testing_settings_build_default_eligibility_config():
    settings = importlib.import_module("config.testing")
    config = eligibility_config_from(settings)

    assert config.early_open_minutes == 0
    assert config.late_close_minutes == 0
    assert config.accuracy_policy == AccuracyPolicy.IGNORE
    assert config.enforce_assignments is True


class _Settings:
    CHECKIN_EARLY_OPEN_MINUTES = "15"
    GEOFENCE_ACCURACY_POLICY = "widen"
    CHECKIN_ENFORCE_OVERRIDES = False


def test_eligibility_config_reads_overrides():
    config = eligibility_config_from(_Settings)

    assert config.early_open_minutes == 15
    assert config.accuracy_policy == AccuracyPolicy.WIDEN
    assert config.enforce_overrides is False
