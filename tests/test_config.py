"""Tests for golink/config.py — environment driven settings."""

import pytest

from golink import config
from golink.config import DEFAULT_PARTNER_TAG, Settings, load_settings

ENV_NAMES = [
    "ACCESS_KEY", "SECRET_KEY", "PARTNER_TAG", "PAAPI_HOST", "PAAPI_REGION", "PAAPI_MARKETPLACE",
    "PAAPI_TIMEOUT", "SCRAPE_TIMEOUT", "SCRAPE_RETRY", "SCRAPE_RETRY_DELAY", "PUBLIC_BASE_URL",
    "REDIRECT_DELAY", "GA_MEASUREMENT_ID", "GOLINK_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda: False)


def test_defaults():
    settings = load_settings()
    assert settings.partner_tag == DEFAULT_PARTNER_TAG
    assert settings.paapi_host == "webservices.amazon.com"
    assert settings.paapi_timeout == 10.0
    assert settings.scrape_timeout == 15.0
    assert settings.scrape_retry is True
    assert settings.ga_measurement_id is None
    assert not settings.credentials_available
    assert settings.short_links["amzn.to/468mKVM"] == "B09P21T2GC"


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("ACCESS_KEY", "AKID")
    monkeypatch.setenv("SECRET_KEY", "secret")
    monkeypatch.setenv("PARTNER_TAG", "mine-20")
    monkeypatch.setenv("SCRAPE_RETRY", "false")
    monkeypatch.setenv("SCRAPE_RETRY_DELAY", "0.5")
    monkeypatch.setenv("PUBLIC_BASE_URL", "https://links.example.com/")
    monkeypatch.setenv("GOLINK_LOG_LEVEL", "debug")

    settings = load_settings()
    assert settings.credentials_available
    assert settings.partner_tag == "mine-20"
    assert settings.scrape_retry is False
    assert settings.scrape_retry_delay == 0.5
    assert settings.public_base_url == "https://links.example.com"
    assert settings.log_level == "DEBUG"


def test_one_key_is_not_enough():
    assert not Settings(access_key="AKID").credentials_available
    assert not Settings(secret_key="secret").credentials_available


def test_settings_are_frozen():
    with pytest.raises(AttributeError):
        Settings().partner_tag = "other"


def test_empty_numeric_values_use_defaults(monkeypatch):
    for name in ("PAAPI_TIMEOUT", "SCRAPE_TIMEOUT", "SCRAPE_RETRY_DELAY", "REDIRECT_DELAY"):
        monkeypatch.setenv(name, "")

    settings = load_settings()
    assert settings.paapi_timeout == 10.0
    assert settings.scrape_timeout == 15.0
    assert settings.scrape_retry_delay == 1.0
    assert settings.redirect_delay == 3
