"""Tests for environment driven settings."""
import pytest
from pydantic import SecretStr

from app.core.config import Settings


@pytest.fixture()
def clean_env(monkeypatch):
    for name in (
        "EMAIL_SERVICE",
        "SMTP_HOST",
        "SMTP_PORT",
        "EMAIL_USER",
        "EMAIL_PASSWORD",
        "SOEK_EMAIL",
        "DEV_ORIGIN",
        "ALLOWED_ORIGINS",
        "PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def _settings(**kwargs):
    return Settings(_env_file=None, **kwargs)


def test_defaults(clean_env):
    s = _settings()

    assert s.PORT == 3001
    assert s.EMAIL_SERVICE == "gmail"
    assert s.cors_origins == ["https://soek.ch", "https://www.soek.ch"]
    assert s.smtp_endpoint == ("smtp.gmail.com", 587)


def test_reads_environment(clean_env):
    clean_env.setenv("PORT", "8080")
    clean_env.setenv("EMAIL_SERVICE", "Outlook")
    clean_env.setenv("EMAIL_USER", "relay@soek.ch")
    clean_env.setenv("EMAIL_PASSWORD", "secret")
    clean_env.setenv("SOEK_EMAIL", "inbox@soek.ch")

    s = _settings()

    assert s.PORT == 8080
    assert s.smtp_endpoint == ("smtp-mail.outlook.com", 587)
    assert s.EMAIL_PASSWORD.get_secret_value() == "secret"
    assert "secret" not in repr(s)
    assert s.missing_mail_settings() == []


def test_explicit_smtp_host_overrides_selector(clean_env):
    s = _settings(EMAIL_SERVICE="gmail", SMTP_HOST="mail.example.ch", SMTP_PORT=2525)
    assert s.smtp_endpoint == ("mail.example.ch", 2525)


def test_unknown_service_without_host_is_incomplete(clean_env):
    s = _settings(
        EMAIL_SERVICE="carrier-pigeon",
        EMAIL_USER="relay@soek.ch",
        EMAIL_PASSWORD=SecretStr("secret"),
        SOEK_EMAIL="inbox@soek.ch",
    )
    assert s.smtp_endpoint is None
    assert s.missing_mail_settings() == ["SMTP_HOST"]


def test_missing_credentials_are_reported(clean_env):
    assert _settings().missing_mail_settings() == [
        "EMAIL_USER",
        "EMAIL_PASSWORD",
        "SOEK_EMAIL",
    ]


def test_dev_origin_and_extra_origins_join_allow_list(clean_env):
    clean_env.setenv("DEV_ORIGIN", "http://localhost:5500/")
    clean_env.setenv("ALLOWED_ORIGINS", '["https://staging.soek.ch", "https://soek.ch"]')

    s = _settings()

    assert s.cors_origins == [
        "https://soek.ch",
        "https://www.soek.ch",
        "http://localhost:5500",
        "https://staging.soek.ch",
    ]


def test_allowed_origins_accepts_comma_separated_list(clean_env):
    clean_env.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")

    assert _settings().ALLOWED_ORIGINS == ["https://a.example", "https://b.example"]
