import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

from app.core.config import settings
from app.main import create_app

from tests.fakes import FakeTransport

# -----------------------------------------------------------------------------
# Settings Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _mail_settings(monkeypatch):
    monkeypatch.setattr(settings, "EMAIL_SERVICE", "gmail", raising=False)
    monkeypatch.setattr(settings, "SMTP_HOST", None, raising=False)
    monkeypatch.setattr(settings, "SMTP_PORT", None, raising=False)
    monkeypatch.setattr(settings, "EMAIL_USER", "relay@soek.ch", raising=False)
    monkeypatch.setattr(settings, "EMAIL_PASSWORD", SecretStr("app-password"), raising=False)
    monkeypatch.setattr(settings, "SOEK_EMAIL", "inbox@soek.ch", raising=False)
    monkeypatch.setattr(settings, "DEV_ORIGIN", "http://localhost:5500", raising=False)
    monkeypatch.setattr(settings, "ALLOWED_ORIGINS", [], raising=False)
    monkeypatch.setattr(settings, "SUBJECT_PREFIX", "[Sito SOEK]", raising=False)
    monkeypatch.setattr(settings, "MAIL_TIMEOUT_SECONDS", 15.0, raising=False)
    monkeypatch.setattr(settings, "DEBUG", False, raising=False)


# -----------------------------------------------------------------------------
# Client Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(scope="function")
def fake_transport():
    return FakeTransport()


@pytest.fixture(scope="function")
def client(fake_transport):
    """
    TestClient over an app wired to the fake transport.
    Using 'with' context manager to trigger lifespan events (startup/shutdown)
    """
    app = create_app(transport=fake_transport)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def valid_payload():
    return {
        "name": "Alice",
        "email": "alice@example.com",
        "inquiry_reason": "booking",
        "message": "Hi",
    }
