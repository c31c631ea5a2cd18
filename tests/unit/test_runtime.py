import pytest

from surecrm.utils.runtime import allowed_dev_hosts, dev_identity, dev_mode_active


def test_dev_mode_off_by_default(monkeypatch):
    monkeypatch.delenv("DEV_MODE", raising=False)
    assert dev_mode_active() is False


def test_dev_mode_allowed_on_localhost(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "http://localhost:3000")
    assert dev_mode_active() is True
    assert dev_identity() == ("Development Agent", "dev@localhost")


def test_dev_mode_refused_on_remote_host(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "https://crm.example.com")
    with pytest.raises(RuntimeError, match="not permitted"):
        dev_mode_active()


def test_extra_allowed_hosts(monkeypatch):
    monkeypatch.setenv("DEV_MODE_ALLOWED_HOSTS", "Dev.Internal, ")
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "dev.internal:8000")
    assert "dev.internal" in allowed_dev_hosts()
    assert dev_mode_active() is True
