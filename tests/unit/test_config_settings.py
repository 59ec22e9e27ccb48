import pytest

from kbremote.config import settings
from kbremote.config.settings import ClientConfig, load_settings


@pytest.fixture
def run_secrets(monkeypatch, tmp_path):
    """Point /run/secrets at an empty temp directory."""
    real_path = settings.Path

    def fake_path(target):
        if str(target) == "/run/secrets":
            return tmp_path
        return real_path(target)

    monkeypatch.setattr(settings, "Path", fake_path)
    for var in (
        "KBREMOTE_API_KEY",
        "KBREMOTE_API_SECRET",
        "KBREMOTE_URL",
        "KBREMOTE_DEBUG",
        "KBREMOTE_MAX_RETRIES",
        "KBREMOTE_RETRY_BACKOFF",
    ):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


def test_load_settings_from_environment(run_secrets, monkeypatch):
    monkeypatch.setenv("KBREMOTE_API_KEY", "env-key")
    monkeypatch.setenv("KBREMOTE_API_SECRET", "env-secret")

    cfg = load_settings()

    assert cfg == ClientConfig(api_key="env-key", api_secret="env-secret")
    assert cfg.url == "https://www.kbremote.net"
    assert cfg.debug is False
    assert cfg.max_retries == 5
    assert cfg.retry_backoff == 1.0


def test_run_secrets_take_priority(run_secrets, monkeypatch):
    (run_secrets / "kbremote_api_key").write_text("file-key\n")
    (run_secrets / "kbremote_api_secret").write_text("file-secret")
    monkeypatch.setenv("KBREMOTE_API_KEY", "env-key")
    monkeypatch.setenv("KBREMOTE_API_SECRET", "env-secret")

    cfg = load_settings()

    assert cfg.api_key == "file-key"
    assert cfg.api_secret == "file-secret"


def test_empty_secret_file_falls_back_to_env(run_secrets, monkeypatch):
    (run_secrets / "kbremote_api_key").write_text("  ")
    monkeypatch.setenv("KBREMOTE_API_KEY", "env-key")
    monkeypatch.setenv("KBREMOTE_API_SECRET", "env-secret")
    assert load_settings().api_key == "env-key"


def test_optional_settings(run_secrets, monkeypatch):
    monkeypatch.setenv("KBREMOTE_API_KEY", "k")
    monkeypatch.setenv("KBREMOTE_API_SECRET", "s")
    monkeypatch.setenv("KBREMOTE_URL", "https://kb.example")
    monkeypatch.setenv("KBREMOTE_DEBUG", "TRUE")
    monkeypatch.setenv("KBREMOTE_MAX_RETRIES", "2")
    monkeypatch.setenv("KBREMOTE_RETRY_BACKOFF", "0.5")

    cfg = load_settings()

    assert cfg.url == "https://kb.example"
    assert cfg.debug is True
    assert cfg.max_retries == 2
    assert cfg.retry_backoff == 0.5


@pytest.mark.parametrize("missing", ["KBREMOTE_API_KEY", "KBREMOTE_API_SECRET"])
def test_missing_credentials_raise(run_secrets, monkeypatch, missing):
    monkeypatch.setenv("KBREMOTE_API_KEY", "k")
    monkeypatch.setenv("KBREMOTE_API_SECRET", "s")
    monkeypatch.delenv(missing)
    with pytest.raises(RuntimeError, match=missing):
        load_settings()


@pytest.mark.parametrize("value", ["many", "-1"])
def test_invalid_retry_count_raises(run_secrets, monkeypatch, value):
    monkeypatch.setenv("KBREMOTE_API_KEY", "k")
    monkeypatch.setenv("KBREMOTE_API_SECRET", "s")
    monkeypatch.setenv("KBREMOTE_MAX_RETRIES", value)
    with pytest.raises(RuntimeError, match="KBREMOTE_MAX_RETRIES"):
        load_settings()
