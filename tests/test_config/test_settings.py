"""Tests for process settings."""

from pathlib import Path

import pytest

from ssh_exporter.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate tests from the caller's environment and home directory."""
    for key in (
        "SSH_EXPORTER_MAX_CONCURRENCY",
        "SSH_EXPORTER_CONNECT_TIMEOUT",
        "SSH_EXPORTER_KNOWN_HOSTS",
        "SSH_EXPORTER_LOG_LEVEL",
        "SSH_EXPORTER_LOG_COLORS",
        "SSH_EXPORTER_SLOW_THRESHOLD_MS",
        "SSH_EXPORTER_INCLUDE_TRACEBACK",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))


def test_defaults() -> None:
    """Settings use documented defaults when env is empty."""
    settings = Settings.from_env()

    assert settings.config_path == Path("config.yml")
    assert settings.http_port == 9428
    assert settings.max_concurrency == 100
    assert settings.connect_timeout == 10
    assert settings.log_level == "INFO"
    assert settings.log_colors is True
    assert settings.include_traceback is False


def test_flags_are_applied() -> None:
    """Flag values passed in are kept."""
    settings = Settings.from_env(config_path="/etc/probe.yml", http_port=9500)

    assert settings.config_path == Path("/etc/probe.yml")
    assert settings.http_port == 9500


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Environment variables override defaults."""
    monkeypatch.setenv("SSH_EXPORTER_MAX_CONCURRENCY", "8")
    monkeypatch.setenv("SSH_EXPORTER_LOG_LEVEL", "debug")
    monkeypatch.setenv("SSH_EXPORTER_INCLUDE_TRACEBACK", "yes")

    settings = Settings.from_env()

    assert settings.max_concurrency == 8
    assert settings.log_level == "DEBUG"
    assert settings.include_traceback is True


def test_invalid_int_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    """Non-integer values use the default."""
    monkeypatch.setenv("SSH_EXPORTER_CONNECT_TIMEOUT", "fast")

    assert Settings.from_env().connect_timeout == 10


def test_non_positive_concurrency_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pool size must be positive."""
    monkeypatch.setenv("SSH_EXPORTER_MAX_CONCURRENCY", "0")

    assert Settings.from_env().max_concurrency == 100


def test_known_hosts_none_disables(monkeypatch: pytest.MonkeyPatch) -> None:
    """The special value 'none' disables verification."""
    monkeypatch.setenv("SSH_EXPORTER_KNOWN_HOSTS", "none")

    assert Settings.from_env().known_hosts is None


def test_known_hosts_missing_explicit_path_raises(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """An explicitly configured but missing file is an error."""
    monkeypatch.setenv("SSH_EXPORTER_KNOWN_HOSTS", str(tmp_path / "nope"))

    with pytest.raises(FileNotFoundError):
        Settings.from_env()


def test_known_hosts_explicit_path(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """An existing explicit file is used."""
    known = tmp_path / "known_hosts"
    known.write_text("")
    monkeypatch.setenv("SSH_EXPORTER_KNOWN_HOSTS", str(known))

    assert Settings.from_env().known_hosts == str(known)


def test_known_hosts_default_location(tmp_path: Path) -> None:
    """~/.ssh/known_hosts is used when present, otherwise verification is off."""
    assert Settings.from_env().known_hosts is None

    ssh_dir = tmp_path / ".ssh"
    ssh_dir.mkdir()
    (ssh_dir / "known_hosts").write_text("")

    assert Settings.from_env().known_hosts == str(ssh_dir / "known_hosts")
