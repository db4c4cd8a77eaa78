"""Tests for settings loading and command-line flag parsing."""

from __future__ import annotations

import pytest

from ratgdo_exporter.config import Settings
from ratgdo_exporter.main import parse_args


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("JSON_ADDRESS", "PORT", "LOCATION", "HOST", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    config = Settings(_env_file=None)  # type: ignore[call-arg]

    assert config.JSON_ADDRESS == "http://ratgdo/status.json"
    assert config.PORT == "8080"
    assert config.LOCATION == "home"


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOCATION", "barn")
    monkeypatch.setenv("JSON_ADDRESS", "http://10.0.0.5/status.json")

    config = Settings(_env_file=None)  # type: ignore[call-arg]

    assert config.LOCATION == "barn"
    assert config.JSON_ADDRESS == "http://10.0.0.5/status.json"


def test_flags_override_settings() -> None:
    config = parse_args([
        "--json-address", "http://door.local/status.json",
        "--port", "9100",
        "--location", "garage",
        "--log-level", "debug",
    ])

    assert config.JSON_ADDRESS == "http://door.local/status.json"
    assert config.PORT == "9100"
    assert config.LOCATION == "garage"
    assert config.LOG_LEVEL == "DEBUG"


def test_invalid_port_is_rejected() -> None:
    with pytest.raises(SystemExit):
        parse_args(["--port", "eighty"])
