from __future__ import annotations

import pytest

from patchtrack.config import TrackerConfig
from patchtrack.exceptions import PatchTrackConfigError


def test_namespaces() -> None:
    config = TrackerConfig(username="farmer")
    assert config.namespace() == "timetracking.farmer"
    assert config.namespace(12083) == "timetracking.farmer.12083"


def test_empty_username_is_rejected() -> None:
    with pytest.raises(PatchTrackConfigError):
        TrackerConfig(username="  ")


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PATCHTRACK_USERNAME", "farmer")
    monkeypatch.setenv("PATCHTRACK_STORE_PATH", "/tmp/state.json")
    monkeypatch.setenv("PATCHTRACK_MQTT_HOST", "broker.local")
    monkeypatch.setenv("PATCHTRACK_MQTT_PORT", "8883")

    config = TrackerConfig.from_env()
    assert config.username == "farmer"
    assert config.store_path == "/tmp/state.json"
    assert config.mqtt_host == "broker.local"
    assert config.mqtt_port == 8883
    assert config.mqtt_topic == "patchtrack/notify"


def test_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PATCHTRACK_USERNAME", "farmer")
    monkeypatch.setenv("PATCHTRACK_MQTT_PORT", "not-a-number")

    config = TrackerConfig.from_env(username="other", mqtt_port=1884)
    assert config.username == "other"
    assert config.mqtt_port == 1884


def test_bad_number_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PATCHTRACK_USERNAME", "farmer")
    monkeypatch.setenv("PATCHTRACK_MQTT_KEEPALIVE", "soon")
    with pytest.raises(PatchTrackConfigError, match="PATCHTRACK_MQTT_KEEPALIVE"):
        TrackerConfig.from_env()


def test_missing_username(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PATCHTRACK_USERNAME", raising=False)
    with pytest.raises(PatchTrackConfigError):
        TrackerConfig.from_env()
