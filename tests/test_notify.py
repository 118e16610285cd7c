from __future__ import annotations

import json
import logging
from types import SimpleNamespace
from typing import Any

import paho.mqtt.client as mqtt
import pytest

from patchtrack.config import TrackerConfig
from patchtrack.notify import CallbackNotifier, LoggingNotifier, MqttNotifier


class _FakeMqttClient:
    def __init__(self, client_id: str, *, rc: int = mqtt.MQTT_ERR_SUCCESS) -> None:
        self.client_id = client_id
        self.rc = rc
        self.connected_to: tuple[str, int, int] | None = None
        self.published: list[tuple[str, str, int]] = []
        self.loop_running = False
        self.disconnected = False
        self.on_connect: Any = None

    def enable_logger(self, _logger: logging.Logger) -> None:
        pass

    def connect(self, host: str, port: int, keepalive: int) -> None:
        self.connected_to = (host, port, keepalive)

    def loop_start(self) -> None:
        self.loop_running = True

    def loop_stop(self) -> None:
        self.loop_running = False

    def disconnect(self) -> None:
        self.disconnected = True

    def publish(self, topic: str, payload: str, qos: int = 0) -> SimpleNamespace:
        self.published.append((topic, payload, qos))
        return SimpleNamespace(rc=self.rc)


def _notifier(**kwargs: Any) -> tuple[MqttNotifier, list[_FakeMqttClient]]:
    clients: list[_FakeMqttClient] = []

    def factory(client_id: str) -> Any:
        client = _FakeMqttClient(client_id, **kwargs)
        clients.append(client)
        return client

    notifier = MqttNotifier(host="broker.local", topic="farm/ready", client_id="test", client_factory=factory)
    return notifier, clients


class TestMqttNotifier:
    def test_publishes_json_message(self) -> None:
        notifier, clients = _notifier()
        notifier.start()
        notifier.notify("1 Potato patch is ready for harvest")

        client = clients[0]
        assert client.client_id == "test"
        assert client.connected_to == ("broker.local", 1883, 60)
        topic, payload, qos = client.published[0]
        assert topic == "farm/ready"
        assert json.loads(payload) == {"message": "1 Potato patch is ready for harvest"}
        assert qos == 0

    def test_drops_messages_when_not_running(self) -> None:
        notifier, clients = _notifier()
        notifier.notify("dropped")
        assert clients == []

        notifier.start()
        notifier.stop()
        notifier.notify("dropped too")
        assert clients[0].published == []
        assert clients[0].disconnected
        assert not clients[0].loop_running
        assert not notifier.is_running

    def test_rejected_publish_does_not_raise(self, caplog: pytest.LogCaptureFixture) -> None:
        notifier, _clients = _notifier(rc=mqtt.MQTT_ERR_NO_CONN)
        notifier.start()
        with caplog.at_level(logging.DEBUG, logger="patchtrack.notify"):
            notifier.notify("lost")
        assert "publish rejected" in caplog.text

    def test_from_config(self) -> None:
        assert MqttNotifier.from_config(TrackerConfig(username="farmer")) is None
        notifier = MqttNotifier.from_config(TrackerConfig(username="farmer", mqtt_host="broker.local"))
        assert notifier is not None
        assert not notifier.is_running


def test_logging_notifier(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="patchtrack.notify"):
        LoggingNotifier().notify("2 Onion patches are ready for harvest")
    assert "2 Onion patches are ready for harvest" in caplog.text


def test_callback_notifier_swallows_failures() -> None:
    received: list[str] = []

    def callback(message: str) -> None:
        received.append(message)
        raise RuntimeError("sink down")

    CallbackNotifier(callback).notify("hello")
    assert received == ["hello"]
