"""Notification sinks.

The tracker calls ``notify(message)`` and forgets about it: sinks must not
raise into the tracker, and no delivery guarantee is assumed.
"""

from __future__ import annotations

import json
import logging
import secrets
from collections.abc import Callable
from typing import Any, Protocol, cast

import paho.mqtt.client as mqtt

from patchtrack.config import TrackerConfig

_logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, message: str) -> None: ...


class LoggingNotifier:
    """Write notifications to a logger at INFO level."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _logger

    def notify(self, message: str) -> None:
        self._logger.info("%s", message)


class CallbackNotifier:
    """Forward notifications to a callable, swallowing its failures."""

    def __init__(self, callback: Callable[[str], None]) -> None:
        self._callback = callback

    def notify(self, message: str) -> None:
        try:
            self._callback(message)
        except Exception:
            _logger.debug("Notification callback failed", exc_info=True)


def _default_client_factory(client_id: str) -> mqtt.Client:
    return mqtt.Client(
        callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
        client_id=client_id,
        protocol=mqtt.MQTTv5,
    )


class MqttNotifier:
    """Publish notifications to an MQTT topic with paho-mqtt.

    Messages are JSON objects ``{"message": <text>}`` published at QoS 0.
    Messages sent while the notifier is not running are dropped.
    """

    def __init__(
        self,
        *,
        host: str,
        topic: str,
        port: int = 1883,
        keepalive: int = 60,
        client_id: str | None = None,
        client_factory: Callable[[str], mqtt.Client] = _default_client_factory,
        logger: logging.Logger | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._topic = topic
        self._keepalive = keepalive
        self._client_id = client_id or f"patchtrack-{secrets.token_hex(4)}"
        self._client_factory = client_factory
        self._logger = logger or _logger
        self._client: mqtt.Client | None = None
        self._running = False

    @classmethod
    def from_config(cls, config: TrackerConfig, **kwargs: Any) -> MqttNotifier | None:
        """Build a notifier from *config*, or ``None`` when MQTT is not configured."""
        if not config.mqtt_host:
            return None
        return cls(
            host=config.mqtt_host,
            port=config.mqtt_port,
            topic=config.mqtt_topic,
            keepalive=config.mqtt_keepalive,
            **kwargs,
        )

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Connect to the broker and start the paho network loop."""
        self.stop()
        self._logger.debug(
            "MQTT notifier start requested host=%s port=%s topic=%s client_id=%s",
            self._host,
            self._port,
            self._topic,
            self._client_id,
        )
        client = self._client_factory(self._client_id)
        client.enable_logger(self._logger)

        def on_connect(
            _client: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if reason_code.value != 0:
                self._logger.warning("MQTT connect failed: %s", reason_code)
                return
            self._logger.debug("MQTT connected successfully reason=%s", reason_code)

        client.on_connect = on_connect
        client.connect(self._host, self._port, keepalive=self._keepalive)
        client.loop_start()

        self._client = client
        self._running = True

    def stop(self) -> None:
        client = self._client
        self._client = None
        was_running = self._running
        self._running = False

        if client is None:
            return
        try:
            if was_running:
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")

    def notify(self, message: str) -> None:
        client = self._client
        if client is None or not self._running:
            self._logger.debug("MQTT notifier not running; dropping %r", message)
            return
        payload = json.dumps({"message": message})
        try:
            info = client.publish(self._topic, payload, qos=0)
        except Exception:
            self._logger.debug("MQTT publish failed topic=%s", self._topic, exc_info=True)
            return
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            self._logger.debug("MQTT publish rejected topic=%s rc=%s", self._topic, info.rc)
