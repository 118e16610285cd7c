"""Tracker configuration for patchtrack."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from patchtrack._constants import CONFIG_GROUP
from patchtrack.exceptions import PatchTrackConfigError


@dataclasses.dataclass(frozen=True)
class TrackerConfig:
    """Tracker configuration.

    Parameters
    ----------
    username : str
        Account the stored samples belong to. Used to namespace every
        key written to the store.
    config_group : str
        Root of the store namespaces.
    store_path : str or None
        Path of the JSON file backing :class:`patchtrack.state.store.JsonFileStore`.
        ``None`` keeps samples in memory only.
    mqtt_host : str or None
        Broker host for :class:`patchtrack.notify.MqttNotifier`. ``None``
        disables MQTT notifications.
    mqtt_port : int
        Broker port.
    mqtt_topic : str
        Topic harvest notifications are published to.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    """

    username: str
    config_group: str = CONFIG_GROUP
    store_path: str | None = None
    mqtt_host: str | None = None
    mqtt_port: int = 1883
    mqtt_topic: str = "patchtrack/notify"
    mqtt_keepalive: int = 60

    def __post_init__(self) -> None:
        if not self.username or not self.username.strip():
            raise PatchTrackConfigError("username must be non-empty")
        if not self.config_group:
            raise PatchTrackConfigError("config_group must be non-empty")

    def namespace(self, region_id: int | None = None) -> str:
        """Store namespace for the account, or for one of its regions.

        ``<group>.<username>`` holds account-wide flags (autoweed);
        ``<group>.<username>.<regionId>`` holds the samples of that region.
        """
        group = f"{self.config_group}.{self.username}"
        if region_id is None:
            return group
        return f"{group}.{region_id}"

    @classmethod
    def from_env(cls, **overrides: Any) -> TrackerConfig:
        """Create configuration from environment variables.

        Reads ``PATCHTRACK_USERNAME`` and optional ``PATCHTRACK_*``
        variables. Explicit keyword arguments override environment values.

        Raises
        ------
        PatchTrackConfigError
            If a numeric variable cannot be parsed or the username is missing.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "PATCHTRACK_USERNAME": "username",
            "PATCHTRACK_CONFIG_GROUP": "config_group",
            "PATCHTRACK_STORE_PATH": "store_path",
            "PATCHTRACK_MQTT_HOST": "mqtt_host",
            "PATCHTRACK_MQTT_TOPIC": "mqtt_topic",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # Numeric fields are handled separately
        for env_key, field_name in (
            ("PATCHTRACK_MQTT_PORT", "mqtt_port"),
            ("PATCHTRACK_MQTT_KEEPALIVE", "mqtt_keepalive"),
        ):
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = int(val)
            except ValueError as exc:
                raise PatchTrackConfigError(f"{env_key} must be an integer, got {val!r}") from exc

        config_kwargs.update(overrides)
        if "username" not in config_kwargs:
            raise PatchTrackConfigError("PATCHTRACK_USERNAME is not set")

        return cls(**config_kwargs)
