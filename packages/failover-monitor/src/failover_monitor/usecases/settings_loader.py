"""Settings loader: environment variables and optional YAML file to MonitorSettings."""

from __future__ import annotations

import os
import socket
from typing import Any, Callable, Mapping

import yaml

from failover_monitor.domain.exceptions import MonitorConfigError
from failover_monitor.domain.settings import MonitorSettings

# Defaults of the deployment the monitor ships with
_DEFAULTS: dict[str, Any] = {
    "primary_url": "http://agents-primary:8080",
    "secondary_url": "http://agents-secondary:8080",
    "store_url": "redis://redis:6379",
}


def _optional_int(value: str) -> int | None:
    return int(value) if value.strip() else None


# Environment variable -> (domain field, parser)
_ENV_FIELDS: dict[str, tuple[str, Callable[[str], Any]]] = {
    "PRIMARY_URL": ("primary_url", str),
    "SECONDARY_URL": ("secondary_url", str),
    "REDIS_URL": ("store_url", str),
    "FAILOVER_TIMEOUT": ("failover_timeout", float),
    "CHECK_INTERVAL": ("poll_interval", float),
    "MAX_CONSECUTIVE_FAILURES": ("max_consecutive_failures", int),
    "RESTORE_GRACE_PERIOD": ("restore_grace_period", float),
    "PROBE_TIMEOUT": ("probe_timeout", float),
    "DIRECTIVE_TIMEOUT": ("directive_timeout", float),
    "DIRECTIVE_RETRIES": ("directive_retries", int),
    "HEALTH_PATH": ("health_path", str),
    "CLUSTER_PATH": ("cluster_path", str),
    "STORE_KEY_PREFIX": ("store_key_prefix", str),
    "LEASE_TTL": ("lease_ttl", float),
    "MONITOR_ID": ("monitor_id", str),
    "METRICS_PORT": ("metrics_port", _optional_int),
}

_FIELD_PARSERS: dict[str, Callable[[str], Any]] = {
    field: parser for field, parser in _ENV_FIELDS.values()
}


def parse_config_yaml(yaml_str: str) -> dict[str, Any]:
    """Parse a YAML config file into MonitorSettings keyword arguments.

    Keys are the snake_case MonitorSettings field names. A null value leaves
    the setting at its default.

    Args:
        yaml_str: YAML document with a top-level mapping.

    Returns:
        Mapping of field name to value.

    Raises:
        MonitorConfigError: If the YAML is invalid, not a mapping, or has
            unknown keys.
    """
    try:
        config = yaml.safe_load(yaml_str)
    except yaml.YAMLError as e:
        raise MonitorConfigError(f"Invalid YAML: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise MonitorConfigError("Config must be a mapping")

    unknown = sorted(set(config) - set(_FIELD_PARSERS))
    if unknown:
        raise MonitorConfigError(f"Unknown config keys: {', '.join(unknown)}")

    parsed: dict[str, Any] = {}
    for key, value in config.items():
        if value is None:
            continue
        try:
            parsed[key] = _FIELD_PARSERS[key](str(value))
        except ValueError as e:
            raise MonitorConfigError(
                f"config key {key} has an invalid value {value!r}: {e}"
            ) from e
    return parsed


def load_settings(
    environ: Mapping[str, str] | None = None,
    config_text: str | None = None,
) -> MonitorSettings:
    """Build MonitorSettings from defaults, a YAML file and the environment.

    Precedence, lowest to highest: built-in defaults, YAML file values,
    environment variables. Empty environment values are ignored.

    Args:
        environ: Environment mapping. Defaults to os.environ.
        config_text: Optional YAML document (see parse_config_yaml()).

    Returns:
        Validated MonitorSettings.

    Raises:
        MonitorConfigError: If a value cannot be parsed or fails validation.
    """
    if environ is None:
        environ = os.environ

    kwargs: dict[str, Any] = dict(_DEFAULTS)
    kwargs["monitor_id"] = socket.gethostname() or "failover-monitor"

    if config_text is not None:
        kwargs.update(parse_config_yaml(config_text))

    for env_key, (field, parser) in _ENV_FIELDS.items():
        raw = environ.get(env_key)
        if raw is None or raw == "":
            continue
        try:
            kwargs[field] = parser(raw)
        except ValueError as e:
            raise MonitorConfigError(
                f"{env_key} has an invalid value {raw!r}: {e}"
            ) from e

    return MonitorSettings(**kwargs)
