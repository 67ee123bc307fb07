"""Run configuration.

A run is described by one immutable ``SyncConfig``. Its ``mode`` is either a
``SyncMode`` or a ``BackupMode``, chosen once at startup and dispatched by
``pipesync.sync.runner.run``.

Remote connection settings come from an optional YAML file and the
environment, the environment winning::

    host: https://fleet-management.example.net
    user: "123456"
    token: glc_...
    timeout: 30
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Union

import yaml

from pipesync.errors import ConfigError

ENV_HOST = "FLEET_MANAGEMENT_HOST"
ENV_USER = "FLEET_MANAGEMENT_USER"
ENV_TOKEN = "FLEET_MANAGEMENT_TOKEN"
ENV_TIMEOUT = "FLEET_MANAGEMENT_TIMEOUT"

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class RemoteConfig:
    """Connection settings for the fleet-management service."""

    host: str
    user: str
    token: str = field(default="", repr=False)
    timeout: float = DEFAULT_TIMEOUT


@dataclass(frozen=True)
class SyncMode:
    """Push the local pipelines to the remote store."""

    purge: bool = False
    dry_run: bool = False


@dataclass(frozen=True)
class BackupMode:
    """Snapshot the remote pipelines into ``target_dir`` and change nothing."""

    target_dir: str


RunMode = Union[SyncMode, BackupMode]


@dataclass(frozen=True)
class SyncConfig:
    """Everything a single run needs."""

    mode: RunMode
    root_dir: str = "."


def load_remote_config(
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> RemoteConfig:
    """Build a ``RemoteConfig`` from a YAML file and the environment.

    Raises:
        ConfigError: The file is unreadable or malformed, or host/user are missing.
    """
    env = os.environ if env is None else env
    data: dict = {}

    if config_path:
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"Cannot read config file {config_path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path}: expected a mapping at the top level")

    host = env.get(ENV_HOST) or str(data.get("host") or "")
    user = env.get(ENV_USER) or str(data.get("user") or "")
    token = env.get(ENV_TOKEN) or str(data.get("token") or "")
    raw_timeout = env.get(ENV_TIMEOUT) or data.get("timeout") or DEFAULT_TIMEOUT

    if not host or not user:
        raise ConfigError(f"{ENV_HOST} and {ENV_USER} are required")

    try:
        timeout = float(raw_timeout)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid timeout: {raw_timeout!r}") from e
    if timeout <= 0:
        raise ConfigError(f"Timeout must be positive, got {timeout}")

    return RemoteConfig(host=host.rstrip("/"), user=user, token=token, timeout=timeout)
