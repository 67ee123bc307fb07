"""Tests for run configuration."""

import dataclasses
import tempfile
from pathlib import Path

import pytest
import yaml

from pipesync.config import (
    DEFAULT_TIMEOUT,
    BackupMode,
    SyncConfig,
    SyncMode,
    load_remote_config,
)
from pipesync.errors import ConfigError

ENV = {
    "FLEET_MANAGEMENT_HOST": "https://fleet.example.net/",
    "FLEET_MANAGEMENT_USER": "1234",
    "FLEET_MANAGEMENT_TOKEN": "secret",
}


def test_load_from_environment():
    cfg = load_remote_config(env=ENV)
    assert cfg.host == "https://fleet.example.net"
    assert cfg.user == "1234"
    assert cfg.token == "secret"
    assert cfg.timeout == DEFAULT_TIMEOUT


def test_token_not_in_repr():
    assert "secret" not in repr(load_remote_config(env=ENV))


def test_missing_host_or_user():
    with pytest.raises(ConfigError):
        load_remote_config(env={"FLEET_MANAGEMENT_USER": "1234"})
    with pytest.raises(ConfigError):
        load_remote_config(env={"FLEET_MANAGEMENT_HOST": "https://fleet.example.net"})


def test_load_from_yaml_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "pipesync.yaml"
        path.write_text(
            yaml.dump({"host": "https://file.example.net", "user": 42, "token": "t", "timeout": 5})
        )
        cfg = load_remote_config(path, env={})

    assert cfg.host == "https://file.example.net"
    assert cfg.user == "42"
    assert cfg.timeout == 5.0


def test_environment_overrides_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "pipesync.yaml"
        path.write_text(yaml.dump({"host": "https://file.example.net", "user": "file-user"}))
        cfg = load_remote_config(path, env={"FLEET_MANAGEMENT_USER": "env-user"})

    assert cfg.host == "https://file.example.net"
    assert cfg.user == "env-user"


def test_invalid_yaml_and_missing_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        bad = Path(tmpdir) / "bad.yaml"
        bad.write_text("host: [unclosed")
        with pytest.raises(ConfigError):
            load_remote_config(bad, env=ENV)

        listing = Path(tmpdir) / "list.yaml"
        listing.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_remote_config(listing, env=ENV)

        with pytest.raises(ConfigError):
            load_remote_config(Path(tmpdir) / "missing.yaml", env=ENV)


def test_invalid_timeout():
    with pytest.raises(ConfigError):
        load_remote_config(env={**ENV, "FLEET_MANAGEMENT_TIMEOUT": "soon"})
    with pytest.raises(ConfigError):
        load_remote_config(env={**ENV, "FLEET_MANAGEMENT_TIMEOUT": "-1"})


def test_run_config_is_immutable():
    cfg = SyncConfig(mode=SyncMode(purge=True), root_dir="pipes")
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.root_dir = "other"
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.mode.purge = False


def test_modes_default():
    assert SyncConfig(mode=SyncMode()).root_dir == "."
    assert SyncMode() == SyncMode(purge=False, dry_run=False)
    assert BackupMode("out").target_dir == "out"
