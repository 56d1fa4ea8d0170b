from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, cast

import yaml

from .errors import ConfigError, ConfigurationMissing

CONFIG_DIR_NAME = "atlassian-cli"
CONFIG_FILE_NAME = "config.yaml"
LEGACY_CONFIG_FILE_NAME = "config.json"
CONFIG_PATH_ENV = "ATLASSIAN_CLI_CONFIG"

CONFIG_KEYS = (
    "atlassian_url",
    "atlassian_username",
    "atlassian_api_token",
    "atlassian_cloud",
    "confluence_base_path",
)


def resolve(
    runtime_value: str | None,
    persisted_value: str | None,
    required: bool = False,
    *,
    setting: str | None = None,
) -> str | None:
    """Pick the effective value of one setting.

    A non-empty runtime value (environment / command line) wins over the
    persisted one. When both are empty the result is ``None``, or
    :class:`ConfigurationMissing` when ``required``.
    """
    if runtime_value:
        return runtime_value
    if persisted_value:
        return persisted_value
    if required:
        label = setting or "value"
        raise ConfigurationMissing(f"{label} is not set and no config value was found", setting=setting)
    return None


@dataclass
class CliConfig:
    """Values persisted in the user's config file."""

    atlassian_url: str | None = None
    atlassian_username: str | None = None
    atlassian_api_token: str | None = None
    atlassian_cloud: str | None = None
    confluence_base_path: str | None = None

    def get(self, key: str) -> str | None:
        if key not in CONFIG_KEYS:
            raise ConfigError(f"Invalid config key: {key}")
        return cast("str | None", getattr(self, key))

    def set(self, key: str, value: str) -> None:
        if key not in CONFIG_KEYS:
            raise ConfigError(
                f"Invalid config key: {key} (expected one of: {', '.join(CONFIG_KEYS)})"
            )
        setattr(self, key, value)

    def to_dict(self) -> dict[str, str]:
        out: dict[str, str] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                out[f.name] = value
        return out


def get_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / CONFIG_DIR_NAME
    return Path.home() / ".config" / CONFIG_DIR_NAME


def get_config_path() -> Path:
    override = os.environ.get(CONFIG_PATH_ENV)
    if override:
        return Path(override)
    return get_config_dir() / CONFIG_FILE_NAME


def _candidate_paths(path: Path | None) -> list[Path]:
    if path is not None:
        return [path]
    primary = get_config_path()
    if os.environ.get(CONFIG_PATH_ENV):
        return [primary]
    return [primary, primary.with_name(LEGACY_CONFIG_FILE_NAME)]


def load_config(path: str | Path | None = None) -> CliConfig:
    """Read the persisted config; a missing file yields an empty config.

    The legacy ``config.json`` is read when no ``config.yaml`` exists (JSON
    parses as YAML). Values that are not strings are ignored.
    """
    for candidate in _candidate_paths(Path(path) if path is not None else None):
        if not candidate.exists():
            continue
        try:
            raw = yaml.safe_load(candidate.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Unable to parse config file {candidate}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError(f"Config file {candidate} must contain a mapping")
        data = cast(dict[str, Any], raw)
        cfg = CliConfig()
        for key in CONFIG_KEYS:
            value = data.get(key)
            if isinstance(value, str):
                setattr(cfg, key, value)
        return cfg
    return CliConfig()


def save_config(cfg: CliConfig, path: str | Path | None = None) -> Path:
    target = Path(path) if path is not None else get_config_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = yaml.safe_dump(cfg.to_dict(), sort_keys=True, default_flow_style=False)
    fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as handle:
        handle.write(payload)
    os.chmod(target, 0o600)
    return target


__all__ = [
    "CONFIG_KEYS",
    "CliConfig",
    "get_config_path",
    "load_config",
    "resolve",
    "save_config",
]
