"""Environment-based settings for atlassian-cli.

Reads ``ATLASSIAN_*`` variables (optionally from a ``.env`` file) and merges
them with the persisted config: the environment always wins, the config file
fills the gaps.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .client import DEFAULT_TIMEOUT, Credential
from .config import CliConfig, resolve
from .logging import get_logger

DEFAULT_CONFLUENCE_BASE_PATH = "/wiki"


@dataclass
class EnvAuthConfig:
    """Names of the variables consulted and ``.env`` behaviour."""

    load_dotenv: bool = True
    dotenv_path: str | None = None
    url_var: str = "ATLASSIAN_URL"
    username_var: str = "ATLASSIAN_USERNAME"
    api_token_var: str = "ATLASSIAN_API_TOKEN"
    cloud_var: str = "ATLASSIAN_CLOUD"
    confluence_base_path_var: str = "CONFLUENCE_BASE_PATH"
    timeout_var: str = "ATLASSIAN_TIMEOUT"


@dataclass(frozen=True)
class Settings:
    credential: Credential
    confluence_base_path: str = DEFAULT_CONFLUENCE_BASE_PATH
    timeout: float = DEFAULT_TIMEOUT


class EnvironmentAuthManager:
    """Reads credentials from environment variables and ``.env`` files."""

    def __init__(self, config: EnvAuthConfig):
        self.config = config
        self.logger = get_logger()
        self._dotenv_loaded = False
        if config.load_dotenv:
            self._load_dotenv()

    def _load_dotenv(self) -> None:
        """Load the first ``.env`` file found; existing variables are kept."""
        candidates = [self.config.dotenv_path] if self.config.dotenv_path else [".env", ".env.local"]
        for location in candidates:
            env_path = Path(location)
            if env_path.exists():
                load_dotenv(str(env_path), override=False)
                self._dotenv_loaded = True
                self.logger.debug(f"Loaded environment variables from {env_path}")
                return

    def get(self, var: str) -> str | None:
        value = os.getenv(var)
        return value if value else None

    def get_url(self) -> str | None:
        return self.get(self.config.url_var)

    def get_username(self) -> str | None:
        return self.get(self.config.username_var)

    def get_api_token(self) -> str | None:
        return self.get(self.config.api_token_var)

    def get_cloud_flag(self) -> str | None:
        return self.get(self.config.cloud_var)

    def get_confluence_base_path(self) -> str | None:
        return self.get(self.config.confluence_base_path_var)

    def get_timeout(self) -> float | None:
        raw = self.get(self.config.timeout_var)
        if raw is None:
            return None
        try:
            value = float(raw)
        except ValueError:
            self.logger.warning(f"Ignoring invalid {self.config.timeout_var}={raw!r}")
            return None
        return value if value > 0 else None

    def resolve_settings(self, persisted: CliConfig) -> Settings:
        """Combine environment and persisted values into :class:`Settings`.

        Raises ``ConfigurationMissing`` naming the first variable missing from
        both sources.
        """
        base_url = resolve(self.get_url(), persisted.atlassian_url, True, setting=self.config.url_var)
        username = resolve(
            self.get_username(), persisted.atlassian_username, True, setting=self.config.username_var
        )
        api_token = resolve(
            self.get_api_token(), persisted.atlassian_api_token, True, setting=self.config.api_token_var
        )
        cloud = resolve(self.get_cloud_flag(), persisted.atlassian_cloud)
        base_path = resolve(self.get_confluence_base_path(), persisted.confluence_base_path)
        credential = Credential(
            base_url=str(base_url),
            identity=str(username),
            secret=str(api_token),
            is_cloud=parse_cloud_flag(cloud),
        )
        return Settings(
            credential=credential,
            confluence_base_path=base_path or DEFAULT_CONFLUENCE_BASE_PATH,
            timeout=self.get_timeout() or DEFAULT_TIMEOUT,
        )

    def get_authentication_recommendations(self, persisted: CliConfig) -> list[str]:
        recommendations: list[str] = []
        pairs = (
            (self.config.url_var, self.get_url(), persisted.atlassian_url, "atlassian_url"),
            (self.config.username_var, self.get_username(), persisted.atlassian_username, "atlassian_username"),
            (self.config.api_token_var, self.get_api_token(), persisted.atlassian_api_token, "atlassian_api_token"),
        )
        for var, env_value, config_value, key in pairs:
            if not env_value and not config_value:
                recommendations.append(f"Set {var} or run 'atlassian-cli config set {key} <value>'")
        return recommendations


def parse_cloud_flag(value: str | None) -> bool:
    """Cloud is the default; only an explicit ``false``-like value disables it."""
    if value is None:
        return True
    return value.strip().lower() not in {"false", "0", "no", "off"}


def create_env_auth_manager(config: EnvAuthConfig | None = None) -> EnvironmentAuthManager:
    """Factory function to create environment authentication manager."""
    if config is None:
        config = EnvAuthConfig()
    return EnvironmentAuthManager(config)


__all__ = [
    "DEFAULT_CONFLUENCE_BASE_PATH",
    "EnvAuthConfig",
    "EnvironmentAuthManager",
    "Settings",
    "create_env_auth_manager",
    "parse_cloud_flag",
]
