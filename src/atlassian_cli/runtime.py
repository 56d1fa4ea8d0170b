"""Runtime helpers for atlassian-cli command execution."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from .client import AtlassianClient
from .config import CliConfig, load_config
from .env_auth import EnvironmentAuthManager, Settings, create_env_auth_manager
from .errors import AtlassianCliError, classify_error
from .logging import get_logger
from .ux import print_error, print_hint


class _HandlerCallable(Protocol):
    def __call__(self) -> Any: ...


def prepare_settings(
    *,
    loader: Callable[[], CliConfig] = load_config,
    auth_manager: EnvironmentAuthManager | None = None,
) -> Settings:
    """Resolve credentials from the environment first, then the config file."""
    manager = auth_manager or create_env_auth_manager()
    return manager.resolve_settings(loader())


def build_client(settings: Settings) -> AtlassianClient:
    return AtlassianClient(settings.credential, timeout=settings.timeout)


def report_error(exc: AtlassianCliError) -> int:
    """Print one failure to stderr and return its exit code."""
    info = classify_error(exc)
    get_logger().debug("command failed", category=info.category, details=info.details)
    print_error(f"Error: {info.message}")
    if info.hint:
        print_hint(info.hint)
    return info.exit_code


def execute_command(handler: _HandlerCallable, command: str) -> int:
    """Run a command handler, converting known failures into exit codes."""
    logger = get_logger()
    try:
        with logger.timed_operation(command):
            result = handler()
    except AtlassianCliError as exc:
        return report_error(exc)
    return int(result) if result is not None else 0


__all__ = ["build_client", "execute_command", "prepare_settings", "report_error"]
