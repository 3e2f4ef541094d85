"""Core shared helpers for quick-quiz commands."""

from __future__ import annotations

from .config import (
    ConfigError,
    QuizConfig,
    load_config,
    resolve_config_path,
    write_template,
)
from .credentials import MissingCredentialError, load_api_key
from .logging import JsonLogFormatter, configure_logger
from .workspace import (
    WORKSPACE_ENV,
    WorkspaceError,
    WorkspaceLayout,
    ensure_workspace,
)

__all__ = [
    "ConfigError",
    "QuizConfig",
    "load_config",
    "resolve_config_path",
    "write_template",
    "MissingCredentialError",
    "load_api_key",
    "JsonLogFormatter",
    "configure_logger",
    "WORKSPACE_ENV",
    "WorkspaceError",
    "WorkspaceLayout",
    "ensure_workspace",
]
