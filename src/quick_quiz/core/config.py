"""TOML-backed configuration for the quiz server and terminal client.

Defaults live in ``_DEFAULTS``; a user file is merged over them with unknown
keys rejected, then every value is validated into frozen dataclasses.
"""

from __future__ import annotations

import copy
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional

from .workspace import ensure_workspace

__all__ = [
    "CONFIG_PATH_ENV",
    "CONFIG_FILENAME",
    "ConfigError",
    "GatewayConfig",
    "ServerConfig",
    "ClientConfig",
    "LoggingConfig",
    "QuizConfig",
    "load_config",
    "resolve_config_path",
    "config_template",
    "write_template",
]

CONFIG_PATH_ENV = "QUICK_QUIZ_CONFIG"
CONFIG_FILENAME = "quick_quiz.toml"
AGENT_ID_ENV = "TRUFFLE_AGENT_ID"


class ConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class GatewayConfig:
    endpoint: str
    agent_id: Optional[str]
    api_key_env: str
    timeout_seconds: float


@dataclass(frozen=True)
class ServerConfig:
    host: str
    port: int


@dataclass(frozen=True)
class ClientConfig:
    server_url: str
    timeout_seconds: float


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    verbose: bool


@dataclass(frozen=True)
class QuizConfig:
    gateway: GatewayConfig
    server: ServerConfig
    client: ClientConfig
    logging: LoggingConfig


def _merge_dict(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    for key, value in override.items():
        dotted = f"{path}{key}"
        if key not in base:
            raise ConfigError(f"Unknown configuration key '{dotted}'.")
        base_value = base[key]
        if isinstance(base_value, MutableMapping):
            if not isinstance(value, Mapping):
                raise ConfigError(
                    "Expected table for '{0}', found {1}.".format(
                        dotted,
                        type(value).__name__,
                    )
                )
            _merge_dict(base_value, value, path=f"{dotted}.")
        else:
            base[key] = value


def _require_string(value: Any, *, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{field}' must be a non-empty string.")
    return value.strip()


def _coerce_optional_string(value: Any, *, field: str) -> Optional[str]:
    if value is None:
        return None
    return _require_string(value, field=field)


def _require_positive_number(value: Any, *, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{field}' must be a number.")
    if value <= 0:
        raise ConfigError(f"'{field}' must be greater than zero.")
    return float(value)


def _require_port(value: Any, *, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"'{field}' must be an integer.")
    if not (0 < value < 65536):
        raise ConfigError(f"'{field}' must be between 1 and 65535.")
    return value


def _require_bool(value: Any, *, field: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"'{field}' must be a boolean.")
    return value


def _build_gateway(
    section: Mapping[str, Any], env: Mapping[str, str]
) -> GatewayConfig:
    agent_id = _coerce_optional_string(
        section.get("agent_id"), field="gateway.agent_id"
    )
    if agent_id is None:
        agent_id = (env.get(AGENT_ID_ENV) or "").strip() or None
    return GatewayConfig(
        endpoint=_require_string(
            section.get("endpoint"), field="gateway.endpoint"
        ),
        agent_id=agent_id,
        api_key_env=_require_string(
            section.get("api_key_env"), field="gateway.api_key_env"
        ),
        timeout_seconds=_require_positive_number(
            section.get("timeout_seconds"), field="gateway.timeout_seconds"
        ),
    )


def _build_logging(section: Mapping[str, Any]) -> LoggingConfig:
    level = _require_string(section.get("level"), field="logging.level")
    level = level.upper()
    if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigError(
            "logging.level must be one of "
            "DEBUG, INFO, WARNING, ERROR, CRITICAL."
        )
    verbose = _require_bool(section.get("verbose"), field="logging.verbose")
    return LoggingConfig(level=level, verbose=verbose)


def _build_config(
    tree: Mapping[str, Any], env: Mapping[str, str]
) -> QuizConfig:
    server = tree["server"]
    client = tree["client"]
    return QuizConfig(
        gateway=_build_gateway(tree["gateway"], env),
        server=ServerConfig(
            host=_require_string(server.get("host"), field="server.host"),
            port=_require_port(server.get("port"), field="server.port"),
        ),
        client=ClientConfig(
            server_url=_require_string(
                client.get("server_url"), field="client.server_url"
            ).rstrip("/"),
            timeout_seconds=_require_positive_number(
                client.get("timeout_seconds"),
                field="client.timeout_seconds",
            ),
        ),
        logging=_build_logging(tree["logging"]),
    )


def _load_toml(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse config TOML: {exc}") from exc


def resolve_config_path(
    *,
    explicit_path: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
) -> Path:
    """Return the config file location without requiring it to exist."""

    env_map = os.environ if env is None else env
    if explicit_path is not None:
        return explicit_path.expanduser().resolve()
    env_override = env_map.get(CONFIG_PATH_ENV)
    if env_override:
        return Path(env_override).expanduser().resolve()
    layout = ensure_workspace(env=env_map, create=False)
    return layout.path_for("config") / CONFIG_FILENAME


def load_config(
    *,
    explicit_path: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
) -> QuizConfig:
    """Load the TOML config, applying defaults and validation.

    An explicitly requested file must exist. The default location is
    optional: when nothing is there the built-in defaults are used.
    """

    env_map = os.environ if env is None else env
    path = resolve_config_path(explicit_path=explicit_path, env=env_map)
    tree = copy.deepcopy(_DEFAULTS)
    explicit = explicit_path is not None or bool(env_map.get(CONFIG_PATH_ENV))
    if explicit or path.exists():
        toml_data = _load_toml(path)
        _merge_dict(tree, toml_data)
    return _build_config(tree, env_map)


def config_template() -> str:
    """Return the TOML template written by ``quiz init``."""

    return _CONFIG_TEMPLATE.strip() + "\n"


def write_template(
    path: Path, *, overwrite: bool = False, mode: int = 0o600
) -> Path:
    """Write the default template to ``path``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists() and not overwrite:
        raise ConfigError(f"Config already exists: {path}")
    with path.open("w", encoding="utf-8") as fh:
        fh.write(config_template())
    try:
        path.chmod(mode)
    except PermissionError:
        pass
    return path


_DEFAULTS: Dict[str, Any] = {
    "gateway": {
        "endpoint": "https://trytruffle.ai/api/v0/run",
        "agent_id": None,
        "api_key_env": "TRUFFLE_API_KEY",
        "timeout_seconds": 60,
    },
    "server": {
        "host": "127.0.0.1",
        "port": 8000,
    },
    "client": {
        "server_url": "http://127.0.0.1:8000",
        "timeout_seconds": 90,
    },
    "logging": {
        "level": "INFO",
        "verbose": False,
    },
}


_CONFIG_TEMPLATE = """
# quick-quiz configuration

[gateway]
# Agent service endpoint used to generate quizzes
endpoint = "https://trytruffle.ai/api/v0/run"
# Agent identifier; falls back to the TRUFFLE_AGENT_ID environment variable
# agent_id = "your-agent-id"
# Environment variable holding the API key (also read from .env)
api_key_env = "TRUFFLE_API_KEY"
# Seconds to wait for the agent before giving up
timeout_seconds = 60

[server]
host = "127.0.0.1"
port = 8000

[client]
# Base URL of a running `quiz serve`
server_url = "http://127.0.0.1:8000"
timeout_seconds = 90

[logging]
level = "INFO"
verbose = false
"""
