"""Configuration loaded from environment variables.

All settings have sensible defaults. A YAML file (see yaml_config) can
provide a base that environment variables then override.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace

from .errors import ConfigError

logger = logging.getLogger(__name__)

SERVER_VERSION = "1.10.12"

# 30 minutes
DEFAULT_EXECUTION_TIMEOUT_SECONDS = 1800.0

# Environment variable -> BridgeConfig string field
_ENV_STRING_FIELDS = {
    "CLAUDE_CLI_NAME": "cli_name",
    "WORKSPACE": "workspace",
    "MODEL": "model",
    "SYSTEM_PROMPT": "system_prompt",
    "APPEND_SYSTEM_PROMPT": "append_system_prompt",
    "MCP_CONFIG_PATH": "mcp_config_path",
    "TOOL_NAME": "tool_name",
}

_TRUTHY = {"1", "true", "yes", "on"}


def parse_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def parse_timeout(value: object, source: str) -> float:
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        raise ConfigError(
            f"{source} must be a number of seconds, got {value!r}"
        ) from None
    if seconds <= 0:
        raise ConfigError(f"{source} must be positive, got {value!r}")
    return seconds


@dataclass
class BridgeConfig:
    """Claude CLI bridge configuration."""

    # CLI binary: simple name for PATH lookup or an absolute path
    cli_name: str | None = None
    # Working directory for the CLI; falls back to the process cwd
    workspace: str | None = None

    # Optional pass-through CLI flags
    model: str | None = None
    system_prompt: str | None = None
    append_system_prompt: str | None = None
    mcp_config_path: str | None = None

    # Name the MCP tool is registered under
    tool_name: str = "claude_code"
    # Upper bound on a single CLI run
    execution_timeout_seconds: float = DEFAULT_EXECUTION_TIMEOUT_SECONDS

    # Logging
    debug: bool = False
    log_file: str | None = None

    @classmethod
    def from_env(cls, base: BridgeConfig | None = None) -> BridgeConfig:
        """Load configuration from environment variables.

        Values already present on *base* (e.g. from a YAML file) are kept
        unless the corresponding variable is set to a non-empty value.
        """
        config = replace(base) if base is not None else cls()

        overrides: list[str] = []
        for env_name, field_name in _ENV_STRING_FIELDS.items():
            value = os.getenv(env_name)
            if value:
                setattr(config, field_name, value)
                overrides.append(env_name)

        debug = os.getenv("MCP_CLAUDE_DEBUG")
        if debug:
            config.debug = parse_bool(debug)
            overrides.append("MCP_CLAUDE_DEBUG")

        timeout = os.getenv("CLAUDE_MCP_TIMEOUT")
        if timeout:
            config.execution_timeout_seconds = parse_timeout(
                timeout, "CLAUDE_MCP_TIMEOUT",
            )
            overrides.append("CLAUDE_MCP_TIMEOUT")

        if overrides:
            logger.info(
                "BridgeConfig.from_env: env overrides: %s",
                ", ".join(sorted(overrides)),
            )
        else:
            logger.debug("BridgeConfig.from_env: no env overrides set")

        if not config.tool_name.strip():
            raise ConfigError("Tool name must not be empty")

        logger.debug(
            "BridgeConfig.from_env: tool=%s workspace=%s model=%s timeout=%gs",
            config.tool_name, config.workspace, config.model,
            config.execution_timeout_seconds,
        )
        return config
