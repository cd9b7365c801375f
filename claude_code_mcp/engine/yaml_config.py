"""YAML configuration loader.

Loads a single YAML file as the base configuration. Environment variables
still override it (see BridgeConfig.from_env).

Example YAML:
    bridge:
      cli_name: /opt/claude/bin/claude
      workspace: /path/to/project
      model: sonnet
      append_system_prompt: |
        Keep answers short.
      mcp_config_path: /path/to/mcp.json
      tool_name: claude_code
      execution_timeout_seconds: 900
      debug: false
      log_file: /tmp/claude-code-mcp.log
"""
from __future__ import annotations

import logging
from dataclasses import fields
from pathlib import Path

import yaml

from .config import BridgeConfig, parse_bool, parse_timeout
from .errors import ConfigError

logger = logging.getLogger(__name__)

_STRING_FIELDS = {
    "cli_name",
    "workspace",
    "model",
    "system_prompt",
    "append_system_prompt",
    "mcp_config_path",
    "tool_name",
    "log_file",
}


def load_yaml_config(path: str | Path) -> BridgeConfig:
    """Load and parse a YAML config file into a BridgeConfig.

    Raises FileNotFoundError / yaml.YAMLError as-is and ConfigError for
    values of the wrong shape.
    """
    path = Path(path)
    logger.info(
        "load_yaml_config: loading %s (exists=%s)", path, path.exists(),
    )
    try:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.error(
            "load_yaml_config: config file not found at %s (absolute path: %s)",
            path, path.absolute(),
        )
        raise
    except yaml.YAMLError as exc:
        logger.error("load_yaml_config: YAML parse error in %s: %s", path, exc)
        raise

    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    section = raw.get("bridge") or {}
    if not isinstance(section, dict):
        raise ConfigError(f"{path}: 'bridge' must be a mapping")

    known = {f.name for f in fields(BridgeConfig)}
    unknown = sorted(set(section) - known)
    if unknown:
        logger.warning(
            "load_yaml_config: ignoring unknown keys in %s: %s",
            path.name, ", ".join(unknown),
        )

    config = BridgeConfig()
    for key in _STRING_FIELDS & set(section):
        value = section[key]
        if value is None:
            continue
        setattr(config, key, str(value))
    if "debug" in section:
        config.debug = parse_bool(section["debug"])
    if "execution_timeout_seconds" in section:
        config.execution_timeout_seconds = parse_timeout(
            section["execution_timeout_seconds"],
            f"{path.name}: execution_timeout_seconds",
        )

    logger.info(
        "Parsed YAML config %s: %s",
        path.name, ", ".join(sorted(known & set(section))) or "(empty)",
    )
    return config
