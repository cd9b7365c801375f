"""Tests for environment and YAML configuration loading."""
from __future__ import annotations

import pytest
import yaml

from claude_code_mcp.engine.config import (
    DEFAULT_EXECUTION_TIMEOUT_SECONDS,
    BridgeConfig,
)
from claude_code_mcp.engine.errors import ConfigError
from claude_code_mcp.engine.yaml_config import load_yaml_config


def test_defaults_without_env():
    config = BridgeConfig.from_env()

    assert config.tool_name == "claude_code"
    assert config.execution_timeout_seconds == DEFAULT_EXECUTION_TIMEOUT_SECONDS == 1800
    assert config.workspace is None
    assert config.model is None
    assert config.debug is False


def test_env_vars_populate_fields(monkeypatch):
    monkeypatch.setenv("CLAUDE_CLI_NAME", "/opt/claude")
    monkeypatch.setenv("WORKSPACE", "/work")
    monkeypatch.setenv("MODEL", "sonnet")
    monkeypatch.setenv("SYSTEM_PROMPT", "sys")
    monkeypatch.setenv("APPEND_SYSTEM_PROMPT", "append")
    monkeypatch.setenv("MCP_CONFIG_PATH", "/mcp.json")
    monkeypatch.setenv("TOOL_NAME", "agent")
    monkeypatch.setenv("MCP_CLAUDE_DEBUG", "true")
    monkeypatch.setenv("CLAUDE_MCP_TIMEOUT", "60")

    config = BridgeConfig.from_env()

    assert config.cli_name == "/opt/claude"
    assert config.workspace == "/work"
    assert config.model == "sonnet"
    assert config.system_prompt == "sys"
    assert config.append_system_prompt == "append"
    assert config.mcp_config_path == "/mcp.json"
    assert config.tool_name == "agent"
    assert config.debug is True
    assert config.execution_timeout_seconds == 60.0


def test_empty_env_values_are_ignored(monkeypatch):
    monkeypatch.setenv("MODEL", "")
    monkeypatch.setenv("TOOL_NAME", "")

    config = BridgeConfig.from_env()

    assert config.model is None
    assert config.tool_name == "claude_code"


def test_debug_false_value(monkeypatch):
    monkeypatch.setenv("MCP_CLAUDE_DEBUG", "false")

    assert BridgeConfig.from_env().debug is False


@pytest.mark.parametrize("value", ["soon", "0", "-5"])
def test_bad_timeout_is_rejected(monkeypatch, value):
    monkeypatch.setenv("CLAUDE_MCP_TIMEOUT", value)

    with pytest.raises(ConfigError):
        BridgeConfig.from_env()


def test_env_overrides_base(monkeypatch):
    base = BridgeConfig(model="from-yaml", workspace="/yaml/ws")
    monkeypatch.setenv("MODEL", "from-env")

    config = BridgeConfig.from_env(base)

    assert config.model == "from-env"
    assert config.workspace == "/yaml/ws"
    assert base.model == "from-yaml"


def test_load_yaml_config(tmp_path):
    path = tmp_path / "bridge.yaml"
    path.write_text(yaml.safe_dump({
        "bridge": {
            "cli_name": "claude-beta",
            "model": "opus",
            "tool_name": "coder",
            "execution_timeout_seconds": 900,
            "debug": "yes",
            "not_a_field": 1,
        }
    }))

    config = load_yaml_config(path)

    assert config.cli_name == "claude-beta"
    assert config.model == "opus"
    assert config.tool_name == "coder"
    assert config.execution_timeout_seconds == 900.0
    assert config.debug is True
    assert config.system_prompt is None


def test_load_yaml_config_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")

    assert load_yaml_config(path) == BridgeConfig()


def test_load_yaml_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_yaml_config(tmp_path / "missing.yaml")


def test_load_yaml_config_rejects_non_mapping_section(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("bridge:\n  - a\n  - b\n")

    with pytest.raises(ConfigError):
        load_yaml_config(path)


def test_load_yaml_config_bad_timeout(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("bridge:\n  execution_timeout_seconds: never\n")

    with pytest.raises(ConfigError):
        load_yaml_config(path)
