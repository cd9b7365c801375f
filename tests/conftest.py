from __future__ import annotations

import pytest

_BRIDGE_ENV_VARS = (
    "CLAUDE_CLI_NAME",
    "WORKSPACE",
    "MODEL",
    "SYSTEM_PROMPT",
    "APPEND_SYSTEM_PROMPT",
    "MCP_CONFIG_PATH",
    "MCP_CLAUDE_DEBUG",
    "TOOL_NAME",
    "CLAUDE_MCP_TIMEOUT",
    "CLAUDE_MCP_CONFIG_FILE",
)


@pytest.fixture(autouse=True)
def _isolate_bridge_env(monkeypatch):
    """Keep the host's environment from leaking into config tests."""
    for name in _BRIDGE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
