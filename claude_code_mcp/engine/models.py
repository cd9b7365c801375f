"""Data models for a single bridged tool call."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AgentRequest:
    """Validated arguments of one tool call."""
    prompt: str
    clear_context: bool = False


@dataclass(frozen=True)
class ExecutionContext:
    """Everything needed to launch the CLI for one call.

    Derived from BridgeConfig and the current session state when the
    call starts; never mutated afterwards.
    """
    working_directory: str
    timeout_seconds: float
    model: str | None = None
    system_prompt: str | None = None
    append_system_prompt: str | None = None
    mcp_config_path: str | None = None
    resume_session_id: str | None = None


@dataclass(frozen=True)
class ProcessOutput:
    """Collected output of a process that exited with code 0."""
    stdout: str
    stderr: str = ""
