"""Exception hierarchy for the Claude CLI bridge.

Specific exceptions for each failure mode. Every tool-call failure is a
BridgeError subclass; the MCP layer turns it into a single error response.
"""
from __future__ import annotations

from mcp.types import INTERNAL_ERROR, INVALID_PARAMS


class BridgeError(Exception):
    """Base exception for all bridge errors."""

    # JSON-RPC error code this failure maps to
    code: int = INTERNAL_ERROR


class InvalidRequestError(BridgeError):
    """Tool arguments are missing or malformed. No process is spawned."""

    code = INVALID_PARAMS


class ConfigError(BridgeError):
    """A configuration value could not be used. Aborts startup."""


class InvalidCliNameError(ConfigError):
    """CLAUDE_CLI_NAME is a relative path."""
    def __init__(self, cli_name: str):
        self.cli_name = cli_name
        super().__init__(
            f"Invalid CLAUDE_CLI_NAME: Relative paths are not allowed "
            f"(got '{cli_name}'). Use either a simple name (e.g., 'claude') "
            f"or an absolute path (e.g., '/tmp/claude-test')"
        )


class ProcessFailure(BridgeError):
    """External command exited with a non-zero code."""
    def __init__(self, exit_code: int, stdout: str, stderr: str):
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(
            f"Command failed with exit code {exit_code}\n"
            f"Stderr: {stderr.strip()}\n"
            f"Stdout: {stdout.strip()}"
        )


class SpawnFailure(BridgeError):
    """External command could not be launched, or was killed by a signal."""
    def __init__(
        self,
        message: str,
        *,
        signal: str | None = None,
        syscall: str | None = None,
        path: str | None = None,
        errno_name: str | None = None,
        timed_out: bool = False,
        stdout: str = "",
        stderr: str = "",
    ):
        self.reason = message
        self.signal = signal
        self.syscall = syscall
        self.path = path
        self.errno_name = errno_name
        self.timed_out = timed_out
        self.stdout = stdout
        self.stderr = stderr

        text = f"Spawn error: {message}"
        if errno_name:
            text += f" ({errno_name})"
        if path:
            text += f" | Path: {path}"
        if syscall:
            text += f" | Syscall: {syscall}"
        if signal:
            text += f" | Signal: {signal}"
        text += f"\nStderr: {stderr.strip()}"
        super().__init__(text)


class TimeoutFailure(BridgeError):
    """External command exceeded its time budget or was signaled."""
    def __init__(self, timeout_seconds: float, detail: str = ""):
        self.timeout_seconds = timeout_seconds
        self.detail = detail
        super().__init__(
            f"Claude CLI command timed out after {timeout_seconds:g}s. "
            f"Details: {detail}"
        )
