"""Claude Code MCP — run prompts through the Claude CLI as an MCP tool."""
from .config import SERVER_VERSION, BridgeConfig
from .errors import (
    BridgeError,
    ConfigError,
    InvalidCliNameError,
    InvalidRequestError,
    ProcessFailure,
    SpawnFailure,
    TimeoutFailure,
)
from .models import AgentRequest, ExecutionContext, ProcessOutput
from .orchestrator import AgentOrchestrator, build_cli_args, parse_request
from .process_runner import run_process
from .session_tracker import SessionStore, SessionTracker
from .stream_reducer import ReducedStream, reduce_stream

__all__ = [
    "SERVER_VERSION",
    # Config
    "BridgeConfig",
    # Pipeline
    "AgentOrchestrator",
    "build_cli_args",
    "parse_request",
    "run_process",
    "reduce_stream",
    "ReducedStream",
    "SessionStore",
    "SessionTracker",
    # Models
    "AgentRequest",
    "ExecutionContext",
    "ProcessOutput",
    # Errors
    "BridgeError",
    "ConfigError",
    "InvalidCliNameError",
    "InvalidRequestError",
    "ProcessFailure",
    "SpawnFailure",
    "TimeoutFailure",
]
