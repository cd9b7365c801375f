"""Per-call pipeline: validate, build argv, run the CLI, reduce output.

One AgentOrchestrator serves every tool call of the server process. The
session store and process runner are injected so tests can drive the
pipeline without a real Claude CLI.
"""
from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from .config import SERVER_VERSION, BridgeConfig
from .errors import InvalidRequestError, SpawnFailure, TimeoutFailure
from .models import AgentRequest, ExecutionContext
from .process_runner import ProcessRunner, run_process
from .session_tracker import SessionStore, SessionTracker
from .stream_reducer import reduce_stream

logger = logging.getLogger(__name__)


def parse_request(arguments: Any, tool_name: str = "claude_code") -> AgentRequest:
    """Validate raw tool arguments into an AgentRequest."""
    if not isinstance(arguments, Mapping):
        raise InvalidRequestError(
            f"Missing or invalid required parameter: prompt (must be an "
            f"object with a string \"prompt\" property) for {tool_name} tool"
        )
    prompt = arguments.get("prompt")
    if not isinstance(prompt, str) or not prompt:
        raise InvalidRequestError(
            f"Missing or invalid required parameter: prompt (must be a "
            f"non-empty string) for {tool_name} tool"
        )
    clear_context = arguments.get("clearContext", False)
    if clear_context is None:
        clear_context = False
    if not isinstance(clear_context, bool):
        raise InvalidRequestError(
            f"Invalid parameter: clearContext must be a boolean for "
            f"{tool_name} tool"
        )
    return AgentRequest(prompt=prompt, clear_context=clear_context)


def build_cli_args(prompt: str, context: ExecutionContext) -> list[str]:
    """Build the Claude CLI argument vector in its fixed order."""
    args = [
        "--dangerously-skip-permissions",
        "-p",
        prompt,
        "--output-format",
        "stream-json",
        "--verbose",
    ]
    if context.model:
        args.extend(["--model", context.model])
    if context.system_prompt:
        args.extend(["--system-prompt", context.system_prompt])
    if context.append_system_prompt:
        args.extend(["--append-system-prompt", context.append_system_prompt])
    if context.mcp_config_path:
        args.extend(["--mcp-config", context.mcp_config_path])
    if context.resume_session_id:
        args.extend(["--resume", context.resume_session_id])
    return args


class AgentOrchestrator:
    """Runs one Claude CLI invocation per tool call.

    Session continuity: every session_id seen in a successful run is
    stored and passed back with --resume until a request sets
    clearContext.
    """

    def __init__(
        self,
        config: BridgeConfig,
        cli_path: str,
        *,
        sessions: SessionStore | None = None,
        runner: ProcessRunner = run_process,
    ) -> None:
        self._config = config
        self._cli_path = cli_path
        self._sessions = sessions if sessions is not None else SessionTracker()
        self._runner = runner
        self._started_at = datetime.now(timezone.utc).isoformat()
        self._first_call = True

    @property
    def sessions(self) -> SessionStore:
        return self._sessions

    def resolve_working_directory(self) -> str:
        """Configured workspace if it exists on disk, else the process cwd."""
        cwd = os.getcwd()
        workspace = self._config.workspace
        if not workspace:
            logger.debug("No workspace configured, using default CWD: %s", cwd)
            return cwd

        resolved = os.path.abspath(os.path.expanduser(workspace))
        if os.path.isdir(resolved):
            logger.debug("Using workspace as CWD: %s", resolved)
            return resolved
        logger.warning(
            "Workspace path does not exist: %s. Using default: %s",
            resolved, cwd,
        )
        return cwd

    def build_context(self) -> ExecutionContext:
        config = self._config
        return ExecutionContext(
            working_directory=self.resolve_working_directory(),
            timeout_seconds=config.execution_timeout_seconds,
            model=config.model,
            system_prompt=config.system_prompt,
            append_system_prompt=config.append_system_prompt,
            mcp_config_path=config.mcp_config_path,
            resume_session_id=self._sessions.get(),
        )

    async def handle(self, arguments: Any) -> str:
        """Handle one tool call and return the filtered CLI output."""
        request = parse_request(arguments, self._config.tool_name)
        return await self.run(request)

    async def run(self, request: AgentRequest) -> str:
        if request.clear_context:
            logger.debug("clearContext requested, resetting session id")
            self._sessions.clear()

        context = self.build_context()
        args = build_cli_args(request.prompt, context)

        if self._first_call:
            logger.info(
                "%s v%s started at %s",
                self._config.tool_name, SERVER_VERSION, self._started_at,
            )
            self._first_call = False

        logger.debug(
            "Invoking Claude CLI: %s %s (cwd=%s)",
            self._cli_path, " ".join(args), context.working_directory,
        )
        try:
            output = await self._runner(
                self._cli_path,
                args,
                cwd=context.working_directory,
                timeout=context.timeout_seconds,
            )
        except SpawnFailure as exc:
            logger.debug("Error executing Claude CLI: %s", exc)
            if exc.signal is not None:
                raise TimeoutFailure(context.timeout_seconds, str(exc)) from exc
            raise

        if output.stderr:
            logger.debug("Claude CLI stderr: %s", output.stderr.strip())

        reduced = reduce_stream(output.stdout)
        if reduced.session_id:
            self._sessions.update(reduced.session_id)
        return reduced.text
