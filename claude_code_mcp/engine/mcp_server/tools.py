"""The single agent tool exposed over MCP.

The tool forwards its prompt to the Claude CLI through AgentOrchestrator
and returns the filtered result text. Bridge errors are re-raised as
ToolError so FastMCP reports them as an error result instead of
tearing down the server.
"""
from __future__ import annotations

import logging
from typing import Annotated

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field

from ..errors import BridgeError, InvalidRequestError, TimeoutFailure
from ..orchestrator import AgentOrchestrator

logger = logging.getLogger(__name__)

TOOL_DESCRIPTION = """\
Claude Code Agent: Your versatile multi-modal assistant for code, file, Git, \
and terminal operations via Claude CLI. Set `WORKSPACE` environment variable \
for contextual execution.

• File ops: Create, read, (fuzzy) edit, move, copy, delete, list files, \
analyze/ocr images, file content analysis
    └─ e.g., "Create /tmp/log.txt with 'system boot'", "List files in /src"

• Code: Generate / analyse / refactor / fix
    └─ e.g. "Generate Python to parse CSV→JSON", "Find bugs in my_script.py"

• Git: Stage ▸ commit ▸ push ▸ tag (any workflow)

• Terminal: Run any CLI cmd or open URLs

• Web search + summarise content on-the-fly

• Multi-step workflows (version bumps, changelog updates, release tagging)

**Prompt tips**

1. Be concise, explicit & step-by-step for complex tasks.
2. For multi-line text, write it to a temporary file in the project root, \
use that file, then delete it.
3. If you get a timeout, split the task into smaller steps.
4. To ask for a second opinion, state clearly that you want analysis only \
and no file modifications.
5. If WORKSPACE is set to the project path, relative file paths work.
6. Combine file operations, README updates, and Git commands in a sequence.
"""

PROMPT_DESCRIPTION = "The detailed natural language prompt for Claude to execute."
CLEAR_CONTEXT_DESCRIPTION = (
    "Whether to clear the current conversation context before executing "
    "the prompt. Set this to true if you want the agent to forget everything "
    "you have already discussed and start afresh."
)


def format_tool_error(exc: BridgeError) -> str:
    """User-visible message for a failed tool call."""
    if isinstance(exc, (InvalidRequestError, TimeoutFailure)):
        return str(exc)
    return f"Claude CLI execution failed: {exc}"


def register_tools(
    mcp: FastMCP,
    orchestrator: AgentOrchestrator,
    tool_name: str = "claude_code",
) -> None:
    """Register the agent tool with the FastMCP instance."""

    @mcp.tool(name=tool_name, description=TOOL_DESCRIPTION)
    async def agent_tool(
        prompt: Annotated[str, Field(description=PROMPT_DESCRIPTION)],
        clearContext: Annotated[
            bool, Field(description=CLEAR_CONTEXT_DESCRIPTION)
        ] = False,
    ) -> str:
        try:
            return await orchestrator.handle(
                {"prompt": prompt, "clearContext": clearContext}
            )
        except BridgeError as exc:
            logger.error(
                "%s call failed (code=%d): %s", tool_name, exc.code, exc,
            )
            raise ToolError(format_tool_error(exc)) from exc
