"""Stdio MCP server exposing the Claude CLI as a single agent tool.

Usage:
    # Via an MCP client config (command: claude-code-mcp)
    # Or manually:
    python -m claude_code_mcp.engine.mcp_server.stdio_server
    python -m claude_code_mcp.engine.mcp_server.stdio_server \
        --config claude-code-mcp.yaml --cwd /path/to/project --verbose
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence
from contextlib import asynccontextmanager

import yaml
from mcp.server.fastmcp import FastMCP

from ..cli_locator import find_claude_cli
from ..config import SERVER_VERSION, BridgeConfig
from ..errors import ConfigError
from ..orchestrator import AgentOrchestrator
from ..session_tracker import SessionTracker
from ..yaml_config import load_yaml_config
from .tools import register_tools

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI args for the MCP server process."""
    parser = argparse.ArgumentParser(
        prog="claude-code-mcp",
        description="MCP server that runs prompts through the Claude CLI",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML config file. Also reads CLAUDE_MCP_CONFIG_FILE env var.",
    )
    parser.add_argument(
        "--cwd",
        default=None,
        help="Working directory for the Claude CLI (overrides WORKSPACE)",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write logs to this file",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> BridgeConfig:
    """Merge YAML file, environment and command-line settings."""
    config_file = args.config or os.getenv("CLAUDE_MCP_CONFIG_FILE")
    base = load_yaml_config(config_file) if config_file else None
    config = BridgeConfig.from_env(base)

    if args.cwd:
        config.workspace = args.cwd
    if args.log_file:
        config.log_file = args.log_file
    if args.verbose:
        config.debug = True
    return config


def configure_logging(debug: bool, log_file: str | None = None) -> None:
    """Send logs to stderr (stdout is the stdio transport)."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    logging.getLogger().setLevel(level)
    if not log_file:
        return
    try:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as exc:
        logger.warning("Cannot open log file %s: %s", log_file, exc)
        return
    file_handler.setFormatter(
        logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    )
    logging.getLogger().addHandler(file_handler)


def build_server(config: BridgeConfig, orchestrator: AgentOrchestrator) -> FastMCP:
    """Create the FastMCP instance with the agent tool registered."""

    @asynccontextmanager
    async def bridge_lifespan(server: FastMCP):
        logger.info(
            "Claude Code MCP server initialized "
            "(version=%s, tool=%s, timeout=%gs)",
            SERVER_VERSION, config.tool_name,
            config.execution_timeout_seconds,
        )
        try:
            yield {"config": config, "orchestrator": orchestrator}
        finally:
            logger.info("Claude Code MCP server shut down")

    mcp = FastMCP(
        name="claude_code",
        instructions=(
            f"Use the {config.tool_name} tool to delegate code, file, Git "
            "and terminal work to Claude Code. Pass clearContext=true to "
            "start a fresh conversation."
        ),
        lifespan=bridge_lifespan,
    )
    register_tools(mcp, orchestrator, config.tool_name)
    return mcp


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for the MCP server."""
    args = _parse_args(argv)
    try:
        config = load_config(args)
        configure_logging(config.debug, config.log_file)
        cli_path = find_claude_cli(config.cli_name)
    except (ConfigError, OSError, yaml.YAMLError) as exc:
        raise SystemExit(f"claude-code-mcp: {exc}") from exc

    logger.info("[Setup] Using Claude CLI command/path: %s", cli_path)
    orchestrator = AgentOrchestrator(
        config, cli_path, sessions=SessionTracker(),
    )
    mcp = build_server(config, orchestrator)

    logger.info("Claude Code MCP server running on stdio (pid=%s)", os.getpid())
    try:
        mcp.run(transport="stdio")
    except Exception:
        logger.exception("Fatal stdio MCP server error (pid=%s)", os.getpid())
        raise


if __name__ == "__main__":
    main()
