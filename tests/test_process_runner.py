"""Tests for run_process using real short-lived Python subprocesses."""
from __future__ import annotations

import os
import sys

import pytest

from claude_code_mcp.engine.errors import ProcessFailure, SpawnFailure
from claude_code_mcp.engine.process_runner import run_process

PY = sys.executable


@pytest.mark.asyncio
async def test_success_returns_stdout_and_stderr():
    output = await run_process(
        PY, ["-c", "import sys; print('out'); sys.stderr.write('err')"],
    )

    assert output.stdout.strip() == "out"
    assert output.stderr == "err"


@pytest.mark.asyncio
async def test_arguments_are_not_shell_interpreted():
    prompt = "it's $HOME; `rm -rf /` && \"quoted\""
    output = await run_process(
        PY, ["-c", "import sys; sys.stdout.write(sys.argv[1])", prompt],
    )

    assert output.stdout == prompt


@pytest.mark.asyncio
async def test_nonzero_exit_raises_process_failure():
    with pytest.raises(ProcessFailure) as exc_info:
        await run_process(
            PY, ["-c", "import sys; sys.stderr.write('boom'); sys.exit(2)"],
        )

    exc = exc_info.value
    assert exc.exit_code == 2
    assert exc.stderr == "boom"
    assert "boom" in str(exc)
    assert "exit code 2" in str(exc)


@pytest.mark.asyncio
async def test_missing_binary_raises_spawn_failure(tmp_path):
    missing = str(tmp_path / "no-such-claude")

    with pytest.raises(SpawnFailure) as exc_info:
        await run_process(missing, ["-p", "hi"])

    exc = exc_info.value
    assert exc.errno_name == "ENOENT"
    assert exc.path == missing
    assert exc.syscall == "spawn"
    assert exc.signal is None
    assert missing in str(exc)


@pytest.mark.asyncio
async def test_timeout_terminates_and_keeps_partial_output():
    script = "import time; print('partial', flush=True); time.sleep(30)"

    with pytest.raises(SpawnFailure) as exc_info:
        await run_process(PY, ["-c", script], timeout=2.0, grace_seconds=1.0)

    exc = exc_info.value
    assert exc.timed_out is True
    assert exc.signal == "SIGTERM"
    assert "partial" in exc.stdout


@pytest.mark.asyncio
async def test_killed_by_signal_raises_spawn_failure():
    script = "import os, signal; os.kill(os.getpid(), signal.SIGKILL)"

    with pytest.raises(SpawnFailure) as exc_info:
        await run_process(PY, ["-c", script])

    assert exc_info.value.signal == "SIGKILL"
    assert exc_info.value.timed_out is False


@pytest.mark.asyncio
async def test_runs_in_requested_directory(tmp_path):
    output = await run_process(
        PY, ["-c", "import os; print(os.getcwd())"], cwd=str(tmp_path),
    )

    assert os.path.realpath(output.stdout.strip()) == os.path.realpath(tmp_path)


@pytest.mark.asyncio
async def test_stdin_is_empty():
    output = await run_process(
        PY, ["-c", "import sys; print(repr(sys.stdin.read()))"],
    )

    assert output.stdout.strip() == "''"
