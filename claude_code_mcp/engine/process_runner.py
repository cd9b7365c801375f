"""Run an external command and collect its output.

Uses asyncio.create_subprocess_exec (array-based, no shell), so prompt
text is passed through verbatim without any quoting. Output is drained
incrementally so whatever the process printed before a timeout is still
available for error reporting.
"""
from __future__ import annotations

import asyncio
import errno
import logging
import signal
from collections.abc import Awaitable, Callable, Sequence

from .errors import ProcessFailure, SpawnFailure
from .models import ProcessOutput

logger = logging.getLogger(__name__)

# Seconds between SIGTERM and SIGKILL when stopping a timed-out process
TERMINATE_GRACE_SECONDS = 5.0

_READ_CHUNK = 64 * 1024

# Signature shared by run_process and test doubles.
ProcessRunner = Callable[..., Awaitable[ProcessOutput]]


async def _drain(
    stream: asyncio.StreamReader,
    sink: list[bytes],
    label: str | None = None,
) -> None:
    """Append every chunk read from *stream* to *sink* until EOF."""
    while True:
        chunk = await stream.read(_READ_CHUNK)
        if not chunk:
            return
        sink.append(chunk)
        if label:
            logger.debug(
                "[%s chunk] %s", label,
                chunk.decode("utf-8", errors="replace").rstrip(),
            )


def _decode(chunks: list[bytes]) -> str:
    return b"".join(chunks).decode("utf-8", errors="replace")


def _signal_name(returncode: int) -> str:
    try:
        return signal.Signals(-returncode).name
    except ValueError:
        return f"signal {-returncode}"


async def _terminate(
    proc: asyncio.subprocess.Process,
    grace_seconds: float,
) -> None:
    """SIGTERM the process, escalating to SIGKILL after the grace period."""
    if proc.returncode is not None:
        return
    try:
        proc.terminate()
        try:
            await asyncio.wait_for(proc.wait(), timeout=grace_seconds)
        except asyncio.TimeoutError:
            logger.warning(
                "Process %d ignored SIGTERM for %.1fs; killing",
                proc.pid, grace_seconds,
            )
            proc.kill()
            await proc.wait()
    except ProcessLookupError:
        pass


async def run_process(
    command: str,
    args: Sequence[str],
    *,
    cwd: str | None = None,
    timeout: float | None = None,
    grace_seconds: float = TERMINATE_GRACE_SECONDS,
) -> ProcessOutput:
    """Run *command* with *args* and return its output.

    Raises ProcessFailure on a non-zero exit code and SpawnFailure when
    the process cannot be started, is killed by a signal, or runs longer
    than *timeout* seconds (``timed_out`` is set in that case). A single
    attempt is made; nothing is retried.
    """
    logger.debug("[Spawn] Running command: %s %s", command, " ".join(args))
    try:
        proc = await asyncio.create_subprocess_exec(
            command,
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
        )
    except OSError as exc:
        logger.debug("[Spawn] Failed to start %s: %r", command, exc)
        raise SpawnFailure(
            exc.strerror or str(exc),
            syscall="spawn",
            path=exc.filename or command,
            errno_name=errno.errorcode.get(exc.errno) if exc.errno else None,
        ) from exc

    stdout_chunks: list[bytes] = []
    stderr_chunks: list[bytes] = []
    collect = asyncio.gather(
        _drain(proc.stdout, stdout_chunks),
        _drain(proc.stderr, stderr_chunks, label="Spawn Stderr"),
        proc.wait(),
    )
    try:
        await asyncio.wait_for(collect, timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(
            "[Spawn] %s (pid=%d) exceeded %gs; terminating",
            command, proc.pid, timeout,
        )
        await _terminate(proc, grace_seconds)
        raise SpawnFailure(
            f"Process timed out after {timeout:g}s",
            signal="SIGTERM",
            timed_out=True,
            stdout=_decode(stdout_chunks),
            stderr=_decode(stderr_chunks),
        ) from None
    except asyncio.CancelledError:
        await _terminate(proc, grace_seconds)
        raise

    stdout = _decode(stdout_chunks)
    stderr = _decode(stderr_chunks)
    returncode = proc.returncode
    logger.debug("[Spawn Close] Exit code: %s", returncode)
    logger.debug("[Spawn Stderr Full] %s", stderr.strip())
    logger.debug("[Spawn Stdout Full] %s", stdout.strip())

    if returncode is not None and returncode < 0:
        name = _signal_name(returncode)
        raise SpawnFailure(
            f"Process terminated by {name}",
            signal=name,
            stdout=stdout,
            stderr=stderr,
        )
    if returncode != 0:
        raise ProcessFailure(returncode, stdout, stderr)
    return ProcessOutput(stdout=stdout, stderr=stderr)
