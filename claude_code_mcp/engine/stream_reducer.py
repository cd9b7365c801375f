"""Reduce Claude CLI ``--output-format stream-json`` output to plain text.

Each stdout line is a standalone JSON event. Only two things matter to the
caller: the session id (for --resume on the next call) and the text of
successful ``result`` events. Everything else, including lines that are
not JSON at all, is dropped without raising.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionEvent:
    session_id: str


@dataclass(frozen=True)
class ResultEvent:
    text: str


@dataclass(frozen=True)
class IgnoredLine:
    line: str
    reason: str


StreamEvent = Union[SessionEvent, ResultEvent, IgnoredLine]


@dataclass(frozen=True)
class ReducedStream:
    """Outcome of reducing one process's stdout."""
    text: str
    session_id: str | None = None


def parse_line(line: str) -> tuple[StreamEvent, ...]:
    """Classify one output line.

    A line can carry both a session id and a result (result events
    normally include the session id), so up to two events are returned.
    """
    try:
        message = json.loads(line)
    except json.JSONDecodeError as exc:
        return (IgnoredLine(line, f"invalid JSON: {exc}"),)

    if not isinstance(message, dict):
        return (IgnoredLine(line, "not a JSON object"),)

    events: list[StreamEvent] = []
    session_id = message.get("session_id")
    if isinstance(session_id, str) and session_id:
        events.append(SessionEvent(session_id))

    result = message.get("result")
    if (
        message.get("type") == "result"
        and message.get("subtype") == "success"
        and isinstance(result, str)
        and result
    ):
        events.append(ResultEvent(result))

    if not events:
        return (IgnoredLine(line, f"event type {message.get('type')!r}"),)
    return tuple(events)


def iter_events(text: str) -> Iterator[StreamEvent]:
    """Yield classified events for every non-blank line, in order."""
    for line in text.split("\n"):
        if not line.strip():
            continue
        yield from parse_line(line)


def reduce_stream(text: str) -> ReducedStream:
    """Fold *text* into the joined result text and the last session id.

    No results is a valid outcome and yields an empty string.
    """
    results: list[str] = []
    session_id: str | None = None
    for event in iter_events(text):
        if isinstance(event, SessionEvent):
            session_id = event.session_id
        elif isinstance(event, ResultEvent):
            results.append(event.text)
        else:
            logger.debug("Skipping stream line (%s): %s", event.reason, event.line)

    output = "\n".join(results)
    logger.debug("Filtered output: %s", output)
    return ReducedStream(text=output, session_id=session_id)
