"""
Chunk parsers for the vendor wire formats.

Each function looks at one decoded payload (an SSE line, an NDJSON object or
an SDK event) and pulls out the text it carries, if any. They are stateless;
buffering of partial frames lives in :mod:`completekit.stream`.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from .exceptions import ParseError

SSE_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


class _Done:
    """Marker returned for the SSE end-of-stream sentinel."""

    def __repr__(self) -> str:
        return "SSE_DONE"


SSE_DONE = _Done()


def loads_frame(text: str) -> Any:
    """Decode one JSON frame, raising ParseError instead of ValueError."""
    try:
        return json.loads(text)
    except ValueError as exc:
        raise ParseError(text, str(exc)) from exc


def parse_sse_line(line: str) -> Any:
    """
    Interpret a single SSE line.

    Returns None for lines that carry no data (blank lines, comments, other
    fields), SSE_DONE for the ``[DONE]`` sentinel and the decoded JSON
    payload otherwise.

    Raises:
        ParseError: The data field is not valid JSON.
    """
    if not line.strip() or not line.startswith(SSE_PREFIX):
        return None
    data = line[len(SSE_PREFIX):]
    if data.strip() == DONE_SENTINEL:
        return SSE_DONE
    return loads_frame(data)


def _field(obj: Any, name: str) -> Any:
    # SDK objects expose attributes, raw payloads are dicts.
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _first(items: Any) -> Any:
    if isinstance(items, (list, tuple)) and items:
        return items[0]
    return None


def choice_text(payload: Any, field: str = "delta") -> Optional[str]:
    """
    Extract ``choices[0].<field>.content`` from a chat-completions payload.

    ``field`` is "delta" for stream chunks and "message" for complete
    responses. Works on decoded JSON and on SDK response objects alike.
    Anything that is not a string at the end of the path yields None,
    including an explicit ``null`` content.
    """
    if payload is None or isinstance(payload, (str, bytes, int, float, list)):
        return None
    choice = _first(_field(payload, "choices"))
    if choice is None:
        return None
    part = _field(choice, field)
    if part is None:
        return None
    content = _field(part, "content")
    return content if isinstance(content, str) else None


def ndjson_text(payload: Any) -> Optional[str]:
    """Text fragment of one NDJSON generate object (the ``response`` field)."""
    if not isinstance(payload, dict):
        return None
    text = payload.get("response")
    return text if isinstance(text, str) else None


def ndjson_done(payload: Any) -> bool:
    return isinstance(payload, dict) and payload.get("done") is True


def event_text(event: Any) -> Optional[str]:
    """
    Text of a messages-API stream event.

    Only ``content_block_delta`` events whose delta is a ``text_delta`` carry
    text; message start/stop, ping and tool-input deltas are ignored.
    """
    if _field(event, "type") != "content_block_delta":
        return None
    delta = _field(event, "delta")
    if delta is None or _field(delta, "type") != "text_delta":
        return None
    text = _field(delta, "text")
    return text if isinstance(text, str) else None


def message_text(message: Any) -> str:
    """Text of the first text block of a complete messages-API response."""
    for block in _field(message, "content") or []:
        if _field(block, "type") == "text":
            text = _field(block, "text")
            return text if isinstance(text, str) else ""
    return ""


def candidate_text(response: Any) -> Optional[str]:
    """Extract ``candidates[0].content.parts[0].text`` from a generate-content response or chunk."""
    candidate = _first(_field(response, "candidates"))
    if candidate is None:
        return None
    content = _field(candidate, "content")
    if content is None:
        return None
    part = _first(_field(content, "parts"))
    if part is None:
        return None
    text = _field(part, "text")
    return text if isinstance(text, str) else None


__all__ = [
    "SSE_PREFIX",
    "DONE_SENTINEL",
    "SSE_DONE",
    "loads_frame",
    "parse_sse_line",
    "choice_text",
    "ndjson_text",
    "ndjson_done",
    "event_text",
    "message_text",
    "candidate_text",
]
