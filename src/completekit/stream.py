"""
Incremental decode loops for line-framed streaming responses.

Network reads do not respect frame boundaries: a JSON object can be split
across two reads and a multi-byte UTF-8 character across two chunks. The
LineDecoder keeps the unfinished tail between reads; the drain functions run
the per-format framing rules on each complete line.
"""

from __future__ import annotations

import codecs
import logging
from typing import Callable, List, Optional

from .exceptions import ParseError
from .parser import SSE_DONE, choice_text, loads_frame, ndjson_done, ndjson_text, parse_sse_line
from .transport import BodyReader

logger = logging.getLogger(__name__)


class LineDecoder:
    """Per-call accumulator turning byte chunks into complete text lines."""

    def __init__(self, encoding: str = "utf-8"):
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self.buffer = ""

    def feed(self, data: bytes) -> List[str]:
        """Append a chunk and return every line completed by it."""
        self.buffer += self._decoder.decode(data)
        lines = self.buffer.split("\n")
        self.buffer = lines.pop()
        return lines


async def drain_sse(
    reader: BodyReader,
    on_delta: Callable[[str], None],
    extract: Callable[[object], Optional[str]] = choice_text,
) -> None:
    """
    Consume an SSE body, forwarding every non-empty delta.

    After the ``[DONE]`` sentinel no further lines are interpreted, but the
    body is still read to the end so the connection is returned cleanly.
    The reader is released exactly once.
    """
    decoder = LineDecoder()
    finished = False
    try:
        while True:
            data = await reader.read()
            if not data:
                break
            if finished:
                continue
            for line in decoder.feed(data):
                try:
                    payload = parse_sse_line(line)
                except ParseError as exc:
                    logger.debug("Skipping malformed SSE frame: %s", exc)
                    continue
                if payload is None:
                    continue
                if payload is SSE_DONE:
                    finished = True
                    break
                text = extract(payload)
                if text:
                    on_delta(text)
    finally:
        await reader.release()


async def drain_ndjson(
    reader: BodyReader,
    on_delta: Callable[[str], None],
) -> None:
    """
    Consume a newline-delimited JSON body.

    Every non-blank line is one object; its ``response`` text is forwarded.
    An object with ``done: true`` ends the loop at once and anything still
    buffered is discarded.
    """
    decoder = LineDecoder()
    try:
        while True:
            data = await reader.read()
            if not data:
                break
            for line in decoder.feed(data):
                if not line.strip():
                    continue
                try:
                    payload = loads_frame(line)
                except ParseError as exc:
                    logger.debug("Skipping malformed NDJSON line: %s", exc)
                    continue
                text = ndjson_text(payload)
                if text:
                    on_delta(text)
                if ndjson_done(payload):
                    return
    finally:
        await reader.release()


__all__ = ["LineDecoder", "drain_sse", "drain_ndjson"]
