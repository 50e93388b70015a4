"""
Stall-timeout watchdog for completion calls.

A completion that stops producing output is abandoned after an inactivity
window. For streaming calls every delivered fragment counts as activity; for
non-streaming calls the final result is the only fragment, so the whole call
must finish within one window.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from .exceptions import CompletionTimeout
from .types import DEFAULT_QUERY_TIMEOUT, ChunkCallback

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class WatchdogState:
    """Shared between the timer loop and the chunk forwarder of one call."""

    last_activity: float
    timed_out: bool = False

    def touch(self, now: float) -> None:
        self.last_activity = now


class StallWatchdog:
    """
    Abort a wrapped completion when it goes quiet for too long.

    Args:
        timeout: Inactivity window in seconds. Default: 45.0.
        interval: How often the idle time is checked, in seconds. Default: 1.0.
        clock: Monotonic time source, injectable for tests.

    The wrapped coroutine is not cancelled when the window elapses: the
    vendor call keeps running to completion in the background, but its
    remaining fragments are discarded and its outcome is only logged.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_QUERY_TIMEOUT,
        interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.timeout = timeout
        self.interval = interval
        self.clock = clock

    async def run(
        self,
        call: Callable[[ChunkCallback], Awaitable[T]],
        on_chunk: Optional[ChunkCallback] = None,
    ) -> T:
        """
        Run ``call(forward)`` under the watchdog.

        ``forward`` must be handed to the wrapped completion as its chunk
        callback; it refreshes the activity timestamp and passes the fragment
        on to ``on_chunk`` unless the call has already timed out.

        Raises:
            CompletionTimeout: No activity within the window.
        """
        state = WatchdogState(last_activity=self.clock())

        def forward(text: str) -> None:
            if state.timed_out:
                return
            state.touch(self.clock())
            if on_chunk is not None:
                on_chunk(text)

        task = asyncio.ensure_future(call(forward))
        try:
            while True:
                done, _ = await asyncio.wait({task}, timeout=self.interval)
                if done:
                    return task.result()
                idle = self.clock() - state.last_activity
                if idle > self.timeout:
                    state.timed_out = True
                    idle_ms = int(idle * 1000)
                    logger.warning("Completion stalled for %sms, giving up", idle_ms)
                    raise CompletionTimeout(idle_ms)
        finally:
            # Timed out or cancelled by the caller: the call keeps running unobserved.
            if not task.done():
                task.add_done_callback(_log_abandoned)


def _log_abandoned(task: "asyncio.Future[object]") -> None:
    # Retrieve the outcome so asyncio does not report it as never retrieved.
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("Abandoned completion failed: %r", exc)
    else:
        logger.debug("Abandoned completion finished")


__all__ = ["StallWatchdog", "WatchdogState"]
