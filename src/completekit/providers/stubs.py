"""
Stub provider for offline testing and development.

This provider doesn't call any external API; it answers with fixed
placeholder text.
"""

from __future__ import annotations

import asyncio

from ..types import ChunkCallback, CompletionRequest
from .base import Provider

PLACEHOLDER_TEXT = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor "
    "incididunt ut labore et dolore magna aliqua. Ut enim ad minim veniam, quis nostrud "
    "exercitation ullamco laboris nisi ut aliquip ex ea commodo consequat. Duis aute irure "
    "dolor in reprehenderit in voluptate velit esse cillum dolore eu fugiat nulla pariatur. "
    "Excepteur sint occaecat cupidatat non proident, sunt in culpa qui officia deserunt "
    "mollit anim id est laborum."
)


class StubProvider(Provider):
    """
    Placeholder provider used in testing mode.

    Non-streaming calls return PLACEHOLDER_TEXT. Streaming calls emit the
    reply word by word with a short delay between fragments so callers see
    realistic incremental output.
    """

    name = "stub"

    def __init__(self, delay: float = 0.02, **kwargs):
        super().__init__(**kwargs)
        self.delay = delay

    def _reply(self, request: CompletionRequest) -> str:
        if request.user_prompt:
            return (
                f'Response to system: "{request.system_prompt}" and user prompt: '
                f'"{request.user_prompt}" with content: "{request.content}" - {PLACEHOLDER_TEXT}'
            )
        return PLACEHOLDER_TEXT

    async def _complete(self, request: CompletionRequest) -> str:
        return self._reply(request)

    async def _stream(self, request: CompletionRequest, on_delta: ChunkCallback) -> None:
        words = self._reply(request).split(" ")
        for index, word in enumerate(words):
            on_delta(word if index == len(words) - 1 else word + " ")
            await asyncio.sleep(self.delay)


__all__ = ["StubProvider", "PLACEHOLDER_TEXT"]
