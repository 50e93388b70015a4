"""
Request shaping shared by every adapter.

The conceptual order is always: system instruction, optional secondary user
instruction, primary content. Adapters only differ in how the roles are named
on the wire.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .types import CompletionRequest, Message, Role


class PromptBuilder:
    """Compose the ordered message sequence for a completion request."""

    def __init__(self, separator: str = "\n"):
        self.separator = separator

    def messages(self, request: CompletionRequest) -> List[Message]:
        """
        Build the full message list.

        With system prompt support the instruction gets the system role,
        otherwise it is demoted to an ordinary user message in the same slot.
        """
        first_role = Role.SYSTEM if request.system_prompt_support else Role.USER
        composed = [Message(role=first_role, content=request.system_prompt)]
        composed.extend(self.user_messages(request))
        return composed

    def split_system(self, request: CompletionRequest) -> Tuple[Optional[str], List[Message]]:
        """
        Return (system_instruction, user_messages) for vendors with a dedicated
        system field. The instruction is None when it was demoted.
        """
        if request.system_prompt_support:
            return request.system_prompt, self.user_messages(request)
        return None, self.demoted(request)

    def demoted(self, request: CompletionRequest) -> List[Message]:
        """Every instruction folded into user roles."""
        composed = [Message(role=Role.USER, content=request.system_prompt)]
        composed.extend(self.user_messages(request))
        return composed

    def user_messages(self, request: CompletionRequest) -> List[Message]:
        composed: List[Message] = []
        if request.user_prompt:
            composed.append(Message(role=Role.USER, content=request.user_prompt))
        composed.append(Message(role=Role.USER, content=request.content))
        return composed

    def combined(self, request: CompletionRequest) -> str:
        """Single prompt string for vendors without a message list."""
        parts = [request.system_prompt]
        if request.user_prompt:
            parts.append(request.user_prompt)
        parts.append(request.content)
        return self.separator.join(parts)


def compose_messages(request: CompletionRequest) -> List[Message]:
    return PromptBuilder().messages(request)


def combine_prompt(request: CompletionRequest) -> str:
    return PromptBuilder().combined(request)


__all__ = ["PromptBuilder", "compose_messages", "combine_prompt"]
