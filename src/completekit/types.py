"""
Core request and message types shared by every adapter.

These primitives are vendor-agnostic; each adapter translates them into its
own wire shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_OUTPUT_TOKENS = 1000
DEFAULT_QUERY_TIMEOUT = 45.0

ChunkCallback = Callable[[str], None]


class Role(str, Enum):
    """Conversation role."""

    USER = "user"
    SYSTEM = "system"


@dataclass
class Message:
    """One entry of the composed message sequence sent to a vendor."""

    role: Role
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role.value, "content": self.content}


@dataclass
class CompletionRequest:
    """
    Normalized arguments of a single completion call.

    Attributes:
        system_prompt: Instruction text conveyed as the system role when supported.
        content: Primary content the instruction applies to.
        user_prompt: Optional secondary instruction placed before the content.
        temperature: Sampling temperature. Default: 0.7.
        max_output_tokens: Output token limit; the adapter default applies when unset.
        streaming: Deliver fragments incrementally to the chunk callback.
        system_prompt_support: When False the system prompt is sent as a user message.
    """

    system_prompt: str
    content: str
    user_prompt: Optional[str] = None
    temperature: float = DEFAULT_TEMPERATURE
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS
    streaming: bool = False
    system_prompt_support: bool = True

    @classmethod
    def build(
        cls,
        system_prompt: str,
        content: str,
        *,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
        user_prompt: Optional[str] = None,
        streaming: bool = False,
        system_prompt_support: bool = True,
        default_max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    ) -> "CompletionRequest":
        """Apply the shared defaults: unset temperature is 0.7, non-positive token limits fall back."""
        if not system_prompt:
            raise ValueError("system_prompt must be a non-empty string")
        if not content:
            raise ValueError("content must be a non-empty string")

        return cls(
            system_prompt=system_prompt,
            content=content,
            user_prompt=user_prompt or None,
            temperature=DEFAULT_TEMPERATURE if temperature is None else temperature,
            max_output_tokens=(
                max_output_tokens
                if max_output_tokens is not None and max_output_tokens > 0
                else default_max_output_tokens
            ),
            streaming=streaming,
            system_prompt_support=system_prompt_support,
        )


__all__ = [
    "Role",
    "Message",
    "CompletionRequest",
    "ChunkCallback",
    "DEFAULT_TEMPERATURE",
    "DEFAULT_MAX_OUTPUT_TOKENS",
    "DEFAULT_QUERY_TIMEOUT",
]
