"""
Exception hierarchy for completekit.

Every failure a caller can observe is one of these kinds:

- ConfigurationError: the model/provider/credential cannot be resolved
- ProviderError: the vendor answered with a non-success status
- TransportError: the request never reached the vendor (network level)
- StreamUnavailable: streaming was requested but the response has no body
- CompletionTimeout: the stall watchdog gave up waiting for output

ParseError is raised by the chunk parsers and is always handled inside the
stream decode loops; it never escapes a completion call.
"""

from __future__ import annotations

from typing import Optional


class CompleteKitError(Exception):
    """Base exception for all completekit errors."""

    pass


class ConfigurationError(CompleteKitError):
    """Raised when a model reference cannot be turned into a working adapter."""

    def __init__(self, message: str, suggestion: str = ""):
        self.suggestion = suggestion

        text = message
        if suggestion:
            text += f"\n\n💡 How to fix: {suggestion}"

        super().__init__(text)


class ProviderError(CompleteKitError):
    """Raised when the vendor reports a failure for an otherwise delivered request."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        provider: Optional[str] = None,
    ):
        self.message = message
        self.status = status
        self.provider = provider
        super().__init__(message)


class StreamUnavailable(ProviderError):
    """Raised when a streaming response carries no readable body."""


class TransportError(CompleteKitError):
    """Raised when the outbound request fails before any response arrives."""


class CompletionTimeout(CompleteKitError):
    """Raised by the stall watchdog after the inactivity window elapsed."""

    def __init__(self, idle_ms: int):
        self.idle_ms = idle_ms
        super().__init__(f"Timeout: last streaming output is {idle_ms}ms ago.")


class ParseError(CompleteKitError):
    """Raised for a single undecodable stream frame."""

    def __init__(self, frame: str, reason: str = ""):
        self.frame = frame
        self.reason = reason
        super().__init__(f"Could not parse frame {frame[:80]!r}: {reason}")


__all__ = [
    "CompleteKitError",
    "ConfigurationError",
    "ProviderError",
    "StreamUnavailable",
    "TransportError",
    "CompletionTimeout",
    "ParseError",
]
