"""
Pytest configuration for completekit tests.

This file configures pytest with custom markers and command-line options
for running different types of tests, and provides an in-memory transport
that replays canned response bodies.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

import pytest

from completekit.config import ProviderDescriptor, VendorKind


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-e2e",
        action="store_true",
        default=False,
        help="Run end-to-end tests against real model endpoints",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "e2e: mark test as end-to-end (requires a live endpoint, use --run-e2e to run)"
    )
    config.addinivalue_line("markers", "ollama: mark test as requiring a local Ollama server")


def pytest_collection_modifyitems(config, items):
    """Skip e2e tests unless --run-e2e is passed."""
    if config.getoption("--run-e2e"):
        # --run-e2e given: do not skip e2e tests
        return

    skip_e2e = pytest.mark.skip(reason="Need --run-e2e option to run end-to-end tests")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


class FakeReader:
    """Body reader that hands out pre-split byte chunks."""

    def __init__(self, chunks: Sequence[bytes]):
        self.chunks = list(chunks)
        self.reads = 0
        self.release_count = 0

    async def read(self) -> bytes:
        if not self.chunks:
            return b""
        self.reads += 1
        return self.chunks.pop(0)

    async def release(self) -> None:
        self.release_count += 1


class FakeResponse:
    def __init__(
        self,
        status: int = 200,
        reason: str = "OK",
        payload: Any = None,
        chunks: Optional[Sequence[bytes]] = None,
        has_body: bool = True,
        raw_body: Optional[str] = None,
    ):
        self.status = status
        self.reason = reason
        self.payload = payload
        self.raw_body = raw_body
        self.reader = FakeReader(chunks or []) if has_body else None
        self.closed = False

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    async def json(self) -> Any:
        if self.raw_body is not None:
            return json.loads(self.raw_body)
        return self.payload

    def get_reader(self) -> Optional[FakeReader]:
        return self.reader

    async def aclose(self) -> None:
        self.closed = True


class FakeTransport:
    """Records every POST and answers with the queued responses in order."""

    def __init__(self, *responses: FakeResponse):
        self.responses: List[FakeResponse] = list(responses)
        self.requests: List[Dict[str, Any]] = []

    async def post(self, url: str, *, headers: Dict[str, str], body: str) -> FakeResponse:
        self.requests.append({"url": url, "headers": dict(headers), "body": json.loads(body)})
        return self.responses.pop(0)

    @property
    def last_body(self) -> Dict[str, Any]:
        return self.requests[-1]["body"]

    @property
    def last_headers(self) -> Dict[str, str]:
        return self.requests[-1]["headers"]

    @property
    def last_url(self) -> str:
        return self.requests[-1]["url"]


def sse(*payloads: Any, done: bool = True) -> bytes:
    """Encode payloads as an SSE body (``data: {json}`` lines)."""
    lines = [f"data: {json.dumps(p, ensure_ascii=False)}\n\n" for p in payloads]
    if done:
        lines.append("data: [DONE]\n\n")
    return "".join(lines).encode("utf-8")


def delta(text: Optional[str]) -> Dict[str, Any]:
    return {"choices": [{"delta": {"content": text}}]}


def ndjson(*objects: Dict[str, Any]) -> bytes:
    return "".join(json.dumps(o, ensure_ascii=False) + "\n" for o in objects).encode("utf-8")


@pytest.fixture
def groq_descriptor() -> ProviderDescriptor:
    return ProviderDescriptor(id="groq-1", name="Groq", kind=VendorKind.GROQ, api_key="gsk-test")


@pytest.fixture
def ollama_descriptor() -> ProviderDescriptor:
    return ProviderDescriptor(
        id="ollama-1", name="Ollama", kind=VendorKind.OLLAMA, api_key="unused"
    )
