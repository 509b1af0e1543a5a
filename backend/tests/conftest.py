"""
Pytest configuration and fixtures for Workbench backend tests.

The compile service and the log channel are replaced by in-memory fakes whose
responses the tests release explicitly, so every interleaving is deterministic.
"""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest
import pytest_asyncio

# Set test environment variables before importing config
os.environ.setdefault("COMPILE_SERVICE_URL", "http://compile.test")
os.environ.setdefault("LOG_STREAM_URL", "ws://logs.test")
os.environ.setdefault("ENVIRONMENT", "test")

from backend.context import create_context  # noqa: E402
from backend.main import app  # noqa: E402
from backend.services.compile_client import CompileRequestError, CompileResult  # noqa: E402
from backend.services.log_stream import LogStreamBridge  # noqa: E402
from backend.services.preview_orchestrator import PreviewOrchestrator  # noqa: E402
from engine.workspace.templates import initial_projects  # noqa: E402


async def settle(rounds: int = 10) -> None:
    """Let pending tasks run until they block again."""
    for _ in range(rounds):
        await asyncio.sleep(0)


# ── compile service fake ────────────────────────────────────────────────────


@dataclass
class CompileCall:
    kind: str
    project_name: str
    files: dict[str, str]
    future: asyncio.Future = field(repr=False)

    def succeed(self, url: str) -> None:
        self.future.set_result(CompileResult(kind=self.kind, url=url))

    def fail(self, message: str) -> None:
        self.future.set_exception(CompileRequestError(message))


class FakeCompileClient:
    def __init__(self) -> None:
        self.calls: list[CompileCall] = []
        self.closed = False

    async def compile(self, kind: str, project_name: str, files: dict[str, str]) -> CompileResult:
        future = asyncio.get_running_loop().create_future()
        self.calls.append(CompileCall(kind, project_name, files, future))
        return await future

    async def aclose(self) -> None:
        self.closed = True


# ── log channel fake ────────────────────────────────────────────────────────


class FakeChannel:
    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        self.frames: asyncio.Queue[Any] = asyncio.Queue()
        self.closed = False

    def push(self, frame: Any) -> None:
        self.frames.put_nowait(frame)

    async def recv(self) -> Any:
        frame = await self.frames.get()
        if isinstance(frame, BaseException):
            raise frame
        return frame

    async def close(self) -> None:
        self.closed = True


class FakeConnector:
    def __init__(self) -> None:
        self.channels: list[FakeChannel] = []
        self.fail_with: Exception | None = None

    async def __call__(self, session_id: str) -> FakeChannel:
        if self.fail_with is not None:
            raise self.fail_with
        channel = FakeChannel(session_id)
        self.channels.append(channel)
        return channel

    @property
    def last(self) -> FakeChannel:
        return self.channels[-1]


# ── fixtures ────────────────────────────────────────────────────────────────


@pytest.fixture
def drain():
    return settle


@pytest.fixture
def compile_client():
    return FakeCompileClient()


@pytest.fixture
def connector():
    return FakeConnector()


@pytest.fixture
def bridge(connector):
    return LogStreamBridge(connect=connector, history_limit=50)


@pytest.fixture
def orchestrator(compile_client, bridge):
    return PreviewOrchestrator(compile_client, bridge)


@pytest.fixture
def projects():
    return {p.name: p for p in initial_projects()}


@pytest.fixture
def context(compile_client, bridge):
    return create_context(compile_client=compile_client, log_bridge=bridge, debounce_delay=0.01)


@pytest_asyncio.fixture
async def async_client(context):
    """Async HTTP client against the ASGI app with a fresh context."""
    app.state.context = context
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    await context.aclose()
    app.state.context = None
