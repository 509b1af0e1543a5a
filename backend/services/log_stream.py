"""
Real-time log bridge.

Owns the single live log channel (one per process) and the per-project log
history it feeds. The channel is a WebSocket to the log service keyed by the
session id the compile service handed out; frames are JSON objects
{type, message, timestamp} pushed in send order.
"""

from __future__ import annotations

import asyncio
import itertools
import json
import logging
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal, Protocol
from urllib.parse import urlencode

from websockets.asyncio.client import connect as ws_connect
from websockets.exceptions import ConnectionClosedOK

from backend.config import settings

logger = logging.getLogger(__name__)

LogSeverity = Literal["log", "error", "warn", "info"]
SEVERITIES = frozenset({"log", "error", "warn", "info"})


def now_iso() -> str:
    return datetime.now(UTC).isoformat()


@dataclass(frozen=True)
class LogEntry:
    severity: LogSeverity
    message: str
    timestamp: str
    sequence: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.severity,
            "message": self.message,
            "timestamp": self.timestamp,
            "sequence": self.sequence,
        }


class LogChannel(Protocol):
    async def recv(self) -> str | bytes: ...

    async def close(self) -> None: ...


ChannelFactory = Callable[[str], Awaitable[LogChannel]]


async def connect_websocket(session_id: str) -> LogChannel:
    """Open the log service WebSocket for a session."""
    url = f"{settings.LOG_STREAM_URL}?{urlencode({'projectId': session_id})}"
    return await ws_connect(url)


class LogStreamBridge:
    """
    At most one channel is open at a time. open() closes the previous channel
    before starting the next one; faults become synthetic error entries.
    """

    def __init__(self, connect: ChannelFactory | None = None, history_limit: int | None = None) -> None:
        self._connect = connect or connect_websocket
        self._history_limit = settings.LOG_HISTORY_LIMIT if history_limit is None else history_limit
        self._history: dict[str, deque[LogEntry]] = {}
        self._sequence = itertools.count(1)
        self._subscribers: set[asyncio.Queue[tuple[str, LogEntry]]] = set()
        self._task: asyncio.Task[None] | None = None
        self.session_id: str | None = None
        self.owner: str | None = None

    # ── channel lifecycle ──────────────────────────────────────────────────

    @property
    def is_open(self) -> bool:
        return self._task is not None and not self._task.done()

    def open(self, session_id: str, project_name: str) -> asyncio.Task[None]:
        """Close any open channel, then start streaming `session_id` into `project_name`'s log."""
        self.close()
        self.session_id = session_id
        self.owner = project_name
        self._task = asyncio.create_task(self._pump(session_id, project_name), name=f"log-stream:{session_id}")
        logger.info("log_stream: opening session %s for %s", session_id, project_name)
        return self._task

    def close(self) -> None:
        task = self._task
        if task is None:
            return
        logger.info("log_stream: closing session %s for %s", self.session_id, self.owner)
        self._task = None
        self.session_id = None
        self.owner = None
        if not task.done():
            task.cancel()

    async def aclose(self) -> None:
        task = self._task
        self.close()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    async def _pump(self, session_id: str, project_name: str) -> None:
        channel: LogChannel | None = None
        try:
            try:
                channel = await self._connect(session_id)
            except Exception as e:
                logger.warning("log_stream: connect failed for session %s: %s", session_id, e)
                self.append(project_name, "error", f"WebSocket error: {e}")
                return

            while True:
                try:
                    frame = await channel.recv()
                except ConnectionClosedOK:
                    logger.info("log_stream: session %s closed by server", session_id)
                    return
                except Exception as e:
                    logger.warning("log_stream: session %s failed: %s", session_id, e)
                    self.append(project_name, "error", f"WebSocket error: {e}")
                    return
                self._receive(project_name, frame)
        finally:
            if channel is not None:
                await channel.close()
            if self._task is asyncio.current_task():
                self._task = None
                self.session_id = None
                self.owner = None

    def _receive(self, project_name: str, frame: str | bytes) -> None:
        if isinstance(frame, bytes):
            frame = frame.decode("utf-8", errors="replace")
        try:
            data = json.loads(frame)
        except json.JSONDecodeError:
            logger.warning("log_stream: skipping malformed frame: %r", frame[:200])
            return
        if not isinstance(data, dict):
            logger.warning("log_stream: skipping non-object frame: %r", frame[:200])
            return

        severity = data.get("type")
        if severity not in SEVERITIES:
            severity = "log"
        message = data.get("message")
        if message is None:
            message = ""
        elif not isinstance(message, str):
            message = json.dumps(message)
        self.append(project_name, severity, message, str(data.get("timestamp") or now_iso()))

    # ── history ────────────────────────────────────────────────────────────

    def append(self, project_name: str, severity: LogSeverity, message: str, timestamp: str | None = None) -> LogEntry:
        entry = LogEntry(
            severity=severity,
            message=message,
            timestamp=timestamp or now_iso(),
            sequence=next(self._sequence),
        )
        history = self._history.get(project_name)
        if history is None:
            history = self._history[project_name] = deque(maxlen=self._history_limit)
        history.append(entry)
        for queue in list(self._subscribers):
            queue.put_nowait((project_name, entry))
        return entry

    def history(self, project_name: str) -> list[LogEntry]:
        return list(self._history.get(project_name, ()))

    def clear(self, project_name: str) -> None:
        self._history.pop(project_name, None)

    def subscribe(self) -> asyncio.Queue[tuple[str, LogEntry]]:
        queue: asyncio.Queue[tuple[str, LogEntry]] = asyncio.Queue()
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[tuple[str, LogEntry]]) -> None:
        self._subscribers.discard(queue)
