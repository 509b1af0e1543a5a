"""
WebSocket endpoint for live preview updates.

Accepts connections at /ws/preview and pushes preview state changes and log
entries as they happen. The client can also drive the workspace through the
same socket.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from backend.context import WorkbenchContext
from backend.services.log_stream import SEVERITIES, LogEntry
from backend.services.preview_orchestrator import PreviewState
from engine.workspace.types import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["websocket"])


def _hello(ctx: WorkbenchContext) -> dict[str, Any]:
    orchestrator = ctx.orchestrator
    active = orchestrator.active_project
    return {
        "type": "preview.snapshot",
        "active_project": active,
        "states": {name: s.to_dict() for name, s in orchestrator.states.items()},
        "logs": [e.to_dict() for e in orchestrator.logs(active)] if active else [],
    }


def _handle_client_message(ctx: WorkbenchContext, msg: dict[str, Any]) -> dict[str, Any] | None:
    """Apply one client command; returns an error payload or None."""
    msg_type = msg.get("type")

    if msg_type == "switch":
        name = msg.get("project_name")
        if name is not None and ctx.store.project(name) is None:
            return {"type": "error", "error": f"Project '{name}' not found"}
        ctx.orchestrator.switch_project(name)
        return None

    if msg_type == "compile":
        name = msg.get("project_name")
        project = ctx.store.project(name) if name else None
        if project is None:
            return {"type": "error", "error": f"Project '{name}' not found"}
        ctx.editor.flush()
        ctx.orchestrator.trigger_compile(ctx.store.project(name))
        return None

    if msg_type == "content.changed":
        path = msg.get("path")
        content = msg.get("content")
        if (
            not isinstance(path, list)
            or not path
            or not all(isinstance(p, str) for p in path)
            or not isinstance(content, str)
        ):
            return {"type": "error", "error": "path and content are required"}
        ctx.editor.content_changed(path, content)
        return None

    if msg_type == "console":
        name = msg.get("project_name")
        severity = msg.get("severity", "log")
        message = msg.get("message")
        if not name or ctx.store.project(name) is None:
            return {"type": "error", "error": f"Project '{name}' not found"}
        if severity not in SEVERITIES or not isinstance(message, str):
            return {"type": "error", "error": "severity and message are invalid"}
        timestamp = msg.get("timestamp")
        ctx.orchestrator.record_console(name, severity, message, timestamp if isinstance(timestamp, str) else None)
        return None

    if msg_type == "logs.clear":
        name = msg.get("project_name")
        if not name or ctx.store.project(name) is None:
            return {"type": "error", "error": f"Project '{name}' not found"}
        ctx.orchestrator.clear_logs(name)
        return None

    logger.warning("ws: unknown message type %r", msg_type)
    return {"type": "error", "error": f"Unknown message type: {msg_type}"}


@router.websocket("/ws/preview")
async def preview_websocket(websocket: WebSocket) -> None:
    """
    Push preview updates to the client.

    Protocol:
      Client → Server:  {"type": "switch", "project_name": "..."}
                        {"type": "compile", "project_name": "..."}
                        {"type": "content.changed", "path": [...], "content": "..."}
                        {"type": "console", "project_name": "...", "severity": "log", "message": "..."}
                        {"type": "logs.clear", "project_name": "..."}
      Server → Client:  {"type": "preview.snapshot", ...}   (once, on connect)
                        {"type": "preview.state", "state": {...}}
                        {"type": "log.entry", "project_name": "...", "entry": {...}}
                        {"type": "error", "error": "..."}
    """
    ctx: WorkbenchContext = websocket.app.state.context
    await websocket.accept()
    logger.info("ws: preview client connected")

    outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
    outbox.put_nowait(_hello(ctx))

    def on_state(state: PreviewState) -> None:
        outbox.put_nowait({"type": "preview.state", "state": state.to_dict()})

    unsubscribe_state = ctx.orchestrator.subscribe(on_state)
    log_queue = ctx.log_bridge.subscribe()

    async def forward_logs() -> None:
        while True:
            project_name, entry = await log_queue.get()
            outbox.put_nowait(_log_message(project_name, entry))

    async def send_loop() -> None:
        while True:
            await websocket.send_text(json.dumps(await outbox.get()))

    tasks = [asyncio.create_task(forward_logs()), asyncio.create_task(send_loop())]

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("ws: malformed message from client: %r", raw[:200])
                continue
            if not isinstance(msg, dict):
                continue
            try:
                error = _handle_client_message(ctx, msg)
            except ValidationError as e:
                error = {"type": "error", "error": str(e)}
            if error is not None:
                outbox.put_nowait(error)
    except WebSocketDisconnect:
        logger.info("ws: preview client disconnected")
    finally:
        unsubscribe_state()
        ctx.log_bridge.unsubscribe(log_queue)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


def _log_message(project_name: str, entry: LogEntry) -> dict[str, Any]:
    return {"type": "log.entry", "project_name": project_name, "entry": entry.to_dict()}
