"""
Preview orchestrator.

Drives the compile/preview lifecycle of workspace projects as an explicit
state machine. Every state change goes through dispatch() with one of the
named transitions below; the only suspension point is the remote compile
request, whose completion is fed back through dispatch() as well.

Per project:  idle → compiling → ready | error   (compiling is re-entrant)

Each CompileRequested issues a fresh staleness token for the project. A
completion carrying any other token is dropped without touching state or the
log channel, so a superseded request can never overwrite a newer result.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any, Literal

from backend.services.compile_client import CompileClient, CompileRequestError, extract_session_id
from backend.services.log_stream import LogEntry, LogStreamBridge
from engine.workspace.classifier import BACKEND_SERVICE, BUNDLED_FRONTEND, MOBILE_APP, UNSET, classify
from engine.workspace.sandbox import SandboxConfig, SandboxConfigError, build_sandbox_config, flatten
from engine.workspace.types import Node

logger = logging.getLogger(__name__)

PreviewStatus = Literal["idle", "compiling", "ready", "error"]

IDLE = "idle"
COMPILING = "compiling"
READY = "ready"
ERROR = "error"


@dataclass(frozen=True)
class PreviewState:
    """Last known preview state of one project."""

    project_name: str
    kind: str = UNSET
    status: PreviewStatus = IDLE
    preview_url: str | None = None
    api_url: str | None = None
    error_message: str | None = None
    session_id: str | None = None
    sandbox: SandboxConfig | None = None
    render_error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_name": self.project_name,
            "kind": self.kind,
            "status": self.status,
            "preview_url": self.preview_url,
            "api_url": self.api_url,
            "error_message": self.error_message,
            "session_id": self.session_id,
            "sandbox": self.sandbox.to_dict() if self.sandbox else None,
            "render_error": self.render_error,
        }


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CompileRequested:
    project: Node


@dataclass(frozen=True)
class CompileSucceeded:
    project_name: str
    token: int
    url: str


@dataclass(frozen=True)
class CompileFailed:
    project_name: str
    token: int
    message: str


@dataclass(frozen=True)
class ActiveProjectChanged:
    project_name: str | None


@dataclass(frozen=True)
class ProjectRemoved:
    project_name: str


Transition = CompileRequested | CompileSucceeded | CompileFailed | ActiveProjectChanged | ProjectRemoved

StateListener = Callable[[PreviewState], None]


class PreviewOrchestrator:
    """The only writer of preview state."""

    def __init__(self, compile_client: CompileClient, log_bridge: LogStreamBridge) -> None:
        self.compile_client = compile_client
        self.log_bridge = log_bridge
        self.active_project: str | None = None
        self._states: dict[str, PreviewState] = {}
        self._tokens: dict[str, int] = {}
        self._token_counter = itertools.count(1)
        self._pending: set[asyncio.Task[None]] = set()
        self._listeners: list[StateListener] = []

    # ── reads ──────────────────────────────────────────────────────────────

    def state_for(self, project_name: str) -> PreviewState:
        return self._states.get(project_name) or PreviewState(project_name=project_name)

    @property
    def active_state(self) -> PreviewState | None:
        if self.active_project is None:
            return None
        return self.state_for(self.active_project)

    @property
    def states(self) -> dict[str, PreviewState]:
        return dict(self._states)

    def logs(self, project_name: str) -> list[LogEntry]:
        return self.log_bridge.history(project_name)

    def current_token(self, project_name: str) -> int | None:
        return self._tokens.get(project_name)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    # ── commands ───────────────────────────────────────────────────────────

    def trigger_compile(self, project: Node) -> asyncio.Task[None] | None:
        """
        Start a compile cycle for `project`.

        Bundled frontends resolve synchronously. Remote kinds return the task
        awaiting the compile service; its outcome is dispatched when it lands.
        """
        state = self.dispatch(CompileRequested(project))
        if state is None or state.status != COMPILING:
            return None

        token = self._tokens[project.name]
        files = flatten(project)
        task = asyncio.create_task(
            self._run_compile(project.name, state.kind, token, files),
            name=f"compile:{project.name}:{token}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def switch_project(self, project_name: str | None) -> PreviewState | None:
        return self.dispatch(ActiveProjectChanged(project_name))

    def remove_project(self, project_name: str) -> None:
        self.dispatch(ProjectRemoved(project_name))

    def record_console(
        self, project_name: str, severity: str, message: str, timestamp: str | None = None
    ) -> LogEntry:
        """Append a sandbox console message to the project's log."""
        return self.log_bridge.append(project_name, severity, message, timestamp)

    def clear_logs(self, project_name: str) -> None:
        self.log_bridge.clear(project_name)

    async def _run_compile(self, project_name: str, kind: str, token: int, files: dict[str, str]) -> None:
        try:
            result = await self.compile_client.compile(kind, project_name, files)
        except CompileRequestError as e:
            self.dispatch(CompileFailed(project_name, token, str(e)))
            return
        except Exception as e:
            logger.exception("preview: compile call for %s raised unexpectedly", project_name)
            self.dispatch(CompileFailed(project_name, token, str(e) or e.__class__.__name__))
            return
        self.dispatch(CompileSucceeded(project_name, token, result.url))

    async def aclose(self) -> None:
        """Drain in-flight compiles and close the log channel."""
        pending = list(self._pending)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        await self.log_bridge.aclose()

    # ── state machine ──────────────────────────────────────────────────────

    def dispatch(self, event: Transition) -> PreviewState | None:
        """
        Apply one transition.

        Returns the resulting state of the affected project, or None when the
        transition was discarded (stale completion) or affects no project.
        """
        if isinstance(event, CompileRequested):
            return self._on_compile_requested(event)
        if isinstance(event, CompileSucceeded):
            return self._on_compile_succeeded(event)
        if isinstance(event, CompileFailed):
            return self._on_compile_failed(event)
        if isinstance(event, ActiveProjectChanged):
            return self._on_active_project_changed(event)
        if isinstance(event, ProjectRemoved):
            return self._on_project_removed(event)
        raise TypeError(f"Unknown transition: {event!r}")

    def _on_compile_requested(self, event: CompileRequested) -> PreviewState:
        project = event.project
        name = project.name

        token = next(self._token_counter)
        self._tokens[name] = token
        self.log_bridge.close()
        self.log_bridge.clear(name)
        self.active_project = name

        kind = classify(project)
        logger.info("preview: compile requested for %s (%s), token %d", name, kind, token)

        if kind != BUNDLED_FRONTEND:
            return self._set(PreviewState(project_name=name, kind=kind, status=COMPILING))

        try:
            sandbox = build_sandbox_config(project)
        except SandboxConfigError as e:
            logger.warning("preview: invalid sandbox configuration for %s: %s", name, e)
            return self._set(PreviewState(project_name=name, kind=kind, status=READY, render_error=str(e)))
        return self._set(PreviewState(project_name=name, kind=kind, status=READY, sandbox=sandbox))

    def _is_stale(self, project_name: str, token: int) -> bool:
        if self._tokens.get(project_name) != token:
            logger.debug("preview: discarding stale result for %s (token %d)", project_name, token)
            return True
        return False

    def _on_compile_succeeded(self, event: CompileSucceeded) -> PreviewState | None:
        name = event.project_name
        if self._is_stale(name, event.token):
            return None
        state = self.state_for(name)
        session_id = extract_session_id(event.url)
        state = replace(
            state,
            status=READY,
            preview_url=event.url if state.kind == MOBILE_APP else None,
            api_url=event.url if state.kind == BACKEND_SERVICE else None,
            error_message=None,
            session_id=session_id,
        )
        self._set(state)
        if session_id is None:
            logger.warning("preview: no session id in %s for %s", event.url, name)
        elif name == self.active_project:
            self.log_bridge.open(session_id, name)
        return state

    def _on_compile_failed(self, event: CompileFailed) -> PreviewState | None:
        name = event.project_name
        if self._is_stale(name, event.token):
            return None
        logger.info("preview: compile failed for %s: %s", name, event.message)
        self.log_bridge.append(name, "error", event.message)
        return self._set(
            replace(
                self.state_for(name),
                status=ERROR,
                preview_url=None,
                api_url=None,
                error_message=event.message,
                session_id=None,
            )
        )

    def _on_active_project_changed(self, event: ActiveProjectChanged) -> PreviewState | None:
        name = event.project_name
        if name == self.active_project:
            return self.active_state
        self.active_project = name
        if self.log_bridge.owner is not None and self.log_bridge.owner != name:
            self.log_bridge.close()
        if name is None:
            return None
        state = self.state_for(name)
        if state.status == READY and state.session_id and not self.log_bridge.is_open:
            self.log_bridge.open(state.session_id, name)
        return state

    def _on_project_removed(self, event: ProjectRemoved) -> None:
        # Dropping the token turns any in-flight completion into a stale one
        name = event.project_name
        self._states.pop(name, None)
        self._tokens.pop(name, None)
        if self.log_bridge.owner == name:
            self.log_bridge.close()
        self.log_bridge.clear(name)
        if self.active_project == name:
            self.active_project = None
        logger.info("preview: forgot removed project %s", name)
        return None

    def _set(self, state: PreviewState) -> PreviewState:
        self._states[state.project_name] = state
        for listener in list(self._listeners):
            listener(state)
        return state
