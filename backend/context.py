"""
Workbench context — the explicitly constructed set of session singletons.

Built once in the application lifespan and handed to routes through the
get_context dependency.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from backend.services.compile_client import CompileClient
from backend.services.editor_sync import EditorSync
from backend.services.log_stream import LogStreamBridge
from backend.services.preview_orchestrator import PreviewOrchestrator
from engine.workspace.store import WorkspaceStore
from engine.workspace.templates import initial_projects
from engine.workspace.types import Node


@dataclass
class WorkbenchContext:
    store: WorkspaceStore
    compile_client: CompileClient
    log_bridge: LogStreamBridge
    orchestrator: PreviewOrchestrator
    editor: EditorSync

    def __post_init__(self) -> None:
        self.store.subscribe(self._prune_removed_projects)

    def _prune_removed_projects(self, old_root: Node, new_root: Node) -> None:
        # A renamed project is gone under its old name
        remaining = {p.name for p in new_root.children}
        for project in old_root.children:
            if project.name not in remaining:
                self.orchestrator.remove_project(project.name)

    async def aclose(self) -> None:
        self.editor.flush()
        await self.orchestrator.aclose()
        await self.compile_client.aclose()


def create_context(
    projects: list[Node] | None = None,
    compile_client: CompileClient | None = None,
    log_bridge: LogStreamBridge | None = None,
    debounce_delay: float | None = None,
) -> WorkbenchContext:
    store = WorkspaceStore(initial_projects() if projects is None else projects)
    compile_client = compile_client or CompileClient()
    log_bridge = log_bridge or LogStreamBridge()
    return WorkbenchContext(
        store=store,
        compile_client=compile_client,
        log_bridge=log_bridge,
        orchestrator=PreviewOrchestrator(compile_client, log_bridge),
        editor=EditorSync(store, delay=debounce_delay),
    )


def get_context(request: Request) -> WorkbenchContext:
    return request.app.state.context
