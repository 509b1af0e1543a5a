"""Preview routes — trigger compiles, switch the active project, read logs."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from backend.context import WorkbenchContext, get_context
from backend.models.preview import (
    ActivePreviewResponse,
    ConsoleMessageRequest,
    LogEntryResponse,
    PreviewStateResponse,
    SwitchProjectRequest,
)

router = APIRouter(prefix="/api/preview", tags=["preview"])


def _require_project(ctx: WorkbenchContext, project_name: str) -> None:
    if ctx.store.project(project_name) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found.")


@router.get("", status_code=200)
async def get_active(ctx: WorkbenchContext = Depends(get_context)) -> ActivePreviewResponse:
    """Active project plus every retained preview state."""
    orchestrator = ctx.orchestrator
    active = orchestrator.active_state
    return ActivePreviewResponse(
        active_project=orchestrator.active_project,
        state=PreviewStateResponse.from_state(active) if active else None,
        states={name: PreviewStateResponse.from_state(s) for name, s in orchestrator.states.items()},
    )


@router.post("/active", status_code=200)
async def switch_project(req: SwitchProjectRequest, ctx: WorkbenchContext = Depends(get_context)) -> ActivePreviewResponse:
    if req.project_name is not None:
        _require_project(ctx, req.project_name)
    ctx.orchestrator.switch_project(req.project_name)
    return await get_active(ctx)


@router.post("/{project_name}/compile", status_code=202)
async def trigger_compile(project_name: str, ctx: WorkbenchContext = Depends(get_context)) -> PreviewStateResponse:
    """
    Start a compile for the project's current snapshot.

    Bundled frontends come back ready; remote kinds come back compiling and
    settle asynchronously (poll GET /api/preview/{project_name} or listen on
    /ws/preview).
    """
    project = ctx.store.project(project_name)
    if project is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found.")
    ctx.editor.flush()
    project = ctx.store.project(project_name)
    ctx.orchestrator.trigger_compile(project)
    return PreviewStateResponse.from_state(ctx.orchestrator.state_for(project_name))


@router.get("/{project_name}", status_code=200)
async def get_state(project_name: str, ctx: WorkbenchContext = Depends(get_context)) -> PreviewStateResponse:
    _require_project(ctx, project_name)
    return PreviewStateResponse.from_state(ctx.orchestrator.state_for(project_name))


@router.get("/{project_name}/logs", status_code=200)
async def get_logs(project_name: str, ctx: WorkbenchContext = Depends(get_context)) -> list[LogEntryResponse]:
    _require_project(ctx, project_name)
    return [LogEntryResponse.from_entry(e) for e in ctx.orchestrator.logs(project_name)]


@router.post("/{project_name}/logs", status_code=201)
async def post_console_message(
    project_name: str,
    req: ConsoleMessageRequest,
    ctx: WorkbenchContext = Depends(get_context),
) -> LogEntryResponse:
    """Append a sandbox console message to the project's terminal log."""
    _require_project(ctx, project_name)
    entry = ctx.orchestrator.record_console(project_name, req.type, req.message, req.timestamp)
    return LogEntryResponse.from_entry(entry)


@router.delete("/{project_name}/logs", status_code=204)
async def clear_logs(project_name: str, ctx: WorkbenchContext = Depends(get_context)) -> None:
    _require_project(ctx, project_name)
    ctx.orchestrator.clear_logs(project_name)
