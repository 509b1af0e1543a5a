"""Workspace routes — tree CRUD, templates, selection, editor documents."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from backend.context import WorkbenchContext, get_context
from backend.models.workspace import (
    AddNodeRequest,
    ContentChangedRequest,
    CreateFolderRequest,
    DeleteNodeRequest,
    EditorDocumentResponse,
    NodeModel,
    RenameNodeRequest,
    SelectFileRequest,
    UpdateContentRequest,
    WorkspaceResponse,
)
from engine.workspace.editor import open_document
from engine.workspace.templates import template_ids
from engine.workspace.types import as_path

router = APIRouter(prefix="/api/workspace", tags=["workspace"])


def _snapshot(ctx: WorkbenchContext) -> WorkspaceResponse:
    selection = ctx.store.selection
    return WorkspaceResponse(
        version=ctx.store.version,
        projects=[NodeModel.from_node(p) for p in ctx.store.projects],
        selection=list(selection.path) if selection else None,
    )


@router.get("", status_code=200)
async def get_workspace(ctx: WorkbenchContext = Depends(get_context)) -> WorkspaceResponse:
    """Return the current tree snapshot."""
    return _snapshot(ctx)


@router.get("/templates", status_code=200)
async def list_templates() -> list[str]:
    return template_ids()


@router.post("/nodes", status_code=201)
async def add_node(req: AddNodeRequest, ctx: WorkbenchContext = Depends(get_context)) -> WorkspaceResponse:
    """Add a file or folder under parent_path."""
    ctx.store.add_node(req.parent_path, req.node.to_node())
    return _snapshot(ctx)


@router.post("/nodes/delete", status_code=200)
async def delete_node(req: DeleteNodeRequest, ctx: WorkbenchContext = Depends(get_context)) -> WorkspaceResponse:
    ctx.store.delete_node(req.parent_path, req.name)
    return _snapshot(ctx)


@router.post("/nodes/rename", status_code=200)
async def rename_node(req: RenameNodeRequest, ctx: WorkbenchContext = Depends(get_context)) -> WorkspaceResponse:
    ctx.store.rename_node(req.parent_path, req.old_name, req.new_name)
    return _snapshot(ctx)


@router.post("/folders", status_code=201)
async def create_folder(req: CreateFolderRequest, ctx: WorkbenchContext = Depends(get_context)) -> WorkspaceResponse:
    """Create a folder pre-populated from a template."""
    ctx.store.create_folder_from_template(req.parent_path, req.folder_name, req.template_id)
    return _snapshot(ctx)


@router.put("/files/content", status_code=200)
async def update_content(req: UpdateContentRequest, ctx: WorkbenchContext = Depends(get_context)) -> WorkspaceResponse:
    """Commit file content immediately, bypassing the editor debounce."""
    ctx.store.update_file_content(req.path, req.content)
    return _snapshot(ctx)


@router.post("/files/changes", status_code=202)
async def content_changed(req: ContentChangedRequest, ctx: WorkbenchContext = Depends(get_context)) -> dict[str, bool]:
    """
    Editor content-changed event.

    Accepted immediately; the store is updated once edits to this file have
    been quiet for the debounce period.
    """
    ctx.editor.content_changed(req.path, req.content)
    return {"accepted": True}


@router.post("/selection", status_code=200)
async def select_file(req: SelectFileRequest, ctx: WorkbenchContext = Depends(get_context)) -> EditorDocumentResponse:
    """Select a file and return it as an editor document."""
    doc = ctx.editor.open(req.path)
    return EditorDocumentResponse(path=req.path, language_id=doc.language_id, content=doc.content)


@router.delete("/selection", status_code=204)
async def clear_selection(ctx: WorkbenchContext = Depends(get_context)) -> None:
    ctx.store.clear_selection()


@router.get("/files", status_code=200)
async def get_document(
    path: str = Query(min_length=1),
    ctx: WorkbenchContext = Depends(get_context),
) -> EditorDocumentResponse:
    """Read a file as an editor document without changing the selection."""
    parts = as_path(path)
    doc = open_document(ctx.store.tree, parts)
    return EditorDocumentResponse(path=list(parts), language_id=doc.language_id, content=doc.content)
