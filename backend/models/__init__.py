"""
Pydantic models for Workbench.

All API data shapes defined here. No imports from routes.
"""

from backend.models.preview import (
    ActivePreviewResponse,
    ConsoleMessageRequest,
    LogEntryResponse,
    PreviewStateResponse,
    SwitchProjectRequest,
)
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

__all__ = [
    # Workspace models
    "NodeModel",
    "WorkspaceResponse",
    "AddNodeRequest",
    "DeleteNodeRequest",
    "RenameNodeRequest",
    "UpdateContentRequest",
    "CreateFolderRequest",
    "SelectFileRequest",
    "ContentChangedRequest",
    "EditorDocumentResponse",
    # Preview models
    "PreviewStateResponse",
    "LogEntryResponse",
    "SwitchProjectRequest",
    "ActivePreviewResponse",
    "ConsoleMessageRequest",
]
