"""Workspace models — tree nodes, mutations, selection, editor documents."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from engine.workspace.types import Node


class NodeModel(BaseModel):
    """A file or folder as it travels over the API."""

    name: str = Field(min_length=1, max_length=255)
    kind: Literal["file", "folder"] = "file"
    content: str | None = None
    children: list[NodeModel] = Field(default_factory=list)

    def to_node(self) -> Node:
        if self.kind == "folder":
            return Node.folder(self.name, [c.to_node() for c in self.children])
        return Node.file(self.name, self.content or "")

    @classmethod
    def from_node(cls, node: Node) -> NodeModel:
        if node.is_folder:
            return cls(name=node.name, kind="folder", children=[cls.from_node(c) for c in node.children])
        return cls(name=node.name, kind="file", content=node.content)


class WorkspaceResponse(BaseModel):
    """The whole workspace snapshot."""

    version: int
    projects: list[NodeModel]
    selection: list[str] | None = None


class AddNodeRequest(BaseModel):
    model_config = {"extra": "forbid"}

    parent_path: list[str] = Field(default_factory=list)
    node: NodeModel


class DeleteNodeRequest(BaseModel):
    model_config = {"extra": "forbid"}

    parent_path: list[str] = Field(default_factory=list)
    name: str = Field(min_length=1)


class RenameNodeRequest(BaseModel):
    model_config = {"extra": "forbid"}

    parent_path: list[str] = Field(default_factory=list)
    old_name: str = Field(min_length=1)
    new_name: str = Field(min_length=1)


class UpdateContentRequest(BaseModel):
    model_config = {"extra": "forbid"}

    path: list[str] = Field(min_length=1)
    content: str


class CreateFolderRequest(BaseModel):
    model_config = {"extra": "forbid"}

    parent_path: list[str] = Field(default_factory=list)
    folder_name: str = Field(min_length=1)
    template_id: str = "blank"


class SelectFileRequest(BaseModel):
    model_config = {"extra": "forbid"}

    path: list[str] = Field(min_length=1)


class ContentChangedRequest(BaseModel):
    """A content-changed event from the editor; committed after the quiet period."""

    model_config = {"extra": "forbid"}

    path: list[str] = Field(min_length=1)
    content: str


class EditorDocumentResponse(BaseModel):
    path: list[str]
    language_id: str
    content: str
