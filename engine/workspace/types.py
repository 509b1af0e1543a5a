"""
Workbench Workspace — Shared Types

Data classes used across the tree operations, store, classifier and sandbox
adapter. Nodes are immutable values: a mutation produces a new root whose
unaffected subtrees are the very same objects as in the old root.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Literal

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

FILE = "file"
FOLDER = "folder"

NodeKind = Literal["file", "folder"]

# A path is the name sequence from a project root (inclusive) down to a node.
Path = tuple[str, ...]


class ValidationError(Exception):
    """Raised when a tree operation is rejected before any mutation."""


def validate_name(name: str) -> None:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Node name must be a non-empty string")
    if "/" in name:
        raise ValidationError(f"Node name may not contain '/': {name!r}")


def as_path(path: Any) -> Path:
    """Coerce a list or a slash-joined string into a Path tuple."""
    if isinstance(path, str):
        return tuple(part for part in path.split("/") if part)
    return tuple(path)


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Node:
    """
    A file or folder in the workspace.

    Files carry `content` and never have children. Folders carry an ordered
    tuple of children with unique names.
    """

    name: str
    kind: NodeKind = FILE
    content: str | None = None
    children: tuple[Node, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        validate_name(self.name)
        if self.kind not in (FILE, FOLDER):
            raise ValidationError(f"Unknown node kind: {self.kind!r}")
        if self.kind == FILE:
            if self.children:
                raise ValidationError(f"File {self.name!r} cannot have children")
            if self.content is None:
                object.__setattr__(self, "content", "")
        else:
            if self.content is not None:
                raise ValidationError(f"Folder {self.name!r} cannot have content")
            if not isinstance(self.children, tuple):
                object.__setattr__(self, "children", tuple(self.children))
            seen: set[str] = set()
            for child in self.children:
                if child.name in seen:
                    raise ValidationError(f"Duplicate name {child.name!r} in folder {self.name!r}")
                seen.add(child.name)

    @classmethod
    def file(cls, name: str, content: str = "") -> Node:
        return cls(name=name, kind=FILE, content=content)

    @classmethod
    def folder(cls, name: str, children: tuple[Node, ...] | list[Node] = ()) -> Node:
        return cls(name=name, kind=FOLDER, children=tuple(children))

    @property
    def is_folder(self) -> bool:
        return self.kind == FOLDER

    def child(self, name: str) -> Node | None:
        for c in self.children:
            if c.name == name:
                return c
        return None

    def with_children(self, children: tuple[Node, ...]) -> Node:
        return replace(self, children=children)

    def to_dict(self) -> dict[str, Any]:
        if self.kind == FILE:
            return {"name": self.name, "kind": FILE, "content": self.content}
        return {
            "name": self.name,
            "kind": FOLDER,
            "children": [c.to_dict() for c in self.children],
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Node:
        kind = d.get("kind")
        if kind is None:
            kind = FOLDER if d.get("is_folder") or "children" in d else FILE
        if kind == FOLDER:
            return cls.folder(d["name"], [cls.from_dict(c) for c in d.get("children") or []])
        return cls.file(d["name"], d.get("content") or "")


# The workspace root is a nameless container folder whose children are the
# projects. It is never exposed as a node of its own.
ROOT_NAME = "<workspace>"


def make_root(projects: tuple[Node, ...] | list[Node] = ()) -> Node:
    return Node(name=ROOT_NAME, kind=FOLDER, children=tuple(projects))


@dataclass(frozen=True)
class Selection:
    """The file currently open in the editor."""

    node: Node
    path: Path

    def to_dict(self) -> dict[str, Any]:
        return {"path": list(self.path), "node": self.node.to_dict()}
