"""
Workbench Workspace — Tree Operations

Pure functions: (root, args) → new root

Every operation either raises ValidationError before touching anything or
returns a new root. Only the spine from the root down to the edited folder is
rebuilt; every other subtree is shared with the old root. An operation that
changes nothing returns the old root object itself.

Paths are addressed from the workspace root: the first segment is the project
name, () is the workspace root. Traversal is fail-fast: a missing segment or a
segment that names a file raises ValidationError.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import replace

from engine.workspace.templates import template_children
from engine.workspace.types import Node, Path, ValidationError, validate_name


def _fmt(path: Path) -> str:
    return "/".join(path) or "/"


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def resolve(root: Node, path: Path) -> Node:
    """Return the node at `path`, raising ValidationError if it does not exist."""
    node = root
    for depth, part in enumerate(path):
        if not node.is_folder:
            raise ValidationError(f"Not a folder: {_fmt(path[:depth])}")
        child = node.child(part)
        if child is None:
            raise ValidationError(f"Path not found: {_fmt(path[: depth + 1])}")
        node = child
    return node


def find(root: Node, path: Path) -> Node | None:
    """Like resolve(), but returns None instead of raising."""
    try:
        return resolve(root, path)
    except ValidationError:
        return None


def iter_files(node: Node, prefix: Path = ()) -> Iterator[tuple[Path, Node]]:
    """Yield (path, file_node) for every file below `node`, depth-first in child order."""
    for child in node.children:
        child_path = prefix + (child.name,)
        if child.is_folder:
            yield from iter_files(child, child_path)
        else:
            yield child_path, child


def _replace_at(node: Node, path: Path, fn: Callable[[Node], Node], walked: Path = ()) -> Node:
    """Rebuild the spine down to `path`, replacing the folder there with fn(folder)."""
    if not path:
        return fn(node)
    if not node.is_folder:
        raise ValidationError(f"Not a folder: {_fmt(walked)}")
    head = path[0]
    child = node.child(head)
    if child is None:
        raise ValidationError(f"Path not found: {_fmt(walked + (head,))}")
    new_child = _replace_at(child, path[1:], fn, walked + (head,))
    if new_child is child:
        return node
    return node.with_children(tuple(new_child if c is child else c for c in node.children))


def _require_folder(node: Node, path: Path) -> None:
    if not node.is_folder:
        raise ValidationError(f"Not a folder: {_fmt(path)}")


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def add_node(root: Node, parent_path: Path, node: Node) -> Node:
    """Append `node` under the folder at `parent_path`."""
    parent_path = tuple(parent_path)

    def _add(parent: Node) -> Node:
        _require_folder(parent, parent_path)
        if parent.child(node.name) is not None:
            raise ValidationError(f"{node.name!r} already exists in {_fmt(parent_path)}")
        if not parent_path and not node.is_folder:
            raise ValidationError(f"Top-level node {node.name!r} must be a project folder")
        return parent.with_children(parent.children + (node,))

    return _replace_at(root, parent_path, _add)


def delete_node(root: Node, parent_path: Path, name: str) -> Node:
    """Remove the child called `name`; a missing child is a no-op."""
    parent_path = tuple(parent_path)

    def _delete(parent: Node) -> Node:
        _require_folder(parent, parent_path)
        if parent.child(name) is None:
            return parent
        return parent.with_children(tuple(c for c in parent.children if c.name != name))

    return _replace_at(root, parent_path, _delete)


def rename_node(root: Node, parent_path: Path, old_name: str, new_name: str) -> Node:
    """Rename a child in place, keeping its position among its siblings."""
    if new_name == old_name:
        return root
    validate_name(new_name)
    parent_path = tuple(parent_path)

    def _rename(parent: Node) -> Node:
        _require_folder(parent, parent_path)
        target = parent.child(old_name)
        if target is None:
            raise ValidationError(f"Path not found: {_fmt(parent_path + (old_name,))}")
        if parent.child(new_name) is not None:
            raise ValidationError(f"{new_name!r} already exists in {_fmt(parent_path)}")
        renamed = replace(target, name=new_name)
        return parent.with_children(tuple(renamed if c is target else c for c in parent.children))

    return _replace_at(root, parent_path, _rename)


def update_file_content(root: Node, path: Path, content: str) -> Node:
    """Replace the content of the file at `path`."""
    path = tuple(path)
    if not path:
        raise ValidationError("Cannot edit the workspace root")
    parent_path, name = path[:-1], path[-1]

    def _update(parent: Node) -> Node:
        target = parent.child(name) if parent.is_folder else None
        if target is None:
            raise ValidationError(f"Path not found: {_fmt(path)}")
        if target.is_folder:
            raise ValidationError(f"Cannot edit folder {_fmt(path)} as a file")
        if target.content == content:
            return parent
        updated = replace(target, content=content)
        return parent.with_children(tuple(updated if c is target else c for c in parent.children))

    return _replace_at(root, parent_path, _update)


def create_folder_from_template(root: Node, parent_path: Path, folder_name: str, template_id: str) -> Node:
    """Add a folder pre-populated with a copy of a catalog template."""
    folder = Node.folder(folder_name, template_children(template_id))
    return add_node(root, parent_path, folder)
