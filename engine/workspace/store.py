"""
Workbench Workspace — Store

Holds the current tree snapshot and the editor selection. Every mutation is
computed by a pure function in engine.workspace.tree and then swapped in with
a single reference assignment, so readers only ever observe a complete old or
a complete new tree.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from engine.workspace import tree
from engine.workspace.types import Node, Path, Selection, ValidationError, as_path, make_root

logger = logging.getLogger(__name__)

Listener = Callable[[Node, Node], None]
RenameListener = Callable[[Path, Path], None]


def rebase(path: Path, old_prefix: Path, new_prefix: Path) -> Path | None:
    """Move `path` from under `old_prefix` to `new_prefix`; None if it is not under it."""
    if path[: len(old_prefix)] != old_prefix:
        return None
    return new_prefix + path[len(old_prefix) :]


class WorkspaceStore:
    """Owns the workspace tree; the only writer of it."""

    def __init__(self, projects: Iterable[Node] = ()) -> None:
        self._root = make_root(tuple(projects))
        self._selection: Selection | None = None
        self._listeners: list[Listener] = []
        self._rename_listeners: list[RenameListener] = []
        self.version = 0

    # ── reads ──────────────────────────────────────────────────────────────

    @property
    def tree(self) -> Node:
        return self._root

    @property
    def projects(self) -> tuple[Node, ...]:
        return self._root.children

    def project(self, name: str) -> Node | None:
        return self._root.child(name)

    def get(self, path: Path) -> Node:
        return tree.resolve(self._root, as_path(path))

    @property
    def selection(self) -> Selection | None:
        return self._selection

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with (old_root, new_root) after each commit."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def on_rename(self, listener: RenameListener) -> Callable[[], None]:
        """Register a listener called with (old_path, new_path) after a committed rename."""
        self._rename_listeners.append(listener)
        return lambda: self._rename_listeners.remove(listener)

    # ── mutations ──────────────────────────────────────────────────────────

    def add_node(self, parent_path: Path, node: Node) -> Node:
        return self._commit(tree.add_node(self._root, as_path(parent_path), node))

    def delete_node(self, parent_path: Path, name: str) -> Node:
        return self._commit(tree.delete_node(self._root, as_path(parent_path), name))

    def rename_node(self, parent_path: Path, old_name: str, new_name: str) -> Node:
        parent_path = as_path(parent_path)
        new_root = tree.rename_node(self._root, parent_path, old_name, new_name)
        if new_root is self._root:
            return new_root
        old_prefix = parent_path + (old_name,)
        new_prefix = parent_path + (new_name,)
        if self._selection is not None:
            moved = rebase(self._selection.path, old_prefix, new_prefix)
            if moved is not None:
                self._selection = Selection(node=self._selection.node, path=moved)
        self._commit(new_root)
        for listener in list(self._rename_listeners):
            listener(old_prefix, new_prefix)
        return new_root

    def update_file_content(self, path: Path, content: str) -> Node:
        return self._commit(tree.update_file_content(self._root, as_path(path), content))

    def create_folder_from_template(self, parent_path: Path, folder_name: str, template_id: str) -> Node:
        return self._commit(
            tree.create_folder_from_template(self._root, as_path(parent_path), folder_name, template_id)
        )

    # ── selection ──────────────────────────────────────────────────────────

    def select(self, path: Path) -> Selection:
        path = as_path(path)
        node = tree.resolve(self._root, path)
        if node.is_folder:
            raise ValidationError(f"Only files can be selected: {'/'.join(path)}")
        self._selection = Selection(node=node, path=path)
        return self._selection

    def clear_selection(self) -> None:
        self._selection = None

    # ── internals ──────────────────────────────────────────────────────────

    def _commit(self, new_root: Node) -> Node:
        old_root = self._root
        if new_root is old_root:
            return old_root
        self._root = new_root
        self.version += 1
        self._refresh_selection()
        logger.debug("workspace: committed version %d", self.version)
        for listener in list(self._listeners):
            listener(old_root, new_root)
        return new_root

    def _refresh_selection(self) -> None:
        if self._selection is None:
            return
        node = tree.find(self._root, self._selection.path)
        if node is None or node.is_folder:
            logger.info("workspace: selection %s no longer exists", "/".join(self._selection.path))
            self._selection = None
        elif node is not self._selection.node:
            self._selection = Selection(node=node, path=self._selection.path)
