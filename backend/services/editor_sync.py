"""
Editor sync — the debounced commit path from the text-editing surface.

Content-changed events are coalesced per file and committed to the store
with update_file_content once the quiet period elapses.
"""

from __future__ import annotations

import logging

from backend.config import settings
from backend.services.debounce import Debouncer
from engine.workspace.editor import EditorDocument, open_document
from engine.workspace.store import WorkspaceStore, rebase
from engine.workspace.types import Path, ValidationError, as_path

logger = logging.getLogger(__name__)


class EditorSync:
    def __init__(self, store: WorkspaceStore, delay: float | None = None) -> None:
        self.store = store
        self.debouncer = Debouncer(
            settings.EDITOR_DEBOUNCE_SECONDS if delay is None else delay,
            self._commit,
        )
        store.on_rename(self._on_rename)

    def open(self, path: Path) -> EditorDocument:
        """Select a file and return what the editor should display."""
        path = as_path(path)
        self.store.select(path)
        return open_document(self.store.tree, path)

    def content_changed(self, path: Path, content: str) -> None:
        self.debouncer.push(as_path(path), content)

    def flush(self) -> None:
        self.debouncer.flush()

    def close(self) -> None:
        self.debouncer.cancel()

    def _on_rename(self, old_prefix: Path, new_prefix: Path) -> None:
        for key in self.debouncer.pending:
            moved = rebase(key, old_prefix, new_prefix)
            if moved is not None:
                self.debouncer.rekey(key, moved)

    def _commit(self, path: Path, content: str) -> None:
        try:
            self.store.update_file_content(path, content)
        except ValidationError as e:
            logger.warning("editor_sync: dropping edit for %s: %s", "/".join(path), e)
