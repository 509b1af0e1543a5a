"""Tests for the debounced editor commit path."""

from __future__ import annotations

import asyncio

import pytest

from backend.services.editor_sync import EditorSync
from engine.workspace.store import WorkspaceStore
from engine.workspace.templates import initial_projects
from engine.workspace.types import ValidationError

pytestmark = pytest.mark.asyncio

APP = ("my-project", "src", "App.jsx")


@pytest.fixture
def store():
    return WorkspaceStore(initial_projects())


@pytest.fixture
def editor(store):
    return EditorSync(store, delay=0.02)


async def test_open_selects_and_returns_document(editor, store):
    doc = editor.open(APP)
    assert doc.language_id == "javascript"
    assert doc.content == store.get(APP).content
    assert store.selection.path == APP


async def test_open_accepts_string_path(editor, store):
    editor.open("my-project/src/App.jsx")
    assert store.selection.path == APP


async def test_open_folder_rejected(editor, store):
    with pytest.raises(ValidationError):
        editor.open(("my-project", "src"))
    assert store.selection is None


async def test_keystrokes_commit_once(editor, store):
    versions = []
    store.subscribe(lambda old, new: versions.append(store.version))
    for text in ("a", "ab", "abc"):
        editor.content_changed(APP, text)
    assert store.get(APP).content != "abc"

    await asyncio.sleep(0.06)
    assert store.get(APP).content == "abc"
    assert len(versions) == 1


async def test_selection_tracks_committed_content(editor, store):
    editor.open(APP)
    editor.content_changed(APP, "export default 1;")
    editor.flush()
    assert store.selection.node.content == "export default 1;"


async def test_edit_for_deleted_file_is_dropped(editor, store):
    editor.content_changed(APP, "late edit")
    store.delete_node(("my-project", "src"), "App.jsx")
    version = store.version
    editor.flush()
    assert store.version == version


async def test_close_discards_pending(editor, store):
    before = store.get(APP).content
    editor.content_changed(APP, "never")
    editor.close()
    await asyncio.sleep(0.06)
    assert store.get(APP).content == before


async def test_pending_edit_follows_file_rename(editor, store):
    editor.content_changed(("web-project", "index.html"), "<p>typed</p>")
    store.rename_node(("web-project",), "index.html", "home.html")
    await asyncio.sleep(0.06)

    assert store.get(("web-project", "home.html")).content == "<p>typed</p>"


async def test_pending_edit_follows_folder_rename(editor, store):
    editor.content_changed(APP, "export default 2;")
    store.rename_node(("my-project",), "src", "lib")
    editor.flush()

    assert store.get(("my-project", "lib", "App.jsx")).content == "export default 2;"


async def test_unrelated_rename_leaves_pending_edit(editor, store):
    editor.content_changed(APP, "x")
    store.rename_node(("web-project",), "index.html", "home.html")
    assert editor.debouncer.pending == [APP]
