"""Editor contract: what the text-editing surface is handed for a file."""

from __future__ import annotations

from dataclasses import dataclass

from engine.workspace.tree import resolve
from engine.workspace.types import Node, Path, ValidationError

_LANGUAGES: dict[str, str] = {
    "html": "html",
    "css": "css",
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "json": "json",
    "dart": "dart",
    "yaml": "yaml",
    "yml": "yaml",
    "md": "markdown",
}


@dataclass(frozen=True)
class EditorDocument:
    language_id: str
    content: str


def language_for_file(file_name: str) -> str:
    if "." not in file_name:
        return "plaintext"
    ext = file_name.rsplit(".", 1)[1].lower()
    return _LANGUAGES.get(ext, "plaintext")


def open_document(root: Node, path: Path) -> EditorDocument:
    node = resolve(root, path)
    if node.is_folder:
        raise ValidationError(f"Cannot open folder {'/'.join(path)} in the editor")
    return EditorDocument(language_id=language_for_file(node.name), content=node.content or "")
