"""
Sandbox file adapter.

Turns a project subtree into the flat file map the in-browser bundler
consumes, and picks the entry file and bundler template for it.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from engine.workspace.tree import iter_files
from engine.workspace.types import Node

logger = logging.getLogger(__name__)

# Conventional entry files, in priority order: module entries, then the root
# markup file, then root server files.
ENTRY_FILES: tuple[str, ...] = (
    "/src/main.jsx",
    "/src/main.js",
    "/src/main.tsx",
    "/src/main.ts",
    "/src/index.jsx",
    "/src/index.js",
    "/src/index.tsx",
    "/src/index.ts",
    "/index.html",
    "/server.js",
    "/app.js",
    "/index.js",
)

SOURCE_DIR = "/src/"
SOURCE_EXTENSIONS: tuple[str, ...] = (".js", ".jsx", ".ts", ".tsx")
ROOT_MARKUP = "/index.html"
SERVER_ENTRIES = frozenset({"/server.js", "/app.js"})
MANIFEST = "/package.json"

# Closed set of bundler templates
SCRIPT_TEMPLATE = "react"
TYPED_SCRIPT_TEMPLATE = "react-ts"
MARKUP_TEMPLATE = "static"
SVELTE_TEMPLATE = "svelte"
VUE_TEMPLATE = "vue"
SERVER_TEMPLATE = "node"

BUNDLER_TEMPLATES = frozenset(
    {SCRIPT_TEMPLATE, TYPED_SCRIPT_TEMPLATE, MARKUP_TEMPLATE, SVELTE_TEMPLATE, VUE_TEMPLATE, SERVER_TEMPLATE}
)

_EXTENSION_TEMPLATES: dict[str, str] = {
    ".js": SCRIPT_TEMPLATE,
    ".jsx": SCRIPT_TEMPLATE,
    ".ts": TYPED_SCRIPT_TEMPLATE,
    ".tsx": TYPED_SCRIPT_TEMPLATE,
    ".html": MARKUP_TEMPLATE,
    ".svelte": SVELTE_TEMPLATE,
    ".vue": VUE_TEMPLATE,
}

DEFAULT_DEPENDENCIES: dict[str, dict[str, str]] = {
    SCRIPT_TEMPLATE: {"react": "^18.2.0", "react-dom": "^18.2.0"},
    TYPED_SCRIPT_TEMPLATE: {"react": "^18.2.0", "react-dom": "^18.2.0"},
}


class SandboxConfigError(Exception):
    """The project cannot be bundled: no files, or no usable entry point."""


@dataclass(frozen=True)
class SandboxConfig:
    """Everything the local bundler sandbox needs to render a project."""

    template_id: str
    entry: str
    files: dict[str, str] = field(default_factory=dict)
    dependencies: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "template_id": self.template_id,
            "entry": self.entry,
            "files": self.files,
            "dependencies": self.dependencies,
        }


def normalize_path(raw: str) -> str:
    """Absolute path with duplicate and empty segments collapsed."""
    return "/" + "/".join(part for part in raw.split("/") if part)


def flatten(project: Node) -> dict[str, str]:
    """Map every file under `project` to its absolute path inside the project."""
    files: dict[str, str] = {}
    for path, node in iter_files(project):
        files[normalize_path("/".join(path))] = node.content or ""
    return files


def find_entry_point(files: dict[str, str]) -> str | None:
    for entry in ENTRY_FILES:
        if entry in files:
            return entry
    for path in files:
        if path.startswith(SOURCE_DIR) and path.endswith(SOURCE_EXTENSIONS):
            return path
    if ROOT_MARKUP in files:
        return ROOT_MARKUP
    return None


def detect_bundler_template(files: dict[str, str], entry: str | None) -> str:
    if entry is None:
        return MARKUP_TEMPLATE
    if entry in SERVER_ENTRIES:
        return SERVER_TEMPLATE if MANIFEST in files else MARKUP_TEMPLATE
    dot = entry.rfind(".")
    ext = entry[dot:].lower() if dot > entry.rfind("/") else ""
    return _EXTENSION_TEMPLATES.get(ext, MARKUP_TEMPLATE)


def dependency_manifest(files: dict[str, str], template_id: str) -> dict[str, str]:
    """Dependencies for the sandbox: package.json over per-template defaults."""
    deps = dict(DEFAULT_DEPENDENCIES.get(template_id, {}))
    raw = files.get(MANIFEST)
    if raw is None:
        return deps
    try:
        manifest = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("sandbox: ignoring unparseable %s", MANIFEST)
        return deps
    declared = manifest.get("dependencies") if isinstance(manifest, dict) else None
    if isinstance(declared, dict):
        deps.update({str(k): str(v) for k, v in declared.items()})
    return deps


def build_sandbox_config(project: Node) -> SandboxConfig:
    files = flatten(project)
    if not files:
        raise SandboxConfigError(f"Project {project.name!r} has no files to bundle.")
    entry = find_entry_point(files)
    if entry is None:
        raise SandboxConfigError(
            "Invalid project configuration. Please include a valid entry point (e.g., main.jsx, index.html)."
        )
    template_id = detect_bundler_template(files, entry)
    return SandboxConfig(
        template_id=template_id,
        entry=entry,
        files=files,
        dependencies=dependency_manifest(files, template_id),
    )
