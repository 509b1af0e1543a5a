"""
Workbench Workspace — the pure core.

Components:
  tree        — (root, args) → root  (pure, structurally shared)
  store       — holds the current snapshot and selection
  classifier  — project → kind
  sandbox     — project → flat file map, entry point, bundler template
  templates   — static folder templates and the sample workspace
  editor      — file → editor document
"""

from engine.workspace.classifier import classify
from engine.workspace.sandbox import (
    build_sandbox_config,
    detect_bundler_template,
    find_entry_point,
    flatten,
)
from engine.workspace.store import WorkspaceStore
from engine.workspace.types import Node, Selection, ValidationError

__all__ = [
    "Node",
    "Selection",
    "ValidationError",
    "WorkspaceStore",
    "classify",
    "flatten",
    "find_entry_point",
    "detect_bundler_template",
    "build_sandbox_config",
]
