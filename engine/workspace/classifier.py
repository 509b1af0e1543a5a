"""
Project classifier.

Decides how a project is previewed from the files at its root:
- mobile-app: has a Flutter manifest, compiled remotely
- backend-service: has a Node server entry, compiled remotely
- bundled-frontend: everything else, bundled in the browser sandbox
"""

from __future__ import annotations

from typing import Literal

from engine.workspace.types import Node

ProjectKind = Literal["unset", "bundled-frontend", "backend-service", "mobile-app"]

UNSET = "unset"
BUNDLED_FRONTEND = "bundled-frontend"
BACKEND_SERVICE = "backend-service"
MOBILE_APP = "mobile-app"

REMOTE_KINDS = frozenset({BACKEND_SERVICE, MOBILE_APP})

MOBILE_MANIFEST = "pubspec.yaml"
BACKEND_ENTRY = "server.js"


def _has_root_file(project: Node, name: str) -> bool:
    child = project.child(name)
    return child is not None and not child.is_folder


def classify(project: Node) -> ProjectKind:
    """
    Classify a project. Rules are checked in priority order, first match wins.

    Args:
        project: Project folder node (top-level node of the workspace)

    Returns:
        One of mobile-app, backend-service, bundled-frontend
    """
    if _has_root_file(project, MOBILE_MANIFEST):
        return MOBILE_APP
    if _has_root_file(project, BACKEND_ENTRY):
        return BACKEND_SERVICE
    return BUNDLED_FRONTEND
