"""
Tests for the project classifier.

Validates the fixed priority order: mobile manifest, then backend entry,
then the in-browser bundler fallback.
"""

from engine.workspace.classifier import BACKEND_SERVICE, BUNDLED_FRONTEND, MOBILE_APP, classify
from engine.workspace.templates import initial_projects
from engine.workspace.types import Node


def test_pubspec_routes_to_mobile():
    project = Node.folder("app", [Node.file("pubspec.yaml", "name: app")])
    assert classify(project) == MOBILE_APP


def test_server_js_routes_to_backend(api_project):
    assert classify(api_project) == BACKEND_SERVICE


def test_everything_else_is_bundled(react_project):
    assert classify(react_project) == BUNDLED_FRONTEND


def test_empty_project_is_bundled():
    assert classify(Node.folder("empty")) == BUNDLED_FRONTEND


def test_mobile_wins_over_backend():
    project = Node.folder("both", [Node.file("server.js"), Node.file("pubspec.yaml")])
    assert classify(project) == MOBILE_APP


def test_only_root_files_count():
    project = Node.folder("nested", [Node.folder("api", [Node.file("server.js")])])
    assert classify(project) == BUNDLED_FRONTEND


def test_folder_named_like_marker_does_not_count():
    project = Node.folder("odd", [Node.folder("pubspec.yaml")])
    assert classify(project) == BUNDLED_FRONTEND


def test_sample_workspace_kinds():
    kinds = {p.name: classify(p) for p in initial_projects()}
    assert kinds == {
        "my-project": BUNDLED_FRONTEND,
        "web-project": BUNDLED_FRONTEND,
        "flutter-project": MOBILE_APP,
        "express-api": BACKEND_SERVICE,
    }
