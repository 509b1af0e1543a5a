"""
Workspace kernel test configuration.

Shared fixtures: a small two-project workspace built from plain nodes.
"""

import pytest

from engine.workspace.types import Node, make_root


@pytest.fixture
def react_project():
    return Node.folder(
        "my-project",
        [
            Node.file("index.html", "<div id='root'></div>"),
            Node.folder(
                "src",
                [
                    Node.file("App.jsx", "export default function App() {}"),
                    Node.file("main.jsx", "import App from './App';"),
                ],
            ),
            Node.file("package.json", '{"dependencies": {"react": "^18.2.0"}}'),
        ],
    )


@pytest.fixture
def api_project():
    return Node.folder(
        "express-api",
        [
            Node.file("server.js", "app.listen(3000)"),
            Node.file("package.json", '{"dependencies": {"express": "^4.18.2"}}'),
        ],
    )


@pytest.fixture
def root(react_project, api_project):
    return make_root([react_project, api_project])
