"""
Workbench Workspace — Template Catalog

Static folder templates used by create_folder_from_template, plus the sample
workspace a fresh session starts with. Entries are plain dicts; every lookup
builds brand-new Node values so callers never share template state.
"""

from __future__ import annotations

from typing import Any

from engine.workspace.types import Node, ValidationError

_REACT_MAIN = """import React from 'react';
import ReactDOM from 'react-dom/client';
import App from './App';

ReactDOM.createRoot(document.getElementById('root')).render(
  <React.StrictMode>
    <App />
  </React.StrictMode>
);"""

_REACT_INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>React App</title>
</head>
<body>
  <div id="root"></div>
  <script type="module" src="/src/main.jsx"></script>
</body>
</html>"""

_REACT_PACKAGE = """{
  "name": "react-app",
  "version": "1.0.0",
  "private": true,
  "dependencies": {
    "react": "^18.2.0",
    "react-dom": "^18.2.0"
  },
  "devDependencies": {
    "vite": "^4.0.0"
  }
}"""

_EXPRESS_SERVER = """const express = require('express');
const app = express();
app.use(express.json());

app.get('/api', (req, res) => res.json({ message: 'Hello from API root!' }));
app.get('/api/hello', (req, res) => res.json({ message: 'Hello from /api/hello!' }));
app.get('/', (req, res) => res.send('Welcome to your Express app!'));

const PORT = process.env.PORT || 3000;
app.listen(PORT, '0.0.0.0', function() {
  console.log('Server running on port ' + PORT);
});"""

_EXPRESS_PACKAGE = """{
  "name": "express-app",
  "version": "1.0.0",
  "main": "server.js",
  "dependencies": {
    "express": "^4.17.1"
  }
}"""

_FLUTTER_MAIN = """import 'package:flutter/material.dart';

void main() => runApp(const MyApp());

class MyApp extends StatelessWidget {
  const MyApp({super.key});

  @override
  Widget build(BuildContext context) {
    return MaterialApp(
      home: Scaffold(
        appBar: AppBar(title: const Text('Flutter App')),
        body: const Center(child: Text('Hello, Flutter!')),
      ),
    );
  }
}"""

_FLUTTER_PUBSPEC = """name: flutter_app
description: A new Flutter project.
publish_to: 'none'
version: 1.0.0+1

environment:
  sdk: '>=2.18.0 <3.0.0'

dependencies:
  flutter:
    sdk: flutter

flutter:
  uses-material-design: true
"""

_STATIC_INDEX_HTML = """<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>Static Site</title>
  <link rel="stylesheet" href="/styles.css" />
</head>
<body>
  <h1>Hello, Static HTML!</h1>
  <script src="/script.js"></script>
</body>
</html>"""


def _file(name: str, content: str) -> dict[str, Any]:
    return {"name": name, "kind": "file", "content": content}


def _folder(name: str, children: list[dict[str, Any]]) -> dict[str, Any]:
    return {"name": name, "kind": "folder", "children": children}


TEMPLATES: dict[str, list[dict[str, Any]]] = {
    "blank": [],
    "express": [
        _file("server.js", _EXPRESS_SERVER),
        _file("package.json", _EXPRESS_PACKAGE),
    ],
    "react": [
        _folder(
            "src",
            [
                _file("App.jsx", "import React from 'react';\n\nexport default function App() {\n  return <div>Hello, React!</div>;\n}"),
                _file("main.jsx", _REACT_MAIN),
            ],
        ),
        _file("index.html", _REACT_INDEX_HTML),
        _file("package.json", _REACT_PACKAGE),
    ],
    "flutter": [
        _folder("lib", [_file("main.dart", _FLUTTER_MAIN)]),
        _file("pubspec.yaml", _FLUTTER_PUBSPEC),
    ],
    "html": [
        _file("index.html", _STATIC_INDEX_HTML),
        _file("styles.css", "body {\n  font-family: Arial, sans-serif;\n  text-align: center;\n  margin: 2rem;\n}"),
        _file("script.js", "console.log('Hello from static JavaScript!');"),
    ],
}


def template_ids() -> list[str]:
    return sorted(TEMPLATES)


def template_children(template_id: str) -> tuple[Node, ...]:
    """Build fresh child nodes for a catalog template."""
    try:
        entries = TEMPLATES[template_id]
    except KeyError:
        raise ValidationError(f"Unknown template: {template_id!r}") from None
    return tuple(Node.from_dict(e) for e in entries)


def initial_projects() -> list[Node]:
    """The sample workspace: one project per supported kind."""
    return [
        Node.folder("my-project", template_children("react")),
        Node.folder("web-project", template_children("html")),
        Node.folder("flutter-project", template_children("flutter")),
        Node.folder("express-api", template_children("express")),
    ]
