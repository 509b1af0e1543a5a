"""
Workspace Tree — pure operation tests.

Each operation returns a new root or raises ValidationError; the old root is
never touched and unaffected subtrees are shared.
"""

import pytest

from engine.workspace import tree
from engine.workspace.types import Node, ValidationError


# ============================================================================
# add_node / delete_node
# ============================================================================


class TestAddNode:
    def test_adds_file_to_folder(self, root):
        new_root = tree.add_node(root, ("my-project", "src"), Node.file("util.js", "x"))
        assert tree.resolve(new_root, ("my-project", "src", "util.js")).content == "x"

    def test_appends_in_order(self, root):
        new_root = tree.add_node(root, ("my-project", "src"), Node.file("util.js"))
        names = [c.name for c in tree.resolve(new_root, ("my-project", "src")).children]
        assert names == ["App.jsx", "main.jsx", "util.js"]

    def test_old_root_untouched(self, root):
        before = root.to_dict()
        tree.add_node(root, ("my-project",), Node.file("README.md"))
        assert root.to_dict() == before

    def test_shares_unaffected_subtrees(self, root):
        new_root = tree.add_node(root, ("my-project", "src"), Node.file("util.js"))
        assert new_root.child("express-api") is root.child("express-api")
        assert (
            tree.resolve(new_root, ("my-project", "package.json"))
            is tree.resolve(root, ("my-project", "package.json"))
        )

    def test_rejects_missing_parent(self, root):
        with pytest.raises(ValidationError):
            tree.add_node(root, ("my-project", "lib"), Node.file("a.js"))

    def test_rejects_file_parent(self, root):
        with pytest.raises(ValidationError):
            tree.add_node(root, ("my-project", "index.html"), Node.file("a.js"))

    def test_rejects_sibling_collision(self, root):
        with pytest.raises(ValidationError):
            tree.add_node(root, ("my-project",), Node.folder("src"))

    def test_rejects_top_level_file(self, root):
        with pytest.raises(ValidationError):
            tree.add_node(root, (), Node.file("stray.txt"))

    def test_adds_project(self, root):
        new_root = tree.add_node(root, (), Node.folder("new-project"))
        assert [p.name for p in new_root.children][-1] == "new-project"


class TestDeleteNode:
    def test_removes_named_child(self, root):
        new_root = tree.delete_node(root, ("my-project",), "index.html")
        assert tree.find(new_root, ("my-project", "index.html")) is None

    def test_missing_name_is_noop(self, root):
        assert tree.delete_node(root, ("my-project",), "nope.txt") is root

    def test_missing_parent_fails_fast(self, root):
        with pytest.raises(ValidationError):
            tree.delete_node(root, ("my-project", "ghost"), "index.html")

    def test_deletes_project(self, root):
        new_root = tree.delete_node(root, (), "express-api")
        assert [p.name for p in new_root.children] == ["my-project"]

    @pytest.mark.parametrize(
        "parent_path",
        [(), ("my-project",), ("my-project", "src")],
    )
    def test_add_then_delete_restores_tree(self, root, parent_path):
        node = Node.folder("scratch") if parent_path == () else Node.file("scratch.txt", "tmp")
        added = tree.add_node(root, parent_path, node)
        restored = tree.delete_node(added, parent_path, node.name)
        assert restored.to_dict() == root.to_dict()


# ============================================================================
# rename_node
# ============================================================================


class TestRenameNode:
    def test_renames_in_place(self, root):
        new_root = tree.rename_node(root, ("my-project", "src"), "App.jsx", "Root.jsx")
        names = [c.name for c in tree.resolve(new_root, ("my-project", "src")).children]
        assert names == ["Root.jsx", "main.jsx"]

    def test_keeps_content_and_children(self, root):
        new_root = tree.rename_node(root, ("my-project",), "src", "source")
        src = tree.resolve(new_root, ("my-project", "source"))
        assert [c.name for c in src.children] == ["App.jsx", "main.jsx"]

    def test_same_name_is_noop(self, root):
        assert tree.rename_node(root, ("my-project",), "src", "src") is root

    def test_same_name_never_fails(self, root):
        assert tree.rename_node(root, ("my-project",), "a", "a") is root

    def test_rejects_collision(self, root):
        with pytest.raises(ValidationError):
            tree.rename_node(root, ("my-project",), "index.html", "package.json")

    def test_rejects_missing_old_name(self, root):
        with pytest.raises(ValidationError):
            tree.rename_node(root, ("my-project",), "ghost.js", "real.js")

    def test_rejects_slash_in_name(self, root):
        with pytest.raises(ValidationError):
            tree.rename_node(root, ("my-project",), "index.html", "a/b.html")


# ============================================================================
# update_file_content
# ============================================================================


class TestUpdateFileContent:
    def test_updates_content(self, root):
        new_root = tree.update_file_content(root, ("my-project", "src", "main.jsx"), "console.log(1)")
        assert tree.resolve(new_root, ("my-project", "src", "main.jsx")).content == "console.log(1)"
        assert tree.resolve(root, ("my-project", "src", "main.jsx")).content == "import App from './App';"

    def test_same_content_is_noop(self, root):
        content = tree.resolve(root, ("my-project", "index.html")).content
        assert tree.update_file_content(root, ("my-project", "index.html"), content) is root

    def test_rejects_folder(self, root):
        with pytest.raises(ValidationError):
            tree.update_file_content(root, ("my-project", "src"), "x")

    def test_rejects_missing_file(self, root):
        with pytest.raises(ValidationError):
            tree.update_file_content(root, ("my-project", "src", "ghost.js"), "x")

    def test_rejects_missing_intermediate(self, root):
        with pytest.raises(ValidationError):
            tree.update_file_content(root, ("my-project", "lib", "main.dart"), "x")

    def test_rejects_empty_path(self, root):
        with pytest.raises(ValidationError):
            tree.update_file_content(root, (), "x")


# ============================================================================
# create_folder_from_template
# ============================================================================


class TestCreateFolderFromTemplate:
    def test_creates_populated_folder(self, root):
        new_root = tree.create_folder_from_template(root, (), "api-2", "express")
        names = [c.name for c in tree.resolve(new_root, ("api-2",)).children]
        assert names == ["server.js", "package.json"]

    def test_blank_template(self, root):
        new_root = tree.create_folder_from_template(root, ("my-project",), "assets", "blank")
        assert tree.resolve(new_root, ("my-project", "assets")).children == ()

    def test_each_copy_is_independent(self, root):
        once = tree.create_folder_from_template(root, (), "a", "react")
        twice = tree.create_folder_from_template(once, (), "b", "react")
        edited = tree.update_file_content(twice, ("a", "src", "App.jsx"), "changed")
        assert tree.resolve(edited, ("b", "src", "App.jsx")).content != "changed"

    def test_unknown_template(self, root):
        with pytest.raises(ValidationError):
            tree.create_folder_from_template(root, (), "x", "cobol")

    def test_name_collision(self, root):
        with pytest.raises(ValidationError):
            tree.create_folder_from_template(root, (), "my-project", "react")


# ============================================================================
# Node invariants
# ============================================================================


class TestNodeInvariants:
    def test_file_cannot_have_children(self):
        with pytest.raises(ValidationError):
            Node(name="a.txt", kind="file", children=(Node.file("b.txt"),))

    def test_folder_rejects_duplicate_children(self):
        with pytest.raises(ValidationError):
            Node.folder("src", [Node.file("a.js"), Node.file("a.js")])

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            Node.file("")

    def test_dict_round_trip(self, react_project):
        assert Node.from_dict(react_project.to_dict()) == react_project
