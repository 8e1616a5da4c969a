"""Tests for cursor navigation in keyprompt/elements/cursor.py.

Covers:
- Flat wraparound cursor (property: position == sum of steps mod N)
- Arena tree expansion, collapse and re-rooting
- Cursor path transitions and value reconstruction
"""

from __future__ import annotations

import itertools
import os

import pytest

from helpers import FakeFilesystem
from keyprompt.elements.cursor import (
    PathCursor,
    PathTree,
    cursor_down,
    cursor_up,
    list_directory,
    window,
)
from keyprompt.errors import DirectoryListingError

ROOT = os.path.join(os.sep, "work")


def _fs() -> FakeFilesystem:
    return FakeFilesystem(
        {
            ROOT: [("docs", True), ("src", True), ("README.md", False)],
            os.path.join(ROOT, "docs"): [("guide.md", False)],
            os.path.join(ROOT, "src"): [("app", True), ("main.py", False)],
            os.path.join(ROOT, "src", "app"): [],
            os.sep: [("work", True), ("tmp", True)],
        }
    )


class TestFlatCursor:
    """Tests for cursor_up / cursor_down."""

    def test_down_wraps_to_start(self) -> None:
        assert cursor_down(2, 3) == 0

    def test_up_wraps_to_end(self) -> None:
        assert cursor_up(0, 3) == 2

    def test_empty_list_stays_at_zero(self) -> None:
        assert cursor_up(0, 0) == 0
        assert cursor_down(0, 0) == 0

    def test_stale_cursor_clamps_to_current_length(self) -> None:
        """A list that shrank since the last move must not leave the cursor outside it."""
        assert cursor_up(7, 3) == 2
        assert cursor_down(7, 3) == 0

    @pytest.mark.parametrize("length", [1, 2, 5])
    def test_position_is_sum_of_steps_mod_length(self, length: int) -> None:
        for steps in itertools.product((-1, 1), repeat=6):
            cursor = 0
            for step in steps:
                cursor = cursor_down(cursor, length) if step > 0 else cursor_up(cursor, length)
                assert 0 <= cursor < length
            assert cursor == sum(steps) % length

    def test_window_keeps_cursor_visible(self) -> None:
        rows = window(9, 10, 4)
        assert 9 in rows
        assert len(rows) == 4

    def test_window_without_limit_is_everything(self) -> None:
        assert window(0, 3, None) == range(3)


class TestPathTree:
    """Tests for the arena-backed directory tree."""

    def test_new_tree_has_unexpanded_root(self) -> None:
        tree = PathTree(ROOT, _fs())
        assert tree.node(tree.root).name == ROOT
        assert tree.children(tree.root) == []

    def test_expand_marks_files_as_leaves(self) -> None:
        tree = PathTree(ROOT, _fs())
        tree.expand(tree.root, ROOT)
        kinds = {tree.node(i).name: tree.node(i).expandable for i in tree.children(0)}
        assert kinds == {"docs": True, "src": True, "README.md": False}

    def test_collapse_frees_the_subtree(self) -> None:
        tree = PathTree(ROOT, _fs())
        tree.expand(tree.root, ROOT)
        src = tree.children(tree.root)[1]
        tree.expand(src, os.path.join(ROOT, "src"))
        assert len(tree.nodes) == 6
        tree.collapse(src)
        assert len(tree.nodes) == 4
        names = [tree.node(i).name for i in tree.children(tree.root)]
        assert names == ["docs", "src", "README.md"]
        assert tree.children(tree.children(tree.root)[1]) == []

    def test_collapse_keeps_other_expanded_directories(self) -> None:
        tree = PathTree(ROOT, _fs())
        tree.expand(tree.root, ROOT)
        docs, src, _ = tree.children(tree.root)
        tree.expand(src, os.path.join(ROOT, "src"))
        tree.expand(docs, os.path.join(ROOT, "docs"))
        tree.collapse(src)
        docs = tree.children(tree.root)[0]
        assert [tree.node(i).name for i in tree.children(docs)] == ["guide.md"]
        assert len(tree.nodes) == 5

    def test_listing_error_is_wrapped(self) -> None:
        tree = PathTree(os.path.join(ROOT, "secret"), _fs())
        with pytest.raises(DirectoryListingError) as excinfo:
            tree.expand(tree.root, tree.root_path)
        assert "Permission denied" in excinfo.value.message
        assert excinfo.value.path == tree.root_path

    def test_list_directory_sorts_by_name(self, tmp_path) -> None:
        (tmp_path / "b.txt").write_text("b")
        (tmp_path / "a").mkdir()
        entries = list_directory(str(tmp_path))
        assert [(e.name, e.is_directory) for e in entries] == [("a", True), ("b.txt", False)]


class TestPathCursor:
    """Tests for cursor path transitions."""

    def _cursor(self) -> PathCursor:
        return PathCursor(PathTree(ROOT, _fs()))

    def test_right_from_empty_path_descends(self) -> None:
        cursor = self._cursor()
        assert cursor.right() is True
        assert cursor.path == [0]
        assert cursor.value() == os.path.join(ROOT, "docs")

    def test_left_from_first_level_returns_to_empty_path(self) -> None:
        cursor = self._cursor()
        cursor.right()
        assert cursor.left() is False
        assert cursor.path == []
        assert cursor.value() == ROOT

    def test_two_rights_then_left_collapses_previous_depth(self) -> None:
        cursor = self._cursor()
        cursor.right()
        cursor.down()  # src
        cursor.right()  # into src
        assert cursor.path == [1, 0]
        assert cursor.left() is True
        assert cursor.path == [1]
        src = cursor.node
        assert cursor.tree.node(src).children == []
        assert cursor.value() == os.path.join(ROOT, "src")

    def test_up_down_only_move_last_element(self) -> None:
        cursor = self._cursor()
        cursor.right()
        cursor.down()
        cursor.right()
        cursor.down()
        assert cursor.path == [1, 1]
        cursor.down()
        assert cursor.path == [1, 0]
        cursor.up()
        assert cursor.path == [1, 1]

    def test_up_down_on_empty_path_is_noop(self) -> None:
        cursor = self._cursor()
        cursor.up()
        cursor.down()
        assert cursor.path == []

    def test_right_on_file_is_noop(self) -> None:
        cursor = self._cursor()
        cursor.right()
        cursor.up()  # README.md
        assert cursor.right() is False
        assert cursor.path == [2]

    def test_right_on_empty_directory_does_not_descend(self) -> None:
        cursor = self._cursor()
        cursor.right()
        cursor.down()
        cursor.right()  # src/app
        assert cursor.right() is False
        assert cursor.path == [1, 0]

    def test_left_above_root_reroots_on_parent(self) -> None:
        fs = _fs()
        cursor = PathCursor(PathTree(ROOT, fs))
        assert cursor.left() is True
        assert cursor.tree.root_path == os.sep
        names = [cursor.tree.node(i).name for i in cursor.tree.children(0)]
        assert names == ["work", "tmp"]
        assert cursor.path == []
        assert fs.calls[-1] == os.sep

    def test_left_at_filesystem_root_is_noop(self) -> None:
        cursor = PathCursor(PathTree(os.sep, _fs()))
        assert cursor.left() is False
        assert cursor.tree.root_path == os.sep

    def test_value_joins_selected_names(self) -> None:
        """After any navigation the value is the root joined with each selected name."""
        cursor = self._cursor()
        for move in ("right", "down", "right", "down", "up", "down", "left", "right"):
            getattr(cursor, move)()
            selected = [cursor.tree.root]
            for position in cursor.path:
                children = cursor.tree.children(selected[-1])
                if position >= len(children):
                    break
                selected.append(children[position])
            expected = os.path.join(ROOT, *(cursor.tree.node(i).name for i in selected[1:]))
            assert cursor.value() == expected

    def test_visible_lists_expanded_directories_inline(self) -> None:
        cursor = self._cursor()
        cursor.right()
        cursor.right()  # into docs
        names = [(depth, cursor.tree.node(i).name) for depth, i in cursor.visible()]
        assert names == [
            (0, ROOT),
            (1, "docs"),
            (2, "guide.md"),
            (1, "src"),
            (1, "README.md"),
        ]


class TestPathCursorAccessors:
    """Tests for the derived accessors of PathCursor."""

    def test_empty_path(self) -> None:
        cursor = PathCursor(PathTree(ROOT, _fs()))
        assert cursor.depth == 0
        assert cursor.index() == 0
        assert cursor.siblings() == []
        assert cursor.node == cursor.tree.root
        assert cursor.value() == ROOT

    def test_after_descending(self) -> None:
        cursor = PathCursor(PathTree(ROOT, _fs()))
        cursor.right()
        cursor.down()
        cursor.right()
        assert cursor.depth == 2
        assert cursor.index() == 0
        names = [cursor.tree.node(i).name for i in cursor.siblings()]
        assert names == ["app", "main.py"]

    def test_stale_path_stops_at_deepest_valid_depth(self) -> None:
        cursor = PathCursor(PathTree(ROOT, _fs()), path=[1, 5])
        cursor.tree.expand(cursor.tree.root, ROOT)
        assert cursor.value() == os.path.join(ROOT, "src")

    def test_repeated_expand_collapse_does_not_grow_arena(self) -> None:
        cursor = PathCursor(PathTree(ROOT, _fs()))
        cursor.right()
        cursor.down()
        cursor.right()
        cursor.left()
        size = len(cursor.tree.nodes)
        for _ in range(50):
            cursor.right()
            cursor.left()
        assert len(cursor.tree.nodes) == size
        assert cursor.value() == os.path.join(ROOT, "src")
