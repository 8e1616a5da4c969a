"""Cursor navigation for list and tree prompts.

This module provides:
- cursor_up / cursor_down: Wraparound index cursor over a flat list
- PathTree: Arena of lazily expanded directory nodes
- PathCursor: Variable-depth cursor path over a PathTree
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import NamedTuple

from ..errors import DirectoryListingError

logger = logging.getLogger(__name__)


def cursor_up(cursor: int, length: int) -> int:
    """Previous index, wrapping to the end. Always checked against the current length."""
    if length <= 0:
        return 0
    if cursor > length - 1:
        return length - 1
    return cursor - 1 if cursor > 0 else length - 1


def cursor_down(cursor: int, length: int) -> int:
    """Next index, wrapping to the start."""
    if length <= 0:
        return 0
    return cursor + 1 if cursor < length - 1 else 0


class Entry(NamedTuple):
    name: str
    is_directory: bool


ListEntries = Callable[[str], Sequence[Entry]]


def list_directory(path: str) -> list[Entry]:
    """List a directory in name order. Raises OSError on failure."""
    with os.scandir(path) as it:
        entries = [Entry(e.name, e.is_dir()) for e in it]
    entries.sort(key=lambda e: e.name)
    return entries


@dataclass
class PathNode:
    """A node in the arena.

    `children` holds arena indices. None marks a leaf (a file); an empty
    list marks a directory that is not expanded.
    """

    name: str
    children: list[int] | None = None

    @property
    def expandable(self) -> bool:
        return self.children is not None


@dataclass
class PathTree:
    """Directory tree stored in a flat arena addressed by index.

    The root is node 0 and its name is an absolute path; every other node
    name is a single path component.
    """

    root_path: str
    list_entries: ListEntries = list_directory
    nodes: list[PathNode] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.nodes = [PathNode(self.root_path, [])]

    @property
    def root(self) -> int:
        return 0

    def node(self, index: int) -> PathNode:
        return self.nodes[index]

    def children(self, index: int) -> list[int]:
        return self.nodes[index].children or []

    def _list(self, path: str) -> Sequence[Entry]:
        try:
            return self.list_entries(path)
        except OSError as e:
            logger.warning("listing %s failed: %s", path, e)
            raise DirectoryListingError(path, e) from e

    def expand(self, index: int, path: str) -> None:
        """Populate the children of an unexpanded directory node from `path`."""
        entries = self._list(path)
        children = []
        for entry in entries:
            self.nodes.append(PathNode(entry.name, [] if entry.is_directory else None))
            children.append(len(self.nodes) - 1)
        self.nodes[index].children = children

    def collapse(self, index: int) -> None:
        """Fold a directory back to unexpanded and free its subtree.

        Arena indices of other nodes may change; cursors address nodes by
        sibling position, so they stay valid.
        """
        if self.nodes[index].children:
            self.nodes[index].children = []
            self._compact()

    def _compact(self) -> None:
        """Rebuild the arena keeping only the nodes reachable from the root."""
        nodes: list[PathNode] = []

        def copy(old: int) -> int:
            node = self.nodes[old]
            nodes.append(PathNode(node.name, None if node.children is None else []))
            new = len(nodes) - 1
            if node.children:
                nodes[new].children = [copy(child) for child in node.children]
            return new

        copy(self.root)
        self.nodes = nodes

    def reroot(self, path: str) -> None:
        """Replace the whole tree with one rooted at `path`, listed."""
        entries = self._list(path)
        self.root_path = path
        self.nodes = [PathNode(path, [])]
        for entry in entries:
            self.nodes.append(PathNode(entry.name, [] if entry.is_directory else None))
        self.nodes[0].children = list(range(1, len(self.nodes)))


class PathCursor:
    """A cursor path over a PathTree.

    `path[d]` is the index of the selected child among the siblings at depth
    d. Only the deepest element moves on up/down. Every accessor walks the
    path from the root and stops at the deepest valid depth.

    Navigation methods return True when the visible tree changed shape, so
    the caller can request a full repaint.
    """

    def __init__(self, tree: PathTree, path: Sequence[int] = ()) -> None:
        self.tree = tree
        self.path: list[int] = list(path)

    def _walk(self) -> tuple[list[int], list[int]]:
        """Return (selected node indices from the root, siblings of the last)."""
        selected = [self.tree.root]
        siblings: list[int] = []
        for position in self.path:
            children = self.tree.children(selected[-1])
            if 0 <= position < len(children):
                siblings = children
                selected.append(children[position])
            else:
                break
        return selected, siblings

    @property
    def node(self) -> int:
        """Arena index of the node under the cursor (the root for an empty path)."""
        return self._walk()[0][-1]

    @property
    def depth(self) -> int:
        return len(self.path)

    def siblings(self) -> list[int]:
        return self._walk()[1]

    def index(self) -> int:
        return self.path[-1] if self.path else 0

    def value(self) -> str:
        selected, _ = self._walk()
        names = [self.tree.node(i).name for i in selected[1:]]
        return os.path.join(self.tree.root_path, *names)

    def visible(self) -> list[tuple[int, int]]:
        """(depth, node) pairs in display order: expanded directories inline."""
        rows: list[tuple[int, int]] = []

        def walk(index: int, depth: int) -> None:
            rows.append((depth, index))
            for child in self.tree.children(index):
                walk(child, depth + 1)

        walk(self.tree.root, 0)
        return rows

    def up(self) -> bool:
        if self.path:
            self.path[-1] = _wrap(self.path[-1], len(self.siblings()), cursor_up)
        return False

    def down(self) -> bool:
        if self.path:
            self.path[-1] = _wrap(self.path[-1], len(self.siblings()), cursor_down)
        return False

    def right(self) -> bool:
        """Expand the directory under the cursor and step into it."""
        index = self.node
        if not self.tree.node(index).expandable:
            return False
        if not self.tree.children(index):
            self.tree.expand(index, self.value())
        if not self.tree.children(index):
            # Empty directory, nothing to step into
            return False
        self.path.append(0)
        return True

    def left(self) -> bool:
        """Collapse back to the parent; above the root, re-root on its parent."""
        previous = list(self.path)
        self.path = self.path[:-1]
        index = self.node
        if self.path and self.tree.children(index):
            self.tree.collapse(index)
            return True
        if not previous:
            parent = os.path.dirname(self.tree.root_path)
            if parent == self.tree.root_path:
                return False
            self.tree.reroot(parent)
            return True
        return False


def _wrap(position: int, length: int, step: Callable[[int, int], int]) -> int:
    return step(position, length) if length else position


def window(cursor: int, length: int, size: int | None) -> range:
    """Indices of a scroll window of `size` rows that keeps `cursor` visible."""
    if size is None or size <= 0 or length <= size:
        return range(length)
    start = max(0, min(cursor - size // 2, length - size))
    return range(start, start + size)
