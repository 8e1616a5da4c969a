"""Filesystem browser prompt."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from ..errors import DirectoryListingError
from .base import Action, Navigate
from .cursor import ListEntries, PathCursor, PathTree, list_directory, window
from .prompt import Prompt
from .terminal import ANSI


@dataclass
class PathPrompt(Prompt[str]):
    """Browse directories as an expandable tree and pick a path.

    - Up/Down move among siblings (wrapping)
    - Right expands the directory under the cursor and steps into it
    - Left steps back out and collapses; at the top it re-roots on the
      parent directory, so the browser can climb above where it started

    The value is always the absolute path under the cursor. The browser
    starts in `initial_value`, or the current directory.
    """

    list_entries: ListEntries = list_directory
    max_items: int | None = 12
    cursor: PathCursor = field(init=False, repr=False)

    def __post_init__(self) -> None:
        super().__post_init__()
        root = os.path.abspath(self.initial_value or os.getcwd())
        self.cursor = PathCursor(PathTree(root, self.list_entries))
        try:
            self.cursor.right()
        except DirectoryListingError as e:
            self.fail(e.message)
        self.value = self.cursor.value()

    def empty_value(self) -> str:
        return ""

    def on(self, action: Action) -> None:
        match action:
            case Navigate(direction="up"):
                changed = self.cursor.up()
            case Navigate(direction="down"):
                changed = self.cursor.down()
            case Navigate(direction="right"):
                changed = self.cursor.right()
            case Navigate(direction="left"):
                changed = self.cursor.left()
            case _:
                changed = False
        if changed:
            self.request_repaint()
        self.value = self.cursor.value()

    def _row(self, depth: int, index: int, active: bool) -> str:
        node = self.cursor.tree.node(index)
        if node.expandable:
            icon = "▾" if self.cursor.tree.children(index) else "▸"
            name = node.name if depth == 0 else node.name + os.sep
        else:
            icon = " "
            name = node.name
        pointer = f"{ANSI.CYAN}❯{ANSI.RESET}" if active else " "
        label = name if active else f"{ANSI.DIM}{name}{ANSI.RESET}"
        return f"{pointer} {'  ' * depth}{icon} {label}"

    def default_template(self) -> str:
        if self.state.is_final:
            return self.frame([self.summary(self.value)])
        rows = self.cursor.visible()
        current = self.cursor.node
        position = next((i for i, (_, index) in enumerate(rows) if index == current), 0)
        lines = [
            self._row(rows[i][0], rows[i][1], rows[i][1] == current)
            for i in window(position, len(rows), self.max_items)
        ]
        return self.frame(lines)
