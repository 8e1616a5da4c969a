"""Fakes for driving prompts without a terminal."""

from __future__ import annotations

import io

from keyprompt.elements.base import KeyEvent
from keyprompt.elements.cursor import Entry


def key(char: str) -> KeyEvent:
    """A printable keypress as the raw reader reports it."""
    name = {" ": "space"}.get(char, char.lower() if char.isalnum() else None)
    return KeyEvent(raw=char.encode("utf-8"), name=name, sequence=char)


def named(name: str, sequence: str | None = None, *, ctrl: bool = False) -> KeyEvent:
    """A named key such as "up", "return" or "backspace"."""
    seq = sequence if sequence is not None else {
        "return": "\r",
        "backspace": "\x7f",
        "escape": "\x1b",
        "tab": "\t",
        "up": "\x1b[A",
        "down": "\x1b[B",
        "right": "\x1b[C",
        "left": "\x1b[D",
    }.get(name)
    raw = seq.encode("utf-8") if seq else b""
    return KeyEvent(raw=raw, name=name, sequence=seq, ctrl=ctrl)


def ctrl(letter: str) -> KeyEvent:
    byte = chr(ord(letter) - 96)
    return KeyEvent(raw=byte.encode(), name=letter, sequence=byte, ctrl=True)


def typed(text: str) -> list[KeyEvent]:
    return [key(ch) for ch in text]


class ScriptedReader:
    """Input reader that replays a fixed list of keypresses, then EOF."""

    def __init__(self, events: list[KeyEvent]) -> None:
        self.events = list(events)
        self.started = False
        self.start_calls = 0
        self.stop_calls = 0
        self.interactive = False
        self.output = FakeOutput()

    def start(self) -> None:
        self.started = True
        self.start_calls += 1

    def stop(self) -> None:
        self.started = False
        self.stop_calls += 1

    async def read(self) -> KeyEvent:
        if not self.events:
            return KeyEvent(raw=b"", name="eof")
        return self.events.pop(0)


class FakeOutput(io.StringIO):
    """StringIO that counts flushes, standing in for stdout."""

    def __init__(self) -> None:
        super().__init__()
        self.flushes = 0

    def flush(self) -> None:
        self.flushes += 1
        super().flush()


class FakeFilesystem:
    """Directory listing keyed by absolute path.

    Directories are dict keys; any name listed with is_directory=True must
    have its own key to be expandable without an error.
    """

    def __init__(self, tree: dict[str, list[tuple[str, bool]]]) -> None:
        self.tree = tree
        self.calls: list[str] = []

    def __call__(self, path: str) -> list[Entry]:
        self.calls.append(path)
        if path not in self.tree:
            raise PermissionError(13, "Permission denied", path)
        return [Entry(name, is_dir) for name, is_dir in self.tree[path]]
