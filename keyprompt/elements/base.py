"""Core data types shared by the prompt engine.

This module provides:
- KeyEvent: One physical keypress as read from the terminal
- Action: The closed set of semantic actions a keypress is interpreted into
- PromptState: Lifecycle states of a prompt
- CANCEL / ABORT: Result sentinels, tested with is_cancel() / is_abort()
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Union

Direction = Literal["up", "down", "left", "right"]


@dataclass(frozen=True)
class KeyEvent:
    """A keyboard input event.

    `name` follows terminal key naming ("up", "return", "escape",
    "backspace", a lowercase letter, ...). `sequence` is the decoded text the
    terminal sent, which differs from `raw` only in type for single bytes.
    """

    raw: bytes
    name: str | None = None
    sequence: str | None = None
    ctrl: bool = False

    @property
    def char(self) -> str | None:
        """The printable character of this key, if it has one."""
        if self.ctrl or not self.sequence or len(self.sequence) != 1:
            return None
        return self.sequence if self.sequence.isprintable() else None


@dataclass(frozen=True)
class Navigate:
    direction: Direction


@dataclass(frozen=True)
class Submit:
    pass


@dataclass(frozen=True)
class Cancel:
    pass


@dataclass(frozen=True)
class Insert:
    """Any other key: a printable character or an editing key.

    `char` is empty for non-printable keys; prompts look at `name` to tell
    e.g. "backspace" from "delete".
    """

    char: str
    name: str | None = None
    sequence: str | None = None
    ctrl: bool = False


Action = Union[Navigate, Submit, Cancel, Insert]


class PromptState(str, Enum):
    """Prompt lifecycle.

    State Diagram:
        INITIAL ──► ACTIVE ──► SUBMIT
                     │  ▲
                     ▼  │
                    ERROR
        ACTIVE | ERROR ──► CANCEL

    SUBMIT and CANCEL are terminal.
    """

    INITIAL = "initial"
    ACTIVE = "active"
    CANCEL = "cancel"
    SUBMIT = "submit"
    ERROR = "error"

    @property
    def is_final(self) -> bool:
        return self in (PromptState.SUBMIT, PromptState.CANCEL)


class Sentinel:
    """A unique marker value compared by identity."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"<{self.name}>"

    def __bool__(self) -> bool:
        return False


CANCEL = Sentinel("keyprompt:cancel")
ABORT = Sentinel("keyprompt:abort")


def is_cancel(value: object) -> bool:
    """Return True only for the CANCEL sentinel itself."""
    return value is CANCEL


def is_abort(value: object) -> bool:
    """Return True only for the ABORT sentinel itself."""
    return value is ABORT
