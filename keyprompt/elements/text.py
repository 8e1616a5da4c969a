"""Free text prompts.

TextPrompt edits a single line with an inline cursor; PasswordPrompt is the
same editor drawn with a mask character.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from .base import Action, Insert, Navigate, PromptState
from .prompt import Prompt
from .terminal import ANSI


@dataclass
class TextPrompt(Prompt[str]):
    """Single-line text input.

    Features:
    - Basic line editing (Backspace, Delete, Left/Right, Home/End)
    - Ctrl+A/E move to start/end, Ctrl+U/K kill to start/end, Ctrl+W kills a word
    - Tab fills in the placeholder when nothing was typed
    """

    placeholder: str = ""
    cursor_char: str = " "  # Shown in reverse video when cursor at end
    cursor_pos: int = field(default=0, init=False)

    track_value: ClassVar[bool] = True

    def __post_init__(self) -> None:
        super().__post_init__()
        self.value = "" if self.value is None else str(self.value)
        self.cursor_pos = len(self.value)

    def empty_value(self) -> str:
        return ""

    def set_cursor(self, position: int) -> None:
        self.cursor_pos = max(0, min(position, len(self.value)))

    def _insert_text(self, text: str) -> None:
        self.value = self.value[: self.cursor_pos] + text + self.value[self.cursor_pos :]
        self.cursor_pos += len(text)

    def _delete_before_cursor(self) -> None:
        if self.cursor_pos > 0:
            self.value = self.value[: self.cursor_pos - 1] + self.value[self.cursor_pos :]
            self.cursor_pos -= 1

    def _delete_at_cursor(self) -> None:
        if self.cursor_pos < len(self.value):
            self.value = self.value[: self.cursor_pos] + self.value[self.cursor_pos + 1 :]

    def _delete_prev_word(self) -> None:
        i = self.cursor_pos
        while i > 0 and self.value[i - 1].isspace():
            i -= 1
        while i > 0 and not self.value[i - 1].isspace():
            i -= 1
        self.value = self.value[:i] + self.value[self.cursor_pos :]
        self.cursor_pos = i

    def on(self, action: Action) -> None:
        match action:
            case Navigate(direction="left"):
                self.set_cursor(self.cursor_pos - 1)
            case Navigate(direction="right"):
                self.set_cursor(self.cursor_pos + 1)
            case Insert(name="tab"):
                if not self.value and self.placeholder:
                    self.value = self.placeholder
                    self.cursor_pos = len(self.value)
            case Insert(name="backspace"):
                self._delete_before_cursor()
            case Insert(name="delete"):
                self._delete_at_cursor()
            case Insert(name="home") | Insert(name="a", ctrl=True):
                self.cursor_pos = 0
            case Insert(name="end") | Insert(name="e", ctrl=True):
                self.cursor_pos = len(self.value)
            case Insert(name="u", ctrl=True):
                self.value = self.value[self.cursor_pos :]
                self.cursor_pos = 0
            case Insert(name="k", ctrl=True):
                self.value = self.value[: self.cursor_pos]
            case Insert(name="w", ctrl=True):
                self._delete_prev_word()
            case Insert(char=char, ctrl=False) if char:
                self._insert_text(char)

    def with_cursor(self, text: str) -> str:
        """`text` with the cursor position highlighted in reverse video."""
        if self.cursor_pos < len(text):
            return (
                text[: self.cursor_pos]
                + ANSI.REVERSE
                + text[self.cursor_pos]
                + ANSI.RESET
                + text[self.cursor_pos + 1 :]
            )
        return text + ANSI.REVERSE + self.cursor_char + ANSI.RESET

    @property
    def value_with_cursor(self) -> str:
        return self.with_cursor(self.value)

    def _placeholder_line(self) -> str:
        if not self.placeholder:
            return ANSI.REVERSE + self.cursor_char + ANSI.RESET
        return (
            ANSI.REVERSE
            + self.placeholder[0]
            + ANSI.RESET
            + ANSI.DIM
            + self.placeholder[1:]
            + ANSI.RESET
        )

    def default_template(self) -> str:
        if self.state.is_final:
            return self.frame([self.summary(self.value)])
        line = self.value_with_cursor if self.value else self._placeholder_line()
        return self.frame([line])


@dataclass
class PasswordPrompt(TextPrompt):
    """Text input that never draws what was typed."""

    mask: str = "▪"

    @property
    def masked(self) -> str:
        return self.mask * len(self.value)

    @property
    def masked_with_cursor(self) -> str:
        return self.with_cursor(self.masked)

    def on(self, action: Action) -> None:
        # The placeholder is never a secret worth filling in
        if isinstance(action, Insert) and action.name == "tab":
            return
        super().on(action)

    def default_template(self) -> str:
        if self.state.is_final:
            return self.frame([self.summary(self.masked)])
        if self.state is PromptState.INITIAL and not self.value:
            return self.frame([self._placeholder_line()])
        return self.frame([self.masked_with_cursor])
