"""Single choice prompts over a flat option list."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, ClassVar

from .base import Action, Insert, Navigate
from .cursor import cursor_down, cursor_up, window
from .prompt import Prompt
from .terminal import ANSI


@dataclass(frozen=True)
class Option:
    """A selectable option. `label` defaults to the value's string form."""

    value: Any
    label: str | None = None
    hint: str | None = None

    @property
    def text(self) -> str:
        return self.label if self.label is not None else str(self.value)


def as_options(items: Iterable[Any]) -> list[Option]:
    return [item if isinstance(item, Option) else Option(item) for item in items]


def option_line(option: Option, *, active: bool, marker: str = "") -> str:
    pointer = f"{ANSI.CYAN}❯{ANSI.RESET}" if active else " "
    hint = f" {ANSI.DIM}({option.hint}){ANSI.RESET}" if active and option.hint else ""
    label = option.text if active else f"{ANSI.DIM}{option.text}{ANSI.RESET}"
    prefix = f"{marker} " if marker else ""
    return f"{pointer} {prefix}{label}{hint}"


@dataclass
class SelectPrompt(Prompt[Any]):
    """Pick one option with up/down (left/right also move).

    The cursor wraps around both ends and starts on `initial_value` when it
    is one of the option values.
    """

    options: list[Any] = field(default_factory=list)
    max_items: int | None = None
    cursor: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.options = as_options(self.options)
        super().__post_init__()
        values = [option.value for option in self.options]
        if self.value in values:
            self.cursor = values.index(self.value)
        self._sync_value()

    def _sync_value(self) -> None:
        self.value = self.options[self.cursor].value if self.options else None

    def on(self, action: Action) -> None:
        match action:
            case Navigate(direction="up" | "left"):
                self.cursor = cursor_up(self.cursor, len(self.options))
            case Navigate(direction="down" | "right"):
                self.cursor = cursor_down(self.cursor, len(self.options))
        self._sync_value()

    @property
    def selected(self) -> Option | None:
        return self.options[self.cursor] if self.options else None

    def default_template(self) -> str:
        if self.state.is_final:
            return self.frame([self.summary(self.selected.text if self.selected else "")])
        lines = [
            option_line(self.options[i], active=i == self.cursor)
            for i in window(self.cursor, len(self.options), self.max_items)
        ]
        return self.frame(lines)


@dataclass
class SelectKeyPrompt(SelectPrompt):
    """Each option value is a key; typing it selects and submits."""

    # Keys like "j" must reach on() instead of being aliased to navigation
    track_value: ClassVar[bool] = True

    def on(self, action: Action) -> None:
        match action:
            case Insert(char=char) if char:
                for i, option in enumerate(self.options):
                    if str(option.value).lower() == char.lower():
                        self.cursor = i
                        self._sync_value()
                        self.submit()
                        return
            case _:
                super().on(action)

    def default_template(self) -> str:
        if self.state.is_final:
            return super().default_template()
        lines = [
            option_line(option, active=i == self.cursor, marker=f"[{option.value}]")
            for i, option in enumerate(self.options)
        ]
        return self.frame(lines)
