"""Multiple choice prompts.

MultiSelectPrompt toggles options of a flat list; GroupMultiSelectPrompt adds
group headers that toggle their whole group.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .base import Action, Insert, Navigate
from .cursor import cursor_down, cursor_up, window
from .prompt import Prompt
from .select import Option, as_options, option_line
from .terminal import ANSI

REQUIRED_MESSAGE = (
    "Please select at least one option.\n"
    "Press space to select, enter to submit"
)


def _checkbox(checked: bool) -> str:
    return f"{ANSI.GREEN}◼{ANSI.RESET}" if checked else f"{ANSI.DIM}◻{ANSI.RESET}"


@dataclass
class MultiSelectPrompt(Prompt[list[Any]]):
    """Toggle any number of options.

    - Up/Down move (wrapping), Space toggles, "a" toggles all
    - The value lists selected option values in option order
    - With `required`, submitting nothing is a validation error
    """

    options: list[Any] = field(default_factory=list)
    required: bool = True
    cursor_at: Any = None
    max_items: int | None = None
    cursor: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.options = as_options(self.options)
        super().__post_init__()
        self.value = self._ordered(self.value or [])
        values = [option.value for option in self.options]
        if self.cursor_at in values:
            self.cursor = values.index(self.cursor_at)

    def empty_value(self) -> list[Any]:
        return []

    def is_empty(self, value: Any) -> bool:
        # default_value already preselected options; never substitute it
        return False

    def _ordered(self, selected: list[Any]) -> list[Any]:
        return [o.value for o in self.options if o.value in selected]

    def toggle(self) -> None:
        if not self.options:
            return
        current = self.options[self.cursor].value
        if current in self.value:
            self.value = [v for v in self.value if v != current]
        else:
            self.value = self._ordered([*self.value, current])

    def toggle_all(self) -> None:
        if len(self.value) == len(self.options):
            self.value = []
        else:
            self.value = [o.value for o in self.options]

    def submit(self) -> None:
        if self.required and not self.value:
            self.fail(REQUIRED_MESSAGE)
            return
        super().submit()

    def on(self, action: Action) -> None:
        match action:
            case Navigate(direction="up" | "left"):
                self.cursor = cursor_up(self.cursor, len(self.options))
            case Navigate(direction="down" | "right"):
                self.cursor = cursor_down(self.cursor, len(self.options))
            case Insert(name="space"):
                self.toggle()
            case Insert(char="a"):
                self.toggle_all()

    def default_template(self) -> str:
        if self.state.is_final:
            labels = [o.text for o in self.options if o.value in self.value]
            return self.frame([self.summary(", ".join(labels))])
        lines = [
            option_line(
                self.options[i],
                active=i == self.cursor,
                marker=_checkbox(self.options[i].value in self.value),
            )
            for i in window(self.cursor, len(self.options), self.max_items)
        ]
        return self.frame(lines)


@dataclass
class GroupMultiSelectPrompt(Prompt[list[Any]]):
    """Multi-select over options grouped under headers.

    The cursor moves over headers and options alike. Toggling a header
    selects its whole group, or clears it when the group is fully selected.
    """

    options: dict[str, list[Any]] = field(default_factory=dict)
    required: bool = True
    cursor: int = field(default=0, init=False)
    rows: list[tuple[str, Option | None]] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.options = {group: as_options(items) for group, items in self.options.items()}
        super().__post_init__()
        self.rows = []
        for group, items in self.options.items():
            self.rows.append((group, None))
            self.rows.extend((group, option) for option in items)
        self.value = self._ordered(self.value or [])

    def empty_value(self) -> list[Any]:
        return []

    def is_empty(self, value: Any) -> bool:
        return False

    def _ordered(self, selected: list[Any]) -> list[Any]:
        return [o.value for _, o in self.rows if o is not None and o.value in selected]

    def group_values(self, group: str) -> list[Any]:
        return [o.value for o in self.options.get(group, [])]

    def is_group_selected(self, group: str) -> bool:
        values = self.group_values(group)
        return bool(values) and all(v in self.value for v in values)

    def toggle(self) -> None:
        if not self.rows:
            return
        group, option = self.rows[self.cursor]
        if option is None:
            values = self.group_values(group)
            if self.is_group_selected(group):
                self.value = [v for v in self.value if v not in values]
            else:
                self.value = self._ordered([*self.value, *values])
        elif option.value in self.value:
            self.value = [v for v in self.value if v != option.value]
        else:
            self.value = self._ordered([*self.value, option.value])

    def submit(self) -> None:
        if self.required and not self.value:
            self.fail(REQUIRED_MESSAGE)
            return
        super().submit()

    def on(self, action: Action) -> None:
        match action:
            case Navigate(direction="up" | "left"):
                self.cursor = cursor_up(self.cursor, len(self.rows))
            case Navigate(direction="down" | "right"):
                self.cursor = cursor_down(self.cursor, len(self.rows))
            case Insert(name="space"):
                self.toggle()

    def default_template(self) -> str:
        if self.state.is_final:
            labels = [o.text for _, o in self.rows if o is not None and o.value in self.value]
            return self.frame([self.summary(", ".join(labels))])
        lines = []
        for i, (group, option) in enumerate(self.rows):
            active = i == self.cursor
            if option is None:
                checked = self.is_group_selected(group)
                lines.append(option_line(Option(group), active=active, marker=_checkbox(checked)))
            else:
                marker = "  " + _checkbox(option.value in self.value)
                lines.append(option_line(option, active=active, marker=marker))
        return self.frame(lines)
