"""Yes/no confirmation prompt."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .base import Action, Insert, Navigate
from .prompt import Prompt
from .terminal import ANSI


@dataclass
class ConfirmPrompt(Prompt[bool]):
    """Boolean choice.

    Any arrow (or h/j/k/l) toggles between the two answers; "y" and "n"
    answer and submit at once.
    """

    active: str = "Yes"
    inactive: str = "No"

    def __post_init__(self) -> None:
        super().__post_init__()
        self.value = bool(self.value)

    def empty_value(self) -> bool:
        return True

    def is_empty(self, value: Any) -> bool:
        return False

    def on(self, action: Action) -> None:
        match action:
            case Navigate():
                self.value = not self.value
            case Insert(char=char) if char.lower() in ("y", "n"):
                self.value = char.lower() == "y"
                self.submit()

    def _choice(self, label: str, selected: bool) -> str:
        if selected:
            return f"{ANSI.GREEN}●{ANSI.RESET} {label}"
        return f"{ANSI.DIM}○ {label}{ANSI.RESET}"

    def default_template(self) -> str:
        if self.state.is_final:
            return self.frame([self.summary(self.active if self.value else self.inactive)])
        return self.frame(
            [
                f"{self._choice(self.active, self.value)} / "
                f"{self._choice(self.inactive, not self.value)}"
            ]
        )
