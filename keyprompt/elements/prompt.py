"""Generic prompt lifecycle.

Prompt is the state machine every concrete prompt builds on. A subclass
supplies `on(action)` to turn navigation and key actions into value
changes, and `default_template()` to draw itself. Submission, validation and
cancellation are handled here.

Usage:
    name = await TextPrompt(message="Your name?").prompt()
    if is_cancel(name):
        return
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Generic, TypeVar

from ..errors import PromptError, ValidationError
from .base import CANCEL, Action, Cancel, PromptState, Submit
from .manager import PromptManager
from .terminal import ANSI

logger = logging.getLogger(__name__)

T = TypeVar("T")

Validator = Callable[[Any], "str | None"]
Template = Callable[["Prompt[Any]"], str]

_SYMBOLS = {
    PromptState.INITIAL: f"{ANSI.CYAN}◆{ANSI.RESET}",
    PromptState.ACTIVE: f"{ANSI.CYAN}◆{ANSI.RESET}",
    PromptState.SUBMIT: f"{ANSI.GREEN}◇{ANSI.RESET}",
    PromptState.CANCEL: f"{ANSI.RED}■{ANSI.RESET}",
    PromptState.ERROR: f"{ANSI.YELLOW}▲{ANSI.RESET}",
}


@dataclass
class Prompt(ABC, Generic[T]):
    """A single interactive question.

    Lifecycle:
        1. Construction computes the initial value
        2. prompt() acquires the terminal and renders the first frame
        3. Each action goes through dispatch(), then the frame is redrawn
        4. SUBMIT or CANCEL ends the session; the instance is then inert

    The value starts as `initial_value`, else `default_value`, else
    `empty_value()`. On submit an empty value falls back to `default_value`
    before validation.
    """

    message: str = ""
    initial_value: T | None = None
    default_value: T | None = None
    validate: Validator | None = None
    template: Template | None = None

    state: PromptState = field(default=PromptState.INITIAL, init=False)
    value: Any = field(default=None, init=False)
    error: str = field(default="", init=False)
    _repaint: bool = field(default=False, init=False, repr=False)

    # Text prompts set this so letters are inserted instead of aliased
    track_value: ClassVar[bool] = False

    def __post_init__(self) -> None:
        if self.initial_value is not None:
            self.value = self.initial_value
        elif self.default_value is not None:
            self.value = self.default_value
        else:
            self.value = self.empty_value()

    def empty_value(self) -> Any:
        return None

    def is_empty(self, value: Any) -> bool:
        return value is None or value == ""

    @abstractmethod
    def on(self, action: Action) -> None:
        """Apply a navigation or key action to the value/cursor."""
        ...

    @abstractmethod
    def default_template(self) -> str:
        """Return the frame for the current state."""
        ...

    def render(self) -> str:
        """Frame text for the current state. Pure: no state is changed."""
        if self.template is not None:
            return self.template(self)
        return self.default_template()

    @property
    def result(self) -> T | Any:
        return CANCEL if self.state is PromptState.CANCEL else self.value

    async def prompt(self, manager: PromptManager | None = None) -> T | Any:
        """Run the prompt; returns the submitted value or CANCEL."""
        if self.state.is_final:
            raise RuntimeError("Prompt instances are not reusable")
        if manager is None:
            manager = PromptManager()
        return await manager.run(self)

    def dispatch(self, action: Action) -> None:
        """Advance the state machine by one action."""
        if self.state.is_final:
            return
        if self.state in (PromptState.INITIAL, PromptState.ERROR):
            self.error = ""
            self._set_state(PromptState.ACTIVE)

        match action:
            case Submit():
                self.submit()
            case Cancel():
                self._set_state(PromptState.CANCEL)
            case _:
                try:
                    self.on(action)
                except PromptError as e:
                    self.fail(e.message)

    def submit(self) -> None:
        """Validate the current value and finish, or enter the error state."""
        value = self.value
        if self.is_empty(value) and self.default_value is not None:
            value = self.default_value
        message: str | None = None
        if self.validate is not None:
            try:
                message = self.validate(value)
            except ValidationError as e:
                message = e.message
        if message:
            # A rejected default must not replace what was typed
            self.fail(message)
            return
        self.value = value
        self._set_state(PromptState.SUBMIT)

    def fail(self, message: str) -> None:
        self.error = message
        self._set_state(PromptState.ERROR)

    def _set_state(self, state: PromptState) -> None:
        if state is not self.state:
            logger.debug("%s: %s -> %s", type(self).__name__, self.state.value, state.value)
        self.state = state

    def request_repaint(self) -> None:
        """Ask the render loop for a full repaint (the layout changed height)."""
        self._repaint = True

    def consume_repaint(self) -> bool:
        repaint, self._repaint = self._repaint, False
        return repaint

    # Shared pieces for default templates

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self.state]

    def frame(self, body: list[str]) -> str:
        """Header, indented body lines, and the error line in error state."""
        lines = [f"{self.symbol} {ANSI.BOLD}{self.message}{ANSI.RESET}"]
        lines.extend(f"  {line}" for line in body)
        if self.state is PromptState.ERROR and self.error:
            lines.extend(
                f"  {ANSI.YELLOW}{line}{ANSI.RESET}" for line in self.error.split("\n")
            )
        return "\n".join(lines)

    def summary(self, text: str) -> str:
        """Final one-line body for submitted or cancelled prompts."""
        if self.state is PromptState.CANCEL:
            return f"{ANSI.STRIKE}{ANSI.DIM}{text}{ANSI.RESET}" if text else ""
        return f"{ANSI.DIM}{text}{ANSI.RESET}"
