"""Prompt manager: runs one prompt session against the terminal.

PromptManager:
- Owns the raw input reader and key interpreter
- Ensures only one prompt or input block holds the terminal at a time
- Feeds interpreted actions to the prompt and redraws after each one
- Hands out InputBlocks that swallow keys between prompts

Terminal resources are created lazily so a manager can be built in non-TTY
environments (e.g., tests) and handed fakes instead.
"""

from __future__ import annotations

import logging
from typing import IO, TYPE_CHECKING, Any, Protocol

from ..config import PromptSettings
from .base import KeyEvent
from .keys import KeyInterpreter
from .terminal import FrameWriter, InputBlock, RawInputReader

if TYPE_CHECKING:
    from .prompt import Prompt

logger = logging.getLogger(__name__)


class InputReader(Protocol):
    """What the manager needs from an input source."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    async def read(self) -> KeyEvent: ...


class PromptManager:
    """Coordinates a prompt with terminal I/O.

    Only one prompt can be active at a time; concurrent prompts must be
    serialized by the caller.
    """

    def __init__(
        self,
        settings: PromptSettings | None = None,
        *,
        reader: InputReader | None = None,
        output: IO[str] | None = None,
        interpreter: KeyInterpreter | None = None,
    ) -> None:
        self.settings = settings if settings is not None else PromptSettings()
        self.output = output
        self.interpreter = (
            interpreter
            if interpreter is not None
            else KeyInterpreter(self.settings.aliases)
        )
        self._reader = reader
        self._active: Prompt[Any] | None = None
        self._block: InputBlock | None = None

    @property
    def active(self) -> Prompt[Any] | None:
        return self._active

    def _check_free(self) -> None:
        """Raise if a prompt or an unreleased block holds the terminal."""
        if self._active is not None or (self._block is not None and not self._block.released):
            raise RuntimeError("Another prompt is already active")

    def _ensure_reader(self) -> InputReader:
        """Lazily initialize the TTY reader on first use."""
        if self._reader is None:
            self._reader = RawInputReader(
                output=self.output,
                hide_cursor=self.settings.hide_cursor,
                debug_keys=self.settings.debug_keys,
            )
        return self._reader

    def block(self, *, signal: bool = True, overwrite: bool = True) -> InputBlock:
        """Swallow input outside a prompt, using this manager's aliases and settings.

        Must be called from a running event loop; release the returned block
        before running the next prompt.
        """
        self._check_free()
        self._block = InputBlock(
            self._ensure_reader(),  # type: ignore[arg-type]
            self.interpreter,
            signal=signal,
            overwrite=overwrite,
            exit_on_abort=self.settings.exit_on_abort,
        ).start()
        return self._block

    async def run(self, prompt: Prompt[Any]) -> Any:
        """Run a prompt until it is submitted or cancelled."""
        self._check_free()
        self._block = None
        self._active = prompt
        reader = self._ensure_reader()
        writer = FrameWriter(self.output)
        reader.start()
        try:
            writer.render(prompt.render())
            while not prompt.state.is_final:
                event = await reader.read()
                action = self.interpreter.interpret(
                    event, track_value=prompt.track_value
                )
                if action is None:
                    continue
                prompt.dispatch(action)
                writer.render(prompt.render(), full=prompt.consume_repaint())
            writer.finish()
        finally:
            reader.stop()
            self._active = None

        logger.debug("%s finished in state %s", type(prompt).__name__, prompt.state.value)
        return prompt.result
