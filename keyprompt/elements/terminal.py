"""Terminal control for prompts.

This module provides:
- ANSI: Centralized terminal escape sequences and helpers
- RawInputReader: Reads single keystrokes in raw mode
- FrameWriter: Redraws a prompt frame in place, writing only what changed
- InputBlock / block(): Swallows keystrokes while the caller does other work
"""

from __future__ import annotations

import asyncio
import atexit
import fcntl
import logging
import os
import re
import select
import shutil
import sys
import termios
import tty
from typing import IO, Any

import wcwidth

from ..errors import ResourceAcquisitionError
from .base import ABORT, KeyEvent
from .keys import KeyInterpreter

logger = logging.getLogger(__name__)


class ANSI:
    """Centralized ANSI escape sequences and terminal helpers.

    Usage:
        from .terminal import ANSI

        # Colors
        line = f"{ANSI.CYAN}colored text{ANSI.RESET}"

        # Cursor control (returns escape string)
        output.write(ANSI.cursor_up(2))
    """

    # Colors
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"
    GRAY = "\033[90m"

    # Style codes for common text effects
    REVERSE = "\033[7m"  # Inverse/reverse video
    STRIKE = "\033[9m"

    # Cursor visibility
    HIDE_CURSOR = "\033[?25l"
    SHOW_CURSOR = "\033[?25h"

    # Line control
    CLEAR_LINE = "\033[2K"
    CLEAR_TO_END = "\033[K"  # Erase from cursor to end of line
    CLEAR_DOWN = "\033[J"  # Erase from cursor to end of screen
    CARRIAGE_RETURN = "\r"

    # Any CSI sequence, not only SGR, so cursor moves never count as width
    _ANSI_PATTERN = re.compile(r"\033\[[0-9;?]*[@-~]")

    @classmethod
    def cursor_up(cls, n: int = 1) -> str:
        """Move cursor up n lines."""
        return f"\033[{n}A" if n > 0 else ""

    @classmethod
    def cursor_down(cls, n: int = 1) -> str:
        """Move cursor down n lines."""
        return f"\033[{n}B" if n > 0 else ""

    @classmethod
    def cursor_right(cls, n: int = 1) -> str:
        """Move cursor right n columns."""
        return f"\033[{n}C" if n > 0 else ""

    @classmethod
    def cursor_left(cls, n: int = 1) -> str:
        """Move cursor left n columns."""
        return f"\033[{n}D" if n > 0 else ""

    @classmethod
    def get_terminal_width(cls) -> int:
        """Get current terminal width in columns."""
        return shutil.get_terminal_size().columns

    @classmethod
    def _get_char_width(cls, char: str) -> int:
        """Get visual width of character (0 for control, 1-2 for normal)."""
        w = wcwidth.wcwidth(char)
        return w if w > 0 else 0

    @classmethod
    def strip_ansi(cls, s: str) -> str:
        """Remove ANSI escape sequences from string."""
        return cls._ANSI_PATTERN.sub("", s)

    @classmethod
    def visual_len(cls, s: str) -> int:
        """Calculate visual length of string, excluding ANSI escape codes.

        Wide characters (CJK, emoji) count as 2 columns, combining marks and
        control characters as 0.
        """
        return sum(cls._get_char_width(char) for char in cls.strip_ansi(s))

    @classmethod
    def rows(cls, line: str, width: int) -> int:
        """Number of terminal rows a single line occupies at `width` columns."""
        if width <= 0:
            return 1
        return max(1, -(-cls.visual_len(line) // width))


# Escape sequences (without the leading ESC) that resolve to named keys.
_ESCAPE_NAMES = {
    "[A": "up",
    "[B": "down",
    "[C": "right",
    "[D": "left",
    "OA": "up",
    "OB": "down",
    "OC": "right",
    "OD": "left",
    "[H": "home",
    "OH": "home",
    "[1~": "home",
    "[7~": "home",
    "[F": "end",
    "OF": "end",
    "[4~": "end",
    "[8~": "end",
    "[3~": "delete",
    "[Z": "backtab",
}


# Seconds to wait for the rest of an escape sequence after ESC
ESCAPE_TIMEOUT = 0.05


def _utf8_length(lead: int) -> int:
    if lead >= 0xF8:
        return 1
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _is_continuation(byte: int) -> bool:
    return 0x80 <= byte <= 0xBF


class RawInputReader:
    """Reads single keystrokes from the terminal in raw mode.

    When the input stream is not a TTY, or raw mode cannot be enabled, the
    reader degrades to non-interactive mode: bytes are read as they come,
    "\\n" submits and end of input is reported as an "eof" key.
    """

    def __init__(
        self,
        stream: IO[str] | None = None,
        output: IO[str] | None = None,
        *,
        hide_cursor: bool = True,
        debug_keys: bool | None = None,
    ) -> None:
        self.stream = stream if stream is not None else sys.stdin
        self.output = output if output is not None else sys.stdout
        self.hide_cursor = hide_cursor
        if debug_keys is None:
            debug_keys = os.environ.get("KEYPROMPT_DEBUG_KEYS") == "1"
        self.debug_keys = debug_keys
        self.old_settings: list[Any] | None = None
        self.interactive = False
        self._started = False
        # A byte read ahead while decoding UTF-8 that starts the next key
        self._pending = b""

    @property
    def fd(self) -> int:
        return self.stream.fileno()

    @property
    def started(self) -> bool:
        return self._started

    def _is_tty(self) -> bool:
        try:
            return self.stream.isatty()
        except (AttributeError, ValueError):
            return False

    def _write(self, s: str) -> None:
        self.output.write(s)
        self.output.flush()

    def start(self) -> None:
        """Enter raw mode and flush any pending input.

        This method is idempotent - calling it when already started is a no-op.
        """
        if self._started:
            return
        self._started = True
        if self._is_tty():
            try:
                self._enter_raw_mode()
                self.interactive = True
            except ResourceAcquisitionError as e:
                logger.warning("%s; falling back to non-interactive input", e.message)
        else:
            logger.debug("input is not a TTY; reading non-interactively")
        if self.hide_cursor:
            self._write(ANSI.HIDE_CURSOR)
        # Restore the terminal even if the process exits without stop()
        atexit.register(self.stop)

    def _enter_raw_mode(self) -> None:
        try:
            self.old_settings = termios.tcgetattr(self.fd)
            # Flush any pending input to avoid stale keystrokes
            termios.tcflush(self.fd, termios.TCIFLUSH)
            tty.setraw(self.fd)
            # Re-enable output post-processing so '\n' moves to column 1.
            attrs = termios.tcgetattr(self.fd)
            attrs[1] |= termios.OPOST | termios.ONLCR
            termios.tcsetattr(self.fd, termios.TCSADRAIN, attrs)
        except (termios.error, OSError) as e:
            self._restore_mode()
            raise ResourceAcquisitionError(f"Cannot enable raw mode: {e}") from e

    def _restore_mode(self) -> None:
        if self.old_settings is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self.old_settings)
            self.old_settings = None

    def stop(self) -> None:
        """Restore terminal settings and the cursor glyph."""
        if not self._started:
            return
        self.interactive = False
        self._started = False
        atexit.unregister(self.stop)
        try:
            self._restore_mode()
        finally:
            if self.hide_cursor:
                self._write(ANSI.SHOW_CURSOR)

    async def read(self) -> KeyEvent:
        """Wait for the next keypress without blocking the event loop."""
        if self._pending:
            return self._read_sync()
        loop = asyncio.get_running_loop()
        ready: asyncio.Future[None] = loop.create_future()

        def _on_readable() -> None:
            if not ready.done():
                ready.set_result(None)

        try:
            loop.add_reader(self.fd, _on_readable)
        except (OSError, NotImplementedError, ValueError):
            # Regular files cannot be watched by the selector
            return await loop.run_in_executor(None, self._read_sync)
        try:
            await ready
        finally:
            loop.remove_reader(self.fd)
        return self._read_sync()

    def _read_sync(self) -> KeyEvent:
        """Synchronous read of a single key."""
        if self._pending:
            data, self._pending = self._pending, b""
        else:
            data = os.read(self.fd, 1)
        if not data:
            return KeyEvent(raw=b"", name="eof")

        lead = data[0]
        if lead >= 0x80:
            return self._read_utf8(data)

        ch = chr(lead)
        if ch == "\r":
            return KeyEvent(raw=data, name="return", sequence=ch)
        if ch == "\n":
            if self.interactive:
                # Ctrl+J (LF) is a control key, not Enter, on a real terminal
                return KeyEvent(raw=data, name="j", sequence=ch, ctrl=True)
            return KeyEvent(raw=data, name="return", sequence=ch)
        if ch == "\x1b":
            return self._read_escape(data)
        if ch in ("\x7f", "\x08"):
            return KeyEvent(raw=data, name="backspace", sequence=ch)
        if ch == "\t":
            return KeyEvent(raw=data, name="tab", sequence=ch)
        if ch == " ":
            return KeyEvent(raw=data, name="space", sequence=ch)
        if lead < 32:
            # Map Ctrl+<letter> to its letter (Ctrl+A -> "a", etc.)
            letter = chr(lead + 96)
            name = letter if "a" <= letter <= "z" else None
            return KeyEvent(raw=data, name=name, sequence=ch, ctrl=True)
        name = ch.lower() if ch.isalnum() else None
        return KeyEvent(raw=data, name=name, sequence=ch)

    def _read_utf8(self, data: bytes) -> KeyEvent:
        """Complete a multi-byte character, one continuation byte at a time.

        A byte that cannot continue the character is kept for the next read,
        and an invalid sequence is reported as "unknown" so it gets dropped.
        """
        for _ in range(_utf8_length(data[0]) - 1):
            byte = os.read(self.fd, 1)
            if not byte:
                break
            if not _is_continuation(byte[0]):
                self._pending = byte
                break
            data += byte
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            return KeyEvent(raw=data, name="unknown")
        return KeyEvent(raw=data, name=None, sequence=text)

    def _read_escape(self, data: bytes) -> KeyEvent:
        # Set non-blocking mode to check for more chars
        flags = fcntl.fcntl(self.fd, fcntl.F_GETFL)
        fcntl.fcntl(self.fd, fcntl.F_SETFL, flags | os.O_NONBLOCK)
        try:
            seq = self._read_escape_sequence()
        finally:
            # Restore blocking mode
            fcntl.fcntl(self.fd, fcntl.F_SETFL, flags)

        if not seq:
            return KeyEvent(raw=data, name="escape", sequence="\x1b")
        raw = data + seq.encode("utf-8")
        sequence = "\x1b" + seq
        name = _ESCAPE_NAMES.get(seq)
        if name is None:
            if self.debug_keys:
                logger.debug("unknown escape seq: %r", seq)
            name = "unknown"
        return KeyEvent(raw=raw, name=name, sequence=sequence)

    def _next_escape_byte(self) -> bytes:
        """Next byte of an escape sequence, or b"" once input stays quiet."""
        if not select.select([self.fd], [], [], ESCAPE_TIMEOUT)[0]:
            return b""
        try:
            return os.read(self.fd, 1)
        except (BlockingIOError, OSError):
            return b""

    def _read_escape_sequence(self) -> str | None:
        """Read an escape sequence after ESC in non-blocking mode."""
        ch2 = self._next_escape_byte()
        if ch2 == b"[":
            seq = bytearray()
            # CSI: read until final byte in 0x40..0x7E
            while True:
                b = self._next_escape_byte()
                if not b:
                    break
                seq.extend(b)
                if 0x40 <= b[0] <= 0x7E:
                    break
                if len(seq) >= 12:
                    break
            return "[" + seq.decode("utf-8", errors="ignore")
        if ch2 == b"O":
            return "O" + self._next_escape_byte().decode("utf-8", errors="ignore")
        return ch2.decode("utf-8", errors="ignore") or None


def _first_difference(old: list[str], new: list[str]) -> int:
    for i, (a, b) in enumerate(zip(old, new)):
        if a != b:
            return i
    return min(len(old), len(new))


class FrameWriter:
    """Redraws a prompt frame in place.

    The cursor is kept at the end of the frame's last line. A redraw moves
    up to the first line that changed, clears everything below and writes
    the remainder, so unchanged headers are never rewritten. Line heights
    are measured in physical rows so wrapped lines are erased too.
    """

    def __init__(self, output: IO[str] | None = None) -> None:
        self.output = output if output is not None else sys.stdout
        self._lines: list[str] | None = None
        self._finished = False

    @property
    def lines(self) -> list[str]:
        return list(self._lines or [])

    @property
    def finished(self) -> bool:
        return self._finished

    def _write(self, s: str) -> None:
        self.output.write(s)
        self.output.flush()

    def render(self, frame: str, *, full: bool = False) -> None:
        """Write `frame`, replacing the previously written one.

        With `full` the whole previous frame is erased and repainted, which
        is required after the frame layout changed height.
        """
        if self._finished:
            return
        lines = frame.split("\n")
        if self._lines is None:
            self._write(frame)
            self._lines = lines
            return
        if not full and lines == self._lines:
            return

        previous = self._lines
        start = 0
        if not full:
            start = min(_first_difference(previous, lines), len(previous) - 1, len(lines) - 1)
        width = ANSI.get_terminal_width()
        heights = [ANSI.rows(line, width) for line in previous]
        up = sum(heights) - 1 - sum(heights[:start])
        self._write(
            ANSI.cursor_up(up)
            + ANSI.CARRIAGE_RETURN
            + ANSI.CLEAR_DOWN
            + "\n".join(lines[start:])
        )
        self._lines = lines

    def finish(self) -> None:
        """Leave the terminal on a fresh line below the final frame."""
        if self._finished:
            return
        if self._lines is not None:
            self._write("\n")
        self._finished = True


class InputBlock:
    """Captures the keyboard while the caller does something else.

    Keystrokes are swallowed. With `signal`, a key aliased to "cancel"
    fast-aborts: the capture is released and, with `exit_on_abort`, the
    process exits with status 1. This hard exit bypasses any prompt state
    machine and is intentional. With `exit_on_abort=False` the abort is
    reported as `result is ABORT` instead.

    Usage:
        async with InputBlock() as capture:
            await do_work()
        if is_abort(capture.result):
            ...
    """

    def __init__(
        self,
        reader: RawInputReader | None = None,
        interpreter: KeyInterpreter | None = None,
        *,
        signal: bool = True,
        overwrite: bool = True,
        hide_cursor: bool = True,
        exit_on_abort: bool = True,
    ) -> None:
        self.reader = reader if reader is not None else RawInputReader(hide_cursor=hide_cursor)
        self.interpreter = interpreter if interpreter is not None else KeyInterpreter()
        self.signal = signal
        self.overwrite = overwrite
        self.exit_on_abort = exit_on_abort
        self.result: object = None
        self._task: asyncio.Task[None] | None = None
        self._released = False

    def start(self) -> InputBlock:
        """Acquire the input stream; must be called from a running loop."""
        self.reader.start()
        self._task = asyncio.get_running_loop().create_task(self._watch())
        return self

    async def _watch(self) -> None:
        while True:
            event = await self.reader.read()
            if self.signal and self.interpreter.is_action_key(event, "cancel"):
                self._abort()
                return
            if event.name == "eof":
                return
            # Only echoed input needs erasing; raw mode does not echo
            if self.overwrite and not self.reader.interactive:
                self._erase(event)

    def _erase(self, event: KeyEvent) -> None:
        if event.name == "return":
            move = ANSI.cursor_up(1)
        else:
            move = ANSI.cursor_left(1)
        self.reader.output.write(move + ANSI.CLEAR_TO_END)
        self.reader.output.flush()

    def _abort(self) -> None:
        self.release()
        self.result = ABORT
        if self.exit_on_abort:
            logger.info("cancel key pressed while input was blocked; exiting")
            sys.exit(1)

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Stop capturing and restore the terminal. Safe to call twice."""
        if self._released:
            return
        self._released = True
        task = self._task
        if task is not None and not task.done():
            try:
                current = asyncio.current_task()
            except RuntimeError:
                current = None
            if task is not current:
                task.cancel()
        self.reader.stop()

    __call__ = release

    async def __aenter__(self) -> InputBlock:
        return self.start()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: object,
    ) -> None:
        self.release()


def block(
    *,
    signal: bool = True,
    overwrite: bool = True,
    hide_cursor: bool = True,
    exit_on_abort: bool = True,
    interpreter: KeyInterpreter | None = None,
) -> InputBlock:
    """Acquire the terminal input and return the release callable."""
    return InputBlock(
        interpreter=interpreter,
        signal=signal,
        overwrite=overwrite,
        hide_cursor=hide_cursor,
        exit_on_abort=exit_on_abort,
    ).start()
