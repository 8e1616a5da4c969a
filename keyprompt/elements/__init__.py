"""Interactive prompt elements.

This package provides the prompt engine (state machine, raw input, key
interpretation, frame rendering) and the concrete prompts built on it.

Usage:
    from keyprompt.elements import TextPrompt, is_cancel

    name = await TextPrompt(message="What is your name?").prompt()
    if is_cancel(name):
        ...
"""

from .base import (
    ABORT,
    CANCEL,
    Action,
    Cancel,
    Insert,
    KeyEvent,
    Navigate,
    PromptState,
    Submit,
    is_abort,
    is_cancel,
)
from .confirm import ConfirmPrompt
from .cursor import Entry, PathCursor, PathTree, cursor_down, cursor_up, list_directory
from .keys import DEFAULT_ALIASES, KeyInterpreter
from .manager import PromptManager
from .multiselect import GroupMultiSelectPrompt, MultiSelectPrompt
from .path import PathPrompt
from .prompt import Prompt
from .select import Option, SelectKeyPrompt, SelectPrompt
from .terminal import ANSI, FrameWriter, InputBlock, RawInputReader, block
from .text import PasswordPrompt, TextPrompt

__all__ = [
    # Base
    "KeyEvent",
    "Action",
    "Navigate",
    "Submit",
    "Cancel",
    "Insert",
    "PromptState",
    "CANCEL",
    "ABORT",
    "is_cancel",
    "is_abort",
    # Engine
    "Prompt",
    "PromptManager",
    "KeyInterpreter",
    "DEFAULT_ALIASES",
    # Terminal
    "ANSI",
    "RawInputReader",
    "FrameWriter",
    "InputBlock",
    "block",
    # Navigation
    "cursor_up",
    "cursor_down",
    "Entry",
    "PathTree",
    "PathCursor",
    "list_directory",
    # Prompts
    "TextPrompt",
    "PasswordPrompt",
    "ConfirmPrompt",
    "Option",
    "SelectPrompt",
    "SelectKeyPrompt",
    "MultiSelectPrompt",
    "GroupMultiSelectPrompt",
    "PathPrompt",
]
