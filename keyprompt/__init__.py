"""keyprompt: interactive terminal prompts.

A small engine that turns raw keypresses into answers while redrawing the
question in place:
- Prompt state machine: initial -> active -> submit | cancel, with an error
  state for failed validation
- Raw input capture with guaranteed terminal restoration
- Keypress interpretation with a configurable alias table
- In-place frame rendering that only rewrites changed lines

Usage:
    import asyncio
    from keyprompt import SelectPrompt, is_cancel

    color = asyncio.run(SelectPrompt(message="Color?", options=["red", "blue"]).prompt())
    if is_cancel(color):
        raise SystemExit(1)
"""

from .config import PromptSettings, load_config
from .elements import (
    ABORT,
    CANCEL,
    ConfirmPrompt,
    GroupMultiSelectPrompt,
    InputBlock,
    KeyInterpreter,
    MultiSelectPrompt,
    Option,
    PasswordPrompt,
    PathPrompt,
    Prompt,
    PromptManager,
    PromptState,
    SelectKeyPrompt,
    SelectPrompt,
    TextPrompt,
    block,
    is_abort,
    is_cancel,
)
from .errors import (
    DirectoryListingError,
    PromptError,
    ResourceAcquisitionError,
    ValidationError,
)

__all__ = [
    # Prompts
    "Prompt",
    "TextPrompt",
    "PasswordPrompt",
    "ConfirmPrompt",
    "Option",
    "SelectPrompt",
    "SelectKeyPrompt",
    "MultiSelectPrompt",
    "GroupMultiSelectPrompt",
    "PathPrompt",
    # Engine
    "PromptManager",
    "PromptState",
    "KeyInterpreter",
    "InputBlock",
    "block",
    # Results
    "CANCEL",
    "ABORT",
    "is_cancel",
    "is_abort",
    # Configuration
    "PromptSettings",
    "load_config",
    # Errors
    "PromptError",
    "ValidationError",
    "ResourceAcquisitionError",
    "DirectoryListingError",
]
