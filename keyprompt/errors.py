"""Error types raised inside the prompt engine.

Cancellation is deliberately absent: a cancelled prompt resolves with the
CANCEL sentinel instead of raising.
"""

from __future__ import annotations

__all__ = [
    "PromptError",
    "ValidationError",
    "ResourceAcquisitionError",
    "DirectoryListingError",
]


class PromptError(Exception):
    """Base class for errors that a prompt turns into its error state."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PromptError):
    """The submitted value was rejected by the prompt's validator."""


class ResourceAcquisitionError(PromptError):
    """Raw mode could not be enabled on the input stream."""


class DirectoryListingError(PromptError):
    """A directory could not be listed by the path browser.

    Example:
        >>> try:
        ...     tree.expand(node)
        ... except DirectoryListingError as e:
        ...     print(e.path, e.message)
    """

    def __init__(self, path: str, cause: OSError) -> None:
        reason = cause.strerror or cause.__class__.__name__
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = path
        self.cause = cause
