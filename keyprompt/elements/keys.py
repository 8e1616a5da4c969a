"""Keypress interpretation.

Maps a KeyEvent to a semantic Action. Pure: no terminal access, no state.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from .base import Action, Cancel, Insert, KeyEvent, Navigate, Submit

logger = logging.getLogger(__name__)

ALIAS_ACTIONS = frozenset({"up", "down", "left", "right", "cancel", "submit"})

# Ordered: first match wins.
DEFAULT_ALIASES: tuple[tuple[str, str], ...] = (
    ("k", "up"),
    ("j", "down"),
    ("h", "left"),
    ("l", "right"),
    ("\x03", "cancel"),
    ("escape", "cancel"),
)

_DIRECTIONS = ("up", "down", "left", "right")

# Names the reader emits for sequences it could not resolve.
_DROPPED_NAMES = frozenset({"unknown"})


def _normalize_aliases(
    aliases: Iterable[Sequence[str]],
) -> tuple[tuple[str, str], ...]:
    result = []
    for pair in aliases:
        key, action = pair[0], pair[1]
        if action not in ALIAS_ACTIONS:
            raise ValueError(f"Unknown alias action {action!r} for key {key!r}")
        result.append((key, action))
    return tuple(result)


class KeyInterpreter:
    """Turns keypresses into actions, honoring an alias table.

    Usage:
        interpreter = KeyInterpreter(aliases=[("q", "cancel")])
        action = interpreter.interpret(event, track_value=False)

    User aliases are consulted before DEFAULT_ALIASES.
    """

    def __init__(
        self,
        aliases: Iterable[Sequence[str]] = (),
        *,
        include_defaults: bool = True,
    ) -> None:
        table = _normalize_aliases(aliases)
        if include_defaults:
            table += DEFAULT_ALIASES
        self.aliases = table

    def alias_for(self, event: KeyEvent) -> str | None:
        """Return the action an alias assigns to this event, if any."""
        # Ctrl chords only match by their control byte, so "l" never
        # matches Ctrl+L.
        candidates = (event.sequence,) if event.ctrl else (event.sequence, event.name)
        for key, action in self.aliases:
            if key in candidates:
                return action
        return None

    def is_action_key(self, event: KeyEvent, action: str) -> bool:
        return self.alias_for(event) == action

    def interpret(self, event: KeyEvent, *, track_value: bool = False) -> Action | None:
        """Map an event to an action, or None when it should be dropped.

        When `track_value` is set the prompt is editing free text, so only
        cancel aliases apply and letters are inserted literally.
        """
        alias = self.alias_for(event)
        if alias == "cancel":
            return Cancel()
        if alias is not None and not track_value:
            logger.debug("alias %r -> %s", event.sequence or event.name, alias)
            return _action_for(alias)

        name = event.name
        if name in _DIRECTIONS:
            return Navigate(name)  # type: ignore[arg-type]
        if name == "return":
            return Submit()
        if name == "eof":
            return Cancel()
        if name in _DROPPED_NAMES:
            logger.debug("dropping unresolved sequence %r", event.sequence)
            return None
        if name == "escape":
            # Escape with no cancel alias configured; never insertable.
            return None

        char = event.char or ""
        return Insert(char=char, name=name, sequence=event.sequence, ctrl=event.ctrl)


def _action_for(alias: str) -> Action:
    match alias:
        case "submit":
            return Submit()
        case _:
            return Navigate(alias)  # type: ignore[arg-type]
