"""Configuration loading for keyprompt."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.expanduser("~/.keyprompt.json")


def config_path() -> str:
    """Config file location, honoring KEYPROMPT_CONFIG."""
    return os.environ.get("KEYPROMPT_CONFIG") or DEFAULT_CONFIG_PATH


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load config from disk. Returns empty dict if not found or invalid."""
    path = path or config_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}
    except FileNotFoundError:
        return {}
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("ignoring unreadable config %s: %s", path, e)
        return {}


@dataclass
class PromptSettings:
    """Engine settings passed explicitly to managers and input blocks.

    Example config file:
        {
          "aliases": [["q", "cancel"], ["w", "up"]],
          "hide_cursor": true,
          "exit_on_abort": true
        }
    """

    aliases: list[tuple[str, str]] = field(default_factory=list)
    hide_cursor: bool = True
    exit_on_abort: bool = True
    debug_keys: bool = False

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> PromptSettings:
        aliases = []
        for pair in config.get("aliases", []):
            if isinstance(pair, (list, tuple)) and len(pair) == 2:
                aliases.append((str(pair[0]), str(pair[1])))
            else:
                logger.warning("ignoring malformed alias %r", pair)
        return cls(
            aliases=aliases,
            hide_cursor=bool(config.get("hide_cursor", True)),
            exit_on_abort=bool(config.get("exit_on_abort", True)),
            debug_keys=bool(config.get("debug_keys", False))
            or os.environ.get("KEYPROMPT_DEBUG_KEYS") == "1",
        )

    @classmethod
    def load(cls, path: str | None = None) -> PromptSettings:
        return cls.from_config(load_config(path))
