"""Answer formatting for the command line using Rich renderables."""

from __future__ import annotations

from typing import Any

from rich.console import RenderableType
from rich.json import JSON
from rich.text import Text


def format_answer(value: Any, *, json_output: bool = False) -> RenderableType:
    """Format a submitted answer.

    Lists, booleans and None are shown as JSON so they stay machine
    readable; strings are printed as-is unless `json_output` is set.
    """
    if json_output or not isinstance(value, str):
        return JSON.from_data(value)
    return Text(value)


def format_cancelled() -> Text:
    """Format the line shown when the user cancelled the prompt."""
    return Text("Cancelled.", style="dim")


def format_error_message(text: str) -> Text:
    """Format an error message with red styling."""
    result = Text()
    result.append("Error: ", style="red bold")
    result.append(text, style="red")
    return result
