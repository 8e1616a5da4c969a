"""Command line entry point: ask one question and print the answer.

Usage:
    keyprompt text "What is your name?" --placeholder anonymous
    keyprompt confirm "Continue?" --no
    keyprompt select "Pick a color" red green blue
    keyprompt multiselect "Toppings" cheese ham olives --optional
    keyprompt password "Token"
    keyprompt path "Where to?" --start ~/src --dirs-only

The answer goes to stdout; a cancelled prompt prints "Cancelled." and
exits with status 1.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Any

from rich.console import Console

from .config import PromptSettings
from .display import format_answer, format_cancelled, format_error_message
from .elements import (
    ConfirmPrompt,
    MultiSelectPrompt,
    PasswordPrompt,
    PathPrompt,
    Prompt,
    PromptManager,
    SelectPrompt,
    TextPrompt,
    is_cancel,
)


def _required(value: Any) -> str | None:
    return None if value else "A value is required."


def _directory(value: str) -> str | None:
    return None if os.path.isdir(value) else f"{value} is not a directory."


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="keyprompt", description="Ask one interactive question")
    parser.add_argument("--config", metavar="FILE", help="Settings file (default: ~/.keyprompt.json)")
    parser.add_argument(
        "--alias",
        metavar="KEY=ACTION",
        action="append",
        default=[],
        help="Extra key alias, e.g. q=cancel (repeatable)",
    )
    parser.add_argument("--json", action="store_true", help="Print the answer as JSON")
    parser.add_argument("--log-file", metavar="FILE", help="Write engine logs to FILE")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level")

    sub = parser.add_subparsers(dest="kind", required=True)

    text = sub.add_parser("text", help="Free text")
    text.add_argument("message")
    text.add_argument("--placeholder", default="")
    text.add_argument("--default", dest="default_value")
    text.add_argument("--initial", dest="initial_value")
    text.add_argument("--required", action="store_true")

    password = sub.add_parser("password", help="Masked text")
    password.add_argument("message")
    password.add_argument("--mask", default="▪")
    password.add_argument("--required", action="store_true")

    confirm = sub.add_parser("confirm", help="Yes/no")
    confirm.add_argument("message")
    confirm.add_argument("--no", action="store_true", help="Start on the negative answer")

    select = sub.add_parser("select", help="Pick one option")
    select.add_argument("message")
    select.add_argument("options", nargs="+")
    select.add_argument("--initial", dest="initial_value")
    select.add_argument("--max-items", type=int)

    multiselect = sub.add_parser("multiselect", help="Pick several options")
    multiselect.add_argument("message")
    multiselect.add_argument("options", nargs="+")
    multiselect.add_argument("--optional", action="store_true", help="Allow an empty answer")
    multiselect.add_argument("--max-items", type=int)

    path = sub.add_parser("path", help="Browse the filesystem")
    path.add_argument("message")
    path.add_argument("--start", help="Starting directory (default: current directory)")
    path.add_argument("--dirs-only", action="store_true", help="Only accept directories")
    path.add_argument("--max-items", type=int, default=12)
    return parser


def build_prompt(args: argparse.Namespace) -> Prompt[Any]:
    """Create the prompt a parsed command line asks for."""
    match args.kind:
        case "text":
            return TextPrompt(
                message=args.message,
                placeholder=args.placeholder,
                default_value=args.default_value,
                initial_value=args.initial_value,
                validate=_required if args.required else None,
            )
        case "password":
            return PasswordPrompt(
                message=args.message,
                mask=args.mask,
                validate=_required if args.required else None,
            )
        case "confirm":
            return ConfirmPrompt(message=args.message, initial_value=not args.no)
        case "select":
            return SelectPrompt(
                message=args.message,
                options=args.options,
                initial_value=args.initial_value,
                max_items=args.max_items,
            )
        case "multiselect":
            return MultiSelectPrompt(
                message=args.message,
                options=args.options,
                required=not args.optional,
                max_items=args.max_items,
            )
        case "path":
            start = os.path.expanduser(args.start) if args.start else None
            return PathPrompt(
                message=args.message,
                initial_value=start,
                validate=_directory if args.dirs_only else None,
                max_items=args.max_items,
            )
    raise ValueError(f"Unknown prompt kind: {args.kind}")


def load_settings(args: argparse.Namespace) -> PromptSettings:
    settings = PromptSettings.load(args.config)
    for spec in args.alias:
        key, sep, action = spec.partition("=")
        if not sep or not key:
            raise ValueError(f"Alias must look like KEY=ACTION, got {spec!r}")
        settings.aliases.append((key, action))
    return settings


def main(argv: list[str] | None = None) -> None:
    """Entry point for the keyprompt command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # The terminal belongs to the prompt; logs only ever go to a file
    if args.log_file:
        logging.basicConfig(
            filename=args.log_file,
            level=logging.DEBUG if args.debug else logging.INFO,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    console = Console()
    try:
        settings = load_settings(args)
        prompt = build_prompt(args)
        manager = PromptManager(settings)
    except ValueError as e:
        console.print(format_error_message(str(e)))
        sys.exit(2)

    try:
        result = asyncio.run(prompt.prompt(manager))
    except KeyboardInterrupt:
        console.print(format_cancelled())
        sys.exit(130)

    if is_cancel(result):
        console.print(format_cancelled())
        sys.exit(1)
    console.print(format_answer(result, json_output=args.json))


if __name__ == "__main__":
    main()
