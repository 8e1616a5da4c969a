"""Tests for the generic prompt state machine in keyprompt/elements/prompt.py.

Covers:
- initial -> active -> submit/cancel/error transitions
- Default value substitution and validation at submit time only
- Cancellation sentinel identity
- Render purity and custom templates
"""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from keyprompt.elements.base import (
    ABORT,
    CANCEL,
    Action,
    Cancel,
    Insert,
    Navigate,
    PromptState,
    Sentinel,
    Submit,
    is_abort,
    is_cancel,
)
from keyprompt.elements.prompt import Prompt
from keyprompt.elements.text import TextPrompt
from keyprompt.errors import DirectoryListingError, ValidationError


@dataclass
class CounterPrompt(Prompt[int]):
    """Minimal prompt: up/down change an integer."""

    def empty_value(self) -> int:
        return 0

    def on(self, action: Action) -> None:
        match action:
            case Navigate(direction="up"):
                self.value += 1
            case Navigate(direction="down"):
                self.value -= 1
            case Insert(char="!"):
                raise DirectoryListingError("/nowhere", PermissionError(13, "Permission denied"))

    def default_template(self) -> str:
        return self.frame([str(self.value)])


class TestLifecycle:
    """Tests for state transitions."""

    def test_starts_initial_with_empty_value(self) -> None:
        prompt = CounterPrompt()
        assert prompt.state is PromptState.INITIAL
        assert prompt.value == 0

    def test_initial_value_wins_over_default(self) -> None:
        assert CounterPrompt(initial_value=3, default_value=7).value == 3

    def test_default_used_without_initial_value(self) -> None:
        assert CounterPrompt(default_value=7).value == 7

    def test_first_event_activates(self) -> None:
        prompt = CounterPrompt()
        prompt.dispatch(Navigate("up"))
        assert prompt.state is PromptState.ACTIVE
        assert prompt.value == 1

    def test_submit_is_terminal(self) -> None:
        prompt = CounterPrompt()
        prompt.dispatch(Submit())
        assert prompt.state is PromptState.SUBMIT
        prompt.dispatch(Navigate("up"))
        prompt.dispatch(Cancel())
        assert prompt.state is PromptState.SUBMIT
        assert prompt.value == 0

    def test_cancel_is_terminal_and_freezes_value(self) -> None:
        prompt = CounterPrompt()
        prompt.dispatch(Navigate("up"))
        prompt.dispatch(Cancel())
        prompt.dispatch(Navigate("up"))
        assert prompt.state is PromptState.CANCEL
        assert prompt.value == 1
        assert prompt.result is CANCEL

    def test_cancel_from_error_state(self) -> None:
        prompt = CounterPrompt(validate=lambda v: "nope")
        prompt.dispatch(Submit())
        assert prompt.state is PromptState.ERROR
        prompt.dispatch(Cancel())
        assert prompt.state is PromptState.CANCEL

    def test_result_is_value_after_submit(self) -> None:
        prompt = CounterPrompt(initial_value=4)
        prompt.dispatch(Submit())
        assert prompt.result == 4


class TestValidation:
    """Tests for submit-time validation."""

    def test_failing_validator_enters_error_state(self) -> None:
        prompt = CounterPrompt(validate=lambda v: None if v > 0 else "Must be positive")
        prompt.dispatch(Submit())
        assert prompt.state is PromptState.ERROR
        assert prompt.error == "Must be positive"

    def test_next_event_returns_to_active(self) -> None:
        prompt = CounterPrompt(validate=lambda v: None if v > 0 else "Must be positive")
        prompt.dispatch(Submit())
        prompt.dispatch(Navigate("up"))
        assert prompt.state is PromptState.ACTIVE
        assert prompt.error == ""

    def test_validator_rerun_on_next_submit(self) -> None:
        prompt = CounterPrompt(validate=lambda v: None if v > 0 else "Must be positive")
        prompt.dispatch(Submit())
        prompt.dispatch(Navigate("up"))
        prompt.dispatch(Submit())
        assert prompt.state is PromptState.SUBMIT
        assert prompt.value == 1

    def test_validator_not_called_while_editing(self) -> None:
        calls: list[int] = []

        def validate(value: int) -> None:
            calls.append(value)

        prompt = CounterPrompt(validate=validate)
        prompt.dispatch(Navigate("up"))
        prompt.dispatch(Navigate("up"))
        assert calls == []
        prompt.dispatch(Submit())
        assert calls == [2]

    def test_validator_may_raise_validation_error(self) -> None:
        def validate(value: int) -> None:
            raise ValidationError("Try again")

        prompt = CounterPrompt(validate=validate)
        prompt.dispatch(Submit())
        assert prompt.state is PromptState.ERROR
        assert prompt.error == "Try again"

    def test_collaborator_error_becomes_error_state(self) -> None:
        prompt = CounterPrompt()
        prompt.dispatch(Insert(char="!"))
        assert prompt.state is PromptState.ERROR
        assert "Permission denied" in prompt.error

    def test_error_line_rendered_below_prompt(self) -> None:
        prompt = CounterPrompt(message="Count", validate=lambda v: "Too small")
        prompt.dispatch(Submit())
        lines = prompt.render().split("\n")
        assert "Count" in lines[0]
        assert "Too small" in lines[-1]


class TestDefaultSubmission:
    """Tests for default value substitution."""

    def test_submit_default_when_no_value(self) -> None:
        prompt = TextPrompt(initial_value="", default_value="fallback")
        prompt.dispatch(Submit())
        assert prompt.state is PromptState.SUBMIT
        assert prompt.value == "fallback"

    def test_submit_explicit_value(self) -> None:
        prompt = TextPrompt(default_value="fallback")
        prompt.value = "typed"
        prompt.dispatch(Submit())
        assert prompt.state is PromptState.SUBMIT
        assert prompt.value == "typed"

    def test_default_is_validated(self) -> None:
        prompt = TextPrompt(initial_value="", default_value="x", validate=lambda v: "bad" if v == "x" else None)
        prompt.dispatch(Submit())
        assert prompt.state is PromptState.ERROR


class TestSentinels:
    """Tests for the cancellation sentinel."""

    def test_is_cancel_only_for_the_sentinel(self) -> None:
        assert is_cancel(CANCEL)
        assert not is_cancel("keyprompt:cancel")
        assert not is_cancel(Sentinel("keyprompt:cancel"))
        assert not is_cancel(None)
        assert not is_cancel(ABORT)

    def test_is_abort_only_for_the_sentinel(self) -> None:
        assert is_abort(ABORT)
        assert not is_abort(CANCEL)
        assert not is_abort(Sentinel("keyprompt:abort"))

    def test_cancelled_prompt_never_returns_entered_value(self) -> None:
        prompt = TextPrompt()
        for ch in "secret":
            prompt.dispatch(Insert(char=ch))
        prompt.dispatch(Cancel())
        assert prompt.result is CANCEL
        assert prompt.result != "secret"


class TestRendering:
    """Tests for render purity and templates."""

    def test_render_is_idempotent(self) -> None:
        prompt = CounterPrompt(message="Count")
        prompt.dispatch(Navigate("up"))
        assert prompt.render() == prompt.render()
        assert prompt.state is PromptState.ACTIVE
        assert prompt.value == 1

    def test_custom_template_replaces_default(self) -> None:
        prompt = CounterPrompt(template=lambda p: f"{p.state.value}:{p.value}")
        assert prompt.render() == "initial:0"
        prompt.dispatch(Navigate("down"))
        assert prompt.render() == "active:-1"

    def test_repaint_request_is_consumed_once(self) -> None:
        prompt = CounterPrompt()
        prompt.request_repaint()
        assert prompt.consume_repaint() is True
        assert prompt.consume_repaint() is False

    @pytest.mark.asyncio
    async def test_finished_prompt_cannot_run_again(self) -> None:
        prompt = CounterPrompt()
        prompt.dispatch(Submit())
        with pytest.raises(RuntimeError, match="not reusable"):
            await prompt.prompt()
