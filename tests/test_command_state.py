"""Tests for tray_harness.core.command_state and the indicator accessors."""

from __future__ import annotations

import threading

import pytest

from tray_harness.core.command_state import CommandState
from tray_harness.core.dispatch_thread import DispatchThread

from conftest import FakeIndicator

_ROUND_TRIP_VALUES = [
    "Sample Command",
    "",
    "   padded   ",
    "line\nbreak",
    "Команда",
    "サンプルコマンド",
    "emoji \U0001f680",
]


class TestCommandState:
    """Single-slot store semantics."""

    def test_initial_value_is_none(self) -> None:
        assert CommandState().get() is None

    @pytest.mark.parametrize("value", _ROUND_TRIP_VALUES)
    def test_set_then_get_returns_value_verbatim(self, value: str) -> None:
        state = CommandState()
        state.set(value)
        assert state.get() == value

    def test_set_none_after_value_reads_none(self) -> None:
        state = CommandState()
        state.set("something")
        state.set(None)
        assert state.get() is None

    def test_empty_string_is_distinct_from_none(self) -> None:
        state = CommandState()
        state.set("")
        assert state.get() is not None

    def test_lock_is_present(self) -> None:
        state = CommandState()
        assert isinstance(state._lock, type(threading.Lock()))


class TestIndicatorCommand:
    """The indicator exposes the command through its own accessors."""

    def test_new_indicator_has_no_command(self, dispatcher: DispatchThread) -> None:
        indicator = FakeIndicator(dispatcher)
        assert indicator.get_action_command() is None

    @pytest.mark.parametrize("value", _ROUND_TRIP_VALUES + [None])
    def test_round_trip_on_dispatch_thread(
        self, dispatcher: DispatchThread, value: str | None,
    ) -> None:
        indicator = FakeIndicator(dispatcher)

        def _set_and_get() -> str | None:
            indicator.set_action_command(value)
            return indicator.get_action_command()

        assert dispatcher.invoke_and_wait(_set_and_get) == value
