"""Scenario definitions and the results produced by running them.

A ``Scenario`` pairs the command configured on the indicator with the
command the harness expects to see in the resulting action event.
Running a scenario walks the ``ScenarioState`` machine and yields a
``ScenarioResult``; a whole run yields a ``RunResult``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ScenarioState(Enum):
    """States a single scenario pass moves through.

    Attributes:
        IDLE: Nothing done yet.
        PREPARED: Command set and read back, capture armed.
        DRIVEN: Pointer positioned and activation gesture issued.
        AWAITING: Waiting for the action event.
        VERIFIED: Event observed with the expected command (terminal).
        FAILED: A contract or setup check failed (terminal).
    """

    IDLE = "idle"
    PREPARED = "prepared"
    DRIVEN = "driven"
    AWAITING = "awaiting"
    VERIFIED = "verified"
    FAILED = "failed"


class FailureKind(Enum):
    """Why a run failed."""

    SETUP_FAILED = "setup_failed"
    INITIAL_STATE = "initial_state"
    ROUND_TRIP = "round_trip"
    EVENT_NOT_OBSERVED = "event_not_observed"
    WRONG_COMMAND = "wrong_command"


class RunOutcome(Enum):
    """Overall result of a harness invocation."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Scenario:
    """One pass of the action-command protocol.

    Attributes:
        name: Short label used in logs.
        command: Value configured on the indicator (``None`` = unset).
        expected: Value the action event must report.
    """

    name: str
    command: str | None
    expected: str | None


def default_scenarios(sample_command: str) -> list[Scenario]:
    """Return the two standard passes: a set command, then an unset one."""
    return [
        Scenario(name="set", command=sample_command, expected=sample_command),
        Scenario(name="unset", command=None, expected=None),
    ]


@dataclass
class ScenarioResult:
    """Outcome of running one scenario pass.

    Attributes:
        scenario: The scenario that was run.
        pass_index: Zero-based position of the pass in the run.
        state: Terminal state (``VERIFIED`` or ``FAILED``).
        history: Every state visited, in order, starting with ``IDLE``.
        observed: Command reported by the action event, if any.
        failure_kind: Classification of the failure; ``None`` on success.
        error: Human-readable diagnostic.  Empty string on success.
        duration_ms: Wall-clock time spent on the pass.
    """

    scenario: Scenario
    pass_index: int
    state: ScenarioState = ScenarioState.IDLE
    history: list[ScenarioState] = field(default_factory=lambda: [ScenarioState.IDLE])
    observed: str | None = None
    failure_kind: FailureKind | None = None
    error: str = ""
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        """True once the pass reached ``VERIFIED``."""
        return self.state is ScenarioState.VERIFIED

    def advance(self, state: ScenarioState) -> None:
        """Move to *state* and append it to the history."""
        self.state = state
        self.history.append(state)

    def fail(self, kind: FailureKind, error: str) -> ScenarioResult:
        """Transition to ``FAILED`` with a diagnostic and return self."""
        self.advance(ScenarioState.FAILED)
        self.failure_kind = kind
        self.error = error
        return self


@dataclass
class RunResult:
    """Outcome of a complete harness invocation.

    Attributes:
        outcome: Passed, failed, or skipped.
        scenarios: Results of the passes that were attempted.
        failure_kind: Classification of the first failure, if any.
        error: Diagnostic for a failure, or the reason for a skip.
        duration_ms: Wall-clock time for the whole run.
    """

    outcome: RunOutcome
    scenarios: list[ScenarioResult] = field(default_factory=list)
    failure_kind: FailureKind | None = None
    error: str = ""
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        return self.outcome is RunOutcome.PASSED
