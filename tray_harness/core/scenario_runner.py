"""Runs the action-command scenarios against a tray indicator.

The ``ScenarioRunner`` lives on the driver thread.  For every scenario
it walks ``IDLE -> PREPARED -> DRIVEN -> AWAITING -> VERIFIED`` (or
``FAILED``):

1. *Prepare*: set the command on the dispatch thread and read it back,
   blocking until both are done, then arm the ``EventCapture``.
2. *Drive*: on later passes park the pointer away and bring it back,
   then position it on the icon, wait for idle, and issue the
   activation gesture.
3. *Await*: check the capture immediately, then wait once more up to
   ``wait_timeout_ms``.  The gesture is never re-issued.
4. *Verify*: the event must have fired and must report exactly the
   expected command (``None`` matches ``None``).

The first failure ends the run.

Typical usage::

    runner = ScenarioRunner(indicator, dispatcher, driver, capture, settings)
    try:
        result = runner.run()
    finally:
        runner.teardown()
"""

from __future__ import annotations

import logging
import time

from tray_harness.config.settings import Settings
from tray_harness.core.dispatch_thread import DispatchThread
from tray_harness.core.event_capture import EventCapture
from tray_harness.core.gesture_driver import GestureDriver
from tray_harness.models.events import ActionEvent
from tray_harness.models.scenario import (
    FailureKind,
    RunOutcome,
    RunResult,
    Scenario,
    ScenarioResult,
    ScenarioState,
    default_scenarios,
)
from tray_harness.widget.interface import TrayIndicator

logger = logging.getLogger(__name__)

_ORDINALS: tuple[str, ...] = ("first", "second", "third", "fourth")


def _ordinal(index: int) -> str:
    if index < len(_ORDINALS):
        return _ORDINALS[index]
    return f"#{index + 1}"


class ScenarioRunner:
    """Drives scenarios end-to-end and verifies each action event.

    All sub-components are injected via the constructor for
    testability.  The runner registers exactly one listener on the
    indicator; that listener only records into the ``EventCapture``.

    Args:
        indicator: The tray indicator under test.
        dispatcher: Dispatch thread that owns the indicator's state.
        driver: Synthetic input driver.
        capture: Event hand-off between the two threads.
        settings: Timeouts and the sample command.
    """

    def __init__(
        self,
        indicator: TrayIndicator,
        dispatcher: DispatchThread,
        driver: GestureDriver,
        capture: EventCapture,
        settings: Settings,
    ) -> None:
        self._indicator = indicator
        self._dispatcher = dispatcher
        self._driver = driver
        self._capture = capture
        self._settings = settings
        self._installed = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, scenarios: list[Scenario] | None = None) -> RunResult:
        """Install the indicator, then run every scenario in order.

        Args:
            scenarios: Passes to run.  Defaults to the set-command pass
                followed by the unset-command pass.

        Returns:
            ``PASSED`` only if every pass verified; otherwise ``FAILED``
            with the first diagnostic.
        """
        if scenarios is None:
            scenarios = default_scenarios(self._settings.sample_command)
        started = time.monotonic()

        failure = self.setup()
        if failure is not None:
            kind, error = failure
            return self._failed_run([], kind, error, started)

        try:
            position = self._driver.locate(self._indicator)
        except Exception as exc:
            return self._failed_run(
                [], FailureKind.SETUP_FAILED,
                f"Locating the icon failed: {exc}", started,
            )
        if position is None:
            return self._failed_run(
                [], FailureKind.SETUP_FAILED,
                "Unable to find the icon location", started,
            )
        logger.info("Tray icon located at (%d, %d)", *position)

        results: list[ScenarioResult] = []
        for index, scenario in enumerate(scenarios):
            result = self.run_scenario(scenario, index, position)
            results.append(result)
            if not result.success:
                assert result.failure_kind is not None
                return self._failed_run(
                    results, result.failure_kind, result.error, started,
                )
            logger.info(
                "Pass %d (%s) verified in %.0f ms",
                index + 1, scenario.name, result.duration_ms,
            )

        return RunResult(
            outcome=RunOutcome.PASSED,
            scenarios=results,
            duration_ms=(time.monotonic() - started) * 1000.0,
        )

    def setup(self) -> tuple[FailureKind, str] | None:
        """Register the listener, check the initial state, show the icon.

        Runs on the dispatch thread and then waits for the dispatch
        queue to go idle.

        Returns:
            ``None`` on success, or ``(kind, diagnostic)`` on failure.
        """
        try:
            failure = self._dispatcher.invoke_and_wait(self._install)
        except Exception as exc:
            return (FailureKind.SETUP_FAILED, f"Tray icon setup failed: {exc}")
        if failure is not None:
            return failure
        self._driver.wait_for_idle()
        return None

    def run_scenario(
        self,
        scenario: Scenario,
        pass_index: int,
        position: tuple[int, int],
    ) -> ScenarioResult:
        """Run one pass of the protocol.

        Args:
            scenario: Command to configure and the command to expect.
            pass_index: Zero-based pass number, used in diagnostics and
                to apply the settle delay on the first pass only.
            position: Screen position of the icon.

        Returns:
            A ``ScenarioResult`` in state ``VERIFIED`` or ``FAILED``.
        """
        result = ScenarioResult(scenario=scenario, pass_index=pass_index)
        started = time.monotonic()
        ordinal = _ordinal(pass_index)

        # 1. Prepare: set + read back on the dispatch thread, then arm.
        try:
            observed = self._dispatcher.invoke_and_wait(
                self._apply_command, scenario.command,
            )
        except Exception as exc:
            result.fail(
                FailureKind.SETUP_FAILED,
                f"Setting the action command failed on the {ordinal} pass: {exc}",
            )
            return self._finish(result, started)
        if observed != scenario.command:
            result.fail(
                FailureKind.ROUND_TRIP,
                f"Action command read back as {observed!r} after setting "
                f"{scenario.command!r} on the {ordinal} pass",
            )
            return self._finish(result, started)
        self._capture.arm()
        result.advance(ScenarioState.PREPARED)

        # 2. Drive: hover refresh (later passes), position, idle barrier,
        #    gesture.
        settle_ms = self._settings.settle_delay_ms if pass_index == 0 else 0
        try:
            if pass_index > 0:
                self._driver.refresh_hover(position)
            self._driver.move_to(*position)
            self._driver.wait_for_idle(settle_ms)
            self._driver.activate()
        except Exception as exc:
            result.fail(
                FailureKind.SETUP_FAILED,
                f"Synthetic input failed on the {ordinal} pass: {exc}",
            )
            return self._finish(result, started)
        result.advance(ScenarioState.DRIVEN)

        # 3. Await: immediate check, then one bounded wait.
        result.advance(ScenarioState.AWAITING)
        snapshot = self._capture.wait_for_signal(0)
        if not snapshot.triggered:
            snapshot = self._capture.wait_for_signal(
                self._settings.wait_timeout_ms,
            )

        # 4. Verify.
        if not snapshot.triggered:
            result.fail(
                FailureKind.EVENT_NOT_OBSERVED,
                f"Action event not observed on the {ordinal} pass when the "
                f"icon was {self._driver.arity.verb} with the command set to "
                f"{scenario.command!r} (waited "
                f"{self._settings.wait_timeout_ms} ms)",
            )
            return self._finish(result, started)
        if snapshot.count > 1:
            logger.warning(
                "Action event fired %d times on the %s pass",
                snapshot.count, ordinal,
            )

        result.observed = snapshot.command
        if snapshot.command != scenario.expected:
            result.fail(
                FailureKind.WRONG_COMMAND,
                f"Action event reported the wrong command on the {ordinal} "
                f"pass. Returned: {snapshot.command!r}; "
                f"Expected: {scenario.expected!r}",
            )
            return self._finish(result, started)

        result.advance(ScenarioState.VERIFIED)
        return self._finish(result, started)

    def teardown(self) -> None:
        """Remove the icon from the tray if it was installed."""
        if not self._installed or not self._dispatcher.is_running:
            return
        self._installed = False
        try:
            self._dispatcher.invoke_and_wait(
                self._indicator.remove,
                timeout=self._settings.idle_timeout_ms / 1000.0,
            )
        except Exception:
            logger.exception("Removing the tray icon failed")

    # ------------------------------------------------------------------
    # Dispatch-thread work
    # ------------------------------------------------------------------

    def _install(self) -> tuple[FailureKind, str] | None:
        self._indicator.add_action_listener(self._on_action)

        initial = self._indicator.get_action_command()
        if initial is not None:
            return (
                FailureKind.INITIAL_STATE,
                f"Action command was not absent before any was set: {initial!r}",
            )

        sample = self._settings.sample_command
        observed = self._apply_command(sample)
        if observed != sample:
            return (
                FailureKind.ROUND_TRIP,
                f"Action command read back as {observed!r}; expected {sample!r}",
            )

        self._indicator.add_to_tray()
        self._installed = True
        return None

    def _apply_command(self, command: str | None) -> str | None:
        self._indicator.set_action_command(command)
        return self._indicator.get_action_command()

    def _on_action(self, event: ActionEvent) -> None:
        self._capture.record(event.command)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _finish(result: ScenarioResult, started: float) -> ScenarioResult:
        result.duration_ms = (time.monotonic() - started) * 1000.0
        return result

    @staticmethod
    def _failed_run(
        results: list[ScenarioResult],
        kind: FailureKind,
        error: str,
        started: float,
    ) -> RunResult:
        logger.error("Run failed (%s): %s", kind.value, error)
        return RunResult(
            outcome=RunOutcome.FAILED,
            scenarios=results,
            failure_kind=kind,
            error=error,
            duration_ms=(time.monotonic() - started) * 1000.0,
        )
