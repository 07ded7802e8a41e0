"""Tray action-command harness entry point.

Wires the platform layer, dispatch thread, tray indicator, event
capture, gesture driver and scenario runner together, runs both
scenario passes, and reports the outcome through the exit code.

Typical usage::

    python -m tray_harness.main

Programmatic usage::

    from tray_harness.main import run_harness

    result = run_harness()
    print(result.outcome)

Exit codes: ``0`` passed, ``1`` failed, ``77`` skipped (the
environment cannot exercise the tray at all).
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace

from tray_harness.config.settings import Settings
from tray_harness.core.dispatch_thread import DispatchThread
from tray_harness.core.event_capture import EventCapture
from tray_harness.core.gesture_driver import GestureDriver
from tray_harness.core.icon_locator import IconLocator
from tray_harness.core.scenario_runner import ScenarioRunner
from tray_harness.models.actions import ActivationArity
from tray_harness.models.scenario import FailureKind, RunOutcome, RunResult
from tray_harness.platform.capability import (
    check_environment,
    resolve_activation_arity,
)
from tray_harness.platform.interface import (
    PlatformInterface,
    create_platform,
    detect_platform_name,
)
from tray_harness.widget.interface import TrayIndicator

logger = logging.getLogger(__name__)

EXIT_PASSED = 0
EXIT_FAILED = 1
EXIT_SKIPPED = 77

_EXIT_CODES: dict[RunOutcome, int] = {
    RunOutcome.PASSED: EXIT_PASSED,
    RunOutcome.FAILED: EXIT_FAILED,
    RunOutcome.SKIPPED: EXIT_SKIPPED,
}

IndicatorFactory = Callable[[DispatchThread, Settings], TrayIndicator]


# ---------------------------------------------------------------------------
# Harness
# ---------------------------------------------------------------------------


@dataclass
class Harness:
    """All components of one harness run.

    Constructed via ``build_harness``.  Callers run it with
    ``runner.run()`` and must call ``close`` afterwards.

    Attributes:
        platform: OS input driver and screen capture.
        dispatcher: Dispatch thread owning the indicator state.
        indicator: Tray indicator under test.
        capture: Event hand-off between dispatch and driver threads.
        driver: Synthetic input driver.
        runner: Scenario orchestrator.
        settings: Immutable configuration.
    """

    platform: PlatformInterface
    dispatcher: DispatchThread
    indicator: TrayIndicator
    capture: EventCapture
    driver: GestureDriver
    runner: ScenarioRunner
    settings: Settings

    def close(self) -> None:
        """Remove the icon, stop the dispatch thread, release the platform.

        Safe to call multiple times.
        """
        try:
            self.runner.teardown()
        finally:
            self.dispatcher.stop()
            self.platform.close()


def _pystray_indicator(
    dispatcher: DispatchThread,
    settings: Settings,
) -> TrayIndicator:
    from tray_harness.widget.icon import make_icon_image
    from tray_harness.widget.pystray_indicator import PystrayIndicator

    return PystrayIndicator(
        dispatcher,
        settings.icon_tooltip,
        image=make_icon_image(settings.icon_size),
        setup_timeout=settings.idle_timeout_ms / 1000.0,
    )


def build_harness(
    platform: PlatformInterface,
    settings: Settings | None = None,
    indicator_factory: IndicatorFactory | None = None,
) -> Harness:
    """Create all components and return a wired ``Harness``.

    The dispatch thread is started here and the indicator is created
    on it.  If construction fails the dispatch thread is stopped again
    before the exception propagates; the platform stays owned by the
    caller.

    Args:
        platform: Input/capture backend.
        settings: Optional settings override.
        indicator_factory: Builds the indicator; defaults to the
            pystray backend.

    Returns:
        A fully constructed ``Harness``.
    """
    if settings is None:
        settings = Settings()
    if indicator_factory is None:
        indicator_factory = _pystray_indicator

    # 1. Dispatch thread
    dispatcher = DispatchThread(settings.dispatch_thread_name)
    dispatcher.start()

    try:
        # 2. Indicator, created on the dispatch thread
        indicator: TrayIndicator = dispatcher.invoke_and_wait(
            indicator_factory, dispatcher, settings,
        )

        # 3. Activation arity, chosen once
        arity = resolve_activation_arity(
            platform.get_platform_name(),
            override=settings.activation_arity,
            native=indicator.native_arity,
        )
        logger.info("Activation gesture: %s click", arity.name.lower())

        # 4. Capture, locator, driver, runner
        capture = EventCapture()
        locator = IconLocator(platform, settings)
        driver = GestureDriver(platform, dispatcher, locator, settings, arity)
        runner = ScenarioRunner(indicator, dispatcher, driver, capture, settings)
    except BaseException:
        dispatcher.stop()
        raise

    return Harness(
        platform=platform,
        dispatcher=dispatcher,
        indicator=indicator,
        capture=capture,
        driver=driver,
        runner=runner,
        settings=settings,
    )


def run_harness(
    settings: Settings | None = None,
    platform: PlatformInterface | None = None,
    indicator_factory: IndicatorFactory | None = None,
    environ: Mapping[str, str] | None = None,
    os_release: Mapping[str, str] | None = None,
    tray_available: bool | None = None,
) -> RunResult:
    """Check the environment, build the harness, run it, tear it down.

    Args:
        settings: Optional settings override.
        platform: Pre-built platform; created for the running OS when
            omitted.
        indicator_factory: Optional indicator factory (see
            ``build_harness``).
        environ: Environment for capability checks.
        os_release: ``/etc/os-release`` fields for capability
            checks.
        tray_available: Tray backend probe result; probed when omitted.

    Returns:
        The ``RunResult``.  Unsupported environments yield ``SKIPPED``.
    """
    if settings is None:
        settings = Settings()

    platform_name = settings.platform_name or (
        platform.get_platform_name() if platform is not None
        else detect_platform_name()
    )

    # 1. Environment
    report = check_environment(
        platform_name,
        environ=environ,
        os_release=os_release,
        tray_available=tray_available,
    )
    for warning in report.warnings:
        logger.warning("%s", warning)
    if not report.supported:
        logger.info("Skipped: %s", report.reason)
        return RunResult(outcome=RunOutcome.SKIPPED, error=report.reason)

    # 2. Platform
    if platform is None:
        try:
            platform = create_platform(platform_name)
        except (ImportError, NotImplementedError) as exc:
            reason = f"Input simulation is not available: {exc}"
            logger.info("Skipped: %s", reason)
            return RunResult(outcome=RunOutcome.SKIPPED, error=reason)

    # 3. Build & run
    try:
        harness = build_harness(platform, settings, indicator_factory)
    except Exception as exc:
        platform.close()
        error = f"Harness setup failed: {exc}"
        logger.error("%s", error)
        return RunResult(
            outcome=RunOutcome.FAILED,
            failure_kind=FailureKind.SETUP_FAILED,
            error=error,
        )

    try:
        return harness.runner.run()
    finally:
        harness.close()


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def main() -> None:
    """Parse CLI arguments, run the harness, and exit with its outcome."""
    parser = argparse.ArgumentParser(
        prog="tray_harness",
        description=(
            "Verify that activating a tray icon raises an action event "
            "carrying the configured action command."
        ),
    )
    parser.add_argument(
        "--timeout-ms",
        type=int,
        default=None,
        help="Bound on waiting for each action event (default 3000).",
    )
    parser.add_argument(
        "--arity",
        choices=[member.name.lower() for member in ActivationArity],
        default="",
        help="Force a single or double click activation gesture.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging.",
    )

    args = parser.parse_args()

    # -- Logging setup ---------------------------------------------------
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # -- Settings --------------------------------------------------------
    settings = Settings()
    if args.timeout_ms is not None:
        settings = replace(settings, wait_timeout_ms=args.timeout_ms)
    if args.arity:
        settings = replace(settings, activation_arity=args.arity)

    result = run_harness(settings)
    _print_result(result)
    sys.exit(exit_code(result))


def exit_code(result: RunResult) -> int:
    """Map a run outcome to the process exit code."""
    return _EXIT_CODES[result.outcome]


def _print_result(result: RunResult) -> None:
    """Print the diagnostic for a failed or skipped run.

    Passing runs print nothing.

    Args:
        result: The ``RunResult`` returned by ``run_harness``.
    """
    if result.outcome is RunOutcome.FAILED:
        print(f"FAIL: {result.error}", file=sys.stderr)
    elif result.outcome is RunOutcome.SKIPPED:
        print(f"SKIPPED: {result.error}", file=sys.stderr)


if __name__ == "__main__":
    main()
