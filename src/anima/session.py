"""Session state and the synchronous builder API.

A ``Session`` owns the counters for one run and exposes every check
primitive. Groups compose in program order::

    from anima import Session

    status = (
        Session()
        .group("pythagoras", lambda s: s.eq("3-4-5", [3 * 3 + 4 * 4], 5 * 5))
        .skip("not ready yet")
        .run()
    )
    sys.exit(status)
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

from anima.assertions.base import AssertionResult
from anima.assertions.checks import Assertions
from anima.formatter import Console
from anima.pacer import DEFAULT_PACE_MS, Pacer
from anima.reporter import ExitStatus, results
from anima.verbose import setup_logger

if TYPE_CHECKING:
    from anima.config import AnimaConfig

DEFAULT_SUCCESS_MESSAGE = "no errors have been found"
DEFAULT_FAILURE_MESSAGE = "errors have been found"

GroupBody = Callable[["Session"], Any]


@dataclass(frozen=True)
class Counters:
    """Point-in-time copy of a session's counters."""

    asserts: int
    failures: int
    skipped: int
    elapsed: float

    @property
    def success(self) -> bool:
        return self.failures == 0


class Session(Assertions):
    """Counters, pacing and output for one test run.

    Args:
        pace_ms: Delay before every result line, in milliseconds.
        console: Where lines are written (default: stdout, auto-detected width).
        logger: Debug logger (default: this module's logger).
        banner: Title printed on construction. Pass None to print nothing.
        success_message: Report headline when no check failed.
        failure_message: Report headline when at least one check failed.
    """

    def __init__(
        self,
        pace_ms: int = DEFAULT_PACE_MS,
        console: Console | None = None,
        logger: logging.Logger | None = None,
        banner: str | None = "starting tests",
        success_message: str = DEFAULT_SUCCESS_MESSAGE,
        failure_message: str = DEFAULT_FAILURE_MESSAGE,
    ):
        self.console = console or Console()
        self.logger = logger or logging.getLogger(__name__)
        self.pacer = Pacer(pace_ms)
        self.success_message = success_message
        self.failure_message = failure_message
        self.last_result: AssertionResult | None = None

        self._lock = threading.Lock()
        self._asserts = 0
        self._failures = 0
        self._skipped = 0
        self.started_at = time.monotonic()
        self.started_on = datetime.now(timezone.utc)

        self.logger.debug(f"Session started at {self.started_on.isoformat()}")
        if banner:
            self.console.title(banner)

    @classmethod
    def from_config(cls, config: AnimaConfig, **kwargs: Any) -> "Session":
        """Build a session from an ``AnimaConfig``; kwargs override config values."""
        options = session_options(config, with_logger="logger" not in kwargs)
        options.update(kwargs)
        return cls(**options)

    # -- counters -------------------------------------------------------

    @property
    def asserts(self) -> int:
        with self._lock:
            return self._asserts

    @property
    def failures(self) -> int:
        with self._lock:
            return self._failures

    @property
    def skipped(self) -> int:
        with self._lock:
            return self._skipped

    @property
    def pace_ms(self) -> int:
        return self.pacer.pace_ms

    def set_sleep_time(self, pace_ms: int) -> "Session":
        self.pacer.pace_ms = pace_ms
        return self

    def elapsed(self) -> float:
        """Seconds since the session was created."""
        return time.monotonic() - self.started_at

    def snapshot(self) -> Counters:
        with self._lock:
            return Counters(
                asserts=self._asserts,
                failures=self._failures,
                skipped=self._skipped,
                elapsed=self.elapsed(),
            )

    # -- primitives used by Assertions ----------------------------------

    def check(self, description: str, passed: bool, message: str | None = None) -> bool:
        passed = bool(passed)
        self._print(description, passed, message, counted=True)
        with self._lock:
            if passed:
                self._asserts += 1
            else:
                self._failures += 1
        return passed

    def confirm(self, description: str, passed: bool) -> bool:
        passed = bool(passed)
        self._print(description, passed, None, counted=False)
        return passed

    def inform(self, message: str) -> None:
        self.console.success(message)

    def count_skip(self, description: str) -> None:
        self.pacer.wait()
        with self._lock:
            self._skipped += 1
        self.console.skipped(description)
        self.logger.debug(f"Skipped: {description}")

    def _print(self, description: str, passed: bool, message: str | None, counted: bool) -> None:
        text = message or description
        self.last_result = AssertionResult(
            name=description, passed=passed, message=text, counted=counted
        )
        self.pacer.wait()
        if passed:
            self.console.success(text)
        else:
            self.console.failure(text)

    # -- grouping -------------------------------------------------------

    def group(self, description: str, body: GroupBody) -> "Session":
        """Print a title, then run ``body`` with this session."""
        self.console.title(description)
        self.logger.debug(f"Group: {description}")
        body(self)
        return self

    def subgroup(self, description: str, body: GroupBody) -> "Session":
        """Like ``group`` but rendered nested under the current group."""
        self.console.subtitle(description)
        self.logger.debug(f"Subgroup: {description}")
        body(self)
        return self

    # -- reporting ------------------------------------------------------

    def run(self) -> ExitStatus:
        """Print the summary and return the exit status. Call once per run."""
        counters = self.snapshot()
        self.logger.debug(
            f"Run finished: {counters.asserts} asserts, {counters.failures} failures, "
            f"{counters.skipped} skipped in {counters.elapsed:.3f}s"
        )
        return results(
            counters.success, self.success_message, self.failure_message, self
        )


def session_options(config: AnimaConfig, with_logger: bool = True) -> dict[str, Any]:
    """Translate an ``AnimaConfig`` into ``Session`` constructor arguments."""
    options: dict[str, Any] = {
        "pace_ms": config.pace_ms,
        "console": Console(width=config.output.width, color=config.output.color.enabled),
        "success_message": config.success_message,
        "failure_message": config.failure_message,
    }
    if config.log_file and with_logger:
        options["logger"] = setup_logger(
            Path(config.log_file),
            verbose=config.verbose,
            logger_name=config.logger_name,
        )
    return options
