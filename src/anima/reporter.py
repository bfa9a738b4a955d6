"""Run summary and exit status.

``results`` is the only place where run-level success is decided.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import TYPE_CHECKING

from anima.formatter import FAILURE, SUCCESS

if TYPE_CHECKING:
    from anima.session import Session

logger = logging.getLogger(__name__)


class ExitStatus(IntEnum):
    SUCCESS = 0
    FAILURE = 1


def results(
    success: bool, success_message: str, failure_message: str, session: Session
) -> ExitStatus:
    """Print the summary for ``session`` and return its exit status.

    ``success`` picks the headline and line styles. The returned status is
    derived from the final counters alone: SUCCESS iff no check failed.

    Elapsed time is shown in whole seconds on success and in milliseconds on
    failure.
    """
    console = session.console
    counters = session.snapshot()

    if success:
        console.success(success_message)
        console.success(f"asserts  {counters.asserts}")
        console.success(f"failure  {counters.failures}")
        console.skipped(f"skipped  {counters.skipped}")
        console.title(f"execution time {int(counters.elapsed)}s", SUCCESS)
    else:
        console.failure(failure_message)
        console.failure(f"asserts  {counters.asserts}")
        console.failure(f"failure  {counters.failures}")
        console.skipped(f"skipped  {counters.skipped}")
        console.title(f"execution time {int(counters.elapsed * 1000)} ms", FAILURE)

    status = ExitStatus.SUCCESS if counters.failures == 0 else ExitStatus.FAILURE
    logger.debug(f"Exit status: {status.name}")
    return status
