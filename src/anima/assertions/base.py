"""Base data structures for the assertion system."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AssertionResult:
    """Outcome of evaluating a single check.

    Attributes:
        name: The check description as given by the caller.
        passed: Whether the condition held.
        message: Line text actually printed (may carry extra detail, e.g.
            the exception raised inside ``throws``).
        counted: False for informational and fatal-primitive lines, which do
            not touch the asserts/failures counters.
    """

    name: str
    passed: bool
    message: str
    counted: bool = True


class FatalAssertionError(AssertionError):
    """Raised by ``always`` and the ``confirm_*`` primitives on a mismatch.

    Unlike ordinary check failures this aborts the run.
    """

    def __init__(self, description: str, iteration: int, value: Any):
        self.description = description
        self.iteration = iteration
        self.value = value
        super().__init__(
            f"{description}: iteration {iteration} produced {value!r}"
        )
