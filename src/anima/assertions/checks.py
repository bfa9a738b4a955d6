"""Check primitives shared by every session.

Each primitive evaluates one or more conditions, prints one line per
condition and returns the session so calls can be chained::

    session.ok("linux only", [sys.platform == "linux"]).eq("sum", [3 + 4], 7)
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Container, Iterable, Sized, TypeVar

from anima.assertions.base import FatalAssertionError

logger = logging.getLogger(__name__)

T = TypeVar("T")
Self = TypeVar("Self", bound="Assertions")


class Assertions(ABC):
    """Mixin implementing the check primitives.

    The host class provides ``check`` (counted), ``confirm`` (printed but not
    counted), ``inform`` (informational success line) and ``count_skip``.
    """

    @abstractmethod
    def check(self, description: str, passed: bool, message: str | None = None) -> bool:
        ...

    @abstractmethod
    def confirm(self, description: str, passed: bool) -> bool:
        ...

    @abstractmethod
    def inform(self, message: str) -> None:
        ...

    @abstractmethod
    def count_skip(self, description: str) -> None:
        ...

    # -- boolean checks -------------------------------------------------

    def ok(self: Self, description: str, data: Iterable[bool]) -> Self:
        """Every element of ``data`` must be True."""
        for value in data:
            self.check(description, value == True)  # noqa: E712
        return self

    def ko(self: Self, description: str, data: Iterable[bool]) -> Self:
        """Every element of ``data`` must be False."""
        for value in data:
            self.check(description, value == False)  # noqa: E712
        return self

    # -- comparisons ----------------------------------------------------

    def eq(self: Self, description: str, data: Iterable[T], expected: T) -> Self:
        for value in data:
            self.check(description, value == expected)
        return self

    def ne(self: Self, description: str, data: Iterable[T], expected: T) -> Self:
        for value in data:
            self.check(description, value != expected)
        return self

    def gt(self: Self, description: str, data: Iterable[T], expected: T) -> Self:
        for value in data:
            self.check(description, value > expected)
        return self

    def lt(self: Self, description: str, data: Iterable[T], expected: T) -> Self:
        for value in data:
            self.check(description, value < expected)
        return self

    def ge(self: Self, description: str, data: Iterable[T], expected: T) -> Self:
        for value in data:
            self.check(description, value >= expected)
        return self

    def le(self: Self, description: str, data: Iterable[T], expected: T) -> Self:
        for value in data:
            self.check(description, value <= expected)
        return self

    def is_(self: Self, description: str, value: T, expected: T) -> Self:
        return self.eq(description, [value], expected)

    def not_(self: Self, description: str, value: T, expected: T) -> Self:
        return self.ne(description, [value], expected)

    def len(self: Self, description: str, data: Iterable[T], expected: T) -> Self:
        """Compare collection-derived values (e.g. ``[len(items)]``) to a count."""
        return self.eq(description, data, expected)

    # -- shape checks ---------------------------------------------------

    def empty(self: Self, description: str, data: Sized) -> Self:
        self.check(description, len(data) == 0)
        return self

    def between(self: Self, description: str, min: T, max: T, current: T) -> Self:
        """Pass iff ``min < current < max``; both bounds are exclusive."""
        self.check(description, min < current < max)
        return self

    def full(self: Self, description: str, min: int, max: int, current: int) -> Self:
        """Pass iff ``(min + current) // max == 1``. No check when ``max`` is 0."""
        if max == 0:
            logger.debug(f"full check '{description}' not evaluated: max is 0")
            return self
        self.check(description, (min + current) // max == 1)
        return self

    # -- callables ------------------------------------------------------

    def throws(
        self: Self,
        description: str,
        f: Callable[[], Any],
        expected: type[BaseException] | tuple[type[BaseException], ...] = Exception,
    ) -> Self:
        """Pass iff ``f()`` raises ``expected``. Other exceptions propagate."""
        try:
            f()
        except expected as e:
            self.check(description, True, f"{description} (threw: {e!r})")
        else:
            self.check(description, False, f"{description} (no error thrown)")
        return self

    def timed(self: Self, description: str, f: Callable[[], bool]) -> Self:
        start = time.perf_counter()
        passed = bool(f())
        duration_ms = int((time.perf_counter() - start) * 1000)
        self.check(description, passed)
        self.inform(f"completed in {duration_ms} ms")
        return self

    # -- fatal primitives -----------------------------------------------

    def always(
        self: Self, description: str, iterations: int, expected: T, f: Callable[[], T]
    ) -> Self:
        """Call ``f`` ``iterations`` times; abort the run on the first mismatch."""
        for i in range(iterations):
            value = f()
            self._require(description, i, value, value == expected)
        return self

    def confirm_contains_in(
        self: Self,
        description: str,
        iterations: int,
        expected: Container[T],
        f: Callable[[], T],
    ) -> Self:
        for i in range(iterations):
            value = f()
            self._require(description, i, value, value in expected)
        return self

    def confirm_not_contains_in(
        self: Self,
        description: str,
        iterations: int,
        expected: Container[T],
        f: Callable[[], T],
    ) -> Self:
        for i in range(iterations):
            value = f()
            self._require(description, i, value, value not in expected)
        return self

    def _require(self, description: str, iteration: int, value: Any, passed: bool) -> None:
        if not self.confirm(description, passed):
            logger.debug(
                f"Fatal check '{description}' failed at iteration {iteration}: {value!r}"
            )
            raise FatalAssertionError(description, iteration, value)

    # -- skips ----------------------------------------------------------

    def skip(self: Self, description: str) -> Self:
        self.count_skip(description)
        return self
