"""Hook-orchestrated test suites.

A ``Suite`` owns a ``Session`` plus ordered hooks and groups. ``run`` drives
them strictly one at a time::

    before_all* -> (before_each* -> group -> after_each*)* -> after_all*

then prints the report. Hooks and groups are "runnable units": plain
callables or coroutine functions taking the shared session. The unit's
backing (blocking call or awaited task) is chosen from the callable itself,
and the suite's ``mode`` decides how the whole run is driven.

Example:
    async def open_db(session):
        session.db = await connect()

    async def queries(session):
        session.ok("db answers", [await session.db.ping()])

    status = (
        Suite("database")
        .add_before_all_hooks(open_db)
        .add_group(queries, "queries")
        .run()
    )
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from anima.reporter import ExitStatus
from anima.session import Session, session_options

if TYPE_CHECKING:
    from anima.config import AnimaConfig

Unit = Callable[[Session], Any]


class SchedulerError(TypeError):
    """A hook or group cannot be run in the suite's mode."""


class Mode(str, Enum):
    BLOCKING = "blocking"
    ASYNC = "async"


class Phase(str, Enum):
    IDLE = "idle"
    BEFORE_ALL = "before_all"
    BEFORE_EACH = "before_each"
    GROUP = "group"
    AFTER_EACH = "after_each"
    AFTER_ALL = "after_all"
    REPORTED = "reported"


class HookPoint(str, Enum):
    BEFORE_ALL = "before_all"
    BEFORE_EACH = "before_each"
    AFTER_EACH = "after_each"
    AFTER_ALL = "after_all"


class Runnable(ABC):
    """One hook or group body. Its return value is always discarded."""

    def __init__(self, fn: Unit, description: str | None = None):
        self.fn = fn
        self.description = description

    @property
    def name(self) -> str:
        return self.description or getattr(self.fn, "__name__", repr(self.fn))

    @abstractmethod
    def run_blocking(self, session: Session) -> None:
        ...

    @abstractmethod
    async def run_async(self, session: Session) -> None:
        ...


class BlockingUnit(Runnable):
    def run_blocking(self, session: Session) -> None:
        result = self.fn(session)
        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            raise SchedulerError(
                f"'{self.name}' returned an awaitable; use a suite in async mode"
            )

    async def run_async(self, session: Session) -> None:
        result = self.fn(session)
        if inspect.isawaitable(result):
            await result


class TaskUnit(Runnable):
    def run_blocking(self, session: Session) -> None:
        raise SchedulerError(f"'{self.name}' is a coroutine function; use async mode")

    async def run_async(self, session: Session) -> None:
        await self.fn(session)


def as_runnable(fn: Unit | Runnable, description: str | None = None) -> Runnable:
    """Wrap ``fn`` in the unit type matching how it must be invoked."""
    if isinstance(fn, Runnable):
        return fn
    if not callable(fn):
        raise SchedulerError(f"Hooks and groups must be callable, got {fn!r}")
    if inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(
        getattr(fn, "__call__", None)
    ):
        return TaskUnit(fn, description)
    return BlockingUnit(fn, description)


class Suite:
    """Ordered hooks and groups around a shared session.

    Args:
        description: Printed as a title when the run starts (if not empty).
        mode: ``Mode.ASYNC`` awaits every unit in sequence inside an event
            loop; ``Mode.BLOCKING`` calls them directly and rejects coroutine
            functions at registration.
        session: Session to drive. A new one is created when omitted, using
            ``session_kwargs``; passing both raises ``TypeError``.
    """

    def __init__(
        self,
        description: str = "",
        mode: Mode | str = Mode.ASYNC,
        session: Session | None = None,
        **session_kwargs: Any,
    ):
        self.description = description
        self.mode = Mode(mode)
        if session is None:
            session_kwargs.setdefault("banner", None)
            session = Session(**session_kwargs)
        elif session_kwargs:
            raise TypeError(
                f"Session options {sorted(session_kwargs)} cannot be combined with an existing session"
            )
        self.session = session
        self.logger = session.logger
        self.hooks: dict[HookPoint, list[Runnable]] = {point: [] for point in HookPoint}
        self.groups: list[Runnable] = []
        self.phase = Phase.IDLE

    @classmethod
    def from_config(
        cls,
        config: AnimaConfig,
        description: str = "",
        mode: Mode | str = Mode.ASYNC,
        **session_kwargs: Any,
    ) -> "Suite":
        options = session_options(config, with_logger="logger" not in session_kwargs)
        options.update(session_kwargs)
        return cls(description, mode, **options)

    # -- registration ---------------------------------------------------

    def _accept(self, fn: Unit | Runnable, description: str | None = None) -> Runnable:
        unit = as_runnable(fn, description)
        if self.mode is Mode.BLOCKING and isinstance(unit, TaskUnit):
            raise SchedulerError(
                f"'{unit.name}' is a coroutine function; blocking suites need plain callables"
            )
        return unit

    def add_hooks(self, point: HookPoint | str, *hooks: Unit | Runnable) -> "Suite":
        point = HookPoint(point)
        self.hooks[point].extend(self._accept(hook) for hook in hooks)
        return self

    def add_before_all_hooks(self, *hooks: Unit | Runnable) -> "Suite":
        return self.add_hooks(HookPoint.BEFORE_ALL, *hooks)

    def add_before_each_hooks(self, *hooks: Unit | Runnable) -> "Suite":
        return self.add_hooks(HookPoint.BEFORE_EACH, *hooks)

    def add_after_each_hooks(self, *hooks: Unit | Runnable) -> "Suite":
        return self.add_hooks(HookPoint.AFTER_EACH, *hooks)

    def add_after_all_hooks(self, *hooks: Unit | Runnable) -> "Suite":
        return self.add_hooks(HookPoint.AFTER_ALL, *hooks)

    def add_group(self, body: Unit | Runnable, description: str | None = None) -> "Suite":
        """Register a group; a title is printed before it runs if ``description`` is set."""
        self.groups.append(self._accept(body, description))
        return self

    def add_groups(self, *bodies: Unit | Runnable) -> "Suite":
        for body in bodies:
            self.add_group(body)
        return self

    # -- execution ------------------------------------------------------

    def run(self) -> ExitStatus:
        """Execute every hook and group, then report.

        Not guarded against repeated calls: a second call runs everything
        again on the same session. In async mode this starts its own event
        loop; use ``run_async`` from code that is already inside one.
        """
        if self.mode is Mode.ASYNC:
            return asyncio.run(self.run_async())

        self._start()
        self._run_hooks_blocking(Phase.BEFORE_ALL, HookPoint.BEFORE_ALL)
        for group in self.groups:
            self._run_hooks_blocking(Phase.BEFORE_EACH, HookPoint.BEFORE_EACH)
            self._enter(Phase.GROUP, group)
            group.run_blocking(self.session)
            self._run_hooks_blocking(Phase.AFTER_EACH, HookPoint.AFTER_EACH)
        self._run_hooks_blocking(Phase.AFTER_ALL, HookPoint.AFTER_ALL)
        return self._finish()

    async def run_async(self) -> ExitStatus:
        self._start()
        await self._run_hooks_async(Phase.BEFORE_ALL, HookPoint.BEFORE_ALL)
        for group in self.groups:
            await self._run_hooks_async(Phase.BEFORE_EACH, HookPoint.BEFORE_EACH)
            self._enter(Phase.GROUP, group)
            await group.run_async(self.session)
            await self._run_hooks_async(Phase.AFTER_EACH, HookPoint.AFTER_EACH)
        await self._run_hooks_async(Phase.AFTER_ALL, HookPoint.AFTER_ALL)
        return self._finish()

    def _run_hooks_blocking(self, phase: Phase, point: HookPoint) -> None:
        for hook in self.hooks[point]:
            self._enter(phase, hook)
            hook.run_blocking(self.session)

    async def _run_hooks_async(self, phase: Phase, point: HookPoint) -> None:
        for hook in self.hooks[point]:
            self._enter(phase, hook)
            await hook.run_async(self.session)

    def _start(self) -> None:
        self.logger.debug(
            f"Suite '{self.description}' starting in {self.mode.value} mode: "
            f"{len(self.groups)} group(s), "
            f"{sum(len(h) for h in self.hooks.values())} hook(s)"
        )
        if self.description:
            self.session.console.title(self.description)

    def _enter(self, phase: Phase, unit: Runnable) -> None:
        self.phase = phase
        self.logger.debug(f"[{phase.value}] {unit.name}")
        if phase is Phase.GROUP and unit.description:
            self.session.console.title(unit.description)

    def _finish(self) -> ExitStatus:
        status = self.session.run()
        self.phase = Phase.REPORTED
        return status
