"""anima: a small test-execution and assertion engine.

Checks are issued on a ``Session``, optionally grouped, and summarised by
``run``, which returns an ``ExitStatus`` ready for ``sys.exit``. ``Suite``
adds before/after hooks around registered groups, run either blocking or
awaited in an event loop.
"""

from anima.assertions import AssertionResult, FatalAssertionError
from anima.config import AnimaConfig, ColorMode, OutputConfig, load_config
from anima.formatter import Console, LineKind, layout
from anima.pacer import Pacer
from anima.reporter import ExitStatus, results
from anima.session import Counters, Session
from anima.suite import (
    BlockingUnit,
    HookPoint,
    Mode,
    Phase,
    Runnable,
    SchedulerError,
    Suite,
    TaskUnit,
    as_runnable,
)
from anima.verbose import setup_logger

__version__ = "0.1.0"

__all__ = [
    "AnimaConfig",
    "AssertionResult",
    "BlockingUnit",
    "ColorMode",
    "Console",
    "Counters",
    "ExitStatus",
    "FatalAssertionError",
    "HookPoint",
    "LineKind",
    "Mode",
    "OutputConfig",
    "Pacer",
    "Phase",
    "Runnable",
    "SchedulerError",
    "Session",
    "Suite",
    "TaskUnit",
    "as_runnable",
    "layout",
    "load_config",
    "results",
    "setup_logger",
    "__version__",
]
