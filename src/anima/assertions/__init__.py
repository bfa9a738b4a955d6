"""Check primitives and their result types."""

from anima.assertions.base import AssertionResult, FatalAssertionError
from anima.assertions.checks import Assertions

__all__ = ["AssertionResult", "Assertions", "FatalAssertionError"]
