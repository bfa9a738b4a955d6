"""Pytest configuration and fixtures."""

import io
import logging

import pytest

from anima import Console, Session


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Clean up per-run anima loggers after each test to prevent name collisions."""
    yield

    # Module loggers ("anima.session", ...) stay registered; only run loggers go
    loggers_to_remove = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("anima_")
    ]

    for name in loggers_to_remove:
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        del logging.Logger.manager.loggerDict[name]


@pytest.fixture
def out():
    """In-memory stream standing in for a redirected stdout."""
    return io.StringIO()


@pytest.fixture
def console(out):
    """Plain console: the stream is not a terminal, so no width and no color."""
    return Console(stream=out)


@pytest.fixture
def session(console):
    """Session writing plain lines to ``out``, without the start banner."""
    return Session(console=console, banner=None)


@pytest.fixture
def lines(out):
    """Return the non-empty lines written so far."""

    def _lines() -> list[str]:
        return [line for line in out.getvalue().splitlines() if line]

    return _lines
