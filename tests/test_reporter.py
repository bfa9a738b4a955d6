"""Tests for the run summary and exit status."""

import time

from anima import ExitStatus, Session, results
from anima.formatter import Console


def test_success_summary(session, lines):
    session.ok("fine", [True, True]).skip("later")

    status = results(True, "all good", "broken", session)

    assert status is ExitStatus.SUCCESS
    assert lines()[3:] == [
        "* all good",
        "* asserts  2",
        "* failure  0",
        "~ skipped  1",
        "# execution time 0s",
    ]


def test_failure_summary(session, lines):
    session.ok("mixed", [True, False])

    status = results(False, "all good", "broken", session)

    assert status is ExitStatus.FAILURE
    summary = lines()[2:]
    assert summary[:4] == [
        "! broken",
        "! asserts  1",
        "! failure  1",
        "~ skipped  0",
    ]
    assert summary[4].startswith("# execution time ")
    assert summary[4].endswith(" ms")


def test_status_follows_counters_not_the_flag(session):
    session.ok("broken", [False])
    assert results(True, "all good", "broken", session) is ExitStatus.FAILURE


def test_exit_status_values():
    assert ExitStatus.SUCCESS == 0
    assert ExitStatus.FAILURE == 1


def test_elapsed_in_seconds_on_success(session, lines):
    session.started_at = time.monotonic() - 2.5
    results(True, "ok", "ko", session)
    assert lines()[-1] == "# execution time 2s"


def test_elapsed_in_milliseconds_on_failure(session, lines):
    session.started_at = time.monotonic() - 2.5
    session.ok("broken", [False])
    results(False, "ok", "ko", session)

    elapsed_ms = int(lines()[-1].split()[-2])
    assert 2500 <= elapsed_ms < 60000


def test_execution_time_status_on_terminal(out):
    session = Session(console=Console(stream=out, width=50, color=False), banner=None)
    session.ok("broken", [False]).run()

    last = out.getvalue().strip().splitlines()[-1]
    assert last.startswith("# execution time ")
    assert last.endswith("[ ko ]")
