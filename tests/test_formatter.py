"""Tests for line layout and the console writer."""

from __future__ import annotations

import io
import os
import re

import pytest

from anima.formatter import (
    FAILURE,
    SKIPPED,
    SUCCESS,
    Console,
    LineKind,
    display_width,
    layout,
    padding,
    terminal_width,
)

ANSI = re.compile(r"\x1b\[[0-9;]*m")


class FakeTerminal(io.StringIO):
    def isatty(self) -> bool:
        return True

    def fileno(self) -> int:
        return 1


class StyledWritesFail(io.StringIO):
    """Rejects any write carrying ANSI escapes, like a broken terminal."""

    def write(self, s: str) -> int:
        if "\x1b[" in s:
            raise OSError("terminal went away")
        return super().write(s)


# --- layout ---


def test_layout_right_aligns_status_block():
    line = layout(20, "abc", SUCCESS, "*")
    assert line == "* abc" + " " * 9 + "[ ok ]"
    assert len(line) == 20


def test_layout_accounts_for_status_length():
    line = layout(30, "x", SKIPPED, "~")
    assert line.endswith("[ skip ]")
    assert len(line) == 30


def test_layout_accounts_for_symbol_length():
    line = layout(30, "nested", "sub", "::")
    assert line.startswith(":: nested ")
    assert len(line) == 30


def test_layout_long_description_is_never_negative_padding():
    description = "a description much longer than the terminal"
    line = layout(10, description, FAILURE, "!")
    assert line == f"! {description} [ ko ]"


def test_padding_clamps_to_one_space():
    assert padding(5, "too long for this", SUCCESS, "*") == 1
    assert padding(20, "abc", SUCCESS, "*") == 9


def test_layout_aligns_wide_characters():
    line = layout(20, "\u65e5\u672c", SUCCESS, "*")
    assert line == "* \u65e5\u672c" + " " * 8 + "[ ok ]"


def test_display_width():
    assert display_width("abc") == 3
    assert display_width("\u65e5\u672c\u8a9e") == 6
    assert display_width("e\u0301") == 1


def test_layout_without_width_is_plain():
    assert layout(None, "redirected", SUCCESS, "*") == "* redirected"


# --- terminal_width ---


def test_terminal_width_none_for_redirected_stream():
    assert terminal_width(io.StringIO()) is None


def test_terminal_width_reads_terminal_size(mocker):
    mocker.patch(
        "anima.formatter.os.get_terminal_size",
        return_value=os.terminal_size((80, 24)),
    )
    assert terminal_width(FakeTerminal()) == 80


def test_terminal_width_none_when_size_unavailable(mocker):
    mocker.patch("anima.formatter.os.get_terminal_size", side_effect=OSError)
    assert terminal_width(FakeTerminal()) is None


# --- Console ---


def test_console_plain_output(out, console):
    console.success("passes")
    console.failure("fails")
    console.skipped("later")
    console.title("group")
    console.subtitle("inner")

    assert out.getvalue().splitlines() == [
        "* passes",
        "! fails",
        "~ later",
        "# group",
        ":: inner",
    ]


def test_console_return_values(console):
    assert console.success("a") is True
    assert console.failure("b") is False
    assert console.skipped("c") is True


def test_console_width_override_aligns_lines(out):
    console = Console(stream=out, width=40, color=False)
    console.success("aligned")
    console.failure("aligned")

    first, second = out.getvalue().splitlines()
    assert len(first) == 40
    assert first.endswith("[ ok ]")
    assert len(second) == 40
    assert second.endswith("[ ko ]")


def test_console_titles_get_blank_lines_on_terminal_width(out):
    console = Console(stream=out, width=40, color=False)
    console.title("group")
    text = out.getvalue()
    assert text.startswith("\n# group")
    assert text.endswith("[ ok ]\n\n")


def test_console_color_defaults_follow_terminal(out):
    assert Console(stream=out).color is False
    assert Console(stream=out, width=40).color is False
    assert Console(stream=FakeTerminal(), width=40).color is True
    assert Console(stream=FakeTerminal(), color=False).color is False


def test_width_override_on_redirected_stream_stays_uncolored(out):
    console = Console(stream=out, width=60)
    console.success("piped")
    console.title("group")

    text = out.getvalue()
    assert "\x1b[" not in text
    assert layout(60, "piped", SUCCESS, "*") in text.splitlines()


def test_console_colored_line_matches_plain_layout(out):
    console = Console(stream=out, width=40, color=True)
    console.failure("colored")

    raw = out.getvalue().rstrip("\n")
    assert "\x1b[" in raw
    assert ANSI.sub("", raw) == layout(40, "colored", FAILURE, "!")


def test_console_render_custom_status():
    console = Console(stream=io.StringIO(), width=30, color=False)
    line = console.render(LineKind.TITLE, "done", FAILURE)
    assert line.startswith("# done")
    assert line.endswith("[ ko ]")


def test_console_falls_back_to_plain_on_write_error():
    stream = StyledWritesFail()
    console = Console(stream=stream, width=40, color=True)

    console.success("still printed")
    console.success("stays plain")

    assert stream.getvalue().splitlines() == ["* still printed", "* stays plain"]
    assert console.color is False
    assert console.width is None


def test_console_plain_write_error_propagates():
    class Broken(io.StringIO):
        def write(self, s: str) -> int:
            raise OSError("closed")

    console = Console(stream=Broken())
    with pytest.raises(OSError):
        console.success("nowhere to go")
