"""Terminal line layout and the console writer used by every primitive."""

from __future__ import annotations

import logging
import os
import sys
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

import typer

logger = logging.getLogger(__name__)

SUCCESS = "ok"
FAILURE = "ko"
SKIPPED = "skip"
SUB = "sub"

_OPEN = "[ "
_CLOSE = " ]"


class LineKind(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"
    TITLE = "title"
    SUBTITLE = "subtitle"


@dataclass(frozen=True)
class LineStyle:
    symbol: str
    status: str
    color: str


_STYLES: dict[LineKind, LineStyle] = {
    LineKind.SUCCESS: LineStyle("*", SUCCESS, typer.colors.GREEN),
    LineKind.FAILURE: LineStyle("!", FAILURE, typer.colors.RED),
    LineKind.SKIPPED: LineStyle("~", SKIPPED, typer.colors.YELLOW),
    LineKind.TITLE: LineStyle("#", SUCCESS, typer.colors.CYAN),
    LineKind.SUBTITLE: LineStyle("::", SUB, typer.colors.CYAN),
}


def style_for(kind: LineKind) -> LineStyle:
    return _STYLES[kind]


def padding(width: int, description: str, status: str, symbol: str) -> int:
    """Number of spaces between the description and the status block.

    The status block ``[ <status> ]`` ends exactly at column ``width``. When
    the description leaves no room the gap is clamped to one space.
    """
    fixed = len(symbol) + 1 + len(_OPEN) + len(status) + len(_CLOSE)
    return max(width - display_width(description) - fixed, 1)


def layout(width: int | None, description: str, status: str, symbol: str) -> str:
    """Build an uncolored result line.

    With an unknown width (output is not a terminal) the line is just
    ``"<symbol> <description>"``.
    """
    if width is None:
        return f"{symbol} {description}"
    gap = " " * padding(width, description, status, symbol)
    return f"{symbol} {description}{gap}{_OPEN}{status}{_CLOSE}"


def display_width(text: str) -> int:
    """Terminal columns taken by ``text``: wide East Asian characters count twice."""
    columns = 0
    for char in text:
        if unicodedata.combining(char):
            continue
        columns += 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1
    return columns


def is_terminal(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def terminal_width(stream: TextIO) -> int | None:
    """Column count of the terminal behind ``stream``, or None when redirected."""
    if not is_terminal(stream):
        return None
    try:
        return os.get_terminal_size(stream.fileno()).columns
    except (AttributeError, OSError, ValueError):
        return None


class Console:
    """Writes formatted result lines to a text stream.

    Args:
        stream: Destination stream (default: sys.stdout at write time).
        width: Force a layout width. When omitted the terminal size of the
            stream is used, and plain output is produced if there is none.
        color: Force ANSI styling on or off. Defaults to styling only when
            the stream is a terminal; a forced width changes alignment only.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        width: int | None = None,
        color: bool | None = None,
    ):
        self._stream = stream
        self._width = width
        self._color = color
        self._plain = False

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    @property
    def width(self) -> int | None:
        if self._plain:
            return None
        if self._width is not None:
            return self._width
        return terminal_width(self.stream)

    @property
    def color(self) -> bool:
        if self._plain:
            return False
        if self._color is not None:
            return self._color
        return is_terminal(self.stream)

    def render(self, kind: LineKind, description: str, status: str | None = None) -> str:
        """Return the line for ``kind`` without writing it."""
        line_style = style_for(kind)
        status = status or line_style.status
        width = self.width
        if not self.color:
            return layout(width, description, status, line_style.symbol)

        symbol = typer.style(line_style.symbol, fg=line_style.color, bold=True)
        text = typer.style(description, fg=typer.colors.WHITE, bold=True)
        if width is None:
            return f"{symbol} {text}"
        gap = " " * padding(width, description, status, line_style.symbol)
        block = (
            typer.style(_OPEN, fg=typer.colors.WHITE, bold=True)
            + typer.style(status, fg=_status_color(status, line_style), bold=True)
            + typer.style(_CLOSE, fg=typer.colors.WHITE, bold=True)
        )
        return f"{symbol} {text}{gap}{block}"

    def emit(self, kind: LineKind, description: str, status: str | None = None) -> None:
        titled = kind in (LineKind.TITLE, LineKind.SUBTITLE)
        try:
            self._write(self.render(kind, description, status), titled)
        except OSError as e:
            if self._plain:
                raise
            logger.warning(f"Styled output failed ({e}), falling back to plain text")
            self._plain = True
            self._write(self.render(kind, description, status), titled)

    def success(self, description: str) -> bool:
        self.emit(LineKind.SUCCESS, description)
        return True

    def failure(self, description: str) -> bool:
        self.emit(LineKind.FAILURE, description)
        return False

    def skipped(self, description: str) -> bool:
        self.emit(LineKind.SKIPPED, description)
        return True

    def title(self, description: str, status: str = SUCCESS) -> None:
        self.emit(LineKind.TITLE, description, status)

    def subtitle(self, description: str) -> None:
        self.emit(LineKind.SUBTITLE, description)

    def _write(self, line: str, titled: bool) -> None:
        # blank lines around titles only when lines are aligned
        if titled and not self._plain and self.width is not None:
            line = f"\n{line}\n"
        typer.echo(line, file=self.stream, color=self.color)


def _status_color(status: str, line_style: LineStyle) -> str:
    if status == FAILURE:
        return typer.colors.RED
    if status == SUCCESS:
        return typer.colors.GREEN
    return line_style.color
