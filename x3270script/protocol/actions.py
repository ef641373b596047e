"""Rendering of s3270 script actions from session operations."""

import enum
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..exceptions import ArgumentError
from .quoting import quote_string

PF_KEYS = range(1, 25)
PA_KEYS = range(1, 4)


class WaitMode(enum.Enum):
    """Conditions the Wait() action can wait for."""

    INPUT_FIELD = "InputField"
    NVT_MODE = "NVTMode"
    WAIT_3270_MODE = "3270Mode"
    OUTPUT = "Output"
    SECONDS = "Seconds"
    DISCONNECT = "Disconnect"
    UNLOCK = "Unlock"


class QueryType(enum.Enum):
    """Arguments accepted by the Query() action."""

    BIND_PLU_NAME = "BindPluName"
    CONNECTION_STATE = "ConnectionState"
    CURSOR = "Cursor"
    FORMATTED = "Formatted"
    HOST = "Host"
    LOCAL_ENCODING = "LocalEncoding"
    LU_NAME = "LuName"
    MODEL = "Model"
    SCREEN_CUR_SIZE = "ScreenCurSize"
    SCREEN_MAX_SIZE = "ScreenMaxSize"
    SSL = "Ssl"


@dataclass(frozen=True)
class StringAtBlock:
    """Text to type at a position, for multi-field StringAt."""

    row: int
    column: int
    text: str


def zero_based(value: int, origin: int, name: str) -> int:
    """Convert a row or column from the caller's origin to 0-based."""
    if value < origin:
        raise ArgumentError(f"{name} out of range", {name: value, "origin": origin})
    return value - origin


def render_call(name: str, *args: object) -> str:
    return f"{name}({','.join(str(a) for a in args)})"


def render_key(name: str, n: int, keys: range) -> str:
    """Render PF(n) or PA(n)."""
    if n not in keys:
        raise ArgumentError(f"{name} key out of range", {"n": n})
    return render_call(name, n)


def render_string_at(
    blocks: Iterable[StringAtBlock],
    origin: int,
    quote_backslashes: bool = True,
    erase_eof: bool = False,
) -> str:
    """
    Render cursor moves and text input as one space-separated command.

    Each block becomes ``MoveCursor(r,c) [EraseEOF() ]String(text)``.
    """
    commands = []
    for block in blocks:
        row = zero_based(block.row, origin, "row")
        column = zero_based(block.column, origin, "column")
        erase = "EraseEOF() " if erase_eof else ""
        text = quote_string(block.text, quote_backslashes)
        commands.append(f"MoveCursor({row},{column}) {erase}String({text})")
    if not commands:
        raise ArgumentError("No text to enter")
    return " ".join(commands)


def render_wait(mode: WaitMode, timeout_secs: Optional[int] = None) -> str:
    if timeout_secs is None:
        return render_call("Wait", mode.value)
    if timeout_secs < 0:
        raise ArgumentError(
            "Wait timeout must not be negative", {"timeout": timeout_secs}
        )
    return render_call("Wait", timeout_secs, mode.value)


def render_region(name: str, args: Sequence[int], origin: int) -> str:
    """
    Render Ascii() or Ebcdic() with its optional region.

    args is empty, (length), (row, column, length) or
    (row, column, rows, columns); row and column use the caller's origin.
    """
    if len(args) in (0, 1):
        return render_call(name, *args)
    if len(args) in (3, 4):
        row = zero_based(args[0], origin, "row")
        column = zero_based(args[1], origin, "column")
        return render_call(name, row, column, *args[2:])
    raise TypeError(f"{name}() takes 0, 1, 3 or 4 arguments ({len(args)} given)")
