"""Status line parsing for s3270 script responses."""

import enum
from typing import List, Optional


class StatusLineField(enum.IntEnum):
    """Positional fields of the s3270 status line."""

    KEYBOARD_LOCK = 0
    FORMATTING = 1
    PROTECTION = 2
    CONNECTION = 3
    MODE = 4
    MODEL = 5
    ROWS = 6
    COLUMNS = 7
    CURSOR_ROW = 8
    CURSOR_COLUMN = 9
    WINDOW_ID = 10
    TIMING = 11


class StatusLine:
    """
    Read-only view of one status line.

    Example: ``U F U C(host.example.com) I 4 43 80 0 0 0x0 -``
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.fields: List[str] = text.split(" ")

    def field(self, index: StatusLineField) -> str:
        return self.fields[index]

    @property
    def connected(self) -> bool:
        """True if the Connection field reports a connected host."""
        value = self.field(StatusLineField.CONNECTION)
        return value.startswith("C")

    @property
    def in_3270_mode(self) -> bool:
        return self.field(StatusLineField.MODE).startswith("I")

    @property
    def formatted(self) -> bool:
        return self.field(StatusLineField.FORMATTING) == "F"

    @property
    def rows(self) -> int:
        return int(self.field(StatusLineField.ROWS))

    @property
    def columns(self) -> int:
        return int(self.field(StatusLineField.COLUMNS))

    @property
    def cursor_row(self) -> int:
        return int(self.field(StatusLineField.CURSOR_ROW))

    @property
    def cursor_column(self) -> int:
        return int(self.field(StatusLineField.CURSOR_COLUMN))

    def with_origin(self, origin: int) -> "StatusLine":
        """Return a copy with the cursor fields shifted from 0-based to origin."""
        if origin == 0:
            return self
        fields = list(self.fields)
        for index in (StatusLineField.CURSOR_ROW, StatusLineField.CURSOR_COLUMN):
            fields[index] = str(int(fields[index]) + origin)
        return StatusLine(" ".join(fields))

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"StatusLine({self.text!r})"


def adjust_status_line(text: Optional[str], origin: int) -> Optional[str]:
    """Shift the cursor fields of a raw status line to the caller's origin."""
    if text is None or origin == 0:
        return text
    return StatusLine(text).with_origin(origin).text
