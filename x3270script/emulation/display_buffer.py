# ATTRIBUTION NOTICE
# =================================================================================
# This module contains code ported from or inspired by: x3270if scripting library
# Source: https://github.com/pmattes/x3270
# Licensed under BSD-3-Clause
#
# DESCRIPTION
# --------------------
# Decoder for s3270 ReadBuffer output and text queries over the result
#
# COMPATIBILITY
# --------------------
# Accepts ReadBuffer(Ascii) and ReadBuffer(Ebcdic) rows: hex data, SF(),
# SA(), GE() and '-' (DBCS right half) tokens
#
# MODIFICATIONS
# --------------------
# Rows are tokenized lazily and folded into positions in one pass; the
# attribute state wraps from the end of the buffer to the beginning
#
# INTEGRATION POINTS
# --------------------
# - Session.display_buffer()
# - Coordinates for field navigation
#
# ATTRIBUTION REQUIREMENTS
# ------------------------------
# This attribution must be maintained when this code is modified or
# redistributed. See THIRD_PARTY_NOTICES.md for complete license text.
# =================================================================================

"""Display buffer decoding for ReadBuffer results."""

import enum
import logging
import re
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from ..exceptions import ArgumentError, InvalidOperationError
from ..protocol.status import StatusLine
from ..results import ReadBufferIoResult, ReadBufferType
from ..utils.logging_utils import log_data_processing, log_parsing_warning
from .attributes import CharacterSet, FieldAttributes, apply_assignments
from .coordinates import Coordinates

logger = logging.getLogger(__name__)

EBCDIC_SPACE = 0x40


class TokenKind(enum.Enum):
    DATA = "data"
    START_FIELD = "SF"
    SET_ATTRIBUTE = "SA"
    GRAPHIC_ESCAPE = "GE"
    DBCS_RIGHT = "-"


@dataclass(frozen=True)
class Token:
    """One token of a ReadBuffer row. ``text`` is the hex or the order's body."""

    kind: TokenKind
    text: str = ""


_ORDER = re.compile(r"^(SF|SA|GE)\((.*)\)$")


def tokenize(row: str) -> Iterator[Token]:
    """Lazily split one ReadBuffer row into tokens."""
    for word in row.split(" "):
        if not word:
            continue
        if word == "-":
            yield Token(TokenKind.DBCS_RIGHT)
            continue
        match = _ORDER.match(word)
        if match:
            yield Token(TokenKind(match.group(1)), match.group(2))
        else:
            yield Token(TokenKind.DATA, word)


class PositionType(enum.Enum):
    ASCII = "ascii"
    EBCDIC = "ebcdic"
    DBCS_RIGHT = "dbcs_right"
    FIELD_ATTRIBUTE = "field_attribute"  # the SF order itself


@dataclass(frozen=True)
class Position:
    """One decoded buffer position."""

    type: PositionType
    attrs: FieldAttributes
    value: Union[str, int, None] = None

    @property
    def ascii_char(self) -> str:
        """
        The displayed character; blank in a non-display field.

        Raises:
            InvalidOperationError: On EBCDIC or non-character positions
        """
        if self.type == PositionType.EBCDIC:
            raise InvalidOperationError(
                "Cannot get ASCII value from an EBCDIC ReadBuffer result"
            )
        if self.type != PositionType.ASCII:
            raise InvalidOperationError(
                "Cannot get ASCII value from non-display position"
            )
        assert isinstance(self.value, str)
        return self.value if self.attrs.displayable else " "

    @property
    def ebcdic_char(self) -> int:
        """
        The host character code; EBCDIC space in a non-display field.

        Raises:
            InvalidOperationError: On ASCII or non-character positions
        """
        if self.type == PositionType.ASCII:
            raise InvalidOperationError(
                "Cannot get EBCDIC value from an ASCII ReadBuffer result"
            )
        if self.type != PositionType.EBCDIC:
            raise InvalidOperationError(
                "Cannot get EBCDIC value from non-display position"
            )
        assert isinstance(self.value, int)
        return self.value if self.attrs.displayable else EBCDIC_SPACE

    def translate(self) -> Optional[str]:
        """Text for screen dumps: None for a DBCS right half, else one character."""
        if self.type == PositionType.DBCS_RIGHT:
            return None
        if self.type != PositionType.ASCII:
            return " "
        char = self.ascii_char
        return " " if char < " " else char


def _last_field_body(lines: Sequence[str]) -> Optional[str]:
    for line in reversed(lines):
        for token in reversed(list(tokenize(line))):
            if token.kind == TokenKind.START_FIELD:
                return token.text
    return None


class DisplayBuffer:
    """
    Screen contents decoded from a ReadBuffer result.

    Query methods take row and column arguments in the origin the result
    was read with. Text queries work only on ReadBuffer(Ascii) results.

    Example:
        >>> buffer = session.display_buffer()
        >>> buffer.ascii(0, 0, 10)
        >>> buffer.ascii_field(5, 20)
    """

    def __init__(self, io_result: ReadBufferIoResult) -> None:
        """
        Decode a ReadBuffer result.

        Raises:
            ArgumentError: If the result failed, has no status line, or its
                rows do not match the screen size in the status line
        """
        if not io_result.success or io_result.status_line is None:
            raise ArgumentError(
                "ReadBuffer result has no screen", {"command": io_result.command}
            )
        status = StatusLine(io_result.status_line)
        self.io_result = io_result
        self.origin = io_result.origin
        self.read_buffer_type = io_result.read_buffer_type
        self.encoding = io_result.encoding
        self.rows = status.rows
        self.columns = status.columns
        # The status line in a result is origin-adjusted; keep 0-based here.
        self._cursor = (
            status.cursor_row - self.origin,
            status.cursor_column - self.origin,
        )
        if len(io_result.result) != self.rows:
            raise ArgumentError(
                "ReadBuffer row count does not match the screen",
                {"rows": self.rows, "lines": len(io_result.result)},
            )
        self._cells: List[List[Position]] = self._decode(io_result.result)
        log_data_processing(
            logger,
            "Decoded display buffer",
            f"{self.rows}x{self.columns} {self.read_buffer_type.value}",
        )

    # Decoding

    def _data_value(self, hex_text: str) -> Union[str, int]:
        try:
            if self.read_buffer_type == ReadBufferType.EBCDIC:
                return int(hex_text, 16)
            text = bytes.fromhex(hex_text).decode(self.encoding, errors="replace")
            return text[:1] or " "
        except ValueError:
            log_parsing_warning(logger, "ReadBuffer data", f"bad hex '{hex_text}'")
            return (
                EBCDIC_SPACE if self.read_buffer_type == ReadBufferType.EBCDIC else " "
            )

    def _fold(
        self, tokens: Iterable[Token], field: FieldAttributes
    ) -> Iterator[Position]:
        data_type = (
            PositionType.EBCDIC
            if self.read_buffer_type == ReadBufferType.EBCDIC
            else PositionType.ASCII
        )
        overrides = FieldAttributes()
        attrs = field
        for token in tokens:
            if token.kind == TokenKind.SET_ATTRIBUTE:
                overrides = apply_assignments(overrides, token.text, basic=False)
                attrs = field.overlay(overrides)
            elif token.kind == TokenKind.START_FIELD:
                field = apply_assignments(FieldAttributes(), token.text)
                overrides = FieldAttributes()
                attrs = field
                yield Position(PositionType.FIELD_ATTRIBUTE, attrs)
            elif token.kind == TokenKind.GRAPHIC_ESCAPE:
                yield Position(
                    data_type,
                    replace(attrs, character_set=CharacterSet.APL),
                    self._data_value(token.text),
                )
            elif token.kind == TokenKind.DBCS_RIGHT:
                yield Position(PositionType.DBCS_RIGHT, attrs)
            else:
                yield Position(data_type, attrs, self._data_value(token.text))

    def _decode(self, lines: Sequence[str]) -> List[List[Position]]:
        # The buffer is circular: positions ahead of the first field belong
        # to the last field on the screen.
        last_body = _last_field_body(lines)
        seed = (
            apply_assignments(FieldAttributes(), last_body)
            if last_body is not None
            else FieldAttributes()
        )
        positions = list(
            self._fold((token for line in lines for token in tokenize(line)), seed)
        )
        if len(positions) != self.rows * self.columns:
            raise ArgumentError(
                "ReadBuffer positions do not match the screen",
                {"expected": self.rows * self.columns, "found": len(positions)},
            )
        return [
            positions[row * self.columns : (row + 1) * self.columns]
            for row in range(self.rows)
        ]

    # Addressing

    @property
    def cursor(self) -> Coordinates:
        return Coordinates.from_address(
            self, self._cursor[0] * self.columns + self._cursor[1]
        )

    @property
    def formatted(self) -> bool:
        return any(
            cell.type == PositionType.FIELD_ATTRIBUTE
            for row in self._cells
            for cell in row
        )

    def _coords(
        self, row: Union[int, Coordinates, None], column: Optional[int]
    ) -> Coordinates:
        if isinstance(row, Coordinates):
            return row
        if row is None or column is None:
            raise ArgumentError("Both row and column are required")
        return Coordinates(self, row, column)

    def contents(
        self, row: Union[int, Coordinates], column: Optional[int] = None
    ) -> Position:
        """Position at (row, column) or at the given Coordinates."""
        coords = self._coords(row, column)
        return self._cells[coords.row - self.origin][coords.column - self.origin]

    def _at(self, coords: Coordinates) -> Position:
        return self._cells[coords.row - coords.origin][coords.column - coords.origin]

    # Text queries

    def _require_ascii(self) -> None:
        if self.read_buffer_type != ReadBufferType.ASCII:
            raise InvalidOperationError("ReadBuffer is not Ascii")

    def _text(self, row: int, column: int, length: int) -> str:
        # row and column are 0-based
        out = []
        start = row * self.columns + column
        for address in range(start, start + length):
            r, c = divmod(address, self.columns)
            char = self._cells[r][c].translate()
            if char is not None:
                out.append(char)
        return "".join(out)

    def _check_start(self, row: int, column: int) -> Tuple[int, int]:
        row0, column0 = row - self.origin, column - self.origin
        if not 0 <= row0 < self.rows:
            raise ArgumentError("Row out of range", {"row": row})
        if not 0 <= column0 < self.columns:
            raise ArgumentError("Column out of range", {"column": column})
        return row0, column0

    def ascii(self, *args: int) -> Union[str, List[str]]:
        """
        Screen text.

        - ``ascii()``: every row, as a list
        - ``ascii(length)``: length positions from the cursor
        - ``ascii(row, column, length)``: length positions from (row, column)
        - ``ascii(row, column, rows, columns)``: a rectangle, one string per row

        Field attribute positions read as blanks, the right half of a DBCS
        character is skipped, and non-display fields read as blanks.

        Raises:
            InvalidOperationError: If the buffer is not ASCII
            ArgumentError: If the region is not inside the buffer
        """
        self._require_ascii()
        if len(args) == 0:
            return self._rectangle(self.origin, self.origin, self.rows, self.columns)
        if len(args) == 1:
            row, column = self._cursor
            return self._run(row + self.origin, column + self.origin, args[0])
        if len(args) == 3:
            return self._run(*args)
        if len(args) == 4:
            return self._rectangle(*args)
        raise TypeError(f"ascii() takes 0, 1, 3 or 4 arguments ({len(args)} given)")

    def _run(self, row: int, column: int, length: int) -> str:
        if length == 0:
            return ""
        row0, column0 = self._check_start(row, column)
        end = row0 * self.columns + column0 + length
        if length < 0 or end > self.rows * self.columns:
            raise ArgumentError("Length out of range", {"length": length})
        return self._text(row0, column0, length)

    def _rectangle(self, row: int, column: int, rows: int, columns: int) -> List[str]:
        row0, column0 = self._check_start(row, column)
        if rows <= 0 or row0 + rows > self.rows:
            raise ArgumentError("Rows out of range", {"rows": rows})
        if columns <= 0 or column0 + columns > self.columns:
            raise ArgumentError("Columns out of range", {"columns": columns})
        return [self._text(r, column0, columns) for r in range(row0, row0 + rows)]

    def ascii_equals(self, row: int, column: int, text: str) -> bool:
        return self.ascii(row, column, len(text)) == text

    def ascii_matches(self, row: int, column: int, length: int, regex: str) -> bool:
        """True if regex matches anywhere in the text at (row, column)."""
        return re.search(regex, self.ascii(row, column, length)) is not None

    def dump(self) -> str:
        """The whole screen as text, one line per row."""
        self._require_ascii()
        return "\n".join(self.ascii())

    # Fields

    def _field_attribute_position(self, coords: Coordinates) -> Optional[Coordinates]:
        walk = coords.copy()
        while True:
            if self._at(walk).type == PositionType.FIELD_ATTRIBUTE:
                return walk
            walk = walk.decrement()
            if walk == coords:
                return None

    def field_length(
        self, row: Union[int, Coordinates, None] = None, column: Optional[int] = None
    ) -> int:
        """
        Number of positions in the field containing a position (default: the
        cursor).

        Counts the position itself (unless it is a field attribute) and the
        non-attribute positions on either side of it up to the bounding
        field attributes. An unformatted buffer is one field of the whole
        buffer size.
        """
        coords = self.cursor if row is None else self._coords(row, column)
        count = 0
        walk = coords.copy()
        while self._at(walk).type != PositionType.FIELD_ATTRIBUTE:
            count += 1
            walk = walk.decrement()
            if walk == coords:
                return count
        walk = coords.increment()
        while self._at(walk).type != PositionType.FIELD_ATTRIBUTE:
            count += 1
            walk = walk.increment()
        return count

    def ascii_field(
        self, row: Union[int, Coordinates, None] = None, column: Optional[int] = None
    ) -> str:
        """
        Text of the field containing a position (default: the cursor).

        A field that runs past the end of the buffer continues at the
        beginning. An unformatted buffer returns all of its text.
        """
        self._require_ascii()
        coords = self.cursor if row is None else self._coords(row, column)
        start = self._field_attribute_position(coords)
        if start is None:
            return self._text(0, 0, self.rows * self.columns)
        out = []
        walk = start
        for _ in range(self.field_length(start)):
            walk = walk.increment()
            char = self._at(walk).translate()
            if char is not None:
                out.append(char)
        return "".join(out)

    def __repr__(self) -> str:
        return (
            f"DisplayBuffer({self.rows}x{self.columns}, "
            f"{self.read_buffer_type.value}, origin={self.origin})"
        )
