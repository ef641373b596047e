"""Origin-aware row/column addressing within a display buffer."""

import logging
from typing import Any, Optional

from ..exceptions import ArgumentError

logger = logging.getLogger(__name__)


class Coordinates:
    """
    A row and column bound to one buffer's dimensions and origin.

    ``row`` and ``column`` are expressed in the buffer's origin (0 or 1).
    Stepping past either end of the buffer wraps around, since the 3270
    buffer is circular. Ordering follows buffer (row-major) address.

    Example:
        >>> c = Coordinates(buffer)        # [0,0] on a 0-origin buffer
        >>> (c - 1).buffer_address         # last cell of the last row
    """

    def __init__(
        self, buffer: Any, row: Optional[int] = None, column: Optional[int] = None
    ) -> None:
        """
        Args:
            buffer: Anything with ``rows``, ``columns`` and ``origin``
                (a DisplayBuffer or another Coordinates)
            row: Row in origin units; defaults to the first row
            column: Column in origin units; defaults to the first column

        Raises:
            ArgumentError: If row or column is outside the buffer
        """
        self._rows: int = buffer.rows
        self._columns: int = buffer.columns
        self._origin: int = buffer.origin
        self.row = self._origin if row is None else row
        self.column = self._origin if column is None else column

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def origin(self) -> int:
        return self._origin

    @property
    def row(self) -> int:
        return self._row + self._origin

    @row.setter
    def row(self, value: int) -> None:
        zero_based = value - self._origin
        if not 0 <= zero_based < self._rows:
            raise ArgumentError(
                "Row out of range", {"row": value, "origin": self._origin}
            )
        self._row = zero_based

    @property
    def column(self) -> int:
        return self._column + self._origin

    @column.setter
    def column(self, value: int) -> None:
        zero_based = value - self._origin
        if not 0 <= zero_based < self._columns:
            raise ArgumentError(
                "Column out of range", {"column": value, "origin": self._origin}
            )
        self._column = zero_based

    @property
    def buffer_address(self) -> int:
        """0-based linear address, regardless of origin."""
        return self._row * self._columns + self._column

    @classmethod
    def from_address(cls, buffer: Any, address: int) -> "Coordinates":
        """Build coordinates from a linear address, wrapping it into the buffer."""
        coords = cls(buffer)
        address %= coords._rows * coords._columns
        coords._row, coords._column = divmod(address, coords._columns)
        return coords

    def copy(self) -> "Coordinates":
        return Coordinates(self, self.row, self.column)

    def increment(self) -> "Coordinates":
        """Return the next position, wrapping from the last cell to the first."""
        return self + 1

    def decrement(self) -> "Coordinates":
        """Return the previous position, wrapping from the first cell to the last."""
        return self - 1

    def __add__(self, steps: int) -> "Coordinates":
        if not isinstance(steps, int):
            return NotImplemented
        return Coordinates.from_address(self, self.buffer_address + steps)

    def __sub__(self, steps: int) -> "Coordinates":
        if not isinstance(steps, int):
            return NotImplemented
        return Coordinates.from_address(self, self.buffer_address - steps)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Coordinates):
            return NotImplemented
        return self._row == other._row and self._column == other._column

    def __hash__(self) -> int:
        return hash((self._row, self._column))

    def _address_of(self, other: object) -> int:
        if other is None:
            raise ArgumentError("Cannot compare Coordinates with None")
        if not isinstance(other, Coordinates):
            raise TypeError(f"Cannot compare Coordinates with {type(other).__name__}")
        return other.buffer_address

    def __lt__(self, other: object) -> bool:
        return self.buffer_address < self._address_of(other)

    def __le__(self, other: object) -> bool:
        return self.buffer_address <= self._address_of(other)

    def __gt__(self, other: object) -> bool:
        return self.buffer_address > self._address_of(other)

    def __ge__(self, other: object) -> bool:
        return self.buffer_address >= self._address_of(other)

    def __str__(self) -> str:
        return f"[{self.row},{self.column}]"

    def __repr__(self) -> str:
        return (
            f"Coordinates(row={self.row}, column={self.column}, "
            f"origin={self._origin})"
        )
