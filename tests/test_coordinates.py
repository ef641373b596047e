import pytest

from x3270script.emulation.coordinates import Coordinates
from x3270script.emulation.display_buffer import DisplayBuffer
from x3270script.exceptions import ArgumentError
from x3270script.results import ReadBufferIoResult, ReadBufferType

ROWS = (
    "SF(c0=e0) 41 42 43 44 45 46 SF(c0=e0) 47 48 49 4a 4b",
    "SF(c0=e0) 61 62 63 64 65 66 SF(c0=e0) 67 68 69 6a 6b",
)


def make_buffer(origin=0):
    cursor = "0 1" if origin == 0 else "1 2"
    return DisplayBuffer(
        ReadBufferIoResult(
            success=True,
            result=ROWS,
            command="ReadBuffer(Ascii)",
            status_line=f"U F U C(host.example.com) I 2 2 13 {cursor} 0x0 -",
            read_buffer_type=ReadBufferType.ASCII,
            origin=origin,
        )
    )


class TestOriginZero:
    @pytest.fixture
    def buffer(self):
        return make_buffer()

    def test_defaults_to_first_cell(self, buffer):
        coords = Coordinates(buffer)
        assert str(coords) == "[0,0]"
        assert coords.buffer_address == 0

    def test_decrement_wraps_to_last_cell(self, buffer):
        coords = Coordinates(buffer).decrement()
        assert coords.row == 1
        assert coords.column == 12

    def test_increment_wraps_to_first_cell(self, buffer):
        coords = Coordinates(buffer, 1, 12).increment()
        assert (coords.row, coords.column) == (0, 0)

    def test_increment_crosses_rows(self, buffer):
        coords = Coordinates(buffer, 0, 12).increment()
        assert (coords.row, coords.column) == (1, 0)

    def test_buffer_address(self, buffer):
        assert Coordinates(buffer, 1, 0).buffer_address == 13
        assert Coordinates.from_address(buffer, 13) == Coordinates(buffer, 1, 0)
        assert Coordinates.from_address(buffer, 26) == Coordinates(buffer)

    def test_arithmetic(self, buffer):
        coords = Coordinates(buffer)
        coords += 14
        assert str(coords) == "[1,1]"
        coords -= 2
        assert str(coords) == "[0,12]"

    def test_copy_is_independent(self, buffer):
        coords = Coordinates(buffer, 1, 1)
        copy = coords.copy()
        copy.row = 0
        assert coords.row == 1

    @pytest.mark.parametrize("row,column", [(2, 0), (0, 13), (-1, 0), (0, -1)])
    def test_out_of_range(self, buffer, row, column):
        with pytest.raises(ArgumentError):
            Coordinates(buffer, row, column)

    def test_setters_validate(self, buffer):
        coords = Coordinates(buffer)
        with pytest.raises(ArgumentError):
            coords.row = 2
        with pytest.raises(ArgumentError):
            coords.column = 13

    def test_ordering(self, buffer):
        first = Coordinates(buffer, 0, 12)
        second = Coordinates(buffer, 1, 0)
        assert first < second
        assert second > first
        assert first <= first.copy()
        assert second >= first
        assert first != second
        assert first == first.copy()
        assert hash(first) == hash(first.copy())

    def test_compare_with_none(self, buffer):
        with pytest.raises(ArgumentError):
            Coordinates(buffer) < None

    def test_compare_with_other_type(self, buffer):
        with pytest.raises(TypeError):
            Coordinates(buffer) < 3
        assert Coordinates(buffer) != "[0,0]"

    def test_field_text_from_coordinates(self, buffer):
        assert buffer.ascii_field() == "ABCDEF"
        assert buffer.ascii_field(Coordinates(buffer, 1, 10)) == "ghijk"
        assert buffer.contents(Coordinates(buffer, 0, 1)).ascii_char == "A"


class TestOriginOne:
    @pytest.fixture
    def buffer(self):
        return make_buffer(origin=1)

    def test_defaults_to_first_cell(self, buffer):
        assert str(Coordinates(buffer)) == "[1,1]"

    def test_decrement_wraps(self, buffer):
        coords = Coordinates(buffer).decrement()
        assert (coords.row, coords.column) == (2, 13)
        assert coords.buffer_address == 25

    def test_zero_is_out_of_range(self, buffer):
        with pytest.raises(ArgumentError):
            Coordinates(buffer, 0, 1)

    def test_cursor(self, buffer):
        assert str(buffer.cursor) == "[1,2]"
        assert buffer.ascii_field() == "ABCDEF"
        assert buffer.ascii_field(2, 11) == "ghijk"
