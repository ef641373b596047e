import pytest

from x3270script.exceptions import ArgumentError
from x3270script.protocol.actions import (
    PF_KEYS,
    StringAtBlock,
    WaitMode,
    render_call,
    render_key,
    render_region,
    render_string_at,
    render_wait,
    zero_based,
)


def test_render_call():
    assert render_call("Enter") == "Enter()"
    assert render_call("MoveCursor", 1, 2) == "MoveCursor(1,2)"


@pytest.mark.parametrize("n", [1, 24])
def test_render_key(n):
    assert render_key("PF", n, PF_KEYS) == f"PF({n})"


@pytest.mark.parametrize("n", [0, 25, -1])
def test_render_key_out_of_range(n):
    with pytest.raises(ArgumentError):
        render_key("PF", n, PF_KEYS)


def test_zero_based():
    assert zero_based(5, 0, "row") == 5
    assert zero_based(5, 1, "row") == 4
    with pytest.raises(ArgumentError):
        zero_based(0, 1, "row")
    with pytest.raises(ArgumentError):
        zero_based(-1, 0, "column")


class TestStringAt:
    def test_single_block(self):
        blocks = [StringAtBlock(1, 2, "hello")]
        assert render_string_at(blocks, 0) == "MoveCursor(1,2) String(hello)"

    def test_origin_and_erase(self):
        blocks = [StringAtBlock(1, 1, "a b"), StringAtBlock(3, 4, "x")]
        assert render_string_at(blocks, 1, erase_eof=True) == (
            'MoveCursor(0,0) EraseEOF() String("a b") '
            "MoveCursor(2,3) EraseEOF() String(x)"
        )

    def test_backslash_quoting(self):
        blocks = [StringAtBlock(0, 0, "a\\b")]
        assert render_string_at(blocks, 0) == 'MoveCursor(0,0) String("a\\\\b")'
        assert (
            render_string_at(blocks, 0, quote_backslashes=False)
            == 'MoveCursor(0,0) String("a\\b")'
        )

    def test_no_blocks(self):
        with pytest.raises(ArgumentError):
            render_string_at([], 0)


@pytest.mark.parametrize(
    "mode,timeout,expected",
    [
        (WaitMode.INPUT_FIELD, None, "Wait(InputField)"),
        (WaitMode.NVT_MODE, None, "Wait(NVTMode)"),
        (WaitMode.WAIT_3270_MODE, 5, "Wait(5,3270Mode)"),
        (WaitMode.OUTPUT, 0, "Wait(0,Output)"),
        (WaitMode.SECONDS, 2, "Wait(2,Seconds)"),
        (WaitMode.DISCONNECT, None, "Wait(Disconnect)"),
        (WaitMode.UNLOCK, None, "Wait(Unlock)"),
    ],
)
def test_render_wait(mode, timeout, expected):
    assert render_wait(mode, timeout) == expected


def test_render_wait_negative_timeout():
    with pytest.raises(ArgumentError):
        render_wait(WaitMode.OUTPUT, -1)


class TestRenderRegion:
    def test_forms(self):
        assert render_region("Ascii", (), 0) == "Ascii()"
        assert render_region("Ascii", (10,), 0) == "Ascii(10)"
        assert render_region("Ascii", (1, 2, 3), 0) == "Ascii(1,2,3)"
        assert render_region("Ebcdic", (1, 2, 3, 4), 0) == "Ebcdic(1,2,3,4)"

    def test_origin_shifts_coordinates_only(self):
        assert render_region("Ascii", (1, 1, 3), 1) == "Ascii(0,0,3)"
        assert render_region("Ascii", (10,), 1) == "Ascii(10)"

    def test_bad_coordinates(self):
        with pytest.raises(ArgumentError):
            render_region("Ascii", (0, 1, 3), 1)

    @pytest.mark.parametrize("args", [(1, 2), (1, 2, 3, 4, 5)])
    def test_bad_arity(self, args):
        with pytest.raises(TypeError):
            render_region("Ascii", args, 0)
