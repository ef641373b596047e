import time

import pytest

from x3270script.backends.mock import MockBackend, MockServer, text_screen_rows
from x3270script.config import ConnectFlags, MockConfig, ModifyFail
from x3270script.emulation.display_buffer import DisplayBuffer
from x3270script.exceptions import (
    ArgumentError,
    CommandError,
    InvalidOperationError,
)
from x3270script.history import MAX_COMMANDS
from x3270script.protocol.actions import QueryType, StringAtBlock, WaitMode
from x3270script.protocol.status import StatusLineField
from x3270script.protocol.transfer import (
    TransferDirection,
    TransferHostType,
    TransferMode,
)
from x3270script.results import FailureKind, ReadBufferType
from x3270script.session import AsyncSession, python_encoding


def make_session(server=None, **config_kwargs):
    config = MockConfig(**config_kwargs)
    server = server or MockServer()
    return AsyncSession(MockBackend(config, server), config), server


def test_python_encoding():
    assert python_encoding("UTF-8") == "utf-8"
    assert python_encoding("CP1252") == "cp1252"
    assert python_encoding("cp037") == "cp037"
    assert python_encoding("ISO-8859-1") == "iso8859-1"
    assert python_encoding("no-such-encoding") is None


class TestStart:
    @pytest.mark.asyncio
    async def test_start(self, async_session):
        assert async_session.emulator_running
        assert async_session.encoding == "utf-8"
        assert async_session.last_command.command == "Query(LocalEncoding)"
        assert async_session.host_connected

    @pytest.mark.asyncio
    async def test_start_twice(self, async_session):
        with pytest.raises(InvalidOperationError):
            await async_session.start()

    @pytest.mark.asyncio
    async def test_code_page(self):
        server = MockServer()
        server.code_page = "CP1252"
        session, _ = make_session(server)
        assert (await session.start()).success
        assert session.encoding == "cp1252"
        await session.close()

    @pytest.mark.asyncio
    async def test_unknown_code_page(self):
        server = MockServer()
        server.code_page = "bogus-code-page"
        session, _ = make_session(server)
        result = await session.start()
        assert not result.success
        assert result.fail_reason == "No matching encoding"
        assert not session.emulator_running

    @pytest.mark.asyncio
    async def test_encoding_query_fails(self):
        server = MockServer()
        server.code_page_fail = True
        session, _ = make_session(server)
        result = await session.start()
        assert not result.success
        assert result.fail_reason == "Query(LocalEncoding) failed"
        assert not session.emulator_running
        # The failed handshake stays in history for diagnosis
        assert session.last_command.command == "Query(LocalEncoding)"

    @pytest.mark.asyncio
    async def test_start_failure_in_exception_mode(self):
        server = MockServer()
        server.all_fail = True
        session, _ = make_session(server)
        session.exception_mode = True
        with pytest.raises(CommandError) as excinfo:
            await session.start()
        assert excinfo.value.io_result.fail_reason == "Query(LocalEncoding) failed"
        assert not session.exception_mode

    @pytest.mark.asyncio
    async def test_handshake_timeout(self):
        server = MockServer()
        server.hang_msec = 300
        session, _ = make_session(server, handshake_timeout_msec=50)
        result = await session.start()
        assert not result.success
        assert result.fail_reason == "Query(LocalEncoding) failed"


class TestIo:
    @pytest.mark.asyncio
    async def test_not_running(self):
        session, _ = make_session()
        with pytest.raises(InvalidOperationError):
            await session.io("Ascii()")

    @pytest.mark.asyncio
    async def test_control_characters_rejected(self, async_session):
        with pytest.raises(ArgumentError):
            await async_session.io("Ascii()\n")

    @pytest.mark.asyncio
    async def test_data_prefix_removed(self, async_session):
        result = await async_session.io("ReplyWith(a,b)")
        assert result.success
        assert result.result[0] == "a b"
        assert result.status_line.startswith("U F U C(fakehost.com) I")
        assert result.execution_time >= 0

    @pytest.mark.asyncio
    async def test_unprefixed_lines_kept(self, async_session):
        result = await async_session.io("Lines 3")
        assert result.result == ("Line 1", "Line 2", "Line 3")

    @pytest.mark.asyncio
    async def test_failure(self, async_session):
        result = await async_session.io("Fail()")
        assert not result.success
        assert result.failure == FailureKind.COMMAND
        assert result.result == ("failed",)
        assert result.failure_message() == "Command Fail failed: failed"

    @pytest.mark.asyncio
    async def test_failure_in_exception_mode(self, async_session):
        async_session.exception_mode = True
        with pytest.raises(CommandError) as excinfo:
            await async_session.io("Fail()")
        assert excinfo.value.io_result.result == ("failed",)
        assert "Command Fail failed" in excinfo.value.message

    @pytest.mark.asyncio
    async def test_timeout_keeps_session_usable(self, async_session, mock_server):
        started = time.monotonic()
        result = await async_session.io("Hang 300", timeout_msec=50)
        assert time.monotonic() - started < 0.2
        assert not result.success
        assert result.failure == FailureKind.TRANSPORT
        assert result.result == ("Operation timed out",)
        assert async_session.emulator_running

        result = await async_session.io("ReplyWith(fresh)")
        assert result.result[0] == "fresh"

    @pytest.mark.asyncio
    async def test_default_timeout(self, mock_server):
        session, _ = make_session(mock_server, default_timeout_msec=50)
        await session.start()
        result = await session.io("Hang 300")
        assert result.failure == FailureKind.TRANSPORT
        await session.close()

    @pytest.mark.asyncio
    async def test_end_of_stream_closes_session(self, async_session):
        result = await async_session.io("Quit")
        assert not result.success
        assert result.failure == FailureKind.TRANSPORT
        assert not async_session.emulator_running
        assert async_session.last_command.command == "Quit"
        with pytest.raises(InvalidOperationError):
            await async_session.io("Ascii()")

    @pytest.mark.asyncio
    async def test_end_of_stream_raises_in_exception_mode(self, async_session):
        async_session.exception_mode = True
        with pytest.raises(CommandError) as excinfo:
            await async_session.io("Quit")
        assert excinfo.value.io_result.failure == FailureKind.TRANSPORT

    @pytest.mark.asyncio
    async def test_history_is_bounded(self, async_session):
        for n in range(MAX_COMMANDS + 2):
            await async_session.io(f"ReplyWith({n})")
        recent = async_session.recent_commands
        assert len(recent) == MAX_COMMANDS
        assert recent[0].command == f"ReplyWith({MAX_COMMANDS + 1})"
        assert recent[-1].command == "ReplyWith(2)"


class TestModifyPolicy:
    @pytest.mark.asyncio
    async def test_refused_when_disconnected(self, async_session, mock_server):
        mock_server.connected = False
        await async_session.io("Noop()")
        sent = len(mock_server.commands)
        result = await async_session.enter()
        assert not result.success
        assert result.failure == FailureKind.POLICY
        assert result.result == ("Not connected",)
        assert len(mock_server.commands) == sent
        assert async_session.last_command.command == "Noop()"

    @pytest.mark.asyncio
    async def test_refusal_raises_in_exception_mode(self, async_session, mock_server):
        mock_server.connected = False
        await async_session.io("Noop()")
        async_session.exception_mode = True
        with pytest.raises(CommandError) as excinfo:
            await async_session.string("hello")
        assert excinfo.value.message == "Not connected"

    @pytest.mark.asyncio
    async def test_require_3270(self, mock_server):
        session, _ = make_session(mock_server, modify_fail=ModifyFail.REQUIRE_3270)
        await session.start()
        mock_server.in_3270_mode = False
        await session.io("Noop()")
        result = await session.tab()
        assert result.result == ("Not in 3270 mode",)
        await session.close()

    @pytest.mark.asyncio
    async def test_never(self, mock_server):
        session, _ = make_session(mock_server, modify_fail=ModifyFail.NEVER)
        await session.start()
        mock_server.connected = False
        await session.io("Noop()")
        assert (await session.pf(3)).success
        assert mock_server.last_command_processed == "PF(3)"
        await session.close()

    @pytest.mark.asyncio
    async def test_non_modify_commands_always_sent(self, async_session, mock_server):
        mock_server.connected = False
        await async_session.io("Noop()")
        assert (await async_session.ascii()).success


class TestCommands:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "name,args,expected",
        [
            ("string", ("hello world",), 'String("hello world")'),
            ("enter", (), "Enter()"),
            ("clear", (), "Clear()"),
            ("pf", (3,), "PF(3)"),
            ("pa", (1,), "PA(1)"),
            ("up", (), "Up()"),
            ("down", (), "Down()"),
            ("left", (), "Left()"),
            ("right", (), "Right()"),
            ("tab", (), "Tab()"),
            ("back_tab", (), "BackTab()"),
            ("move_cursor", (2, 3), "MoveCursor(2,3)"),
            ("string_at", (1, 2, "x"), "MoveCursor(1,2) String(x)"),
            ("disconnect", (), "Disconnect()"),
            ("wait", (WaitMode.INPUT_FIELD,), "Wait(InputField)"),
            ("wait", (WaitMode.OUTPUT, 5), "Wait(5,Output)"),
            ("ascii", (), "Ascii()"),
            ("ascii", (1, 2, 3), "Ascii(1,2,3)"),
            ("ebcdic", (10,), "Ebcdic(10)"),
            ("query", (QueryType.HOST,), "Query(Host)"),
            ("read_buffer", (), "ReadBuffer(Ascii)"),
            ("read_buffer", (ReadBufferType.EBCDIC,), "ReadBuffer(Ebcdic)"),
        ],
    )
    async def test_rendering(self, async_session, mock_server, name, args, expected):
        result = await getattr(async_session, name)(*args)
        assert result.success
        assert mock_server.last_command_processed == expected

    @pytest.mark.asyncio
    async def test_string_at_blocks(self, async_session, mock_server):
        await async_session.string_at_blocks(
            [StringAtBlock(0, 0, "a"), StringAtBlock(1, 1, "b")], erase_eof=True
        )
        assert mock_server.last_command_processed == (
            "MoveCursor(0,0) EraseEOF() String(a) MoveCursor(1,1) EraseEOF() String(b)"
        )

    @pytest.mark.asyncio
    async def test_connect(self, async_session, mock_server):
        await async_session.connect("host", port=23, lus=["lu1"])
        assert mock_server.last_command_processed == "Connect(lu1@host:23)"

    @pytest.mark.asyncio
    async def test_connect_default_flags(self, mock_server):
        session, _ = make_session(
            mock_server, default_connect_flags=ConnectFlags.SECURE
        )
        await session.start()
        await session.connect("host")
        assert mock_server.last_command_processed == "Connect(L:host)"
        await session.connect("host", flags=ConnectFlags.NO_LOGIN)
        assert mock_server.last_command_processed == "Connect(C:host)"
        await session.close()

    @pytest.mark.asyncio
    async def test_connect_empty_host(self, async_session):
        with pytest.raises(ArgumentError):
            await async_session.connect("")

    @pytest.mark.asyncio
    async def test_pf_out_of_range(self, async_session):
        with pytest.raises(ArgumentError):
            await async_session.pf(25)

    @pytest.mark.asyncio
    async def test_transfer(self, async_session, mock_server):
        result = await async_session.transfer(
            "local.txt",
            "HOST FILE",
            TransferDirection.SEND,
            TransferMode.ASCII,
            TransferHostType.VM,
        )
        assert result.success
        assert mock_server.last_command_processed == (
            'Transfer(direction=Send,host=Vm,"hostfile=HOST FILE",'
            "localfile=local.txt,mode=Ascii)"
        )

    @pytest.mark.asyncio
    async def test_ebcdic_result_type(self, async_session):
        result = await async_session.ebcdic()
        assert result.to_byte_array() == []

    @pytest.mark.asyncio
    async def test_read_buffer_result_type(self, async_session):
        result = await async_session.read_buffer(ReadBufferType.EBCDIC)
        assert result.read_buffer_type == ReadBufferType.EBCDIC
        assert result.origin == 0


class TestOrigin:
    @pytest.mark.asyncio
    async def test_origin_one(self, mock_server):
        mock_server.cursor = (3, 4)
        session, _ = make_session(mock_server, origin=1)
        await session.start()

        result = await session.query(QueryType.CURSOR)
        assert result.result == ("4 5",)
        assert session.last_command.result == ("3 4",)
        assert result.status_line.split(" ")[8:10] == ["4", "5"]
        assert session.last_command.status_line.split(" ")[8:10] == ["3", "4"]
        assert session.status_field(StatusLineField.CURSOR_ROW) == "4"

        await session.move_cursor(1, 1)
        assert mock_server.last_command_processed == "MoveCursor(0,0)"
        await session.ascii(1, 1, 5)
        assert mock_server.last_command_processed == "Ascii(0,0,5)"
        with pytest.raises(ArgumentError):
            await session.move_cursor(0, 1)
        await session.close()

    @pytest.mark.asyncio
    async def test_display_buffer_from_history_with_origin_one(self, mock_server):
        mock_server.rows, mock_server.columns = 2, 4
        mock_server.cursor = (0, 1)
        mock_server.read_buffer_rows = text_screen_rows(["abcd", "efgh"], 2, 4)
        session, _ = make_session(mock_server, origin=1)
        await session.start()

        live = await session.display_buffer()
        assert str(live.cursor) == "[1,2]"
        assert live.ascii(2) == "bc"

        stored = DisplayBuffer(session.last_command)
        assert stored.origin == 0
        assert str(stored.cursor) == "[0,1]"
        assert stored.ascii(2) == "bc"
        assert session.recent_commands[0].origin == 0
        await session.close()

    @pytest.mark.asyncio
    async def test_origin_zero_cursor(self, async_session, mock_server):
        mock_server.cursor = (3, 4)
        assert (await async_session.query(QueryType.CURSOR)).result == ("3 4",)


class TestDisplayBuffer:
    @pytest.mark.asyncio
    async def test_display_buffer(self, async_session, mock_server):
        mock_server.read_buffer_rows = text_screen_rows(["HELLO", "world"], 24, 80)
        buffer = await async_session.display_buffer()
        assert isinstance(buffer, DisplayBuffer)
        assert buffer.ascii(0, 0, 5) == "HELLO"
        assert buffer.ascii(1, 0, 5) == "world"
        assert not buffer.formatted

    @pytest.mark.asyncio
    async def test_display_buffer_failure(self, async_session, mock_server):
        mock_server.all_fail = True
        assert await async_session.display_buffer() is None

    @pytest.mark.asyncio
    async def test_display_buffer_failure_in_exception_mode(
        self, async_session, mock_server
    ):
        mock_server.all_fail = True
        async_session.exception_mode = True
        with pytest.raises(CommandError):
            await async_session.display_buffer()


class TestClose:
    @pytest.mark.asyncio
    async def test_close_resets_state(self, async_session):
        async_session.exception_mode = True
        await async_session.close()
        assert not async_session.emulator_running
        assert not async_session.exception_mode
        assert async_session.recent_commands == []
        assert not async_session.host_connected

    @pytest.mark.asyncio
    async def test_close_saving_history(self, async_session):
        await async_session.close(save_history=True)
        assert async_session.last_command.command == "Query(LocalEncoding)"

    @pytest.mark.asyncio
    async def test_close_twice(self, async_session):
        await async_session.close()
        await async_session.close()

    @pytest.mark.asyncio
    async def test_status_field_requires_running(self):
        session, _ = make_session()
        with pytest.raises(InvalidOperationError):
            session.status_field(StatusLineField.MODE)

    @pytest.mark.asyncio
    async def test_restart_after_close(self, mock_server):
        session, _ = make_session(mock_server)
        await session.start()
        await session.close()
        assert (await session.start()).success
        await session.close()

    @pytest.mark.asyncio
    async def test_async_context_manager(self, mock_server):
        session, _ = make_session(mock_server)
        async with session:
            await session.start()
            assert session.emulator_running
        assert not session.emulator_running
