"""
In-process mock emulator for tests and offline development.

``MockServer`` answers a small command vocabulary over a loopback script
port the way s3270 frames its replies. ``MockBackend`` starts one and
connects to it, so a session can run end to end without an emulator.

Commands understood by the server:

- ``Fail``: fails with ``data: failed``
- ``Query(type)``: LocalEncoding, Cursor, or any known query type
- ``Lines n``: n unprefixed lines ``Line 1`` .. ``Line n``
- ``ReplyWith args``: echoes the arguments as data
- ``Hang msec``: waits before answering (default 5000)
- ``Quit``: closes the connection without answering
- ``ReplyQuit``: answers, then closes the connection
- ``ReadBuffer(type)``: returns ``read_buffer_rows``
- anything else succeeds with no data
"""

import asyncio
import logging
import re
from typing import List, Optional, Sequence

from ..config import MockConfig
from ..exceptions import BackendStartError, InvalidOperationError
from ..protocol.channel import ScriptChannel
from ..results import StartResult
from ..utils.logging_utils import log_command_handling, log_connection_event
from .base import LOOPBACK, try_connect

logger = logging.getLogger(__name__)

QUERY_TYPES = (
    "BindPluName",
    "ConnectionState",
    "Cursor",
    "Formatted",
    "Host",
    "LocalEncoding",
    "LuName",
    "Model",
    "ScreenCurSize",
    "ScreenMaxSize",
    "Ssl",
)


def text_screen_rows(lines: Sequence[str], rows: int, columns: int) -> List[str]:
    """Render plain text as unformatted ReadBuffer(Ascii) rows."""
    result = []
    for row in range(rows):
        text = lines[row] if row < len(lines) else ""
        text = text[:columns].ljust(columns)
        result.append(" ".join(f"{ord(c):02x}" for c in text))
    return result


class MockServer:
    """A scripted stand-in for s3270's script port."""

    def __init__(self) -> None:
        self.all_fail = False
        self.hang_msec = 0
        self.code_page: Optional[str] = None
        self.code_page_fail = False
        self.connected = True
        self.in_3270_mode = True
        self.rows = 24
        self.columns = 80
        self.cursor = (0, 0)
        self.read_buffer_rows: List[str] = text_screen_rows([], 24, 80)
        self.last_command_processed: Optional[str] = None
        self.commands: List[str] = []
        self._server: Optional[asyncio.AbstractServer] = None
        self._handler_done: Optional[asyncio.Event] = None

    async def listen(self) -> int:
        """Start listening on an ephemeral loopback port and return it."""
        self._handler_done = asyncio.Event()
        self._server = await asyncio.start_server(self._accept, LOOPBACK, 0)
        port = self._server.sockets[0].getsockname()[1]
        log_connection_event(logger, "Mock emulator listening", LOOPBACK, port)
        return port

    async def _accept(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        # One connection per listen, like -scriptportonce.
        if self._server is not None:
            self._server.close()
        try:
            await self._serve(reader, writer)
        except (ConnectionError, OSError) as e:
            logger.debug(f"Mock emulator connection dropped: {e}")
        finally:
            writer.close()
            if self._handler_done is not None:
                self._handler_done.set()

    async def wait_closed(self) -> None:
        server, self._server = self._server, None
        if server is not None:
            server.close()
            await server.wait_closed()

    async def wait_handler(self, timeout: float = 5.0) -> None:
        if self._handler_done is not None:
            await asyncio.wait_for(self._handler_done.wait(), timeout)

    def _prompt(self, writer: asyncio.StreamWriter, success: bool) -> None:
        connection = "C(fakehost.com)" if self.connected else "N"
        mode = "I" if self.connected and self.in_3270_mode else "N"
        row, column = self.cursor
        writer.write(
            (
                f"U F U {connection} {mode} 2 {self.rows} {self.columns} "
                f"{row} {column} 0x0 -\n"
                f"{'ok' if success else 'error'}\n"
            ).encode("utf-8")
        )

    def _data(self, writer: asyncio.StreamWriter, text: str) -> None:
        writer.write(f"data: {text}\n".encode("utf-8"))

    async def _serve(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        while True:
            raw = await reader.readline()
            if not raw:
                return
            line = raw.decode("utf-8").rstrip("\n")
            self.last_command_processed = line
            self.commands.append(line)
            log_command_handling(logger, "mock", line)

            if self.all_fail:
                self._data(writer, "failed")
                self._prompt(writer, False)
                await writer.drain()
                continue
            if self.hang_msec > 0:
                await asyncio.sleep(self.hang_msec / 1000)

            tokens = [t for t in re.split(r"[ (,)]", line) if t] or [""]
            verb = tokens[0]
            if verb == "Quit":
                return
            if verb == "Fail":
                self._data(writer, "failed")
                self._prompt(writer, False)
            elif verb == "Query":
                self._query(writer, tokens)
            elif verb == "Lines":
                try:
                    count = int(tokens[1])
                except (IndexError, ValueError):
                    count = 1
                for n in range(1, max(count, 1) + 1):
                    writer.write(f"Line {n}\n".encode("utf-8"))
                self._prompt(writer, True)
            elif verb == "ReplyWith":
                self._data(writer, " ".join(tokens[1:]))
                if len(line) > len(verb):
                    writer.write(f"data:{line[len(verb):]}\n".encode("utf-8"))
                self._prompt(writer, True)
            elif verb == "Hang":
                try:
                    msec = int(tokens[1])
                except (IndexError, ValueError):
                    msec = 5000
                await asyncio.sleep(msec / 1000)
                self._prompt(writer, True)
            elif verb == "ReplyQuit":
                self._prompt(writer, True)
                await writer.drain()
                return
            elif verb == "ReadBuffer":
                for row in self.read_buffer_rows:
                    self._data(writer, row)
                self._prompt(writer, True)
            else:
                self._prompt(writer, True)
            await writer.drain()

    def _query(self, writer: asyncio.StreamWriter, tokens: List[str]) -> None:
        query = tokens[1] if len(tokens) == 2 else None
        if query == "LocalEncoding" and not self.code_page_fail:
            self._data(writer, self.code_page or "UTF-8")
            self._prompt(writer, True)
        elif query == "Cursor":
            self._data(writer, f"{self.cursor[0]} {self.cursor[1]}")
            self._prompt(writer, True)
        elif query in QUERY_TYPES and query != "LocalEncoding":
            self._data(writer, "xxx")
            self._prompt(writer, True)
        else:
            self._data(writer, "unknown query")
            self._prompt(writer, False)


class MockBackend:
    """Backend that runs a MockServer in the session's event loop."""

    def __init__(
        self, config: Optional[MockConfig] = None, server: Optional[MockServer] = None
    ) -> None:
        self.config = config or MockConfig()
        self.server = server or MockServer()
        self._channel: Optional[ScriptChannel] = None

    async def start(self) -> StartResult:
        port = await self.server.listen()
        try:
            reader, writer = await try_connect(port, self.config.connect_retry_msec)
        except BackendStartError as e:
            await self.server.wait_closed()
            return StartResult.failed(e.message)
        self._channel = ScriptChannel(reader, writer)
        return StartResult()

    async def exchange(self, command: str, encoding: str) -> List[str]:
        if self._channel is None:
            raise InvalidOperationError("Mock backend is not started")
        return await self._channel.exchange(command, encoding)

    async def close(self) -> None:
        channel, self._channel = self._channel, None
        if channel is not None:
            await channel.close()
        await self.server.wait_closed()

    def error_output(self, fallback: str) -> str:
        return fallback
