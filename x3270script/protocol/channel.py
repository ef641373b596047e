"""
Line-group exchange with an s3270 script port or script pipe.

A reply is any number of ``data:`` lines, a status line, and a final
``ok`` or ``error`` line.
"""

import asyncio
import logging
from typing import List

from ..exceptions import TransportEOFError
from ..utils.logging_utils import log_data_processing, log_debug_operation

logger = logging.getLogger(__name__)

REPLY_TERMINATORS = ("ok", "error")


class ScriptChannel:
    """Request/reply framing over an asyncio stream pair.

    A request whose reply was abandoned (the caller timed out and cancelled
    the exchange) leaves that reply owed. It is read and discarded before
    the next request is written, so late output never lands in a later
    command's result.
    """

    def __init__(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._owed = 0
        self._closed = False

    @property
    def owed_replies(self) -> int:
        return self._owed

    async def exchange(self, command: str, encoding: str = "utf-8") -> List[str]:
        """
        Send one command line and read its reply.

        Returns:
            Reply lines, ending with the status line and "ok" or "error"

        Raises:
            TransportEOFError: If the stream ends before the reply is complete
        """
        while self._owed > 0:
            stale = await self._read_reply(encoding)
            self._owed -= 1
            log_debug_operation(logger, "Discarded late reply", stale)

        self._owed += 1
        try:
            self._writer.write((command + "\n").encode(encoding))
            await self._writer.drain()
        except (ConnectionError, OSError) as e:
            raise TransportEOFError(
                "Connection lost while sending", {"command": command}, e
            ) from e
        reply = await self._read_reply(encoding)
        self._owed -= 1
        return reply

    async def _read_reply(self, encoding: str) -> List[str]:
        lines: List[str] = []
        while True:
            try:
                raw = await self._reader.readline()
            except (ConnectionError, OSError) as e:
                raise TransportEOFError("Connection lost while reading", {}, e) from e
            if not raw:
                raise TransportEOFError(
                    "End of stream from emulator", {"partial_lines": len(lines)}
                )
            line = raw.decode(encoding, errors="replace").rstrip("\r\n")
            lines.append(line)
            if line in REPLY_TERMINATORS:
                log_data_processing(logger, "Reply", f"{len(lines)} line(s)")
                return lines

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._writer.close()
        try:
            await self._writer.wait_closed()
        except (ConnectionError, OSError) as e:
            log_debug_operation(logger, "Ignoring error while closing channel", e)
