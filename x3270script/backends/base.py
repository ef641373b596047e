"""Transport backend interface and shared connect helper."""

import asyncio
import logging
from typing import List, Optional, Protocol, Tuple, runtime_checkable

from ..config import DEFAULT_CONNECT_RETRY_MSEC
from ..exceptions import BackendStartError
from ..results import StartResult
from ..utils.logging_utils import log_connection_event, log_debug_operation

logger = logging.getLogger(__name__)

LOOPBACK = "127.0.0.1"
CONNECT_TRIES = 3


@runtime_checkable
class Backend(Protocol):
    """What a session needs from a transport.

    ``exchange`` returns the raw reply lines, ending with the status line
    and "ok" or "error", and raises TransportEOFError at end of stream.
    ``close`` must be safe to call any number of times.
    """

    async def start(self) -> StartResult: ...

    async def exchange(self, command: str, encoding: str) -> List[str]: ...

    async def close(self) -> None: ...

    def error_output(self, fallback: str) -> str: ...


async def try_connect(
    port: int, retry_msec: Optional[int] = None, host: str = LOOPBACK
) -> Tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """
    Connect to an emulator script port, retrying while it starts up.

    Args:
        port: TCP port on the loopback interface
        retry_msec: Delay between attempts (default 1000)
        host: Address to connect to

    Returns:
        Reader and writer for the connection

    Raises:
        BackendStartError: If every attempt fails
    """
    delay = (DEFAULT_CONNECT_RETRY_MSEC if retry_msec is None else retry_msec) / 1000
    last_error: Optional[Exception] = None
    for attempt in range(1, CONNECT_TRIES + 1):
        try:
            reader, writer = await asyncio.open_connection(host, port)
            log_connection_event(logger, "Connected to emulator", host, port)
            return reader, writer
        except OSError as e:
            last_error = e
            log_debug_operation(logger, f"Connect attempt {attempt} to port {port}", e)
        if attempt < CONNECT_TRIES:
            await asyncio.sleep(delay)
    raise BackendStartError(
        f"Could not connect to emulator on port {port}",
        {"port": port, "tries": CONNECT_TRIES},
        last_error,
    )
