# ATTRIBUTION NOTICE
# =================================================================================
# This module contains code ported from or inspired by: x3270if scripting library
# Source: https://github.com/pmattes/x3270
# Licensed under BSD-3-Clause
#
# DESCRIPTION
# --------------------
# Scripting sessions that drive s3270 through its action protocol
#
# COMPATIBILITY
# --------------------
# Speaks the s3270/ws3270 script protocol: one action per line, answered by
# data lines, a status line and "ok" or "error"
#
# MODIFICATIONS
# --------------------
# asyncio engine with pluggable backends; failures are results that a single
# boundary decorator turns into exceptions when exception mode is on
#
# INTEGRATION POINTS
# --------------------
# - ProcessBackend, PortBackend and MockBackend transports
# - DisplayBuffer decoding of ReadBuffer() results
# - Synchronous Session wrapper on a dedicated event loop thread
#
# ATTRIBUTION REQUIREMENTS
# ------------------------------
# This attribution must be maintained when this code is modified or
# redistributed. See THIRD_PARTY_NOTICES.md for complete license text.
# =================================================================================

"""
Scripting sessions for s3270, asynchronous and synchronous.
"""

import asyncio
import codecs
import functools
import logging
import re
import threading
import time
from dataclasses import replace
from typing import (
    Any,
    Callable,
    Coroutine,
    Iterable,
    List,
    Optional,
    Type,
    TypeVar,
    Union,
)

from .backends.base import Backend
from .backends.mock import MockBackend, MockServer
from .backends.port import PortBackend
from .backends.process import ProcessBackend
from .config import (
    Config,
    ConnectFlags,
    MockConfig,
    ModifyFail,
    PortConfig,
    ProcessConfig,
)
from .emulation.display_buffer import DisplayBuffer
from .exceptions import (
    ArgumentError,
    BackendStartError,
    CommandError,
    InvalidOperationError,
    TransportEOFError,
)
from .history import CommandHistory
from .protocol.actions import (
    PA_KEYS,
    PF_KEYS,
    QueryType,
    StringAtBlock,
    WaitMode,
    render_call,
    render_key,
    render_region,
    render_string_at,
    render_wait,
    zero_based,
)
from .protocol.quoting import expand_host_name, is_control, quote_string
from .protocol.status import StatusLine, StatusLineField, adjust_status_line
from .protocol.transfer import (
    TransferDirection,
    TransferHostType,
    TransferMode,
    TransferParameter,
    build_transfer_command,
)
from .results import (
    DATA_PREFIX,
    EbcdicIoResult,
    FailureKind,
    IoResult,
    ReadBufferIoResult,
    ReadBufferType,
    StartResult,
)
from .utils.logging_utils import (
    log_command_error,
    log_command_handling,
    log_session_action,
    log_session_error,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R", IoResult, StartResult)

ENCODING_QUERY = "Query(LocalEncoding)"
ENCODING_QUERY_FAILED = "Query(LocalEncoding) failed"
NO_MATCHING_ENCODING = "No matching encoding"

_CODE_PAGE = re.compile(r"CP(\d+)", re.IGNORECASE)


def python_encoding(name: str) -> Optional[str]:
    """Map an emulator encoding name (``UTF-8``, ``CP1252``) to a Python codec."""
    match = _CODE_PAGE.fullmatch(name)
    candidate = f"cp{match.group(1)}" if match else name
    try:
        return codecs.lookup(candidate).name
    except LookupError:
        return None


def _exception_mode(
    func: Callable[..., Coroutine[Any, Any, R]]
) -> Callable[..., Coroutine[Any, Any, R]]:
    """
    Decorator for public operations that return a result.

    In exception mode a failed result is raised as CommandError carrying
    the result; otherwise it is returned unchanged.
    """

    @functools.wraps(func)
    async def wrapper(self: "AsyncSession", *args: Any, **kwargs: Any) -> R:
        raise_on_failure = self.exception_mode
        result = await func(self, *args, **kwargs)
        if raise_on_failure and not result.success:
            message = result.failure_message()
            log_command_error(self.logger, func.__name__, str(args), message)
            raise CommandError(message, io_result=result)
        return result

    return wrapper


class AsyncSession:
    """
    Asynchronous s3270 scripting session.

    The session owns one backend. ``start()`` starts it and learns the
    emulator's character encoding; after that each operation sends one
    action and returns an IoResult. A failed operation returns an
    unsuccessful result, or raises CommandError when ``exception_mode``
    is set. Argument and state errors are always raised.

    Example:
        >>> session = AsyncSession(ProcessBackend(config), config)
        >>> await session.start()
        >>> await session.connect("host.example.com")
        >>> await session.wait(WaitMode.INPUT_FIELD)
        >>> (await session.ascii()).result
    """

    def __init__(
        self,
        backend: Backend,
        config: Optional[Config] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize the AsyncSession.

        Args:
            backend: Transport to the emulator
            config: Session configuration (defaults to the backend's config)
            logger: Logger for this session (defaults to the module logger)
        """
        self._backend = backend
        self.config: Config = config or getattr(backend, "config", None) or Config()
        self.logger = logger or logging.getLogger(__name__)
        self.exception_mode = False
        self._running = False
        self._encoding = "utf-8"
        self._status_line: Optional[str] = None
        self._history: CommandHistory[IoResult] = CommandHistory()
        self._lock: Optional[asyncio.Lock] = None

    @property
    def backend(self) -> Backend:
        return self._backend

    @property
    def emulator_running(self) -> bool:
        return self._running

    @property
    def encoding(self) -> str:
        """Python codec name for the emulator's local encoding."""
        return self._encoding

    @property
    def history(self) -> CommandHistory[IoResult]:
        return self._history

    @property
    def recent_commands(self) -> List[IoResult]:
        """Recent results, most recent first, as the emulator returned them."""
        return self._history.recent()

    @property
    def last_command(self) -> Optional[IoResult]:
        return self._history.latest()

    @property
    def status_line(self) -> Optional[str]:
        """Last status line, with the cursor position in the configured origin."""
        return adjust_status_line(self._status_line, self.config.origin)

    def status_field(self, field: StatusLineField) -> str:
        """
        One field of the last status line.

        Raises:
            InvalidOperationError: If the session is not running
        """
        if not self._running or self.status_line is None:
            raise InvalidOperationError("Not running")
        return StatusLine(self.status_line).field(field)

    @property
    def host_connected(self) -> bool:
        if not self._running or self._status_line is None:
            return False
        return StatusLine(self._status_line).connected

    # Lifecycle

    @_exception_mode
    async def start(self) -> StartResult:
        """
        Start the backend and learn the emulator's encoding.

        Raises:
            InvalidOperationError: If the session is already running
        """
        if self._running:
            raise InvalidOperationError("Already running")
        log_session_action(self.logger, "start", type(self._backend).__name__)
        started = await self._backend.start()
        if not started.success:
            log_session_error(self.logger, "start", started.failure_message())
            return started

        self._lock = asyncio.Lock()
        self._running = True
        self._encoding = "utf-8"
        result = await self._io(ENCODING_QUERY, self.config.handshake_timeout_msec)
        if not result.success or len(result.result) != 1:
            reason = ENCODING_QUERY_FAILED
            if result.failure == FailureKind.TRANSPORT:
                reason = self._backend.error_output(ENCODING_QUERY_FAILED)
            await self.close(save_history=True)
            log_session_error(self.logger, "start", reason)
            return StartResult.failed(reason)

        encoding = python_encoding(result.result[0])
        if encoding is None:
            await self.close(save_history=True)
            log_session_error(self.logger, "start", f"{result.result[0]!r}")
            return StartResult.failed(NO_MATCHING_ENCODING)
        self._encoding = encoding
        self.logger.info(f"Emulator started, encoding {encoding}")
        return started

    async def close(self, save_history: bool = False) -> None:
        """Close the backend. Safe to call more than once."""
        await self._backend.close()
        if self._running:
            log_session_action(self.logger, "close")
        self._running = False
        self.exception_mode = False
        if not save_history:
            self._history.clear()

    async def __aenter__(self) -> "AsyncSession":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        await self.close()

    # Command engine

    def _modify_refusal(self) -> Optional[str]:
        policy = self.config.modify_fail
        if policy == ModifyFail.NEVER:
            return None
        if not self.host_connected:
            return "Not connected"
        assert self._status_line is not None
        if policy == ModifyFail.REQUIRE_3270 and not StatusLine(
            self._status_line
        ).in_3270_mode:
            return "Not in 3270 mode"
        return None

    def _parse_reply(
        self,
        command: str,
        lines: List[str],
        elapsed: float,
        result_type: Type[IoResult],
        **extra: Any,
    ) -> IoResult:
        success = bool(lines) and lines[-1] == "ok"
        status_line = lines[-2] if len(lines) >= 2 else None
        data = tuple(
            line[len(DATA_PREFIX) :] if line.startswith(DATA_PREFIX) else line
            for line in lines[:-2]
        )
        return result_type(
            success=success,
            result=data,
            command=command,
            status_line=status_line,
            execution_time=elapsed,
            encoding=self._encoding,
            failure=None if success else FailureKind.COMMAND,
            **extra,
        )

    async def _io(
        self,
        command: str,
        timeout_msec: Optional[int] = None,
        is_modify: bool = False,
        result_type: Type[IoResult] = IoResult,
        **extra: Any,
    ) -> Any:
        if not self._running:
            raise InvalidOperationError("Not running")
        if any(is_control(c) for c in command):
            raise ArgumentError(
                "command contains control character(s)", {"command": command}
            )
        if is_modify:
            refusal = self._modify_refusal()
            if refusal is not None:
                self.logger.info(f"Refusing {command}: {refusal}")
                return result_type(
                    success=False,
                    result=(refusal,),
                    command=command,
                    status_line=self.status_line,
                    encoding=self._encoding,
                    failure=FailureKind.POLICY,
                    **extra,
                )

        timeout = self.config.default_timeout_msec
        if timeout_msec is not None:
            timeout = timeout_msec
        log_command_handling(self.logger, "Io", command)
        assert self._lock is not None
        crashed = False
        lines: List[str] = []
        failure_text = ""
        async with self._lock:
            started = time.monotonic()
            try:
                lines = await self._exchange(command, timeout)
            except asyncio.TimeoutError:
                self.logger.warning(f"{command}: no answer in {timeout} ms")
                failure_text = "Operation timed out"
            except TransportEOFError as e:
                self.logger.warning(f"{command}: {e.message}")
                failure_text = e.message
                crashed = True
            elapsed = time.monotonic() - started

        if not lines:
            result = result_type(
                success=False,
                result=(failure_text,),
                command=command,
                execution_time=elapsed,
                encoding=self._encoding,
                failure=FailureKind.TRANSPORT,
                **extra,
            )
        else:
            result = self._parse_reply(command, lines, elapsed, result_type, **extra)
            if result.status_line is not None:
                self._status_line = result.status_line
        # History keeps the raw 0-based status line, so its origin must match.
        if isinstance(result, ReadBufferIoResult) and result.origin:
            self._history.append(replace(result, origin=0))
        else:
            self._history.append(result)
        if crashed:
            await self.close(save_history=True)
        if result.status_line is not None and self.config.origin:
            adjusted = adjust_status_line(result.status_line, self.config.origin)
            result = replace(result, status_line=adjusted)
        return result

    async def _exchange(self, command: str, timeout: int) -> List[str]:
        exchange = self._backend.exchange(command, self._encoding)
        if timeout > 0:
            return await asyncio.wait_for(exchange, timeout / 1000)
        return await exchange

    @_exception_mode
    async def io(
        self, command: str, timeout_msec: Optional[int] = None, is_modify: bool = False
    ) -> IoResult:
        """
        Send one action line and return its result.

        Args:
            command: Action text, e.g. ``Enter()``
            timeout_msec: Reply timeout; None uses the configured default,
                0 waits forever
            is_modify: Apply the modify policy first

        Raises:
            InvalidOperationError: If the session is not running
            ArgumentError: If the command contains control characters
        """
        return await self._io(command, timeout_msec, is_modify)

    # Text input

    @_exception_mode
    async def string(self, text: str, quote_backslashes: bool = True) -> IoResult:
        """Type text at the cursor."""
        command = f"String({quote_string(text, quote_backslashes)})"
        return await self._io(command, is_modify=True)

    @_exception_mode
    async def string_at(
        self,
        row: int,
        column: int,
        text: str,
        quote_backslashes: bool = True,
        erase_eof: bool = False,
    ) -> IoResult:
        """Move the cursor, optionally erase to end of field, then type text."""
        return await self._string_at(
            [StringAtBlock(row, column, text)], quote_backslashes, erase_eof
        )

    @_exception_mode
    async def string_at_blocks(
        self,
        blocks: Iterable[StringAtBlock],
        quote_backslashes: bool = True,
        erase_eof: bool = False,
    ) -> IoResult:
        """Fill several positions in one command."""
        return await self._string_at(blocks, quote_backslashes, erase_eof)

    async def _string_at(
        self, blocks: Iterable[StringAtBlock], quote_backslashes: bool, erase_eof: bool
    ) -> IoResult:
        command = render_string_at(
            blocks, self.config.origin, quote_backslashes, erase_eof
        )
        return await self._io(command, is_modify=True)

    # AIDs

    @_exception_mode
    async def enter(self) -> IoResult:
        return await self._io("Enter()", is_modify=True)

    @_exception_mode
    async def clear(self) -> IoResult:
        return await self._io("Clear()", is_modify=True)

    @_exception_mode
    async def pf(self, n: int) -> IoResult:
        """Press program function key n (1-24)."""
        return await self._io(render_key("PF", n, PF_KEYS), is_modify=True)

    @_exception_mode
    async def pa(self, n: int) -> IoResult:
        """Press program attention key n (1-3)."""
        return await self._io(render_key("PA", n, PA_KEYS), is_modify=True)

    # Cursor movement

    @_exception_mode
    async def up(self) -> IoResult:
        return await self._io("Up()", is_modify=True)

    @_exception_mode
    async def down(self) -> IoResult:
        return await self._io("Down()", is_modify=True)

    @_exception_mode
    async def left(self) -> IoResult:
        return await self._io("Left()", is_modify=True)

    @_exception_mode
    async def right(self) -> IoResult:
        return await self._io("Right()", is_modify=True)

    @_exception_mode
    async def tab(self) -> IoResult:
        return await self._io("Tab()", is_modify=True)

    @_exception_mode
    async def back_tab(self) -> IoResult:
        return await self._io("BackTab()", is_modify=True)

    @_exception_mode
    async def move_cursor(self, row: int, column: int) -> IoResult:
        origin = self.config.origin
        command = render_call(
            "MoveCursor",
            zero_based(row, origin, "row"),
            zero_based(column, origin, "column"),
        )
        return await self._io(command, is_modify=True)

    # Connection

    @_exception_mode
    async def connect(
        self,
        host: str,
        port: Optional[Union[int, str]] = None,
        lus: Optional[Iterable[str]] = None,
        flags: ConnectFlags = ConnectFlags.NONE,
    ) -> IoResult:
        """
        Connect the emulator to a host.

        Per-call flags replace the configured default flags; they are not
        combined with them.

        Raises:
            ArgumentError: If the host is empty or a name is invalid
        """
        if not host:
            raise ArgumentError("host must not be empty")
        target = expand_host_name(
            host,
            None if port is None else str(port),
            lus,
            flags,
            self.config.default_connect_flags,
        )
        return await self._io(f"Connect({target})")

    @_exception_mode
    async def disconnect(self) -> IoResult:
        return await self._io("Disconnect()")

    @_exception_mode
    async def wait(
        self, mode: WaitMode, timeout_secs: Optional[int] = None
    ) -> IoResult:
        """Wait for an emulator condition, with an optional emulator-side timeout."""
        return await self._io(render_wait(mode, timeout_secs))

    # Screen queries

    @_exception_mode
    async def ascii(self, *args: int) -> IoResult:
        """
        Screen text: ``ascii()``, ``ascii(length)``,
        ``ascii(row, column, length)`` or ``ascii(row, column, rows, columns)``.
        """
        return await self._io(render_region("Ascii", args, self.config.origin))

    @_exception_mode
    async def ebcdic(self, *args: int) -> EbcdicIoResult:
        """Screen contents as EBCDIC hex; arguments as for ascii()."""
        return await self._io(
            render_region("Ebcdic", args, self.config.origin),
            result_type=EbcdicIoResult,
        )

    @_exception_mode
    async def query(self, query_type: QueryType) -> IoResult:
        """
        Query emulator state.

        A Cursor answer is returned in the configured origin; history keeps
        the emulator's 0-based answer.
        """
        result = await self._io(render_call("Query", query_type.value))
        origin = self.config.origin
        if query_type == QueryType.CURSOR and result.success and result.result:
            row, column = result.result[0].split(" ")[:2]
            cursor = f"{int(row) + origin} {int(column) + origin}"
            result = replace(result, result=(cursor,))
        return result

    @_exception_mode
    async def read_buffer(
        self, read_buffer_type: ReadBufferType = ReadBufferType.ASCII
    ) -> ReadBufferIoResult:
        """Dump the screen buffer with field attributes."""
        return await self._io(
            render_call("ReadBuffer", read_buffer_type.value),
            result_type=ReadBufferIoResult,
            read_buffer_type=read_buffer_type,
            origin=self.config.origin,
        )

    async def display_buffer(
        self, read_buffer_type: ReadBufferType = ReadBufferType.ASCII
    ) -> Optional[DisplayBuffer]:
        """
        Read and decode the screen buffer.

        Returns:
            The decoded buffer, or None if ReadBuffer failed (outside
            exception mode)
        """
        result = await self.read_buffer(read_buffer_type)
        if not result.success:
            return None
        return DisplayBuffer(result)

    # File transfer

    @_exception_mode
    async def transfer(
        self,
        local_file: str,
        host_file: str,
        direction: TransferDirection,
        mode: TransferMode,
        host_type: TransferHostType,
        *parameters: TransferParameter,
        timeout_msec: Optional[int] = None,
    ) -> IoResult:
        """
        Transfer a file to or from the host with IND$FILE.

        Raises:
            ArgumentError: If the parameters are not legal together
        """
        command = build_transfer_command(
            local_file, host_file, direction, mode, host_type, parameters
        )
        return await self._io(command, timeout_msec, is_modify=True)


class Session:
    """
    Synchronous wrapper for AsyncSession.

    Operations run on a dedicated worker thread with its own event loop, so
    the backend's streams and tasks stay on one loop for the session's
    lifetime.
    """

    def __init__(
        self,
        backend: Backend,
        config: Optional[Config] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._async_session = AsyncSession(backend, config, logger)
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None

    def _ensure_worker_loop(self) -> None:
        """Ensure a dedicated worker thread with an event loop exists."""
        thread = self._thread
        if self._loop is not None and thread is not None and thread.is_alive():
            return

        loop = asyncio.new_event_loop()

        def _runner() -> None:
            asyncio.set_event_loop(loop)
            try:
                loop.run_forever()
            finally:
                loop.close()

        thread = threading.Thread(
            target=_runner, name="x3270script-SessionLoop", daemon=True
        )
        thread.start()
        self._loop = loop
        self._thread = thread

    def _shutdown_worker_loop(self) -> None:
        """Stop and join the worker loop thread if present."""
        loop, self._loop = self._loop, None
        thread, self._thread = self._thread, None
        if loop is not None:
            loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join(timeout=1.0)

    def _run_async(self, coro: Coroutine[Any, Any, T]) -> T:
        """Run a coroutine on the worker loop and wait for its result."""
        self._ensure_worker_loop()
        assert self._loop is not None
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result()

    @property
    def async_session(self) -> AsyncSession:
        return self._async_session

    @property
    def config(self) -> Config:
        return self._async_session.config

    @property
    def exception_mode(self) -> bool:
        return self._async_session.exception_mode

    @exception_mode.setter
    def exception_mode(self, value: bool) -> None:
        self._async_session.exception_mode = value

    @property
    def emulator_running(self) -> bool:
        return self._async_session.emulator_running

    @property
    def encoding(self) -> str:
        return self._async_session.encoding

    @property
    def recent_commands(self) -> List[IoResult]:
        return self._async_session.recent_commands

    @property
    def last_command(self) -> Optional[IoResult]:
        return self._async_session.last_command

    @property
    def status_line(self) -> Optional[str]:
        return self._async_session.status_line

    @property
    def host_connected(self) -> bool:
        return self._async_session.host_connected

    def status_field(self, field: StatusLineField) -> str:
        return self._async_session.status_field(field)

    def start(self) -> StartResult:
        return self._run_async(self._async_session.start())

    def close(self, save_history: bool = False) -> None:
        """Close the session and stop its worker thread."""
        try:
            if self._loop is not None:
                self._run_async(self._async_session.close(save_history))
        finally:
            self._shutdown_worker_loop()

    def __enter__(self) -> "Session":
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        self.close()

    def io(
        self, command: str, timeout_msec: Optional[int] = None, is_modify: bool = False
    ) -> IoResult:
        return self._run_async(self._async_session.io(command, timeout_msec, is_modify))

    def string(self, text: str, quote_backslashes: bool = True) -> IoResult:
        return self._run_async(self._async_session.string(text, quote_backslashes))

    def string_at(
        self,
        row: int,
        column: int,
        text: str,
        quote_backslashes: bool = True,
        erase_eof: bool = False,
    ) -> IoResult:
        return self._run_async(
            self._async_session.string_at(
                row, column, text, quote_backslashes, erase_eof
            )
        )

    def string_at_blocks(
        self,
        blocks: Iterable[StringAtBlock],
        quote_backslashes: bool = True,
        erase_eof: bool = False,
    ) -> IoResult:
        return self._run_async(
            self._async_session.string_at_blocks(blocks, quote_backslashes, erase_eof)
        )

    def enter(self) -> IoResult:
        return self._run_async(self._async_session.enter())

    def clear(self) -> IoResult:
        return self._run_async(self._async_session.clear())

    def pf(self, n: int) -> IoResult:
        return self._run_async(self._async_session.pf(n))

    def pa(self, n: int) -> IoResult:
        return self._run_async(self._async_session.pa(n))

    def up(self) -> IoResult:
        return self._run_async(self._async_session.up())

    def down(self) -> IoResult:
        return self._run_async(self._async_session.down())

    def left(self) -> IoResult:
        return self._run_async(self._async_session.left())

    def right(self) -> IoResult:
        return self._run_async(self._async_session.right())

    def tab(self) -> IoResult:
        return self._run_async(self._async_session.tab())

    def back_tab(self) -> IoResult:
        return self._run_async(self._async_session.back_tab())

    def move_cursor(self, row: int, column: int) -> IoResult:
        return self._run_async(self._async_session.move_cursor(row, column))

    def connect(
        self,
        host: str,
        port: Optional[Union[int, str]] = None,
        lus: Optional[Iterable[str]] = None,
        flags: ConnectFlags = ConnectFlags.NONE,
    ) -> IoResult:
        return self._run_async(self._async_session.connect(host, port, lus, flags))

    def disconnect(self) -> IoResult:
        return self._run_async(self._async_session.disconnect())

    def wait(self, mode: WaitMode, timeout_secs: Optional[int] = None) -> IoResult:
        return self._run_async(self._async_session.wait(mode, timeout_secs))

    def ascii(self, *args: int) -> IoResult:
        return self._run_async(self._async_session.ascii(*args))

    def ebcdic(self, *args: int) -> EbcdicIoResult:
        return self._run_async(self._async_session.ebcdic(*args))

    def query(self, query_type: QueryType) -> IoResult:
        return self._run_async(self._async_session.query(query_type))

    def read_buffer(
        self, read_buffer_type: ReadBufferType = ReadBufferType.ASCII
    ) -> ReadBufferIoResult:
        return self._run_async(self._async_session.read_buffer(read_buffer_type))

    def display_buffer(
        self, read_buffer_type: ReadBufferType = ReadBufferType.ASCII
    ) -> Optional[DisplayBuffer]:
        return self._run_async(self._async_session.display_buffer(read_buffer_type))

    def transfer(
        self,
        local_file: str,
        host_file: str,
        direction: TransferDirection,
        mode: TransferMode,
        host_type: TransferHostType,
        *parameters: TransferParameter,
        timeout_msec: Optional[int] = None,
    ) -> IoResult:
        return self._run_async(
            self._async_session.transfer(
                local_file,
                host_file,
                direction,
                mode,
                host_type,
                *parameters,
                timeout_msec=timeout_msec,
            )
        )


class ProcessSession(Session):
    """Session that runs its own s3270 process."""

    def __init__(
        self,
        config: Optional[ProcessConfig] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        config = config or ProcessConfig()
        super().__init__(ProcessBackend(config), config, logger)


class PortSession(Session):
    """
    Session attached to an emulator that is already running.

    With ``auto_start`` (the default) the session starts as it is
    constructed.

    Raises:
        BackendStartError: If auto-start fails
    """

    def __init__(
        self,
        config: Optional[PortConfig] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        config = config or PortConfig()
        super().__init__(PortBackend(config), config, logger)
        if config.auto_start:
            result = self.start()
            if not result.success:
                self.close()
                raise BackendStartError(
                    result.failure_message(), {"port": config.port}
                )


class MockSession(Session):
    """Session backed by the in-process mock emulator."""

    def __init__(
        self,
        config: Optional[MockConfig] = None,
        server: Optional[MockServer] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        config = config or MockConfig()
        self.server = server or MockServer()
        super().__init__(MockBackend(config, self.server), config, logger)
