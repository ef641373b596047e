"""Outcomes of session operations."""

import enum
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .exceptions import InvalidOperationError

DATA_PREFIX = "data: "

TRANSPORT_FAILURE_TEXT = "Timeout or socket EOF"


class FailureKind(enum.Enum):
    """Why an IoResult is unsuccessful."""

    COMMAND = "command"  # emulator answered "error"
    TRANSPORT = "transport"  # timeout or end of stream
    POLICY = "policy"  # refused locally by the modify policy


class ReadBufferType(enum.Enum):
    ASCII = "Ascii"
    EBCDIC = "Ebcdic"


def command_name(command: str) -> str:
    """First token of a command, split on space and parentheses."""
    tokens = [t for t in re.split(r"[ ()]", command) if t]
    return tokens[0] if tokens else "(empty)"


@dataclass(frozen=True)
class IoResult:
    """Outcome of one command exchange.

    ``result`` holds the response lines with any ``data: `` prefix removed.
    """

    success: bool
    result: Tuple[str, ...] = ()
    command: str = ""
    status_line: Optional[str] = None
    execution_time: float = 0.0
    encoding: str = "utf-8"
    failure: Optional[FailureKind] = None

    def failure_message(self) -> str:
        """Describe the failure the way exception mode reports it."""
        if self.failure == FailureKind.POLICY:
            return self.result[0] if self.result else "Command refused"
        message = f"Command {command_name(self.command)} failed:"
        if self.failure == FailureKind.TRANSPORT:
            return f"{message} {TRANSPORT_FAILURE_TEXT}"
        return " ".join([message, *self.result])


@dataclass(frozen=True)
class ReadBufferIoResult(IoResult):
    """Result of ReadBuffer(), remembering how it was requested."""

    read_buffer_type: ReadBufferType = ReadBufferType.ASCII
    origin: int = 0


@dataclass(frozen=True)
class EbcdicIoResult(IoResult):
    """Result of Ebcdic(), with a helper to decode the hex rows."""

    def to_byte_array(self) -> Optional[List[List[int]]]:
        """
        Decode each result row of space-separated hex into integers.

        Returns:
            One list of byte values per row, or None for a failed result

        Raises:
            InvalidOperationError: If the host sent something that is not hex
        """
        if not self.success:
            return None
        rows = []
        for line in self.result:
            row = []
            for token in line.split(" "):
                try:
                    value = int(token, 16)
                except ValueError as e:
                    raise InvalidOperationError(
                        "Bad EBCDIC hex data from host", {"token": token}, e
                    ) from e
                if not 0 <= value <= 0xFF:
                    raise InvalidOperationError(
                        "Bad EBCDIC hex data from host", {"token": token}
                    )
                row.append(value)
            rows.append(row)
        return rows


@dataclass
class StartResult:
    """Outcome of starting a session or backend."""

    success: bool = True
    fail_reason: Optional[str] = None

    @classmethod
    def failed(cls, reason: str) -> "StartResult":
        return cls(success=False, fail_reason=reason)

    def failure_message(self) -> str:
        return self.fail_reason or "Start failed"
