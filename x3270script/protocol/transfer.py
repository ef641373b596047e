# ATTRIBUTION NOTICE
# =================================================================================
# This module contains code ported from or inspired by: x3270if scripting library
# Source: https://github.com/pmattes/x3270
# Licensed under BSD-3-Clause
#
# DESCRIPTION
# --------------------
# IND$FILE transfer parameters and Transfer() action rendering
#
# COMPATIBILITY
# --------------------
# Keyword names and values match the s3270 Transfer() action
#
# MODIFICATIONS
# --------------------
# Parameters are small validated classes; legality rules are checked in one pass
#
# INTEGRATION POINTS
# --------------------
# - Session.transfer()
# - Argument quoting (quote_string)
#
# ATTRIBUTION REQUIREMENTS
# ------------------------------
# This attribution must be maintained when this code is modified or
# redistributed. See THIRD_PARTY_NOTICES.md for complete license text.
# =================================================================================

"""File transfer (IND$FILE) parameters for the Transfer() action."""

import enum
import logging
from typing import Dict, Iterable, Optional

from ..exceptions import ArgumentError
from .quoting import quote_string

logger = logging.getLogger(__name__)

CREATION_KEYS = ("recfm", "lrecl", "allocation")


class TransferDirection(enum.Enum):
    SEND = "Send"
    RECEIVE = "Receive"


class TransferMode(enum.Enum):
    ASCII = "Ascii"
    BINARY = "Binary"


class TransferHostType(enum.Enum):
    TSO = "Tso"
    VM = "Vm"
    CICS = "Cics"


class ExistAction(enum.Enum):
    """What to do when the destination file already exists."""

    REPLACE = "Replace"
    KEEP = "Keep"
    APPEND = "Append"


class RecordFormat(enum.Enum):
    FIXED = "Fixed"
    VARIABLE = "Variable"
    UNDEFINED = "Undefined"


class TsoAllocationUnits(enum.Enum):
    TRACKS = "Tracks"
    CYLINDERS = "Cylinders"
    AVBLOCK = "Avblock"


def _positive(value: int, name: str) -> int:
    if value <= 0:
        raise ArgumentError(f"{name} must be positive", {name: value})
    return value


class TransferParameter:
    """Base class for optional Transfer() parameters.

    Subclasses validate their own values when constructed and contribute
    keywords through ``apply``, which also checks the direction, mode and
    host type they are legal for.
    """

    def apply(
        self,
        keywords: Dict[str, str],
        direction: TransferDirection,
        mode: TransferMode,
        host_type: TransferHostType,
    ) -> None:
        raise NotImplementedError


class AsciiCr(TransferParameter):
    """Add (receive) or remove (send) carriage returns."""

    def __init__(self, add_remove: bool) -> None:
        self.add_remove = add_remove

    def apply(
        self,
        keywords: Dict[str, str],
        direction: TransferDirection,
        mode: TransferMode,
        host_type: TransferHostType,
    ) -> None:
        if mode != TransferMode.ASCII:
            raise ArgumentError("AsciiCr requires Ascii mode")
        keywords["cr"] = "add" if self.add_remove else "keep"


class AsciiRemap(TransferParameter):
    """Remap the character set, optionally through a Windows code page."""

    def __init__(self, remap: bool, code_page: Optional[int] = None) -> None:
        if code_page is not None:
            if not remap:
                raise ArgumentError("code_page requires remap")
            _positive(code_page, "code_page")
        self.remap = remap
        self.code_page = code_page

    def apply(
        self,
        keywords: Dict[str, str],
        direction: TransferDirection,
        mode: TransferMode,
        host_type: TransferHostType,
    ) -> None:
        if mode != TransferMode.ASCII:
            raise ArgumentError("AsciiRemap requires Ascii mode")
        keywords["remap"] = "yes" if self.remap else "no"
        if self.code_page is not None:
            keywords["windowscodepage"] = str(self.code_page)


class BlockSize(TransferParameter):
    def __init__(self, block_size: int) -> None:
        self.block_size = _positive(block_size, "block_size")

    def apply(
        self,
        keywords: Dict[str, str],
        direction: TransferDirection,
        mode: TransferMode,
        host_type: TransferHostType,
    ) -> None:
        if host_type != TransferHostType.TSO:
            raise ArgumentError("BlockSize only works on TSO hosts")
        keywords["blocksize"] = str(self.block_size)


class ExistActionParameter(TransferParameter):
    def __init__(self, exist_action: ExistAction) -> None:
        self.exist_action = exist_action

    def apply(
        self,
        keywords: Dict[str, str],
        direction: TransferDirection,
        mode: TransferMode,
        host_type: TransferHostType,
    ) -> None:
        keywords["exist"] = self.exist_action.value


class SendLogicalRecordLength(TransferParameter):
    def __init__(self, record_length: int) -> None:
        self.record_length = _positive(record_length, "record_length")

    def apply(
        self,
        keywords: Dict[str, str],
        direction: TransferDirection,
        mode: TransferMode,
        host_type: TransferHostType,
    ) -> None:
        if direction != TransferDirection.SEND:
            raise ArgumentError("SendLogicalRecordLength requires send")
        if host_type == TransferHostType.CICS:
            raise ArgumentError("SendLogicalRecordLength does not work on CICS")
        keywords["lrecl"] = str(self.record_length)


class SendRecordFormat(TransferParameter):
    def __init__(self, record_format: RecordFormat) -> None:
        self.record_format = record_format

    def apply(
        self,
        keywords: Dict[str, str],
        direction: TransferDirection,
        mode: TransferMode,
        host_type: TransferHostType,
    ) -> None:
        if direction != TransferDirection.SEND:
            raise ArgumentError("SendRecordFormat requires send")
        if host_type == TransferHostType.CICS:
            raise ArgumentError("SendRecordFormat does not work with CICS hosts")
        keywords["recfm"] = self.record_format.value


class TsoSendAllocation(TransferParameter):
    """
    Space allocation for a new TSO data set.

    An Avblock allocation without secondary space is written as
    ``TsoSendAllocation(TsoAllocationUnits.AVBLOCK, 100, avblock=200)``.
    """

    def __init__(
        self,
        allocation_units: TsoAllocationUnits,
        primary_space: int,
        secondary_space: Optional[int] = None,
        avblock: Optional[int] = None,
    ) -> None:
        self.allocation_units = allocation_units
        self.primary_space = _positive(primary_space, "primary_space")
        if secondary_space is not None:
            _positive(secondary_space, "secondary_space")
        self.secondary_space = secondary_space
        if allocation_units == TsoAllocationUnits.AVBLOCK:
            if avblock is None:
                raise ArgumentError("avblock is required")
            _positive(avblock, "avblock")
        elif avblock is not None:
            raise ArgumentError("avblock is prohibited")
        self.avblock = avblock

    def apply(
        self,
        keywords: Dict[str, str],
        direction: TransferDirection,
        mode: TransferMode,
        host_type: TransferHostType,
    ) -> None:
        if direction != TransferDirection.SEND:
            raise ArgumentError("TsoSendAllocation requires send")
        if host_type != TransferHostType.TSO:
            raise ArgumentError("TsoSendAllocation requires a TSO host")
        keywords["allocation"] = self.allocation_units.value
        keywords["primaryspace"] = str(self.primary_space)
        if self.secondary_space is not None:
            keywords["secondaryspace"] = str(self.secondary_space)
        if self.avblock is not None:
            keywords["avblock"] = str(self.avblock)


class BufferSize(TransferParameter):
    def __init__(self, buffer_size: int) -> None:
        self.buffer_size = _positive(buffer_size, "buffer_size")

    def apply(
        self,
        keywords: Dict[str, str],
        direction: TransferDirection,
        mode: TransferMode,
        host_type: TransferHostType,
    ) -> None:
        keywords["buffersize"] = str(self.buffer_size)


def build_transfer_command(
    local_file: str,
    host_file: str,
    direction: TransferDirection,
    mode: TransferMode,
    host_type: TransferHostType,
    parameters: Iterable[object] = (),
) -> str:
    """
    Render a Transfer() action.

    Args:
        local_file: Local file name
        host_file: Host file name
        direction: Send to or receive from the host
        mode: Ascii or Binary
        host_type: Tso, Vm or Cics
        parameters: Optional TransferParameter instances

    Returns:
        ``Transfer(key=value,...)`` with keywords sorted by name

    Raises:
        ArgumentError: For empty file names, foreign parameter objects, or
            parameters that are not legal for this direction, mode or host
    """
    if not local_file:
        raise ArgumentError("local_file must not be empty")
    if not host_file:
        raise ArgumentError("host_file must not be empty")

    keywords: Dict[str, str] = {
        "localfile": local_file,
        "hostfile": host_file,
        "direction": direction.value,
        "mode": mode.value,
        "host": host_type.value,
    }
    for parameter in parameters:
        if not isinstance(parameter, TransferParameter):
            raise ArgumentError(
                "Not a transfer parameter", {"parameter": repr(parameter)}
            )
        parameter.apply(keywords, direction, mode, host_type)

    if (
        direction == TransferDirection.SEND
        and keywords.get("exist") == ExistAction.APPEND.value
        and any(key in keywords for key in CREATION_KEYS)
    ):
        raise ArgumentError("Host file creation properties do not work with append")

    args = ",".join(
        quote_string(f"{key}={value}") for key, value in sorted(keywords.items())
    )
    return f"Transfer({args})"
