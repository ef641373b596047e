# ATTRIBUTION NOTICE
# =================================================================================
# This module contains code ported from or inspired by: x3270if scripting library
# Source: https://github.com/pmattes/x3270
# Licensed under BSD-3-Clause
#
# DESCRIPTION
# --------------------
# Argument quoting and host-name expansion for s3270 script actions
#
# COMPATIBILITY
# --------------------
# Produces argument text accepted by the s3270/ws3270 action parser
#
# MODIFICATIONS
# --------------------
# Host, port and LU names are checked against an allowed character set
#
# INTEGRATION POINTS
# --------------------
# - String(), StringAt() and Transfer() argument rendering
# - Connect() target expansion
# - Emulator command-line option rendering
#
# ATTRIBUTION REQUIREMENTS
# ------------------------------
# This attribution must be maintained when this code is modified or
# redistributed. See THIRD_PARTY_NOTICES.md for complete license text.
# =================================================================================

"""Argument quoting and connect-target expansion for script actions."""

import logging
import unicodedata
from typing import Iterable, Optional

from ..config import ConnectFlags
from ..exceptions import ArgumentError

logger = logging.getLogger(__name__)

# Any of these forces the whole argument into double quotes. The order and
# membership are part of the wire format.
META_CHARS = ' ,"()\\'

# Characters escaped with a backslash inside a quoted argument.
BACKSLASH_CHARS = '"\\'

# Control characters with a C-style escape.
CONTROL_ESCAPES = {
    "\r": "\\r",
    "\n": "\\n",
    "\b": "\\b",
    "\f": "\\f",
    "\t": "\\t",
}

# One prefix letter per ConnectFlags bit, lowest bit first.
CONNECT_FLAG_LETTERS = "CLNPSB"


def is_control(char: str) -> bool:
    """Return True for C0/C1 control characters and DEL."""
    return unicodedata.category(char) == "Cc"


def quote_string(text: str, quote_backslashes: bool = True) -> str:
    """
    Quote an action argument.

    Text containing any of ``space , ( ) " \\`` is wrapped in double quotes,
    with embedded double quotes (and, if quote_backslashes is set,
    backslashes) escaped. Carriage return, newline, backspace, form feed and
    tab are rendered as C escapes and force quoting.

    Args:
        text: Argument text
        quote_backslashes: Escape backslashes inside quotes

    Returns:
        Argument text ready for an action call

    Raises:
        ArgumentError: If text contains any other control character
    """
    translated = text
    if any(c in text for c in META_CHARS):
        out = ['"']
        for c in text:
            if c in BACKSLASH_CHARS and (c != "\\" or quote_backslashes):
                out.append("\\")
            out.append(c)
        out.append('"')
        translated = "".join(out)

    length = len(translated)
    translated = "".join(CONTROL_ESCAPES.get(c, c) for c in translated)
    if len(translated) != length and not translated.startswith('"'):
        translated = f'"{translated}"'

    if any(is_control(c) for c in translated):
        raise ArgumentError("text contains control character(s)", {"text": text})
    return translated


def validate_name(name: Optional[str], extra_chars: str = "") -> str:
    """
    Check a host, port or LU name against the allowed character set.

    Letters (including non-ASCII letters), digits, '-', '_' and '.' are
    allowed, plus any characters in extra_chars.

    Raises:
        ArgumentError: If the name is empty or contains anything else
    """
    if not name:
        raise ArgumentError("Empty name")
    for c in name:
        if c.isalnum() or c in "-_." or c in extra_chars:
            continue
        raise ArgumentError(f"name '{name}' contains invalid character(s)")
    return name


def expand_host_name(
    host: str,
    port: Optional[str] = None,
    lus: Optional[Iterable[str]] = None,
    flags: ConnectFlags = ConnectFlags.NONE,
    default_flags: ConnectFlags = ConnectFlags.NONE,
) -> str:
    """
    Build a Connect() target from its parts.

    The result has the form ``[flags][lu1,lu2@]host[:port]``, quoted when
    necessary. IPv6 literal hosts are bracketed.

    Args:
        host: Host name or address
        port: Optional port, as text
        lus: Optional logical unit names
        flags: Connect flags for this call; NONE selects default_flags
        default_flags: The session's default connect flags

    Returns:
        Quoted connect target

    Raises:
        ArgumentError: If any component is empty or contains invalid characters
    """
    active = flags if flags != ConnectFlags.NONE else default_flags
    prefix = "".join(
        f"{letter}:"
        for bit, letter in enumerate(CONNECT_FLAG_LETTERS)
        if active & (1 << bit)
    )

    lu_part = ""
    if lus is not None:
        lu_list = [validate_name(lu) for lu in lus]
        lu_part = ",".join(lu_list) + "@"

    validate_name(host, ":")
    host_part = f"[{host}]" if ":" in host else host

    port_part = ""
    if port:
        if "." in str(port):
            raise ArgumentError(f"name '{port}' contains invalid character(s)")
        port_part = ":" + validate_name(str(port))

    target = quote_string(prefix + lu_part + host_part + port_part)
    logger.debug(f"Expanded connect target: {target}")
    return target
