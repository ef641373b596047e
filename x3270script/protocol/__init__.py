"""
Protocol layer for x3270script.

Encodes session operations as s3270 action lines and frames the replies.
"""

from .actions import QueryType, StringAtBlock, WaitMode
from .quoting import expand_host_name, quote_string
from .status import StatusLine, StatusLineField

__all__ = [
    "QueryType",
    "StringAtBlock",
    "WaitMode",
    "expand_host_name",
    "quote_string",
    "StatusLine",
    "StatusLineField",
]
