"""
x3270script package init.
Exports the scripting sessions, their configuration and result types.
"""

import argparse
import datetime
import json
import logging
import os
import sys
from typing import List, Optional

from .config import (
    Config,
    ConnectFlags,
    MockConfig,
    ModifyFail,
    PortConfig,
    ProcessConfig,
)
from .emulation.coordinates import Coordinates
from .emulation.display_buffer import DisplayBuffer
from .exceptions import (
    ArgumentError,
    BackendStartError,
    CommandError,
    InvalidOperationError,
    X3270ScriptError,
)
from .protocol.actions import QueryType, StringAtBlock, WaitMode
from .results import IoResult, ReadBufferType, StartResult
from .session import (
    AsyncSession,
    MockSession,
    PortSession,
    ProcessSession,
    Session,
)

LOG_JSON_ENV = "X3270SCRIPT_LOG_JSON"


class JSONFormatter(logging.Formatter):
    """JSON log formatter with session correlation fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.datetime.now().isoformat(),
            "level": record.levelname,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        session_id = getattr(record, "session_id", None)
        if session_id:
            log_entry["session_id"] = session_id

        command = getattr(record, "command", None)
        if command:
            log_entry["command"] = command

        extra = getattr(record, "x3270script_extra", {})
        if extra:
            log_entry.update(extra)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
            context = getattr(record.exc_info[1], "context", None)
            if context:
                log_entry["context"] = context

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "WARNING") -> None:
    """
    Setup basic logging configuration.

    JSON output is selected by setting X3270SCRIPT_LOG_JSON=true.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    use_json = os.environ.get(LOG_JSON_ENV, "false").lower() == "true"
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    if use_json:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
    else:
        logging.basicConfig(level=getattr(logging, level.upper()))


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point: connect, wait for the first input field, print the screen."""
    parser = argparse.ArgumentParser(
        description="x3270script - script a 3270 session through s3270"
    )
    parser.add_argument("host", help="Host to connect to")
    parser.add_argument("--port", type=int, help="Host port")
    parser.add_argument(
        "--model", type=int, default=4, help="3270 model number (default 4)"
    )
    parser.add_argument(
        "--process", default="s3270", help="Emulator executable (default s3270)"
    )
    parser.add_argument(
        "--timeout", type=int, default=0, help="Wait timeout in seconds"
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    config = ProcessConfig(process_name=args.process, model=args.model)
    session = ProcessSession(config)
    try:
        session.exception_mode = True
        session.start()
        session.connect(args.host, port=args.port)
        session.wait(WaitMode.INPUT_FIELD, args.timeout or None)
        for line in session.ascii().result:
            print(line)
    except X3270ScriptError as e:
        context = e.context
        if context:
            logger.error(f"Session failed: {e.message} (Context: {context})")
        else:
            logger.error(f"Session failed: {e.message}")
        print(f"x3270script: {e.message}", file=sys.stderr)
        return 1
    finally:
        session.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())


__all__ = [
    "ArgumentError",
    "AsyncSession",
    "BackendStartError",
    "CommandError",
    "Config",
    "ConnectFlags",
    "Coordinates",
    "DisplayBuffer",
    "InvalidOperationError",
    "IoResult",
    "MockConfig",
    "MockSession",
    "ModifyFail",
    "PortConfig",
    "PortSession",
    "ProcessConfig",
    "ProcessSession",
    "QueryType",
    "ReadBufferType",
    "Session",
    "StartResult",
    "StringAtBlock",
    "WaitMode",
    "X3270ScriptError",
    "setup_logging",
    "main",
]
