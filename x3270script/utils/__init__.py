"""
Utilities package for x3270script.

Contains the shared logging helpers used across the session, backends and decoder.
"""

from .logging_utils import (
    log_command_error,
    log_command_handling,
    log_connection_event,
    log_data_processing,
    log_debug_operation,
    log_parsing_warning,
    log_session_action,
    log_session_error,
)

__all__ = [
    "log_command_handling",
    "log_command_error",
    "log_session_action",
    "log_session_error",
    "log_parsing_warning",
    "log_debug_operation",
    "log_connection_event",
    "log_data_processing",
]
