"""Exceptions for x3270script with contextual information."""

from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from .results import IoResult, StartResult


class X3270ScriptError(Exception):
    """Base error for x3270script with contextual information."""

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
    ):
        """
        Initialize an x3270script error.

        Args:
            message: Error message
            context: Optional context information (command, port, row, column, etc.)
            original_exception: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception

    def __str__(self) -> str:
        """Get string representation with context."""
        base_msg = super().__str__()
        if self.context:
            context_items = []
            for key, value in self.context.items():
                if isinstance(value, str) and len(value) > 50:
                    # Truncate long values
                    value = value[:47] + "..."
                context_items.append(f"{key}={value}")
            context_str = ", ".join(context_items)
            return f"{base_msg} (Context: {context_str})"
        return base_msg

    def __repr__(self) -> str:
        """Get repr with context details."""
        base_repr = super().__repr__()
        if self.context:
            return f"{base_repr} (context={self.context!r})"
        return base_repr

    def add_context(self, key: str, value: Any) -> None:
        """
        Add context information to the exception.

        Args:
            key: Context key
            value: Context value
        """
        self.context[key] = value

    def get_context(self, key: str, default: Any = None) -> Any:
        """
        Get context information from the exception.

        Args:
            key: Context key
            default: Default value if key not found

        Returns:
            Context value or default
        """
        return self.context.get(key, default)


class ArgumentError(X3270ScriptError, ValueError):
    """Malformed input caught before any protocol interaction.

    Raised regardless of exception mode.
    """


class InvalidOperationError(X3270ScriptError, RuntimeError):
    """Operation attempted in the wrong session state (not started, already running)."""


class CommandError(X3270ScriptError):
    """A command failed while the session is in exception mode.

    The failed result is available as ``io_result`` (an IoResult, or a
    StartResult when raised from start()).
    """

    def __init__(
        self,
        message: str,
        io_result: "Optional[IoResult | StartResult]" = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, context)
        self.io_result = io_result


class BackendStartError(X3270ScriptError):
    """The transport backend could not be acquired."""


class TransportEOFError(X3270ScriptError):
    """The emulator closed its end of the connection."""
