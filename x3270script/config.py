"""
Session configuration for x3270script.

Config objects validate on assignment, so a bad value is reported where it
is set rather than when the session later uses it.
"""

import enum
from typing import Iterable, List, Optional

from .exceptions import ArgumentError

# Environment variable naming the script port of an already-running emulator.
X3270_PORT_ENV = "X3270PORT"

DEFAULT_HANDSHAKE_TIMEOUT_MSEC = 5000
DEFAULT_CONNECT_RETRY_MSEC = 1000
DEFAULT_PROCESS_NAME = "s3270"
DEFAULT_MODEL = 4


class ModifyFail(enum.Enum):
    """Local policy for screen-modifying commands."""

    REQUIRE_CONNECTION = "RequireConnection"
    REQUIRE_3270 = "Require3270"
    NEVER = "Never"


class ConnectFlags(enum.IntFlag):
    """Connect-time options, each rendered as a one-letter host prefix."""

    NONE = 0
    NO_LOGIN = 0x1
    SECURE = 0x2
    NON_TN3270E = 0x4
    PASSTHRU = 0x8
    STANDARD_DATA_STREAM = 0x10
    BIND_LOCK = 0x20
    ALL = 0x3F


class Config:
    """Configuration common to every session type."""

    def __init__(
        self,
        origin: int = 0,
        default_timeout_msec: int = 0,
        handshake_timeout_msec: int = DEFAULT_HANDSHAKE_TIMEOUT_MSEC,
        connect_retry_msec: Optional[int] = None,
        default_connect_flags: ConnectFlags = ConnectFlags.NONE,
        modify_fail: ModifyFail = ModifyFail.REQUIRE_CONNECTION,
    ) -> None:
        """
        Initialize a session configuration.

        Args:
            origin: Row/column base exposed to callers (0 or 1)
            default_timeout_msec: Timeout for commands that do not give one (0 = none)
            handshake_timeout_msec: Timeout for the priming query issued by start()
            connect_retry_msec: Delay between connect attempts (None = default)
            default_connect_flags: Flags applied by connect() when the call gives none
            modify_fail: Policy for screen-modifying commands

        Raises:
            ArgumentError: If any value is out of range
        """
        self.origin = origin
        self.default_timeout_msec = default_timeout_msec
        self.handshake_timeout_msec = handshake_timeout_msec
        self.connect_retry_msec = connect_retry_msec
        self.default_connect_flags = default_connect_flags
        self.modify_fail = modify_fail

    @property
    def origin(self) -> int:
        return self._origin

    @origin.setter
    def origin(self, value: int) -> None:
        if value not in (0, 1):
            raise ArgumentError("Origin must be 0 or 1", {"origin": value})
        self._origin = value

    @property
    def default_timeout_msec(self) -> int:
        return self._default_timeout_msec

    @default_timeout_msec.setter
    def default_timeout_msec(self, value: int) -> None:
        if value < 0:
            raise ArgumentError(
                "Invalid default_timeout_msec", {"default_timeout_msec": value}
            )
        self._default_timeout_msec = value

    @property
    def handshake_timeout_msec(self) -> int:
        return self._handshake_timeout_msec

    @handshake_timeout_msec.setter
    def handshake_timeout_msec(self, value: int) -> None:
        if value < 0:
            raise ArgumentError(
                "Invalid handshake_timeout_msec", {"handshake_timeout_msec": value}
            )
        self._handshake_timeout_msec = value

    @property
    def connect_retry_msec(self) -> Optional[int]:
        return self._connect_retry_msec

    @connect_retry_msec.setter
    def connect_retry_msec(self, value: Optional[int]) -> None:
        if value is not None and value < 0:
            raise ArgumentError(
                "Invalid connect_retry_msec", {"connect_retry_msec": value}
            )
        self._connect_retry_msec = value

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(origin={self.origin}, "
            f"default_timeout_msec={self.default_timeout_msec}, "
            f"modify_fail={self.modify_fail.name})"
        )


class ProcessConfig(Config):
    """Configuration for a session that spawns its own emulator process."""

    def __init__(
        self,
        process_name: str = DEFAULT_PROCESS_NAME,
        model: int = DEFAULT_MODEL,
        extra_options: Optional[Iterable[object]] = None,
        test_first_options: Optional[str] = None,
        **kwargs: object,
    ) -> None:
        super().__init__(**kwargs)  # type: ignore[arg-type]
        self.process_name = process_name
        self.model = model
        # ProcessOption instances, rendered after the standard arguments
        self.extra_options: List[object] = list(extra_options or [])
        # Replaces the generated argument list entirely (diagnostics only)
        self.test_first_options = test_first_options

    @property
    def model(self) -> int:
        return self._model

    @model.setter
    def model(self, value: int) -> None:
        if value < 2 or value > 5:
            raise ArgumentError("Model must be between 2 and 5", {"model": value})
        self._model = value


class PortConfig(Config):
    """Configuration for a session attached to an emulator that is already running."""

    def __init__(self, port: int = 0, auto_start: bool = True, **kwargs: object):
        super().__init__(**kwargs)  # type: ignore[arg-type]
        # 0 means take the port from the X3270PORT environment variable
        self.port = port
        self.auto_start = auto_start


class MockConfig(Config):
    """Configuration for a session backed by the in-process mock emulator."""
