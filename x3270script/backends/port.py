"""Backend attached to an emulator that is already running with a script port."""

import logging
import os
from typing import List, Optional

from ..config import X3270_PORT_ENV, PortConfig
from ..exceptions import BackendStartError, InvalidOperationError
from ..protocol.channel import ScriptChannel
from ..results import StartResult
from ..utils.logging_utils import log_connection_event
from .base import try_connect

logger = logging.getLogger(__name__)


class PortBackend:
    """Connects to ``127.0.0.1:port``.

    The port comes from the config, or from the X3270PORT environment
    variable when the config port is 0 (the variable an emulator sets for
    the scripts it runs).
    """

    def __init__(self, config: Optional[PortConfig] = None) -> None:
        self.config = config or PortConfig(auto_start=False)
        self._channel: Optional[ScriptChannel] = None

    def _resolve_port(self) -> int:
        if self.config.port != 0:
            return self.config.port
        text = os.environ.get(X3270_PORT_ENV)
        if text is None:
            raise BackendStartError(f"{X3270_PORT_ENV} not found in the environment")
        try:
            port = int(text)
        except ValueError:
            port = -1
        if not 0 < port < 65536:
            raise BackendStartError(
                f"Invalid {X3270_PORT_ENV} in the environment", {"value": text}
            )
        return port

    async def start(self) -> StartResult:
        try:
            port = self._resolve_port()
            reader, writer = await try_connect(port, self.config.connect_retry_msec)
        except BackendStartError as e:
            logger.warning(f"Port backend start failed: {e.message}")
            return StartResult.failed(e.message)
        self._channel = ScriptChannel(reader, writer)
        return StartResult()

    async def exchange(self, command: str, encoding: str) -> List[str]:
        if self._channel is None:
            raise InvalidOperationError("Port backend is not started")
        return await self._channel.exchange(command, encoding)

    async def close(self) -> None:
        channel, self._channel = self._channel, None
        if channel is not None:
            await channel.close()
            log_connection_event(logger, "Closed script port connection")

    def error_output(self, fallback: str) -> str:
        return fallback
