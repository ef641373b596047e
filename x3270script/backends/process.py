"""Backend that spawns its own emulator and scripts it over stdin/stdout."""

import asyncio
import logging
import shlex
from typing import List, Optional

from ..config import ProcessConfig
from ..exceptions import InvalidOperationError
from ..protocol.channel import ScriptChannel
from ..protocol.process_options import check_options
from ..results import StartResult
from ..utils.logging_utils import log_debug_operation, log_session_action

logger = logging.getLogger(__name__)

# Longest command line the platforms we launch on accept.
MAX_COMMAND_LINE = 32767


class ProcessBackend:
    """Runs ``s3270 -utf8 -model N [options]`` as a child process."""

    def __init__(self, config: Optional[ProcessConfig] = None) -> None:
        self.config = config or ProcessConfig()
        self._process: Optional[asyncio.subprocess.Process] = None
        self._channel: Optional[ScriptChannel] = None
        self._stderr_task: Optional["asyncio.Task[None]"] = None
        self._stderr: List[str] = []

    def build_arguments(self) -> List[str]:
        """
        Build the emulator's argument vector.

        Raises:
            ArgumentError: If an extra option is not a ProcessOption
            InvalidOperationError: If the command line would be too long
        """
        config = self.config
        if config.test_first_options is not None:
            args = shlex.split(config.test_first_options)
            text = config.test_first_options
        else:
            options = check_options(config.extra_options)
            args = ["-utf8", "-model", str(config.model)]
            text = " ".join(args + [option.quote() for option in options])
            for option in options:
                args.extend(option.argv())
        if len(config.process_name) + 1 + len(text) > MAX_COMMAND_LINE:
            raise InvalidOperationError(
                "Arguments too long", {"length": len(text), "max": MAX_COMMAND_LINE}
            )
        return args

    async def start(self) -> StartResult:
        args = self.build_arguments()
        log_session_action(
            logger, "ProcessBackend start", f"{self.config.process_name} {args}"
        )
        self._stderr = []
        try:
            process = await asyncio.create_subprocess_exec(
                self.config.process_name,
                *args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.warning(f"Could not start {self.config.process_name}: {e}")
            return StartResult.failed(str(e))
        assert process.stdout is not None and process.stdin is not None
        self._process = process
        self._channel = ScriptChannel(process.stdout, process.stdin)
        self._stderr_task = asyncio.ensure_future(self._collect_stderr(process))
        return StartResult()

    async def _collect_stderr(self, process: asyncio.subprocess.Process) -> None:
        assert process.stderr is not None
        while True:
            raw = await process.stderr.readline()
            if not raw:
                return
            self._stderr.append(raw.decode("utf-8", errors="replace").rstrip("\r\n"))

    async def exchange(self, command: str, encoding: str) -> List[str]:
        if self._channel is None:
            raise InvalidOperationError("Process backend is not started")
        return await self._channel.exchange(command, encoding)

    async def close(self) -> None:
        process, self._process = self._process, None
        channel, self._channel = self._channel, None
        if channel is not None:
            await channel.close()
        if process is not None:
            if process.returncode is None:
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
            await process.wait()
            log_debug_operation(logger, "Emulator exited", process.returncode)
        task, self._stderr_task = self._stderr_task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    def error_output(self, fallback: str) -> str:
        text = " ".join(line for line in self._stderr if line)
        return text or fallback
