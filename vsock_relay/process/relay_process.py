import asyncio
import logging
import sys
from typing import Any, List, Optional, Sequence

from vsock_relay.config import CHUNK_SIZE, RelayMode, VsockAddress
from vsock_relay.pipe.event_pipe import EventPipe

logger = logging.getLogger(__name__)


class RelayProcess(EventPipe[bytes, bytes]):
    """
    Runs vsock-relay as a child process and exposes it as a byte pipe.

    Chunks the peer sends come out of the child's stdout and are emitted as
    "data" events; `write()` feeds the child's stdin, which the relay
    forwards to the peer. "close" is emitted once the child's stdout ends.
    """

    def __init__(
        self,
        address: Optional[VsockAddress] = None,
        mode: RelayMode = RelayMode.PASS,
        command: Optional[Sequence[str]] = None,
    ):
        super().__init__()
        self.address = address if address is not None else VsockAddress()
        self.mode = mode
        self._command = list(command) if command is not None else None
        self._process: Optional[asyncio.subprocess.Process] = None
        self._read_task: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def port(self) -> int:
        return self.address.port

    @property
    def command(self) -> List[str]:
        if self._command is not None:
            return self._command
        command = [sys.executable, "-m", "vsock_relay", str(self.port)]
        if self.mode is RelayMode.ECHO:
            command.append(self.mode.flag)
        return command

    @property
    def process(self) -> Optional[asyncio.subprocess.Process]:
        return self._process

    def is_running(self) -> bool:
        return self._process is not None and self._process.returncode is None and not self._closed

    async def start(self) -> None:
        """Spawn the relay. Does nothing if it was already started."""
        if self._process is not None:
            return
        logger.info("Starting relay: %s", " ".join(self.command))
        self._process = await asyncio.create_subprocess_exec(
            *self.command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=sys.stderr,
        )
        self._read_task = asyncio.create_task(self._read_loop())

    async def _read_loop(self) -> None:
        reader = self._process.stdout
        try:
            while True:
                data = await reader.read(CHUNK_SIZE)
                if not data:
                    break
                try:
                    await self._notify("data", data)
                except Exception:
                    # _notify already emitted "error"
                    break
        except asyncio.CancelledError:
            pass
        except Exception as e:
            self._emit("error", e)
        finally:
            if not self._closed:
                self._closed = True
                self._emit("close")

    async def write(self, chunk: bytes) -> bool:
        """
        Send bytes to the peer through the relay's stdin.

        Raises:
            ConnectionError: If the relay is not running.
            TypeError: If chunk is not bytes or bytearray.
        """
        if not self.is_running():
            raise ConnectionError("Relay process is not running")
        if not isinstance(chunk, (bytes, bytearray)):
            raise TypeError(f"Expected bytes or bytearray, got {type(chunk).__name__}")

        writer = self._process.stdin
        try:
            writer.write(chunk)
            await writer.drain()
            return True
        except (ConnectionError, OSError) as e:
            self._emit("error", e)
            return False

    async def wait(self) -> int:
        """
        Wait for the relay to exit and return its exit code.

        Raises:
            RuntimeError: If the relay was never started.
        """
        if self._process is None:
            raise RuntimeError("Relay process was never started")
        code = await self._process.wait()
        if self._read_task is not None:
            await self._read_task
        return code

    async def stop(self) -> None:
        """Kill the relay if it is still running."""
        if self._process is None:
            return
        if self._process.returncode is None:
            logger.info("Stopping relay on port %d", self.port)
            try:
                self._process.terminate()
            except ProcessLookupError:
                pass
        await self.wait()

    async def terminate(self, *args: Any) -> None:
        await self.stop()
