import logging
from typing import Dict, List, Optional

from vsock_relay.channel.channel import Channel, FdChannel
from vsock_relay.config import RelayConfig
from vsock_relay.relay.readiness import wait_readable
from vsock_relay.relay.transfer import transfer

logger = logging.getLogger(__name__)


class Relay:
    """
    Shuttles bytes between one peer connection and the standard streams.

    Bytes from the peer go to `stdout`, or back to the peer in echo mode.
    Bytes from `stdin` go to the peer. The loop only ends by raising
    TransferError, which is also how end-of-stream on either side shows up.
    """

    def __init__(
        self,
        config: RelayConfig,
        peer: Channel,
        stdin: Optional[Channel] = None,
        stdout: Optional[Channel] = None,
    ):
        self.config = config
        self.peer = peer
        self.stdin = stdin if stdin is not None else FdChannel.stdin()
        self.stdout = stdout if stdout is not None else FdChannel.stdout()
        self.bytes_to_peer = 0
        self.bytes_from_peer = 0

    @property
    def destination(self) -> Channel:
        return self.peer if self.config.echo else self.stdout

    def _watched(self) -> List[Channel]:
        # A disabled stdin is left out of the wait so it cannot wake the loop
        # forever once it reaches end-of-file.
        if self.config.forwards_stdin:
            return [self.stdin, self.peer]
        return [self.peer]

    async def run(self) -> None:
        """
        Relay until a transfer fails.

        The standard streams are switched back to their original blocking
        mode on the way out; the peer is left to the caller.

        Raises:
            TransferError: When either side closes or an I/O error occurs.
        """
        saved: Dict[Channel, bool] = {}
        for channel in (self.stdin, self.stdout):
            saved[channel] = channel.get_blocking()
        try:
            for channel in (self.stdin, self.stdout, self.peer):
                channel.set_blocking(False)

            logger.info("Relaying in %s mode", self.config.mode.value)
            if not self.config.forwards_stdin:
                logger.warning("Port %d is not positive: standard input will not be forwarded", self.config.port)

            await self._loop()
        finally:
            for channel, blocking in saved.items():
                try:
                    channel.set_blocking(blocking)
                except OSError as e:
                    logger.debug("Could not restore blocking mode of %s: %s", channel.name, e)
            logger.debug("Relayed %d bytes to peer, %d bytes from peer", self.bytes_to_peer, self.bytes_from_peer)

    async def _loop(self) -> None:
        watched = self._watched()
        destination = self.destination
        while True:
            ready = await wait_readable(watched)

            if self.stdin in ready and self.config.forwards_stdin:
                self.bytes_to_peer += await transfer(self.stdin, self.peer)

            if self.peer in ready:
                self.bytes_from_peer += await transfer(self.peer, destination)
