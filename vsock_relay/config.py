from dataclasses import dataclass
from enum import Enum

# Largest number of bytes moved by a single transfer.
CHUNK_SIZE = 4096

DEFAULT_PORT = 6000

# sockaddr_vm carries the port as an unsigned 32 bit integer.
VSOCK_PORT_MASK = 0xFFFFFFFF


class RelayMode(Enum):
    PASS = "pass"
    ECHO = "echo"

    @property
    def flag(self) -> str:
        return f"--{self.value}"


@dataclass(frozen=True)
class RelayConfig:
    """
    Settings fixed at startup and handed to the relay loop.

    Attributes:
        port: The port given on the command line, unmodified.
        mode: Where bytes read from the peer go.
    """

    port: int
    mode: RelayMode = RelayMode.PASS

    @property
    def echo(self) -> bool:
        return self.mode is RelayMode.ECHO

    @property
    def forwards_stdin(self) -> bool:
        # Standard input is only relayed to the peer for positive ports.
        # Kept for compatibility with the C vsock-server, where the check
        # looks incidental rather than intended.
        return self.port > 0


@dataclass(frozen=True)
class VsockAddress:
    """Address of a relay listening on the host."""

    port: int = DEFAULT_PORT
