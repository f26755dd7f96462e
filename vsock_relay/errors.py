from typing import Optional


class RelayError(Exception):
    """Base class for every failure that ends a relay run."""

    exit_code = 1


class UsageError(RelayError):
    """Malformed command line (bad port, unknown mode token, wrong argument count)."""


class AddressError(RelayError):
    """Creating or binding the listening endpoint failed."""


class ListenError(RelayError):
    """Marking the listening endpoint passive failed."""


class AcceptError(RelayError):
    """Waiting for the single peer connection failed."""


class TransferError(RelayError):
    """
    A read or write failed during relaying.

    End-of-stream is reported through this error too: the relay makes no
    distinction between a peer that shut down cleanly and a broken channel.
    """

    def __init__(self, message: str, channel: Optional[str] = None):
        super().__init__(message)
        self.channel = channel
