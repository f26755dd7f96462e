"""
vsock-relay: accept one vsock connection and relay it to stdin/stdout
"""

from .config import CHUNK_SIZE, DEFAULT_PORT, RelayConfig, RelayMode, VsockAddress
from .errors import (
    RelayError,
    UsageError,
    AddressError,
    ListenError,
    AcceptError,
    TransferError,
)
from .event.emitter import AbstractEmitter
from .pipe.event_pipe import EventPipe
from .channel.channel import Channel, FdChannel, SocketChannel
from .vsock.acceptor import accept_one
from .relay.transfer import transfer, write_all
from .relay.relay import Relay
from .process.relay_process import RelayProcess

__all__ = [
    # Configuration
    'CHUNK_SIZE',
    'DEFAULT_PORT',
    'RelayConfig',
    'RelayMode',
    'VsockAddress',

    # Errors
    'RelayError',
    'UsageError',
    'AddressError',
    'ListenError',
    'AcceptError',
    'TransferError',

    # Emitter and pipe abstract classes
    'AbstractEmitter',
    'EventPipe',

    # Channels
    'Channel',
    'FdChannel',
    'SocketChannel',

    # Acceptor and relay loop
    'accept_one',
    'transfer',
    'write_all',
    'Relay',

    # Host-side process wrapper
    'RelayProcess',
]

__version__ = "0.1.0"
