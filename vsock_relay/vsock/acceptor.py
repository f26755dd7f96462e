import logging
import socket
from typing import Any, Optional

from vsock_relay.config import VSOCK_PORT_MASK
from vsock_relay.errors import AcceptError, AddressError, ListenError

logger = logging.getLogger(__name__)

AF_VSOCK = getattr(socket, "AF_VSOCK", 40)
VMADDR_CID_ANY = getattr(socket, "VMADDR_CID_ANY", 0xFFFFFFFF)


def vsock_port(port: int) -> int:
    """Wrap a port into the unsigned range of sockaddr_vm.svm_port."""
    return port & VSOCK_PORT_MASK


def accept_one(port: int, family: int = AF_VSOCK, host: Optional[Any] = None) -> socket.socket:
    """
    Listen on `port`, accept a single connection and close the listener.

    The listening socket is released before returning, whether or not the
    accept succeeded, so the port never services a second peer.

    Args:
        port: Port to listen on. Passed through as given; for vsock it is
            wrapped into 32 bits the way the kernel address structure does.
        family: Address family, AF_VSOCK unless overridden (tests use AF_INET).
        host: Address to bind; defaults to VMADDR_CID_ANY for vsock.

    Returns:
        The connected peer socket.

    Raises:
        AddressError: If the socket cannot be created or bound.
        ListenError: If listen() fails.
        AcceptError: If accept() fails.
    """
    if family == AF_VSOCK:
        address = (VMADDR_CID_ANY if host is None else host, vsock_port(port))
    else:
        address = ("" if host is None else host, port)

    try:
        listener = socket.socket(family, socket.SOCK_STREAM)
    except OSError as e:
        raise AddressError(f"socket: {e}") from e

    try:
        try:
            listener.bind(address)
        except (OSError, OverflowError) as e:
            raise AddressError(f"bind: {e}") from e

        try:
            listener.listen(1)
        except OSError as e:
            raise ListenError(f"listen: {e}") from e

        logger.info("Listening on port %d", listener.getsockname()[1])

        try:
            peer, peer_address = listener.accept()
        except OSError as e:
            raise AcceptError(f"accept: {e}") from e
    finally:
        listener.close()

    logger.info("Accepted connection from %s", peer_address)
    return peer
