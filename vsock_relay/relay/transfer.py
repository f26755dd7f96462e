import logging
from typing import Awaitable, Callable, Optional, Union

from vsock_relay.channel.channel import Channel
from vsock_relay.config import CHUNK_SIZE
from vsock_relay.errors import TransferError
from vsock_relay.relay.readiness import wait_writable as _wait_writable

logger = logging.getLogger(__name__)

Writer = Callable[[memoryview], int]
WaitWritable = Callable[[], Awaitable[None]]


async def write_all(
    data: Union[bytes, bytearray],
    write: Writer,
    wait_writable: WaitWritable,
    name: str = "destination",
) -> int:
    """
    Write every byte of `data`, tolerating partial and refused writes.

    A write refused with BlockingIOError counts as zero bytes written.
    Whenever bytes remain after an attempt, `wait_writable()` is awaited
    before the next one, so a slow consumer never makes this spin.

    Args:
        data: The bytes to deliver.
        write: Performs one non-blocking write and returns the count written.
        wait_writable: Resolves once the destination can take more bytes.
        name: Destination name used in error messages.

    Returns:
        The number of bytes written, always len(data).

    Raises:
        TransferError: On any write failure other than would-block.
    """
    view = memoryview(data)
    offset = 0
    remaining = len(view)
    while remaining > 0:
        try:
            written = write(view[offset:])
        except BlockingIOError:
            written = 0
        except OSError as e:
            raise TransferError(f"write to {name}: {e}", name) from e
        else:
            if written <= 0:
                raise TransferError(f"write to {name}: no bytes accepted", name)

        offset += written
        remaining -= written
        if remaining > 0:
            logger.debug("%s accepted %d bytes, %d remaining", name, written, remaining)
            await wait_writable()
    return offset


async def transfer(src: Channel, dst: Channel, wait_writable: Optional[WaitWritable] = None) -> int:
    """
    Move one chunk of at most CHUNK_SIZE bytes from `src` to `dst`.

    Returns:
        The number of bytes moved.

    Raises:
        TransferError: If `src` is at end-of-stream or the read fails, or if
            the write to `dst` fails.
    """
    try:
        data = src.read(CHUNK_SIZE)
    except OSError as e:
        raise TransferError(f"read from {src.name}: {e}", src.name) from e
    if not data:
        raise TransferError(f"end of stream on {src.name}", src.name)

    if wait_writable is None:
        async def wait_writable() -> None:
            await _wait_writable(dst)

    return await write_all(data, dst.write, wait_writable, dst.name)
