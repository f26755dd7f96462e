import asyncio
from typing import Iterable, Set

from vsock_relay.channel.channel import Channel
from vsock_relay.errors import TransferError


def _wake(future: asyncio.Future) -> None:
    if not future.done():
        future.set_result(None)


async def wait_readable(channels: Iterable[Channel]) -> Set[Channel]:
    """
    Suspend until at least one of `channels` is readable.

    Reader callbacks for every channel that became ready in the same event
    loop iteration run before this coroutine resumes, so the returned set
    holds all of them, not just the first. There is no timeout. EINTR is
    retried by the selector itself.

    Raises:
        TransferError: If a channel cannot be watched.
    """
    loop = asyncio.get_running_loop()
    ready: Set[Channel] = set()
    woken = loop.create_future()

    def on_readable(channel: Channel) -> None:
        ready.add(channel)
        _wake(woken)

    registered = []
    try:
        for channel in channels:
            try:
                loop.add_reader(channel.fileno(), on_readable, channel)
            except (OSError, ValueError) as e:
                raise TransferError(f"select: cannot watch {channel.name}: {e}", channel.name) from e
            registered.append(channel)
        await woken
    finally:
        for channel in registered:
            loop.remove_reader(channel.fileno())
    return ready


async def wait_writable(channel: Channel) -> None:
    """Suspend until `channel` accepts more bytes."""
    loop = asyncio.get_running_loop()
    woken = loop.create_future()
    try:
        loop.add_writer(channel.fileno(), _wake, woken)
    except (OSError, ValueError) as e:
        raise TransferError(f"select: cannot watch {channel.name}: {e}", channel.name) from e
    try:
        await woken
    finally:
        loop.remove_writer(channel.fileno())
