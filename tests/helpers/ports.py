import asyncio
import socket


def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


async def connect_with_retry(port: int, attempts: int = 100, delay: float = 0.05) -> socket.socket:
    """Connect to a relay that may not be listening yet; returns a non-blocking socket."""
    loop = asyncio.get_running_loop()
    last_error = None
    for _ in range(attempts):
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setblocking(False)
        try:
            await loop.sock_connect(sock, ("127.0.0.1", port))
            return sock
        except OSError as e:
            sock.close()
            last_error = e
            await asyncio.sleep(delay)
    raise ConnectionError(f"relay on port {port} never accepted: {last_error}")


async def recv_exactly(sock: socket.socket, size: int, timeout: float = 5.0) -> bytes:
    loop = asyncio.get_running_loop()
    received = bytearray()

    async def collect():
        while len(received) < size:
            chunk = await loop.sock_recv(sock, size - len(received))
            if not chunk:
                break
            received.extend(chunk)

    await asyncio.wait_for(collect(), timeout)
    return bytes(received)
