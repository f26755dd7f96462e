from abc import ABC, abstractmethod
import os
import socket


class Channel(ABC):
    """
    A byte channel backed by a file descriptor.

    Reads and writes go straight to the descriptor; once `set_blocking(False)`
    has been called they raise BlockingIOError instead of suspending.
    """

    name = "channel"

    @abstractmethod
    def fileno(self) -> int:
        pass

    @abstractmethod
    def read(self, size: int) -> bytes:
        pass

    @abstractmethod
    def write(self, data: bytes) -> int:
        pass

    def get_blocking(self) -> bool:
        return os.get_blocking(self.fileno())

    def set_blocking(self, blocking: bool) -> None:
        os.set_blocking(self.fileno(), blocking)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name} fd={self.fileno()}>"


class FdChannel(Channel):
    """A raw descriptor such as the process's standard input or output."""

    def __init__(self, fd: int, name: str = "fd"):
        self._fd = fd
        self.name = name

    @classmethod
    def stdin(cls) -> "FdChannel":
        return cls(0, "stdin")

    @classmethod
    def stdout(cls) -> "FdChannel":
        return cls(1, "stdout")

    def fileno(self) -> int:
        return self._fd

    def read(self, size: int) -> bytes:
        return os.read(self._fd, size)

    def write(self, data: bytes) -> int:
        return os.write(self._fd, data)


class SocketChannel(Channel):
    """The accepted peer connection."""

    def __init__(self, sock: socket.socket, name: str = "peer"):
        self._sock = sock
        self.name = name

    @property
    def sock(self) -> socket.socket:
        return self._sock

    def fileno(self) -> int:
        return self._sock.fileno()

    def read(self, size: int) -> bytes:
        return self._sock.recv(size)

    def write(self, data: bytes) -> int:
        return self._sock.send(data)

    def get_blocking(self) -> bool:
        return self._sock.getblocking()

    def set_blocking(self, blocking: bool) -> None:
        self._sock.setblocking(blocking)

    def close(self) -> None:
        self._sock.close()
