from .channel import Channel, FdChannel, SocketChannel
