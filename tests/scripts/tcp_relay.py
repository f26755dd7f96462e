"""
Runs the relay over TCP on 127.0.0.1 so tests do not need a vsock-capable
kernel. Takes the same arguments as vsock-relay.
"""
import logging
import os
import socket
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))

from vsock_relay.cli import parse_args, serve
from vsock_relay.errors import UsageError


def main() -> int:
    try:
        args = parse_args(sys.argv[1:])
    except UsageError as e:
        print(f"tcp_relay: error: {e}", file=sys.stderr)
        return 1
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, stream=sys.stderr)
    return serve(args.config, family=socket.AF_INET, host="127.0.0.1")


if __name__ == "__main__":
    sys.exit(main())
