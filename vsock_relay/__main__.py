import sys

from vsock_relay.cli import main

if __name__ == "__main__":
    sys.exit(main())
