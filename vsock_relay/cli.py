import argparse
import asyncio
import logging
import re
import selectors
import sys
from typing import Any, List, Optional

from vsock_relay.channel.channel import SocketChannel
from vsock_relay.config import RelayConfig, RelayMode
from vsock_relay.errors import RelayError, TransferError, UsageError
from vsock_relay.relay.relay import Relay
from vsock_relay.vsock.acceptor import AF_VSOCK, accept_one

logger = logging.getLogger(__name__)

# Same shape strtol() accepts in base 10: leading blanks, optional sign, digits, nothing after.
_PORT_PATTERN = re.compile(r"\s*[+-]?[0-9]+")
_MODE_FLAGS = (RelayMode.ECHO.flag, RelayMode.PASS.flag)
_VERBOSE_FLAGS = ("-v", "--verbose")


def parse_port(value: str) -> int:
    if not _PORT_PATTERN.fullmatch(value):
        raise argparse.ArgumentTypeError(f"invalid port number: {value}")
    return int(value)


class RelayArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting with status 2."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        raise UsageError(message)


def build_parser() -> RelayArgumentParser:
    parser = RelayArgumentParser(
        prog="vsock-relay",
        description="Accept one vsock connection and relay it to stdin/stdout.",
        allow_abbrev=False,
        add_help=False,
    )
    parser.add_argument("port", type=parse_port, help="vsock port to listen on")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--echo",
        dest="mode",
        action="store_const",
        const=RelayMode.ECHO,
        help="send bytes received from the peer straight back to it",
    )
    mode.add_argument(
        "--pass",
        dest="mode",
        action="store_const",
        const=RelayMode.PASS,
        help="write bytes received from the peer to stdout (default)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log relay progress to stderr")
    parser.set_defaults(mode=RelayMode.PASS)
    return parser


def _check_shape(parser: RelayArgumentParser, argv: List[str]) -> None:
    # Exactly `<port> [--echo | --pass]` in that order; -v may appear anywhere.
    tokens = [token for token in argv if token not in _VERBOSE_FLAGS]
    if not tokens:
        parser.error("the following arguments are required: port")
    if len(tokens) > 2:
        parser.error(f"too many arguments: {' '.join(tokens[2:])}")
    port = tokens[0]
    if port.startswith("-") and not _PORT_PATTERN.fullmatch(port):
        parser.error(f"invalid port number: {port}")
    for option in tokens[1:]:
        if option not in _MODE_FLAGS:
            parser.error(f"invalid mode: {option}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse the command line into a namespace carrying `config` and `verbose`.

    Raises:
        UsageError: If the arguments are malformed.
    """
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser()
    _check_shape(parser, argv)
    args = parser.parse_args(argv)
    args.config = RelayConfig(port=args.port, mode=args.mode)
    return args


def new_event_loop() -> asyncio.AbstractEventLoop:
    # select() accepts regular files and /dev/null as standard input; epoll does not.
    return asyncio.SelectorEventLoop(selectors.SelectSelector())


def serve(config: RelayConfig, family: int = AF_VSOCK, host: Optional[Any] = None) -> int:
    """
    Accept a single peer and relay it until a failure ends the session.

    Returns:
        The process exit status.
    """
    try:
        peer = accept_one(config.port, family=family, host=host)
    except RelayError as e:
        logger.error("%s", e)
        return e.exit_code

    loop = new_event_loop()
    try:
        loop.run_until_complete(Relay(config, SocketChannel(peer)).run())
    except TransferError as e:
        logger.info("Relay stopped: %s", e)
        return e.exit_code
    finally:
        loop.close()
        peer.close()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    try:
        args = parse_args(argv)
    except UsageError as e:
        print(f"vsock-relay: error: {e}", file=sys.stderr)
        return e.exit_code

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(name)s: %(levelname)s: %(message)s",
    )
    return serve(args.config)
