import argparse
import asyncio
import logging
import sys

from vsock_relay import RelayMode, RelayProcess, VsockAddress

logging.basicConfig(level=logging.INFO, stream=sys.stderr)


async def main():
    parser = argparse.ArgumentParser(description="Wait for a guest on a vsock port and greet it.")
    parser.add_argument("port", type=int, nargs="?", default=6000)
    parser.add_argument("--echo", action="store_true", help="let the relay echo instead of greeting")
    args = parser.parse_args()

    mode = RelayMode.ECHO if args.echo else RelayMode.PASS
    relay = RelayProcess(VsockAddress(port=args.port), mode=mode)

    def on_data(chunk: bytes):
        sys.stdout.write(chunk.decode(errors="replace"))
        sys.stdout.flush()

    relay.pipeline("data", on_data)
    relay.on("close", lambda *_: logging.info("Guest went away"))

    await relay.start()
    try:
        if mode is RelayMode.PASS:
            await relay.write(b"hello from the host\n")
        code = await relay.wait()
        logging.info("Relay exited with status %d", code)
    finally:
        await relay.stop()


if __name__ == "__main__":
    asyncio.run(main())
