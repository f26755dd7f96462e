import asyncio
import dataclasses
import sys

import pytest

from vsock_relay.config import DEFAULT_PORT, RelayMode, VsockAddress
from vsock_relay.process.relay_process import RelayProcess
from tests.helpers.ports import connect_with_retry, recv_exactly
from tests.helpers.scripts import tcp_relay_command


def test_default_command_runs_the_module():
    process = RelayProcess()
    assert process.port == DEFAULT_PORT
    assert process.command == [sys.executable, "-m", "vsock_relay", str(DEFAULT_PORT)]


def test_echo_command_carries_flag():
    process = RelayProcess(VsockAddress(port=7000), mode=RelayMode.ECHO)
    assert process.command[-2:] == ["7000", "--echo"]


@pytest.mark.asyncio
async def test_not_started_process():
    process = RelayProcess()

    with pytest.raises(ConnectionError):
        await process.write(b"data")
    with pytest.raises(RuntimeError):
        await process.wait()
    # Should not raise
    await process.stop()


@pytest.mark.asyncio
async def test_relay_process_round_trip(tcp_port):
    process = RelayProcess(VsockAddress(port=tcp_port), command=tcp_relay_command(str(tcp_port)))
    received = []
    got_data = asyncio.Event()
    closed = asyncio.Event()

    def on_data(chunk):
        received.append(chunk)
        if b"".join(received) == b"hello host":
            got_data.set()

    process.pipeline("data", on_data)
    process.on("close", lambda *args: closed.set())

    await process.start()
    await process.start()
    sock = await connect_with_retry(tcp_port)
    loop = asyncio.get_running_loop()
    try:
        await loop.sock_sendall(sock, b"hello host")
        await asyncio.wait_for(got_data.wait(), 10)

        assert await process.write(b"hello guest") is True
        assert await recv_exactly(sock, 11) == b"hello guest"

        with pytest.raises(TypeError):
            await process.write("text")
    finally:
        sock.close()

    assert await asyncio.wait_for(process.wait(), 10) == 1
    await asyncio.wait_for(closed.wait(), 5)
    assert process.is_running() is False


@pytest.mark.asyncio
async def test_relay_process_stop_kills_waiting_relay(tcp_port):
    process = RelayProcess(command=tcp_relay_command(str(tcp_port)))
    await process.start()
    assert process.is_running()

    await asyncio.wait_for(process.terminate(), 10)

    assert process.process.returncode is not None
    # Stopping twice is harmless.
    await process.stop()


def test_address_carries_only_a_port():
    assert [field.name for field in dataclasses.fields(VsockAddress)] == ["port"]
    assert VsockAddress() == VsockAddress(port=DEFAULT_PORT)
