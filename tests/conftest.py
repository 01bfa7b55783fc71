"""
Pytest configuration shared by all monitor tests.

Provides in-process fake MSSP servers bound to 127.0.0.1 and a builder
for MSSP subnegotiation blocks.
"""

import asyncio
from typing import AsyncGenerator, Awaitable, Callable

import pytest

from mudmonitor.logging import LoggingConfig
from mudmonitor.protocol.constants import IAC, MSSP, MSSP_VAL, MSSP_VAR, SB, SE


ConnectionHandler = Callable[[asyncio.StreamReader, asyncio.StreamWriter], Awaitable[None]]


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )


@pytest.fixture(autouse=True)
def configure_log_level():
    config = LoggingConfig()
    config.update(log_level="error")
    yield
    config.update(log_level="error")


def build_mssp_block(*variables: tuple, terminate: bool = True) -> bytes:
    """
    Build ``IAC SB MSSP (VAR name (VAL value)+)+ IAC SE``. Each variable
    is a tuple of (name, value, ...); values may be str or bytes.
    """
    block = bytearray([IAC, SB, MSSP])

    for name, *values in variables:
        block.append(MSSP_VAR)
        block.extend(name.encode())

        for value in values:
            block.append(MSSP_VAL)
            block.extend(value if isinstance(value, bytes) else value.encode())

    if terminate:
        block.extend([IAC, SE])

    return bytes(block)


@pytest.fixture
def mssp_block():
    return build_mssp_block


async def hold_open(reader: asyncio.StreamReader) -> None:
    """Keep a fake server connection open until the client hangs up."""
    while await reader.read(1024):
        pass


@pytest.fixture
def drain_until_closed():
    return hold_open


@pytest.fixture
async def mssp_server() -> AsyncGenerator[Callable[[ConnectionHandler], Awaitable[tuple[str, int]]], None]:
    servers: list[asyncio.Server] = []

    async def start(handler: ConnectionHandler) -> tuple[str, int]:

        async def guarded(reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
            try:
                await handler(reader, writer)

            except (ConnectionError, asyncio.IncompleteReadError):
                pass

            finally:
                writer.close()

        server = await asyncio.start_server(guarded, "127.0.0.1", 0)
        servers.append(server)

        host, port = server.sockets[0].getsockname()[:2]
        return host, port

    yield start

    for server in servers:
        server.close()
        try:
            await asyncio.wait_for(server.wait_closed(), timeout=1.0)
        except asyncio.TimeoutError:
            pass
