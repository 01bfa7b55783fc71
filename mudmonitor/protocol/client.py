import asyncio
import time

from .constants import (
    DEFAULT_MAX_RESPONSE_BYTES,
    MSSP_QUERY,
    PLAINTEXT_REQUEST,
    READ_CHUNK_SIZE,
)
from .models import (
    ProbeErrorKind,
    ProbeMode,
    StatusData,
    StatusProbeResult,
)
from .parser import (
    MsspVariables,
    NegotiationState,
    parse_mssp_subnegotiation,
    parse_plaintext_reply,
    plaintext_reply_complete,
    scan_telnet_response,
)


class StatusProtocolClient:
    """
    Opens a TCP connection to a game server, asks for its MSSP status and
    turns the reply into a StatusProbeResult.

    The client holds no per-connection state and can be shared by any
    number of concurrent probes. Probes never raise except for
    asyncio.CancelledError.

    Example usage:
        client = StatusProtocolClient()
        result = await client.probe("mud.example.org", 4000, timeout=10.0)
        if result.succeeded:
            print(result.data.players)
    """

    def __init__(
        self,
        mode: ProbeMode = ProbeMode.TELNET,
        max_response_bytes: int = DEFAULT_MAX_RESPONSE_BYTES,
    ):
        if max_response_bytes < 1:
            raise ValueError("max_response_bytes must be at least 1")

        self._mode = ProbeMode(mode)
        self._max_response_bytes = max_response_bytes

    @property
    def mode(self) -> ProbeMode:
        return self._mode

    async def probe(
        self,
        host: str,
        port: int,
        timeout: float,
    ) -> StatusProbeResult:
        start = time.monotonic()

        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port),
                timeout=timeout,
            )

        except asyncio.TimeoutError:
            return StatusProbeResult.failure(
                ProbeErrorKind.CONNECT_FAILURE,
                self._elapsed(start),
                message=f"Connect to {host}:{port} timed out after {timeout}s",
            )

        except (OSError, ValueError, OverflowError) as err:
            return StatusProbeResult.failure(
                ProbeErrorKind.CONNECT_FAILURE,
                self._elapsed(start),
                message=f"Connect to {host}:{port} failed: {err}",
            )

        try:
            return await asyncio.wait_for(
                self._exchange(reader, writer, start),
                timeout=timeout,
            )

        except asyncio.TimeoutError:
            return StatusProbeResult.failure(
                ProbeErrorKind.PROTOCOL_TIMEOUT,
                self._elapsed(start),
                message=f"No complete status reply within {timeout}s",
            )

        except OSError as err:
            return StatusProbeResult.failure(
                ProbeErrorKind.CONNECT_FAILURE,
                self._elapsed(start),
                message=f"Connection to {host}:{port} lost: {err}",
            )

        finally:
            await self._close(writer)

    async def check_reachable(
        self,
        host: str,
        port: int,
        timeout: float,
    ) -> bool:
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port),
                timeout=timeout,
            )

        except (asyncio.TimeoutError, OSError, ValueError, OverflowError):
            return False

        await self._close(writer)
        return True

    async def _exchange(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        start: float,
    ) -> StatusProbeResult:
        if self._mode == ProbeMode.TELNET:
            writer.write(MSSP_QUERY)

        else:
            writer.write(PLAINTEXT_REQUEST)

        await writer.drain()

        buffer = bytearray()
        requeried = False

        while True:
            try:
                chunk = await reader.read(READ_CHUNK_SIZE)

            except ConnectionError:
                chunk = b""

            if not chunk:
                return self._on_remote_close(bytes(buffer), start)

            buffer.extend(chunk)

            if self._mode == ProbeMode.TELNET:
                scan = scan_telnet_response(bytes(buffer))

                if scan.state == NegotiationState.COMPLETE:
                    return self._to_result(
                        parse_mssp_subnegotiation(scan.payload),
                        start,
                    )

                if scan.state == NegotiationState.DECLINED:
                    return StatusProbeResult.success(
                        StatusData(),
                        self._elapsed(start),
                        message="Server does not support MSSP",
                    )

                if scan.will_count > 0 and not requeried:
                    requeried = True
                    writer.write(MSSP_QUERY)
                    await writer.drain()

            elif plaintext_reply_complete(bytes(buffer)):
                return self._to_result(
                    parse_plaintext_reply(bytes(buffer)),
                    start,
                )

            if len(buffer) > self._max_response_bytes:
                return StatusProbeResult.failure(
                    ProbeErrorKind.PROTOCOL_TIMEOUT,
                    self._elapsed(start),
                    message=f"Reply exceeded {self._max_response_bytes} bytes without completing",
                )

    def _on_remote_close(
        self,
        buffer: bytes,
        start: float,
    ) -> StatusProbeResult:
        if len(buffer) < 1:
            return StatusProbeResult.failure(
                ProbeErrorKind.CONNECT_FAILURE,
                self._elapsed(start),
                message="Server closed the connection without sending data",
            )

        if self._mode == ProbeMode.PLAINTEXT:
            return self._to_result(parse_plaintext_reply(buffer), start)

        scan = scan_telnet_response(buffer)
        payload = scan.payload if scan.payload is not None else scan.partial_payload

        if payload is None:
            return self._to_result([], start)

        return self._to_result(parse_mssp_subnegotiation(payload), start)

    def _to_result(
        self,
        variables: MsspVariables,
        start: float,
    ) -> StatusProbeResult:
        data, field_errors = StatusData.from_variables(variables)

        return StatusProbeResult.success(
            data,
            self._elapsed(start),
            field_errors=field_errors,
        )

    async def _close(self, writer: asyncio.StreamWriter) -> None:
        writer.close()

        try:
            await writer.wait_closed()

        except (ConnectionError, OSError):
            # The peer may already have reset the socket.
            pass

    def _elapsed(self, start: float) -> float:
        return time.monotonic() - start
