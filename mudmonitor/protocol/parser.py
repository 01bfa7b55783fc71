"""
MSSP response parsing for both the telnet and plaintext variants.

The telnet scanner works on the whole receive buffer on every call so the
client can feed it whatever has arrived so far. It reports the MSSP
negotiation state and, once present, the (unescaped) payload of the first
MSSP subnegotiation block.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .constants import (
    DO,
    DONT,
    IAC,
    MSSP,
    MSSP_VAL,
    MSSP_VAR,
    PLAINTEXT_REPLY_END,
    PLAINTEXT_REPLY_START,
    SB,
    SE,
    WILL,
    WONT,
)

MsspVariables = list[tuple[str, list[str]]]


class NegotiationState(Enum):
    PENDING = "pending"
    REQUESTED = "requested"
    DECLINED = "declined"
    COMPLETE = "complete"


@dataclass(slots=True)
class TelnetScan:
    state: NegotiationState = NegotiationState.PENDING
    payload: bytes | None = None
    partial_payload: bytes | None = None
    will_count: int = 0


def _unescape(data: bytes) -> bytes:
    return data.replace(bytes([IAC, IAC]), bytes([IAC]))


def _find_subnegotiation_end(buffer: bytes, start: int) -> int:
    index = start
    size = len(buffer)

    while index < size:
        if buffer[index] == IAC and index + 1 < size:
            command = buffer[index + 1]
            if command == SE:
                return index

            if command == IAC:
                index += 2
                continue

        index += 1

    return -1


def scan_telnet_response(buffer: bytes) -> TelnetScan:
    scan = TelnetScan()
    index = 0
    size = len(buffer)

    while index < size:
        if buffer[index] != IAC:
            index += 1
            continue

        if index + 1 >= size:
            break

        command = buffer[index + 1]

        if command == IAC:
            index += 2

        elif command in (WILL, WONT, DO, DONT):
            if index + 2 >= size:
                break

            if buffer[index + 2] == MSSP:
                if command == WILL:
                    scan.will_count += 1
                    if scan.state == NegotiationState.PENDING:
                        scan.state = NegotiationState.REQUESTED

                else:
                    scan.state = NegotiationState.DECLINED

            index += 3

        elif command == SB:
            if index + 2 >= size:
                break

            option = buffer[index + 2]
            start = index + 3
            end = _find_subnegotiation_end(buffer, start)

            if option == MSSP and end >= 0:
                scan.state = NegotiationState.COMPLETE
                scan.payload = _unescape(buffer[start:end])
                return scan

            if option == MSSP:
                scan.partial_payload = _unescape(buffer[start:])
                break

            if end < 0:
                break

            index = end + 2

        else:
            index += 2

    return scan


def _decode(data: bytearray) -> str:
    return bytes(data).decode("utf-8", errors="replace")


def parse_mssp_subnegotiation(payload: bytes) -> MsspVariables:
    """
    Split an MSSP subnegotiation payload into (name, values) pairs.

    Bytes before the first MSSP_VAR are ignored, as are variables that
    never receive an MSSP_VAL.
    """
    variables: MsspVariables = []
    name: bytearray | None = None
    values: list[bytearray] = []
    target: bytearray | None = None

    for byte in payload:
        if byte == MSSP_VAR:
            if name is not None:
                variables.append((_decode(name), [_decode(value) for value in values]))

            name = bytearray()
            values = []
            target = name

        elif byte == MSSP_VAL:
            if name is None:
                target = None
                continue

            target = bytearray()
            values.append(target)

        elif target is not None:
            target.append(byte)

    if name is not None:
        variables.append((_decode(name), [_decode(value) for value in values]))

    return variables


def plaintext_reply_complete(buffer: bytes) -> bool:
    return PLAINTEXT_REPLY_END.encode() in buffer


def parse_plaintext_reply(buffer: bytes) -> MsspVariables:
    """
    Parse the KEY<TAB>VALUE lines between MSSP-REPLY-START and
    MSSP-REPLY-END. Extra tab separated fields are additional values.
    """
    variables: MsspVariables = []
    in_reply = False

    for line in buffer.decode("utf-8", errors="replace").splitlines():
        line = line.strip("\r\n")

        if line.strip() == PLAINTEXT_REPLY_START:
            in_reply = True
            continue

        if line.strip() == PLAINTEXT_REPLY_END:
            break

        if not in_reply or "\t" not in line:
            continue

        name, *values = line.split("\t")
        variables.append((name, values))

    return variables
