"""
Tests for MSSP response scanning and payload parsing.

Tests cover:
- Telnet negotiation states (pending, requested, declined, complete)
- IAC escaping inside and outside subnegotiation blocks
- Splitting MSSP payloads into variables
- Plaintext MSSP-REPLY parsing
"""

import pytest

from mudmonitor.protocol.constants import (
    DO,
    DONT,
    IAC,
    MSSP,
    MSSP_VAL,
    MSSP_VAR,
    SB,
    SE,
    WILL,
    WONT,
)
from mudmonitor.protocol.parser import (
    NegotiationState,
    parse_mssp_subnegotiation,
    parse_plaintext_reply,
    plaintext_reply_complete,
    scan_telnet_response,
)


GMCP = 201


# =============================================================================
# Test Telnet Negotiation Scanning
# =============================================================================


class TestTelnetScan:
    """Tests for scan_telnet_response."""

    def test_empty_buffer_is_pending(self):
        scan = scan_telnet_response(b"")

        assert scan.state == NegotiationState.PENDING
        assert scan.payload is None
        assert scan.partial_payload is None

    def test_banner_text_is_pending(self):
        scan = scan_telnet_response(b"Welcome to the realm!\r\n")

        assert scan.state == NegotiationState.PENDING

    def test_complete_block_is_found(self, mssp_block):
        buffer = b"banner" + mssp_block(("NAME", "Realm"), ("PLAYERS", "12"))

        scan = scan_telnet_response(buffer)

        assert scan.state == NegotiationState.COMPLETE
        assert scan.payload == bytes([MSSP_VAR]) + b"NAME" + bytes([MSSP_VAL]) + b"Realm" + bytes(
            [MSSP_VAR]
        ) + b"PLAYERS" + bytes([MSSP_VAL]) + b"12"

    def test_will_mssp_marks_requested(self):
        scan = scan_telnet_response(bytes([IAC, WILL, MSSP]))

        assert scan.state == NegotiationState.REQUESTED
        assert scan.will_count == 1

    @pytest.mark.parametrize("command", [WONT, DONT])
    def test_refusal_marks_declined(self, command):
        scan = scan_telnet_response(bytes([IAC, command, MSSP]))

        assert scan.state == NegotiationState.DECLINED

    def test_negotiation_for_other_options_is_ignored(self):
        buffer = bytes([IAC, WILL, GMCP, IAC, DO, 24, IAC, WONT, 1])

        scan = scan_telnet_response(buffer)

        assert scan.state == NegotiationState.PENDING
        assert scan.will_count == 0

    def test_incomplete_command_waits_for_more_data(self):
        assert scan_telnet_response(bytes([IAC])).state == NegotiationState.PENDING
        assert scan_telnet_response(bytes([IAC, WILL])).state == NegotiationState.PENDING

    def test_unterminated_block_is_reported_as_partial(self, mssp_block):
        buffer = mssp_block(("NAME", "Realm"), terminate=False)

        scan = scan_telnet_response(buffer)

        assert scan.state == NegotiationState.PENDING
        assert scan.payload is None
        assert scan.partial_payload == bytes([MSSP_VAR]) + b"NAME" + bytes([MSSP_VAL]) + b"Realm"

    def test_other_subnegotiation_is_skipped(self, mssp_block):
        gmcp = bytes([IAC, SB, GMCP]) + b"Core.Hello {}" + bytes([IAC, SE])
        buffer = gmcp + mssp_block(("NAME", "Realm"))

        scan = scan_telnet_response(buffer)

        assert scan.state == NegotiationState.COMPLETE
        assert b"Realm" in scan.payload
        assert b"Core.Hello" not in scan.payload

    def test_escaped_iac_inside_block_is_unescaped(self, mssp_block):
        buffer = mssp_block(("NAME", b"a" + bytes([IAC, IAC]) + b"b"))

        scan = scan_telnet_response(buffer)

        assert scan.state == NegotiationState.COMPLETE
        assert scan.payload.endswith(b"a" + bytes([IAC]) + b"b")

    def test_escaped_iac_se_does_not_end_block(self, mssp_block):
        value = bytes([IAC, IAC, SE]) + b"tail"
        buffer = mssp_block(("NAME", value))

        scan = scan_telnet_response(buffer)

        assert scan.state == NegotiationState.COMPLETE
        assert scan.payload.endswith(bytes([IAC, SE]) + b"tail")

    def test_escaped_iac_outside_block_is_data(self):
        buffer = bytes([IAC, IAC, WILL, MSSP])

        scan = scan_telnet_response(buffer)

        assert scan.state == NegotiationState.PENDING
        assert scan.will_count == 0

    def test_first_complete_block_wins(self, mssp_block):
        buffer = mssp_block(("NAME", "First")) + mssp_block(("NAME", "Second"))

        scan = scan_telnet_response(buffer)

        assert scan.payload.endswith(b"First")


# =============================================================================
# Test MSSP Payload Splitting
# =============================================================================


class TestSubnegotiationParsing:
    """Tests for parse_mssp_subnegotiation."""

    def test_variables_with_single_values(self):
        payload = bytes([MSSP_VAR]) + b"NAME" + bytes([MSSP_VAL]) + b"Realm" + bytes(
            [MSSP_VAR]
        ) + b"PLAYERS" + bytes([MSSP_VAL]) + b"7"

        assert parse_mssp_subnegotiation(payload) == [
            ("NAME", ["Realm"]),
            ("PLAYERS", ["7"]),
        ]

    def test_variable_with_several_values(self):
        payload = bytes([MSSP_VAR]) + b"PORT" + bytes([MSSP_VAL]) + b"4000" + bytes(
            [MSSP_VAL]
        ) + b"4001"

        assert parse_mssp_subnegotiation(payload) == [("PORT", ["4000", "4001"])]

    def test_leading_bytes_before_first_variable_are_ignored(self):
        payload = b"junk" + bytes([MSSP_VAL]) + b"orphan" + bytes([MSSP_VAR]) + b"NAME" + bytes(
            [MSSP_VAL]
        ) + b"Realm"

        assert parse_mssp_subnegotiation(payload) == [("NAME", ["Realm"])]

    def test_variable_without_value_has_no_values(self):
        payload = bytes([MSSP_VAR]) + b"EMPTY" + bytes([MSSP_VAR]) + b"NAME" + bytes(
            [MSSP_VAL]
        ) + b"Realm"

        assert parse_mssp_subnegotiation(payload) == [
            ("EMPTY", []),
            ("NAME", ["Realm"]),
        ]

    def test_invalid_utf8_is_replaced(self):
        payload = bytes([MSSP_VAR]) + b"NAME" + bytes([MSSP_VAL]) + b"\xc3\x28"

        [(name, [value])] = parse_mssp_subnegotiation(payload)

        assert name == "NAME"
        assert value == "\ufffd("

    def test_empty_payload(self):
        assert parse_mssp_subnegotiation(b"") == []


# =============================================================================
# Test Plaintext Replies
# =============================================================================


class TestPlaintextParsing:
    """Tests for the plaintext MSSP-REQUEST reply format."""

    def test_reply_between_markers(self):
        reply = (
            b"Welcome!\r\n"
            b"MSSP-REPLY-START\r\n"
            b"NAME\tRealm\r\n"
            b"PLAYERS\t3\r\n"
            b"MSSP-REPLY-END\r\n"
            b"IGNORED\tvalue\r\n"
        )

        assert parse_plaintext_reply(reply) == [
            ("NAME", ["Realm"]),
            ("PLAYERS", ["3"]),
        ]

    def test_extra_tabs_are_additional_values(self):
        reply = b"MSSP-REPLY-START\nPORT\t4000\t4001\nMSSP-REPLY-END\n"

        assert parse_plaintext_reply(reply) == [("PORT", ["4000", "4001"])]

    def test_lines_without_tab_are_skipped(self):
        reply = b"MSSP-REPLY-START\nnot a variable\nNAME\tRealm\nMSSP-REPLY-END\n"

        assert parse_plaintext_reply(reply) == [("NAME", ["Realm"])]

    def test_missing_start_marker_yields_nothing(self):
        assert parse_plaintext_reply(b"NAME\tRealm\nMSSP-REPLY-END\n") == []

    def test_reply_completion(self):
        assert plaintext_reply_complete(b"MSSP-REPLY-START\nNAME\tRealm\n") is False
        assert plaintext_reply_complete(b"MSSP-REPLY-START\nMSSP-REPLY-END\r\n") is True
