"""
Protocol Models - results and payloads produced by a status probe.

A probe yields exactly one StatusProbeResult. Successful probes carry a
StatusData parsed from the server's MSSP variables; failed probes carry
the ProbeErrorKind that explains why no status could be read.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Sequence

from .constants import PROTOCOL_FLAGS


class ProbeMode(str, Enum):
    """How the client asks a server for its status."""

    TELNET = "telnet"
    PLAINTEXT = "plaintext"


class ProbeErrorKind(str, Enum):
    """Why a probe did not produce status data."""

    NONE = "none"
    CONNECT_FAILURE = "connect_failure"
    PROTOCOL_TIMEOUT = "protocol_timeout"
    PARSE_FAILURE = "parse_failure"


_TEXT_FIELDS = {
    "NAME": "game_name",
    "CODEBASE": "codebase",
    "CONTACT": "contact",
    "WEBSITE": "website",
    "LANGUAGE": "language",
    "LOCATION": "location",
    "FAMILY": "family",
}

_INTEGER_FIELDS = {
    "PLAYERS": "players",
    "MAX PLAYERS": "max_players",
    "MAXPLAYERS": "max_players",
    "MAX_PLAYERS": "max_players",
    "UPTIME": "uptime",
}


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


@dataclass(slots=True, frozen=True)
class StatusData:
    """Live metadata reported by a server over MSSP."""

    game_name: str | None = None
    players: int | None = None
    max_players: int | None = None
    uptime: int | None = None
    codebase: str | None = None
    contact: str | None = None
    website: str | None = None
    language: str | None = None
    location: str | None = None
    family: str | None = None
    protocols: frozenset[str] = field(default_factory=frozenset)
    received_at: datetime.datetime = field(default_factory=_utcnow)

    @classmethod
    def from_variables(
        cls,
        variables: Iterable[tuple[str, Sequence[str]]],
        received_at: datetime.datetime | None = None,
    ) -> tuple[StatusData, tuple[str, ...]]:
        """
        Fold MSSP (name, values) pairs into a StatusData.

        Returns the data along with the keys whose values could not be
        converted. A key seen more than once keeps its first value, as
        does a variable carrying several values. WWW is only used when
        no WEBSITE variable was sent.
        """
        values: dict[str, Any] = {}
        protocols: set[str] = set()
        field_errors: list[str] = []
        seen: set[str] = set()
        www: str | None = None

        for name, raw_values in variables:
            key = name.strip().upper()
            if key in seen or len(raw_values) < 1:
                continue

            seen.add(key)
            value = raw_values[0].strip()

            if key in _TEXT_FIELDS:
                values[_TEXT_FIELDS[key]] = value or None

            elif key in _INTEGER_FIELDS:
                attribute = _INTEGER_FIELDS[key]
                if attribute in values or value == "":
                    continue

                try:
                    values[attribute] = int(value)

                except ValueError:
                    values[attribute] = None
                    field_errors.append(key)

            elif key == "WWW":
                www = value or None

            elif key in PROTOCOL_FLAGS and value == "1":
                protocols.add(key)

        if values.get("website") is None and www:
            values["website"] = www

        return (
            cls(
                protocols=frozenset(protocols),
                received_at=received_at or _utcnow(),
                **values,
            ),
            tuple(field_errors),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "game_name": self.game_name,
            "players": self.players,
            "max_players": self.max_players,
            "uptime": self.uptime,
            "codebase": self.codebase,
            "contact": self.contact,
            "website": self.website,
            "language": self.language,
            "location": self.location,
            "family": self.family,
            "protocols": sorted(self.protocols),
            "received_at": self.received_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatusData:
        received_at = data.get("received_at")
        if isinstance(received_at, str):
            received_at = datetime.datetime.fromisoformat(received_at)

        return cls(
            game_name=data.get("game_name"),
            players=data.get("players"),
            max_players=data.get("max_players"),
            uptime=data.get("uptime"),
            codebase=data.get("codebase"),
            contact=data.get("contact"),
            website=data.get("website"),
            language=data.get("language"),
            location=data.get("location"),
            family=data.get("family"),
            protocols=frozenset(data.get("protocols") or ()),
            received_at=received_at or _utcnow(),
        )


@dataclass(slots=True, frozen=True)
class StatusProbeResult:
    """Outcome of one probe against one endpoint."""

    succeeded: bool
    data: StatusData | None = None
    error_kind: ProbeErrorKind = ProbeErrorKind.NONE
    raw_latency: float = 0.0
    message: str = ""
    field_errors: tuple[str, ...] = ()

    @classmethod
    def success(
        cls,
        data: StatusData,
        raw_latency: float,
        field_errors: tuple[str, ...] = (),
        message: str = "",
    ) -> StatusProbeResult:
        return cls(
            succeeded=True,
            data=data,
            error_kind=ProbeErrorKind.NONE,
            raw_latency=raw_latency,
            message=message,
            field_errors=field_errors,
        )

    @classmethod
    def failure(
        cls,
        error_kind: ProbeErrorKind,
        raw_latency: float,
        message: str = "",
    ) -> StatusProbeResult:
        return cls(
            succeeded=False,
            data=None,
            error_kind=error_kind,
            raw_latency=raw_latency,
            message=message,
        )
