from __future__ import annotations

import datetime
from dataclasses import dataclass

from mudmonitor.protocol.models import StatusData


@dataclass(slots=True, frozen=True)
class ServerStatusRecord:
    """Persisted liveness state of one server."""

    server_id: str
    is_online: bool = False
    consecutive_failures: int = 0
    last_checked_at: datetime.datetime | None = None
    current_data: StatusData | None = None

    @classmethod
    def initial(cls, server_id: str) -> ServerStatusRecord:
        return cls(server_id=server_id)


@dataclass(slots=True, frozen=True)
class StatusSnapshot:
    """One history row, appended after every probe."""

    server_id: str
    is_online: bool
    player_count: int | None
    uptime: int | None
    checked_at: datetime.datetime
    data: StatusData | None = None

    @classmethod
    def from_record(cls, record: ServerStatusRecord) -> StatusSnapshot:
        data = record.current_data if record.is_online else None

        return cls(
            server_id=record.server_id,
            is_online=record.is_online,
            player_count=data.players if data else None,
            uptime=data.uptime if data else None,
            checked_at=record.last_checked_at,
            data=data,
        )


@dataclass(slots=True, frozen=True)
class StatusChange:
    """An online/offline flip between two consecutive records."""

    server_id: str
    became_online: bool
    changed_at: datetime.datetime
