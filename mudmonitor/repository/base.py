"""
Repository interface consumed by the polling and trending loops.

The monitor never touches storage directly. Hosts provide a subclass
backed by whatever store holds their server listings. Only the five
abstract coroutines are required; history, activity and bulk scoring
hooks have working defaults.
"""

import datetime
from abc import ABC, abstractmethod
from typing import Iterable

from mudmonitor.health.models import (
    ServerStatusRecord,
    StatusChange,
    StatusSnapshot,
)
from mudmonitor.trending.models import SignalBundle

from .models import Endpoint


class StatusRepository(ABC):

    @abstractmethod
    async def list_endpoints(self) -> list[Endpoint]:
        """All servers that should be probed this cycle."""
        ...

    @abstractmethod
    async def get_status_record(self, server_id: str) -> ServerStatusRecord | None:
        """The last persisted record, or None for a server never polled."""
        ...

    @abstractmethod
    async def save_status_record(self, record: ServerStatusRecord) -> None:
        ...

    @abstractmethod
    async def list_signal_bundles(self) -> list[SignalBundle]:
        ...

    @abstractmethod
    async def save_score(self, server_id: str, score: float) -> None:
        ...

    async def save_scores(self, scores: Iterable[tuple[str, float]]) -> None:
        for server_id, score in scores:
            await self.save_score(server_id, score)

    async def record_snapshot(self, snapshot: StatusSnapshot) -> None:
        return None

    async def record_status_change(self, change: StatusChange) -> None:
        return None

    async def prune_snapshots(self, older_than: datetime.datetime) -> int:
        """Drop history rows checked before ``older_than``; returns the count removed."""
        return 0
