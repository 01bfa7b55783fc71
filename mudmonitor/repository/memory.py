import datetime
from dataclasses import replace
from typing import Iterable

from mudmonitor.health.models import (
    ServerStatusRecord,
    StatusChange,
    StatusSnapshot,
)
from mudmonitor.trending.models import SignalBundle

from .base import StatusRepository
from .models import Endpoint


class InMemoryStatusRepository(StatusRepository):
    """
    Dict backed repository for tests and single process hosts.

    Signal bundles are stored without live data; ``list_signal_bundles``
    fills ``current_players`` from the latest status record, using None
    for servers that are offline or have not reported a player count.
    """

    def __init__(self):
        self._endpoints: dict[str, Endpoint] = {}
        self._records: dict[str, ServerStatusRecord] = {}
        self._signals: dict[str, SignalBundle] = {}
        self._scores: dict[str, float] = {}
        self._snapshots: list[StatusSnapshot] = []
        self._status_changes: list[StatusChange] = []

    def register(
        self,
        endpoint: Endpoint,
        signals: SignalBundle | None = None,
    ) -> None:
        self._endpoints[endpoint.server_id] = endpoint

        if signals is not None:
            self.set_signals(signals)

    def unregister(self, server_id: str) -> None:
        self._endpoints.pop(server_id, None)
        self._records.pop(server_id, None)
        self._signals.pop(server_id, None)
        self._scores.pop(server_id, None)

    def set_signals(self, signals: SignalBundle) -> None:
        self._signals[signals.server_id] = signals

    def get_score(self, server_id: str) -> float | None:
        return self._scores.get(server_id)

    @property
    def scores(self) -> dict[str, float]:
        return dict(self._scores)

    @property
    def snapshots(self) -> list[StatusSnapshot]:
        return list(self._snapshots)

    @property
    def status_changes(self) -> list[StatusChange]:
        return list(self._status_changes)

    async def list_endpoints(self) -> list[Endpoint]:
        return list(self._endpoints.values())

    async def get_status_record(self, server_id: str) -> ServerStatusRecord | None:
        return self._records.get(server_id)

    async def save_status_record(self, record: ServerStatusRecord) -> None:
        self._records[record.server_id] = record

    async def list_signal_bundles(self) -> list[SignalBundle]:
        bundles: list[SignalBundle] = []

        for server_id, signals in self._signals.items():
            record = self._records.get(server_id)
            current_players: int | None = None

            if record and record.is_online and record.current_data:
                current_players = record.current_data.players

            bundles.append(
                replace(signals, current_players=current_players)
            )

        return bundles

    async def save_score(self, server_id: str, score: float) -> None:
        self._scores[server_id] = score

    async def save_scores(self, scores: Iterable[tuple[str, float]]) -> None:
        updated = dict(self._scores)
        updated.update(scores)
        self._scores = updated

    async def record_snapshot(self, snapshot: StatusSnapshot) -> None:
        self._snapshots.append(snapshot)

    async def record_status_change(self, change: StatusChange) -> None:
        self._status_changes.append(change)

    async def prune_snapshots(self, older_than: datetime.datetime) -> int:
        kept = [
            snapshot
            for snapshot in self._snapshots
            if snapshot.checked_at >= older_than
        ]

        removed = len(self._snapshots) - len(kept)
        self._snapshots = kept

        return removed
