from dataclasses import dataclass, field

from mudmonitor.protocol.models import ProbeErrorKind


@dataclass(slots=True)
class PollCycleSummary:
    """Counters for one polling cycle."""

    endpoint_count: int = 0
    probed: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    online: int = 0
    save_failures: int = 0
    history_failures: int = 0
    status_changes: int = 0
    pruned_snapshots: int = 0
    duration_seconds: float = 0.0
    failures_by_kind: dict[ProbeErrorKind, int] = field(default_factory=dict)

    def record_failure(self, error_kind: ProbeErrorKind) -> None:
        self.failed += 1
        self.failures_by_kind[error_kind] = self.failures_by_kind.get(error_kind, 0) + 1


@dataclass(slots=True)
class TrendingCycleSummary:
    """Counters for one trending recompute."""

    server_count: int = 0
    scored: int = 0
    skipped: int = 0
    duration_seconds: float = 0.0
    top: list[tuple[str, float]] = field(default_factory=list)
