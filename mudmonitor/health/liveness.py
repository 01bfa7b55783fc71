"""
Liveness Tracker - hysteresis over consecutive probe failures.

A single successful probe marks a server online and clears its failure
count. Failures only mark it offline once ``failure_threshold`` of them
have happened in a row, so a single dropped connection does not flap the
server's public status.

State Transitions:
- success:             is_online=True, consecutive_failures=0,
                       current_data replaced by the probe's data
- failure (n -> n+1):  is_online=(n + 1 < failure_threshold),
                       current_data kept as last known
"""

import datetime
from dataclasses import replace

from mudmonitor.protocol.models import StatusProbeResult

from .models import ServerStatusRecord, StatusChange


DEFAULT_FAILURE_THRESHOLD = 3


class LivenessTracker:
    """
    Pure state machine mapping (record, probe result) to the next record.

    Example usage:
        tracker = LivenessTracker(failure_threshold=3)
        record = ServerStatusRecord.initial("server-1")
        record = tracker.transition(record, result, now)
    """

    def __init__(self, failure_threshold: int = DEFAULT_FAILURE_THRESHOLD):
        if failure_threshold < 1:
            raise ValueError(
                f"failure_threshold must be at least 1, got {failure_threshold}"
            )

        self._failure_threshold = failure_threshold

    @property
    def failure_threshold(self) -> int:
        return self._failure_threshold

    def transition(
        self,
        current: ServerStatusRecord,
        probe: StatusProbeResult,
        now: datetime.datetime,
    ) -> ServerStatusRecord:
        if probe.succeeded:
            return replace(
                current,
                is_online=True,
                consecutive_failures=0,
                last_checked_at=now,
                current_data=probe.data,
            )

        consecutive_failures = current.consecutive_failures + 1

        return replace(
            current,
            is_online=consecutive_failures < self._failure_threshold,
            consecutive_failures=consecutive_failures,
            last_checked_at=now,
        )

    def status_change(
        self,
        previous: ServerStatusRecord,
        current: ServerStatusRecord,
    ) -> StatusChange | None:
        """
        The flip between two records, or None. A never-checked server whose
        first probe failed reads as online under the threshold, but that is
        not reported as coming online.
        """
        if previous.is_online == current.is_online:
            return None

        if previous.last_checked_at is None and current.consecutive_failures > 0:
            return None

        return StatusChange(
            server_id=current.server_id,
            became_online=current.is_online,
            changed_at=current.last_checked_at or datetime.datetime.now(datetime.UTC),
        )
