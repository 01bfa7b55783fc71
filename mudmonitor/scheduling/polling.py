"""
Polling Scheduler - probes every registered server and updates liveness.

Each cycle fans out one probe per server through a semaphore sized by
``poll_max_concurrency``. A server already being probed (by an earlier
cycle or a manual poll) is skipped, so no two probes for one server_id
ever run at the same time.

Per-server failures stay per-server: a probe error becomes a failed
StatusProbeResult, and a failed save is logged and counted without
touching the rest of the cycle.
"""

import asyncio
import datetime
import time

from mudmonitor.config import MonitorConfig
from mudmonitor.health.liveness import LivenessTracker
from mudmonitor.health.models import ServerStatusRecord, StatusSnapshot
from mudmonitor.logging import Logger
from mudmonitor.logging.monitor_logging_models import (
    PollerDebug,
    PollerError,
    PollerInfo,
    ProbeDebug,
    ProbeError,
    ProbeTrace,
    ProbeWarning,
)
from mudmonitor.protocol.client import StatusProtocolClient
from mudmonitor.protocol.models import ProbeErrorKind, StatusProbeResult
from mudmonitor.repository.base import StatusRepository
from mudmonitor.repository.models import Endpoint

from .models import PollCycleSummary
from .periodic import PeriodicTask


class PollingScheduler:

    def __init__(
        self,
        repository: StatusRepository,
        client: StatusProtocolClient,
        tracker: LivenessTracker,
        config: MonitorConfig,
        logger: Logger | None = None,
    ):
        self._repository = repository
        self._client = client
        self._tracker = tracker
        self._config = config
        self._logger = logger or Logger()

        self._semaphore = asyncio.Semaphore(config.poll_max_concurrency)
        self._in_flight: set[str] = set()

        self._task = PeriodicTask(
            name="status-poll",
            interval=config.poll_interval_seconds,
            work=self.poll_cycle,
            initial_delay=config.poll_initial_delay_seconds,
            logger=self._logger,
        )

    @property
    def task(self) -> PeriodicTask:
        return self._task

    @property
    def in_flight(self) -> frozenset[str]:
        return frozenset(self._in_flight)

    async def start(self) -> None:
        await self._task.start()

    async def stop(self) -> None:
        await self._task.stop()

    async def poll_cycle(self) -> PollCycleSummary:
        started = time.monotonic()

        endpoints = self._unique(await self._repository.list_endpoints())
        summary = PollCycleSummary(endpoint_count=len(endpoints))

        await self._logger.log(
            PollerDebug(
                message=f"Polling {len(endpoints)} servers",
                endpoint_count=len(endpoints),
            )
        )

        results = await asyncio.gather(
            *[self._poll_endpoint(endpoint, summary) for endpoint in endpoints],
            return_exceptions=True,
        )

        for endpoint, result in zip(endpoints, results):
            if isinstance(result, BaseException):
                await self._logger.log(
                    ProbeError(
                        message=f"Polling {endpoint.server_id} failed: {type(result).__name__}: {result}",
                        server_id=endpoint.server_id,
                        host=endpoint.host,
                        port=endpoint.port,
                    )
                )

        summary.pruned_snapshots = await self._prune_history(summary)
        summary.duration_seconds = time.monotonic() - started

        await self._logger.log(
            PollerInfo(
                message=(
                    f"Poll cycle finished: {summary.succeeded} succeeded, "
                    f"{summary.failed} failed, {summary.skipped} skipped, "
                    f"{summary.online} online in {summary.duration_seconds:.2f}s"
                ),
                endpoint_count=summary.endpoint_count,
            )
        )

        return summary

    def _unique(self, endpoints: list[Endpoint]) -> list[Endpoint]:
        unique: dict[str, Endpoint] = {}
        for endpoint in endpoints:
            unique.setdefault(endpoint.server_id, endpoint)

        return list(unique.values())

    async def _poll_endpoint(
        self,
        endpoint: Endpoint,
        summary: PollCycleSummary,
    ) -> None:
        server_id = endpoint.server_id

        if server_id in self._in_flight:
            summary.skipped += 1
            await self._logger.log(
                ProbeDebug(
                    message=f"Probe for {server_id} still in flight, skipping",
                    server_id=server_id,
                    host=endpoint.host,
                    port=endpoint.port,
                )
            )
            return

        self._in_flight.add(server_id)

        try:
            async with self._semaphore:
                result = await self._probe(endpoint)

            summary.probed += 1
            await self._log_probe(endpoint, result, summary)

            now = datetime.datetime.now(datetime.UTC)

            try:
                previous = await self._repository.get_status_record(server_id)
                if previous is None:
                    previous = ServerStatusRecord.initial(server_id)

                record = self._tracker.transition(previous, result, now)
                await self._repository.save_status_record(record)

            except Exception as err:
                summary.save_failures += 1
                await self._logger.log(
                    ProbeError(
                        message=f"Saving status of {server_id} failed: {type(err).__name__}: {err}",
                        server_id=server_id,
                        host=endpoint.host,
                        port=endpoint.port,
                    )
                )
                return

            if record.is_online:
                summary.online += 1

            await self._record_history(endpoint, previous, record, summary)

        finally:
            self._in_flight.discard(server_id)

    async def _probe(self, endpoint: Endpoint) -> StatusProbeResult:
        timeout = self._config.poll_timeout_seconds
        started = time.monotonic()

        try:
            if self._config.poll_precheck_reachable:
                reachable = await self._client.check_reachable(
                    endpoint.host,
                    endpoint.port,
                    timeout,
                )

                if not reachable:
                    return StatusProbeResult.failure(
                        ProbeErrorKind.CONNECT_FAILURE,
                        time.monotonic() - started,
                        message=f"{endpoint.host}:{endpoint.port} is not reachable",
                    )

            return await self._client.probe(
                endpoint.host,
                endpoint.port,
                timeout,
            )

        except asyncio.CancelledError:
            raise

        except Exception as err:
            return StatusProbeResult.failure(
                ProbeErrorKind.CONNECT_FAILURE,
                time.monotonic() - started,
                message=f"Probe raised {type(err).__name__}: {err}",
            )

    async def _log_probe(
        self,
        endpoint: Endpoint,
        result: StatusProbeResult,
        summary: PollCycleSummary,
    ) -> None:
        if result.succeeded:
            summary.succeeded += 1
            await self._logger.log(
                ProbeTrace(
                    message=f"Probe of {endpoint.server_id} succeeded in {result.raw_latency:.3f}s",
                    server_id=endpoint.server_id,
                    host=endpoint.host,
                    port=endpoint.port,
                )
            )

        else:
            summary.record_failure(result.error_kind)
            await self._logger.log(
                ProbeWarning(
                    message=f"Probe of {endpoint.server_id} failed ({result.error_kind.value}): {result.message}",
                    server_id=endpoint.server_id,
                    host=endpoint.host,
                    port=endpoint.port,
                )
            )

        if result.field_errors:
            await self._logger.log(
                ProbeDebug(
                    message=f"Ignored unparseable MSSP fields: {', '.join(result.field_errors)}",
                    server_id=endpoint.server_id,
                    host=endpoint.host,
                    port=endpoint.port,
                )
            )

    async def _record_history(
        self,
        endpoint: Endpoint,
        previous: ServerStatusRecord,
        record: ServerStatusRecord,
        summary: PollCycleSummary,
    ) -> None:
        try:
            await self._repository.record_snapshot(StatusSnapshot.from_record(record))

        except Exception as err:
            summary.history_failures += 1
            await self._logger.log(
                ProbeWarning(
                    message=f"Recording snapshot of {endpoint.server_id} failed: {err}",
                    server_id=endpoint.server_id,
                    host=endpoint.host,
                    port=endpoint.port,
                )
            )

        change = self._tracker.status_change(previous, record)
        if change is None:
            return

        summary.status_changes += 1
        await self._logger.log(
            ProbeDebug(
                message=f"Server {endpoint.server_id} is now {'online' if change.became_online else 'offline'}",
                server_id=endpoint.server_id,
                host=endpoint.host,
                port=endpoint.port,
            )
        )

        try:
            await self._repository.record_status_change(change)

        except Exception as err:
            summary.history_failures += 1
            await self._logger.log(
                ProbeWarning(
                    message=f"Recording status change of {endpoint.server_id} failed: {err}",
                    server_id=endpoint.server_id,
                    host=endpoint.host,
                    port=endpoint.port,
                )
            )

    async def _prune_history(self, summary: PollCycleSummary) -> int:
        cutoff = datetime.datetime.now(datetime.UTC) - datetime.timedelta(
            days=self._config.status_history_retention_days,
        )

        try:
            return await self._repository.prune_snapshots(cutoff)

        except Exception as err:
            await self._logger.log(
                PollerError(
                    message=f"Pruning status history failed: {err}",
                    endpoint_count=summary.endpoint_count,
                )
            )
            return 0
