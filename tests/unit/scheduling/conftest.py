import asyncio
from collections import defaultdict

import pytest

from mudmonitor.config import MonitorConfig
from mudmonitor.logging import Logger
from mudmonitor.protocol.models import (
    ProbeErrorKind,
    StatusData,
    StatusProbeResult,
)
from mudmonitor.repository.memory import InMemoryStatusRepository


class FakeStatusClient:
    """
    Stands in for StatusProtocolClient. Results are scripted per host and
    every probe is instrumented with per-host and total in-flight counters.
    """

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.outcomes: dict[str, list[StatusProbeResult | Exception]] = defaultdict(list)
        self.unreachable: set[str] = set()

        self.calls: list[str] = []
        self.reachability_checks: list[str] = []
        self.in_flight: dict[str, int] = defaultdict(int)
        self.max_in_flight: dict[str, int] = defaultdict(int)
        self.total_in_flight = 0
        self.max_total_in_flight = 0
        self.release = asyncio.Event()
        self.release.set()

    def script(self, host: str, *outcomes: StatusProbeResult | Exception) -> None:
        self.outcomes[host].extend(outcomes)

    async def probe(self, host: str, port: int, timeout: float) -> StatusProbeResult:
        self.calls.append(host)
        self.in_flight[host] += 1
        self.total_in_flight += 1
        self.max_in_flight[host] = max(self.max_in_flight[host], self.in_flight[host])
        self.max_total_in_flight = max(self.max_total_in_flight, self.total_in_flight)

        try:
            if self.delay:
                await asyncio.sleep(self.delay)

            await self.release.wait()

            outcome = (
                self.outcomes[host].pop(0)
                if self.outcomes[host]
                else online(players=1)
            )

            if isinstance(outcome, Exception):
                raise outcome

            return outcome

        finally:
            self.in_flight[host] -= 1
            self.total_in_flight -= 1

    async def check_reachable(self, host: str, port: int, timeout: float) -> bool:
        self.reachability_checks.append(host)
        return host not in self.unreachable


def online(players: int = 1, name: str = "Realm") -> StatusProbeResult:
    return StatusProbeResult.success(StatusData(game_name=name, players=players), 0.01)


def offline(kind: ProbeErrorKind = ProbeErrorKind.CONNECT_FAILURE) -> StatusProbeResult:
    return StatusProbeResult.failure(kind, 0.01, message="refused")


@pytest.fixture
def fake_client() -> FakeStatusClient:
    return FakeStatusClient()


@pytest.fixture
def online_result():
    return online


@pytest.fixture
def offline_result():
    return offline


@pytest.fixture
def repository() -> InMemoryStatusRepository:
    return InMemoryStatusRepository()


@pytest.fixture
def monitor_config() -> MonitorConfig:
    return MonitorConfig(
        poll_interval_seconds=0.05,
        poll_timeout_seconds=1.0,
        poll_max_concurrency=4,
        poll_initial_delay_seconds=0.0,
        trending_interval_seconds=0.05,
        trending_initial_delay_seconds=0.0,
    ).validate()


@pytest.fixture
def logger() -> Logger:
    return Logger()
