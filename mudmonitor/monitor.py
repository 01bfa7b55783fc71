import asyncio

from mudmonitor.config import MonitorConfig, create_monitor_config_from_env
from mudmonitor.env import Env, load_env
from mudmonitor.health.liveness import LivenessTracker
from mudmonitor.logging import Logger, LoggingConfig
from mudmonitor.protocol.client import StatusProtocolClient
from mudmonitor.repository.base import StatusRepository
from mudmonitor.scheduling.models import PollCycleSummary, TrendingCycleSummary
from mudmonitor.scheduling.polling import PollingScheduler
from mudmonitor.scheduling.trending import TrendingScheduler
from mudmonitor.trending.scorer import TrendingScorer


class StatusMonitor:
    """
    Wires the probe client, liveness tracker, trending scorer and both
    periodic loops onto a host supplied repository.

    Example usage:
        repository = InMemoryStatusRepository()
        repository.register(Endpoint("server-1", "mud.example.org", 4000))

        async with StatusMonitor(repository) as monitor:
            await monitor.poll_now()
    """

    def __init__(
        self,
        repository: StatusRepository,
        config: MonitorConfig | None = None,
        env: Env | None = None,
        client: StatusProtocolClient | None = None,
        logger: Logger | None = None,
    ):
        if config is None:
            config = create_monitor_config_from_env(
                env if env is not None else load_env(Env)
            )

        self.config = config.validate()

        LoggingConfig().update(
            log_directory=config.logs_directory,
            log_level=config.log_level,
            log_output=config.log_output,
        )

        self._logger = logger or Logger()
        self._repository = repository

        self.client = client or StatusProtocolClient(
            mode=config.probe_mode,
            max_response_bytes=config.max_response_bytes,
        )
        self.tracker = LivenessTracker(config.failure_threshold)
        self.scorer = TrendingScorer(
            weights=config.trending_weights,
            half_life_days=config.trending_half_life_days,
        )

        self.poller = PollingScheduler(
            repository,
            self.client,
            self.tracker,
            config,
            logger=self._logger,
        )
        self.trending = TrendingScheduler(
            repository,
            self.scorer,
            config,
            logger=self._logger,
        )

    @property
    def running(self) -> bool:
        return self.poller.task.running or self.trending.task.running

    async def start(self) -> None:
        await self.poller.start()
        await self.trending.start()

    async def stop(self) -> None:
        await asyncio.gather(
            self.poller.stop(),
            self.trending.stop(),
        )
        await self._logger.close()

    async def poll_now(self) -> PollCycleSummary | None:
        return await self.poller.task.run_once()

    async def recompute_now(self) -> TrendingCycleSummary | None:
        return await self.trending.task.run_once()

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()
