"""
Trending Scheduler - periodic total recompute of trending scores.

Every cycle reads all signal bundles and scores them at one shared
``now``. All scores are written back through one ``save_scores`` call.
A bundle that fails to score is logged and left out of the save.
"""

import datetime
import time

from mudmonitor.config import MonitorConfig
from mudmonitor.logging import Logger
from mudmonitor.logging.monitor_logging_models import (
    SchedulerInfo,
    TrendingDebug,
    TrendingError,
    TrendingInfo,
)
from mudmonitor.repository.base import StatusRepository
from mudmonitor.trending.ranking import rank_trending
from mudmonitor.trending.scorer import TrendingScorer

from .models import TrendingCycleSummary
from .periodic import PeriodicTask


TOP_SCORERS_LOGGED = 5


class TrendingScheduler:
    """
    Recomputes every server's trending score on a fixed interval.

    Each recompute is total: all signal bundles are read, scored, and
    written back with a single bulk save. If reading or saving fails the
    cycle fails as a whole and the previously stored scores stay in place.
    """

    def __init__(
        self,
        repository: StatusRepository,
        scorer: TrendingScorer,
        config: MonitorConfig,
        logger: Logger | None = None,
    ):
        self._repository = repository
        self._scorer = scorer
        self._config = config
        self._logger = logger or Logger()

        self._task = PeriodicTask(
            name="trending-recompute",
            interval=config.trending_interval_seconds,
            work=self.recompute_cycle,
            initial_delay=config.trending_initial_delay_seconds,
            logger=self._logger,
        )

    @property
    def task(self) -> PeriodicTask:
        return self._task

    async def start(self) -> None:
        if not self._config.trending_enabled:
            await self._logger.log(
                SchedulerInfo(
                    message="Trending recompute is disabled",
                    task_name=self._task.name,
                    interval=self._task.interval,
                )
            )
            return

        await self._task.start()

    async def stop(self) -> None:
        await self._task.stop()

    async def recompute_cycle(self) -> TrendingCycleSummary:
        started = time.monotonic()

        bundles = await self._repository.list_signal_bundles()
        summary = TrendingCycleSummary(server_count=len(bundles))
        now = datetime.datetime.now(datetime.UTC)

        scores: list[tuple[str, float]] = []
        ranking: list[tuple[str, float, int]] = []

        for bundle in bundles:
            try:
                score = self._scorer.score(bundle, now)

            except Exception as err:
                summary.skipped += 1
                await self._logger.log(
                    TrendingError(
                        message=f"Scoring {bundle.server_id} failed: {type(err).__name__}: {err}",
                        server_count=summary.server_count,
                    )
                )
                continue

            scores.append((bundle.server_id, score))
            ranking.append((bundle.server_id, score, bundle.rating_count))

        try:
            await self._repository.save_scores(scores)

        except Exception as err:
            await self._logger.log(
                TrendingError(
                    message=f"Saving {len(scores)} trending scores failed: {type(err).__name__}: {err}",
                    server_count=summary.server_count,
                )
            )
            raise

        summary.scored = len(scores)
        summary.top = [
            (server_id, score)
            for server_id, score, _ in rank_trending(ranking)[:TOP_SCORERS_LOGGED]
        ]
        summary.duration_seconds = time.monotonic() - started

        for position, (server_id, score) in enumerate(summary.top, start=1):
            await self._logger.log(
                TrendingDebug(
                    message=f"#{position} {server_id} score={score:.2f}",
                    server_count=summary.server_count,
                )
            )

        await self._logger.log(
            TrendingInfo(
                message=(
                    f"Trending recompute finished: {summary.scored} scored, "
                    f"{summary.skipped} skipped in {summary.duration_seconds:.2f}s"
                ),
                server_count=summary.server_count,
            )
        )

        return summary
