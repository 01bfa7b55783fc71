"""
Trending Scorer - composite ranking score for a server listing.

    score = rating_average * ln(1 + rating_count)
          + w_favorite * favorite_count
          + w_review * review_count
          + w_player * current_players
          + w_recency * exp(-age_days / half_life_days)

age_days is measured from the listing's created_at to the scoring time.
The recency term equals w_recency for a brand new listing and tends to
zero as the listing ages.
"""

import datetime
import math

from .models import ScoreBreakdown, SignalBundle, TrendingWeights


DEFAULT_HALF_LIFE_DAYS = 30.0
SECONDS_PER_DAY = 86400.0


def _clamp(value: float) -> float:
    if not math.isfinite(value) or value < 0:
        return 0.0

    return value


def _as_utc(value: datetime.datetime) -> datetime.datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.UTC)

    return value


class TrendingScorer:
    """
    Deterministic, side-effect free scorer.

    Counters below zero or not finite and a created_at later than ``now``
    are clamped to zero, so scores are never negative and the recency term
    never exceeds the recency weight. Naive datetimes are read as UTC.
    """

    def __init__(
        self,
        weights: TrendingWeights | None = None,
        half_life_days: float = DEFAULT_HALF_LIFE_DAYS,
    ):
        if weights is None:
            weights = TrendingWeights()

        weights.validate()

        if not half_life_days > 0:
            raise ValueError(f"half_life_days must be positive, got {half_life_days}")

        self._weights = weights
        self._half_life_days = half_life_days

    @property
    def weights(self) -> TrendingWeights:
        return self._weights

    @property
    def half_life_days(self) -> float:
        return self._half_life_days

    def score(
        self,
        signals: SignalBundle,
        now: datetime.datetime,
    ) -> float:
        return self.breakdown(signals, now).total

    def breakdown(
        self,
        signals: SignalBundle,
        now: datetime.datetime,
    ) -> ScoreBreakdown:
        rating_average = _clamp(signals.rating_average)
        rating_count = _clamp(signals.rating_count)
        favorite_count = _clamp(signals.favorite_count)
        review_count = _clamp(signals.review_count)
        current_players = _clamp(signals.current_players or 0)

        rating = rating_average * math.log1p(rating_count)

        engagement = (
            self._weights.favorite * favorite_count
            + self._weights.review * review_count
            + self._weights.player * current_players
        )

        return ScoreBreakdown(
            rating=rating,
            engagement=engagement,
            recency=self.recency(signals.created_at, now),
        )

    def recency(
        self,
        created_at: datetime.datetime,
        now: datetime.datetime,
    ) -> float:
        age_days = max((_as_utc(now) - _as_utc(created_at)).total_seconds() / SECONDS_PER_DAY, 0.0)
        return self._weights.recency * math.exp(-age_days / self._half_life_days)
