from __future__ import annotations

import datetime
import math
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class SignalBundle:
    """Aggregate counters for one server, read by the trending scorer."""

    server_id: str
    rating_average: float
    rating_count: int
    favorite_count: int
    review_count: int
    current_players: int | None
    created_at: datetime.datetime


@dataclass(slots=True, frozen=True)
class TrendingWeights:
    favorite: float = 5.0
    review: float = 10.0
    player: float = 0.5
    recency: float = 20.0

    def validate(self) -> None:
        for name in ("favorite", "review", "player", "recency"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"Trending weight {name} must be a finite non-negative number, got {value}")


@dataclass(slots=True, frozen=True)
class ScoreBreakdown:
    rating: float
    engagement: float
    recency: float

    @property
    def total(self) -> float:
        return self.rating + self.engagement + self.recency
