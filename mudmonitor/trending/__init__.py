from .models import (
    ScoreBreakdown as ScoreBreakdown,
    SignalBundle as SignalBundle,
    TrendingWeights as TrendingWeights,
)
from .ranking import (
    rank_trending as rank_trending,
    trending_sort_key as trending_sort_key,
)
from .scorer import TrendingScorer as TrendingScorer
