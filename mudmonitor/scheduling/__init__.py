from .models import (
    PollCycleSummary as PollCycleSummary,
    TrendingCycleSummary as TrendingCycleSummary,
)
from .periodic import PeriodicTask as PeriodicTask
from .polling import PollingScheduler as PollingScheduler
from .trending import TrendingScheduler as TrendingScheduler
