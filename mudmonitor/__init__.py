from .errors import MonitorConfigError as MonitorConfigError
from .env import Env as Env, load_env as load_env
from .protocol import (
    ProbeErrorKind as ProbeErrorKind,
    ProbeMode as ProbeMode,
    StatusData as StatusData,
    StatusProbeResult as StatusProbeResult,
    StatusProtocolClient as StatusProtocolClient,
)
from .health import (
    LivenessTracker as LivenessTracker,
    ServerStatusRecord as ServerStatusRecord,
    StatusChange as StatusChange,
    StatusSnapshot as StatusSnapshot,
)
from .trending import (
    ScoreBreakdown as ScoreBreakdown,
    SignalBundle as SignalBundle,
    TrendingScorer as TrendingScorer,
    TrendingWeights as TrendingWeights,
    rank_trending as rank_trending,
    trending_sort_key as trending_sort_key,
)
from .repository import (
    Endpoint as Endpoint,
    InMemoryStatusRepository as InMemoryStatusRepository,
    StatusRepository as StatusRepository,
)
from .config import (
    MonitorConfig as MonitorConfig,
    create_monitor_config_from_env as create_monitor_config_from_env,
)
from .scheduling import (
    PeriodicTask as PeriodicTask,
    PollCycleSummary as PollCycleSummary,
    PollingScheduler as PollingScheduler,
    TrendingCycleSummary as TrendingCycleSummary,
    TrendingScheduler as TrendingScheduler,
)
from .monitor import StatusMonitor as StatusMonitor
