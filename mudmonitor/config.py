"""
Monitor configuration.

Maps the validated Env model onto the settings used by the probe client,
the liveness tracker, the trending scorer and both periodic loops. All
time values are in seconds unless noted.
"""

from dataclasses import dataclass, field

from mudmonitor.env import Env
from mudmonitor.errors import MonitorConfigError
from mudmonitor.protocol.constants import DEFAULT_MAX_RESPONSE_BYTES
from mudmonitor.protocol.models import ProbeMode
from mudmonitor.trending.models import TrendingWeights


@dataclass(slots=True)
class MonitorConfig:
    """
    Configuration for StatusMonitor.

    Call ``validate()`` (done by ``create_monitor_config_from_env`` and by
    StatusMonitor) before handing the config to the schedulers.
    """

    # Polling
    poll_interval_seconds: float = 300.0
    poll_timeout_seconds: float = 10.0
    poll_max_concurrency: int = 20
    poll_initial_delay_seconds: float = 30.0
    poll_precheck_reachable: bool = False
    probe_mode: ProbeMode = ProbeMode.TELNET
    max_response_bytes: int = DEFAULT_MAX_RESPONSE_BYTES

    # Liveness
    failure_threshold: int = 3
    status_history_retention_days: float = 7.0

    # Trending
    trending_enabled: bool = True
    trending_interval_seconds: float = 3600.0
    trending_initial_delay_seconds: float = 60.0
    trending_weights: TrendingWeights = field(default_factory=TrendingWeights)
    trending_half_life_days: float = 30.0

    # Logging
    log_level: str = "info"
    log_output: str = "stderr"
    logs_directory: str | None = None

    def validate(self) -> "MonitorConfig":
        positive = {
            "poll_interval_seconds": self.poll_interval_seconds,
            "poll_timeout_seconds": self.poll_timeout_seconds,
            "trending_interval_seconds": self.trending_interval_seconds,
            "trending_half_life_days": self.trending_half_life_days,
            "status_history_retention_days": self.status_history_retention_days,
        }

        for name, value in positive.items():
            if not value > 0:
                raise MonitorConfigError(f"{name} must be positive, got {value}")

        if self.poll_initial_delay_seconds < 0:
            raise MonitorConfigError(
                f"poll_initial_delay_seconds must not be negative, got {self.poll_initial_delay_seconds}"
            )

        if self.trending_initial_delay_seconds < 0:
            raise MonitorConfigError(
                f"trending_initial_delay_seconds must not be negative, got {self.trending_initial_delay_seconds}"
            )

        if self.poll_max_concurrency < 1:
            raise MonitorConfigError(
                f"poll_max_concurrency must be at least 1, got {self.poll_max_concurrency}"
            )

        if self.failure_threshold < 1:
            raise MonitorConfigError(
                f"failure_threshold must be at least 1, got {self.failure_threshold}"
            )

        if self.max_response_bytes < 1:
            raise MonitorConfigError(
                f"max_response_bytes must be at least 1, got {self.max_response_bytes}"
            )

        try:
            self.probe_mode = ProbeMode(self.probe_mode)
            self.trending_weights.validate()

        except ValueError as err:
            raise MonitorConfigError(str(err)) from err

        return self


def create_monitor_config_from_env(env: Env | None = None) -> MonitorConfig:
    """
    Create monitor configuration from environment variables.

    Args:
        env: Environment configuration instance. A default Env is used
            when omitted.

    Returns:
        Validated MonitorConfig populated from the environment

    Raises:
        MonitorConfigError: if any value is out of range
    """
    if env is None:
        env = Env()

    return MonitorConfig(
        poll_interval_seconds=env.MONITOR_POLL_INTERVAL,
        poll_timeout_seconds=env.MONITOR_POLL_TIMEOUT,
        poll_max_concurrency=env.MONITOR_POLL_MAX_CONCURRENCY,
        poll_initial_delay_seconds=env.MONITOR_POLL_INITIAL_DELAY,
        poll_precheck_reachable=env.MONITOR_POLL_PRECHECK_REACHABLE,
        probe_mode=ProbeMode(env.MONITOR_POLL_PROTOCOL),
        max_response_bytes=env.MONITOR_POLL_MAX_RESPONSE_BYTES,
        failure_threshold=env.MONITOR_FAILURE_THRESHOLD,
        status_history_retention_days=env.MONITOR_STATUS_HISTORY_RETENTION_DAYS,
        trending_enabled=env.MONITOR_TRENDING_ENABLED,
        trending_interval_seconds=env.MONITOR_TRENDING_INTERVAL,
        trending_initial_delay_seconds=env.MONITOR_TRENDING_INITIAL_DELAY,
        trending_weights=TrendingWeights(**env.get_trending_weights()),
        trending_half_life_days=env.MONITOR_TRENDING_HALF_LIFE_DAYS,
        log_level=env.MONITOR_LOG_LEVEL,
        log_output=env.MONITOR_LOG_OUTPUT,
        logs_directory=env.MONITOR_LOGS_DIRECTORY,
    ).validate()
