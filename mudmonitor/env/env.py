from __future__ import annotations

from typing import Callable, Dict, Literal, Union

from pydantic import BaseModel, StrictBool, StrictFloat, StrictInt, StrictStr

PrimaryType = Union[str, int, float, bytes, bool]


def to_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Env(BaseModel):
    # Polling
    MONITOR_POLL_INTERVAL: StrictFloat = 300.0
    MONITOR_POLL_TIMEOUT: StrictFloat = 10.0
    MONITOR_POLL_MAX_CONCURRENCY: StrictInt = 20
    MONITOR_POLL_INITIAL_DELAY: StrictFloat = 30.0
    MONITOR_POLL_PRECHECK_REACHABLE: StrictBool = False
    MONITOR_POLL_PROTOCOL: Literal["telnet", "plaintext"] = "telnet"
    MONITOR_POLL_MAX_RESPONSE_BYTES: StrictInt = 65536
    MONITOR_FAILURE_THRESHOLD: StrictInt = 3
    MONITOR_STATUS_HISTORY_RETENTION_DAYS: StrictFloat = 7.0

    # Trending
    MONITOR_TRENDING_ENABLED: StrictBool = True
    MONITOR_TRENDING_INTERVAL: StrictFloat = 3600.0
    MONITOR_TRENDING_INITIAL_DELAY: StrictFloat = 60.0
    MONITOR_TRENDING_FAVORITE_WEIGHT: StrictFloat = 5.0
    MONITOR_TRENDING_REVIEW_WEIGHT: StrictFloat = 10.0
    MONITOR_TRENDING_PLAYER_WEIGHT: StrictFloat = 0.5
    MONITOR_TRENDING_RECENCY_WEIGHT: StrictFloat = 20.0
    MONITOR_TRENDING_HALF_LIFE_DAYS: StrictFloat = 30.0

    # Logging
    MONITOR_LOG_LEVEL: Literal["trace", "debug", "info", "warn", "error", "critical"] = "info"
    MONITOR_LOG_OUTPUT: Literal["stdout", "stderr"] = "stderr"
    MONITOR_LOGS_DIRECTORY: StrictStr | None = None

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "MONITOR_POLL_INTERVAL": float,
            "MONITOR_POLL_TIMEOUT": float,
            "MONITOR_POLL_MAX_CONCURRENCY": int,
            "MONITOR_POLL_INITIAL_DELAY": float,
            "MONITOR_POLL_PRECHECK_REACHABLE": to_bool,
            "MONITOR_POLL_PROTOCOL": str,
            "MONITOR_POLL_MAX_RESPONSE_BYTES": int,
            "MONITOR_FAILURE_THRESHOLD": int,
            "MONITOR_STATUS_HISTORY_RETENTION_DAYS": float,
            "MONITOR_TRENDING_ENABLED": to_bool,
            "MONITOR_TRENDING_INTERVAL": float,
            "MONITOR_TRENDING_INITIAL_DELAY": float,
            "MONITOR_TRENDING_FAVORITE_WEIGHT": float,
            "MONITOR_TRENDING_REVIEW_WEIGHT": float,
            "MONITOR_TRENDING_PLAYER_WEIGHT": float,
            "MONITOR_TRENDING_RECENCY_WEIGHT": float,
            "MONITOR_TRENDING_HALF_LIFE_DAYS": float,
            "MONITOR_LOG_LEVEL": str.lower,
            "MONITOR_LOG_OUTPUT": str.lower,
            "MONITOR_LOGS_DIRECTORY": str,
        }

    def get_trending_weights(self) -> dict:
        """Trending weights keyed the way TrendingWeights expects them."""
        return {
            'favorite': self.MONITOR_TRENDING_FAVORITE_WEIGHT,
            'review': self.MONITOR_TRENDING_REVIEW_WEIGHT,
            'player': self.MONITOR_TRENDING_PLAYER_WEIGHT,
            'recency': self.MONITOR_TRENDING_RECENCY_WEIGHT,
        }
