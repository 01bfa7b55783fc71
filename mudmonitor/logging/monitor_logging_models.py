from .models import Entry, LogLevel


class ProbeTrace(Entry, kw_only=True):
    server_id: str
    host: str
    port: int
    level: LogLevel = LogLevel.TRACE


class ProbeDebug(Entry, kw_only=True):
    server_id: str
    host: str
    port: int
    level: LogLevel = LogLevel.DEBUG


class ProbeWarning(Entry, kw_only=True):
    server_id: str
    host: str
    port: int
    level: LogLevel = LogLevel.WARN


class ProbeError(Entry, kw_only=True):
    server_id: str
    host: str
    port: int
    level: LogLevel = LogLevel.ERROR


class PollerDebug(Entry, kw_only=True):
    endpoint_count: int
    level: LogLevel = LogLevel.DEBUG


class PollerInfo(Entry, kw_only=True):
    endpoint_count: int
    level: LogLevel = LogLevel.INFO


class PollerError(Entry, kw_only=True):
    endpoint_count: int
    level: LogLevel = LogLevel.ERROR


class TrendingDebug(Entry, kw_only=True):
    server_count: int
    level: LogLevel = LogLevel.DEBUG


class TrendingInfo(Entry, kw_only=True):
    server_count: int
    level: LogLevel = LogLevel.INFO


class TrendingError(Entry, kw_only=True):
    server_count: int
    level: LogLevel = LogLevel.ERROR


class SchedulerInfo(Entry, kw_only=True):
    task_name: str
    interval: float
    level: LogLevel = LogLevel.INFO


class SchedulerWarning(Entry, kw_only=True):
    task_name: str
    interval: float
    level: LogLevel = LogLevel.WARN


class SchedulerError(Entry, kw_only=True):
    task_name: str
    interval: float
    level: LogLevel = LogLevel.ERROR
