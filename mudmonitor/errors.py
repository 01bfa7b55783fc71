"""
Exceptions raised by the monitor outside of the polling and scoring loops.

Probe, persistence and cycle failures are never raised to the host; they
are folded into results and logged. Only invalid configuration surfaces
as an exception, before any loop is started.
"""


class MonitorConfigError(ValueError):
    """
    Raised when environment values or explicit settings cannot produce a
    usable MonitorConfig (non-positive intervals, a failure threshold
    below one, negative trending weights, unparseable env values).
    """
    pass
