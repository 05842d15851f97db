"""Helper utilities for specrunner tests and reporting.

Exports:
    time_passes: Sleep for a number of seconds.
    time_limit: Create a cancellable deadline.
    TimeLimit: The deadline type returned by time_limit.
    cloneable_result: Project a result into transportable data.
"""

from specrunner.helpers.results import cloneable_result
from specrunner.helpers.timing import TimeLimit, time_limit, time_passes

__all__ = ["cloneable_result", "time_limit", "time_passes", "TimeLimit"]
