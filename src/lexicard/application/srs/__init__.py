# Application SRS Package
from .scheduler import (
    SchedulerOptions,
    SchedulerStats,
    calculate_priority,
    calculate_retention,
    select_next,
    stats,
)
from .sm2 import initial_state, quality_of, transition

__all__ = [
    "SchedulerOptions",
    "SchedulerStats",
    "calculate_priority",
    "calculate_retention",
    "initial_state",
    "quality_of",
    "select_next",
    "stats",
    "transition",
]
