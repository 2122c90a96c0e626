"""lexicard: event-sourced SM-2 scheduling for vocabulary flashcards."""

from lexicard.application.index import (
    build_index,
    get_due_cards,
    get_new_cards,
    project_cards,
    replay,
)
from lexicard.application.srs import (
    SchedulerOptions,
    SchedulerStats,
    select_next,
    stats,
    transition,
)

VERSION = "0.3.0"

__all__ = [
    "SchedulerOptions",
    "SchedulerStats",
    "VERSION",
    "build_index",
    "get_due_cards",
    "get_new_cards",
    "project_cards",
    "replay",
    "select_next",
    "stats",
    "transition",
]
