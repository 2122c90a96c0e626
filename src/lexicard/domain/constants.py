"""Centralized constants for the lexicard engine.

All magic numbers and scheduling defaults live here so every layer
imports from a single source of truth. Time values are epoch milliseconds.
"""

# ---------- Time ----------
MINUTE_MS = 60_000
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS

# ---------- SM-2 ----------
INITIAL_EASE = 2.5
MIN_EASE = 1.3
MAX_EASE = 3.0
MAX_INTERVAL_DAYS = 365
MIN_REVIEW_INTERVAL_MS = HOUR_MS  # reviews closer than this are consolidation reviews

# ---------- Scheduler ----------
MATURE_INTERVAL_DAYS = 21
MAX_RECENT_CARDS = 5
DEFAULT_NEW_CARDS_PER_DAY = 20
LEARNING_FRESH_MINUTES = 30
OPTIMAL_RETENTION = 0.9

# ---------- Dashboard ----------
REVIEWS_PER_DAY_WINDOW = 90
RETENTION_HISTORY_DAYS = 30
RETENTION_ROLLING_DAYS = 7

# ---------- Knowledge Graph ----------
DEFAULT_MAX_GRAPH_NODES = 100
