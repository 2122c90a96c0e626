"""
Next-card selection using a forgetting-curve priority score.

Selection order:
1. Due cards, highest priority first
2. New cards (while under the daily quota), oldest first
3. Loop mode: any reviewed card by priority, for continuous practice
4. None if nothing qualifies

Pure module: the index is never modified. Callers record the review as a new
ReviewEvent and rebuild the index.
"""

import math
from dataclasses import dataclass

from lexicard.domain.constants import (
    DAY_MS,
    DEFAULT_NEW_CARDS_PER_DAY,
    INITIAL_EASE,
    LEARNING_FRESH_MINUTES,
    MATURE_INTERVAL_DAYS,
    MINUTE_MS,
    OPTIMAL_RETENTION,
)
from lexicard.domain.models import Card, CardIndex, SchedulingState


@dataclass(frozen=True)
class SchedulerOptions:
    """
    Per-call scheduling inputs supplied by the caller.

    Attributes:
        new_cards_per_day: Daily quota of never-reviewed cards.
        today_new_card_count: New cards already introduced today.
        loop_mode: Keep serving reviewed cards when nothing is due.
        exclude_card_id: Card to skip (usually the one on screen).
        recent_card_ids: Recently shown ids, most recent first.
    """

    new_cards_per_day: int = DEFAULT_NEW_CARDS_PER_DAY
    today_new_card_count: int = 0
    loop_mode: bool = False
    exclude_card_id: str | None = None
    recent_card_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class SchedulerStats:
    """Card counts for UI reporting."""

    total: int
    due: int
    new_cards: int
    learning: int
    mature: int


def calculate_retention(state: SchedulingState, now: int) -> float:
    """
    Estimate recall probability with the Ebbinghaus curve.

    R = e^(-t/S), t = time since the last review,
    S = interval_days * DAY_MS * (ease_factor / 2.5).

    Returns 0 for new cards, otherwise a value in [0, 1].
    """
    if state.reps == 0:
        return 0.0

    strength = state.interval_days * DAY_MS * (state.ease_factor / INITIAL_EASE)
    if strength <= 0:
        return 0.0

    retention = math.exp(-(now - _last_review_time(state)) / strength)
    return max(0.0, min(1.0, retention))


def calculate_priority(
    state: SchedulingState,
    now: int,
    recent_card_ids: tuple[str, ...] | list[str] = (),
) -> float:
    """
    Score how urgently a card should be shown. Higher = sooner.

    Terms: learning freshness, overdue/upcoming, retention deficit,
    lapses, low ease, and a recency penalty.
    """
    priority = 0.0

    # Learning cards stay in rotation within the same session
    if 0 < state.reps <= 2 and state.interval_days <= 1:
        minutes_since = (now - _last_review_time(state)) / MINUTE_MS
        if minutes_since < LEARNING_FRESH_MINUTES:
            priority += 40 + (LEARNING_FRESH_MINUTES - minutes_since)
        else:
            priority += 35

    overdue_ms = now - state.due_at
    if overdue_ms > 0:
        priority += min(100.0, 50 + (overdue_ms / DAY_MS) * 10)
    else:
        priority += max(0.0, 30 - (-overdue_ms / DAY_MS) * 5)

    retention = calculate_retention(state, now)
    if retention < OPTIMAL_RETENTION:
        priority += (OPTIMAL_RETENTION - retention) * 50

    priority += min(20, state.lapses * 4)

    if state.ease_factor < INITIAL_EASE:
        priority += (INITIAL_EASE - state.ease_factor) * 10

    if state.card_id in recent_card_ids:
        position = list(recent_card_ids).index(state.card_id)
        priority -= max(0, 30 - position * 5)

    return priority


def select_next(
    index: CardIndex, now: int, options: SchedulerOptions | None = None
) -> Card | None:
    """
    Pick the single next card to present, or None.

    Args:
        index: Index snapshot from build_index.
        now: Selection time (epoch ms).
        options: Quota, loop mode and anti-repetition inputs.

    Raises:
        KeyError: If a worklist id is missing from the index.
    """
    options = options or SchedulerOptions()
    exclude = options.exclude_card_id

    # 1. Due cards by priority
    due_candidates = [
        card_id
        for card_id in index.due_ids
        if card_id != exclude
        and index.states[card_id].reps > 0
        and index.states[card_id].due_at <= now
    ]
    best = _highest_priority(index, due_candidates, now, options.recent_card_ids)
    if best is not None:
        return best

    # 2. New cards under the daily quota
    if options.today_new_card_count < options.new_cards_per_day:
        for card_id in index.new_ids:
            if card_id == exclude:
                continue
            if index.states[card_id].reps == 0:
                return index.cards[card_id]

    # 3. Loop mode
    if options.loop_mode and index.cards:
        reviewed = [
            card_id
            for card_id in index.cards
            if card_id != exclude and index.states[card_id].reps > 0
        ]
        best = _highest_priority(index, reviewed, now, options.recent_card_ids)
        if best is not None:
            return best

        remaining = [card for card_id, card in index.cards.items() if card_id != exclude]
        for card in remaining:
            if card.id not in options.recent_card_ids:
                return card
        if remaining:
            return remaining[0]

    return None


def stats(index: CardIndex, now: int) -> SchedulerStats:
    """Count total, due, new, learning and mature cards."""
    total = due = new_cards = learning = mature = 0

    for card_id in index.cards:
        total += 1
        state = index.states.get(card_id)

        if state is None or state.reps == 0:
            new_cards += 1
            continue

        if state.interval_days >= MATURE_INTERVAL_DAYS:
            mature += 1
        else:
            learning += 1

        if state.due_at <= now:
            due += 1

    return SchedulerStats(
        total=total, due=due, new_cards=new_cards, learning=learning, mature=mature
    )


def _highest_priority(
    index: CardIndex,
    card_ids: list[str],
    now: int,
    recent_card_ids: tuple[str, ...],
) -> Card | None:
    best_id: str | None = None
    best_score = -math.inf

    for card_id in card_ids:
        score = calculate_priority(index.states[card_id], now, recent_card_ids)
        # Strict comparison keeps the earliest candidate on ties
        if score > best_score:
            best_id, best_score = card_id, score

    return index.cards[best_id] if best_id is not None else None


def _last_review_time(state: SchedulingState) -> int:
    if state.last_review_at is not None:
        return state.last_review_at
    return state.due_at - state.interval_days * DAY_MS
