"""
SM-2 transition engine with a consolidation guard.

Pure computation module with no I/O: given a card's scheduling state, a rating
and a review time, compute the next state.

Interval progression: 1 day -> 6 days -> interval x ease.
Ease update: EF + (0.1 - (5-q) * (0.08 + (5-q) * 0.02)), clamped.
"""

import math
from dataclasses import replace

from lexicard.domain.constants import (
    DAY_MS,
    INITIAL_EASE,
    MAX_EASE,
    MAX_INTERVAL_DAYS,
    MIN_EASE,
    MIN_REVIEW_INTERVAL_MS,
)
from lexicard.domain.models import Rating, SchedulingState


def quality_of(rating: Rating | str) -> int:
    """
    Map a rating to its SM-2 quality (fixed table).

    Raises:
        ValueError: If the rating is not one of again/hard/good/easy.
    """
    match Rating(rating):
        case Rating.AGAIN:
            return 0
        case Rating.HARD:
            return 3
        case Rating.GOOD:
            return 4
        case Rating.EASY:
            return 5


def initial_state(card_id: str, due_at: int) -> SchedulingState:
    """State of a card that has never been reviewed."""
    return SchedulingState(
        card_id=card_id,
        due_at=due_at,
        interval_days=0,
        ease_factor=INITIAL_EASE,
        reps=0,
        lapses=0,
        last_review_at=None,
    )


def is_consolidation_review(state: SchedulingState, review_time: int) -> bool:
    """
    True when a review lands implausibly soon after the previous one.

    Only cards with progress to protect (reps > 0) qualify.
    """
    if state.last_review_at is None or state.reps == 0:
        return False
    return review_time - state.last_review_at < MIN_REVIEW_INTERVAL_MS


def transition(
    state: SchedulingState, rating: Rating | str, review_time: int
) -> SchedulingState:
    """
    Compute the scheduling state after a review.

    - quality < 3 (again): reps=0, interval=1, lapses+1, even for a
      consolidation review. Ease is untouched.
    - quality >= 3 outside the consolidation window: reps+1, new interval
      and ease.
    - quality >= 3 inside the window: reps, interval and ease frozen.

    due_at and last_review_at advance in every branch.

    Args:
        state: Current scheduling state.
        rating: Button pressed.
        review_time: Epoch ms of the review.

    Returns:
        A new SchedulingState; the input is never modified.
    """
    quality = quality_of(rating)

    reps = state.reps
    interval_days = state.interval_days
    ease_factor = state.ease_factor
    lapses = state.lapses

    if quality < 3:
        reps = 0
        interval_days = 1
        lapses += 1
    elif not is_consolidation_review(state, review_time):
        reps += 1

        if reps == 1:
            interval_days = 1
        elif reps == 2:
            interval_days = 6
        else:
            interval_days = _round_half_up(interval_days * ease_factor)

        interval_days = min(interval_days, MAX_INTERVAL_DAYS)
        ease_factor = _clamp(
            ease_factor + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02)),
            MIN_EASE,
            MAX_EASE,
        )

    return replace(
        state,
        due_at=review_time + interval_days * DAY_MS,
        interval_days=interval_days,
        ease_factor=ease_factor,
        reps=reps,
        lapses=lapses,
        last_review_at=review_time,
    )


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; intervals round .5 upward.
    return math.floor(value + 0.5)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
