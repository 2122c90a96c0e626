"""
Dashboard statistics derived from the index and the review log.

This is a pure computation module with no I/O. Calendar days are UTC.
"""

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta

from lexicard.application.utils.clock import utc_date
from lexicard.domain.constants import (
    INITIAL_EASE,
    MATURE_INTERVAL_DAYS,
    RETENTION_HISTORY_DAYS,
    RETENTION_ROLLING_DAYS,
    REVIEWS_PER_DAY_WINDOW,
)
from lexicard.domain.models import CardIndex, CardType, Rating, ReviewEvent

POSITIVE_RATINGS = (Rating.GOOD, Rating.EASY)


@dataclass(frozen=True)
class DailyCount:
    date: date
    count: int


@dataclass(frozen=True)
class DailyRate:
    date: date
    rate: float


@dataclass
class DashboardStats:
    """
    Collection-wide learning statistics.

    Attributes:
        total_cards: Live cards.
        due_cards: Cards in the index's due worklist.
        new_cards: Cards never reviewed.
        learned_cards: Cards with reps > 0.
        mastered_cards: Learned cards with interval >= 21 days.
        total_reviews: Review events in the log.
        reviews_today: Review events on the current UTC day.
        current_streak: Consecutive days with reviews, ending today or yesterday.
        average_ease_factor: Mean ease of learned cards (2.5 if none).
        retention_rate: Share of good/easy ratings.
    """

    total_cards: int
    due_cards: int
    new_cards: int
    learned_cards: int
    mastered_cards: int
    total_reviews: int
    reviews_today: int
    current_streak: int
    average_ease_factor: float
    retention_rate: float
    cards_by_type: dict[str, int] = field(default_factory=dict)
    ratings_distribution: dict[str, int] = field(default_factory=dict)
    reviews_per_day: list[DailyCount] = field(default_factory=list)
    retention_history: list[DailyRate] = field(default_factory=list)


class DashboardCalculator:
    """
    Computes dashboard statistics from an index snapshot and the review log.

    Stateless and side-effect free.
    """

    def calculate(
        self, index: CardIndex, events: Sequence[ReviewEvent], now: int
    ) -> DashboardStats:
        today = utc_date(now)

        learned = [s for s in index.states.values() if s.reps > 0]
        mastered = [s for s in learned if s.interval_days >= MATURE_INTERVAL_DAYS]

        ratings = Counter(Rating(e.rating) for e in events)
        positive = sum(ratings[r] for r in POSITIVE_RATINGS)
        retention_rate = positive / len(events) if events else 0.0

        if learned:
            average_ease = sum(s.ease_factor for s in learned) / len(learned)
        else:
            average_ease = INITIAL_EASE

        cards_by_type = {t.value: 0 for t in CardType}
        for card in index.cards.values():
            cards_by_type[CardType(card.type).value] += 1

        review_dates = [utc_date(e.ts) for e in events]

        return DashboardStats(
            total_cards=len(index.cards),
            due_cards=len(index.due_ids),
            new_cards=len(index.new_ids),
            learned_cards=len(learned),
            mastered_cards=len(mastered),
            total_reviews=len(events),
            reviews_today=sum(1 for d in review_dates if d == today),
            current_streak=self._compute_streak(review_dates, today),
            average_ease_factor=round(average_ease, 2),
            retention_rate=round(retention_rate, 2),
            cards_by_type=cards_by_type,
            ratings_distribution={r.value: ratings[r] for r in Rating},
            reviews_per_day=self._compute_reviews_per_day(
                review_dates, today, REVIEWS_PER_DAY_WINDOW
            ),
            retention_history=self._compute_retention_history(
                events, today, RETENTION_HISTORY_DAYS
            ),
        )

    def _compute_streak(self, review_dates: list[date], today: date) -> int:
        """
        Count consecutive review days ending today or yesterday.

        A gap of more than one day before the latest review breaks the streak.
        """
        if not review_dates:
            return 0

        days = sorted(set(review_dates), reverse=True)
        if days[0] not in (today, today - timedelta(days=1)):
            return 0

        streak = 1
        for previous, current in zip(days, days[1:]):
            if (previous - current).days != 1:
                break
            streak += 1
        return streak

    def _compute_reviews_per_day(
        self, review_dates: list[date], today: date, days: int
    ) -> list[DailyCount]:
        counts = Counter(review_dates)
        return [
            DailyCount(date=d, count=counts.get(d, 0))
            for d in _trailing_days(today, days)
        ]

    def _compute_retention_history(
        self, events: Sequence[ReviewEvent], today: date, days: int
    ) -> list[DailyRate]:
        """
        Retention per day, smoothed over a 7-day rolling window.
        """
        totals: Counter[date] = Counter()
        positives: Counter[date] = Counter()
        for event in events:
            d = utc_date(event.ts)
            totals[d] += 1
            if Rating(event.rating) in POSITIVE_RATINGS:
                positives[d] += 1

        history: list[DailyRate] = []
        for end in _trailing_days(today, days):
            window = _trailing_days(end, RETENTION_ROLLING_DAYS)
            total = sum(totals[d] for d in window)
            good = sum(positives[d] for d in window)
            rate = good / total if total else 0.0
            history.append(DailyRate(date=end, rate=round(rate, 2)))
        return history


def calculate_dashboard_stats(
    index: CardIndex, events: Sequence[ReviewEvent], now: int
) -> DashboardStats:
    """Convenience wrapper around DashboardCalculator."""
    return DashboardCalculator().calculate(index, events, now)


def _trailing_days(end: date, days: int) -> list[date]:
    # Oldest first, ending at `end` inclusive
    return [end - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
