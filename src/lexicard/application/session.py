"""
Study session service, the application layer orchestrator.

Drives a review session against the card/review log: picks the next card,
records ratings as new review events, and rebuilds the index after appends.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace

from lexicard.application.cards import create_review_event
from lexicard.application.config import StudyMode, StudySettings, resolve_settings
from lexicard.application.index.builder import build_index
from lexicard.application.srs.scheduler import (
    SchedulerOptions,
    SchedulerStats,
    select_next,
    stats,
)
from lexicard.application.srs.sm2 import transition
from lexicard.application.stats.dashboard import DashboardStats, calculate_dashboard_stats
from lexicard.application.utils.clock import now_ms, start_of_utc_day
from lexicard.domain.constants import MAX_RECENT_CARDS
from lexicard.domain.models import (
    Card,
    CardIndex,
    Rating,
    ReviewEvent,
    ReviewMode,
    SchedulingState,
)
from lexicard.domain.ports import CardLogStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecentCards:
    """Recently shown card ids, most recent first, bounded to `max_size`."""

    max_size: int = MAX_RECENT_CARDS
    card_ids: tuple[str, ...] = ()

    def push(self, card_id: str) -> "RecentCards":
        rest = tuple(cid for cid in self.card_ids if cid != card_id)
        return replace(self, card_ids=((card_id,) + rest)[: self.max_size])

    def clear(self) -> "RecentCards":
        return replace(self, card_ids=())


@dataclass(frozen=True)
class SessionSummary:
    reviewed: int
    new_learned: int
    correct_rate: float
    duration_ms: int


@dataclass(frozen=True)
class SessionProgress:
    """Running counters for one study session."""

    started_at: int
    review_count: int = 0
    new_count: int = 0
    correct_count: int = 0

    def after_rating(self, rating: Rating | str, was_new: bool) -> "SessionProgress":
        correct = Rating(rating) in (Rating.GOOD, Rating.EASY)
        return replace(
            self,
            review_count=self.review_count + 1,
            new_count=self.new_count + (1 if was_new else 0),
            correct_count=self.correct_count + (1 if correct else 0),
        )

    def summary(self, now: int) -> SessionSummary:
        rate = self.correct_count / self.review_count if self.review_count else 0.0
        return SessionSummary(
            reviewed=self.review_count,
            new_learned=self.new_count,
            correct_rate=rate,
            duration_ms=now - self.started_at,
        )


def count_new_cards_introduced(events: Iterable[ReviewEvent], since: int) -> int:
    """Number of cards whose first-ever review happened at or after `since`."""
    first_review: dict[str, int] = {}
    for event in events:
        seen = first_review.get(event.card_id)
        if seen is None or event.ts < seen:
            first_review[event.card_id] = event.ts
    return sum(1 for ts in first_review.values() if ts >= since)


class StudySession:
    """
    Stateful driver for a review session.

    Holds the "current card" and "recent cards" state the scheduler itself
    never keeps, and passes them in explicitly on every selection.
    """

    def __init__(
        self,
        store: CardLogStore,
        settings: StudySettings | None = None,
        started_at: int | None = None,
    ):
        """
        Args:
            store: The log store (port) to read from and append to.
            settings: Study settings; resolved from env/config if omitted.
            started_at: Session start (epoch ms), defaults to now.
        """
        self._store = store
        self._settings = settings or resolve_settings()
        self._progress = SessionProgress(started_at=_or_now(started_at))
        self._recent = RecentCards(max_size=self._settings.max_recent_cards)
        self._current: Card | None = None
        self._index: CardIndex | None = None
        self._events: list[ReviewEvent] = []

    @property
    def settings(self) -> StudySettings:
        return self._settings

    @property
    def progress(self) -> SessionProgress:
        return self._progress

    @property
    def current_card(self) -> Card | None:
        return self._current

    @property
    def recent_card_ids(self) -> tuple[str, ...]:
        return self._recent.card_ids

    def invalidate(self) -> None:
        """Drop the cached index; the next read rebuilds from the log."""
        self._index = None

    def index(self, now: int | None = None) -> CardIndex:
        """
        Return the cached index, rebuilding it when stale.

        The cache is stale after an append, or when a reviewed card has come
        due since the index was built.
        """
        now = _or_now(now)
        if self._index is None or self._has_new_due_cards(self._index, now):
            logger.debug("Building new index")
            self._events = self._store.read_all_review_events()
            self._index = build_index(
                self._store.read_all_card_mutations(), self._events, now
            )
        return self._index

    def scheduler_options(self, now: int | None = None) -> SchedulerOptions:
        """Translate settings, study mode and session state into scheduler inputs."""
        now = _or_now(now)
        self.index(now)
        mode = self._settings.study_mode
        quota = 0 if mode == StudyMode.DUE_ONLY else self._settings.new_cards_per_day

        return SchedulerOptions(
            new_cards_per_day=quota,
            today_new_card_count=count_new_cards_introduced(
                self._events, start_of_utc_day(now)
            ),
            loop_mode=mode == StudyMode.LOOP,
            exclude_card_id=self._current.id if self._current else None,
            recent_card_ids=self._recent.card_ids,
        )

    def next_card(self, now: int | None = None) -> Card | None:
        """
        Select the next card and make it the current card.

        The previously current card moves to the front of the recent list.
        """
        now = _or_now(now)
        index = self.index(now)
        options = self.scheduler_options(now)

        card = select_next(index, now, options)
        logger.debug(f"Next card selected: {card.id if card else 'none'}")

        if self._current is not None:
            self._recent = self._recent.push(self._current.id)
        self._current = card
        return card

    def preview(
        self, card_id: str, rating: Rating | str, now: int | None = None
    ) -> SchedulingState:
        """
        The state a rating would produce, without recording anything.

        Raises:
            KeyError: If the card is not live in the index.
        """
        now = _or_now(now)
        state = self.index(now).states[card_id]
        return transition(state, rating, now)

    def rate_card(
        self,
        card_id: str,
        rating: Rating | str,
        now: int | None = None,
        duration_ms: int | None = None,
        mode: ReviewMode = ReviewMode.FLASHCARD,
    ) -> SchedulingState:
        """
        Record a review and return the card's rebuilt scheduling state.

        Raises:
            KeyError: If the card is not live in the index.
            ValueError: If the rating is not one of again/hard/good/easy.
        """
        now = _or_now(now)
        index = self.index(now)
        if card_id not in index.cards:
            raise KeyError(f"Card {card_id} is not in the index")

        was_new = index.states[card_id].reps == 0
        event = create_review_event(
            card_id, rating, mode=mode, duration_ms=duration_ms, now=now
        )
        self._store.append_event(event)

        self._progress = self._progress.after_rating(event.rating, was_new)
        self.invalidate()

        return self.index(now).states[card_id]

    def stats(self, now: int | None = None) -> SchedulerStats:
        now = _or_now(now)
        return stats(self.index(now), now)

    def dashboard(self, now: int | None = None) -> DashboardStats:
        now = _or_now(now)
        index = self.index(now)
        return calculate_dashboard_stats(index, self._events, now)

    def is_complete(self, has_next_card: bool) -> bool:
        """
        Whether to show the session-complete screen.

        Loop mode never completes; other modes complete once at least one
        review happened and nothing is left.
        """
        return (
            self._settings.study_mode != StudyMode.LOOP
            and not has_next_card
            and self._progress.review_count > 0
        )

    def summary(self, now: int | None = None) -> SessionSummary:
        return self._progress.summary(_or_now(now))

    def reset(self, now: int | None = None) -> None:
        """Start a fresh session; the log itself is untouched."""
        self._progress = SessionProgress(started_at=_or_now(now))
        self._recent = self._recent.clear()
        self._current = None

    @staticmethod
    def _has_new_due_cards(index: CardIndex, now: int) -> bool:
        built_at = index.built_at
        if built_at is None or now < built_at:
            return True
        return any(
            s.reps > 0 and built_at < s.due_at <= now for s in index.states.values()
        )


def _or_now(ts: int | None) -> int:
    return ts if ts is not None else now_ms()
