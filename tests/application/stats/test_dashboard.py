from datetime import timedelta

import pytest

from conftest import T0, make_card, make_event
from lexicard.application.index.builder import build_index
from lexicard.application.stats.dashboard import DashboardCalculator, calculate_dashboard_stats
from lexicard.application.utils.clock import utc_date
from lexicard.domain.constants import DAY_MS, HOUR_MS
from lexicard.domain.models import CardType, Rating


@pytest.fixture
def calculator():
    return DashboardCalculator()


def test_empty_collection():
    stats = calculate_dashboard_stats(build_index([], [], now=T0), [], T0)

    assert stats.total_cards == 0
    assert stats.total_reviews == 0
    assert stats.current_streak == 0
    assert stats.average_ease_factor == 2.5
    assert stats.retention_rate == 0.0
    assert stats.cards_by_type == {"word": 0, "phrase": 0, "sentence": 0}
    assert stats.ratings_distribution == {"again": 0, "hard": 0, "good": 0, "easy": 0}
    assert len(stats.reviews_per_day) == 90
    assert len(stats.retention_history) == 30


def test_counts_and_rates():
    now = T0 + 40 * DAY_MS
    cards = [
        make_card("new"),
        make_card("phrase", card_type=CardType.PHRASE),
        make_card("mature"),
    ]
    events = [
        make_event("phrase", now - 2 * HOUR_MS, Rating.EASY),
        # Builds a 21+ day interval: 1, 6, 15, 38
        make_event("mature", T0, Rating.GOOD),
        make_event("mature", T0 + DAY_MS, Rating.GOOD),
        make_event("mature", T0 + 7 * DAY_MS, Rating.GOOD),
        make_event("mature", T0 + 22 * DAY_MS, Rating.AGAIN),
    ]
    index = build_index(cards, events, now=now)

    stats = calculate_dashboard_stats(index, events, now)

    assert stats.total_cards == 3
    assert stats.new_cards == 2  # "new" plus the lapsed card
    assert stats.learned_cards == 1
    assert stats.mastered_cards == 0
    assert stats.total_reviews == 5
    assert stats.reviews_today == 1
    assert stats.retention_rate == 0.8
    assert stats.average_ease_factor == 2.6
    assert stats.cards_by_type == {"word": 2, "phrase": 1, "sentence": 0}
    assert stats.ratings_distribution == {"again": 1, "hard": 0, "good": 3, "easy": 1}


def test_mastered_cards():
    events = [
        make_event("m", T0, Rating.GOOD),
        make_event("m", T0 + DAY_MS, Rating.GOOD),
        make_event("m", T0 + 7 * DAY_MS, Rating.GOOD),
    ]
    index = build_index([make_card("m")], events, now=T0 + 8 * DAY_MS)

    stats = calculate_dashboard_stats(index, events, T0 + 8 * DAY_MS)
    assert index.states["m"].interval_days == 15
    assert stats.mastered_cards == 0

    more = events + [make_event("m", T0 + 22 * DAY_MS, Rating.GOOD)]
    index = build_index([make_card("m")], more, now=T0 + 23 * DAY_MS)
    assert calculate_dashboard_stats(index, more, T0 + 23 * DAY_MS).mastered_cards == 1


class TestStreak:
    def test_consecutive_days_ending_today(self, calculator):
        today = utc_date(T0)
        dates = [today, today - timedelta(days=1), today - timedelta(days=2), today]
        assert calculator._compute_streak(dates, today) == 3

    def test_streak_may_end_yesterday(self, calculator):
        today = utc_date(T0)
        dates = [today - timedelta(days=1), today - timedelta(days=2)]
        assert calculator._compute_streak(dates, today) == 2

    def test_gap_breaks_streak(self, calculator):
        today = utc_date(T0)
        dates = [today, today - timedelta(days=2)]
        assert calculator._compute_streak(dates, today) == 1

    def test_stale_reviews_have_no_streak(self, calculator):
        today = utc_date(T0)
        assert calculator._compute_streak([today - timedelta(days=3)], today) == 0


def test_reviews_per_day_window(calculator):
    today = utc_date(T0)
    dates = [today, today, today - timedelta(days=1), today - timedelta(days=200)]

    per_day = calculator._compute_reviews_per_day(dates, today, 90)

    assert per_day[0].date == today - timedelta(days=89)
    assert per_day[-1].date == today
    assert per_day[-1].count == 2
    assert per_day[-2].count == 1
    assert sum(d.count for d in per_day) == 3


def test_retention_history_rolling_window(calculator):
    events = [
        make_event("a", T0, Rating.GOOD),
        make_event("a", T0 - 3 * DAY_MS, Rating.AGAIN),
        make_event("a", T0 - 10 * DAY_MS, Rating.AGAIN),
    ]
    history = calculator._compute_retention_history(events, utc_date(T0), 30)

    assert history[-1].date == utc_date(T0)
    assert history[-1].rate == 0.5  # the 10-day-old review is outside the window
    assert history[-4].rate == 0.0  # only the again review
    assert history[0].rate == 0.0
