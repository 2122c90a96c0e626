import pytest

from conftest import T0, make_card, make_event
from lexicard.application.config import StudyMode, StudySettings
from lexicard.application.session import (
    RecentCards,
    SessionProgress,
    StudySession,
    count_new_cards_introduced,
)
from lexicard.domain.constants import DAY_MS, HOUR_MS
from lexicard.domain.models import Rating
from lexicard.infrastructure.adapters.memory_store import InMemoryLogStore


@pytest.fixture
def settings(mock_home):
    def _settings(**kwargs):
        return StudySettings(**kwargs)

    return _settings


@pytest.fixture
def store():
    return InMemoryLogStore(
        cards=[
            make_card("a", created_at=T0 - 3),
            make_card("b", created_at=T0 - 2),
            make_card("c", created_at=T0 - 1),
        ]
    )


class TestRecentCards:
    def test_most_recent_first_and_bounded(self):
        recent = RecentCards(max_size=2).push("a").push("b").push("c")
        assert recent.card_ids == ("c", "b")

    def test_push_moves_existing_to_front(self):
        recent = RecentCards().push("a").push("b").push("a")
        assert recent.card_ids == ("a", "b")

    def test_clear(self):
        assert RecentCards().push("a").clear().card_ids == ()


def test_progress_summary():
    progress = (
        SessionProgress(started_at=T0)
        .after_rating(Rating.GOOD, was_new=True)
        .after_rating(Rating.AGAIN, was_new=False)
    )
    summary = progress.summary(T0 + 60_000)

    assert summary.reviewed == 2
    assert summary.new_learned == 1
    assert summary.correct_rate == 0.5
    assert summary.duration_ms == 60_000


def test_count_new_cards_introduced():
    events = [
        make_event("old", T0 - DAY_MS),
        make_event("old", T0 + 1),
        make_event("fresh", T0 + 2),
        make_event("fresh", T0 + 3),
    ]
    assert count_new_cards_introduced(events, since=T0) == 1
    assert count_new_cards_introduced([], since=T0) == 0


class TestStudyUntilEmpty:
    def test_serves_new_cards_up_to_quota_then_completes(self, store, settings):
        session = StudySession(
            store,
            settings(study_mode=StudyMode.STUDY_UNTIL_EMPTY, new_cards_per_day=2),
            started_at=T0,
        )

        first = session.next_card(T0)
        assert first.id == "a"
        state = session.rate_card("a", Rating.GOOD, now=T0)
        assert state.reps == 1
        assert state.due_at == T0 + DAY_MS

        second = session.next_card(T0 + 1000)
        assert second.id == "b"
        session.rate_card("b", "easy", now=T0 + 1000)

        # Daily quota of two reached
        assert session.next_card(T0 + 2000) is None
        assert session.is_complete(has_next_card=False)
        assert session.recent_card_ids == ("b", "a")

        summary = session.summary(T0 + 5000)
        assert summary.reviewed == 2
        assert summary.new_learned == 2
        assert summary.correct_rate == 1.0
        assert summary.duration_ms == 5000

        assert len(store.read_all_review_events()) == 2

    def test_quota_counts_reviews_from_earlier_today(self, store, settings):
        store.append_event(make_event("a", T0 - HOUR_MS))
        session = StudySession(
            store, settings(study_mode="study_until_empty", new_cards_per_day=1)
        )

        assert session.scheduler_options(T0).today_new_card_count == 1
        assert session.next_card(T0) is None

    def test_due_cards_served_before_new(self, store, settings):
        store.append_event(make_event("c", T0 - 2 * DAY_MS))
        session = StudySession(store, settings(study_mode=StudyMode.STUDY_UNTIL_EMPTY))

        assert session.next_card(T0).id == "c"

    def test_not_complete_before_any_review(self, settings):
        session = StudySession(
            InMemoryLogStore(), settings(study_mode=StudyMode.STUDY_UNTIL_EMPTY)
        )
        assert session.next_card(T0) is None
        assert not session.is_complete(has_next_card=False)


class TestLoopMode:
    def test_alternates_reviewed_cards(self, settings):
        store = InMemoryLogStore(
            cards=[make_card("a"), make_card("b", created_at=T0 + 1)],
            events=[make_event("a", T0), make_event("b", T0)],
        )
        session = StudySession(store, settings(study_mode=StudyMode.LOOP))
        now = T0 + 1000

        picks = [session.next_card(now).id for _ in range(4)]

        assert picks == ["a", "b", "a", "b"]
        assert not session.is_complete(has_next_card=True)

    def test_never_completes(self, settings):
        session = StudySession(InMemoryLogStore(), settings(study_mode="loop"))
        session._progress = session.progress.after_rating(Rating.GOOD, was_new=False)

        assert not session.is_complete(has_next_card=False)


def test_due_only_never_serves_new_cards(store, settings):
    session = StudySession(store, settings(study_mode="due-only"))

    assert session.scheduler_options(T0).new_cards_per_day == 0
    assert session.next_card(T0) is None


def test_rate_unknown_card_raises(store, settings):
    session = StudySession(store, settings())

    with pytest.raises(KeyError):
        session.rate_card("missing", Rating.GOOD, now=T0)
    assert store.read_all_review_events() == []


def test_rate_invalid_rating_raises(store, settings):
    session = StudySession(store, settings())

    with pytest.raises(ValueError):
        session.rate_card("a", "perfect", now=T0)


def test_preview_records_nothing(store, settings):
    session = StudySession(store, settings())

    state = session.preview("a", Rating.EASY, now=T0)

    assert state.reps == 1
    assert state.ease_factor == pytest.approx(2.6)
    assert store.read_all_review_events() == []
    assert session.index(T0).states["a"].reps == 0


def test_index_rebuilt_when_reviewed_card_comes_due(settings):
    store = InMemoryLogStore(cards=[make_card("a")], events=[make_event("a", T0)])
    session = StudySession(store, settings())

    first = session.index(T0 + HOUR_MS)
    assert first.due_ids == ()
    assert session.index(T0 + 2 * HOUR_MS) is first

    later = session.index(T0 + 2 * DAY_MS)
    assert later is not first
    assert later.due_ids == ("a",)


def test_index_sees_external_appends_after_invalidate(store, settings):
    session = StudySession(store, settings())
    assert len(session.index(T0).cards) == 3

    store.append_card(make_card("d", created_at=T0))
    assert len(session.index(T0).cards) == 3

    session.invalidate()
    assert len(session.index(T0).cards) == 4


def test_stats_and_dashboard(store, settings):
    session = StudySession(store, settings())
    session.rate_card("a", Rating.GOOD, now=T0)

    counts = session.stats(T0)
    assert counts.total == 3
    assert counts.new_cards == 2
    assert counts.learning == 1

    dashboard = session.dashboard(T0)
    assert dashboard.total_reviews == 1
    assert dashboard.reviews_today == 1
    assert dashboard.current_streak == 1


def test_reset_clears_session_state(store, settings):
    session = StudySession(store, settings(), started_at=T0)
    session.next_card(T0)
    session.next_card(T0)
    session.rate_card("a", Rating.GOOD, now=T0)

    session.reset(now=T0 + DAY_MS)

    assert session.current_card is None
    assert session.recent_card_ids == ()
    assert session.progress.review_count == 0
    assert session.progress.started_at == T0 + DAY_MS
    # The log is untouched
    assert len(store.read_all_review_events()) == 1
