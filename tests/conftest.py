import itertools

import pytest

from lexicard.domain.constants import DAY_MS
from lexicard.domain.models import (
    Card,
    CardFront,
    CardType,
    Rating,
    ReviewEvent,
    SchedulingState,
)

# 2024-01-15T10:00:00Z
T0 = 1_705_312_800_000

_event_ids = itertools.count(1)


def make_card(
    card_id: str,
    term: str | None = None,
    created_at: int = T0,
    version: int = 1,
    deleted: bool = False,
    tags: tuple[str, ...] = (),
    card_type: CardType = CardType.WORD,
) -> Card:
    return Card(
        id=card_id,
        type=card_type,
        front=CardFront(term=term or card_id),
        created_at=created_at,
        updated_at=created_at,
        version=version,
        deleted=deleted,
        tags=tags,
    )


def make_event(card_id: str, ts: int, rating: Rating | str = Rating.GOOD) -> ReviewEvent:
    return ReviewEvent(id=f"ev{next(_event_ids)}", card_id=card_id, ts=ts, rating=Rating(rating))


def make_state(
    card_id: str,
    due_at: int,
    reps: int = 1,
    interval_days: int = 1,
    ease_factor: float = 2.5,
    lapses: int = 0,
    last_review_at: int | None = None,
) -> SchedulingState:
    if last_review_at is None and reps > 0:
        last_review_at = due_at - interval_days * DAY_MS
    return SchedulingState(
        card_id=card_id,
        due_at=due_at,
        interval_days=interval_days,
        ease_factor=ease_factor,
        reps=reps,
        lapses=lapses,
        last_review_at=last_review_at,
    )


@pytest.fixture
def now():
    return T0


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Isolate config lookups from the real home directory
    monkeypatch.setenv("HOME", str(home))
    return home
