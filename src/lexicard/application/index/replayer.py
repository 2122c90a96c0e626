"""Derive a card's scheduling state by replaying its review history."""

from collections.abc import Iterable
from functools import reduce

from lexicard.application.srs.sm2 import initial_state, transition
from lexicard.domain.models import ReviewEvent, SchedulingState


def replay(
    card_id: str, events: Iterable[ReviewEvent], created_at: int
) -> SchedulingState:
    """
    Fold a card's review events through the SM-2 transition.

    Events may arrive in any order; they are sorted by timestamp (stable, so
    equal timestamps keep their input order). With no events the card is new
    and due at its creation time.

    Args:
        card_id: The card being replayed.
        events: That card's review events.
        created_at: Card creation time (epoch ms).

    Raises:
        ValueError: If an event belongs to a different card.
    """
    ordered = sorted(events, key=lambda e: e.ts)

    for event in ordered:
        if event.card_id != card_id:
            raise ValueError(
                f"Event {event.id} belongs to card {event.card_id}, not {card_id}"
            )

    return reduce(
        lambda state, event: transition(state, event.rating, event.ts),
        ordered,
        initial_state(card_id, due_at=created_at),
    )
