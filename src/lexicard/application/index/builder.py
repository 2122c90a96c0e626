"""
Index builder.

Rebuilds the full card index from the raw logs (event sourcing):
1. Project card mutation records into live cards
2. Replay each card's review events into scheduling state
3. Classify cards into the due and new worklists
"""

import logging
from collections import defaultdict
from collections.abc import Iterable

from lexicard.application.index.projector import project_cards
from lexicard.application.index.replayer import replay
from lexicard.application.utils.clock import now_ms
from lexicard.domain.models import Card, CardIndex, ReviewEvent, SchedulingState

logger = logging.getLogger(__name__)


def build_index(
    records: Iterable[Card],
    events: Iterable[ReviewEvent],
    now: int | None = None,
) -> CardIndex:
    """
    Build a CardIndex snapshot from the card log and the review log.

    Building twice from the same logs and the same `now` yields equal indices.

    Args:
        records: All card mutation records, any order.
        events: All review events, any order.
        now: Classification time in epoch ms (defaults to the current time).

    Returns:
        CardIndex with live cards, their states, and the due/new worklists.
    """
    if now is None:
        now = now_ms()

    cards = project_cards(records)
    events_by_card = _group_events(events)

    orphaned = sum(len(v) for k, v in events_by_card.items() if k not in cards)
    if orphaned:
        logger.debug(f"Ignoring {orphaned} review events for missing or deleted cards")

    states: dict[str, SchedulingState] = {}
    due_ids: list[str] = []
    new_ids: list[str] = []

    for card_id, card in cards.items():
        state = replay(card_id, events_by_card.get(card_id, []), card.created_at)
        states[card_id] = state

        if state.reps == 0:
            new_ids.append(card_id)
        elif state.due_at <= now:
            due_ids.append(card_id)
        # Reviewed cards due in the future sit in neither worklist

    due_ids.sort(key=lambda cid: states[cid].due_at)
    new_ids.sort(key=lambda cid: cards[cid].created_at)

    logger.debug(
        f"Built index: {len(cards)} cards, {len(due_ids)} due, {len(new_ids)} new"
    )

    return CardIndex(
        cards=cards,
        states=states,
        due_ids=tuple(due_ids),
        new_ids=tuple(new_ids),
        built_at=now,
    )


def get_due_cards(index: CardIndex, now: int) -> list[Card]:
    """Reviewed cards whose due time has passed, earliest due first."""
    due = [
        card
        for card_id, card in index.cards.items()
        if index.states[card_id].reps > 0 and index.states[card_id].due_at <= now
    ]
    due.sort(key=lambda c: index.states[c.id].due_at)
    return due


def get_new_cards(index: CardIndex) -> list[Card]:
    """Never-reviewed cards, oldest first."""
    new = [index.cards[card_id] for card_id in index.new_ids]
    new.sort(key=lambda c: c.created_at)
    return new


def _group_events(events: Iterable[ReviewEvent]) -> dict[str, list[ReviewEvent]]:
    grouped: dict[str, list[ReviewEvent]] = defaultdict(list)
    for event in events:
        grouped[event.card_id].append(event)
    return grouped
