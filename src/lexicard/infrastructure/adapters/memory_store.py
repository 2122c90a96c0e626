"""
In-memory log store: infrastructure adapter for the CardLogStore port.

Keeps both logs as process-local append-only lists.
"""

import logging
import threading
from collections.abc import Iterable

from lexicard.domain.models import Card, ReviewEvent
from lexicard.domain.ports import CardLogStore

logger = logging.getLogger(__name__)


class InMemoryLogStore(CardLogStore):
    """
    Append-only card and review logs held in memory.

    Appends and reads are serialized by a lock; readers receive copies, so a
    snapshot may miss a concurrent append but never sees a partial record.
    """

    def __init__(
        self,
        cards: Iterable[Card] = (),
        events: Iterable[ReviewEvent] = (),
    ):
        self._lock = threading.Lock()
        self._cards: list[Card] = list(cards)
        self._events: list[ReviewEvent] = list(events)

    def read_all_card_mutations(self) -> list[Card]:
        with self._lock:
            return list(self._cards)

    def read_all_review_events(self) -> list[ReviewEvent]:
        with self._lock:
            return list(self._events)

    def append_card(self, card: Card) -> None:
        with self._lock:
            self._cards.append(card)
        logger.debug(f"Appended card {card.id} v{card.version}")

    def append_event(self, event: ReviewEvent) -> None:
        with self._lock:
            self._events.append(event)
        logger.debug(f"Appended {event.rating.value} review for card {event.card_id}")
