"""
Ports (interfaces) for the card and review log.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import Card, ReviewEvent


class CardLogStore(ABC):
    """
    Port for the append-only card mutation log and review event log.

    Implementations must hand out only complete, well-typed records; malformed
    entries are filtered before they reach the engine.

    Implementations:
        - InMemoryLogStore: process-local lists guarded by a lock.
    """

    @abstractmethod
    def read_all_card_mutations(self) -> list[Card]:
        """
        Return every card mutation record appended so far.

        Order is not significant; the projector resolves versions itself.
        """

    @abstractmethod
    def read_all_review_events(self) -> list[ReviewEvent]:
        """
        Return every review event appended so far, in no particular order.
        """

    @abstractmethod
    def append_card(self, card: Card) -> None:
        """Append a card mutation record. Records are never rewritten."""

    @abstractmethod
    def append_event(self, event: ReviewEvent) -> None:
        """Append a review event. Events are never rewritten."""
