"""Factories for new card mutation records and review events."""

from dataclasses import replace

from ulid import ULID

from lexicard.application.utils.clock import now_ms
from lexicard.domain.models import (
    Card,
    CardBack,
    CardFront,
    CardType,
    Rating,
    ReviewEvent,
    ReviewMode,
)


def generate_card_id() -> str:
    """Generate a sortable, unique card id using ULID."""
    return str(ULID())


def generate_event_id() -> str:
    return str(ULID())


def create_card(
    card_type: CardType,
    front: CardFront,
    back: CardBack | None = None,
    tags: tuple[str, ...] | list[str] = (),
    now: int | None = None,
) -> Card:
    """Create version 1 of a new card."""
    ts = now if now is not None else now_ms()
    return Card(
        id=generate_card_id(),
        type=CardType(card_type),
        front=front,
        back=back,
        tags=tuple(tags),
        created_at=ts,
        updated_at=ts,
        version=1,
    )


def update_card(
    card: Card,
    back: dict | None = None,
    tags: tuple[str, ...] | list[str] | None = None,
    deleted: bool | None = None,
    now: int | None = None,
) -> Card:
    """
    Produce the next complete snapshot of a card.

    Fields given in `back` are laid over the previous back; everything else
    is carried forward. The result has version + 1 and is meant to be
    appended to the log, never to replace the previous record.

    Args:
        card: The current live record.
        back: CardBack field overrides, e.g. {"translation": "..."}.
        tags: Replacement tag list.
        deleted: New soft-delete flag.
        now: Edit time (epoch ms).

    Raises:
        TypeError: If `back` names a field CardBack does not have.
    """
    new_back = card.back
    if back:
        new_back = replace(card.back or CardBack(), **back)

    return replace(
        card,
        back=new_back,
        tags=tuple(tags) if tags is not None else card.tags,
        deleted=deleted if deleted is not None else card.deleted,
        updated_at=now if now is not None else now_ms(),
        version=card.version + 1,
    )


def delete_card(card: Card, now: int | None = None) -> Card:
    """Soft-delete: the next version carries deleted=True."""
    return update_card(card, deleted=True, now=now)


def restore_card(card: Card, now: int | None = None) -> Card:
    return update_card(card, deleted=False, now=now)


def create_review_event(
    card_id: str,
    rating: Rating | str,
    mode: ReviewMode = ReviewMode.FLASHCARD,
    duration_ms: int | None = None,
    now: int | None = None,
) -> ReviewEvent:
    """
    Create a review event stamped with `now`.

    Raises:
        ValueError: If the rating is not one of again/hard/good/easy.
    """
    return ReviewEvent(
        id=generate_event_id(),
        card_id=card_id,
        ts=now if now is not None else now_ms(),
        rating=Rating(rating),
        mode=ReviewMode(mode),
        duration_ms=duration_ms,
    )
