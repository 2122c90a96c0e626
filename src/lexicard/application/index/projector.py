"""Reduce the append-only card mutation log to the set of live cards."""

import logging
from collections.abc import Iterable

from lexicard.domain.models import Card

logger = logging.getLogger(__name__)


def project_cards(records: Iterable[Card]) -> dict[str, Card]:
    """
    Keep the highest-versioned record per id and drop deleted ids.

    A deleted record removes the id entirely; a later, higher-versioned live
    record brings it back with its own content. Records are complete
    snapshots and are never merged.

    When two records share an id and version, the one with the greater
    updated_at wins; if that also ties, the later record in input order wins.

    Returns:
        Live cards keyed by id, ordered by (created_at, id).
    """
    latest: dict[str, Card] = {}

    for record in records:
        existing = latest.get(record.id)
        if existing is None or _supersedes(record, existing):
            latest[record.id] = record

    live = [card for card in latest.values() if not card.deleted]
    live.sort(key=lambda c: (c.created_at, c.id))

    return {card.id: card for card in live}


def _supersedes(record: Card, existing: Card) -> bool:
    if record.version != existing.version:
        return record.version > existing.version

    logger.warning(
        f"Duplicate version {record.version} for card {record.id}; "
        "resolving by updated_at then log order"
    )
    return record.updated_at >= existing.updated_at
