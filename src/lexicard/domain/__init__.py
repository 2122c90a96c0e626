# Domain Package
from .models import (
    Card,
    CardBack,
    CardContext,
    CardFront,
    CardIndex,
    CardType,
    Rating,
    ReviewEvent,
    ReviewMode,
    SchedulingState,
)
from .ports import CardLogStore

__all__ = [
    "Card",
    "CardBack",
    "CardContext",
    "CardFront",
    "CardIndex",
    "CardLogStore",
    "CardType",
    "Rating",
    "ReviewEvent",
    "ReviewMode",
    "SchedulingState",
]
