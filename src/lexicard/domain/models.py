"""
Domain models for cards, review events and scheduling state.

These are pure data structures with no I/O or external dependencies.
Timestamps are epoch milliseconds throughout.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from .constants import INITIAL_EASE


class Rating(str, Enum):
    """The four buttons a learner can press after a review."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"


class CardType(str, Enum):
    WORD = "word"
    PHRASE = "phrase"
    SENTENCE = "sentence"


class ReviewMode(str, Enum):
    FLASHCARD = "flashcard"
    QUICKPEEK = "quickpeek"


@dataclass(frozen=True)
class CardContext:
    """Where the term was captured from, if known."""

    lang_id: str | None = None
    file_path: str | None = None
    line_text: str | None = None


@dataclass(frozen=True)
class CardFront:
    """
    Prompt side of a card.

    Attributes:
        term: The word, phrase or sentence being learned.
        phonetic: Phonetic transcription.
        morphemes: Morpheme segmentation, e.g. ("ephe", "meral").
        example: Example sentence using the term.
        example_translation: Translation of the example sentence.
        context: Capture context.
    """

    term: str
    phonetic: str | None = None
    morphemes: tuple[str, ...] = ()
    example: str | None = None
    example_translation: str | None = None
    context: CardContext | None = None


@dataclass(frozen=True)
class CardBack:
    """Answer side of a card."""

    translation: str | None = None
    explanation: str | None = None
    explanation_translation: str | None = None
    synonyms: tuple[str, ...] = ()
    antonyms: tuple[str, ...] = ()
    notes: str | None = None


@dataclass(frozen=True)
class Card:
    """
    A versioned snapshot of one card's content.

    Every edit appends a new record with the same id and a higher version.
    Each record is complete on its own; the live card for an id is the
    highest-versioned record, unless that record is deleted.
    """

    id: str
    type: CardType
    front: CardFront
    created_at: int
    updated_at: int
    version: int = 1
    back: CardBack | None = None
    tags: tuple[str, ...] = ()
    deleted: bool = False


@dataclass(frozen=True)
class ReviewEvent:
    """
    A single review outcome.

    Attributes:
        id: Event identifier.
        card_id: The card that was reviewed.
        ts: Epoch ms of the review.
        rating: Button pressed.
        mode: How the card was presented.
        duration_ms: Time spent on the card, if measured.
    """

    id: str
    card_id: str
    ts: int
    rating: Rating
    mode: ReviewMode = ReviewMode.FLASHCARD
    duration_ms: int | None = None


@dataclass(frozen=True)
class SchedulingState:
    """
    SM-2 scheduling state for a card.

    Never stored as ground truth: always derived by replaying the card's
    review events.

    Attributes:
        card_id: The card this state belongs to.
        due_at: Next scheduled review (epoch ms).
        interval_days: Current spacing; 0 means never reviewed.
        ease_factor: Interval growth multiplier.
        reps: Successful reviews since the last lapse.
        lapses: Failed reviews, cumulative.
        last_review_at: Epoch ms of the most recent review.
    """

    card_id: str
    due_at: int
    interval_days: int = 0
    ease_factor: float = INITIAL_EASE
    reps: int = 0
    lapses: int = 0
    last_review_at: int | None = None

    @property
    def is_new(self) -> bool:
        return self.reps == 0


@dataclass(frozen=True)
class CardIndex:
    """
    Snapshot of live cards and their scheduling state.

    `cards` iterates in creation order (ties by id). `due_ids` is sorted by
    due time and `new_ids` by creation time. Treat as immutable once built.
    """

    cards: Mapping[str, Card] = field(default_factory=dict)
    states: Mapping[str, SchedulingState] = field(default_factory=dict)
    due_ids: tuple[str, ...] = ()
    new_ids: tuple[str, ...] = ()
    built_at: int | None = None
