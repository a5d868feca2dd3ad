"""
Core data models: cards, their persisted form, and game state snapshots.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Optional, Tuple
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SessionState(str, Enum):
    """
    Lifecycle state of a game round.
    """

    ACTIVE = "active"
    PAUSED = "paused"
    ENDED = "ended"


class HapticKind(str, Enum):
    """
    Kinds of haptic feedback the presentation layer can play.
    """

    SUCCESS = "success"
    ERROR = "error"
    CELEBRATION = "celebration"


class Card(BaseModel):
    """
    A single flashcard.

    The id is generated when the card is created and is never derived from
    its content, so two cards with the same text are still distinct.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: UUID = Field(
        default_factory=uuid.uuid4,
        description="Unique UUIDv4 for the card. Session-local only.",
    )
    prompt: str = Field(
        ...,
        min_length=1,
        description="Question text shown on the front of the card.",
    )
    answer: str = Field(
        ...,
        min_length=1,
        description="Answer text revealed on request.",
    )

    @field_validator("prompt", "answer", mode="before")
    @classmethod
    def strip_text(cls, v):
        """Trim surrounding whitespace so blank text fails min_length."""
        if isinstance(v, str):
            return v.strip()
        return v

    def copy_with_new_id(self) -> Card:
        """Return a card with the same content and a freshly generated id."""
        return Card(prompt=self.prompt, answer=self.answer)


class PersistedCard(BaseModel):
    """
    On-disk form of a card. Ids are not persisted.
    """

    model_config = ConfigDict(extra="ignore")

    prompt: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)

    @classmethod
    def from_card(cls, card: Card) -> PersistedCard:
        return cls(prompt=card.prompt, answer=card.answer)

    def to_card(self) -> Card:
        return Card(prompt=self.prompt, answer=self.answer)


class Judgement(BaseModel):
    """
    Outcome of a judgement applied to the top card.
    """

    model_config = ConfigDict(frozen=True)

    card: Card
    correct: bool
    recycled: bool = False
    deck_exhausted: bool = False


class GameState(BaseModel):
    """
    Immutable snapshot of a round, handed to the presenter for rendering.
    """

    model_config = ConfigDict(frozen=True)

    time_remaining: int = Field(..., ge=0)
    state: SessionState
    is_answer_revealed: bool = False
    deck: Tuple[Card, ...] = Field(
        default_factory=tuple,
        description="Cards from bottom to top; the last card is shown.",
    )
    correct_count: int = Field(default=0, ge=0)
    incorrect_count: int = Field(default=0, ge=0)
    interruptions: int = Field(default=0, ge=0)

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    @property
    def top_card(self) -> Optional[Card]:
        return self.deck[-1] if self.deck else None

    @property
    def cards_remaining(self) -> int:
        return len(self.deck)
