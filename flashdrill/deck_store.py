"""
This module defines the DeckStore class, which owns the ordered list of cards
for the current round. Authoring changes are written through to storage
immediately; changes made during play are kept in memory only and are
discarded by the next load().
"""

import logging
from typing import Iterable, List, Optional, Tuple

from .constants import EXAMPLE_CARDS
from .exceptions import EmptyDeckError, StorageError
from .models import Card
from .storage import CardStorage

logger = logging.getLogger(__name__)


def example_deck() -> List[Card]:
    """Build the built-in example deck with fresh card ids."""
    return [Card(prompt=prompt, answer=answer) for prompt, answer in EXAMPLE_CARDS]


class DeckStore:
    """
    Holds the deck, bottom (index 0) to top (last index).

    Only the top card is ever removed during play, and recycled cards are
    only ever inserted at the bottom. The deck is never shuffled or sorted.
    """

    def __init__(self, storage: CardStorage):
        self.storage = storage
        self._cards: List[Card] = []

    # --- Queries ---

    @property
    def cards(self) -> Tuple[Card, ...]:
        return tuple(self._cards)

    @property
    def count(self) -> int:
        return len(self._cards)

    @property
    def is_empty(self) -> bool:
        return not self._cards

    @property
    def last_index(self) -> int:
        """Index of the top card, or -1 when the deck is empty."""
        return len(self._cards) - 1

    @property
    def top(self) -> Optional[Card]:
        return self._cards[-1] if self._cards else None

    def __len__(self) -> int:
        return len(self._cards)

    # --- Loading ---

    def load(self) -> None:
        """
        Replace the deck with the saved cards.

        A missing or unreadable file is expected on first run, so any storage
        failure falls back to the example deck instead of raising.
        """
        try:
            self._cards = list(self.storage.load())
            logger.info(f"Loaded deck with {len(self._cards)} cards.")
        except StorageError as e:
            logger.info(f"{e}. Using the example deck.")
            self._cards = example_deck()

    # --- Authoring (persisted) ---

    def add_card(self, card: Card, at_index: int = 0) -> None:
        """
        Insert a card and save the whole deck.

        Parameters:
            card (Card): The card to insert.
            at_index (int): Position to insert at, 0 (bottom) to count (top).

        Raises:
            IndexError: If `at_index` is out of range.
            ValueError: If a card with the same id is already in the deck.
        """
        self._insert(card, at_index)
        logger.debug(f"Added card {card.id} at index {at_index}.")
        self._save()

    def add_cards(self, cards: Iterable[Card], at_index: int = 0) -> int:
        """
        Insert several cards as a block, keeping their order, and save once.

        The first card ends up at `at_index`.

        Returns:
            int: Number of cards added.
        """
        new_cards = list(cards)
        if not 0 <= at_index <= len(self._cards):
            raise IndexError(
                f"Insert index {at_index} out of range for deck of {len(self._cards)}."
            )
        existing_ids = {c.id for c in self._cards}
        new_ids = {c.id for c in new_cards}
        if len(new_ids) != len(new_cards) or existing_ids & new_ids:
            raise ValueError("Cards being added must have ids unique within the deck.")

        self._cards[at_index:at_index] = new_cards
        logger.debug(f"Added {len(new_cards)} cards at index {at_index}.")
        self._save()
        return len(new_cards)

    def remove_cards(self, indices: Iterable[int]) -> List[Card]:
        """
        Remove the cards at the given positions and save the whole deck.

        Indices refer to positions before any removal, so the order they are
        given in does not matter. Nothing is removed if any index is invalid.

        Returns:
            List[Card]: The removed cards, in deck order.

        Raises:
            IndexError: If any index is out of range.
        """
        positions = set(indices)
        for index in positions:
            if not 0 <= index < len(self._cards):
                raise IndexError(
                    f"Card index {index} out of range for deck of {len(self._cards)}."
                )

        removed = [c for i, c in enumerate(self._cards) if i in positions]
        self._cards = [c for i, c in enumerate(self._cards) if i not in positions]
        logger.debug(f"Removed {len(removed)} cards at {sorted(positions)}.")
        self._save()
        return removed

    # --- Game play (transient) ---

    def insert_card(self, card: Card, at_index: int) -> None:
        """Insert a card without saving. Lost on the next load()."""
        self._insert(card, at_index)

    def recycle_top(self) -> Card:
        """
        Put a copy of the top card at the bottom of the deck.

        The copy gets a new id so ids stay unique. Callers must remove the
        top card straight afterwards.

        Returns:
            Card: The copy inserted at index 0.

        Raises:
            EmptyDeckError: If the deck is empty.
        """
        if not self._cards:
            raise EmptyDeckError("Cannot recycle a card from an empty deck.")
        copy = self._cards[-1].copy_with_new_id()
        self.insert_card(copy, 0)
        logger.debug(f"Recycled '{copy.prompt}' to the bottom of the deck.")
        return copy

    def remove_top(self) -> Card:
        """
        Remove and return the top card.

        Raises:
            EmptyDeckError: If the deck is empty.
        """
        if not self._cards:
            raise EmptyDeckError("Cannot remove a card from an empty deck.")
        card = self._cards.pop()
        logger.debug(f"Removed top card; {len(self._cards)} cards remain.")
        return card

    # --- Internals ---

    def _insert(self, card: Card, at_index: int) -> None:
        if not 0 <= at_index <= len(self._cards):
            raise IndexError(
                f"Insert index {at_index} out of range for deck of {len(self._cards)}."
            )
        if any(existing.id == card.id for existing in self._cards):
            raise ValueError(f"Card {card.id} is already in the deck.")
        self._cards.insert(at_index, card)

    def _save(self) -> None:
        try:
            self.storage.save(self._cards)
        except StorageError as e:
            logger.error(f"Failed to save deck: {e}")
