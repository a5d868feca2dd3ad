"""
The round timer and reveal/judge state machine.

A GameSession never talks to the platform: it mutates the deck and its own
state, and reports what changed through return values so the presentation
layer can react (haptics, celebration, re-rendering).
"""

import logging
from typing import Iterable, Optional

from .constants import DRAG_JUDGE_THRESHOLD, ROUND_DURATION_SECONDS
from .deck_store import DeckStore
from .models import Card, GameState, Judgement, SessionState
from .settings import SettingsStore

logger = logging.getLogger(__name__)


class GameSession:
    """
    Manages one round at a time.

    This class is responsible for:
    - Counting down the round timer on each tick.
    - Pausing and resuming when the app goes to the background and back.
    - Revealing the top card's answer and applying correct/incorrect
      judgements, recycling missed cards when the setting is on.
    - Ending the round when time runs out or the deck is cleared.

    Intents that are not allowed in the current state are ignored and leave
    all state unchanged.
    """

    def __init__(
        self,
        deck: DeckStore,
        settings_store: SettingsStore,
        round_duration: int = ROUND_DURATION_SECONDS,
        drag_threshold: float = DRAG_JUDGE_THRESHOLD,
    ):
        if round_duration < 1:
            raise ValueError("round_duration must be at least 1 second.")
        if drag_threshold <= 0:
            raise ValueError("drag_threshold must be positive.")
        self.deck = deck
        self.settings_store = settings_store
        self.round_duration = round_duration
        self.drag_threshold = drag_threshold

        self.time_remaining = round_duration
        self.state = SessionState.ENDED
        self.is_answer_revealed = False
        self.correct_count = 0
        self.incorrect_count = 0
        self.interruptions = 0

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    def snapshot(self) -> GameState:
        return GameState(
            time_remaining=self.time_remaining,
            state=self.state,
            is_answer_revealed=self.is_answer_revealed,
            deck=self.deck.cards,
            correct_count=self.correct_count,
            incorrect_count=self.incorrect_count,
            interruptions=self.interruptions,
        )

    # --- Round lifecycle ---

    def start_new_game(self) -> None:
        """
        Start a fresh round from the saved deck.

        Any cards recycled during the previous round are discarded.
        """
        self.deck.load()
        self.time_remaining = self.round_duration
        self.is_answer_revealed = False
        self.correct_count = 0
        self.incorrect_count = 0
        self.interruptions = 0
        if self.deck.is_empty:
            self._end("no cards to play")
        else:
            self.state = SessionState.ACTIVE
            logger.info(
                f"New game started with {self.deck.count} cards and "
                f"{self.time_remaining}s on the clock."
            )

    def tick(self) -> bool:
        """Advance the timer by one second. Only counts down while active."""
        if not self.is_active:
            return False
        self.time_remaining = max(self.time_remaining - 1, 0)
        if self.time_remaining == 0:
            self._end("time is up")
        return True

    def backgrounded(self) -> bool:
        if not self.is_active:
            return False
        self.state = SessionState.PAUSED
        self.interruptions += 1
        logger.debug("Round paused.")
        return True

    def foregrounded(self) -> bool:
        """
        Resume a paused round if there is time and at least one card left.

        A paused round with nothing left to play ends instead.
        """
        if self.state is not SessionState.PAUSED:
            return False
        if self.time_remaining > 0 and not self.deck.is_empty:
            self.state = SessionState.ACTIVE
            logger.debug("Round resumed.")
        else:
            self._end("nothing left to play")
        return True

    # --- Reveal and judge ---

    def reveal(self) -> bool:
        if (
            not self.is_active
            or self.deck.is_empty
            or self.is_answer_revealed
        ):
            return False
        self.is_answer_revealed = True
        return True

    def judge(self, correct: bool) -> Optional[Judgement]:
        """
        Apply the player's verdict to the top card.

        Only accepted while the round is active and the answer is revealed.
        A missed card is copied to the bottom of the deck first when
        recycling is on, then the top card is removed.

        Returns:
            Optional[Judgement]: What happened, or None if the intent was ignored.
        """
        if not self.is_active or not self.is_answer_revealed:
            return None

        recycled = False
        if not correct and self.settings_store.settings.recycle_incorrect_answers:
            self.deck.recycle_top()
            recycled = True
        card = self.deck.remove_top()
        self.is_answer_revealed = False

        if correct:
            self.correct_count += 1
        else:
            self.incorrect_count += 1

        exhausted = self.deck.is_empty
        if exhausted:
            self._end("deck cleared")

        return Judgement(
            card=card,
            correct=correct,
            recycled=recycled,
            deck_exhausted=exhausted,
        )

    def drag_released(self, delta_x: float) -> Optional[Judgement]:
        """
        Turn a finished swipe into a judgement.

        A swipe further than the threshold to the right is correct and to
        the left is incorrect. Shorter swipes change nothing.
        """
        if abs(delta_x) <= self.drag_threshold:
            return None
        return self.judge(delta_x > 0)

    # --- Authoring during a round ---

    def add_card(self, prompt: str, answer: str) -> Card:
        """
        Create a card at the bottom of the deck and save the deck.

        Raises:
            pydantic.ValidationError: If the prompt or answer is blank.
        """
        card = Card(prompt=prompt, answer=answer)
        previous_top = self.deck.top
        self.deck.add_card(card, at_index=0)
        self._after_deck_edit(previous_top)
        return card

    def delete_cards(self, indices: Iterable[int]) -> int:
        """
        Delete cards by position and save the deck.

        Returns:
            int: Number of cards deleted.

        Raises:
            IndexError: If any index is out of range.
        """
        previous_top = self.deck.top
        removed = self.deck.remove_cards(indices)
        self._after_deck_edit(previous_top)
        return len(removed)

    # --- Internals ---

    def _after_deck_edit(self, previous_top: Optional[Card]) -> None:
        current_top = self.deck.top
        if current_top is None or previous_top is None or current_top.id != previous_top.id:
            self.is_answer_revealed = False
        if self.deck.is_empty and self.state is not SessionState.ENDED:
            self._end("deck emptied while editing")

    def _end(self, reason: str) -> None:
        self.state = SessionState.ENDED
        self.is_answer_revealed = False
        logger.info(
            f"Round ended ({reason}): {self.correct_count} correct, "
            f"{self.incorrect_count} incorrect, {self.time_remaining}s left."
        )
