"""
Presentation port and controller.

FlashdrillApp is the single entry point for player intents. It forwards each
intent to the GameSession, re-renders after every change, and plays haptics
or the celebration when it observes the matching transitions.
"""

import logging
from typing import Any, Iterable, Optional, Protocol

from pydantic import ValidationError

from .exceptions import UnknownSettingError
from .game_session import GameSession
from .models import GameState, HapticKind, Judgement
from .settings import SettingsStore

logger = logging.getLogger(__name__)


class Presenter(Protocol):
    def render(self, state: GameState) -> None:
        ...


class Haptics(Protocol):
    def play(self, kind: HapticKind) -> None:
        ...


class Celebration(Protocol):
    def show(self) -> None:
        ...


class FlashdrillApp:
    """
    Wires a GameSession to a presenter and the haptics/celebration
    capabilities. No intent raises; rejected intents return False or None.
    """

    def __init__(
        self,
        session: GameSession,
        settings_store: SettingsStore,
        presenter: Presenter,
        haptics: Haptics,
        celebration: Celebration,
    ):
        self.session = session
        self.settings_store = settings_store
        self.presenter = presenter
        self.haptics = haptics
        self.celebration = celebration

    @property
    def state(self) -> GameState:
        return self.session.snapshot()

    def render(self) -> None:
        self.presenter.render(self.session.snapshot())

    # --- Round intents ---

    def start_new_game(self) -> None:
        self.session.start_new_game()
        self.render()

    def tick(self, seconds: int = 1) -> bool:
        """Deliver `seconds` one-second ticks, rendering once afterwards."""
        changed = False
        for _ in range(seconds):
            if not self.session.tick():
                break
            changed = True
        if changed:
            self.render()
        return changed

    def backgrounded(self) -> bool:
        return self._rendered(self.session.backgrounded())

    def foregrounded(self) -> bool:
        return self._rendered(self.session.foregrounded())

    def reveal(self) -> bool:
        return self._rendered(self.session.reveal())

    def judge(self, correct: bool) -> Optional[Judgement]:
        """Judge from the correct/incorrect buttons. No haptics."""
        judgement = self.session.judge(correct)
        if judgement is not None:
            self._on_judgement(judgement)
        return judgement

    def drag_released(self, delta_x: float) -> Optional[Judgement]:
        """Judge from a finished swipe, with haptic feedback."""
        judgement = self.session.drag_released(delta_x)
        if judgement is None:
            return None

        settings = self.settings_store.settings
        if judgement.correct and settings.haptic_on_correct:
            self.haptics.play(HapticKind.SUCCESS)
        elif not judgement.correct and settings.haptic_on_incorrect:
            self.haptics.play(HapticKind.ERROR)

        self._on_judgement(judgement)
        return judgement

    # --- Authoring intents ---

    def add_card(self, prompt: str, answer: str) -> bool:
        try:
            self.session.add_card(prompt, answer)
        except ValidationError as e:
            logger.warning(f"Card not added: {e.error_count()} invalid field(s).")
            return False
        self.render()
        return True

    def delete_cards(self, indices: Iterable[int]) -> bool:
        try:
            self.session.delete_cards(indices)
        except IndexError as e:
            logger.warning(f"Cards not deleted: {e}")
            return False
        self.render()
        return True

    def set_config(self, key: str, value: Any) -> bool:
        try:
            self.settings_store.set(key, value)
        except (UnknownSettingError, ValueError) as e:
            logger.warning(f"Setting not changed: {e}")
            return False
        return True

    # --- Internals ---

    def _on_judgement(self, judgement: Judgement) -> None:
        if judgement.deck_exhausted:
            self.celebration.show()
            if self.settings_store.settings.celebrate_on_complete:
                self.haptics.play(HapticKind.CELEBRATION)
        self.render()

    def _rendered(self, changed: bool) -> bool:
        if changed:
            self.render()
        return changed
