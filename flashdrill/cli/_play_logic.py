from typing import Optional

from flashdrill.app import FlashdrillApp
from flashdrill.cli.terminal_ui import (
    ConsoleCelebration,
    ConsoleHaptics,
    RichPresenter,
    start_play_flow,
)
from flashdrill.deck_store import DeckStore
from flashdrill.game_session import GameSession
from flashdrill.settings import AppConfig, SettingsStore
from flashdrill.storage import JsonCardStorage


def build_app(
    config: AppConfig, round_duration: Optional[int] = None
) -> FlashdrillApp:
    """
    Construct the storage, stores, session and terminal presentation.

    Parameters:
        config (AppConfig): Resolved process configuration.
        round_duration (Optional[int]): Overrides `config.round_duration`.
    """
    settings_store = SettingsStore(config.settings_path)
    settings_store.load()

    deck = DeckStore(JsonCardStorage(config.cards_path))
    session = GameSession(
        deck=deck,
        settings_store=settings_store,
        round_duration=round_duration or config.round_duration,
        drag_threshold=config.drag_threshold,
    )
    return FlashdrillApp(
        session=session,
        settings_store=settings_store,
        presenter=RichPresenter(),
        haptics=ConsoleHaptics(),
        celebration=ConsoleCelebration(),
    )


def play_logic(config: AppConfig, round_duration: Optional[int] = None):
    """Set up the game and run the interactive play loop."""
    app = build_app(config, round_duration=round_duration)
    start_play_flow(app)
