"""Flashdrill - timed flashcard drills with optional recycling of missed cards."""

from .models import Card, GameState, HapticKind, Judgement, SessionState
from .constants import DRAG_JUDGE_THRESHOLD, ROUND_DURATION_SECONDS
from .deck_store import DeckStore
from .game_session import GameSession
from .settings import AppConfig, GameSettings, SettingsStore
from .storage import JsonCardStorage
from .app import FlashdrillApp

__all__ = [
    "Card",
    "GameState",
    "HapticKind",
    "Judgement",
    "SessionState",
    "DRAG_JUDGE_THRESHOLD",
    "ROUND_DURATION_SECONDS",
    "DeckStore",
    "GameSession",
    "AppConfig",
    "GameSettings",
    "SettingsStore",
    "JsonCardStorage",
    "FlashdrillApp",
]
