import pytest
from pathlib import Path
from typing import List
from unittest.mock import MagicMock

from flashdrill.app import FlashdrillApp
from flashdrill.deck_store import DeckStore
from flashdrill.game_session import GameSession
from flashdrill.models import Card
from flashdrill.settings import SettingsStore
from flashdrill.storage import JsonCardStorage


# each test runs on cwd to its temp dir, so no stray .env is picked up
@pytest.fixture(autouse=True)
def go_to_tmpdir(tmp_path, monkeypatch):
    """
    Temporarily change the working directory to the test's tmp_path and clear
    FLASHDRILL_* environment variables for the duration of the test.
    """
    for name in (
        "FLASHDRILL_DATA_DIR",
        "FLASHDRILL_ROUND_DURATION",
        "FLASHDRILL_DRAG_THRESHOLD",
        "FLASHDRILL_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield


# --- Storage Fixtures ---
@pytest.fixture
def cards_path(tmp_path: Path) -> Path:
    """Path for a temporary cards file inside `tmp_path`."""
    return tmp_path / "data" / "cards.json"


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "settings.json"


@pytest.fixture
def card_storage(cards_path: Path) -> JsonCardStorage:
    return JsonCardStorage(cards_path)


@pytest.fixture
def settings_store(settings_path: Path) -> SettingsStore:
    """A SettingsStore with default settings, backed by a temporary file."""
    store = SettingsStore(settings_path)
    store.load()
    return store


# --- Card Fixtures ---
@pytest.fixture
def card_a() -> Card:
    return Card(prompt="Capital of France?", answer="Paris")


@pytest.fixture
def card_b() -> Card:
    return Card(prompt="Capital of Japan?", answer="Tokyo")


@pytest.fixture
def card_c() -> Card:
    return Card(prompt="Capital of Peru?", answer="Lima")


@pytest.fixture
def saved_cards(
    card_storage: JsonCardStorage, card_a: Card, card_b: Card
) -> List[Card]:
    """
    Save the deck [A, B] (A at the bottom, B on top) and return it.
    """
    cards = [card_a, card_b]
    card_storage.save(cards)
    return cards


@pytest.fixture
def deck(card_storage: JsonCardStorage) -> DeckStore:
    """A DeckStore over the temporary cards file, not yet loaded."""
    return DeckStore(card_storage)


@pytest.fixture
def session(
    deck: DeckStore, settings_store: SettingsStore, saved_cards: List[Card]
) -> GameSession:
    """
    A started GameSession over the saved deck [A, B], with a 100s round.
    """
    game = GameSession(deck=deck, settings_store=settings_store)
    game.start_new_game()
    return game


@pytest.fixture
def presenter() -> MagicMock:
    return MagicMock()


@pytest.fixture
def haptics() -> MagicMock:
    return MagicMock()


@pytest.fixture
def celebration() -> MagicMock:
    return MagicMock()


@pytest.fixture
def flashdrill_app(
    session: GameSession,
    settings_store: SettingsStore,
    presenter: MagicMock,
    haptics: MagicMock,
    celebration: MagicMock,
) -> FlashdrillApp:
    """A FlashdrillApp over the started session with mocked presentation ports."""
    return FlashdrillApp(
        session=session,
        settings_store=settings_store,
        presenter=presenter,
        haptics=haptics,
        celebration=celebration,
    )
