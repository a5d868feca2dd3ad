"""
Card persistence.

Cards are stored as a JSON array of {"prompt", "answer"} objects in a single
file. Writes go to a temporary file in the same directory which then
atomically replaces the target, so a reader never sees a partial file.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, List, Protocol, Sequence

from pydantic import TypeAdapter, ValidationError

from .exceptions import StorageError
from .models import Card, PersistedCard

logger = logging.getLogger(__name__)

_persisted_cards_adapter = TypeAdapter(List[PersistedCard])


class CardStorage(Protocol):
    """Storage port used by the deck store."""

    def load(self) -> List[Card]:
        ...

    def save(self, cards: Sequence[Card]) -> None:
        ...


def atomic_write_json(path: Path, data: Any) -> None:
    """
    Serialize `data` as JSON and atomically replace `path` with it.

    Parameters:
        path (Path): Destination file. Its parent directory is created if missing.
        data (Any): JSON-serializable value.

    Raises:
        OSError: If the directory, temporary file or replacement cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except Exception:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


class JsonCardStorage:
    """
    Stores the deck in a single JSON file.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> List[Card]:
        """
        Read the saved deck.

        Every load generates fresh card ids, since ids are not persisted.

        Returns:
            List[Card]: Cards in saved order, bottom to top.

        Raises:
            StorageError: If the file is missing, unreadable, not valid UTF-8
                JSON, or does not contain a list of prompt/answer objects.
        """
        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise StorageError(
                f"Could not read cards from {self.path}: {e}",
                original_exception=e,
            ) from e

        try:
            data = json.loads(raw.decode("utf-8"))
            persisted = _persisted_cards_adapter.validate_python(data)
            cards = [entry.to_card() for entry in persisted]
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            raise StorageError(
                f"Could not parse cards in {self.path}: {e}",
                original_exception=e,
            ) from e

        logger.debug(f"Loaded {len(cards)} cards from {self.path}")
        return cards

    def save(self, cards: Sequence[Card]) -> None:
        """
        Write the full deck, replacing any previous contents atomically.

        Raises:
            StorageError: If the file cannot be written.
        """
        payload = [
            PersistedCard.from_card(card).model_dump() for card in cards
        ]
        try:
            atomic_write_json(self.path, payload)
        except OSError as e:
            raise StorageError(
                f"Could not write cards to {self.path}: {e}",
                original_exception=e,
            ) from e
        logger.debug(f"Saved {len(payload)} cards to {self.path}")
