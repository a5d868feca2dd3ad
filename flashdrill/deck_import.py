"""
Import cards from a YAML deck file.

Expected shape:

    deck: Sci-fi trivia      # optional, informational only
    cards:
      - q: Who played Starbuck in the Battlestar Galactica remake?
        a: Katee Sackhoff
"""

import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .models import Card
from .exceptions import DeckImportError

logger = logging.getLogger(__name__)


class _RawYAMLCardEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    q: str = Field(..., min_length=1)
    a: str = Field(..., min_length=1)


class _RawYAMLDeckFile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    deck: Optional[str] = None
    cards: List[_RawYAMLCardEntry] = Field(..., min_length=1)


def load_cards_from_yaml(file_path: Path) -> List[Card]:
    """
    Parse a YAML deck file into cards, in file order.

    Parameters:
        file_path (Path): Path to the YAML deck file.

    Returns:
        List[Card]: One card per entry, with fresh ids.

    Raises:
        DeckImportError: If the file is missing or unreadable, is not valid
            YAML, or does not match the expected shape (the message names the
            failing field).
    """
    try:
        content = file_path.read_text(encoding="utf-8")
        raw_yaml_content = yaml.safe_load(content)
    except FileNotFoundError:
        raise DeckImportError(file_path, "File not found.") from None
    except OSError as e:
        raise DeckImportError(
            file_path, f"Could not read file: {e}", original_exception=e
        ) from e
    except UnicodeDecodeError as e:
        raise DeckImportError(
            file_path, f"File is not valid UTF-8: {e}", original_exception=e
        ) from e
    except yaml.YAMLError as e:
        raise DeckImportError(
            file_path, f"Invalid YAML syntax: {e}", original_exception=e
        ) from e

    if not isinstance(raw_yaml_content, dict):
        raise DeckImportError(
            file_path, "Top level of YAML must be a mapping with a 'cards' list."
        )

    try:
        deck_data = _RawYAMLDeckFile.model_validate(raw_yaml_content)
        cards = [Card(prompt=entry.q, answer=entry.a) for entry in deck_data.cards]
    except ValidationError as e:
        error_details = e.errors()[0]
        field = ".".join(map(str, error_details["loc"]))
        msg = error_details["msg"]
        raise DeckImportError(
            file_path,
            f"Validation error in field '{field}': {msg}",
            original_exception=e,
        ) from e

    logger.info(f"Read {len(cards)} cards from {file_path}")
    return cards
