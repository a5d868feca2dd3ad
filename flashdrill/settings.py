"""
Configuration for flashdrill.

Two layers:
- GameSettings: the player's boolean preferences, persisted as JSON by
  SettingsStore and changeable at runtime.
- AppConfig: process-level settings loaded from FLASHDRILL_* environment
  variables or a .env file.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    CARDS_FILENAME,
    DRAG_JUDGE_THRESHOLD,
    ROUND_DURATION_SECONDS,
    SETTINGS_FILENAME,
)
from .exceptions import StorageError, UnknownSettingError
from .storage import atomic_write_json

logger = logging.getLogger(__name__)


def get_default_data_dir() -> Path:
    """Returns the default directory for the deck and settings files."""
    return Path.home() / ".flashdrill"


class GameSettings(BaseModel):
    """
    Player preferences. Persisted under their camelCase keys.
    """

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, extra="ignore"
    )

    recycle_incorrect_answers: bool = Field(
        default=False,
        alias="recycleIncorrectAnswers",
        description="Put missed cards back at the bottom of the deck.",
    )
    celebrate_on_complete: bool = Field(
        default=True,
        alias="celebrateOnComplete",
        description="Play the haptic celebration when the deck is cleared.",
    )
    haptic_on_correct: bool = Field(
        default=True,
        alias="hapticOnCorrect",
        description="Haptic feedback when a card is swiped as correct.",
    )
    haptic_on_incorrect: bool = Field(
        default=False,
        alias="hapticOnIncorrect",
        description="Haptic feedback when a card is swiped as incorrect.",
    )

    @classmethod
    def field_for_key(cls, key: str) -> str:
        """
        Resolve a setting key, given either as the camelCase key or the
        attribute name, to the attribute name.

        Raises:
            UnknownSettingError: If the key names no setting.
        """
        for name, info in cls.model_fields.items():
            if key in (name, info.alias):
                return name
        known = ", ".join(info.alias for info in cls.model_fields.values())
        raise UnknownSettingError(
            f"Unknown setting '{key}'. Known settings: {known}"
        )


class SettingsStore:
    """
    Holds the current GameSettings and writes every change through to disk.

    The in-memory settings stay authoritative when a write fails.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._settings = GameSettings()

    @property
    def settings(self) -> GameSettings:
        return self._settings

    def load(self) -> GameSettings:
        """Read saved settings, falling back to defaults if none can be read."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            self._settings = GameSettings.model_validate(data)
        except FileNotFoundError:
            logger.info(
                f"No settings file at {self.path}; using default settings."
            )
            self._settings = GameSettings()
        except (
            OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError
        ) as e:
            logger.info(
                f"Could not read settings from {self.path} ({e}); "
                "using default settings."
            )
            self._settings = GameSettings()
        return self._settings

    def set(self, key: str, value: Any) -> GameSettings:
        """
        Change one setting and persist all settings.

        Parameters:
            key (str): camelCase key (e.g. "recycleIncorrectAnswers") or
                attribute name (e.g. "recycle_incorrect_answers").
            value (Any): A bool, or a string such as "true", "off", "1".

        Returns:
            GameSettings: The updated settings.

        Raises:
            UnknownSettingError: If `key` names no setting.
            ValueError: If `value` cannot be read as a boolean.
        """
        field_name = GameSettings.field_for_key(key)
        data = self._settings.model_dump()
        data[field_name] = value
        try:
            updated = GameSettings.model_validate(data)
        except ValidationError as e:
            raise ValueError(
                f"Invalid value {value!r} for setting '{key}': expected a boolean."
            ) from e

        self._settings = updated
        logger.info(f"Setting '{field_name}' set to {getattr(updated, field_name)}")
        self._save()
        return updated

    def as_dict(self) -> Dict[str, bool]:
        """Settings keyed by their persisted camelCase names."""
        return self._settings.model_dump(by_alias=True)

    def _save(self) -> None:
        try:
            atomic_write_json(self.path, self.as_dict())
        except OSError as e:
            error = StorageError(
                f"Could not write settings to {self.path}: {e}",
                original_exception=e,
            )
            logger.error(f"{error}; keeping settings in memory only.")


class AppConfig(BaseSettings):
    """
    Process configuration, loaded from environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLASHDRILL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Overridden by FLASHDRILL_DATA_DIR or the CLI --data-dir option.
    data_dir: Path = Field(default_factory=get_default_data_dir)

    round_duration: int = Field(default=ROUND_DURATION_SECONDS, ge=1)

    drag_threshold: float = Field(default=DRAG_JUDGE_THRESHOLD, gt=0)

    log_level: str = "WARNING"

    @property
    def cards_path(self) -> Path:
        return self.data_dir / CARDS_FILENAME

    @property
    def settings_path(self) -> Path:
        return self.data_dir / SETTINGS_FILENAME
