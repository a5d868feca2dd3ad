from typing import Optional


class FlashdrillError(Exception):
    """Base exception for flashdrill errors."""

    def __init__(
        self, message: str, original_exception: Optional[Exception] = None
    ):
        super().__init__(message)
        self.original_exception = original_exception


class EmptyDeckError(FlashdrillError):
    """Raised when a top-of-deck operation is attempted on an empty deck."""

    pass


class StorageError(FlashdrillError):
    """Raised for errors reading or writing persisted cards or settings."""

    pass


class UnknownSettingError(FlashdrillError):
    """Raised when a configuration key does not name a known setting."""

    pass


class DeckImportError(FlashdrillError):
    """Indicates an error while importing cards from a YAML deck file."""

    def __init__(
        self,
        file_path,
        message: str,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(f"{file_path}: {message}", original_exception)
        self.file_path = file_path
