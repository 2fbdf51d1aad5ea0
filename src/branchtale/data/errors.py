"""Custom exceptions for level loading."""


class DataError(Exception):
    """Base exception for the data layer."""


class LevelLoadError(DataError):
    """Raised when a level or asset file is missing or unreadable."""
