"""Exceptions raised by the data layer."""


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when a JSON file is missing, unreadable or malformed."""


class DataValidationError(DataError):
    """Raised when JSON content does not have the expected shape."""
