"""Exceptions raised by the study engine."""


class WordStudyError(Exception):
    """Base class for study engine errors."""


class InvalidCatalogError(WordStudyError, ValueError):
    """Imported document does not carry a well-formed word list."""


class InvalidProgressError(WordStudyError, ValueError):
    """Imported progress document is malformed."""


class PronunciationError(WordStudyError):
    """Audio for a word could not be produced."""
