"""Journal service and schemas."""

from . import schemas
from .service import (
    JOURNAL_PROMPTS,
    MOOD_OPTIONS,
    JournalEntry,
    JournalService,
    JournalValidationError,
)

__all__ = [
    "JOURNAL_PROMPTS",
    "MOOD_OPTIONS",
    "JournalEntry",
    "JournalService",
    "JournalValidationError",
    "schemas",
]
