"""Journal API routes."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException, status

from ..journal import MOOD_OPTIONS, JournalService, JournalValidationError, schemas

router = APIRouter(prefix="/api/journal", tags=["journal"])


@lru_cache(maxsize=1)
def get_journal_service() -> JournalService:
    return JournalService()


@contextmanager
def _service_context(service: JournalService) -> Iterator[JournalService]:
    try:
        yield service
    except JournalValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/moods", response_model=list[schemas.MoodOption])
def list_moods() -> list[schemas.MoodOption]:
    return [schemas.MoodOption(label=label, emoji=emoji) for label, emoji in MOOD_OPTIONS]


@router.get("/prompt", response_model=schemas.JournalPrompt)
def journal_prompt(
    service: JournalService = Depends(get_journal_service),
) -> schemas.JournalPrompt:
    """Return a random writing prompt."""
    return schemas.JournalPrompt(prompt=service.random_prompt())


@router.get("/entries", response_model=schemas.JournalEntryList)
def list_entries(
    service: JournalService = Depends(get_journal_service),
) -> schemas.JournalEntryList:
    entries = service.list_entries()
    return schemas.JournalEntryList(
        items=[schemas.JournalEntryOut.from_entry(e) for e in entries],
        total=len(entries),
    )


@router.post(
    "/entries",
    response_model=schemas.JournalEntryOut,
    status_code=status.HTTP_201_CREATED,
)
def create_entry(
    payload: schemas.JournalEntryCreate,
    service: JournalService = Depends(get_journal_service),
) -> schemas.JournalEntryOut:
    """Save an entry with its keyword sentiment and mood-based reflection."""
    with _service_context(service) as svc:
        entry = svc.create_entry(payload.content, payload.mood)
    return schemas.JournalEntryOut.from_entry(entry)
