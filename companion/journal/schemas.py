"""Pydantic schemas for journal APIs."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .service import JournalEntry


class JournalEntryCreate(BaseModel):
    content: str
    mood: str | None = Field(default=None, max_length=32)


class JournalEntryOut(BaseModel):
    id: str
    content: str
    mood: str
    sentiment: str
    reflection: str
    suggested_actions: list[str] = Field(default_factory=list)
    created_at: datetime

    @classmethod
    def from_entry(cls, entry: JournalEntry) -> JournalEntryOut:
        return cls(
            id=entry.id,
            content=entry.content,
            mood=entry.mood,
            sentiment=entry.sentiment,
            reflection=entry.reflection,
            suggested_actions=list(entry.suggested_actions),
            created_at=entry.created_at,
        )


class JournalEntryList(BaseModel):
    items: list[JournalEntryOut]
    total: int


class MoodOption(BaseModel):
    label: str
    emoji: str


class JournalPrompt(BaseModel):
    prompt: str
