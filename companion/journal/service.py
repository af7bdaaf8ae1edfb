"""Journal entries with keyword sentiment and mood-based reflections."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4

from ..engine.classifier import Classifier, Polarity, PolarityClassifier
from ..engine.responder import ResponseGenerator

logger = logging.getLogger(__name__)

MOOD_OPTIONS: tuple[tuple[str, str], ...] = (
    ("happy", "😊"),
    ("calm", "😌"),
    ("neutral", "😐"),
    ("stressed", "😰"),
    ("sad", "😢"),
)

JOURNAL_PROMPTS: tuple[str, ...] = (
    "How are you feeling today?",
    "What's one thing you are grateful for right now?",
    "What challenge did you overcome today?",
    "Name one small thing you'll do for self-care today.",
    "What made you smile today?",
    "What's one lesson you learned this week?",
    "Describe a moment when you felt proud of yourself.",
    "What's something you're looking forward to?",
    "How did you show kindness today?",
    "What would you tell your past self from a year ago?",
)


class JournalValidationError(RuntimeError):
    """Raised when an entry is missing its text or mood."""


@dataclass(frozen=True)
class JournalEntry:
    content: str
    mood: str
    sentiment: str
    reflection: str
    suggested_actions: tuple[str, ...] = ()
    id: str = field(default_factory=lambda: uuid4().hex)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class JournalService:
    """Keeps entries in memory, newest first."""

    def __init__(
        self,
        *,
        classifier: Classifier | None = None,
        generator: ResponseGenerator | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._classifier = classifier or PolarityClassifier()
        self._generator = generator or ResponseGenerator()
        self._rng = rng or random.Random()
        self._entries: list[JournalEntry] = []

    def random_prompt(self) -> str:
        return self._rng.choice(JOURNAL_PROMPTS)

    def analyze_sentiment(self, content: str) -> Polarity:
        return Polarity(self._classifier.classify(content).category)

    def create_entry(self, content: str, mood: str | None) -> JournalEntry:
        mood = (mood or "").strip().lower()
        if not content or not content.strip() or not mood:
            raise JournalValidationError("Please write something and select your mood")
        reflection = self._generator.reflect(mood)
        entry = JournalEntry(
            content=content,
            mood=mood,
            sentiment=self.analyze_sentiment(content).value,
            reflection=reflection.body,
            suggested_actions=reflection.suggested_actions,
        )
        self._entries.insert(0, entry)
        logger.info(
            "journal entry %s saved (mood=%s, sentiment=%s)", entry.id, mood, entry.sentiment
        )
        return entry

    def list_entries(self) -> list[JournalEntry]:
        return list(self._entries)
