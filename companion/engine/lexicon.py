"""Keyword data shared by the intent and polarity classifiers."""

from __future__ import annotations

from dataclasses import dataclass, field

_CRISIS_PHRASES = (
    "want to die",
    "kill myself",
    "can't cope",
    "can’t cope",
    "end it all",
)
_ANXIETY_KEYWORDS = ("anxious", "anxiety", "worried")
_SLEEP_KEYWORDS = ("sleep", "tired", "insomnia")
_STRESS_KEYWORDS = ("stress", "overwhelmed", "pressure")

_POSITIVE_WORDS = frozenset(
    {"good", "great", "happy", "wonderful", "amazing", "grateful", "proud", "love"}
)
_NEGATIVE_WORDS = frozenset(
    {"bad", "awful", "terrible", "sad", "angry", "frustrated", "worried", "anxious"}
)


@dataclass(frozen=True)
class Lexicon:
    """Immutable keyword sets.

    ``intent_rules`` is ordered by priority; the classifier stops at the first
    category whose keywords match, so crisis must stay first.
    """

    crisis: tuple[str, ...] = _CRISIS_PHRASES
    anxiety: tuple[str, ...] = _ANXIETY_KEYWORDS
    sleep: tuple[str, ...] = _SLEEP_KEYWORDS
    stress: tuple[str, ...] = _STRESS_KEYWORDS
    positive: frozenset[str] = field(default=_POSITIVE_WORDS)
    negative: frozenset[str] = field(default=_NEGATIVE_WORDS)

    def __post_init__(self) -> None:
        # Input text is lower-cased before matching, so the keywords must be too.
        for name in ("crisis", "anxiety", "sleep", "stress"):
            object.__setattr__(
                self, name, tuple(keyword.lower() for keyword in getattr(self, name))
            )
        for name in ("positive", "negative"):
            object.__setattr__(
                self, name, frozenset(word.lower() for word in getattr(self, name))
            )

    @property
    def intent_rules(self) -> tuple[tuple[str, tuple[str, ...]], ...]:
        return (
            ("crisis", self.crisis),
            ("anxiety", self.anxiety),
            ("sleep", self.sleep),
            ("stress", self.stress),
        )


DEFAULT_LEXICON = Lexicon()
