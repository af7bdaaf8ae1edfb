"""Keyword classifiers for chat intents and journal polarity."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .lexicon import DEFAULT_LEXICON, Lexicon

logger = logging.getLogger(__name__)


class Category(str, Enum):
    CRISIS = "crisis"
    ANXIETY = "anxiety"
    SLEEP = "sleep"
    STRESS = "stress"
    DEFAULT = "default"


class Polarity(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of a single classification.

    ``score`` is only meaningful in polarity mode, where it holds positive
    hits minus negative hits.
    """

    category: Category | Polarity
    score: int = 0


class Classifier(Protocol):
    """Common interface of the chat and journal strategies."""

    def classify(self, text: str) -> ClassificationResult: ...


class IntentClassifier:
    """Priority-ordered rule matcher; the first matching rule wins.

    ``match_mode="substring"`` matches keywords anywhere, including inside
    larger words ("pressure" in "pressured"). ``match_mode="word"`` only
    matches keywords and phrases bounded by non-word characters.
    """

    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON, match_mode: str = "substring"):
        if match_mode not in ("substring", "word"):
            raise ValueError(f"Unknown match mode: {match_mode}")
        self._lexicon = lexicon
        self._match_mode = match_mode
        self._rules: list[tuple[Category, tuple[re.Pattern[str], ...]]] = []
        for label, keywords in lexicon.intent_rules:
            patterns = tuple(
                re.compile(rf"(?<!\w){re.escape(keyword)}(?!\w)")
                for keyword in keywords
            )
            self._rules.append((Category(label), patterns))

    @property
    def match_mode(self) -> str:
        return self._match_mode

    def classify(self, text: str) -> ClassificationResult:
        lowered = (text or "").lower()
        if self._match_mode == "substring":
            for label, keywords in self._lexicon.intent_rules:
                if any(keyword in lowered for keyword in keywords):
                    return self._result(Category(label))
        else:
            for category, patterns in self._rules:
                if any(pattern.search(lowered) for pattern in patterns):
                    return self._result(category)
        return self._result(Category.DEFAULT)

    def _result(self, category: Category) -> ClassificationResult:
        logger.debug("intent classified as %s (%s mode)", category.value, self._match_mode)
        return ClassificationResult(category)


class PolarityClassifier:
    """Counts whitespace-separated tokens found in the polarity word sets."""

    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON):
        self._lexicon = lexicon

    def classify(self, text: str) -> ClassificationResult:
        tokens = (text or "").lower().split()
        positives = sum(1 for token in tokens if token in self._lexicon.positive)
        negatives = sum(1 for token in tokens if token in self._lexicon.negative)
        score = positives - negatives
        if score > 0:
            label = Polarity.POSITIVE
        elif score < 0:
            label = Polarity.NEGATIVE
        else:
            label = Polarity.NEUTRAL
        return ClassificationResult(label, score=score)
