"""Keyword-driven affective response engine."""

from .classifier import (
    Category,
    ClassificationResult,
    Classifier,
    IntentClassifier,
    Polarity,
    PolarityClassifier,
)
from .lexicon import DEFAULT_LEXICON, Lexicon
from .responder import ResponseGenerator
from .templates import CRISIS_RESOURCES, ResponseTemplate, TemplateCatalog

__all__ = [
    "CRISIS_RESOURCES",
    "Category",
    "ClassificationResult",
    "Classifier",
    "DEFAULT_LEXICON",
    "IntentClassifier",
    "Lexicon",
    "Polarity",
    "PolarityClassifier",
    "ResponseGenerator",
    "ResponseTemplate",
    "TemplateCatalog",
]
