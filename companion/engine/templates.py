"""Canned replies for the chat and journal paths."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .classifier import Category


@dataclass(frozen=True)
class ResponseTemplate:
    body: str
    suggested_actions: tuple[str, ...]
    escalate: bool = False


CRISIS_RESOURCES = ("Call 988 now", "Text HOME to 741741")

_CHAT_TEMPLATES: Mapping[str, ResponseTemplate] = {
    Category.CRISIS.value: ResponseTemplate(
        body=(
            "I'm really concerned about you right now. Your feelings are valid, "
            "but please know that you don't have to go through this alone. "
            "I'm going to connect you with professional support right away. "
            "In the meantime, please reach out to the crisis helpline: 988 "
            "(Suicide & Crisis Lifeline) available 24/7."
        ),
        suggested_actions=(
            *CRISIS_RESOURCES,
            "Find local support",
            "Talk to someone I trust",
        ),
        escalate=True,
    ),
    Category.ANXIETY.value: ResponseTemplate(
        body=(
            "I hear that you're feeling anxious, and that's completely "
            "understandable. Anxiety is something many people experience. "
            "Let's try a quick breathing exercise together:\n\n"
            "1. Breathe in slowly for 4 counts\n"
            "2. Hold your breath for 4 counts\n"
            "3. Exhale slowly for 6 counts\n\n"
            "Repeat this 3-5 times. Would you like to try journaling about "
            "what's making you feel anxious today?"
        ),
        suggested_actions=(
            "Start breathing exercise",
            "Write in journal",
            "Learn more about anxiety",
            "Listen to calming music",
        ),
    ),
    Category.SLEEP.value: ResponseTemplate(
        body=(
            "Good sleep is so important for mental wellness. Here are some "
            "tips that can help:\n\n"
            "• Create a bedtime routine 30 minutes before sleep\n"
            "• Avoid screens for 1 hour before bed\n"
            "• Keep your room cool and dark\n"
            "• Try the 4-7-8 breathing technique\n\n"
            "Would you like me to suggest some relaxing music from our Sleep "
            "playlist?"
        ),
        suggested_actions=(
            "Play sleep music",
            "Learn 4-7-8 breathing",
            "Set bedtime reminder",
            "Journal about sleep",
        ),
    ),
    Category.STRESS.value: ResponseTemplate(
        body=(
            "Feeling stressed is your mind's way of telling you it needs some "
            "care. Let's break this down together:\n\n"
            "• What's one small thing you can control right now?\n"
            "• Have you taken any breaks today?\n"
            "• Remember: you don't have to do everything perfectly\n\n"
            "Taking a few deep breaths and focusing on the present moment can "
            "help. What would feel most helpful right now?"
        ),
        suggested_actions=(
            "Take a 5-minute break",
            "Practice mindfulness",
            "Take a quiz on stress",
            "Listen to focus music",
        ),
    ),
    Category.DEFAULT.value: ResponseTemplate(
        body=(
            "Thank you for sharing that with me. I'm here to listen and "
            "support you. Every feeling you have is valid, and it's brave of "
            "you to reach out. Remember that taking small steps toward "
            "wellness is still progress. What would be most helpful for you "
            "right now?"
        ),
        suggested_actions=(
            "Tell me more",
            "Take a wellness quiz",
            "Write in journal",
            "Listen to uplifting music",
        ),
    ),
}

# Reflection keys are mood groups, not moods.
_REFLECTION_TEMPLATES: Mapping[str, ResponseTemplate] = {
    "difficult": ResponseTemplate(
        body=(
            "Your feelings are valid and it's okay to have difficult days. "
            "Remember that emotions are temporary and you have the strength "
            "to navigate through this."
        ),
        suggested_actions=(
            "Talk to the wellness assistant",
            "Start breathing exercise",
            "Listen to calming music",
            "Write another entry",
        ),
    ),
    "uplifting": ResponseTemplate(
        body=(
            "It's beautiful to see you experiencing positive moments. Try to "
            "savor these feelings and remember them during challenging times."
        ),
        suggested_actions=(
            "Note what went well",
            "Share your gratitude",
            "Listen to uplifting music",
            "Write another entry",
        ),
    ),
    "reflective": ResponseTemplate(
        body=(
            "Thank you for sharing your thoughts. Regular reflection helps "
            "build self-awareness and emotional intelligence."
        ),
        suggested_actions=(
            "Get a journaling prompt",
            "Check in with your mood",
            "Practice mindfulness",
            "Write another entry",
        ),
    ),
}

_MOOD_GROUPS: Mapping[str, str] = {
    "sad": "difficult",
    "stressed": "difficult",
    "happy": "uplifting",
    "calm": "uplifting",
}

WELCOME_TEMPLATE = ResponseTemplate(
    body=(
        "Hi there! 👋 I'm your personal wellness assistant. I'm here to "
        "listen, support, and provide helpful tips. How are you feeling today?"
    ),
    suggested_actions=(
        "I feel anxious",
        "How to sleep better?",
        "I need motivation",
        "Tell me about breathing exercises",
    ),
)


class TemplateCatalog:
    """Read-only lookup of chat, reflection and welcome templates.

    Overrides are merged once at construction; afterwards the catalog cannot
    be changed and is safe to share between conversations.
    """

    def __init__(
        self,
        chat_overrides: Mapping[str, ResponseTemplate] | None = None,
        reflection_overrides: Mapping[str, ResponseTemplate] | None = None,
    ) -> None:
        chat = dict(_CHAT_TEMPLATES)
        chat.update(chat_overrides or {})
        reflections = dict(_REFLECTION_TEMPLATES)
        reflections.update(reflection_overrides or {})
        for key, template in chat.items():
            _validate(key, template)
        for key, template in reflections.items():
            _validate(key, template)
        self._chat = MappingProxyType(chat)
        self._reflections = MappingProxyType(reflections)

    def chat(self, category: Category | str) -> ResponseTemplate:
        key = Category(category).value
        return self._chat.get(key) or self._chat[Category.DEFAULT.value]

    def reflection(self, mood: str | None) -> ResponseTemplate:
        group = _MOOD_GROUPS.get((mood or "").strip().lower(), "reflective")
        return self._reflections[group]

    @property
    def welcome(self) -> ResponseTemplate:
        return WELCOME_TEMPLATE


def _validate(key: str, template: ResponseTemplate) -> None:
    if template.escalate and not any(
        action in CRISIS_RESOURCES for action in template.suggested_actions
    ):
        raise ValueError(
            f"Template '{key}' escalates without a crisis resource action"
        )
