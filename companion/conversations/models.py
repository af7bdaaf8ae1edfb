"""Domain models used by the conversation engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4

from ..engine.templates import ResponseTemplate

USER = "user"
AGENT = "agent"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Message:
    """One transcript entry. Never mutated once appended."""

    content: str
    sender: str
    id: str = field(default_factory=lambda: uuid4().hex)
    created_at: datetime = field(default_factory=_utcnow)
    escalate: bool = False
    suggested_actions: tuple[str, ...] = ()
    category: str | None = None

    @classmethod
    def from_user(cls, text: str) -> Message:
        return cls(content=text, sender=USER, id=f"user-{uuid4().hex}")

    @classmethod
    def from_template(
        cls, template: ResponseTemplate, category: str | None = None
    ) -> Message:
        return cls(
            content=template.body,
            sender=AGENT,
            id=f"agent-{uuid4().hex}",
            escalate=template.escalate,
            suggested_actions=tuple(template.suggested_actions),
            category=category,
        )


@dataclass(frozen=True)
class EscalationNotice:
    """Interrupting alert raised for a crisis response."""

    message_id: str
    title: str
    description: str
    severity: str
    resources: tuple[str, ...]
    raised_at: datetime = field(default_factory=_utcnow)
