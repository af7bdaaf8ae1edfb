"""Conversation engine, escalation side channel and schemas."""

from . import schemas
from .conversation import CancellationToken, Conversation
from .escalation import EscalationNotifier
from .models import EscalationNotice, Message
from .service import ConversationNotFoundError, ConversationService

__all__ = [
    "CancellationToken",
    "Conversation",
    "ConversationNotFoundError",
    "ConversationService",
    "EscalationNotice",
    "EscalationNotifier",
    "Message",
    "schemas",
]
