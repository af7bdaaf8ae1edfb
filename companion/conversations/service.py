"""In-memory registry of live conversations.

The registry is bounded: conversations unused for longer than
``conversation_idle_ttl_seconds`` are dropped, and once
``max_conversations`` are live the least recently used one makes room for
a new conversation. Conversations with a reply in flight are evicted last.
"""

from __future__ import annotations

import logging
import random
import time
from collections import OrderedDict
from collections.abc import Callable

from ..config import EngineSettings
from ..engine.classifier import IntentClassifier
from ..engine.lexicon import DEFAULT_LEXICON, Lexicon
from ..engine.responder import ResponseGenerator
from ..engine.templates import TemplateCatalog
from .conversation import Conversation

logger = logging.getLogger(__name__)


class ConversationNotFoundError(RuntimeError):
    """Raised when a conversation id is unknown or has expired."""


class ConversationService:
    """Creates conversations that share one lexicon and template catalog."""

    def __init__(
        self,
        settings: EngineSettings | None = None,
        *,
        lexicon: Lexicon = DEFAULT_LEXICON,
        catalog: TemplateCatalog | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings or EngineSettings()
        self._classifier = IntentClassifier(lexicon, match_mode=self._settings.match_mode)
        self._generator = ResponseGenerator(catalog or TemplateCatalog())
        self._rng = rng
        self._clock = clock
        # least recently used first
        self._conversations: OrderedDict[str, tuple[Conversation, float]] = OrderedDict()

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    def create_conversation(self) -> Conversation:
        now = self._clock()
        self._drop_expired(now)
        while len(self._conversations) >= self._settings.max_conversations:
            self._evict_one()
        conversation = Conversation(
            classifier=self._classifier,
            generator=self._generator,
            min_delay=self._settings.min_delay_seconds,
            max_delay=self._settings.max_delay_seconds,
            rng=self._rng,
        )
        self._conversations[conversation.id] = (conversation, now)
        logger.info("conversation created", extra={"conversation_id": conversation.id})
        return conversation

    def get_conversation(self, conversation_id: str) -> Conversation:
        now = self._clock()
        self._drop_expired(now)
        entry = self._conversations.get(conversation_id)
        if entry is None:
            raise ConversationNotFoundError(f"Conversation {conversation_id} not found")
        conversation = entry[0]
        self._conversations[conversation_id] = (conversation, now)
        self._conversations.move_to_end(conversation_id)
        return conversation

    def list_conversations(self) -> list[Conversation]:
        return [conversation for conversation, _ in self._conversations.values()]

    def _drop_expired(self, now: float) -> None:
        ttl = self._settings.conversation_idle_ttl_seconds
        expired = [
            conversation_id
            for conversation_id, (conversation, last_used) in self._conversations.items()
            if now - last_used > ttl and not conversation.is_busy()
        ]
        for conversation_id in expired:
            del self._conversations[conversation_id]
            logger.info("conversation expired", extra={"conversation_id": conversation_id})

    def _evict_one(self) -> None:
        victim = next(
            (
                conversation_id
                for conversation_id, (conversation, _) in self._conversations.items()
                if not conversation.is_busy()
            ),
            next(iter(self._conversations)),
        )
        del self._conversations[victim]
        logger.info("conversation evicted", extra={"conversation_id": victim})
