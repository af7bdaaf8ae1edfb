"""Crisis alert side channel."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .models import EscalationNotice, Message

logger = logging.getLogger(__name__)

ESCALATION_TITLE = "Crisis Support Available"
ESCALATION_DESCRIPTION = "Professional help is available 24/7. You are not alone."
ESCALATION_SEVERITY = "critical"

EscalationCallback = Callable[[EscalationNotice], None]


class EscalationNotifier:
    """Raise one notice per escalation-flagged message.

    Messages without the flag are ignored, and a message id that has already
    produced a notice never produces another.
    """

    def __init__(self) -> None:
        self._callbacks: list[EscalationCallback] = []
        self._notified: set[str] = set()

    def register(self, callback: EscalationCallback) -> Callable[[], None]:
        self._callbacks.append(callback)

        def _unregister() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return _unregister

    def notify(self, message: Message) -> EscalationNotice | None:
        if not message.escalate or message.id in self._notified:
            return None
        self._notified.add(message.id)
        notice = EscalationNotice(
            message_id=message.id,
            title=ESCALATION_TITLE,
            description=ESCALATION_DESCRIPTION,
            severity=ESCALATION_SEVERITY,
            resources=message.suggested_actions,
        )
        logger.warning("escalation raised for message %s", message.id)
        for callback in list(self._callbacks):
            try:
                callback(notice)
            except Exception:
                logger.exception("escalation callback failed for message %s", message.id)
        return notice
