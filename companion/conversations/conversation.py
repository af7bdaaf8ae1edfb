"""Per-conversation delivery state machine.

A conversation is either idle or busy. Accepting a submission appends the
user message, flips to busy and schedules exactly one delivery task on the
running event loop. The task sleeps for a random "typing" delay, then appends
the agent reply, raises an escalation notice when the reply carries the flag
and flips back to idle. Submissions that arrive while busy are dropped.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable
from uuid import uuid4

from ..engine.classifier import Category, IntentClassifier
from ..engine.responder import ResponseGenerator
from .escalation import EscalationCallback, EscalationNotifier
from .models import EscalationNotice, Message

logger = logging.getLogger(__name__)

TranscriptCallback = Callable[[tuple[Message, ...]], None]


class CancellationToken:
    """Cooperative cancellation flag checked before a reply is appended.

    Nothing cancels deliveries today; the token exists so a real backend call
    can be aborted without reshaping the state machine.
    """

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class Conversation:
    """Transcript owner and delivery scheduler for one chat."""

    def __init__(
        self,
        *,
        classifier: IntentClassifier | None = None,
        generator: ResponseGenerator | None = None,
        notifier: EscalationNotifier | None = None,
        min_delay: float = 1.0,
        max_delay: float = 3.0,
        rng: random.Random | None = None,
        conversation_id: str | None = None,
        greet: bool = True,
    ) -> None:
        if min_delay < 0 or min_delay > max_delay:
            raise ValueError("Invalid response delay interval")
        self.id = conversation_id or uuid4().hex
        self._classifier = classifier or IntentClassifier()
        self._generator = generator or ResponseGenerator()
        self._notifier = notifier or EscalationNotifier()
        self._min_delay = min_delay
        self._max_delay = max_delay
        self._rng = rng or random.Random()
        self._transcript: list[Message] = []
        self._notices: list[EscalationNotice] = []
        self._subscribers: list[TranscriptCallback] = []
        self._busy = False
        self._pending: asyncio.Task[None] | None = None
        if greet:
            self._transcript.append(Message.from_template(self._generator.welcome()))

    # ------------------------------------------------------------------
    # Observation

    @property
    def transcript(self) -> tuple[Message, ...]:
        return tuple(self._transcript)

    @property
    def notices(self) -> tuple[EscalationNotice, ...]:
        """Escalation notices raised so far, in transcript order."""
        return tuple(self._notices)

    @property
    def latest_message(self) -> Message | None:
        return self._transcript[-1] if self._transcript else None

    def is_busy(self) -> bool:
        return self._busy

    def subscribe(self, callback: TranscriptCallback) -> Callable[[], None]:
        """Call ``callback`` with a transcript snapshot after every append."""

        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def on_escalation(self, callback: EscalationCallback) -> Callable[[], None]:
        return self._notifier.register(callback)

    # ------------------------------------------------------------------
    # Input

    def submit_user_text(self, text: str) -> bool:
        """Accept ``text`` if it is non-blank and no reply is pending.

        Must be called from a running event loop. Returns whether the
        submission was accepted; rejected submissions change nothing.
        """

        if not text or not text.strip():
            logger.debug("ignored blank submission", extra=self._log_extra)
            return False
        if self._busy:
            logger.debug("ignored submission while busy", extra=self._log_extra)
            return False
        loop = asyncio.get_running_loop()
        user_message = Message.from_user(text)
        self._append(user_message)
        self._busy = True
        token = CancellationToken()
        self._pending = loop.create_task(self._deliver(user_message, token))
        self._pending.add_done_callback(self._delivery_done)
        return True

    def suggested_action_clicked(self, action: str) -> bool:
        return self.submit_user_text(action)

    async def wait_idle(self) -> None:
        """Wait for the pending delivery, if any, to finish.

        A failed delivery is logged by the task's done callback and does not
        raise here.
        """

        pending = self._pending
        if pending is not None:
            await asyncio.wait({pending})

    # ------------------------------------------------------------------
    # Delivery

    def _next_delay(self) -> float:
        return self._rng.uniform(self._min_delay, self._max_delay)

    async def _deliver(self, user_message: Message, token: CancellationToken) -> None:
        try:
            await asyncio.sleep(self._next_delay())
            if token.cancelled:
                logger.info("delivery cancelled", extra=self._log_extra)
                return
            result = self._classifier.classify(user_message.content)
            template = self._generator.respond(result)
            agent_message = Message.from_template(
                template, category=Category(result.category).value
            )
            self._append(agent_message)
            notice = self._notifier.notify(agent_message)
            if notice is not None:
                self._notices.append(notice)
        finally:
            self._busy = False
            self._pending = None

    def _delivery_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("delivery failed", exc_info=exc, extra=self._log_extra)

    @property
    def _log_extra(self) -> dict[str, str]:
        return {"conversation_id": self.id}

    def _append(self, message: Message) -> None:
        self._transcript.append(message)
        snapshot = self.transcript
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("transcript subscriber failed", extra=self._log_extra)
