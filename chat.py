"""Terminal front end for the response engine.

One-shot usage prints the reply to a single message; ``--interactive`` runs
a conversation loop with the same typing delay and busy gating as the API.
"""

import argparse
import asyncio
import sys

from dotenv import load_dotenv

from companion.config import EngineSettings, get_settings
from companion.conversations import Conversation, EscalationNotice, Message
from companion.engine import IntentClassifier, ResponseGenerator
from companion.journal import JournalService, JournalValidationError


def _echo(message: str) -> None:
    sys.stdout.write(f"{message}\n")


def _print_message(message: Message) -> None:
    label = "You" if message.sender == "user" else "Companion"
    _echo(f"{label}: {message.content}")
    if message.suggested_actions:
        _echo("Suggested actions:")
        for i, action in enumerate(message.suggested_actions, 1):
            _echo(f"  [{i}] {action}")


def _print_notice(notice: EscalationNotice) -> None:
    _echo("!" * 80)
    _echo(f"{notice.title}: {notice.description}")
    _echo("!" * 80)


def reply_once(text: str, settings: EngineSettings) -> int:
    classifier = IntentClassifier(match_mode=settings.match_mode)
    generator = ResponseGenerator()
    if not text.strip():
        return 1
    result = classifier.classify(text)
    template = generator.respond(result)
    message = Message.from_template(template, category=result.category.value)
    _echo(f"Category: {result.category.value}")
    _print_message(message)
    if message.escalate:
        _echo("Crisis support recommended.")
    return 0


def journal_once(text: str, mood: str | None) -> int:
    service = JournalService()
    try:
        entry = service.create_entry(text, mood)
    except JournalValidationError as exc:
        _echo(str(exc))
        return 1
    _echo(f"Sentiment: {entry.sentiment}")
    _echo(f"Reflection: {entry.reflection}")
    return 0


async def interactive(settings: EngineSettings) -> None:
    conversation = Conversation(
        classifier=IntentClassifier(match_mode=settings.match_mode),
        min_delay=settings.min_delay_seconds,
        max_delay=settings.max_delay_seconds,
    )
    printed = 0

    def _on_transcript(messages: tuple[Message, ...]) -> None:
        nonlocal printed
        for message in messages[printed:]:
            if message.sender != "user":
                _print_message(message)
        printed = len(messages)

    conversation.subscribe(_on_transcript)
    conversation.on_escalation(_print_notice)
    _print_message(conversation.transcript[0])
    printed = len(conversation.transcript)
    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, sys.stdin.readline)
        if not line:
            break
        text = line.rstrip("\n")
        latest = conversation.latest_message
        if text.isdigit() and latest is not None and latest.suggested_actions:
            index = int(text) - 1
            if 0 <= index < len(latest.suggested_actions):
                text = latest.suggested_actions[index]
                conversation.suggested_action_clicked(text)
                _echo(f"You: {text}")
                await conversation.wait_idle()
                continue
        if conversation.submit_user_text(text):
            _echo("Companion is typing…")
            await conversation.wait_idle()


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Talk to the wellness companion")
    parser.add_argument("--text", type=str, help="Message to reply to once")
    parser.add_argument(
        "--journal", action="store_true", help="Treat --text as a journal entry"
    )
    parser.add_argument("--mood", type=str, help="Mood tag for --journal")
    parser.add_argument(
        "--interactive", action="store_true", help="Start a conversation loop"
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.interactive:
        asyncio.run(interactive(settings))
        return 0
    if args.text is None:
        parser.error("--text is required unless --interactive is given")
    if args.journal:
        return journal_once(args.text, args.mood)
    return reply_once(args.text, settings)


if __name__ == "__main__":
    sys.exit(main())
