"""Print the effective logging and engine configuration as JSON."""

import json
import sys

from companion.app_logging import load_log_settings
from companion.config import get_settings


def get_engine_config():
    settings = get_settings()
    return {
        "response_delay_ms": [
            int(settings.min_delay_seconds * 1000),
            int(settings.max_delay_seconds * 1000),
        ],
        "keyword_match_mode": settings.match_mode,
        "chat_max_message_length": settings.chat_max_message_length,
        "max_conversations": settings.max_conversations,
        "conversation_idle_ttl_seconds": settings.conversation_idle_ttl_seconds,
    }


def main():
    config = {"logging": load_log_settings().describe(), "engine": get_engine_config()}
    sys.stdout.write(json.dumps(config, indent=2) + "\n")


if __name__ == "__main__":
    main()
