"""Runtime settings for the response engine and HTTP layer."""

from __future__ import annotations

import dataclasses
import os
from functools import lru_cache

from dotenv import load_dotenv

MATCH_MODES = ("substring", "word")


@dataclasses.dataclass(frozen=True)
class EngineSettings:
    """Configuration resolved once at startup and shared by reference."""

    min_delay_seconds: float = 1.0
    max_delay_seconds: float = 3.0
    match_mode: str = "substring"
    chat_max_message_length: int = 5000
    conversation_id_max_length: int = 64
    brand_name: str = "Wellness Companion"
    max_conversations: int = 1000
    conversation_idle_ttl_seconds: float = 3600.0

    def __post_init__(self) -> None:
        if self.min_delay_seconds < 0:
            raise ValueError("Response delay cannot be negative")
        if self.min_delay_seconds > self.max_delay_seconds:
            raise ValueError(
                "RESPONSE_MIN_DELAY_MS must not exceed RESPONSE_MAX_DELAY_MS"
            )
        if self.match_mode not in MATCH_MODES:
            raise ValueError(
                f"KEYWORD_MATCH_MODE must be one of {', '.join(MATCH_MODES)}"
            )
        if self.max_conversations < 1:
            raise ValueError("MAX_CONVERSATIONS must be at least 1")
        if self.conversation_idle_ttl_seconds <= 0:
            raise ValueError("CONVERSATION_IDLE_TTL_SECONDS must be positive")


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Load settings from the environment (and ``.env`` when present)."""

    load_dotenv()
    min_delay_ms = int(os.getenv("RESPONSE_MIN_DELAY_MS", "1000"))
    max_delay_ms = int(os.getenv("RESPONSE_MAX_DELAY_MS", "3000"))
    return EngineSettings(
        min_delay_seconds=min_delay_ms / 1000,
        max_delay_seconds=max_delay_ms / 1000,
        match_mode=os.getenv("KEYWORD_MATCH_MODE", "substring").strip().lower(),
        chat_max_message_length=int(os.getenv("CHAT_MAX_MESSAGE_LENGTH", "5000")),
        conversation_id_max_length=int(os.getenv("CONVERSATION_ID_MAX_LENGTH", "64")),
        brand_name=os.getenv("BRAND_NAME", "Wellness Companion"),
        max_conversations=int(os.getenv("MAX_CONVERSATIONS", "1000")),
        conversation_idle_ttl_seconds=float(
            os.getenv("CONVERSATION_IDLE_TTL_SECONDS", "3600")
        ),
    )


def reset_settings_cache() -> None:
    """Clear cached settings; useful in tests when env vars change."""

    get_settings.cache_clear()
