# chat/settings.py

import logging
import os
from dataclasses import dataclass, field

from chat.formatter import MAX_ITEMS
from chat.reveal import RevealPacing

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_SEARCH_URL = "https://www.google.com/search?q="


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r, not an integer; using %d", name, raw, default)
        return default


@dataclass
class ChatSettings:
    """
    Product knobs. Everything can be overridden from the environment / .env.
    """
    model: str = DEFAULT_MODEL
    search_url: str = DEFAULT_SEARCH_URL
    max_items: int = MAX_ITEMS
    pacing: RevealPacing = field(default_factory=RevealPacing)
    generation_config: dict = field(
        default_factory=lambda: {
            "temperature": 0.7,
            "max_output_tokens": 400,
            "top_k": 40,
        }
    )


def load_settings() -> ChatSettings:
    return ChatSettings(
        model=os.getenv("GEMINI_MODEL") or DEFAULT_MODEL,
        search_url=os.getenv("CHAT_SEARCH_URL") or DEFAULT_SEARCH_URL,
        max_items=_env_int("CHAT_MAX_ITEMS", MAX_ITEMS),
        pacing=RevealPacing(
            word_interval=_env_int("CHAT_WORD_INTERVAL_MS", 30) / 1000,
            item_interval=_env_int("CHAT_ITEM_INTERVAL_MS", 300) / 1000,
        ),
    )


def read_api_key():
    # Read at call time, never cached.
    return os.getenv("GEMINI_API_KEY")
