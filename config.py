"""Configuration loader for the flight search agent."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

PLACEHOLDER_KEYS = {"your_serpapi_key_here"}


def has_valid_key(api_key: Optional[str]) -> bool:
    key = (api_key or "").strip()
    return bool(key) and key not in PLACEHOLDER_KEYS


def redact(api_key: Optional[str]) -> str:
    if not api_key:
        return "<missing>"
    return api_key[:8] + "..."


@dataclass(frozen=True)
class Settings:
    serpapi_key: Optional[str] = os.getenv("SERPAPI_KEY")
    serpapi_url: str = os.getenv("SERPAPI_URL", "https://serpapi.com/search.json")
    request_timeout: int = int(os.getenv("SERPAPI_TIMEOUT", "15"))
    usage_limit: int = int(os.getenv("SERPAPI_USAGE_LIMIT", "100"))

    ollama_model: str = os.getenv("OLLAMA_MODEL", "llama3")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def search_enabled(self) -> bool:
        return has_valid_key(self.serpapi_key)


settings = Settings()


def validate(current: Settings = settings) -> bool:
    """Log what is missing instead of failing; searches report it per call."""
    if current.search_enabled():
        logger.info("SerpApi configured with key %s", redact(current.serpapi_key))
        return True
    logger.warning("SERPAPI_KEY is missing or still the placeholder value.")
    logger.warning("Add SERPAPI_KEY to .env; get a key from https://serpapi.com/dashboard")
    return False
