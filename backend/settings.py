"""
Cultural Signal Analyzer - Settings
Copyright (c) 2026 beautifulplanet
Licensed under MIT License

Runtime configuration, read from the environment (.env is loaded by main.py).
"""

import logging
import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-20250514"
DEFAULT_OPENAI_MODEL = "gpt-4o"
DEFAULT_PROVIDER_ORDER = ("anthropic", "openai")
DEFAULT_AI_TIMEOUT_SECONDS = 10.0

logger = logging.getLogger(__name__)


def _clean_key(value: Optional[str]) -> Optional[str]:
    """Treat blank and .env.example placeholder keys ("your_..._here") as unset."""
    if not value:
        return None
    value = value.strip()
    if not value or value.lower().startswith("your_") or value == "default_key":
        return None
    return value


def _parse_timeout(raw: Optional[str]) -> float:
    if raw is None:
        return DEFAULT_AI_TIMEOUT_SECONDS
    try:
        timeout = float(raw)
    except ValueError:
        timeout = None
    if timeout is None or not math.isfinite(timeout) or timeout <= 0:
        logger.warning(
            f"⚠️ Invalid AI_TIMEOUT_SECONDS={raw!r}, using {DEFAULT_AI_TIMEOUT_SECONDS}s"
        )
        return DEFAULT_AI_TIMEOUT_SECONDS
    return timeout


@dataclass(frozen=True)
class Settings:
    anthropic_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    ai_providers: tuple[str, ...] = DEFAULT_PROVIDER_ORDER
    anthropic_model: str = DEFAULT_ANTHROPIC_MODEL
    openai_model: str = DEFAULT_OPENAI_MODEL
    ai_timeout_seconds: float = DEFAULT_AI_TIMEOUT_SECONDS
    knowledge_base_path: Optional[str] = None
    log_level: str = "INFO"
    allowed_origins: tuple[str, ...] = ()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        providers = tuple(
            p.strip().lower()
            for p in env.get("AI_PROVIDERS", ",".join(DEFAULT_PROVIDER_ORDER)).split(",")
            if p.strip()
        )
        return cls(
            anthropic_api_key=_clean_key(env.get("ANTHROPIC_API_KEY")),
            openai_api_key=_clean_key(env.get("OPENAI_API_KEY")),
            ai_providers=providers,
            anthropic_model=env.get("ANTHROPIC_MODEL") or DEFAULT_ANTHROPIC_MODEL,
            openai_model=env.get("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
            ai_timeout_seconds=_parse_timeout(env.get("AI_TIMEOUT_SECONDS")),
            knowledge_base_path=env.get("KNOWLEDGE_BASE_PATH") or None,
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
            allowed_origins=tuple(
                o.strip() for o in env.get("ALLOWED_ORIGINS", "").split(",") if o.strip()
            ),
        )
