"""Environment-driven settings for the analysis service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_MODEL = "gpt-4.1-mini"
DEFAULT_TEMPERATURE = 0.3
DEFAULT_SESSION_TTL_SECONDS = 3600
DEFAULT_MAX_SESSIONS = 100


class SettingsError(ValueError):
    """Raised when an environment setting is missing or invalid."""


def _parse_temperature(raw: Optional[str]) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_TEMPERATURE
    try:
        value = float(raw)
    except ValueError as exc:
        raise SettingsError(f"LAB_COPILOT_TEMPERATURE must be a number, got {raw!r}") from exc
    if not 0.0 <= value <= 1.0:
        raise SettingsError("LAB_COPILOT_TEMPERATURE must be between 0.0 and 1.0")
    return value


def _parse_optional_int(name: str, raw: Optional[str]) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw)
    except ValueError as exc:
        raise SettingsError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise SettingsError(f"{name} must be positive")
    return value


@dataclass
class Settings:
    """Runtime configuration.

    Attributes:
        openai_api_key: Key for the hosted model; required by the app at startup.
        model: Model identifier sent to the Responses API.
        temperature: Sampling temperature in [0.0, 1.0].
        system_prompt_file: Optional file whose contents replace the default persona.
        max_output_tokens: Optional cap on generated tokens.
        log_level: Root logging level name.
        session_ttl_seconds: Idle time after which a session is dropped.
        max_sessions: Upper bound on sessions held in memory.
    """

    openai_api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    system_prompt_file: Optional[Path] = None
    max_output_tokens: Optional[int] = None
    log_level: str = "INFO"
    session_ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS
    max_sessions: int = DEFAULT_MAX_SESSIONS

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables (defaults to `os.environ`)."""
        env = os.environ if environ is None else environ

        prompt_file = (env.get("LAB_COPILOT_SYSTEM_PROMPT_FILE") or "").strip()
        model = (env.get("LAB_COPILOT_MODEL") or "").strip() or DEFAULT_MODEL
        session_ttl = _parse_optional_int(
            "LAB_COPILOT_SESSION_TTL_SECONDS", env.get("LAB_COPILOT_SESSION_TTL_SECONDS")
        )
        max_sessions = _parse_optional_int("LAB_COPILOT_MAX_SESSIONS", env.get("LAB_COPILOT_MAX_SESSIONS"))

        return cls(
            openai_api_key=env.get("OPENAI_API_KEY") or None,
            model=model,
            temperature=_parse_temperature(env.get("LAB_COPILOT_TEMPERATURE")),
            system_prompt_file=Path(prompt_file) if prompt_file else None,
            max_output_tokens=_parse_optional_int(
                "LAB_COPILOT_MAX_OUTPUT_TOKENS", env.get("LAB_COPILOT_MAX_OUTPUT_TOKENS")
            ),
            log_level=(env.get("LOG_LEVEL") or "INFO").strip().upper(),
            session_ttl_seconds=session_ttl or DEFAULT_SESSION_TTL_SECONDS,
            max_sessions=max_sessions or DEFAULT_MAX_SESSIONS,
        )
