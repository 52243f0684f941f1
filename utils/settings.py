"""Environment-driven configuration for conversation sessions."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_POLL_INTERVAL = 1.0
MIN_POLL_INTERVAL = 0.1
DEFAULT_POLL_TIMEOUT = 300.0
DEFAULT_PROMPT_WARNING_ENTRIES = 200


def _read_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name}={raw!r} must be a number of seconds.") from exc
    if value < 0:
        raise RuntimeError(f"{name}={raw!r} must not be negative.")
    return value


def _read_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name}={raw!r} must be an integer.") from exc
    if value < 0:
        raise RuntimeError(f"{name}={raw!r} must not be negative.")
    return value


@dataclass(frozen=True)
class ConversationSettings:
    """Settings shared by every session the process opens.

    - OPENAI_MODEL: model for completions and assistant runs.
    - OPENAI_ASSISTANT_ID (or ASSISTANT1): default assistant for assistant mode.
    - RUN_POLL_INTERVAL: seconds between run status retrievals, at least 0.1.
    - RUN_POLL_TIMEOUT: seconds before a pending run raises PollTimeout; 0 disables.
    - PROMPT_GROWTH_WARNING_ENTRIES: accumulated prompt size that logs a warning; 0 disables.
    """

    model: str = DEFAULT_MODEL
    assistant_id: Optional[str] = None
    poll_interval: float = DEFAULT_POLL_INTERVAL
    poll_timeout: Optional[float] = DEFAULT_POLL_TIMEOUT
    prompt_warning_entries: Optional[int] = DEFAULT_PROMPT_WARNING_ENTRIES

    @classmethod
    def from_env(cls) -> "ConversationSettings":
        model = (os.getenv("OPENAI_MODEL") or "").strip() or DEFAULT_MODEL
        assistant_id = (os.getenv("OPENAI_ASSISTANT_ID") or os.getenv("ASSISTANT1") or "").strip() or None
        poll_timeout = _read_float("RUN_POLL_TIMEOUT", DEFAULT_POLL_TIMEOUT)
        warning_entries = _read_int("PROMPT_GROWTH_WARNING_ENTRIES", DEFAULT_PROMPT_WARNING_ENTRIES)
        poll_interval = _read_float("RUN_POLL_INTERVAL", DEFAULT_POLL_INTERVAL)
        if poll_interval < MIN_POLL_INTERVAL:
            raise RuntimeError(f"RUN_POLL_INTERVAL={poll_interval!r} must be at least {MIN_POLL_INTERVAL} seconds.")
        return cls(
            model=model,
            assistant_id=assistant_id,
            poll_interval=poll_interval,
            poll_timeout=poll_timeout or None,
            prompt_warning_entries=warning_entries or None,
        )


def require_api_key() -> str:
    """Return OPENAI_API_KEY or raise if it is not configured."""
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise RuntimeError("OPENAI_API_KEY environment variable is not set")
    return api_key
