"""Named failure conditions raised by conversation sessions.

Transport and service errors raised by the OpenAI client are never wrapped
in these types; they reach the caller unchanged.
"""

from __future__ import annotations

from typing import Optional


class ConversationError(RuntimeError):
    """Base class for failures detected by the conversation layer."""


class EmptyResponse(ConversationError):
    """A completion call returned no extractable text."""

    def __init__(self, detail: str = "Completion returned no content.") -> None:
        super().__init__(detail)


class RunFailed(ConversationError):
    """An assistant run reached a terminal state other than completed."""

    def __init__(self, reason: Optional[str], *, status: str = "failed", run_id: Optional[str] = None) -> None:
        self.reason = reason or "unknown"
        self.status = status
        self.run_id = run_id
        super().__init__(f"Thread run error: {self.reason}")


class NoMessage(ConversationError):
    """A run completed but the thread holds no assistant message."""

    def __init__(self, thread_id: str) -> None:
        self.thread_id = thread_id
        super().__init__(f"No assistant message found on thread {thread_id}.")


class SchemaParseError(ConversationError, ValueError):
    """Structured output was malformed or missing the expected field."""

    def __init__(self, detail: str, payload: Optional[str] = None) -> None:
        self.payload = payload
        super().__init__(detail)


class PollTimeout(ConversationError):
    """A run stayed non-terminal for longer than the configured timeout."""

    def __init__(self, run_id: str, elapsed: float, status: str) -> None:
        self.run_id = run_id
        self.elapsed = elapsed
        self.status = status
        super().__init__(f"Run {run_id} still '{status}' after {elapsed:.1f}s.")
