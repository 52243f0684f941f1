"""Drive an assistant run to a terminal state.

The poller only observes status: it never cancels a run, and it issues one
retrieval at a time. Errors raised by the OpenAI client during a retrieval
propagate unchanged.
"""

from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from typing import Any, Optional

from openai import AsyncOpenAI

from services.conversation.errors import PollTimeout, RunFailed

LOGGER = logging.getLogger(__name__)

PENDING_STATUSES = frozenset({"queued", "in_progress", "cancelling"})


class RunState(Enum):
    """Poller view of a run status."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    STOPPED = "stopped"


def classify_status(status: str) -> RunState:
    """Map a service run status onto the poller's states."""
    normalized = (status or "").lower()
    if normalized in PENDING_STATUSES:
        return RunState.PENDING
    if normalized == "completed":
        return RunState.COMPLETED
    if normalized == "failed":
        return RunState.FAILED
    # cancelled, expired, incomplete, requires_action and anything new
    return RunState.STOPPED


def _error_message(run: Any) -> Optional[str]:
    last_error = getattr(run, "last_error", None)
    return getattr(last_error, "message", None) if last_error else None


class RunPoller:
    """Re-fetch a run by id until it completes or fails."""

    def __init__(self, client: AsyncOpenAI, *, interval: float = 1.0, timeout: Optional[float] = None) -> None:
        """Create a poller.

        Args:
            client: Shared async OpenAI client.
            interval: Seconds to sleep before each retrieval.
            timeout: Seconds after which a still-pending run raises
                `PollTimeout`; None polls until a terminal status.
        """
        if client is None:
            raise ValueError("AsyncOpenAI client is required.")
        if interval < 0:
            raise ValueError("Poll interval must be non-negative.")
        self.client = client
        self.interval = interval
        self.timeout = timeout

    async def wait(self, thread_id: str, run: Any) -> Any:
        """Return the completed run, or raise once it ends any other way.

        Raises:
            RunFailed: The run failed, was cancelled, expired or otherwise stopped.
            PollTimeout: The run was still pending when the timeout elapsed.
        """
        started = time.monotonic()
        polls = 0
        while True:
            state = classify_status(run.status)
            if state is RunState.PENDING:
                elapsed = time.monotonic() - started
                if self.timeout is not None and elapsed >= self.timeout:
                    LOGGER.error("Run %s timed out after %.1fs (%d polls)", run.id, elapsed, polls)
                    raise PollTimeout(run.id, elapsed, run.status)
                await asyncio.sleep(self.interval)
                run = await self.client.beta.threads.runs.retrieve(run.id, thread_id=thread_id)
                polls += 1
                LOGGER.debug("Run %s poll %d: %s", run.id, polls, run.status)
            elif state is RunState.COMPLETED:
                LOGGER.info("Run %s completed after %d polls", run.id, polls)
                return run
            elif state is RunState.FAILED:
                reason = _error_message(run)
                LOGGER.error("Run %s failed: %s", run.id, reason or "unknown")
                raise RunFailed(reason, status=run.status, run_id=run.id)
            else:
                LOGGER.error("Run %s stopped with status %s", run.id, run.status)
                raise RunFailed(f"run ended with status '{run.status}'", status=run.status, run_id=run.id)
