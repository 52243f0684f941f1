"""Replay buffer for completion-mode conversations.

Every completion call resends the full buffer, which is what gives the
stateless endpoint memory of earlier turns. The buffer is never truncated:
long conversations grow the prompt (and its token cost) without bound, so a
warning is logged once it passes a configurable size.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from models.conversation_models import PromptEntry, PromptRole

LOGGER = logging.getLogger(__name__)


class AccumulatedPrompt:
    """Ordered role-tagged entries replayed verbatim on each completion call."""

    def __init__(self, warn_after: Optional[int] = None) -> None:
        self._entries: List[PromptEntry] = []
        self._warn_after = warn_after
        self._warned = False

    @staticmethod
    def turn(instruction: str, question: str) -> List[PromptEntry]:
        """Build the developer and user entries for one new turn."""
        return [
            PromptEntry(role=PromptRole.DEVELOPER, content=instruction),
            PromptEntry(role=PromptRole.USER, content=question),
        ]

    def staged(self, pending: Iterable[PromptEntry]) -> List[Dict[str, str]]:
        """Return the outgoing message list without mutating the buffer."""
        return [entry.to_message() for entry in [*self._entries, *pending]]

    def commit(self, entries: Iterable[PromptEntry]) -> None:
        """Append entries once the call that produced them has succeeded."""
        self._entries.extend(entries)
        if self._warn_after and not self._warned and len(self._entries) > self._warn_after:
            LOGGER.warning(
                "Accumulated prompt holds %d entries; every completion call resends all of them.",
                len(self._entries),
            )
            self._warned = True

    def as_messages(self) -> List[Dict[str, str]]:
        return [entry.to_message() for entry in self._entries]

    @property
    def entries(self) -> List[PromptEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()
        self._warned = False

    def __len__(self) -> int:
        return len(self._entries)
