"""Append-only, human-readable record of a conversation."""

from __future__ import annotations

from typing import List

from models.conversation_models import LogEntry, LogTag


class MessageLog:
    """Keep UserMessage/AiMessage pairs for display and debugging."""

    def __init__(self) -> None:
        self._entries: List[LogEntry] = []

    def record_turn(self, user_text: str, ai_text: str) -> None:
        """Append one user entry followed by one AI entry."""
        self._entries.append(LogEntry(tag=LogTag.USER, text=user_text))
        self._entries.append(LogEntry(tag=LogTag.AI, text=ai_text))

    @property
    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    def view(self) -> List[str]:
        """Return the rendered entries in call order."""
        return [entry.render() for entry in self._entries]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __str__(self) -> str:
        return "[" + ", ".join(self.view()) + "]"
