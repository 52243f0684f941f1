"""Conversation domain models shared by the session services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class PromptRole(str, Enum):
	"""Role tags accepted by the chat completions endpoint."""

	DEVELOPER = "developer"
	USER = "user"
	ASSISTANT = "assistant"


class LogTag(str, Enum):
	"""Tags used for the human-readable message log."""

	USER = "UserMessage"
	AI = "AiMessage"


class ResponseMode(str, Enum):
	"""Which backend interaction shape a call goes through."""

	COMPLETION = "completion"
	ASSISTANT = "assistant"


@dataclass(frozen=True)
class PromptEntry:
	"""One role-tagged message replayed on every completion call."""

	role: PromptRole
	content: str

	def to_message(self) -> Dict[str, str]:
		return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class LogEntry:
	"""Observational record of a single conversation turn half."""

	tag: LogTag
	text: str

	def render(self) -> str:
		return f"{self.tag.value}: {self.text}"
