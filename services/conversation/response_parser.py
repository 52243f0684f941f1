"""Helpers to pull text and usage out of OpenAI responses."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from models.conversation_models import PromptEntry, PromptRole


def extract_completion(response: Any) -> Tuple[str, List[PromptEntry]]:
	"""Return the concatenated reply text and one assistant entry per choice.

	Choices without content are skipped, so the text may be empty.
	"""
	text_parts: List[str] = []
	entries: List[PromptEntry] = []
	for choice in getattr(response, "choices", None) or []:
		message = getattr(choice, "message", None)
		content = getattr(message, "content", None) if message else None
		if not content:
			continue
		text_parts.append(content)
		entries.append(PromptEntry(role=PromptRole.ASSISTANT, content=content))
	return "".join(text_parts), entries


def message_text(message: Any) -> str:
	"""Join the text blocks of a thread message."""
	parts: List[str] = []
	for block in getattr(message, "content", None) or []:
		if getattr(block, "type", None) != "text":
			continue
		text = getattr(block, "text", None)
		value = getattr(text, "value", None) if text else None
		if value:
			parts.append(value)
	return "".join(parts)


def extract_usage(response: Any) -> Dict[str, Optional[int]]:
	"""Return token usage from a completion or a finished run, if present."""
	usage = getattr(response, "usage", None)
	return {
		"prompt_tokens": getattr(usage, "prompt_tokens", None) if usage else None,
		"completion_tokens": getattr(usage, "completion_tokens", None) if usage else None,
	}
