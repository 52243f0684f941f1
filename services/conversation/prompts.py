"""Prompt helpers for sample-question generation."""

from __future__ import annotations

from services.conversation.question_schema import QUESTION_DELIMITER


def structured_questions_instruction(count: int, max_words: int) -> str:
	"""Return the developer instruction paired with the JSON schema."""
	return (
		f"Please provide {count} sample questions. "
		f"Ensure the maximum length of each question is {max_words} words long."
	)


def delimited_questions_instruction(count: int, max_words: int) -> str:
	"""Return the run instruction for assistants, which cannot take a response schema."""
	return (
		f"Please provide {count} sample questions with '{QUESTION_DELIMITER}' as the delimiter between "
		"questions and omit any numbering of questions. Provide nothing else but your sample questions. "
		f"Ensure the maximum length of each question is {max_words} words long."
	)
