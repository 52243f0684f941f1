"""Turn sample-question output into a list of question strings."""

import json
import logging
import re
from typing import List

from services.conversation.errors import SchemaParseError

LOGGER = logging.getLogger(__name__)
DELIMITER_PATTERN = re.compile(r"%{3}")


def split_questions(text: str) -> List[str]:
    """Split on the three-percent delimiter and trim every piece.

    Order is preserved and empty pieces (for example from a trailing
    delimiter) are kept as empty strings. The number of pieces is not
    checked against the requested count.
    """
    return [piece.strip() for piece in DELIMITER_PATTERN.split(text)]


def parse_structured_questions(payload: str, *, field: str = "questions") -> List[str]:
    """Parse a structured-output payload and split its question field.

    Args:
        payload: Raw JSON text returned by the model.
        field: Name of the string property holding the joined questions.

    Returns:
        The trimmed questions in generation order.

    Raises:
        SchemaParseError: If the payload is not a JSON object or the field is
            absent or not a string.
    """
    try:
        document = json.loads(payload)
    except (TypeError, json.JSONDecodeError) as exc:
        LOGGER.error("Structured output is not valid JSON: %s", exc)
        raise SchemaParseError(f"Sample question payload is not valid JSON: {exc}", payload) from exc

    if not isinstance(document, dict):
        raise SchemaParseError("Sample question payload is not a JSON object.", payload)
    if field not in document:
        raise SchemaParseError(f"Sample question payload has no '{field}' field.", payload)

    raw_questions = document[field]
    if not isinstance(raw_questions, str):
        raise SchemaParseError(
            f"Sample question field '{field}' must be a string, got {type(raw_questions).__name__}.",
            payload,
        )
    return split_questions(raw_questions)
