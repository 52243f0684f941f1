"""Schema definitions for structured sample-question output."""

from typing import Any, Dict

SCHEMA_NAME = "sample_questions"
QUESTION_DELIMITER = "%%%"

QUESTION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "n": {
            "type": "number",
            "description": "The number of questions to be generated",
        },
        "m": {
            "type": "number",
            "description": "The maximum word count allowed for each question",
        },
        "questions": {
            "type": "string",
            "description": f"A string containing questions separated by '{QUESTION_DELIMITER}'.",
        },
    },
}

RESPONSE_FORMAT: Dict[str, Any] = {
    "type": "json_schema",
    "json_schema": {
        "name": SCHEMA_NAME,
        "schema": QUESTION_SCHEMA,
    },
}
