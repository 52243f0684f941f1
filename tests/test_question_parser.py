"""Tests for structured sample-question parsing."""

import json

import pytest

from services.conversation.errors import SchemaParseError
from services.conversation.question_parser import parse_structured_questions, split_questions


class TestParseStructuredQuestions:
    """Payloads that follow, or break, the sample_questions schema."""

    def test_splits_on_delimiter_in_order(self):
        payload = '{"questions":"What is noir?%%%Who directed Psycho?%%%Pick one actress.","n":3,"m":10}'

        result = parse_structured_questions(payload)

        assert result == ["What is noir?", "Who directed Psycho?", "Pick one actress."]
        assert not any(question.endswith("%") for question in result)

    def test_trims_whitespace_around_pieces(self):
        payload = json.dumps({"questions": "  First?  %%%\n Second? "})

        assert parse_structured_questions(payload) == ["First?", "Second?"]

    def test_trailing_delimiter_keeps_empty_piece(self):
        payload = json.dumps({"questions": "One?%%%Two?%%%"})

        assert parse_structured_questions(payload) == ["One?", "Two?", ""]

    def test_fewer_pieces_than_requested_are_returned_as_is(self):
        payload = json.dumps({"questions": "Only one question?", "n": 3, "m": 10})

        assert parse_structured_questions(payload) == ["Only one question?"]

    def test_duplicates_are_not_removed(self):
        payload = json.dumps({"questions": "Same?%%%Same?"})

        assert parse_structured_questions(payload) == ["Same?", "Same?"]

    def test_malformed_json_raises(self):
        with pytest.raises(SchemaParseError) as excinfo:
            parse_structured_questions("not json at all")

        assert excinfo.value.payload == "not json at all"

    def test_missing_field_raises(self):
        with pytest.raises(SchemaParseError, match="questions"):
            parse_structured_questions(json.dumps({"n": 3, "m": 10}))

    def test_non_string_field_raises(self):
        with pytest.raises(SchemaParseError, match="must be a string"):
            parse_structured_questions(json.dumps({"questions": ["a", "b"]}))

    def test_non_object_payload_raises(self):
        with pytest.raises(SchemaParseError):
            parse_structured_questions(json.dumps(["What is noir?"]))

    def test_schema_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_structured_questions("{")


class TestSplitQuestions:
    def test_four_percent_signs_leave_one_behind(self):
        assert split_questions("A?%%%%B?") == ["A?", "%B?"]

    def test_single_percent_is_not_a_delimiter(self):
        assert split_questions("100% sure?%%%Next?") == ["100% sure?", "Next?"]

    def test_empty_text_gives_one_empty_piece(self):
        assert split_questions("") == [""]
