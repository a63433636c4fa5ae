# backend/tests/unit/test_search_query.py
"""
Unit tests for search token translation.

No database: these check how tokens are classified and how the Python-side
predicate behaves. SQL equivalence lives in tests/services/test_search_properties.py.
"""

import pytest

from app.core.exceptions import InvalidSearchQueryException, ValidationException
from app.models.lesson import Lesson
from app.services.search_query import (
    FilterKind,
    LessonFilter,
    escape_like,
    parse_numeric_token,
    translate,
)


def _lesson(**overrides) -> Lesson:
    values = {
        "subject": "Math",
        "location": "Room1",
        "description": "Algebra basics",
        "price": 20.0,
        "spaces": 5,
    }
    values.update(overrides)
    return Lesson(**values)


class TestBlankTokens:
    @pytest.mark.parametrize("raw", [None, "", "   ", "\t\n"])
    def test_blank_token_is_rejected(self, raw):
        with pytest.raises(InvalidSearchQueryException) as exc_info:
            translate(raw)

        assert isinstance(exc_info.value, ValidationException)
        assert exc_info.value.code == "INVALID_SEARCH_QUERY"
        assert exc_info.value.to_http_exception().status_code == 400


class TestTokenClassification:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("20", 20.0),
            ("0", 0.0),
            ("-3", -3.0),
            ("+4", 4.0),
            ("19.50", 19.5),
            (".5", 0.5),
            ("7.", 7.0),
            ("  40  ", 40.0),
        ],
    )
    def test_plain_decimals_are_numeric(self, raw, expected):
        lesson_filter = translate(raw)

        assert lesson_filter.kind is FilterKind.NUMERIC
        assert lesson_filter.number == expected

    @pytest.mark.parametrize(
        "raw",
        ["math", "nan", "NaN", "inf", "-Infinity", "1e3", "0x10", "20abc", "1.2.3", "1 000", "."],
    )
    def test_everything_else_is_text(self, raw):
        lesson_filter = translate(raw)

        assert lesson_filter.kind is FilterKind.TEXT
        assert lesson_filter.number is None

    def test_token_is_trimmed(self):
        assert translate("  Room1 ").token == "Room1"

    def test_parse_numeric_token_rejects_non_finite(self):
        assert parse_numeric_token("inf") is None
        assert parse_numeric_token("9" * 400) is None


class TestPredicate:
    def test_numeric_matches_price_or_spaces(self):
        lesson_filter = translate("5")

        assert lesson_filter.matches(_lesson(price=5.0, spaces=1))
        assert lesson_filter.matches(_lesson(price=20.0, spaces=5))
        assert not lesson_filter.matches(_lesson(price=20.0, spaces=4))

    def test_numeric_never_matches_text_fields(self):
        assert not translate("20").matches(_lesson(subject="20", price=1.0, spaces=1))

    def test_text_is_case_insensitive_substring(self):
        lesson = _lesson()

        assert translate("math").matches(lesson)
        assert translate("ROOM").matches(lesson)
        assert translate("gebra").matches(lesson)
        assert not translate("physics").matches(lesson)

    def test_text_never_matches_numeric_fields(self):
        assert not translate("20x").matches(_lesson(price=20.0))

    def test_text_handles_missing_description(self):
        assert not translate("algebra").matches(_lesson(description=None))


class TestLikeEscaping:
    def test_wildcards_are_escaped(self):
        assert escape_like("50%_off\\") == "50\\%\\_off\\\\"

    def test_text_clause_binds_escaped_pattern(self):
        clause = LessonFilter(kind=FilterKind.TEXT, token="a%b").to_clause()
        params = clause.compile().params

        assert set(params.values()) == {"%a\\%b%"}
