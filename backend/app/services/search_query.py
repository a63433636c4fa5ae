# backend/app/services/search_query.py
"""
Free-text search translation for the lesson catalog.

A single user-supplied token becomes a ``LessonFilter``:

- a plain decimal literal ("40", "-3", "12.5", ".5") matches lessons whose
  price or spaces equals the number exactly;
- anything else matches lessons whose subject, location or description
  contains the token, case-insensitively, with every character taken
  literally.

The same filter renders to SQL (``to_clause``) and evaluates in Python
(``matches``) so the two can be checked against each other.
"""

from __future__ import annotations

from dataclasses import dataclass
import enum
import math
import re
from typing import Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.sql.elements import ColumnElement

from ..core.exceptions import InvalidSearchQueryException
from ..models.lesson import Lesson

# Hex, exponent, "Infinity" and friends are deliberately text.
_DECIMAL_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")

_LIKE_ESCAPE = "\\"

TEXT_FIELDS: Tuple[str, ...] = ("subject", "location", "description")
NUMERIC_FIELDS: Tuple[str, ...] = ("price", "spaces")


class FilterKind(str, enum.Enum):
    NUMERIC = "numeric"
    TEXT = "text"


def parse_numeric_token(token: str) -> Optional[float]:
    """Return the token's value if it is a plain finite decimal, else None."""
    if not _DECIMAL_PATTERN.match(token):
        return None
    value = float(token)
    return value if math.isfinite(value) else None


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value is matched literally."""
    return (
        value.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )


@dataclass(frozen=True)
class LessonFilter:
    kind: FilterKind
    token: str
    number: Optional[float] = None

    def to_clause(self) -> ColumnElement[bool]:
        """Render the filter as a SQL predicate over ``Lesson``."""
        if self.kind is FilterKind.NUMERIC:
            return or_(*(getattr(Lesson, field) == self.number for field in NUMERIC_FIELDS))

        pattern = f"%{escape_like(self.token)}%"
        return or_(
            *(
                getattr(Lesson, field).ilike(pattern, escape=_LIKE_ESCAPE)
                for field in TEXT_FIELDS
            )
        )

    def matches(self, lesson: Lesson) -> bool:
        """Evaluate the filter against a loaded lesson."""
        if self.kind is FilterKind.NUMERIC:
            return any(getattr(lesson, field) == self.number for field in NUMERIC_FIELDS)

        needle = self.token.lower()
        return any(needle in (getattr(lesson, field) or "").lower() for field in TEXT_FIELDS)


def translate(raw: Optional[str]) -> LessonFilter:
    """
    Turn a raw ``q`` parameter into a filter.

    Raises:
        InvalidSearchQueryException: If the token is missing or blank
    """
    token = (raw or "").strip()
    if not token:
        raise InvalidSearchQueryException()

    number = parse_numeric_token(token)
    if number is not None:
        return LessonFilter(kind=FilterKind.NUMERIC, token=token, number=number)
    return LessonFilter(kind=FilterKind.TEXT, token=token)
