"""Literal text matching for caller-supplied queries.

Caller text is never used as a pattern: it is escaped once here, both for
in-process regular expressions and for SQL ``LIKE`` patterns.
"""

import re

from sqlalchemy import func
from sqlalchemy.sql.elements import ColumnElement

LIKE_ESCAPE = "\\"


def escape_like(text: str) -> str:
    """Escape ``%``, ``_`` and the escape character for a LIKE pattern."""
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class LiteralPattern:
    """Case-insensitive literal matcher built from untrusted text."""

    def __init__(self, text: str):
        self.text = text
        self._regex = re.compile(re.escape(text), re.IGNORECASE)

    def __repr__(self) -> str:
        return f"LiteralPattern({self.text!r})"

    def equals(self, value: str | None) -> bool:
        """Whole value equals the query, ignoring case."""
        if value is None:
            return False
        return self._regex.fullmatch(value) is not None

    def contains(self, value: str | None) -> bool:
        """Query occurs anywhere in the value, ignoring case."""
        if value is None:
            return False
        return self._regex.search(value) is not None

    def equals_clause(self, column) -> ColumnElement[bool]:
        return func.lower(column) == self.text.lower()

    def contains_clause(self, column) -> ColumnElement[bool]:
        return column.ilike(f"%{escape_like(self.text)}%", escape=LIKE_ESCAPE)
