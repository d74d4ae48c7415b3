"""Exceptions raised by JsonFinder."""

from __future__ import annotations


class JsonFinderError(Exception):
    """Base class for all JsonFinder errors."""


class InvalidOperator(JsonFinderError, ValueError):
    """Raised when a clause or query names an operator outside the known set."""

    def __init__(self, operator: object) -> None:
        super().__init__(f"Invalid operator: {operator}")
        self.operator = operator


class DocumentParseError(JsonFinderError, ValueError):
    """Raised when an input line does not hold a JSON object."""
