"""Exceptions raised by the quote engine."""

from __future__ import annotations

from typing import Sequence


class QuoteError(Exception):
    """Base class for all quote engine errors."""


class IndexOutOfRange(QuoteError):
    def __init__(self, level: str, index: int) -> None:
        super().__init__(f"{level} index {index} is out of range")
        self.level = level
        self.index = index


class TemplateNotFound(QuoteError):
    def __init__(self, template_id: str) -> None:
        super().__init__(f"Unknown quote template: {template_id!r}")
        self.template_id = template_id


class InvalidTemplate(QuoteError):
    pass


class InvalidQuoteRecord(QuoteError):
    def __init__(self, errors: Sequence[str]) -> None:
        super().__init__("Invalid quote record: " + "; ".join(errors))
        self.errors = list(errors)


class VersionConflict(QuoteError):
    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Quote version conflict: expected {expected}, found {actual}")
        self.expected = expected
        self.actual = actual
