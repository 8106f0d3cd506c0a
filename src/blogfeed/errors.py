"""Exceptions raised by the feed pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

__all__ = [
    "FeedError",
    "FieldViolation",
    "SchemaValidationError",
    "UpstreamReportedFailure",
    "UpstreamUnavailable",
]


class FeedError(Exception):
    """Base class for every failure of a single feed fetch."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UpstreamUnavailable(FeedError):
    """The aggregator could not be reached or did not answer with JSON."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


@dataclass(frozen=True)
class FieldViolation:
    """A single structural problem found in the aggregator response."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path or '<root>'}: {self.reason}"


class SchemaValidationError(FeedError):
    """The aggregator response does not match the feed schema."""

    def __init__(self, violations: Iterable[FieldViolation]) -> None:
        self.violations: List[FieldViolation] = list(violations)
        details = "; ".join(str(violation) for violation in self.violations)
        super().__init__(f"Validation failed: {details}")

    @property
    def paths(self) -> List[str]:
        return [violation.path for violation in self.violations]


class UpstreamReportedFailure(FeedError):
    """The aggregator answered with a well-formed envelope whose status is not ``ok``."""

    def __init__(self, status: str) -> None:
        super().__init__("Failed to parse RSS feed")
        self.status = status
