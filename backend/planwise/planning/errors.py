"""Failure kinds raised by the plan-generation pipeline."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence


class PlanGenerationError(Exception):
    """Base class for every pipeline failure."""


class GenerationConfigError(PlanGenerationError):
    """The generation credential is missing or blank."""


class GenerationEndpointError(PlanGenerationError):
    """The endpoint answered in a way that retrying another model cannot fix."""


@dataclass(frozen=True)
class Candidate:
    api_version: str
    model: str

    def __str__(self) -> str:
        return f"{self.api_version}/{self.model}"


class CandidateRequestError(PlanGenerationError):
    """A single candidate returned a non-success HTTP status."""

    def __init__(self, candidate: Candidate, status_code: int, reason: str, detail: str):
        self.candidate = candidate
        self.status_code = status_code
        self.reason = reason
        self.detail = detail
        super().__init__(f"Gemini API request failed: {status_code} {reason}. {detail}".strip())


class CandidateExhaustedError(PlanGenerationError):
    """Every (api version, model) pair was tried and none produced a reply."""

    def __init__(self, message: str, attempted: Sequence[Candidate], last_error: Optional[CandidateRequestError] = None):
        self.attempted = list(attempted)
        self.last_error = last_error
        self.status_code = last_error.status_code if last_error else None
        super().__init__(message)


class PlanParseError(PlanGenerationError):
    """The reply text is not valid JSON."""

    def __init__(self, message: str, raw_text: str):
        self.raw_text = raw_text
        super().__init__(f"Failed to parse AI response: {message}")


@dataclass(frozen=True)
class ShapeIssue:
    field: str
    expected: str
    observed: str

    def describe(self) -> str:
        if self.observed == "missing":
            return f"missing '{self.field}' field"
        return f"'{self.field}' must be {_article(self.expected)}, got {self.observed}"


class PlanShapeError(PlanGenerationError):
    """The reply parsed but does not have the plan structure.

    ``field``/``expected``/``observed`` describe the first failed check;
    ``issues`` holds every failed check in evaluation order.
    """

    def __init__(self, issues: List[ShapeIssue]):
        if not issues:
            raise ValueError("PlanShapeError requires at least one issue")
        self.issues = list(issues)
        first = self.issues[0]
        self.field = first.field
        self.expected = first.expected
        self.observed = first.observed
        super().__init__(f"Invalid plan response structure: {first.describe()}")


def _article(kind: str) -> str:
    if kind.startswith("one of"):
        return kind
    return f"an {kind}" if kind[:1] in "aeiou" else f"a {kind}"
