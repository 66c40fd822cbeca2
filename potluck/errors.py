"""Error types raised by the potluck core and its collaborators."""

from __future__ import annotations

from enum import Enum


class PotluckError(Exception):
    """Base class for potluck errors."""


class ValidationIssue(str, Enum):
    MISSING_DISH_NAME = "missing_dish_name"
    MISSING_GUEST_NAME = "missing_guest_name"


class ValidationError(PotluckError):
    """Input could not be turned into a dish record.

    Carries every violation found, not just the first one.
    """

    def __init__(self, issues: list[tuple[ValidationIssue, str]]) -> None:
        self.issues = list(issues)
        super().__init__("\n".join(self.messages))

    @property
    def kinds(self) -> list[ValidationIssue]:
        return [kind for kind, _ in self.issues]

    @property
    def messages(self) -> list[str]:
        return [message for _, message in self.issues]


class SourceUnavailable(PotluckError):
    """A remote fetch or issue listing failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseSkipped(PotluckError):
    """An external record could not be parsed and should be dropped."""


class ReadOnlyCollection(PotluckError):
    """The collection is owned by a remote source and cannot be edited locally."""
