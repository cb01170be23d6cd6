from __future__ import annotations

import re

__all__ = [
    "ACTIONABLE_ERROR_PATTERN",
    "format_actionable_error",
    "field_location",
    "is_actionable_message",
    "RecordsmithError",
    "SchemaValidationError",
    "ResourceLimitExceeded",
    "GenerationError",
    "InternalError",
]

ACTIONABLE_ERROR_PATTERN = re.compile(r"^[^\n]+: .+\. Fix: .+\.$", re.DOTALL)


def _clean(value: object, default: str) -> str:
    text = str(value).strip()
    return text if text else default


def format_actionable_error(location: str, issue: str, hint: str) -> str:
    clean_location = _clean(location, "Schema")
    clean_issue = _clean(issue, "unknown issue").rstrip(".")
    clean_hint = _clean(hint, "review input and retry").rstrip(".")
    return f"{clean_location}: {clean_issue}. Fix: {clean_hint}."


def is_actionable_message(message: str) -> bool:
    return bool(ACTIONABLE_ERROR_PATTERN.match(str(message).strip()))


def field_location(path: str) -> str:
    return f"Field '{path}'" if path else "Schema"


class RecordsmithError(Exception):
    """Base class for every error surfaced to callers of the engine."""

    category = "error"


class SchemaValidationError(RecordsmithError, ValueError):
    """A schema node breaks a structural or cross-field rule."""

    category = "validation"

    def __init__(self, path: str, issue: str, hint: str):
        self.path = path
        self.issue = issue
        super().__init__(format_actionable_error(field_location(path), issue, hint))


class ResourceLimitExceeded(RecordsmithError, ValueError):
    """Field-count or projected item-count ceiling breached before generation."""

    category = "limit"

    def __init__(
        self,
        issue: str,
        hint: str,
        *,
        total: int,
        limit: int,
        per_record: int | None = None,
        count: int | None = None,
    ):
        self.total = total
        self.limit = limit
        self.per_record = per_record
        self.count = count
        super().__init__(format_actionable_error("Resource limits", issue, hint))


class GenerationError(RecordsmithError, ValueError):
    """A validated field could not produce a value at runtime."""

    category = "generation"

    def __init__(self, path: str, issue: str, hint: str):
        self.path = path
        self.issue = issue
        super().__init__(format_actionable_error(field_location(path), issue, hint))


class InternalError(RecordsmithError, RuntimeError):
    category = "internal"

    def __init__(self, path: str, issue: str):
        self.path = path
        super().__init__(
            format_actionable_error(
                field_location(path),
                issue,
                "report this schema together with the message; it is not caused by the input",
            )
        )
