"""Exception taxonomy for the safe JSON / NDJSON layer.

Every guard raises a subclass of JsonGuardError, so callers that only care
whether untrusted input was accepted can catch the base class:

    try:
        manifest = safe_json_parse(body, schema=manifest_schema)
    except JsonGuardError as exc:
        logger.warning("Rejected registry response: %s", exc)
"""
from __future__ import annotations

from typing import Any, Sequence


class JsonGuardError(ValueError):
    """Base class for all rejections of untrusted JSON text."""


class SizeLimitError(JsonGuardError):
    """Input text is larger (in UTF-8 bytes) than the configured ceiling."""

    def __init__(self, limit: int, size: int) -> None:
        super().__init__(f"JSON string exceeds maximum size limit of {limit} bytes")
        self.limit = limit
        self.size = size


class ParseError(JsonGuardError):
    """Input text is not valid JSON."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Failed to parse JSON: {detail}")
        self.detail = detail


class PollutionError(JsonGuardError):
    """Top-level object carries a prototype-pollution key."""

    def __init__(self, keys: Sequence[str]) -> None:
        super().__init__("JSON contains potentially malicious prototype pollution keys")
        self.keys = list(keys)


class ValidationError(JsonGuardError):
    """A schema rejected the parsed value.

    ``issues`` holds the schema's Issue objects in the order it reported them.
    """

    def __init__(self, issues: Sequence[Any]) -> None:
        self.issues = list(issues)
        super().__init__(f"Validation failed: {format_issues(self.issues)}")


class NdjsonLineError(JsonGuardError):
    """One NDJSON line failed; wraps the underlying error with its position."""

    def __init__(self, line_number: int, cause: BaseException) -> None:
        super().__init__(
            f"Failed to parse NDJSON at line {line_number}: {describe_error(cause)}"
        )
        self.line_number = line_number
        self.cause = cause


def format_issues(issues: Sequence[Any]) -> str:
    """Render issues as ``a.b: message, c: message``."""
    return ", ".join(
        f"{'.'.join(str(part) for part in issue.path)}: {issue.message}"
        for issue in issues
    )


def describe_error(exc: BaseException) -> str:
    """Return a human-readable message for any raised exception.

    Used by both the result adapter and the NDJSON engine so they agree on
    what an exception without a message looks like.
    """
    message = str(exc)
    return message if message else "Unknown error"
