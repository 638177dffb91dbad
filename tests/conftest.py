"""Shared pytest fixtures for jsonguard tests."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from jsonguard.schemas.base import Issue, SafeParseFailure, SafeParseSuccess, SchemaIssues


class PredicateSchema:
    """Minimal Schema: accepts values for which the predicate holds."""

    def __init__(self, predicate: Callable[[Any], bool], path: tuple[str, ...] = ("root",)) -> None:
        self._predicate = predicate
        self._path = path

    def safe_parse(self, value: Any) -> SafeParseSuccess[Any] | SafeParseFailure:
        if self._predicate(value):
            return SafeParseSuccess(value)
        return SafeParseFailure(SchemaIssues([Issue(self._path, "Validation failed")]))

    def parse(self, value: Any) -> Any:
        if self._predicate(value):
            return value
        raise ValueError("Validation failed")


class IssuesSchema:
    """Schema that always rejects with a fixed list of issues."""

    def __init__(self, issues: list[Issue]) -> None:
        self._issues = issues
        self.calls = 0

    def safe_parse(self, value: Any) -> SafeParseFailure:
        self.calls += 1
        return SafeParseFailure(SchemaIssues(self._issues))

    def parse(self, value: Any) -> Any:
        raise ValueError("Validation failed")


class ExplodingSchema:
    """Schema whose safe_parse raises instead of reporting issues."""

    def __init__(self, exc: BaseException) -> None:
        self._exc = exc

    def safe_parse(self, value: Any) -> Any:
        raise self._exc

    def parse(self, value: Any) -> Any:
        raise self._exc


@pytest.fixture()
def make_schema():
    """Return a factory for predicate-based schemas."""
    return PredicateSchema


@pytest.fixture()
def has_name_schema() -> PredicateSchema:
    return PredicateSchema(lambda d: isinstance(d, dict) and "name" in d)


@pytest.fixture()
def has_int_id_schema() -> PredicateSchema:
    return PredicateSchema(lambda d: isinstance(d, dict) and isinstance(d.get("id"), int))


@pytest.fixture()
def tmp_text_file(tmp_path: Path):
    """Return a factory that writes text to a temporary file."""

    def _make(text: str, name: str = "input.json") -> Path:
        p = tmp_path / name
        p.write_text(text, encoding="utf-8")
        return p

    return _make


@pytest.fixture()
def event_lines() -> list[str]:
    return [
        json.dumps({"timestamp": "2025-08-01T10:00:00", "level": "INFO", "message": "startup"}),
        json.dumps({"timestamp": "2025-08-01T10:00:01", "level": "ERROR", "message": "disk full"}),
        json.dumps({"timestamp": "2025-08-01T10:00:02", "level": "WARN", "message": "retry"}),
    ]


@pytest.fixture()
def manifest_doc() -> dict[str, Any]:
    return {
        "name": "@scope/left-pad",
        "version": "1.3.0",
        "description": "String left pad",
        "license": "WTFPL",
        "dependencies": {"lodash": "^4.17.21"},
        "devDependencies": {"tape": "*"},
        "scripts": {"test": "tape test.js"},
        "keywords": ["pad"],
    }


@pytest.fixture()
def make_issues_schema():
    """Return a factory for schemas that always fail with given (path, message) pairs."""

    def _make(*pairs: tuple[list[Any], str]) -> IssuesSchema:
        return IssuesSchema([Issue(path, message) for path, message in pairs])

    return _make


@pytest.fixture()
def exploding_schema():
    """Return a factory for schemas whose safe_parse raises."""
    return ExplodingSchema
