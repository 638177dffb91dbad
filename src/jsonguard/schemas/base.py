"""Schema capability Protocol and the result shapes it returns.

The parsing layer never builds schemas; it only calls one that a caller
hands in. Anything with ``safe_parse`` and ``parse`` qualifies, no
inheritance required:

    class NonEmpty:
        def safe_parse(self, value):
            if value:
                return SafeParseSuccess(value)
            return SafeParseFailure(SchemaIssues([Issue((), "must not be empty")]))

        def parse(self, value):
            ...
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Literal, Protocol, TypeVar, Union, runtime_checkable

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

PathPart = Union[str, int]


@dataclass(frozen=True)
class Issue:
    """One problem reported by a schema, located by its path into the value."""

    path: tuple[PathPart, ...]
    message: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))


@dataclass(frozen=True)
class SchemaIssues:
    issues: list[Issue] = field(default_factory=list)


@dataclass(frozen=True)
class SafeParseSuccess(Generic[T]):
    data: T
    success: Literal[True] = True


@dataclass(frozen=True)
class SafeParseFailure:
    error: SchemaIssues
    success: Literal[False] = False


SafeParseResult = Union[SafeParseSuccess[T], SafeParseFailure]


@runtime_checkable
class Schema(Protocol[T_co]):
    """Validation capability supplied by callers."""

    def safe_parse(self, value: Any) -> SafeParseSuccess[T_co] | SafeParseFailure:
        """Validate value; report issues instead of raising."""
        ...

    def parse(self, value: Any) -> T_co:
        """Validate value and return it, raising on failure."""
        ...
