"""Schema capability backed by pydantic.

Wraps any pydantic model or annotated type so it can be handed to the
parsers::

    class Event(BaseModel):
        level: str
        message: str

    events = parse_ndjson(text, PydanticSchema(Event))
"""
from __future__ import annotations

from typing import Any, Generic, TypeVar

import pydantic
from pydantic import TypeAdapter

from ..errors import ValidationError
from .base import Issue, SafeParseFailure, SafeParseSuccess, SchemaIssues

T = TypeVar("T")


def issues_from_pydantic(exc: pydantic.ValidationError) -> list[Issue]:
    """Convert pydantic error entries (``loc``/``msg``) into Issues."""
    return [Issue(err["loc"], err["msg"]) for err in exc.errors()]


class PydanticSchema(Generic[T]):
    """Adapt a pydantic model or type to the Schema Protocol.

    Args:
        type_:  A BaseModel subclass or any type pydantic can validate
                (``list[int]``, ``dict[str, Model]``, ...).
        name:   Registry name; defaults to the type's ``__name__``.
        strict: Forwarded to pydantic; disables type coercion.
    """

    def __init__(self, type_: Any, name: str | None = None, strict: bool | None = None) -> None:
        self._adapter: TypeAdapter[T] = TypeAdapter(type_)
        self._strict = strict
        self.name = name or getattr(type_, "__name__", repr(type_))

    def __repr__(self) -> str:
        return f"PydanticSchema({self.name})"

    def safe_parse(self, value: Any) -> SafeParseSuccess[T] | SafeParseFailure:
        try:
            data = self._adapter.validate_python(value, strict=self._strict)
        except pydantic.ValidationError as exc:
            return SafeParseFailure(SchemaIssues(issues_from_pydantic(exc)))
        return SafeParseSuccess(data)

    def parse(self, value: Any) -> T:
        result = self.safe_parse(value)
        if not result.success:
            raise ValidationError(result.error.issues)
        return result.data
