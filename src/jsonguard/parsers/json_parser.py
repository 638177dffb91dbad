"""Safe JSON parsing — size ceiling, pollution guard, optional schema.

Usage::

    from jsonguard.parsers.json_parser import safe_json_parse, create_json_parser

    data = safe_json_parse(body)                        # raises on bad input
    manifest = safe_json_parse(body, manifest_schema, {"max_size": 1 << 20})

    parse_manifest = create_json_parser(manifest_schema, {"max_size": 1 << 20})
    manifest = parse_manifest(body)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar, Union

from ..errors import ValidationError, describe_error
from ..schemas.base import Schema
from .guards import check_pollution, check_size, deserialize
from .options import JsonParseOptions, OptionsLike, merge_options

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ParseSuccess(Generic[T]):
    data: T
    success: Literal[True] = True


@dataclass(frozen=True)
class ParseFailure:
    error: str
    success: Literal[False] = False


ParseResult = Union[ParseSuccess[T], ParseFailure]


def safe_json_parse(
    text: str,
    schema: Schema[T] | None = None,
    options: OptionsLike = None,
) -> T | Any:
    """Parse untrusted JSON text, raising a JsonGuardError on the first failed gate.

    Gates, in order: byte size, ``json.loads``, top-level pollution keys,
    then ``schema.safe_parse`` when a schema is given. Without a schema the
    deserialized value is returned unchanged.
    """
    opts = JsonParseOptions.coerce(options)

    check_size(text, opts.effective_max_size)
    value = deserialize(text)
    if not opts.effective_allow_prototype:
        check_pollution(value)

    if schema is None:
        return value

    result = schema.safe_parse(value)
    if not result.success:
        raise ValidationError(result.error.issues)
    return result.data


def try_json_parse(
    text: str,
    schema: Schema[T] | None = None,
    options: OptionsLike = None,
) -> T | Any | None:
    """Like safe_json_parse, but return None instead of raising."""
    try:
        return safe_json_parse(text, schema, options)
    except Exception as exc:
        logger.debug("try_json_parse rejected input: %s", exc)
        return None


def parse_json_with_result(
    text: str,
    schema: Schema[T] | None = None,
    options: OptionsLike = None,
) -> ParseResult[Any]:
    """Like safe_json_parse, but report the outcome as a ParseResult."""
    try:
        return ParseSuccess(safe_json_parse(text, schema, options))
    except Exception as exc:
        return ParseFailure(describe_error(exc))


@dataclass(frozen=True)
class JsonParser(Generic[T]):
    """A schema and default options bound together; call it like a function.

    Call-time options override the bound defaults key by key. Instances are
    immutable and can be shared between threads.
    """

    schema: Schema[T] | None = None
    default_options: JsonParseOptions = JsonParseOptions()

    def __call__(self, text: str, options: OptionsLike = None) -> T | Any:
        return safe_json_parse(text, self.schema, merge_options(self.default_options, options))


def create_json_parser(
    schema: Schema[T] | None = None,
    default_options: OptionsLike = None,
) -> JsonParser[T]:
    return JsonParser(schema, JsonParseOptions.coerce(default_options))
