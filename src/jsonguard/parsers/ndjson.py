"""NDJSON — one independent JSON document per line.

Two consumption styles over the same line handling:

    records = parse_ndjson(text, schema)      # list, fails on first bad line

    for record in stream_ndjson(text, schema):  # lazy, one line per next()
        handle(record)

Blank lines are skipped but still counted, so the line number in an
NdjsonLineError always matches what an editor shows.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Iterator, TypeVar

from ..errors import NdjsonLineError
from ..schemas.base import Schema
from .json_parser import safe_json_parse
from .options import JsonParseOptions, OptionsLike

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Whitespace plus U+FEFF, the set JS String.prototype.trim() removes
_TRIM_RE = re.compile(r"^[\s\ufeff]+|[\s\ufeff]+$")


def iter_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, stripped_line)`` for every non-blank line."""
    for index, raw in enumerate(text.replace("\r\n", "\n").split("\n"), start=1):
        line = _TRIM_RE.sub("", raw)
        if line:
            yield index, line


def _parse_line(line_number: int, line: str, schema: Schema[T] | None, opts: JsonParseOptions) -> T | Any:
    try:
        return safe_json_parse(line, schema, opts)
    except Exception as exc:
        logger.debug("NDJSON line %d rejected: %s", line_number, exc)
        raise NdjsonLineError(line_number, exc) from exc


def parse_ndjson(
    text: str,
    schema: Schema[T] | None = None,
    options: OptionsLike = None,
) -> list[T | Any]:
    """Parse every record eagerly; abort with NdjsonLineError on the first bad line."""
    opts = JsonParseOptions.coerce(options)
    return [_parse_line(n, line, schema, opts) for n, line in iter_lines(text)]


def stream_ndjson(
    text: str,
    schema: Schema[T] | None = None,
    options: OptionsLike = None,
) -> Iterator[T | Any]:
    """Yield records one per ``next()``.

    A bad line raises NdjsonLineError from the ``next()`` that reaches it;
    records yielded before it are unaffected. The generator is one-shot and
    may be abandoned or ``close()``d at any point.
    """
    opts = JsonParseOptions.coerce(options)
    for n, line in iter_lines(text):
        yield _parse_line(n, line, schema, opts)
