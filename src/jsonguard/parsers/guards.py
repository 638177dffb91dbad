"""The three gates that run before a schema ever sees the value.

    text ──► check_size ──► deserialize ──► check_pollution ──► schema

Each gate raises a JsonGuardError subclass; none of them mutate anything.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from ..errors import ParseError, PollutionError, SizeLimitError

logger = logging.getLogger(__name__)

# Keys that let a JS consumer of the parsed value reach shared prototypes.
DANGEROUS_KEYS: frozenset[str] = frozenset({"__proto__", "constructor", "prototype"})


def byte_length(text: str) -> int:
    """UTF-8 encoded length of text (not the character count)."""
    return len(text.encode("utf-8", errors="surrogatepass"))


def check_size(text: str, max_size: int) -> None:
    size = byte_length(text)
    if size > max_size:
        logger.debug("Rejected JSON payload: %d bytes > limit %d", size, max_size)
        raise SizeLimitError(limit=max_size, size=size)


def _reject_constant(name: str) -> Any:
    # json.loads accepts NaN/Infinity by default; standard JSON does not.
    raise ValueError(f"Unexpected token {name}")


def deserialize(text: str) -> Any:
    """json.loads with every failure mode normalised to ParseError."""
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        raise ParseError(str(exc) or type(exc).__name__) from exc


def check_pollution(value: Any) -> None:
    """Reject a dict whose own top-level keys include a dangerous key.

    Only the top level of a dict is inspected. Lists, primitives and nested
    objects are never scanned, so ``[{"__proto__": 1}]`` or
    ``{"a": {"constructor": 1}}`` pass this gate.
    """
    if not isinstance(value, dict):
        return
    found = sorted(DANGEROUS_KEYS.intersection(value))
    if found:
        logger.debug("Rejected JSON object with pollution keys: %s", ", ".join(found))
        raise PollutionError(found)
