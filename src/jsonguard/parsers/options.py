"""Per-call parse options and the defaults/overrides merge."""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Union

DEFAULT_MAX_SIZE = 10 * 1024 * 1024


@dataclass(frozen=True)
class JsonParseOptions:
    """Options accepted by every parse entry point.

    ``None`` means "not set", so a bound default is only replaced by an
    override that actually sets the key. An override of ``None`` therefore
    keeps the bound default rather than restoring the built-in one; to get
    the built-in ceiling back, pass ``max_size=DEFAULT_MAX_SIZE`` explicitly.

    Attributes:
        max_size:         Byte ceiling for the UTF-8 encoded input
                          (default 10 MiB).
        allow_prototype:  Skip the top-level dangerous-key check.
    """

    max_size: int | None = None
    allow_prototype: bool | None = None

    @property
    def effective_max_size(self) -> int:
        return DEFAULT_MAX_SIZE if self.max_size is None else self.max_size

    @property
    def effective_allow_prototype(self) -> bool:
        return bool(self.allow_prototype)

    @classmethod
    def coerce(cls, value: "OptionsLike") -> "JsonParseOptions":
        """Accept an options object, a plain mapping, or None."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            known = {f.name for f in fields(cls)}
            unknown = set(value) - known
            if unknown:
                raise TypeError(f"Unknown parse option(s): {', '.join(sorted(unknown))}")
            return cls(**dict(value))
        raise TypeError(f"Expected JsonParseOptions or mapping, got {type(value).__name__}")


OptionsLike = Union[JsonParseOptions, Mapping[str, Any], None]


def merge_options(defaults: OptionsLike, overrides: OptionsLike) -> JsonParseOptions:
    """Shallow merge: every key set in ``overrides`` replaces the default."""
    base = JsonParseOptions.coerce(defaults)
    top = JsonParseOptions.coerce(overrides)
    merged: dict[str, Any] = {}
    for f in fields(JsonParseOptions):
        value = getattr(top, f.name)
        merged[f.name] = getattr(base, f.name) if value is None else value
    return JsonParseOptions(**merged)
