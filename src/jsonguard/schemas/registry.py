"""Schema registry — named Schema objects for the CLI and other callers.

Discovery order:
  1. Built-in npm schemas registered when the module is imported.
  2. Entry-points under the "jsonguard.schemas" group (third-party packages).
  3. Schemas explicitly registered at runtime via SchemaRegistry.register().

A third-party package exposes a schema like so:

    [project.entry-points."jsonguard.schemas"]
    event = "my_package.schemas:event_schema"
"""
from __future__ import annotations

import importlib.metadata
import logging
from typing import Any

from .base import Schema

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "jsonguard.schemas"


class SchemaRegistry:
    """Name → Schema lookup table.

    Usage::

        registry = SchemaRegistry()
        registry.discover()

        schema = registry.get("npm-manifest")
        if schema is None:
            raise ValueError("npm-manifest schema not installed")
    """

    def __init__(self) -> None:
        self._schemas: dict[str, Schema[Any]] = {}

    def register(self, name: str, schema: Schema[Any]) -> None:
        if not isinstance(schema, Schema):
            raise TypeError(f"{schema!r} does not implement Schema (safe_parse/parse)")
        self._schemas[name] = schema
        logger.debug("Registered schema: %s", name)

    def discover(self) -> int:
        """Load schemas from the 'jsonguard.schemas' entry-point group.

        Returns the number of schemas successfully loaded.
        """
        loaded = 0
        try:
            eps = importlib.metadata.entry_points(group=ENTRY_POINT_GROUP)
        except Exception as exc:
            logger.warning("Entry-point discovery failed: %s", exc)
            return 0

        for ep in eps:
            try:
                obj = ep.load()
                instance = obj() if isinstance(obj, type) else obj
                self.register(ep.name, instance)
                loaded += 1
            except Exception as exc:
                logger.warning("Failed to load schema %r: %s", ep.name, exc)

        return loaded

    def get(self, name: str) -> Schema[Any] | None:
        return self._schemas.get(name)

    def names(self) -> list[str]:
        return sorted(self._schemas)

    def __contains__(self, name: object) -> bool:
        return name in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)


def _builtin_registry() -> SchemaRegistry:
    from .npm import manifest_schema, packument_schema

    registry = SchemaRegistry()
    registry.register(manifest_schema.name, manifest_schema)
    registry.register(packument_schema.name, packument_schema)
    return registry


# Module-level singleton, pre-loaded with the npm schemas
default_registry = _builtin_registry()
