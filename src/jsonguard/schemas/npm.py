"""pydantic models for npm registry payloads.

``PackageManifest`` covers package.json and the per-version entries of a
packument; ``Packument`` covers the full document the registry returns for
``GET /<name>``. Unknown keys are kept, since registries add fields freely.
"""
from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .pydantic_schema import PydanticSchema

MAX_PACKAGE_NAME_LENGTH = 214

# "@scope/name" or "name"; URL-safe, lowercase, no leading "." or "_"
_NAME_RE = re.compile(r"^(?:@[a-z0-9*~-][a-z0-9*._~-]*/)?[a-z0-9~-][a-z0-9._~-]*$")


def validate_package_name(name: str) -> str:
    if not name:
        raise ValueError("name length must be greater than zero")
    if len(name) > MAX_PACKAGE_NAME_LENGTH:
        raise ValueError(f"name can no longer contain more than {MAX_PACKAGE_NAME_LENGTH} characters")
    if name != name.strip():
        raise ValueError("name cannot contain leading or trailing spaces")
    if name.startswith((".", "_")):
        raise ValueError("name cannot start with a period or underscore")
    if name.lower() != name:
        raise ValueError("name can no longer contain capital letters")
    if not _NAME_RE.match(name):
        raise ValueError("name can only contain URL-friendly characters")
    return name


class PackageManifest(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    version: str
    description: str | None = None
    main: str | None = None
    license: str | dict[str, Any] | None = None
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict, alias="devDependencies")
    peer_dependencies: dict[str, str] = Field(default_factory=dict, alias="peerDependencies")
    optional_dependencies: dict[str, str] = Field(default_factory=dict, alias="optionalDependencies")
    scripts: dict[str, str] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: str) -> str:
        return validate_package_name(v)

    @field_validator("version")
    @classmethod
    def _check_version(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("version must not be empty")
        return v


class Packument(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    dist_tags: dict[str, str] = Field(default_factory=dict, alias="dist-tags")
    versions: dict[str, PackageManifest] = Field(default_factory=dict)
    time: dict[str, str] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: str) -> str:
        return validate_package_name(v)

    def latest(self) -> PackageManifest | None:
        """Manifest the ``latest`` dist-tag points at, if present."""
        tag = self.dist_tags.get("latest")
        return self.versions.get(tag) if tag else None


manifest_schema: PydanticSchema[PackageManifest] = PydanticSchema(PackageManifest, name="npm-manifest")
packument_schema: PydanticSchema[Packument] = PydanticSchema(Packument, name="npm-packument")
