"""Tests for the Schema protocol, the pydantic adapter, npm schemas and the registry."""
from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from pydantic import BaseModel

from jsonguard.errors import NdjsonLineError, ValidationError
from jsonguard.parsers.json_parser import safe_json_parse
from jsonguard.parsers.ndjson import parse_ndjson
from jsonguard.schemas.base import Issue, Schema
from jsonguard.schemas.npm import (
    PackageManifest,
    Packument,
    manifest_schema,
    packument_schema,
    validate_package_name,
)
from jsonguard.schemas.pydantic_schema import PydanticSchema
from jsonguard.schemas.registry import SchemaRegistry, default_registry


class Event(BaseModel):
    level: str
    count: int


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------

class TestSchemaProtocol:
    def test_duck_typed_schema(self, has_name_schema) -> None:
        assert isinstance(has_name_schema, Schema)

    def test_pydantic_schema_is_schema(self) -> None:
        assert isinstance(PydanticSchema(Event), Schema)

    def test_missing_method_not_schema(self) -> None:
        class OnlySafe:
            def safe_parse(self, value: Any) -> Any: ...

        assert not isinstance(OnlySafe(), Schema)

    def test_issue_path_is_tuple(self) -> None:
        assert Issue(["a", 0], "bad").path == ("a", 0)


# ---------------------------------------------------------------------------
# PydanticSchema
# ---------------------------------------------------------------------------

class TestPydanticSchema:
    def test_safe_parse_success(self) -> None:
        result = PydanticSchema(Event).safe_parse({"level": "INFO", "count": 3})
        assert result.success
        assert result.data == Event(level="INFO", count=3)

    def test_safe_parse_failure_issues(self) -> None:
        result = PydanticSchema(Event).safe_parse({"level": "INFO", "count": "many"})
        assert not result.success
        assert [i.path for i in result.error.issues] == [("count",)]

    def test_parse_raises(self) -> None:
        with pytest.raises(ValidationError, match="^Validation failed: level: "):
            PydanticSchema(Event).parse({"count": 1})

    def test_strict_disables_coercion(self) -> None:
        assert PydanticSchema(Event).safe_parse({"level": "x", "count": "1"}).success
        assert not PydanticSchema(Event, strict=True).safe_parse({"level": "x", "count": "1"}).success

    def test_generic_type(self) -> None:
        schema = PydanticSchema(list[int], name="ints")
        assert schema.name == "ints"
        assert safe_json_parse("[1, 2]", schema) == [1, 2]

    def test_nested_path_in_message(self) -> None:
        schema = PydanticSchema(dict[str, list[Event]])
        with pytest.raises(ValidationError, match=r"batch\.1\.count: "):
            safe_json_parse('{"batch":[{"level":"a","count":1},{"level":"b","count":"x"}]}', schema)

    def test_ndjson_with_pydantic(self) -> None:
        text = '{"level":"INFO","count":1}\n{"level":"WARN","count":2}'
        assert parse_ndjson(text, PydanticSchema(Event)) == [
            Event(level="INFO", count=1), Event(level="WARN", count=2),
        ]

    def test_ndjson_validation_line(self) -> None:
        with pytest.raises(NdjsonLineError, match="at line 2: Validation failed: count"):
            parse_ndjson('{"level":"a","count":1}\n{"level":"b"}', PydanticSchema(Event))


# ---------------------------------------------------------------------------
# npm schemas
# ---------------------------------------------------------------------------

class TestPackageName:
    @pytest.mark.parametrize("name", ["left-pad", "@scope/pkg", "a.b_c~d", "lodash"])
    def test_valid(self, name: str) -> None:
        assert validate_package_name(name) == name

    @pytest.mark.parametrize("name", [
        "", " pad", ".hidden", "_private", "LeftPad", "has space", "a" * 215, "pkg/sub", "@scope/",
    ])
    def test_invalid(self, name: str) -> None:
        with pytest.raises(ValueError):
            validate_package_name(name)


class TestNpmSchemas:
    def test_manifest_accepts(self, manifest_doc) -> None:
        manifest = safe_json_parse(json.dumps(manifest_doc), manifest_schema)
        assert isinstance(manifest, PackageManifest)
        assert manifest.dev_dependencies == {"tape": "*"}
        assert manifest.model_extra == {"keywords": ["pad"]}

    def test_manifest_rejects_bad_name(self, manifest_doc) -> None:
        manifest_doc["name"] = "Bad Name"
        with pytest.raises(ValidationError, match="^Validation failed: name: "):
            safe_json_parse(json.dumps(manifest_doc), manifest_schema)

    def test_manifest_requires_version(self) -> None:
        with pytest.raises(ValidationError, match="version: Field required"):
            safe_json_parse('{"name":"pkg"}', manifest_schema)

    def test_manifest_pollution_still_guarded(self, manifest_doc) -> None:
        manifest_doc["constructor"] = {}
        with pytest.raises(Exception, match="prototype pollution"):
            safe_json_parse(json.dumps(manifest_doc), manifest_schema)

    def test_packument(self, manifest_doc) -> None:
        doc = {
            "name": "@scope/left-pad",
            "dist-tags": {"latest": "1.3.0"},
            "versions": {"1.3.0": manifest_doc},
            "time": {"1.3.0": "2018-04-09T00:00:00.000Z"},
        }
        packument = safe_json_parse(json.dumps(doc), packument_schema)
        assert isinstance(packument, Packument)
        assert packument.latest() is not None
        assert packument.latest().version == "1.3.0"

    def test_packument_bad_version_entry(self) -> None:
        doc = {"name": "pkg", "versions": {"1.0.0": {"name": "pkg"}}}
        with pytest.raises(ValidationError, match=r"versions\.1\.0\.0\.version"):
            safe_json_parse(json.dumps(doc), packument_schema)

    def test_latest_missing(self) -> None:
        assert Packument(name="pkg").latest() is None


# ---------------------------------------------------------------------------
# SchemaRegistry
# ---------------------------------------------------------------------------

class TestSchemaRegistry:
    def test_register_and_get(self, has_name_schema) -> None:
        reg = SchemaRegistry()
        reg.register("named", has_name_schema)
        assert reg.get("named") is has_name_schema
        assert "named" in reg
        assert len(reg) == 1

    def test_register_rejects_non_schema(self) -> None:
        reg = SchemaRegistry()
        with pytest.raises(TypeError):
            reg.register("bad", object())  # type: ignore[arg-type]

    def test_get_missing(self) -> None:
        assert SchemaRegistry().get("nope") is None

    def test_names_sorted(self, has_name_schema, has_int_id_schema) -> None:
        reg = SchemaRegistry()
        reg.register("z", has_name_schema)
        reg.register("a", has_int_id_schema)
        assert reg.names() == ["a", "z"]

    def test_default_registry_has_npm_schemas(self) -> None:
        assert "npm-manifest" in default_registry
        assert "npm-packument" in default_registry

    def test_discover_loads_entry_points(self, has_name_schema) -> None:
        ep = MagicMock()
        ep.name = "third-party"
        ep.load.return_value = has_name_schema
        with patch("importlib.metadata.entry_points", return_value=[ep]):
            reg = SchemaRegistry()
            assert reg.discover() == 1
        assert reg.get("third-party") is has_name_schema

    def test_discover_instantiates_classes(self) -> None:
        class EventSchema(PydanticSchema):
            def __init__(self) -> None:
                super().__init__(Event)

        ep = MagicMock()
        ep.name = "events"
        ep.load.return_value = EventSchema
        with patch("importlib.metadata.entry_points", return_value=[ep]):
            reg = SchemaRegistry()
            reg.discover()
        assert isinstance(reg.get("events"), EventSchema)

    def test_discover_skips_broken_plugins(self) -> None:
        broken = MagicMock()
        broken.name = "broken"
        broken.load.side_effect = ImportError("missing dependency")
        with patch("importlib.metadata.entry_points", return_value=[broken]):
            reg = SchemaRegistry()
            assert reg.discover() == 0
        assert reg.names() == []
