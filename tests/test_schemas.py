"""Tests for schema models."""

import pytest
from pydantic import ValidationError

from imaging_adapters.schemas import AdapterMetadata, IssueCode, PluginManifest, RegistryIssue, Severity


class TestAdapterMetadata:
    """Tests for AdapterMetadata.from_bag."""

    def test_recognised_keys(self):
        """Test every recognised key is read under its manifest name."""
        metadata = AdapterMetadata.from_bag({
            "isInternal": True,
            "primTypeName": "Sphere",
            "includeDerivedPrimTypes": False,
            "includeSchemaFamily": True,
            "bases": ["PrimAdapter"],
        })

        assert metadata.is_internal is True
        assert metadata.prim_type_name == "Sphere"
        assert metadata.api_schema_name is None
        assert metadata.include_derived_prim_types is False
        assert metadata.include_schema_family is True
        assert metadata.invalid_fields == frozenset()

    def test_absent_keys_are_none(self):
        """Test an empty or missing bag yields no values and no errors."""
        for bag in ({}, None):
            metadata = AdapterMetadata.from_bag(bag)
            assert metadata.prim_type_name is None
            assert metadata.is_internal is None
            assert metadata.invalid_fields == frozenset()

    @pytest.mark.parametrize(
        "key, value",
        [
            ("isInternal", "true"),
            ("isInternal", 1),
            ("includeDerivedPrimTypes", "yes"),
            ("includeSchemaFamily", 0),
            ("primTypeName", 3),
            ("apiSchemaName", ["CollectionAPI"]),
        ],
    )
    def test_wrong_types_are_flagged(self, key, value):
        """Test wrong-typed values are flagged rather than coerced."""
        metadata = AdapterMetadata.from_bag({key: value})

        assert metadata.is_invalid(key)
        assert metadata.get(key) is None

    def test_one_bad_value_does_not_hide_others(self):
        """Test validation is per key."""
        metadata = AdapterMetadata.from_bag({"primTypeName": "Cone", "includeSchemaFamily": "x"})

        assert metadata.get("primTypeName") == "Cone"
        assert metadata.invalid_fields == frozenset({"includeSchemaFamily"})

    def test_empty_api_schema_name_kept(self):
        """Test an empty apiSchemaName stays empty (keyless adapters)."""
        assert AdapterMetadata.from_bag({"apiSchemaName": ""}).api_schema_name == ""

    def test_whitespace_is_preserved(self):
        """Test names are kept exactly as declared."""
        metadata = AdapterMetadata.from_bag({"primTypeName": " Sphere ", "apiSchemaName": "   "})

        assert metadata.prim_type_name == " Sphere "
        assert metadata.api_schema_name == "   "

    def test_frozen(self):
        """Test metadata cannot be modified after validation."""
        metadata = AdapterMetadata.from_bag({"primTypeName": "Sphere"})
        with pytest.raises(ValidationError):
            metadata.prim_type_name = "Cube"


class TestPluginManifest:
    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            PluginManifest(name="")

    def test_bases_must_be_strings(self):
        with pytest.raises(ValidationError):
            PluginManifest(name="p", types={"T": {"bases": [1]}})

    def test_input_types_not_modified(self):
        types = {"Bare": None, "T": {"bases": ["PrimAdapter"]}}

        manifest = PluginManifest(name="p", types=types)

        assert manifest.types["Bare"] == {}
        assert types == {"Bare": None, "T": {"bases": ["PrimAdapter"]}}


class TestRegistryIssue:
    def test_defaults(self):
        issue = RegistryIssue(code=IssueCode.ADAPTER_CONFLICT, message="conflict")

        assert issue.severity == Severity.ERROR
        assert issue.adapter_type is None
        assert issue.key is None
        assert IssueCode.ADAPTER_CONFLICT == "adapter_conflict"

    def test_issue_codes(self):
        assert {code.value for code in IssueCode} == {
            "plugin_not_found",
            "plugin_disabled",
            "metadata_missing",
            "metadata_corrupted",
            "adapter_conflict",
            "plugin_load_failed",
            "factory_missing",
            "instantiation_failed",
        }
