"""Plugin manifest schemas."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from .base import SchemaBase

BASES_KEY = "bases"
SCHEMA_IDENTIFIER_KEY = "schemaIdentifier"
PYTHON_CLASS_KEY = "pythonClass"


class PluginManifest(SchemaBase):
    """One plugin entry of a ``plugInfo`` document."""

    name: str
    module: Optional[str] = Field(default=None)
    types: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    path: Optional[str] = Field(default=None)

    @field_validator("name")
    @classmethod
    def _name_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("Plugin name must not be empty")
        return value

    @field_validator("types", mode="before")
    @classmethod
    def _validate_types(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError("Plugin types must be a mapping of type name to metadata")
        types: Dict[str, Any] = {}
        for type_name, entry in value.items():
            if entry is None:
                entry = {}
            if not isinstance(entry, dict):
                raise ValueError(f"Metadata for type '{type_name}' must be a mapping")
            bases = entry.get(BASES_KEY, [])
            if not isinstance(bases, list) or not all(isinstance(b, str) for b in bases):
                raise ValueError(f"Bases for type '{type_name}' must be a list of strings")
            types[type_name] = entry
        return types

    def bases_for(self, type_name: str) -> List[str]:
        return list(self.types.get(type_name, {}).get(BASES_KEY, []))


class PluginInfoDocument(SchemaBase):
    """Top-level shape of a ``plugInfo.yaml`` / ``plugInfo.json`` file."""

    plugins: List[PluginManifest] = Field(default_factory=list)
