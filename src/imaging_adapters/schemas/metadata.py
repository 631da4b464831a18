"""Adapter metadata schema.

Plugins attach an opaque key/value bag to every adapter type they declare.
``AdapterMetadata`` narrows that bag to the handful of keys the registry
understands, validating each key on its own so one malformed value does not
hide the others.
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, Mapping, Optional

from pydantic import ConfigDict, Field, TypeAdapter, ValidationError

from .base import SchemaBase

IS_INTERNAL = "isInternal"
PRIM_TYPE_NAME = "primTypeName"
API_SCHEMA_NAME = "apiSchemaName"
INCLUDE_DERIVED_PRIM_TYPES = "includeDerivedPrimTypes"
INCLUDE_SCHEMA_FAMILY = "includeSchemaFamily"

_BOOL = TypeAdapter(bool)
_STR = TypeAdapter(str)

_FIELD_VALIDATORS: Dict[str, TypeAdapter] = {
    IS_INTERNAL: _BOOL,
    PRIM_TYPE_NAME: _STR,
    API_SCHEMA_NAME: _STR,
    INCLUDE_DERIVED_PRIM_TYPES: _BOOL,
    INCLUDE_SCHEMA_FAMILY: _BOOL,
}


class AdapterMetadata(SchemaBase):
    """Typed view of the metadata a plugin declares for one adapter type.

    Every field is optional. Keys that are present but hold a value of the
    wrong type are left unset and listed in ``invalid_fields`` (by their
    manifest key) so callers can report them at the point where the value
    matters.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=False, frozen=True)

    is_internal: Optional[bool] = Field(default=None, alias=IS_INTERNAL)
    prim_type_name: Optional[str] = Field(default=None, alias=PRIM_TYPE_NAME)
    api_schema_name: Optional[str] = Field(default=None, alias=API_SCHEMA_NAME)
    include_derived_prim_types: Optional[bool] = Field(
        default=None, alias=INCLUDE_DERIVED_PRIM_TYPES
    )
    include_schema_family: Optional[bool] = Field(default=None, alias=INCLUDE_SCHEMA_FAMILY)
    invalid_fields: FrozenSet[str] = Field(default_factory=frozenset)

    @classmethod
    def from_bag(cls, bag: Optional[Mapping[str, Any]]) -> "AdapterMetadata":
        """Build metadata from a raw key/value bag, never raising on bad values."""
        values: Dict[str, Any] = {}
        invalid = set()
        for key, validator in _FIELD_VALIDATORS.items():
            if not bag or key not in bag:
                continue
            try:
                values[key] = validator.validate_python(bag[key], strict=True)
            except ValidationError:
                invalid.add(key)
        return cls(**values, invalid_fields=frozenset(invalid))

    def is_invalid(self, key: str) -> bool:
        return key in self.invalid_fields

    def get(self, key: str) -> Any:
        """Return the validated value stored under a manifest key."""
        field_name = _ALIAS_TO_FIELD[key]
        return getattr(self, field_name)


_ALIAS_TO_FIELD = {
    field.alias: name
    for name, field in AdapterMetadata.model_fields.items()
    if field.alias is not None
}
