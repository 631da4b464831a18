"""Schema exports."""

from .base import SchemaBase, Severity
from .errors import IssueCode, RegistryIssue
from .manifest import PluginInfoDocument, PluginManifest
from .metadata import (
    API_SCHEMA_NAME,
    INCLUDE_DERIVED_PRIM_TYPES,
    INCLUDE_SCHEMA_FAMILY,
    IS_INTERNAL,
    PRIM_TYPE_NAME,
    AdapterMetadata,
)

__all__ = [
    "SchemaBase",
    "Severity",
    "IssueCode",
    "RegistryIssue",
    "PluginInfoDocument",
    "PluginManifest",
    "AdapterMetadata",
    "API_SCHEMA_NAME",
    "INCLUDE_DERIVED_PRIM_TYPES",
    "INCLUDE_SCHEMA_FAMILY",
    "IS_INTERNAL",
    "PRIM_TYPE_NAME",
]
