"""Imaging adapter registry.

Resolves which adapter implementation handles each prim type and API schema,
based on metadata declared by plugins, and constructs adapters on demand.
"""

__version__ = "0.1.0"

from .adapters import (
    API_SCHEMA_ADAPTERS,
    PRIM_ADAPTERS,
    AdapterFamily,
    AdapterKeys,
    APISchemaAdapter,
    InstanceAdapter,
    PrimAdapter,
)
from .config import are_external_plugins_enabled
from .exceptions import AdapterRegistryError, ManifestLoadError
from .plugin_registry import Plugin, PluginRegistry, get_plugin_registry
from .providers import MetadataProvider, PluginTypeGraph, TypeGraphProvider
from .registry import AdapterRegistry, get_adapter_registry
from .schema_registry import SchemaInfo, SchemaRegistry
from .schemas import AdapterMetadata, IssueCode, RegistryIssue, Severity
from .type_registry import TypeHandle, TypeRegistry

__all__ = [
    "__version__",
    "API_SCHEMA_ADAPTERS",
    "PRIM_ADAPTERS",
    "AdapterFamily",
    "AdapterKeys",
    "APISchemaAdapter",
    "InstanceAdapter",
    "PrimAdapter",
    "are_external_plugins_enabled",
    "AdapterRegistryError",
    "ManifestLoadError",
    "Plugin",
    "PluginRegistry",
    "get_plugin_registry",
    "MetadataProvider",
    "PluginTypeGraph",
    "TypeGraphProvider",
    "AdapterRegistry",
    "get_adapter_registry",
    "SchemaInfo",
    "SchemaRegistry",
    "AdapterMetadata",
    "IssueCode",
    "RegistryIssue",
    "Severity",
    "TypeHandle",
    "TypeRegistry",
]
