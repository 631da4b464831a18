"""Adapter registry facade.

``AdapterRegistry`` owns the resolved prim and API-schema adapter tables.
The tables are built once, in the constructor, and never change afterwards,
so lookups need no locking. ``AdapterRegistry.get_instance()`` returns the
process-wide registry, building it on first use.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional, Tuple

from .adapters import (
    API_SCHEMA_ADAPTERS,
    PRIM_ADAPTERS,
    AdapterKeys,
    APISchemaAdapter,
    InstanceAdapter,
    PrimAdapter,
)
from .config import are_external_plugins_enabled
from .diagnostics import IssueLog
from .factory import construct_adapter, construct_adapter_by_type
from .mapping_builder import MappingBuilder
from .plugin_registry import get_plugin_registry
from .providers import MetadataProvider, PluginTypeGraph, TypeGraphProvider
from .schemas import RegistryIssue

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Maps prim type names and API schema names to adapter implementations.

    Usage:
        registry = AdapterRegistry.get_instance()
        if registry.has_adapter("Sphere"):
            adapter = registry.construct_adapter("Sphere")

        # Or build a private registry over explicit providers
        plugins = PluginRegistry()
        plugins.register_manifest_file(Path("plugInfo.yaml"))
        registry = AdapterRegistry(PluginTypeGraph(plugins.types, plugins.schemas), plugins)
    """

    _instance: Optional["AdapterRegistry"] = None
    _instance_lock = threading.Lock()

    def __init__(
        self,
        type_graph: Optional[TypeGraphProvider] = None,
        metadata: Optional[MetadataProvider] = None,
        *,
        external_plugins_enabled: Optional[bool] = None,
    ):
        if type_graph is None or metadata is None:
            plugins = get_plugin_registry()
            if type_graph is None:
                type_graph = PluginTypeGraph(plugins.types, plugins.schemas)
            if metadata is None:
                metadata = plugins
        if external_plugins_enabled is None:
            external_plugins_enabled = are_external_plugins_enabled()

        self._metadata = metadata
        self._issues = IssueLog()
        self._construction_log = IssueLog(retain=False)

        builder = MappingBuilder(
            type_graph,
            metadata,
            self._issues,
            external_plugins_enabled=external_plugins_enabled,
        )
        prim = builder.build(PRIM_ADAPTERS)
        api_schema = builder.build(API_SCHEMA_ADAPTERS)

        self._type_map = prim.type_map
        self._adapter_keys = prim.keys
        self._api_schema_type_map = api_schema.type_map
        self._api_schema_adapter_keys = api_schema.keys
        self._keyless_api_schema_adapter_types = api_schema.keyless

        logger.debug(
            "Adapter registry built: %d prim adapters, %d API schema adapters, %d keyless",
            len(self._adapter_keys),
            len(self._api_schema_adapter_keys),
            len(self._keyless_api_schema_adapter_types),
        )

    @classmethod
    def get_instance(cls) -> "AdapterRegistry":
        """Get or create the process-wide registry.

        Concurrent first callers block until the build completes.
        """
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @staticmethod
    def are_external_plugins_enabled() -> bool:
        return are_external_plugins_enabled()

    @property
    def issues(self) -> Tuple[RegistryIssue, ...]:
        """Issues reported while building the tables.

        Construction failures are logged as they happen but not kept here.
        """
        return self._issues.issues

    # Prim adapters

    def has_adapter(self, adapter_key: str) -> bool:
        if adapter_key == AdapterKeys.INSTANCE_ADAPTER_KEY:
            return True
        return adapter_key in self._type_map

    def get_adapter_keys(self) -> Tuple[str, ...]:
        return self._adapter_keys

    def construct_adapter(self, adapter_key: str) -> Optional[PrimAdapter]:
        """Construct a new prim adapter for ``adapter_key``, or None if unavailable."""
        if adapter_key == AdapterKeys.INSTANCE_ADAPTER_KEY:
            return InstanceAdapter()
        return construct_adapter(
            PRIM_ADAPTERS, adapter_key, self._type_map, self._metadata, self._construction_log
        )

    # API schema adapters

    def has_api_schema_adapter(self, adapter_key: str) -> bool:
        return adapter_key in self._api_schema_type_map

    def get_api_schema_adapter_keys(self) -> Tuple[str, ...]:
        return self._api_schema_adapter_keys

    def construct_api_schema_adapter(self, adapter_key: str) -> Optional[APISchemaAdapter]:
        return construct_adapter(
            API_SCHEMA_ADAPTERS,
            adapter_key,
            self._api_schema_type_map,
            self._metadata,
            self._construction_log,
        )

    def construct_keyless_api_schema_adapters(self) -> List[APISchemaAdapter]:
        """Construct one adapter per keyless API schema adapter type.

        Types that fail to construct are left out; the failure has already
        been reported.
        """
        adapters = []
        for adapter_type in self._keyless_api_schema_adapter_types:
            instance = construct_adapter_by_type(
                API_SCHEMA_ADAPTERS, "", adapter_type, self._metadata, self._construction_log
            )
            if instance is not None:
                adapters.append(instance)
        return adapters


def get_adapter_registry() -> AdapterRegistry:
    """Return the process-wide adapter registry.

    Convenience function for:
        AdapterRegistry.get_instance()
    """
    return AdapterRegistry.get_instance()
