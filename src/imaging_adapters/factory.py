"""Generic adapter construction shared by every adapter family."""

from __future__ import annotations

import logging
from typing import Mapping, Optional, TypeVar

from .adapters import AdapterFamily
from .diagnostics import IssueLog
from .providers import MetadataProvider
from .schemas import IssueCode
from .type_registry import TypeHandle

logger = logging.getLogger(__name__)

T = TypeVar("T")


def construct_adapter(
    family: AdapterFamily[T],
    adapter_key: str,
    type_map: Mapping[str, TypeHandle],
    metadata: MetadataProvider,
    issues: IssueLog,
) -> Optional[T]:
    """Construct the adapter registered under ``adapter_key``.

    Unknown keys are expected and return None without reporting an issue.
    """
    adapter_type = type_map.get(adapter_key)
    if adapter_type is None:
        logger.debug("[PluginLoad] Unknown %s type '%s'", family.name, adapter_key)
        return None
    return construct_adapter_by_type(family, adapter_key, adapter_type, metadata, issues)


def construct_adapter_by_type(
    family: AdapterFamily[T],
    adapter_key: str,
    adapter_type: TypeHandle,
    metadata: MetadataProvider,
    issues: IssueLog,
) -> Optional[T]:
    """Activate the plugin behind ``adapter_type`` and manufacture one adapter.

    Every failure is reported as a coding error and yields None.
    """
    type_name = adapter_type.name
    plugin = metadata.resolve_backing_implementation(adapter_type)
    if plugin is None or not metadata.activate(plugin):
        issues.coding_error(
            IssueCode.PLUGIN_LOAD_FAILED,
            f"[PluginLoad] Plugin could not be loaded for type '{type_name}'",
            adapter_type=type_name,
            key=adapter_key,
        )
        return None

    factory = metadata.factory_for(adapter_type, family.result_type)
    if factory is None:
        issues.coding_error(
            IssueCode.FACTORY_MISSING,
            f"[PluginLoad] Cannot manufacture type '{type_name}' "
            f"for {family.name} type '{adapter_key}'",
            adapter_type=type_name,
            key=adapter_key,
        )
        return None

    instance = factory.new()
    if instance is None:
        issues.coding_error(
            IssueCode.INSTANTIATION_FAILED,
            f"[PluginLoad] Failed to instantiate type '{type_name}' "
            f"for {family.name} type '{adapter_key}'",
            adapter_type=type_name,
            key=adapter_key,
        )
        return None

    logger.debug("[PluginLoad] Loaded plugin '%s' > '%s'", adapter_key, type_name)
    return instance
