"""Resolves adapter metadata into a flat name -> adapter type table.

The build runs in three passes for each adapter family:

1. Direct mapping: every enabled adapter maps the name it declares.
2. Family propagation: adapters opting in with ``includeSchemaFamily`` also
   take every other version of their schema family that has no adapter.
3. Derived-type propagation: adapters opting in with
   ``includeDerivedPrimTypes`` take every derived schema type below their
   own, stopping at the first type that already has an adapter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from .adapters import AdapterFamily
from .diagnostics import IssueLog
from .providers import MetadataProvider, TypeGraphProvider
from .schemas import (
    INCLUDE_DERIVED_PRIM_TYPES,
    INCLUDE_SCHEMA_FAMILY,
    IS_INTERNAL,
    AdapterMetadata,
    IssueCode,
)
from .type_registry import TypeHandle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeMapping:
    """Result of resolving one adapter family.

    Attributes:
        type_map: Read-only mapping from type name to adapter type
        keys: Snapshot of the mapping's keys in insertion order
        keyless: Adapter types that declared an empty name
    """

    type_map: Mapping[str, TypeHandle]
    keys: Tuple[str, ...]
    keyless: Tuple[TypeHandle, ...] = ()


class MappingBuilder:
    """Builds a ``TypeMapping`` per adapter family from the two providers."""

    def __init__(
        self,
        type_graph: TypeGraphProvider,
        metadata: MetadataProvider,
        issues: IssueLog,
        *,
        external_plugins_enabled: bool = True,
    ):
        self.type_graph = type_graph
        self.metadata = metadata
        self.issues = issues
        self.external_plugins_enabled = external_plugins_enabled

    def build(self, family: AdapterFamily) -> TypeMapping:
        type_map: Dict[str, TypeHandle] = {}
        keyless: List[TypeHandle] = []
        derived_roots: List[str] = []
        # (family name, also include types derived from the family's members)
        schema_families: List[Tuple[str, bool]] = []

        capability = self.type_graph.find_type(family.capability)
        if capability is None:
            logger.debug("[PluginDiscover] Unknown adapter base type '%s'", family.capability)
            return TypeMapping(MappingProxyType(type_map), ())

        # Sorted so conflicting declarations resolve the same way every run.
        candidates = sorted(
            self.type_graph.all_types_implementing(capability), key=lambda t: t.name
        )
        for adapter_type in candidates:
            self._discover(
                family, adapter_type, type_map, keyless, derived_roots, schema_families
            )

        self._propagate_to_schema_families(type_map, schema_families, derived_roots)
        self._propagate_to_derived_types(type_map, derived_roots)

        return TypeMapping(
            type_map=MappingProxyType(type_map),
            keys=tuple(type_map),
            keyless=tuple(keyless),
        )

    def _discover(
        self,
        family: AdapterFamily,
        adapter_type: TypeHandle,
        type_map: Dict[str, TypeHandle],
        keyless: List[TypeHandle],
        derived_roots: List[str],
        schema_families: List[Tuple[str, bool]],
    ) -> None:
        """Pass 1 for a single candidate adapter type."""
        type_name = adapter_type.name
        plugin = self.metadata.resolve_backing_implementation(adapter_type)
        if plugin is None:
            self.issues.info(
                IssueCode.PLUGIN_NOT_FOUND,
                f"[PluginDiscover] Plugin could not be loaded for type '{type_name}'",
                adapter_type=type_name,
            )
            return

        metadata = AdapterMetadata.from_bag(self.metadata.metadata_for(adapter_type))

        if not self._is_enabled(adapter_type, metadata):
            return

        key = self._read_key(family, adapter_type, metadata)
        if key is None:
            return

        logger.debug(
            "[PluginDiscover] Plugin discovered '%s' for %s '%s'",
            type_name, family.key_field, key,
        )

        if not key:
            keyless.append(adapter_type)
            return

        previous = type_map.get(key)
        if previous is not None and previous != adapter_type:
            self.issues.warning(
                IssueCode.ADAPTER_CONFLICT,
                f"[PluginDiscover] A {family.name} adapter for '{key}' already exists. "
                f"The last discovered adapter ({type_name}) will be used. The previously "
                f"discovered adapter ({previous}) will be discarded.",
                adapter_type=type_name,
                key=key,
            )
        type_map[key] = adapter_type

        if metadata.is_invalid(INCLUDE_DERIVED_PRIM_TYPES):
            self._report_corrupted(INCLUDE_DERIVED_PRIM_TYPES, adapter_type, key, "not holding bool")
            return
        include_derived = bool(metadata.include_derived_prim_types)
        if include_derived:
            derived_roots.append(key)

        if metadata.is_invalid(INCLUDE_SCHEMA_FAMILY):
            self._report_corrupted(INCLUDE_SCHEMA_FAMILY, adapter_type, key, "not holding bool")
            return
        if metadata.include_schema_family:
            schema_families.append((key, include_derived))

    def _is_enabled(self, adapter_type: TypeHandle, metadata: AdapterMetadata) -> bool:
        if self.external_plugins_enabled:
            return True
        if metadata.is_invalid(IS_INTERNAL):
            self._report_corrupted(IS_INTERNAL, adapter_type, None, "not holding bool")
            return False
        if metadata.is_internal:
            return True
        self.issues.info(
            IssueCode.PLUGIN_DISABLED,
            f"[PluginDiscover] Plugin disabled because external plugins were "
            f"disabled '{adapter_type}'",
            adapter_type=adapter_type.name,
        )
        return False

    def _read_key(
        self, family: AdapterFamily, adapter_type: TypeHandle, metadata: AdapterMetadata
    ) -> Optional[str]:
        """Return the name an adapter declares, or None if it is unusable.

        An empty string is returned only for families allowing keyless adapters.
        """
        if metadata.is_invalid(family.key_field):
            self._report_corrupted(family.key_field, adapter_type, None, "not holding string")
            return None
        key = metadata.get(family.key_field)
        if key is None:
            self.issues.runtime_error(
                IssueCode.METADATA_MISSING,
                f"[PluginDiscover] {family.key_field} metadata was not present "
                f"for plugin '{adapter_type}'",
                adapter_type=adapter_type.name,
            )
            return None
        if not key and not family.allows_keyless:
            self.issues.runtime_error(
                IssueCode.METADATA_MISSING,
                f"[PluginDiscover] {family.key_field} metadata was empty "
                f"for plugin '{adapter_type}'",
                adapter_type=adapter_type.name,
            )
            return None
        return key

    def _report_corrupted(
        self, field: str, adapter_type: TypeHandle, key: Optional[str], detail: str
    ) -> None:
        self.issues.runtime_error(
            IssueCode.METADATA_CORRUPTED,
            f"[PluginDiscover] {field} metadata was corrupted for plugin "
            f"'{adapter_type}'; {detail}",
            adapter_type=adapter_type.name,
            key=key,
        )

    def _propagate_to_schema_families(
        self,
        type_map: Dict[str, TypeHandle],
        schema_families: List[Tuple[str, bool]],
        derived_roots: List[str],
    ) -> None:
        """Pass 2: map unclaimed family members to the family's adapter."""
        for family_name, include_derived in schema_families:
            adapter_type = type_map[family_name]
            for info in self.type_graph.schema_variants_in_family(family_name):
                if info.identifier in type_map:
                    continue
                type_map[info.identifier] = adapter_type
                logger.debug(
                    "[PluginDiscover] Mapping adapter for family '%s' to type '%s'",
                    family_name, info.canonical_name,
                )
                if include_derived:
                    derived_roots.append(info.canonical_name)

    def _propagate_to_derived_types(
        self, type_map: Dict[str, TypeHandle], derived_roots: List[str]
    ) -> None:
        """Pass 3: hand each root's adapter down to unclaimed derived types."""
        for root_name in derived_roots:
            root_type = self.type_graph.type_from_canonical_name(root_name)
            if root_type is None:
                continue
            adapter_type = type_map.get(root_name)
            if adapter_type is None:
                continue

            stack = list(self.type_graph.direct_subtypes(root_type))
            while stack:
                derived_type = stack.pop()
                type_name = self.type_graph.canonical_name_of(derived_type)
                if not type_name:
                    continue
                # An existing entry, however it got there, shadows its subtree.
                if type_name in type_map:
                    continue
                type_map[type_name] = adapter_type
                logger.debug(
                    "[PluginDiscover] Mapping adapter for type '%s' to derived type '%s'",
                    root_name, type_name,
                )
                stack.extend(self.type_graph.direct_subtypes(derived_type))
