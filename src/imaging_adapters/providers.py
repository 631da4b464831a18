"""Collaborator interfaces consumed by the registry.

The registry never reads manifests or walks class hierarchies itself. It asks
a ``TypeGraphProvider`` about types and a ``MetadataProvider`` about the
plugins backing them.
"""

from __future__ import annotations

import logging
from typing import (
    Any,
    Callable,
    Generic,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Set,
    Type,
    TypeVar,
)

from .schema_registry import SchemaInfo, SchemaRegistry
from .type_registry import TypeHandle, TypeRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class AdapterFactory(Protocol[T_co]):
    def new(self) -> Optional[T_co]:
        ...


class TypeGraphProvider(Protocol):
    def find_type(self, name: str) -> Optional[TypeHandle]:
        ...

    def all_types_implementing(self, capability: TypeHandle) -> Set[TypeHandle]:
        ...

    def direct_subtypes(self, type_: TypeHandle) -> Sequence[TypeHandle]:
        ...

    def schema_variants_in_family(self, family_name: str) -> Sequence[SchemaInfo]:
        ...

    def canonical_name_of(self, type_: TypeHandle) -> str:
        ...

    def type_from_canonical_name(self, name: str) -> Optional[TypeHandle]:
        ...


class MetadataProvider(Protocol):
    def resolve_backing_implementation(self, adapter_type: TypeHandle) -> Optional[Any]:
        ...

    def metadata_for(self, adapter_type: TypeHandle) -> Optional[Mapping[str, Any]]:
        ...

    def activate(self, plugin: Any) -> bool:
        ...

    def factory_for(
        self, adapter_type: TypeHandle, result_type: Type[T]
    ) -> Optional[AdapterFactory[T]]:
        ...


class CallableFactory(Generic[T]):
    """Adapter factory wrapping a class or zero-argument callable.

    ``new`` returns None when the callable raises or produces something that
    is not an instance of ``result_type``.
    """

    def __init__(self, create: Callable[[], Any], result_type: Type[T]):
        self.create = create
        self.result_type = result_type

    def new(self) -> Optional[T]:
        try:
            instance = self.create()
        except Exception as e:
            logger.error(f"Adapter factory {self.create!r} raised: {e}", exc_info=True)
            return None
        if not isinstance(instance, self.result_type):
            return None
        return instance


class PluginTypeGraph:
    """``TypeGraphProvider`` over a type registry and a schema registry."""

    def __init__(self, types: TypeRegistry, schemas: SchemaRegistry):
        self.types = types
        self.schemas = schemas

    def find_type(self, name: str) -> Optional[TypeHandle]:
        return self.types.find(name)

    def all_types_implementing(self, capability: TypeHandle) -> Set[TypeHandle]:
        return self.types.get_all_derived_types(capability)

    def direct_subtypes(self, type_: TypeHandle) -> Sequence[TypeHandle]:
        return self.types.get_directly_derived_types(type_)

    def schema_variants_in_family(self, family_name: str) -> Sequence[SchemaInfo]:
        return self.schemas.find_schema_infos_in_family(family_name)

    def canonical_name_of(self, type_: TypeHandle) -> str:
        return self.schemas.get_schema_type_name(type_)

    def type_from_canonical_name(self, name: str) -> Optional[TypeHandle]:
        return self.schemas.get_type_from_schema_type_name(name)
