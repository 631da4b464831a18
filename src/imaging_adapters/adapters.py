"""Adapter capability interfaces and the built-in adapter types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Type, TypeVar

from .schemas import API_SCHEMA_NAME, PRIM_TYPE_NAME
from .type_registry import TypeRegistry

PRIM_ADAPTER_TYPE = "PrimAdapter"
API_SCHEMA_ADAPTER_TYPE = "APISchemaAdapter"
INSTANCE_ADAPTER_TYPE = "InstanceAdapter"


class AdapterKeys:
    """Reserved adapter keys handled without consulting plugins."""

    INSTANCE_ADAPTER_KEY = "__builtin_instance__"


class PrimAdapter:
    """Base class for adapters that handle one prim type."""

    def is_instancer_adapter(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class APISchemaAdapter:
    """Base class for adapters that handle one applied API schema."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class InstanceAdapter(PrimAdapter):
    """Built-in adapter for instanced prims."""

    def is_instancer_adapter(self) -> bool:
        return True


T = TypeVar("T")


@dataclass(frozen=True)
class AdapterFamily(Generic[T]):
    """Describes one family of adapters the registry resolves.

    Attributes:
        name: Short label used in log messages
        capability: Name of the base type every adapter of the family derives from
        key_field: Metadata key holding the name the adapter handles
        result_type: Python class every constructed adapter must be an instance of
        allows_keyless: Whether an empty name is legal (batch-constructed adapters)
    """

    name: str
    capability: str
    key_field: str
    result_type: Type[T]
    allows_keyless: bool = False


PRIM_ADAPTERS: AdapterFamily[PrimAdapter] = AdapterFamily(
    name="prim",
    capability=PRIM_ADAPTER_TYPE,
    key_field=PRIM_TYPE_NAME,
    result_type=PrimAdapter,
)

API_SCHEMA_ADAPTERS: AdapterFamily[APISchemaAdapter] = AdapterFamily(
    name="API schema",
    capability=API_SCHEMA_ADAPTER_TYPE,
    key_field=API_SCHEMA_NAME,
    result_type=APISchemaAdapter,
    allows_keyless=True,
)


def declare_builtin_types(types: TypeRegistry) -> None:
    """Declare the adapter base types and the built-in instance adapter."""
    types.declare(PRIM_ADAPTER_TYPE)
    types.declare(API_SCHEMA_ADAPTER_TYPE)
    instance_type = types.declare(INSTANCE_ADAPTER_TYPE, bases=[PRIM_ADAPTER_TYPE])
    types.set_factory(instance_type, InstanceAdapter)
