"""Named type declarations and their inheritance graph.

Types are declared by name before any code implementing them is imported,
so the registry can answer inheritance questions from plugin manifests alone.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeHandle:
    """Opaque, hashable handle to a declared type."""

    name: str

    def __str__(self) -> str:
        return self.name


class TypeRegistry:
    """Declared types, their bases and optional factories."""

    def __init__(self):
        self._lock = threading.RLock()
        self._bases: Dict[str, Tuple[str, ...]] = {}
        self._derived: Dict[str, List[str]] = {}
        self._factories: Dict[str, Callable[[], Any]] = {}

    def declare(self, name: str, bases: Iterable[str] = ()) -> TypeHandle:
        """Declare a type with the given bases.

        Bases may be declared later. Redeclaring a type is a no-op; if the
        bases differ the first declaration is kept and a warning is logged.
        """
        if not name:
            raise ValueError("Type name must not be empty")
        bases = tuple(bases)
        with self._lock:
            existing = self._bases.get(name)
            if existing is not None:
                if existing != bases:
                    logger.warning(
                        "Type '%s' already declared with bases %s; ignoring bases %s",
                        name, list(existing), list(bases),
                    )
                return TypeHandle(name)
            self._bases[name] = bases
            for base in bases:
                self._derived.setdefault(base, []).append(name)
        return TypeHandle(name)

    def find(self, name: str) -> Optional[TypeHandle]:
        if name in self._bases:
            return TypeHandle(name)
        return None

    def get_bases(self, type_: TypeHandle) -> List[TypeHandle]:
        return [TypeHandle(base) for base in self._bases.get(type_.name, ())]

    def get_directly_derived_types(self, type_: TypeHandle) -> List[TypeHandle]:
        """Return the types declaring ``type_`` as a base, in declaration order."""
        return [TypeHandle(name) for name in self._derived.get(type_.name, ())]

    def get_all_derived_types(self, type_: TypeHandle) -> Set[TypeHandle]:
        """Return every type transitively derived from ``type_``, excluding itself."""
        found: Set[TypeHandle] = set()
        stack = list(self._derived.get(type_.name, ()))
        while stack:
            name = stack.pop()
            handle = TypeHandle(name)
            if handle in found:
                continue
            found.add(handle)
            stack.extend(self._derived.get(name, ()))
        return found

    def is_a(self, type_: TypeHandle, base: TypeHandle) -> bool:
        if type_ == base:
            return True
        return type_ in self.get_all_derived_types(base)

    def set_factory(self, type_: TypeHandle, factory: Callable[[], Any]) -> None:
        """Register a callable that manufactures instances of ``type_``."""
        with self._lock:
            self._factories[type_.name] = factory

    def get_factory(self, type_: TypeHandle) -> Optional[Callable[[], Any]]:
        return self._factories.get(type_.name)

    def __contains__(self, name: str) -> bool:
        return name in self._bases

    def __len__(self) -> int:
        return len(self._bases)
