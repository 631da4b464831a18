"""Schema identifiers, versions and families.

A schema identifier such as ``Cylinder_2`` names version 2 of the
``Cylinder`` family. An identifier without a version suffix is version 0 of
a family of the same name.
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .type_registry import TypeHandle

logger = logging.getLogger(__name__)

_VERSIONED_IDENTIFIER = re.compile(r"^(?P<family>.+)_(?P<version>[1-9][0-9]*)$")


def parse_schema_family_and_version(identifier: str) -> Tuple[str, int]:
    """Split a schema identifier into its family name and version."""
    match = _VERSIONED_IDENTIFIER.match(identifier)
    if match is None:
        return identifier, 0
    return match.group("family"), int(match.group("version"))


@dataclass(frozen=True)
class SchemaInfo:
    identifier: str
    type: TypeHandle
    family: str
    version: int

    @property
    def canonical_name(self) -> str:
        return self.identifier


class SchemaRegistry:
    """Index of registered schema types by identifier, type and family."""

    def __init__(self):
        self._lock = threading.RLock()
        self._by_identifier: Dict[str, SchemaInfo] = {}
        self._by_type: Dict[TypeHandle, SchemaInfo] = {}
        self._families: Dict[str, List[SchemaInfo]] = {}

    def register(self, identifier: str, schema_type: TypeHandle) -> Optional[SchemaInfo]:
        """Register ``schema_type`` under ``identifier``.

        Returns the new info, or None when the identifier or the type is
        already registered (the first registration is kept).
        """
        with self._lock:
            if identifier in self._by_identifier or schema_type in self._by_type:
                logger.warning(
                    "Schema '%s' (%s) already registered; ignoring duplicate",
                    identifier, schema_type,
                )
                return None
            family, version = parse_schema_family_and_version(identifier)
            info = SchemaInfo(identifier, schema_type, family, version)
            self._by_identifier[identifier] = info
            self._by_type[schema_type] = info
            members = self._families.setdefault(family, [])
            members.append(info)
            members.sort(key=lambda member: member.version)
        return info

    def find_schema_info(self, identifier: str) -> Optional[SchemaInfo]:
        return self._by_identifier.get(identifier)

    def find_schema_infos_in_family(self, name: str) -> List[SchemaInfo]:
        """Return all versions of a family, lowest version first.

        ``name`` may be the family name or the identifier of any member.
        """
        if name not in self._families:
            name, _ = parse_schema_family_and_version(name)
        return list(self._families.get(name, ()))

    def get_schema_type_name(self, schema_type: TypeHandle) -> str:
        info = self._by_type.get(schema_type)
        return info.identifier if info else ""

    def get_type_from_schema_type_name(self, name: str) -> Optional[TypeHandle]:
        info = self._by_identifier.get(name)
        return info.type if info else None
