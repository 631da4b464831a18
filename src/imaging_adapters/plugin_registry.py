"""Plugin registry: the metadata provider backing adapter discovery.

Plugins are described by manifests. Registering a manifest declares its types
(and schema identifiers) without importing any code; the plugin module is
imported the first time one of its adapters is constructed.
"""

from __future__ import annotations

import importlib
import logging
import threading
from types import MappingProxyType, ModuleType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, TypeVar

from .adapters import declare_builtin_types
from .config import plugin_search_paths
from .manifest_loader import load_manifest_file, load_manifests
from .providers import CallableFactory
from .schema_registry import SchemaRegistry
from .schemas import PluginManifest
from .schemas.manifest import PYTHON_CLASS_KEY, SCHEMA_IDENTIFIER_KEY
from .type_registry import TypeHandle, TypeRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")

_EMPTY_METADATA: Mapping[str, Any] = MappingProxyType({})


class Plugin:
    """A registered plugin and its lazily imported module."""

    def __init__(self, manifest: PluginManifest):
        self.name = manifest.name
        self.module_name = manifest.module
        self.path = manifest.path
        self._metadata: Dict[str, Mapping[str, Any]] = {
            type_name: MappingProxyType(dict(entry))
            for type_name, entry in manifest.types.items()
        }
        self._lock = threading.Lock()
        self._loaded = False
        self._module: Optional[ModuleType] = None

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def type_names(self) -> List[str]:
        return list(self._metadata)

    def declares_type(self, type_name: str) -> bool:
        return type_name in self._metadata

    def get_metadata_for_type(self, type_name: str) -> Mapping[str, Any]:
        return self._metadata.get(type_name, _EMPTY_METADATA)

    def load(self) -> bool:
        """Import the plugin module once. Returns whether the plugin is loaded.

        Metadata-only plugins (no module) load trivially. A failed import is
        logged and retried on the next call.
        """
        if self._loaded:
            return True
        with self._lock:
            if self._loaded:
                return True
            if self.module_name:
                try:
                    self._module = importlib.import_module(self.module_name)
                except Exception as e:
                    logger.error(
                        f"Cannot import module '{self.module_name}' for plugin '{self.name}': {e}",
                        exc_info=True,
                    )
                    return False
            self._loaded = True
            logger.debug("[PluginLoad] Loaded plugin '%s'", self.name)
        return True

    def get_python_class(self, type_name: str) -> Optional[Any]:
        """Return the attribute implementing ``type_name`` in the loaded module."""
        if self._module is None or not self.declares_type(type_name):
            return None
        attribute = self._metadata[type_name].get(PYTHON_CLASS_KEY, type_name)
        if not isinstance(attribute, str):
            return None
        return getattr(self._module, attribute, None)

    def __repr__(self) -> str:
        return f"Plugin(name={self.name!r}, module={self.module_name!r})"


class PluginRegistry:
    """Registered plugins plus the type and schema registries they populate.

    Implements the metadata provider interface used by the adapter registry.
    """

    def __init__(
        self,
        types: Optional[TypeRegistry] = None,
        schemas: Optional[SchemaRegistry] = None,
    ):
        self.types = types or TypeRegistry()
        self.schemas = schemas or SchemaRegistry()
        self._lock = threading.RLock()
        self._plugins: Dict[str, Plugin] = {}
        self._type_to_plugin: Dict[str, Plugin] = {}
        declare_builtin_types(self.types)

    def register_plugin(self, manifest: PluginManifest) -> Optional[Plugin]:
        """Register one plugin and declare its types.

        Returns the new plugin, or None if a plugin with the same name is
        already registered. Types already owned by another plugin are skipped.
        """
        with self._lock:
            if manifest.name in self._plugins:
                logger.warning(f"Plugin '{manifest.name}' already registered, ignoring {manifest.path or 'duplicate'}")
                return None
            plugin = Plugin(manifest)
            self._plugins[plugin.name] = plugin

            for type_name in plugin.type_names:
                owner = self._type_to_plugin.get(type_name)
                if owner is not None:
                    logger.warning(
                        f"Type '{type_name}' declared by plugin '{plugin.name}' is already "
                        f"declared by plugin '{owner.name}'; keeping the first declaration"
                    )
                    continue
                handle = self.types.declare(type_name, manifest.bases_for(type_name))
                self._type_to_plugin[type_name] = plugin

                identifier = plugin.get_metadata_for_type(type_name).get(SCHEMA_IDENTIFIER_KEY)
                if isinstance(identifier, str) and identifier:
                    self.schemas.register(identifier, handle)
                elif identifier is not None:
                    logger.error(
                        f"Ignoring malformed schemaIdentifier for type '{type_name}' "
                        f"in plugin '{plugin.name}'"
                    )
        logger.debug("Registered plugin '%s' with %d types", plugin.name, len(plugin.type_names))
        return plugin

    def register_plugins(self, manifests: Iterable[PluginManifest]) -> List[Plugin]:
        registered = []
        for manifest in manifests:
            plugin = self.register_plugin(manifest)
            if plugin is not None:
                registered.append(plugin)
        return registered

    def register_manifest_file(self, path) -> List[Plugin]:
        """Register the plugins in one manifest file.

        Raises:
            ManifestLoadError: If the manifest cannot be loaded
        """
        return self.register_plugins(load_manifest_file(path))

    def register_search_paths(self, search_paths) -> List[Plugin]:
        """Register plugins from every manifest under the search paths.

        Broken manifests are logged and skipped.
        """
        manifests, errors = load_manifests(search_paths)
        for error in errors:
            logger.error(f"Skipping plugin manifest: {error}")
        return self.register_plugins(manifests)

    def get_plugin(self, name: str) -> Optional[Plugin]:
        return self._plugins.get(name)

    def get_all_plugins(self) -> List[Plugin]:
        return list(self._plugins.values())

    def get_plugin_for_type(self, type_: TypeHandle) -> Optional[Plugin]:
        return self._type_to_plugin.get(type_.name)

    # Metadata provider interface

    def resolve_backing_implementation(self, adapter_type: TypeHandle) -> Optional[Plugin]:
        return self.get_plugin_for_type(adapter_type)

    def metadata_for(self, adapter_type: TypeHandle) -> Optional[Mapping[str, Any]]:
        plugin = self.get_plugin_for_type(adapter_type)
        if plugin is None:
            return None
        return plugin.get_metadata_for_type(adapter_type.name)

    def activate(self, plugin: Plugin) -> bool:
        return plugin.load()

    def factory_for(
        self, adapter_type: TypeHandle, result_type: Type[T]
    ) -> Optional[CallableFactory[T]]:
        """Return a factory producing ``result_type`` instances for ``adapter_type``.

        An explicitly registered factory wins over the class exported by the
        plugin module. Classes that do not derive from ``result_type`` provide
        no factory.
        """
        create = self.types.get_factory(adapter_type)
        if create is None:
            plugin = self.get_plugin_for_type(adapter_type)
            if plugin is None or not plugin.is_loaded:
                return None
            create = plugin.get_python_class(adapter_type.name)
        if create is None or not callable(create):
            return None
        if isinstance(create, type) and not issubclass(create, result_type):
            return None
        return CallableFactory(create, result_type)


_default_registry: Optional[PluginRegistry] = None
_default_registry_lock = threading.Lock()


def get_plugin_registry() -> PluginRegistry:
    """Get or create the process-wide plugin registry.

    On creation it registers every manifest found under the search paths
    configured in the environment.
    """
    global _default_registry
    if _default_registry is None:
        with _default_registry_lock:
            if _default_registry is None:
                registry = PluginRegistry()
                registry.register_search_paths(plugin_search_paths())
                _default_registry = registry
    return _default_registry
