"""Shared fixtures for adapter registry tests."""

import pytest

from imaging_adapters import AdapterRegistry, PluginRegistry, PluginTypeGraph, config, plugin_registry
from imaging_adapters.schemas import PluginManifest


GEOM_SCHEMA_TYPES = {
    "UsdGeomGprim": {"bases": [], "schemaIdentifier": "Gprim"},
    "UsdGeomSphere": {"bases": ["UsdGeomGprim"], "schemaIdentifier": "Sphere"},
    "UsdGeomCylinder_1": {"bases": ["UsdGeomGprim"], "schemaIdentifier": "Cylinder_1"},
    "UsdGeomCylinder_2": {"bases": ["UsdGeomGprim"], "schemaIdentifier": "Cylinder_2"},
    "CustomCylinder": {"bases": ["UsdGeomCylinder_2"], "schemaIdentifier": "CustomCylinder"},
    "TallCustomCylinder": {"bases": ["CustomCylinder"], "schemaIdentifier": "TallCustomCylinder"},
}


@pytest.fixture
def plugins():
    return PluginRegistry()


@pytest.fixture
def register(plugins):
    """Register an in-memory plugin: register(name, types, module=None)."""

    def _register(name, types, module=None):
        return plugins.register_plugin(PluginManifest(name=name, module=module, types=types))

    return _register


@pytest.fixture
def geom_schemas(register):
    return register("usdGeom", {k: dict(v) for k, v in GEOM_SCHEMA_TYPES.items()})


@pytest.fixture
def set_factory(plugins):
    """Attach a factory to a declared type: set_factory(type_name, factory)."""

    def _set_factory(type_name, factory):
        plugins.types.set_factory(plugins.types.find(type_name), factory)

    return _set_factory


@pytest.fixture
def build_registry(plugins):
    def _build(external_plugins_enabled=True):
        return AdapterRegistry(
            PluginTypeGraph(plugins.types, plugins.schemas),
            plugins,
            external_plugins_enabled=external_plugins_enabled,
        )

    return _build


@pytest.fixture
def fresh_process(monkeypatch):
    """Forget every process-wide singleton for the duration of a test."""
    monkeypatch.setattr(AdapterRegistry, "_instance", None)
    monkeypatch.setattr(plugin_registry, "_default_registry", None)
    monkeypatch.setattr(config, "_external_plugins_enabled", None)
    monkeypatch.delenv(config.ENABLE_PLUGINS_ENV, raising=False)
    monkeypatch.delenv(config.PLUGIN_PATH_ENV, raising=False)
