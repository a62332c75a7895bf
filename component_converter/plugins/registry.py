"""Central registry for converter plugins."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Dict, List, Optional, Type, Union

from ..config import ConverterOptions, Target
from ..errors import PluginRegistryError
from .base import ConverterPlugin, validate_plugin

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "component_converter.plugins"

_PLUGINS: Dict[str, Type[ConverterPlugin]] = {}

# Registered plugins enabled by default, with the targets they apply to.
_DEFAULTS: Dict[str, Optional[frozenset]] = {}


def register_plugin(
    plugin_cls: Type[ConverterPlugin],
    *,
    default: bool = False,
    targets: Optional[List[Union[str, Target]]] = None,
) -> Type[ConverterPlugin]:
    """Register ``plugin_cls`` under its ``name``."""
    validate_plugin(plugin_cls)
    plugin_name = plugin_cls.name.strip()
    if plugin_name in _PLUGINS:
        raise PluginRegistryError(f"Plugin '{plugin_name}' already registered")
    _PLUGINS[plugin_name] = plugin_cls
    if default:
        _DEFAULTS[plugin_name] = frozenset(Target.parse(t) for t in targets) if targets else None
    return plugin_cls


def get_plugin(name: str) -> Type[ConverterPlugin]:
    """Return the registered plugin class for ``name``."""
    plugin_name = (name or "").strip()
    plugin_cls = _PLUGINS.get(plugin_name)
    if plugin_cls is None:
        raise PluginRegistryError(f"Plugin '{plugin_name}' is not registered")
    return plugin_cls


def available_plugins() -> List[str]:
    return sorted(_PLUGINS)


def default_plugins(target: Union[str, Target], options: Optional[ConverterOptions] = None) -> List[ConverterPlugin]:
    """
    Instantiate the default plugins for ``target``.

    ``options`` is accepted so callers can pass their run configuration;
    plugins read the options they need from the context at run time.
    """
    resolved = Target.parse(target)
    plugins: List[ConverterPlugin] = []
    for name, targets in _DEFAULTS.items():
        if targets is not None and resolved not in targets:
            continue
        plugins.append(_PLUGINS[name]())
    logger.debug(f"Default plugins for {resolved.value}: {', '.join(p.name for p in plugins)}")
    return plugins


def load_entry_point_plugins() -> List[str]:
    """Register plugin classes advertised under the ``component_converter.plugins`` group."""
    loaded: List[str] = []
    for entry in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
        try:
            plugin_cls = entry.load()
        except Exception as exc:
            raise PluginRegistryError(f"Failed to load plugin {entry.name}: {exc}") from exc
        if getattr(plugin_cls, "name", None) in _PLUGINS:
            continue
        register_plugin(plugin_cls)
        loaded.append(plugin_cls.name)
    return loaded


def clear_registry() -> None:
    """Internal helper for tests to reset registry state."""
    _PLUGINS.clear()
    _DEFAULTS.clear()


def snapshot_registry() -> Dict[str, object]:
    """Internal helper for tests: capture state for :func:`restore_registry`."""
    return {"plugins": dict(_PLUGINS), "defaults": dict(_DEFAULTS)}


def restore_registry(snapshot: Dict[str, object]) -> None:
    _PLUGINS.clear()
    _PLUGINS.update(snapshot["plugins"])
    _DEFAULTS.clear()
    _DEFAULTS.update(snapshot["defaults"])


__all__ = [
    "ENTRY_POINT_GROUP",
    "register_plugin",
    "get_plugin",
    "available_plugins",
    "default_plugins",
    "load_entry_point_plugins",
    "clear_registry",
    "snapshot_registry",
    "restore_registry",
]
