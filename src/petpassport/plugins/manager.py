"""Plugin discovery and loading.

Plugins come from two places: distributions exposing the
``petpassport.plugins`` entry-point group, and single ``*.py`` files in a
registry's ``.petpassport/plugins/`` directory. A plugin that fails to
load is logged and skipped.
"""

from __future__ import annotations

import importlib.util
import inspect
import sys
from collections.abc import Iterator
from pathlib import Path
from types import ModuleType

import pluggy
import structlog

from petpassport.plugins.hookspecs import PassportHookSpec

PROJECT_NAME = "petpassport"
ENTRY_POINT_GROUP = "petpassport.plugins"
LOCAL_MODULE_PREFIX = "petpassport_local_plugin_"

log = structlog.get_logger(__name__)


class PluginManager:
    """Thin wrapper over :class:`pluggy.PluginManager` with passport hookspecs."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(PassportHookSpec)

    @property
    def hook(self) -> pluggy.HookRelay:
        """Hook relay the event bus calls into."""
        return self._pm.hook

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point plugins, then local plugins from *local_dir*.

        Returns the names of all registered plugins.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._instantiate_entry_point_classes()
        if local_dir is not None and local_dir.is_dir():
            for path in sorted(local_dir.glob("*.py")):
                if not path.name.startswith("_"):
                    self._register_local(path)
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly (e.g. the built-in audit plugin)."""
        resolved = name or type(plugin).__name__
        self._pm.register(plugin, name=resolved)
        log.debug("plugin.registered", plugin=resolved)

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or type(p).__name__ for p in self._pm.get_plugins()]

    def _register_local(self, path: Path) -> None:
        module_name = LOCAL_MODULE_PREFIX + path.stem
        module = _import_file(module_name, path)
        if module is None:
            return
        for cls in _hook_classes(module):
            try:
                self.register_plugin(cls(), name=module_name)
            except Exception:
                log.warning("plugin.instantiate_failed", plugin=cls.__name__, path=str(path))

    def _instantiate_entry_point_classes(self) -> None:
        """Swap entry points that registered a class for an instance of it.

        Hook methods on a bare class object have no bound ``self``.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin) or not self._has_hook_impls(plugin):
                continue
            name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                self._pm.register(plugin(), name=name)
            except Exception:
                log.warning("plugin.instantiate_failed", plugin=name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Whether *cls* has a public method marked by ``HookimplMarker("petpassport")``."""
        return any(
            getattr(getattr(cls, attr, None), f"{PROJECT_NAME}_impl", None)
            for attr in dir(cls)
            if not attr.startswith("_")
        )


def _import_file(module_name: str, path: Path) -> ModuleType | None:
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        log.warning("plugin.load_failed", path=str(path))
        return None
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        log.warning("plugin.load_failed", path=str(path), exc_info=True)
        return None
    return module


def _hook_classes(module: ModuleType) -> Iterator[type]:
    """Classes defined in *module* (not imported into it) that implement hooks."""
    for _name, obj in inspect.getmembers(module, inspect.isclass):
        if obj.__module__ == module.__name__ and PluginManager._has_hook_impls(obj):
            yield obj
