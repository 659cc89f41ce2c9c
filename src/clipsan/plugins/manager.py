"""Plugin discovery and loading.

Discovery: entry_points (pip-installed) in the ``clipsan.plugins`` group via
pluggy, plus single-file plugins from an optional local directory.
Capabilities: contribute sanitization rules, observe dispatched pastes.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from collections.abc import Iterator
from pathlib import Path
from types import ModuleType

import pluggy

from clipsan.domain.rules import Rule
from clipsan.plugins.hookspecs import ClipsanHookSpec

PROJECT_NAME = "clipsan"
ENTRY_POINT_GROUP = "clipsan.plugins"
LOCAL_MODULE_PREFIX = "clipsan_local_plugin_"

logger = logging.getLogger(__name__)


class PluginManager:
    """Owns the pluggy manager for the ``clipsan`` project.

    Built-in plugins are registered directly by the caller; third-party and
    local plugins arrive through :meth:`discover_and_load`, which runs once.
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(ClipsanHookSpec)
        self._loaded: bool = False

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load ``clipsan.plugins`` entry points, then files from *local_dir*.

        Returns the names of every registered plugin, built-ins included.
        """
        loaded = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        if loaded:
            self._normalize_plugin_instances()
        if local_dir is not None:
            self._discover_local(local_dir)
        self._loaded = True
        names = self.list_plugin_names()
        logger.debug("Plugins active: %s", names)
        return names

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register *plugin* under *name* (default: its class name)."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        """Remove *plugin*; its rules stay in any pipeline already built."""
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """True once :meth:`discover_and_load` has run."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        """Hook relay, e.g. ``pm.hook.post_paste(kind=..., char_count=...)``."""
        return self._pm.hook

    def get_plugins(self) -> list[object]:
        """Registered plugin objects (unordered)."""
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins, in registration order."""
        return [name for name, plugin in self._pm.list_name_plugin() if plugin is not None]

    def collect_rules(self) -> list[Rule]:
        """Gather rules contributed through ``register_rules``.

        Each plugin is asked separately so one broken plugin cannot hide
        the others. Anything that is not a rule is skipped with a warning.
        """
        rules: list[Rule] = []
        for plugin_name, plugin in self._pm.list_name_plugin():
            if plugin is None:
                continue
            hook = getattr(plugin, "register_rules", None)
            if hook is None:
                continue

            try:
                contributed = hook()
            except Exception:
                logger.warning(
                    "Failed to collect rules from plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            if contributed is None:
                continue
            if not isinstance(contributed, (list, tuple)):
                logger.warning("Plugin %s returned non-list rule registrations", plugin_name)
                continue

            for candidate in contributed:
                if not isinstance(candidate, Rule):
                    logger.warning(
                        "Skipping non-rule %r from plugin %s",
                        candidate,
                        plugin_name,
                    )
                    continue
                rules.append(candidate)
                logger.debug("Plugin %s contributed rule %s", plugin_name, candidate.name)
        return rules

    # ------------------------------------------------------------------
    # Discovery internals
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Register hook-carrying classes from ``*.py`` files in *local_dir*.

        Files starting with ``_`` are skipped. A file that fails to import,
        or a class that fails to instantiate, is logged and skipped.
        """
        if not local_dir.is_dir():
            logger.debug("Local plugin directory %s does not exist", local_dir)
            return

        for py_file in sorted(local_dir.glob("[!_]*.py")):
            module = _import_plugin_file(py_file)
            if module is None:
                continue
            for cls in _hook_classes(module):
                try:
                    instance = cls()
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        cls.__name__,
                        py_file,
                        exc_info=True,
                    )
                    continue
                self.register_plugin(instance, name=f"{module.__name__}.{cls.__name__}")

    def _normalize_plugin_instances(self) -> None:
        """Swap class-valued entry points for instances of those classes.

        A hook registered on a class would be called without ``self``.
        """
        for plugin_name, plugin in self._pm.list_name_plugin():
            if not inspect.isclass(plugin) or not _carries_hookimpls(plugin):
                continue
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue
            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)


def _import_plugin_file(py_file: Path) -> ModuleType | None:
    """Import *py_file* as ``clipsan_local_plugin_<stem>``, or return None."""
    module_name = f"{LOCAL_MODULE_PREFIX}{py_file.stem}"
    spec = importlib.util.spec_from_file_location(module_name, py_file)
    if spec is None or spec.loader is None:
        logger.warning("Could not create module spec for %s", py_file)
        return None

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
        return None
    return module


def _hook_classes(module: ModuleType) -> Iterator[type]:
    """Yield classes defined (not imported) in *module* that carry hookimpls."""
    for _name, obj in inspect.getmembers(module, inspect.isclass):
        if obj.__module__ == module.__name__ and _carries_hookimpls(obj):
            yield obj


def _carries_hookimpls(cls: type) -> bool:
    """Whether any public attribute of *cls* was marked ``@hookimpl``.

    ``HookimplMarker("clipsan")`` tags marked functions with ``clipsan_impl``.
    """
    marker = f"{PROJECT_NAME}_impl"
    return any(
        getattr(getattr(cls, name, None), marker, None) is not None
        for name in dir(cls)
        if not name.startswith("_")
    )
