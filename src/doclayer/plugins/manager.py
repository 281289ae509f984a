"""Registry for the request-pipeline modules.

Built-in modules are registered explicitly by :func:`build_pipeline`.
Third-party modules are pip-installed and found through the
``doclayer.plugins`` entry-point group.
"""

from __future__ import annotations

import inspect
import logging

import pluggy

from doclayer.plugins.hookspecs import PipelineHookSpec

PROJECT_NAME = "doclayer"
ENTRY_POINT_GROUP = "doclayer.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Holds the pipeline modules and dispatches the translate/map hooks.

    Hooks run in reverse registration order, so a module registered after
    the built-ins gets the first chance to claim a phase.
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(PipelineHookSpec)
        self._discovered = False

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    @property
    def is_loaded(self) -> bool:
        """Whether entry-point discovery has run."""
        return self._discovered

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Add a module object. Classes are instantiated first."""
        module_name = name or _default_name(plugin)
        if inspect.isclass(plugin):
            plugin = plugin()
        self._pm.register(plugin, name=module_name)
        logger.debug("Registered plugin: %s", module_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def has_plugin(self, name: str) -> bool:
        return self._pm.has_plugin(name)

    def discover_and_load(self) -> list[str]:
        """Load pipeline modules advertised by installed distributions.

        A distribution that fails to import, or whose module class cannot
        be instantiated, is logged and skipped. Returns the names of every
        registered module afterwards.
        """
        try:
            count = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        except Exception:
            logger.warning("Failed to load %s entry points", ENTRY_POINT_GROUP, exc_info=True)
        else:
            if count:
                logger.debug("Loaded %d plugin(s) from %s", count, ENTRY_POINT_GROUP)
        self._instantiate_classes()
        self._discovered = True
        return self.plugin_names()

    def plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or _default_name(p) for p in self._pm.get_plugins()]

    def _instantiate_classes(self) -> None:
        # Entry points may name a class; its hooks would be called unbound.
        for plugin in self.plugins():
            if not inspect.isclass(plugin):
                continue
            module_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Cannot instantiate plugin %s; skipped", module_name, exc_info=True)
                continue
            self._pm.register(instance, name=module_name)


def _default_name(plugin: object) -> str:
    return plugin.__name__ if inspect.isclass(plugin) else type(plugin).__name__
