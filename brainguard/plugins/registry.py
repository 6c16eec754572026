"""Plugin discovery, lifecycle and host hook fan-out."""

import importlib
import importlib.metadata
import logging
import pkgutil
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .base import ToolPlugin, ToolSchema, UserCommand

logger = logging.getLogger(__name__)

# Entry point group installed packages register their create_plugin under
PLUGIN_ENTRY_POINT_GROUP = "jaato.plugins"

# Modules in this package that are never plugins
_INFRASTRUCTURE_MODULES = ("base", "registry")

_MISSING = object()


class PluginRegistry:
    """Keeps every known plugin and the subset currently exposed to the model.

    Usage:
        registry = PluginRegistry()
        registry.discover()
        registry.expose_tool('brain_guard', config={'storage_type': 'memory'})

        schemas = registry.get_exposed_tool_schemas()
        executors = registry.get_exposed_executors()

        prompt = registry.collect_turn_prompts(session_key)
        registry.notify_session_end(session_key)

        registry.unexpose_all()
    """

    def __init__(self):
        self._plugins: Dict[str, ToolPlugin] = {}
        # Exposed plugin name -> config it was initialized with
        self._active: Dict[str, Optional[Dict[str, Any]]] = {}

    # ==================== Discovery ====================

    def discover(self, include_directory: bool = True) -> List[str]:
        """Register plugins from installed entry points, then this directory.

        Installed packages declare themselves with:
            [project.entry-points."jaato.plugins"]
            brain_guard = "brainguard.plugins.brain_guard:create_plugin"

        A name already registered is never replaced.

        Returns:
            Names registered by this call.
        """
        found = self._discover_via_entry_points()
        if include_directory:
            found += self._discover_via_directory()
        return found

    def _discover_via_entry_points(self) -> List[str]:
        found = []
        for ep in importlib.metadata.entry_points(group=PLUGIN_ENTRY_POINT_GROUP):
            if ep.name in self._plugins:
                continue
            try:
                factory = ep.load()
                candidate = factory()
            except Exception as exc:
                logger.warning("Skipping entry point %s: %s", ep.name, exc)
                continue
            if self._admit(candidate, f"entry point {ep.name}"):
                found.append(candidate.name)
        return found

    def _discover_via_directory(self, plugin_dir: Optional[Path] = None) -> List[str]:
        """Import sibling modules that declare PLUGIN_KIND = "tool"."""
        search_path = str(plugin_dir or Path(__file__).parent)
        found = []
        for module_info in pkgutil.iter_modules([search_path]):
            module_name = module_info.name
            if module_name.startswith('_') or module_name in _INFRASTRUCTURE_MODULES:
                continue
            try:
                module = importlib.import_module(f".{module_name}", package=__package__)
            except Exception as exc:
                logger.warning("Skipping plugin module %s: %s", module_name, exc)
                continue
            if getattr(module, 'PLUGIN_KIND', None) != "tool" or not hasattr(module, 'create_plugin'):
                continue
            candidate = module.create_plugin()
            if self._admit(candidate, f"module {module_name}"):
                found.append(candidate.name)
        return found

    def _admit(self, candidate: Any, origin: str) -> bool:
        if not isinstance(candidate, ToolPlugin):
            logger.warning("Skipping %s: not a ToolPlugin", origin)
            return False
        if candidate.name in self._plugins:
            return False
        self._plugins[candidate.name] = candidate
        return True

    # ==================== Lookup ====================

    def list_available(self) -> List[str]:
        return list(self._plugins)

    def list_exposed(self) -> List[str]:
        return list(self._active)

    def is_exposed(self, name: str) -> bool:
        return name in self._active

    def get_plugin(self, name: str) -> Optional[ToolPlugin]:
        return self._plugins.get(name)

    # ==================== Lifecycle ====================

    def register_plugin(
        self,
        plugin: ToolPlugin,
        expose: bool = False,
        config: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add a ready-made plugin instance, exposing it right away if asked."""
        self._plugins[plugin.name] = plugin
        if expose:
            self.expose_tool(plugin.name, config)

    def expose_tool(self, name: str, config: Optional[Dict[str, Any]] = None) -> None:
        """Make a plugin's tools visible, initializing it as needed.

        Exposing an already exposed plugin with a different non-empty config
        restarts it (shutdown, then initialize) with that config.

        Raises:
            ValueError: If no plugin with that name is registered.
        """
        plugin = self._plugins.get(name)
        if plugin is None:
            raise ValueError(f"Plugin '{name}' not found. Available: {self.list_available()}")

        if name in self._active:
            if not config or config == self._active[name]:
                return
            plugin.shutdown()

        plugin.initialize(config)
        self._active[name] = config

    def unexpose_tool(self, name: str) -> None:
        """Hide a plugin's tools and shut it down."""
        if self._active.pop(name, _MISSING) is not _MISSING:
            self._plugins[name].shutdown()

    def unexpose_all(self) -> None:
        for name in list(self._active):
            self.unexpose_tool(name)

    # ==================== Aggregation ====================

    def _exposed_plugins(self) -> List[ToolPlugin]:
        return [self._plugins[name] for name in sorted(self._active)]

    def get_exposed_tool_schemas(self) -> List[ToolSchema]:
        return [schema for p in self._exposed_plugins() for schema in p.get_tool_schemas()]

    def get_exposed_executors(self) -> Dict[str, Callable[[Dict[str, Any]], Any]]:
        executors: Dict[str, Callable[[Dict[str, Any]], Any]] = {}
        for plugin in self._exposed_plugins():
            executors.update(plugin.get_executors())
        return executors

    def get_exposed_user_commands(self) -> List[UserCommand]:
        return [cmd for p in self._exposed_plugins() for cmd in p.get_user_commands()]

    def get_auto_approved_tools(self) -> List[str]:
        return [tool for p in self._exposed_plugins() for tool in p.get_auto_approved_tools()]

    # ==================== Session Hooks ====================

    def collect_turn_prompts(self, session_key: Optional[str]) -> Optional[str]:
        """Ask every exposed plugin for a prompt fragment for this turn.

        A failing hook is logged and skipped.

        Returns:
            Fragments joined by blank lines, or None if no plugin had one.
        """
        fragments = []
        for plugin in self._exposed_plugins():
            hook = getattr(plugin, 'on_turn_start', None)
            if hook is None:
                continue
            try:
                fragment = hook(session_key)
            except Exception:
                logger.exception("Error in turn-start hook for '%s'", plugin.name)
                continue
            if fragment:
                fragments.append(fragment)
        return "\n\n".join(fragments) if fragments else None

    def notify_session_end(self, session_key: str) -> None:
        """Let every exposed plugin drop its state for a finished session."""
        for plugin in self._exposed_plugins():
            hook = getattr(plugin, 'on_session_end', None)
            if hook is None:
                continue
            try:
                hook(session_key)
            except Exception:
                logger.exception("Error in session-end hook for '%s'", plugin.name)

