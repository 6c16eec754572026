"""Plugin system for tool discovery and management.

Usage:
    from brainguard.plugins import PluginRegistry

    registry = PluginRegistry()
    registry.discover()

    registry.expose_tool('brain_guard', config={'storage_type': 'memory'})

    tool_schemas = registry.get_exposed_tool_schemas()
    executors = registry.get_exposed_executors()

    registry.unexpose_all()
"""

from .base import ToolPlugin, ToolSchema, UserCommand, CommandCompletion
from .registry import PluginRegistry

__all__ = ['ToolPlugin', 'ToolSchema', 'PluginRegistry', 'UserCommand', 'CommandCompletion']
