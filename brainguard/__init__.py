"""
brainguard - cognitive-pattern tracking plugin for jaato-style agent runtimes

Public API for hosts and external plugins.
"""

from brainguard.plugins import PluginRegistry
from brainguard.plugins.base import ToolPlugin, ToolSchema, UserCommand, CommandCompletion
from brainguard.plugins.brain_guard import BrainGuardPlugin, create_plugin

__all__ = [
    "PluginRegistry",
    "ToolPlugin",
    "ToolSchema",
    "UserCommand",
    "CommandCompletion",
    "BrainGuardPlugin",
    "create_plugin",
]

__version__ = "0.1.0"
