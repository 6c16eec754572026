"""BrainGuard plugin for cognitive-pattern tracking.

This plugin enables the model to:
- Record cognitive patterns it notices (delegation, no_reflection, ...)
- Look them up again by kind, time window or semantic similarity
- See whether a pattern is trending up, down or stable

Patterns are kept in an append-only store (JSONL file, or in memory for
tests). Semantic search uses text embeddings when credentials for the
embedding provider are available and degrades to exact matching otherwise.

Usage:
    # Plugin is auto-discovered by PluginRegistry
    registry.expose_tool("brain_guard", config={
        "storage_path": "~/.jaato/brain_guard/patterns.jsonl"
    })
"""

# Plugin kind identifier for registry discovery
PLUGIN_KIND = "tool"

from .models import (
    MatchType,
    PatternKind,
    PatternRecord,
    PreviousMessage,
    Trend,
)
from .errors import BrainGuardError, EmbeddingDimensionError, InvalidArgumentError
from .storage import InMemoryPatternStore, JsonlPatternStore, PatternStore, create_storage
from .service import PatternService
from .plugin import BrainGuardPlugin, create_plugin

__all__ = [
    'PLUGIN_KIND',
    'BrainGuardPlugin',
    'create_plugin',
    'PatternService',
    'PatternStore',
    'JsonlPatternStore',
    'InMemoryPatternStore',
    'create_storage',
    'PatternKind',
    'PatternRecord',
    'PreviousMessage',
    'MatchType',
    'Trend',
    'BrainGuardError',
    'InvalidArgumentError',
    'EmbeddingDimensionError',
]
