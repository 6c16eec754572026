"""BrainGuard plugin: records and queries cognitive patterns in conversations."""

import logging
import math
from typing import Any, Callable, Dict, List, Optional

from dotenv import load_dotenv

from ..base import CommandCompletion, ToolSchema, UserCommand
from ..embedding_provider import EmbeddingConfig, EmbeddingProvider, GoogleGenAIEmbeddingProvider
from .command import parse_days_arg, render_summary
from .config_loader import BrainGuardConfig, load_config
from .errors import BrainGuardError, InvalidArgumentError
from .history import DEFAULT_HISTORY_DAYS
from .models import PatternKind, PatternRecord, PreviousMessage
from .prompt import SessionPromptTracker
from .service import PatternService
from .storage import InMemoryPatternStore, PatternStore, create_storage

logger = logging.getLogger(__name__)

TOOL_NAME = "brain_guard"
ACTIONS = ("record", "search", "history")
PATTERN_VALUES = [kind.value for kind in PatternKind]

DAYS_COMPLETIONS = [
    CommandCompletion("7", "Last week"),
    CommandCompletion("14", "Last two weeks"),
    CommandCompletion("30", "Last month"),
]


class BrainGuardPlugin:
    """Plugin that watches for cognitive-dependency patterns.

    The model records observed patterns (delegation, no_reflection, ...)
    through the ``brain_guard`` tool and queries them back by kind, time
    window or semantic similarity. The plugin also injects its methodology
    into the system prompt on a session's first turn, and a short reminder
    every ``reminder_interval`` turns after that.

    Semantic search needs an embedding provider; without credentials the
    plugin still records patterns and serves exact-match queries.

    Configuration example:
        {
            "storage_type": "file",
            "storage_path": "~/.jaato/brain_guard/patterns.jsonl",
            "reminder_interval": 10
        }
    """

    def __init__(self, embedding_provider: Optional[EmbeddingProvider] = None):
        """Initialize the plugin (not yet configured).

        Args:
            embedding_provider: Provider to use instead of the Google GenAI
                one created from configuration.
        """
        self._name = TOOL_NAME
        self._embedding_provider = embedding_provider
        self._config = BrainGuardConfig()
        self._service: Optional[PatternService] = None
        self._prompts: Optional[SessionPromptTracker] = None
        self._initialized = False

    @property
    def name(self) -> str:
        """Return plugin name."""
        return self._name

    @property
    def config(self) -> BrainGuardConfig:
        return self._config

    @property
    def service(self) -> Optional[PatternService]:
        return self._service

    @property
    def is_enabled(self) -> bool:
        return self._initialized and self._config.enabled

    def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Load configuration and open the store.

        Re-initializing discards the previous in-memory state (but never the
        file store's contents).

        Args:
            config: Optional configuration dict with keys:
                - config_path: JSON config file (default: .jaato/brain_guard.json)
                - enabled: Set False to disable the plugin (default: True)
                - reminder_interval: Remind every N turns (default: 10)
                - storage_type: "file" or "memory" (default: "file")
                - storage_path: JSONL path for file storage
                - embeddings_enabled: Set False to skip semantic search
                - embedding_model: Embedding model override
                - embedding_timeout_ms: Embedding transport timeout
                - env_file: .env file to load before resolving credentials

        Raises:
            ValueError: If a configuration value is invalid.
        """
        if self._initialized:
            self.shutdown()

        self._config = load_config(config)

        if self._config.env_file:
            load_dotenv(self._config.env_file)

        self._initialized = True
        if not self._config.enabled:
            logger.info("BrainGuard disabled")
            return

        store = self._create_store(self._config)
        self._service = PatternService(store, self._create_embedder(self._config))
        self._prompts = SessionPromptTracker(self._config.reminder_interval)

        logger.info("BrainGuard loaded (storage=%s)", store.describe())

    def _create_store(self, config: BrainGuardConfig) -> PatternStore:
        try:
            return create_storage(config.storage_type, config.storage_path)
        except OSError as e:
            logger.warning(
                "Failed to initialize %s storage at %s: %s; falling back to in-memory storage",
                config.storage_type, config.storage_path, e,
            )
            return InMemoryPatternStore()

    def _create_embedder(self, config: BrainGuardConfig) -> Optional[EmbeddingProvider]:
        if self._embedding_provider is not None:
            return self._embedding_provider
        if not config.embeddings_enabled:
            return None
        return GoogleGenAIEmbeddingProvider(EmbeddingConfig(
            model=config.embedding_model,
            timeout_ms=config.embedding_timeout_ms,
        ))

    def shutdown(self) -> None:
        """Close the store and drop all session state."""
        if self._service:
            self._service.close()
        if self._prompts:
            self._prompts.clear()
        self._service = None
        self._prompts = None
        self._initialized = False

    def get_tool_schemas(self) -> List[ToolSchema]:
        """Return the brain_guard tool declaration (none when disabled)."""
        if not self.is_enabled:
            return []

        return [
            ToolSchema(
                name=TOOL_NAME,
                description=(
                    'Record and query cognitive patterns for BrainGuard. '
                    'Use action "record" when you notice a pattern such as delegation '
                    'without effort or a question asked without reflection. '
                    'Use action "search" to look up past patterns by kind, time window, '
                    'or semantic similarity to a query, and "history" for a trend.'
                ),
                parameters={
                    "type": "object",
                    "properties": {
                        "action": {
                            "type": "string",
                            "enum": list(ACTIONS),
                            "description": "Operation to perform"
                        },
                        "pattern": {
                            "type": "string",
                            "enum": PATTERN_VALUES,
                            "description": "Pattern kind (required for record, filter for history)"
                        },
                        "message": {
                            "type": "string",
                            "description": "The user message showing the pattern (record)"
                        },
                        "message_id": {
                            "type": "string",
                            "description": "Identifier of that message, if known (record)"
                        },
                        "previous_messages": {
                            "type": "array",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "id": {"type": "string"},
                                    "text": {"type": "string"}
                                },
                                "required": ["id", "text"]
                            },
                            "description": "Messages that preceded it, oldest first (record)"
                        },
                        "context": {
                            "type": "string",
                            "description": "Why this was flagged (record)"
                        },
                        "query": {
                            "type": "string",
                            "description": "Text to search semantically (search)"
                        },
                        "type": {
                            "type": "string",
                            "enum": PATTERN_VALUES,
                            "description": "Pattern kind filter (search)"
                        },
                        "days": {
                            "type": "number",
                            "description": "Time window in days (search default: 30, history default: 7)"
                        }
                    },
                    "required": ["action"]
                }
            )
        ]

    def get_executors(self) -> Dict[str, Callable[[Dict[str, Any]], Any]]:
        """Return the tool executor plus the user command executors."""
        if not self.is_enabled:
            return {}
        return {
            TOOL_NAME: self._execute_tool,
            # User commands
            "brain": self._execute_brain_command,
            "bg": self._execute_brain_command,
        }

    def get_system_instructions(self) -> Optional[str]:
        """BrainGuard injects its instructions per turn via on_turn_start()."""
        return None

    def get_auto_approved_tools(self) -> List[str]:
        """The tool only touches the plugin's own store; commands are user-invoked."""
        if not self.is_enabled:
            return []
        return [TOOL_NAME, "brain", "bg"]

    def get_user_commands(self) -> List[UserCommand]:
        """Return the stats command and its short alias."""
        if not self.is_enabled:
            return []
        return [
            UserCommand("brain", "BrainGuard - cognitive health stats (optional: days)"),
            UserCommand("bg", "Alias for brain"),
        ]

    def get_command_completions(self, command: str, args: List[str]) -> List[CommandCompletion]:
        if command not in ("brain", "bg") or len(args) > 1:
            return []
        prefix = args[0] if args else ""
        return [c for c in DAYS_COMPLETIONS if c.value.startswith(prefix)]

    # ===== Session Hooks =====

    def on_turn_start(self, session_key: Optional[str] = None) -> Optional[str]:
        """Return the system prompt fragment for this turn, if any."""
        if not self.is_enabled or not self._prompts:
            return None
        return self._prompts.next_prompt(session_key)

    def on_session_end(self, session_key: str) -> None:
        if self._prompts:
            self._prompts.end_session(session_key)

    # ===== Executors =====

    def _execute_tool(self, args: Dict[str, Any]) -> Dict[str, Any]:
        """Dispatch a brain_guard call. Never raises; failures are returned.

        Args:
            args: Tool arguments; "session_key" is supplied by the host.

        Returns:
            Result dict with "success" and action-specific fields, or
            "error" on failure.
        """
        if not self._service:
            return {"success": False, "error": "BrainGuard plugin not initialized"}

        action = args.get("action")
        try:
            if action == "record":
                return self._record(args)
            if action == "search":
                return self._search(args)
            if action == "history":
                return self._history(args)
            return {"success": False, "error": f"Unknown action: {action}"}
        except BrainGuardError as e:
            return {"success": False, "error": str(e)}
        except Exception as e:
            logger.exception("brain_guard %s failed", action)
            return {"success": False, "error": f"{type(e).__name__}: {e}"}

    def _record(self, args: Dict[str, Any]) -> Dict[str, Any]:
        pattern = _parse_pattern(args.get("pattern"), "pattern")
        if pattern is None:
            raise InvalidArgumentError("pattern is required for record action", "pattern")

        message = args.get("message")
        if not message or not isinstance(message, str):
            raise InvalidArgumentError("message is required for record action", "message")

        outcome = self._service.record(
            pattern=pattern,
            message=message,
            message_id=_optional_str(args.get("message_id"), "message_id"),
            previous_messages=_parse_previous_messages(args.get("previous_messages")),
            context=_optional_str(args.get("context"), "context"),
            session_key=_optional_str(args.get("session_key"), "session_key"),
        )
        record = outcome.record
        same_kind = self._service.history(pattern=pattern, days=DEFAULT_HISTORY_DAYS)

        return {
            "success": True,
            "recorded": {
                "id": record.id,
                "pattern": record.pattern.value,
                "message": record.message,
            },
            "by_type": {
                "count": same_kind.count,
                "entries": [
                    {"date": r.timestamp, "message": r.message}
                    for r in same_kind.entries
                ],
            },
            "similar": [
                {
                    "date": s.record.timestamp,
                    "pattern": s.record.pattern.value,
                    "message": s.record.message,
                    "similarity": s.similarity,
                }
                for s in outcome.similar
            ],
        }

    def _search(self, args: Dict[str, Any]) -> Dict[str, Any]:
        query = _optional_str(args.get("query"), "query")
        response = self._service.search(
            query=query,
            pattern=_parse_pattern(args.get("type"), "type"),
            days=_parse_days(args.get("days")),
        )

        results = []
        for result in response.results:
            item = _entry_dict(result.record)
            item["match_type"] = result.match_type.value
            if result.similarity is not None:
                item["similarity"] = result.similarity
            results.append(item)

        return {
            "success": True,
            "results": results,
            "summary": {
                "total": response.summary.total,
                "by_type": response.summary.by_type,
            },
        }

    def _history(self, args: Dict[str, Any]) -> Dict[str, Any]:
        days = _parse_days(args.get("days"))
        result = self._service.history(
            pattern=_parse_pattern(args.get("pattern"), "pattern"),
            days=days if days is not None else DEFAULT_HISTORY_DAYS,
        )
        return {
            "success": True,
            "data": {
                "summary": {"count": result.count, "trend": result.trend.value},
                "entries": [_entry_dict(r) for r in result.entries],
            },
        }

    def _execute_brain_command(self, args: Dict[str, Any]) -> str:
        """Execute the brain user command.

        Args:
            args: {"days": N}; missing or unusable values mean 7 days.

        Returns:
            Human-readable summary text.
        """
        if not self._service:
            return "BrainGuard plugin not initialized"
        return render_summary(self._service, parse_days_arg(args.get("days")))


def _entry_dict(record: PatternRecord) -> Dict[str, Any]:
    return {
        "date": record.timestamp,
        "pattern": record.pattern.value,
        "message": record.message,
        "message_id": record.message_id,
        "previous_messages": (
            [m.to_dict() for m in record.previous_messages]
            if record.previous_messages is not None else None
        ),
        "context": record.context,
    }


def _parse_pattern(value: Any, field_name: str) -> Optional[PatternKind]:
    if value is None or value == "":
        return None
    try:
        return PatternKind(value)
    except ValueError:
        raise InvalidArgumentError(
            f"{field_name} must be one of {', '.join(PATTERN_VALUES)} (got {value!r})",
            field_name,
        )


def _parse_days(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidArgumentError(f"days must be a positive number (got {value!r})", "days")
    try:
        days = float(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidArgumentError(f"days must be a positive number (got {value!r})", "days")
    if not math.isfinite(days) or days <= 0:
        raise InvalidArgumentError(f"days must be a positive number (got {value!r})", "days")
    return days


def _optional_str(value: Any, field_name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgumentError(f"{field_name} must be a string", field_name)
    return value


def _parse_previous_messages(value: Any) -> Optional[List[PreviousMessage]]:
    if value is None:
        return None
    if not isinstance(value, list):
        raise InvalidArgumentError("previous_messages must be a list of {id, text} objects", "previous_messages")
    try:
        return [PreviousMessage.from_dict(item) for item in value]
    except (KeyError, TypeError):
        raise InvalidArgumentError("previous_messages must be a list of {id, text} objects", "previous_messages")


def create_plugin() -> BrainGuardPlugin:
    """Factory function to create the BrainGuard plugin instance.

    Returns:
        BrainGuardPlugin instance
    """
    return BrainGuardPlugin()
