"""Host-facing plugin protocol and declaration types."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Protocol, runtime_checkable


@dataclass
class ToolSchema:
    """A tool the model may call, described as a JSON Schema.

    Attributes:
        name: Tool name the model calls (e.g. 'brain_guard').
        description: What the tool is for, shown to the model.
        parameters: JSON Schema object for the argument dict.
    """
    name: str
    description: str
    parameters: Dict[str, Any] = field(default_factory=dict)


class CommandCompletion(NamedTuple):
    """One suggested value for a user command argument."""
    value: str
    description: str = ""


class UserCommand(NamedTuple):
    """A command the user types directly, bypassing the model.

    Its executor lives in the same mapping as the plugin's tools and
    returns text for the host to display.
    """
    name: str
    description: str


@runtime_checkable
class ToolPlugin(Protocol):
    """What the registry needs from a tool plugin.

    A plugin contributes model tools (get_tool_schemas + get_executors) and
    user commands (get_user_commands, executed from the same mapping).
    """

    @property
    def name(self) -> str:
        """Registry key for this plugin."""
        ...

    def get_tool_schemas(self) -> List[ToolSchema]:
        ...

    def get_executors(self) -> Dict[str, Callable[[Dict[str, Any]], Any]]:
        """Map tool and command names to callables taking the argument dict."""
        ...

    def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Set the plugin up with the host-provided config dict."""
        ...

    def shutdown(self) -> None:
        """Release whatever initialize() acquired."""
        ...

    def get_system_instructions(self) -> Optional[str]:
        ...

    def get_auto_approved_tools(self) -> List[str]:
        """Names that run without asking the user for permission."""
        ...

    def get_user_commands(self) -> List[UserCommand]:
        ...

    # Optional hooks, looked up with hasattr() by the registry:
    #
    #   on_turn_start(session_key) -> Optional[str]
    #       Prompt fragment to inject before a turn, or None.
    #   on_session_end(session_key) -> None
    #       Drop per-session state.
    #   get_command_completions(command, args) -> List[CommandCompletion]
    #       Suggestions for a user command's next argument.
