"""System prompt injection for BrainGuard, with per-session reminder state."""

from typing import Dict, List, Optional

DEFAULT_REMINDER_INTERVAL = 10

# Turns without a session key share this bucket
DEFAULT_SESSION_KEY = "default"

INITIAL_PROMPT = """## BrainGuard - Cognitive Health Monitor

You have access to the `brain_guard` tool to help preserve the user's cognitive autonomy.

### Philosophy
AI assistants can create cognitive dependency. Your role: help without creating dependency. Guide rather than do.

### Patterns to watch for
- **delegation**: "Do it for me" without any prior effort
- **no_reflection**: Direct question with no sign of prior thinking
- **repetitive**: The same kind of request over and over
- **vocabulary**: Impoverished language
- **clarity**: Difficulty expressing an idea clearly

### When you detect a pattern
1. Call `brain_guard({"action": "search", "type": "...", "days": 7})` or search semantically with `query`
2. If it is recurring (count > 2, trend up), prefer guiding over doing
3. Call `brain_guard({"action": "record", "pattern": "...", "message": "..."})` to record it

### How to respond
- Isolated pattern: answer normally
- Recurring pattern: offer a guided approach
- Never judge, never block"""

REMINDER_PROMPT = (
    "BrainGuard reminder: watch for cognitive patterns (delegation, reflection, "
    "vocabulary, clarity). Use the brain_guard tool when relevant."
)


class SessionPromptTracker:
    """Decides which BrainGuard prompt, if any, each turn receives.

    Owns the per-session turn counters: a counter is created on a session's
    first turn and removed by ``end_session()``. The first turn of a session
    gets the full methodology; every ``reminder_interval``-th turn after that
    gets a short reminder; other turns get nothing.
    """

    def __init__(self, reminder_interval: int = DEFAULT_REMINDER_INTERVAL):
        if reminder_interval < 1:
            raise ValueError(f"reminder_interval must be >= 1, got {reminder_interval}")
        self._reminder_interval = reminder_interval
        self._turn_counts: Dict[str, int] = {}

    @property
    def reminder_interval(self) -> int:
        return self._reminder_interval

    def next_prompt(self, session_key: Optional[str] = None) -> Optional[str]:
        """Count a turn for the session and return the prompt to inject."""
        key = session_key or DEFAULT_SESSION_KEY
        count = self._turn_counts.get(key, 0)
        self._turn_counts[key] = count + 1

        if count == 0:
            return INITIAL_PROMPT
        if count % self._reminder_interval == 0:
            return REMINDER_PROMPT
        return None

    def end_session(self, session_key: str) -> None:
        self._turn_counts.pop(session_key, None)

    def active_sessions(self) -> List[str]:
        return list(self._turn_counts.keys())

    def clear(self) -> None:
        self._turn_counts.clear()
