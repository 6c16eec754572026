"""Text rendering for the ``brain`` user command."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from .history import DEFAULT_HISTORY_DAYS
from .models import PatternKind, Trend, utc_now
from .service import PatternService

TREND_ARROWS = {
    Trend.UP: "↑",
    Trend.DOWN: "↓",
    Trend.STABLE: "→",
}

RECENT_ENTRY_LIMIT = 5
PREVIEW_LENGTH = 40


def parse_days_arg(value: Any) -> int:
    """Parse the optional days argument; anything unusable means the default."""
    if value is None:
        return DEFAULT_HISTORY_DAYS
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return DEFAULT_HISTORY_DAYS
    try:
        days = int(value)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_HISTORY_DAYS
    return days if days > 0 else DEFAULT_HISTORY_DAYS


def format_time_ago(then: datetime, now: datetime) -> str:
    """Coarse relative age: minutes under an hour, hours under a day, then days."""
    diff_seconds = max((now - then).total_seconds(), 0)
    minutes = int(diff_seconds // 60)
    hours = int(diff_seconds // 3600)
    days = int(diff_seconds // 86400)

    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    return f"{days}d ago"


def render_summary(
    service: PatternService,
    days: int = DEFAULT_HISTORY_DAYS,
    now: Optional[datetime] = None,
) -> str:
    """Render per-kind counts with trends and the most recent entries."""
    now = now or utc_now()
    header = f"🧠 BrainGuard - last {days} days"

    history = service.history(days=days, now=now)
    if not history.entries:
        return f"{header}\n\nNo pattern detected. 🎉"

    # Kinds in order of most recent occurrence
    counts: Dict[PatternKind, int] = {}
    for entry in history.entries:
        counts[entry.pattern] = counts.get(entry.pattern, 0) + 1

    lines: List[str] = [header, ""]
    for pattern, count in counts.items():
        trend = service.history(pattern=pattern, days=days, now=now).trend
        lines.append(f"{pattern.value}: {count} {TREND_ARROWS[trend]} {trend.value}")

    lines.append("")
    lines.append("Recent patterns:")
    for entry in history.entries[:RECENT_ENTRY_LIMIT]:
        ago = format_time_ago(entry.created_at, now)
        preview = entry.message[:PREVIEW_LENGTH]
        lines.append(f"• {ago} - {entry.pattern.value} - \"{preview}...\"")

    return "\n".join(lines)
