"""Time-windowed history and trend classification."""

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from .models import HistoryResult, PatternKind, PatternRecord, Trend, utc_now

DEFAULT_HISTORY_DAYS = 7

# Ratio bounds of recent/preceding counts. Fixed, not configurable.
TREND_UP_RATIO = 1.3
TREND_DOWN_RATIO = 0.7

# Window starts never go earlier than this
EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def window_start(end: datetime, days: float) -> datetime:
    """``end - days``, clamped to EARLIEST when the span is out of range.

    Raises:
        ValueError: If days is NaN.
    """
    try:
        return end - timedelta(days=days)
    except OverflowError:
        return EARLIEST


def classify_trend(recent_count: int, preceding_count: int) -> Trend:
    """Classify frequency change between two adjacent windows.

    No data in the preceding window is always ``stable``: a single window
    is not enough to call a trend.
    """
    if preceding_count == 0:
        return Trend.STABLE
    ratio = recent_count / preceding_count
    if ratio > TREND_UP_RATIO:
        return Trend.UP
    if ratio < TREND_DOWN_RATIO:
        return Trend.DOWN
    return Trend.STABLE


def filter_window(
    records: Iterable[PatternRecord],
    days: float,
    pattern: Optional[PatternKind] = None,
    now: Optional[datetime] = None,
) -> List[PatternRecord]:
    """Records in ``[now - days, now]``, optionally of one kind, in store order."""
    now = now or utc_now()
    start = window_start(now, days)
    return [
        r for r in records
        if (pattern is None or r.pattern == pattern) and start <= r.created_at <= now
    ]


def get_history(
    records: Iterable[PatternRecord],
    pattern: Optional[PatternKind] = None,
    days: float = DEFAULT_HISTORY_DAYS,
    now: Optional[datetime] = None,
) -> HistoryResult:
    """Return the window's records, most recent first, with the trend.

    Args:
        records: Records in insertion order.
        pattern: Only consider this kind, if given.
        days: Window length in days.
        now: Reference time (default: current UTC time).

    Returns:
        HistoryResult whose trend compares ``[now - days, now]`` against the
        preceding window ``[now - 2*days, now - days)``.
    """
    now = now or utc_now()
    recent_start = window_start(now, days)
    preceding_start = window_start(recent_start, days)

    recent: List[PatternRecord] = []
    preceding_count = 0
    for record in records:
        if pattern is not None and record.pattern != pattern:
            continue
        created_at = record.created_at
        if recent_start <= created_at <= now:
            recent.append(record)
        elif preceding_start <= created_at < recent_start:
            preceding_count += 1

    # Stable sort: same-timestamp records keep insertion order
    entries = sorted(recent, key=lambda r: r.created_at, reverse=True)

    return HistoryResult(
        count=len(entries),
        trend=classify_trend(len(entries), preceding_count),
        entries=entries,
    )
