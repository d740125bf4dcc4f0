"""
Daily streak tracking.

Streaks count consecutive calendar days with at least one finished lesson.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime

from .models import ProfileStats


def calendar_days_between(earlier: datetime, later: datetime) -> int:
    """
    Whole calendar days from ``earlier`` to ``later``.

    Both are compared as dates in ``later``'s timezone; naive values are UTC.
    """
    if earlier.tzinfo is None:
        earlier = earlier.replace(tzinfo=UTC)
    if later.tzinfo is None:
        later = later.replace(tzinfo=UTC)
    earlier = earlier.astimezone(later.tzinfo)
    return (later.date() - earlier.date()).days


def next_streak(streak: int, last_played_at: datetime | None, now: datetime) -> int:
    """
    Streak after playing at ``now``.

    Played yesterday: +1. More than a day ago: back to 1. Same day (or a clock
    that went backwards, or never played): unchanged, minimum 1.
    """
    if last_played_at is None:
        return max(streak, 1)

    gap = calendar_days_between(last_played_at, now)
    if gap == 1:
        return streak + 1
    if gap > 1:
        return 1
    return max(streak, 1)


def update_stats(stats: ProfileStats, exercises_completed: int, now: datetime | None = None) -> ProfileStats:
    """Profile stats after one finished lesson."""
    if now is None:
        now = datetime.now(UTC)
    return replace(
        stats,
        streak=next_streak(stats.streak, stats.last_played_at, now),
        total_completed=stats.total_completed + exercises_completed,
        last_played_at=now,
    )
