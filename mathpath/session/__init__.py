"""
Session Module - lesson planning and per-lesson state.
"""

from mathpath.session.lesson import (
    LessonResult,
    LessonSession,
    MissedItem,
    SessionState,
    stars_for_score,
)
from mathpath.session.planner import (
    SESSION_COMPOSITION,
    SESSION_LENGTH,
    SlotKind,
    generate_for_slot,
    plan_session,
)

__all__ = [
    "LessonResult",
    "LessonSession",
    "MissedItem",
    "SESSION_COMPOSITION",
    "SESSION_LENGTH",
    "SessionState",
    "SlotKind",
    "generate_for_slot",
    "plan_session",
    "stars_for_score",
]
