"""
Progression Module - mastery levels, skill unlocking and streaks.
"""

from mathpath.progression.mastery import (
    MASTERY_THRESHOLDS,
    UNLOCK_LEVEL,
    MasteryLevel,
    SkillStatus,
    is_unlocked,
    next_mastery_level,
    playable_skill_id,
    select_playable,
    skill_status,
    skill_statuses,
)
from mathpath.progression.models import MasteryRecord, Profile, ProfileStats
from mathpath.progression.service import ProfileProgress, ProgressionService, SessionOutcome
from mathpath.progression.streak import calendar_days_between, next_streak, update_stats

__all__ = [
    "MASTERY_THRESHOLDS",
    "UNLOCK_LEVEL",
    "MasteryLevel",
    "MasteryRecord",
    "Profile",
    "ProfileProgress",
    "ProfileStats",
    "ProgressionService",
    "SessionOutcome",
    "SkillStatus",
    "calendar_days_between",
    "is_unlocked",
    "next_mastery_level",
    "next_streak",
    "playable_skill_id",
    "select_playable",
    "skill_status",
    "skill_statuses",
    "update_stats",
]
