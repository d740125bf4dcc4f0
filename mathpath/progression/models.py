"""Records exchanged with the persistence collaborator."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Profile:
    """Learner profile."""

    id: str
    name: str
    created_at: datetime


@dataclass(frozen=True)
class MasteryRecord:
    """Mastery of one skill for one profile."""

    profile_id: str
    skill_id: str
    mastery_level: int = 0
    best_score: int = 0
    attempts: int = 0
    updated_at: datetime | None = None

    @classmethod
    def default(cls, profile_id: str, skill_id: str) -> MasteryRecord:
        """Zero-valued record for a skill that has never been played."""
        return cls(profile_id=profile_id, skill_id=skill_id)


@dataclass(frozen=True)
class ProfileStats:
    """Profile-level counters."""

    profile_id: str
    streak: int = 0
    total_completed: int = 0
    last_played_at: datetime | None = None

    @classmethod
    def default(cls, profile_id: str) -> ProfileStats:
        return cls(profile_id=profile_id)
