"""
Progression Service.

Applies a finished lesson to a learner's stored progress:
- Mastery level, best score and attempts for the played skill
- Streak and lifetime counters for the profile
- Which skills became available as a result
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from loguru import logger

from mathpath.curriculum import Curriculum, default_curriculum
from mathpath.session.planner import SESSION_LENGTH

from .mastery import (
    MasteryLevel,
    SkillStatus,
    clamp_level,
    next_mastery_level,
    playable_skill_id,
    skill_statuses,
)
from .models import MasteryRecord, ProfileStats
from .streak import update_stats

if TYPE_CHECKING:
    from mathpath.db.store import ProgressStore


@dataclass(frozen=True)
class ProfileProgress:
    """Everything known about one profile's progress, defaults filled in."""

    profile_id: str
    records: dict[str, MasteryRecord]
    stats: ProfileStats

    @property
    def levels(self) -> dict[str, int]:
        return {skill_id: record.mastery_level for skill_id, record in self.records.items()}


@dataclass(frozen=True)
class SessionOutcome:
    """Result of applying one finished lesson."""

    skill_id: str
    score: int
    previous_level: MasteryLevel
    new_level: MasteryLevel
    record: MasteryRecord
    stats: ProfileStats
    newly_unlocked: list[str] = field(default_factory=list)

    @property
    def leveled_up(self) -> bool:
        return self.new_level > self.previous_level


class ProgressionService:
    """Reads and updates progress through a ProgressStore."""

    def __init__(self, store: ProgressStore, curriculum: Curriculum | None = None):
        self.store = store
        self.curriculum = curriculum or default_curriculum()

    def load_profile_progress(self, profile_id: str) -> ProfileProgress:
        """Stored records for every curriculum skill; missing ones are zero-valued."""
        stored = self.store.load_mastery_records(profile_id)
        records = {
            skill.id: stored.get(skill.id) or MasteryRecord.default(profile_id, skill.id)
            for skill in self.curriculum.skills
        }
        stats = self.store.load_profile_stats(profile_id) or ProfileStats.default(profile_id)
        return ProfileProgress(profile_id=profile_id, records=records, stats=stats)

    def skill_statuses(self, profile_id: str) -> dict[str, SkillStatus]:
        progress = self.load_profile_progress(profile_id)
        return skill_statuses(self.curriculum.skills, progress.levels)

    def playable_skill_id(self, profile_id: str) -> str | None:
        progress = self.load_profile_progress(profile_id)
        return playable_skill_id(self.curriculum.skills, progress.levels)

    def complete_session(
        self,
        profile_id: str,
        skill_id: str,
        score: int,
        total: int = SESSION_LENGTH,
        now: datetime | None = None,
    ) -> SessionOutcome:
        """
        Record a finished lesson of ``total`` exercises scoring ``score``.

        Raises:
            ValueError: unknown or locked skill, or a score outside 0..total
        """
        if skill_id not in self.curriculum.skill_map:
            raise ValueError(f"Unknown skill: {skill_id}")
        if not 0 <= score <= total:
            raise ValueError(f"Score {score} outside 0..{total}")
        if now is None:
            now = datetime.now(UTC)

        progress = self.load_profile_progress(profile_id)
        statuses_before = skill_statuses(self.curriculum.skills, progress.levels)
        if statuses_before[skill_id] == SkillStatus.LOCKED:
            raise ValueError(f"Skill is locked: {skill_id}")

        old = progress.records[skill_id]
        previous_level = clamp_level(old.mastery_level)
        new_level = next_mastery_level(previous_level, score)
        record = MasteryRecord(
            profile_id=profile_id,
            skill_id=skill_id,
            mastery_level=int(new_level),
            best_score=max(old.best_score, score),
            attempts=old.attempts + 1,
            updated_at=now,
        )
        stats = update_stats(progress.stats, total, now)

        self.store.save_lesson_result(record, stats)

        levels_after = {**progress.levels, skill_id: record.mastery_level}
        statuses_after = skill_statuses(self.curriculum.skills, levels_after)
        newly_unlocked = [
            sid
            for sid, status in statuses_after.items()
            if statuses_before[sid] == SkillStatus.LOCKED and status != SkillStatus.LOCKED
        ]

        logger.info(
            f"Lesson on {skill_id}: {score}/{total}, "
            f"level {previous_level.display_name} -> {new_level.display_name}, streak {stats.streak}"
        )
        if newly_unlocked:
            logger.info(f"Unlocked: {', '.join(newly_unlocked)}")

        return SessionOutcome(
            skill_id=skill_id,
            score=score,
            previous_level=previous_level,
            new_level=new_level,
            record=record,
            stats=stats,
            newly_unlocked=newly_unlocked,
        )
