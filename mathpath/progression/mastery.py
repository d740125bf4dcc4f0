"""
Mastery and skill-unlock state machine.

Per skill:

    locked -> available -> learning (1) -> practicing (2) -> mastered (3)

- A skill is unlocked when it has no prerequisite or its prerequisite has
  reached PRACTICING. Unlocking before full mastery keeps learners moving.
- Any finished lesson lifts level 0 to 1. Higher levels need the score in
  MASTERY_THRESHOLDS for the current level. MASTERED never regresses.
- The playable skill is the last unlocked, not yet mastered skill in
  curriculum order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from enum import Enum, IntEnum

from mathpath.curriculum.models import Skill


class MasteryLevel(IntEnum):
    """Stored mastery level of one skill."""

    UNATTEMPTED = 0
    LEARNING = 1
    PRACTICING = 2
    MASTERED = 3

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return self.name.replace("_", " ").title()


class SkillStatus(str, Enum):
    """Status of a skill on the learning path."""

    LOCKED = "locked"
    AVAILABLE = "available"
    LEARNING = "learning"
    PRACTICING = "practicing"
    MASTERED = "mastered"

    @property
    def is_playable(self) -> bool:
        return self in (SkillStatus.AVAILABLE, SkillStatus.LEARNING, SkillStatus.PRACTICING)

    @property
    def emoji(self) -> str:
        """Status glyph for CLI display."""
        return {
            SkillStatus.LOCKED: "🔒",
            SkillStatus.AVAILABLE: "○",
            SkillStatus.LEARNING: "◔",
            SkillStatus.PRACTICING: "◑",
            SkillStatus.MASTERED: "●",
        }[self]

    @property
    def color(self) -> str:
        """Rich color for CLI display."""
        return {
            SkillStatus.LOCKED: "dim",
            SkillStatus.AVAILABLE: "white",
            SkillStatus.LEARNING: "yellow",
            SkillStatus.PRACTICING: "cyan",
            SkillStatus.MASTERED: "green",
        }[self]


# Lesson score (out of 10) needed to move up from the keyed level
MASTERY_THRESHOLDS: dict[int, int] = {
    1: 7,
    2: 8,
    3: 9,
}

# Prerequisite level that unlocks a dependent skill
UNLOCK_LEVEL = MasteryLevel.PRACTICING

_LEVEL_STATUS = {
    MasteryLevel.UNATTEMPTED: SkillStatus.AVAILABLE,
    MasteryLevel.LEARNING: SkillStatus.LEARNING,
    MasteryLevel.PRACTICING: SkillStatus.PRACTICING,
    MasteryLevel.MASTERED: SkillStatus.MASTERED,
}


def clamp_level(level: int) -> MasteryLevel:
    """Coerce a stored integer into a valid MasteryLevel."""
    return MasteryLevel(min(max(int(level), MasteryLevel.UNATTEMPTED), MasteryLevel.MASTERED))


def next_mastery_level(current: int, score: int) -> MasteryLevel:
    """Level after a finished lesson scoring ``score`` at level ``current``."""
    level = clamp_level(current)
    if level == MasteryLevel.UNATTEMPTED:
        return MasteryLevel.LEARNING
    if level == MasteryLevel.MASTERED:
        return level
    if score >= MASTERY_THRESHOLDS[level]:
        return MasteryLevel(level + 1)
    return level


def is_unlocked(skill: Skill, levels: Mapping[str, int]) -> bool:
    """True if the skill has no prerequisite or the prerequisite is practiced enough."""
    if skill.prerequisite is None:
        return True
    return levels.get(skill.prerequisite, 0) >= UNLOCK_LEVEL


def skill_status(skill: Skill, levels: Mapping[str, int]) -> SkillStatus:
    """Status of one skill given every skill's mastery level (missing = 0)."""
    if not is_unlocked(skill, levels):
        return SkillStatus.LOCKED
    return _LEVEL_STATUS[clamp_level(levels.get(skill.id, 0))]


def skill_statuses(skills: Iterable[Skill], levels: Mapping[str, int]) -> dict[str, SkillStatus]:
    """Status of every skill, in curriculum order."""
    return {skill.id: skill_status(skill, levels) for skill in skills}


def select_playable(ordered_statuses: Sequence[tuple[str, SkillStatus]]) -> str | None:
    """Last skill in curriculum order whose status is playable, if any."""
    for skill_id, status in reversed(ordered_statuses):
        if status.is_playable:
            return skill_id
    return None


def playable_skill_id(skills: Sequence[Skill], levels: Mapping[str, int]) -> str | None:
    """The skill new lessons are generated against, or None if the path is done."""
    return select_playable([(skill.id, skill_status(skill, levels)) for skill in skills])
