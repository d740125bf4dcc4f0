"""
Lesson state for one ten-slot practice session.

The caller (UI layer) owns a LessonSession for the length of one lesson:

    lesson = LessonSession.start(skill)
    while not lesson.is_over:
        verdict = lesson.submit(submission_for(lesson.current_exercise))
        lesson.advance()
    result = lesson.result()

The engine never caches or shares lesson state.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

from loguru import logger

from mathpath.core.rng import RandomSource, resolve_rng
from mathpath.curriculum.models import Skill
from mathpath.exercises import evaluate, get_handler
from mathpath.exercises.base import EvaluationResult, Exercise, Submission

from .planner import SlotKind, generate_for_slot, plan_session


@dataclass(frozen=True)
class MissedItem:
    """An answered-wrong item for the end-of-lesson review list."""

    description: str
    answer_text: str


@dataclass
class SessionState:
    """Serializable lesson progress."""

    active_skill_id: str
    plan: list[SlotKind]
    current_index: int = 0
    score: int = 0
    missed: list[MissedItem] = field(default_factory=list)

    @property
    def is_over(self) -> bool:
        return self.current_index >= len(self.plan)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["plan"] = [kind.value for kind in self.plan]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> SessionState:
        """Create from dictionary."""
        return cls(
            active_skill_id=data["active_skill_id"],
            plan=[SlotKind(kind) for kind in data["plan"]],
            current_index=int(data.get("current_index", 0)),
            score=int(data.get("score", 0)),
            missed=[MissedItem(**item) for item in data.get("missed", [])],
        )


@dataclass(frozen=True)
class LessonResult:
    """Final outcome of a lesson, fed to the progression service."""

    skill_id: str
    score: int
    total: int
    missed: tuple[MissedItem, ...]

    @property
    def stars(self) -> int:
        return stars_for_score(self.score, self.total)


def stars_for_score(score: int, total: int) -> int:
    """3 stars for a perfect lesson, 2 for 80% or better, otherwise 1."""
    if total <= 0:
        return 1
    if score >= total:
        return 3
    if score * 10 >= total * 8:
        return 2
    return 1


class LessonSession:
    """
    Drives one lesson: plan, materialize each slot, grade, collect misses.

    Each slot is graded at most once; a repeated submission gets the first
    verdict back and leaves the score alone.
    """

    def __init__(
        self,
        skill: Skill,
        state: SessionState,
        rng: RandomSource | None = None,
    ):
        self.skill = skill
        self.state = state
        self._rng = resolve_rng(rng)
        self._exercise: Exercise | None = None
        self._verdict: EvaluationResult | None = None
        if not state.is_over:
            self._exercise = self._materialize()

    @classmethod
    def start(cls, skill: Skill, rng: RandomSource | None = None) -> LessonSession:
        """Plan a fresh lesson for ``skill`` and build its first exercise."""
        rng = resolve_rng(rng)
        state = SessionState(active_skill_id=skill.id, plan=plan_session(rng))
        logger.debug(f"Lesson started for {skill.id}: {[kind.value for kind in state.plan]}")
        return cls(skill, state, rng)

    @property
    def is_over(self) -> bool:
        return self.state.is_over

    @property
    def current_slot(self) -> SlotKind | None:
        if self.is_over:
            return None
        return self.state.plan[self.state.current_index]

    @property
    def current_exercise(self) -> Exercise | None:
        return self._exercise

    def submit(self, submission: Submission) -> EvaluationResult:
        """Grade the learner's answer for the current slot."""
        if self._exercise is None:
            raise ValueError("Lesson is over; nothing to submit against.")
        if self._verdict is not None:
            logger.debug(f"Slot {self.state.current_index} already graded; ignoring resubmission")
            return self._verdict

        verdict = evaluate(self._exercise, submission)
        if verdict.correct:
            self.state.score += 1
        else:
            self.state.missed.append(MissedItem(verdict.description, verdict.answer_text))
        self._verdict = verdict
        return verdict

    def advance(self) -> Exercise | None:
        """Move to the next slot. An ungraded slot counts as missed."""
        if self.is_over:
            return None

        if self._verdict is None and self._exercise is not None:
            handler = get_handler(self._exercise.kind)
            description, answer_text = handler.describe(self._exercise)
            self.state.missed.append(MissedItem(description, answer_text))

        self.state.current_index += 1
        self._verdict = None
        self._exercise = None if self.is_over else self._materialize()
        return self._exercise

    def result(self) -> LessonResult:
        """Final score and missed items; only valid once the lesson is over."""
        if not self.is_over:
            raise ValueError(
                f"Lesson still in progress ({self.state.current_index}/{len(self.state.plan)})."
            )
        return LessonResult(
            skill_id=self.state.active_skill_id,
            score=self.state.score,
            total=len(self.state.plan),
            missed=tuple(self.state.missed),
        )

    def _materialize(self) -> Exercise:
        kind = self.state.plan[self.state.current_index]
        return generate_for_slot(kind, self.skill.problem_config, self._rng)
