"""
Skill catalog: the built-in curriculum and curriculum loading.

The curriculum is an ordered list of sections. Curriculum order doubles as the
topological order of the prerequisite DAG, which load-time validation enforces.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from .models import Section, Skill


def _skill(
    skill_id: str,
    name: str,
    icon: str,
    prerequisite: str | None,
    op: str,
    operand1: tuple[int, int],
    operand2: tuple[int, int],
    **constraints: Any,
) -> dict[str, Any]:
    return {
        "id": skill_id,
        "name": name,
        "icon": icon,
        "prerequisite": prerequisite,
        "problemConfig": {
            "type": op,
            "operand1Range": list(operand1),
            "operand2Range": list(operand2),
            "constraints": constraints,
        },
    }


BUILTIN_CURRICULUM: list[dict[str, Any]] = [
    {
        "name": "Addition Basics",
        "color": "#6C63FF",
        "skills": [
            _skill("add_within_5", "Add to 5", "1+2", None, "addition", (1, 5), (1, 5), sumMax=5),
            _skill("add_within_10", "Add to 10", "5+3", "add_within_5", "addition", (1, 9), (1, 9), sumMax=10),
            _skill("add_doubles", "Doubles", "4+4", "add_within_10", "addition", (1, 10), (1, 10), doubles=True),
            _skill("add_within_20", "Add to 20", "9+7", "add_doubles", "addition", (1, 19), (1, 19), sumMax=20),
        ],
    },
    {
        "name": "Subtraction Basics",
        "color": "#8B5CF6",
        "skills": [
            _skill("sub_within_5", "Sub to 5", "5-2", "add_within_20", "subtraction", (2, 5), (1, 5)),
            _skill("sub_within_10", "Sub to 10", "8-3", "sub_within_5", "subtraction", (2, 10), (1, 10)),
            _skill("sub_within_20", "Sub to 20", "15-8", "sub_within_10", "subtraction", (2, 20), (1, 20)),
        ],
    },
    {
        "name": "Add & Subtract Mix",
        "color": "#7C3AED",
        "skills": [
            _skill("mixed_within_10", "Mix to 10", "±10", "sub_within_20", "mixed_add_sub", (1, 10), (1, 10), sumMax=10),
            _skill("mixed_within_20", "Mix to 20", "±20", "mixed_within_10", "mixed_add_sub", (1, 20), (1, 20), sumMax=20),
        ],
    },
    {
        "name": "Bigger Numbers",
        "color": "#4F46E5",
        "skills": [
            _skill("add_tens", "Add Tens", "30+5", "mixed_within_20", "addition", (10, 50), (1, 9)),
            _skill("sub_tens", "Sub Tens", "40-7", "add_tens", "subtraction", (20, 50), (1, 9)),
            _skill("add_two_digit", "Add 2-Digit", "24+31", "sub_tens", "addition", (10, 99), (10, 99)),
            _skill("sub_two_digit", "Sub 2-Digit", "53-27", "add_two_digit", "subtraction", (20, 99), (10, 99)),
            _skill("mixed_two_digit", "Mix 2-Digit", "±99", "sub_two_digit", "mixed_add_sub", (10, 99), (10, 99)),
        ],
    },
    {
        "name": "Multiplication",
        "color": "#FF8C42",
        "skills": [
            _skill("mul_by_1", "Times 1", "×1", "mixed_two_digit", "multiplication", (1, 9), (1, 1), fixedOperand=1),
            _skill("mul_by_2", "Times 2", "×2", "mul_by_1", "multiplication", (1, 9), (2, 2), fixedOperand=2),
            _skill("mul_by_5", "Times 5", "×5", "mul_by_2", "multiplication", (1, 9), (5, 5), fixedOperand=5),
            _skill("mul_by_10", "Times 10", "×10", "mul_by_5", "multiplication", (1, 9), (10, 10), fixedOperand=10),
        ],
    },
    {
        "name": "Times Tables",
        "color": "#F59E0B",
        "skills": [
            _skill("mul_by_3", "Times 3", "×3", "mul_by_10", "multiplication", (1, 9), (3, 3), fixedOperand=3),
            _skill("mul_by_4", "Times 4", "×4", "mul_by_3", "multiplication", (1, 9), (4, 4), fixedOperand=4),
            _skill("mul_by_6", "Times 6", "×6", "mul_by_4", "multiplication", (1, 9), (6, 6), fixedOperand=6),
            _skill("mul_by_7", "Times 7", "×7", "mul_by_6", "multiplication", (1, 9), (7, 7), fixedOperand=7),
            _skill("mul_by_8", "Times 8", "×8", "mul_by_7", "multiplication", (1, 9), (8, 8), fixedOperand=8),
            _skill("mul_by_9", "Times 9", "×9", "mul_by_8", "multiplication", (1, 9), (9, 9), fixedOperand=9),
            _skill("mul_by_11", "Times 11", "×11", "mul_by_9", "multiplication", (1, 12), (11, 11), fixedOperand=11),
            _skill("mul_by_12", "Times 12", "×12", "mul_by_11", "multiplication", (1, 12), (12, 12), fixedOperand=12),
            _skill("mul_mixed", "Mixed ×", "×?", "mul_by_12", "multiplication", (1, 9), (1, 12)),
        ],
    },
    {
        "name": "Division",
        "color": "#EF4444",
        "skills": [
            _skill("div_by_2", "Divide by 2", "÷2", "mul_mixed", "division", (1, 9), (2, 2), fixedOperand=2),
            _skill("div_by_5", "Divide by 5", "÷5", "div_by_2", "division", (1, 9), (5, 5), fixedOperand=5),
            _skill("div_by_3_4", "Divide 3&4", "÷3÷4", "div_by_5", "division", (1, 9), (3, 4)),
            _skill("div_mixed", "Mixed ÷", "÷?", "div_by_3_4", "division", (1, 12), (2, 9)),
            _skill("mixed_mul_div", "× and ÷", "×÷", "div_mixed", "mixed_mul_div", (1, 12), (2, 9)),
        ],
    },
]


@dataclass(frozen=True)
class Curriculum:
    """Validated, ordered skill graph."""

    sections: tuple[Section, ...]
    skills: tuple[Skill, ...] = field(init=False)
    skill_map: dict[str, Skill] = field(init=False, repr=False)
    section_of: dict[str, Section] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        skills = tuple(skill for section in self.sections for skill in section.skills)
        object.__setattr__(self, "skills", skills)
        object.__setattr__(self, "skill_map", {skill.id: skill for skill in skills})
        object.__setattr__(
            self,
            "section_of",
            {skill.id: section for section in self.sections for skill in section.skills},
        )
        _validate_skill_graph(skills)

    def get_skill(self, skill_id: str) -> Skill | None:
        return self.skill_map.get(skill_id)

    def dependents(self, skill_id: str) -> list[Skill]:
        """Skills that name ``skill_id`` as their prerequisite."""
        return [skill for skill in self.skills if skill.prerequisite == skill_id]


def _validate_skill_graph(skills: Sequence[Skill]) -> None:
    """
    Validate ids are unique and every prerequisite is a known, earlier skill.

    Requiring prerequisites to precede their dependents rules out cycles and
    makes curriculum order a topological order.
    """
    seen: set[str] = set()
    known = {skill.id for skill in skills}
    for skill in skills:
        if skill.id in seen:
            raise ValueError(f"Duplicate skill id: {skill.id}")
        if skill.prerequisite is not None:
            if skill.prerequisite not in known:
                raise ValueError(
                    f"Skill '{skill.id}' has unknown prerequisite '{skill.prerequisite}'."
                )
            if skill.prerequisite not in seen:
                raise ValueError(
                    f"Skill '{skill.id}' appears before its prerequisite '{skill.prerequisite}'."
                )
        seen.add(skill.id)


def build_curriculum(raw_sections: Iterable[dict[str, Any]]) -> Curriculum:
    """Validate raw section dicts (camelCase or snake_case) into a Curriculum."""
    sections = tuple(Section.model_validate(raw) for raw in raw_sections)
    curriculum = Curriculum(sections=sections)
    logger.debug(
        f"Loaded curriculum: {len(curriculum.sections)} sections, {len(curriculum.skills)} skills"
    )
    return curriculum


def load_curriculum(path: Path | str) -> Curriculum:
    """Load a curriculum from a JSON file holding a list of sections."""
    raw = json.loads(Path(path).read_text(encoding="utf-8-sig"))
    if isinstance(raw, dict):
        raw = raw.get("sections", [])
    return build_curriculum(raw)


_default: Curriculum | None = None


def default_curriculum() -> Curriculum:
    """The built-in curriculum, validated once."""
    global _default
    if _default is None:
        _default = build_curriculum(BUILTIN_CURRICULUM)
    return _default
