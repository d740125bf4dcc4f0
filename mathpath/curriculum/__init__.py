"""
Curriculum: the static skill graph.

Skills are grouped into colored sections and chained by prerequisites.
"""

from mathpath.curriculum.catalog import (
    BUILTIN_CURRICULUM,
    Curriculum,
    build_curriculum,
    default_curriculum,
    load_curriculum,
)
from mathpath.curriculum.models import (
    Constraints,
    OperationKind,
    ProblemConfig,
    Section,
    Skill,
    SkillConfig,
)

__all__ = [
    "BUILTIN_CURRICULUM",
    "Constraints",
    "Curriculum",
    "OperationKind",
    "ProblemConfig",
    "Section",
    "Skill",
    "SkillConfig",
    "build_curriculum",
    "default_curriculum",
    "load_curriculum",
]
