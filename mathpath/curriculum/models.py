"""Data models for the skill curriculum."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class OperationKind(str, Enum):
    """Arithmetic operation a skill drills."""

    ADDITION = "addition"
    SUBTRACTION = "subtraction"
    MULTIPLICATION = "multiplication"
    DIVISION = "division"
    MIXED_ADD_SUB = "mixed_add_sub"
    MIXED_MUL_DIV = "mixed_mul_div"

    @property
    def can_divide(self) -> bool:
        return self in (OperationKind.DIVISION, OperationKind.MIXED_MUL_DIV)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


class Constraints(_Frozen):
    """Optional generation constraints."""

    sum_max: int | None = Field(default=None, alias="sumMax", ge=0)
    doubles: bool = False
    fixed_operand: int | None = Field(default=None, alias="fixedOperand", ge=0)


class ProblemConfig(_Frozen):
    """
    Numeric recipe for one skill's problems.

    Ranges are inclusive. For division, operand1Range is the quotient range and
    operand2Range the divisor range.
    """

    type: OperationKind
    operand1_range: tuple[int, int] = Field(alias="operand1Range")
    operand2_range: tuple[int, int] = Field(alias="operand2Range")
    constraints: Constraints = Field(default_factory=Constraints)

    @field_validator("operand1_range", "operand2_range")
    @classmethod
    def _check_range(cls, value: tuple[int, int]) -> tuple[int, int]:
        low, high = value
        if low < 0:
            raise ValueError(f"range minimum must be non-negative, got {low}")
        if low > high:
            raise ValueError(f"range minimum {low} exceeds maximum {high}")
        return value

    @model_validator(mode="after")
    def _check_divisor(self) -> ProblemConfig:
        if self.type.can_divide:
            if self.constraints.fixed_operand == 0:
                raise ValueError("fixedOperand cannot be 0 for a config that divides")
            if self.constraints.fixed_operand is None and self.operand2_range[0] < 1:
                raise ValueError("divisor range must start at 1 or more")
        return self


# The skill config a generator consumes
SkillConfig = ProblemConfig


class Skill(_Frozen):
    """One node of the skill tree."""

    id: str = Field(min_length=1)
    name: str
    icon: str = ""
    prerequisite: str | None = None
    problem_config: ProblemConfig = Field(alias="problemConfig")


class Section(_Frozen):
    """Named, colored group of skills on the learning path."""

    name: str
    color: str = "#6C63FF"
    skills: tuple[Skill, ...]
