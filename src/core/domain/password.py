"""Password strength value objects.

Notes:
- Results are recomputed from scratch on every keystroke, so they are frozen
  and carry no identity.
- Field aliases keep the camelCase names used by the web frontend.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class StrengthLevel(str, Enum):
    """Coarse strength label derived from a score."""

    WEAK = "weak"
    FAIR = "fair"
    GOOD = "good"
    STRONG = "strong"

    @property
    def rank(self) -> int:
        """Position in the weak < fair < good < strong ordering."""

        return _LEVEL_ORDER.index(self)

    @classmethod
    def from_score(cls, score: int) -> "StrengthLevel":
        if score <= 1:
            return cls.WEAK
        if score == 2:
            return cls.FAIR
        if score == 3:
            return cls.GOOD
        return cls.STRONG


_LEVEL_ORDER = (StrengthLevel.WEAK, StrengthLevel.FAIR, StrengthLevel.GOOD, StrengthLevel.STRONG)


class PasswordCriteria(BaseModel):
    """The five independent checks applied to a password."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    has_min_length: bool = Field(..., alias="hasMinLength")
    has_uppercase: bool = Field(..., alias="hasUppercase")
    has_lowercase: bool = Field(..., alias="hasLowercase")
    has_numbers: bool = Field(..., alias="hasNumbers")
    has_special_chars: bool = Field(..., alias="hasSpecialChars")

    def as_tuple(self) -> tuple[bool, bool, bool, bool, bool]:
        """Criteria in feedback order."""

        return (
            self.has_min_length,
            self.has_uppercase,
            self.has_lowercase,
            self.has_numbers,
            self.has_special_chars,
        )


class PasswordStrengthResult(BaseModel):
    """Outcome of a single strength analysis."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=5, description="Number of satisfied criteria.")
    level: StrengthLevel
    criteria: PasswordCriteria
    feedback: tuple[str, ...] = Field(
        default=(),
        description="One suggestion per unmet criterion, in fixed order.",
    )
