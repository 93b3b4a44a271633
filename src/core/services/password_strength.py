"""Password strength analysis.

Pure and cheap: callers run it on every change of the password field, no
debouncing needed. Never raises.
"""

from __future__ import annotations

import re

from core.domain.password import PasswordCriteria, PasswordStrengthResult, StrengthLevel

MIN_LENGTH = 6

SPECIAL_CHARACTERS = "!@#$%^&*()_+-=[]{};':\"\\|,.<>/?"

_UPPERCASE_RE = re.compile(r"[A-Z]")
_LOWERCASE_RE = re.compile(r"[a-z]")
_DIGIT_RE = re.compile(r"[0-9]")
_SPECIAL_RE = re.compile("[" + re.escape(SPECIAL_CHARACTERS) + "]")

# Same order as PasswordCriteria.as_tuple().
FEEDBACK_MESSAGES = (
    f"At least {MIN_LENGTH} characters",
    "Include uppercase letter",
    "Include lowercase letter",
    "Include a number",
    "Include special character",
)


def evaluate_criteria(password: str) -> PasswordCriteria:
    return PasswordCriteria(
        has_min_length=len(password) >= MIN_LENGTH,
        has_uppercase=_UPPERCASE_RE.search(password) is not None,
        has_lowercase=_LOWERCASE_RE.search(password) is not None,
        has_numbers=_DIGIT_RE.search(password) is not None,
        has_special_chars=_SPECIAL_RE.search(password) is not None,
    )


def analyze(password: str) -> PasswordStrengthResult:
    """Score `password` against the five criteria.

    Returns:
        A fresh `PasswordStrengthResult`; `score` counts satisfied criteria,
        `feedback` lists the unmet ones in fixed order.
    """

    criteria = evaluate_criteria(password)
    flags = criteria.as_tuple()
    score = sum(flags)
    feedback = tuple(msg for met, msg in zip(flags, FEEDBACK_MESSAGES) if not met)
    return PasswordStrengthResult(
        score=score,
        level=StrengthLevel.from_score(score),
        criteria=criteria,
        feedback=feedback,
    )
