"""Personality categories for tournament participants.

Participants answer a five-question survey; the scaled answer total
(0-100) maps onto one of four categories that drive team quotas.
"""

from __future__ import annotations

from enum import Enum


# ---------------------------------------------------------------------------
# Category enum
# ---------------------------------------------------------------------------
class PersonalityCategory(str, Enum):
    """Personality category derived from a 0-100 personality score."""

    LEADER = "LEADER"
    THINKER = "THINKER"
    BALANCED = "BALANCED"
    UNCLASSIFIED = "UNCLASSIFIED"

    @classmethod
    def parse(cls, value: str) -> PersonalityCategory:
        """Case-insensitive lookup; raises ``ValueError`` for unknown names."""
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown personality category: {value!r}") from None


# Score thresholds, checked top-down. BALANCED sits between LEADER and THINKER.
_LEADER_THRESHOLD = 90
_BALANCED_THRESHOLD = 70
_THINKER_THRESHOLD = 50

QUOTA_CATEGORIES: tuple[PersonalityCategory, ...] = (
    PersonalityCategory.LEADER,
    PersonalityCategory.THINKER,
    PersonalityCategory.BALANCED,
)

SURVEY_QUESTION_COUNT = 5
SURVEY_ANSWER_MIN = 1
SURVEY_ANSWER_MAX = 5
SURVEY_SCALE = 4


def classify_personality(score: int) -> PersonalityCategory:
    """Map a personality score onto its category.

    Total over all integers: out-of-range scores fall through the same
    thresholds (negative → UNCLASSIFIED, >100 → LEADER).

    Args:
        score: Scaled personality score, nominally 0-100.

    Returns:
        The matching PersonalityCategory.
    """
    if score >= _LEADER_THRESHOLD:
        return PersonalityCategory.LEADER
    if score >= _BALANCED_THRESHOLD:
        return PersonalityCategory.BALANCED
    if score >= _THINKER_THRESHOLD:
        return PersonalityCategory.THINKER
    return PersonalityCategory.UNCLASSIFIED


def calculate_personality_score(answers: list[int]) -> int:
    """Scale five 1-5 survey answers onto the 20-100 personality range.

    Raises:
        ValueError: If the answer count or any answer is out of range.
    """
    if len(answers) != SURVEY_QUESTION_COUNT:
        raise ValueError(
            f"Expected {SURVEY_QUESTION_COUNT} survey answers, got {len(answers)}"
        )
    for answer in answers:
        if not SURVEY_ANSWER_MIN <= answer <= SURVEY_ANSWER_MAX:
            raise ValueError(
                f"Survey answers must be between {SURVEY_ANSWER_MIN} and "
                f"{SURVEY_ANSWER_MAX}, got {answer}"
            )
    return sum(answers) * SURVEY_SCALE
