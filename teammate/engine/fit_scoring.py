"""Fit scoring: how good a candidate is for a partially built team.

All functions are *pure* apart from the tie-break jitter drawn from the
supplied random source.
"""

from __future__ import annotations

from typing import Protocol

from teammate.participant import Participant
from teammate.personality_types import PersonalityCategory
from teammate.team import Team


# ---------------------------------------------------------------------------
# Weights
# ---------------------------------------------------------------------------
ROLE_NOVELTY_BONUS = 2.0
NEW_ACTIVITY_BONUS = 1.0
SECOND_ACTIVITY_BONUS = 0.2
SKILL_BALANCE_WEIGHT = 2.0
TARGET_MEAN_SKILL = 50.0
THINKER_HEADROOM_BONUS = 1.0
LEADER_HEADROOM_BONUS = 5.0
TIE_BREAK_JITTER = 0.01

MAX_THINKERS = 2
MAX_LEADERS = 1
MAX_SHARED_ACTIVITY = 2


class RandomSource(Protocol):
    def random(self) -> float: ...


class ZeroRandom:
    """Random source that always returns 0.0 (disables jitter)."""

    def random(self) -> float:
        return 0.0


# ---------------------------------------------------------------------------
# Individual terms
# ---------------------------------------------------------------------------
def _role_novelty(candidate: Participant, team: Team) -> float:
    return ROLE_NOVELTY_BONUS if candidate.role not in team.roles_present() else 0.0


def _activity_diversity(candidate: Participant, team: Team) -> float:
    shared = team.count_activity(candidate.activity)
    if shared == 0:
        return NEW_ACTIVITY_BONUS
    if shared == 1:
        return SECOND_ACTIVITY_BONUS
    # saturation is a hard gate in the builder, not a penalty here
    return 0.0


def _skill_balance(candidate: Participant, team: Team) -> float:
    size = team.size()
    projected = (team.average_skill() * size + candidate.skill_level) / (size + 1)
    projected = min(max(projected, 0.0), 100.0)
    distance = abs(projected - TARGET_MEAN_SKILL) / TARGET_MEAN_SKILL
    return SKILL_BALANCE_WEIGHT * (1.0 - distance)


def _quota_headroom(candidate: Participant, team: Team) -> float:
    category = candidate.personality_category
    if category is PersonalityCategory.LEADER:
        if team.count_category(PersonalityCategory.LEADER) == 0:
            return LEADER_HEADROOM_BONUS
        return 0.0
    if category is PersonalityCategory.THINKER:
        if team.count_category(PersonalityCategory.THINKER) < MAX_THINKERS:
            return THINKER_HEADROOM_BONUS
        return 0.0
    if category in (PersonalityCategory.BALANCED, PersonalityCategory.UNCLASSIFIED):
        return 0.0
    raise ValueError(f"Unhandled personality category: {category!r}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def score_candidate(
    candidate: Participant,
    team: Team,
    target_size: int,
    rng: RandomSource | None = None,
) -> float:
    """Score adding *candidate* to *team*; higher is a better fit.

    Args:
        candidate: Participant under consideration.
        team: Partially built team (not modified).
        target_size: Size the team is being built towards.
        rng: Source for the ``[0, 0.01)`` tie-break jitter. ``None`` disables it.

    Returns:
        Sum of role novelty, activity diversity, skill balance, quota
        headroom and jitter.
    """
    if target_size < 1:
        raise ValueError("target_size must be positive")
    score = (
        _role_novelty(candidate, team)
        + _activity_diversity(candidate, team)
        + _skill_balance(candidate, team)
        + _quota_headroom(candidate, team)
    )
    if rng is not None:
        score += rng.random() * TIE_BREAK_JITTER
    return score
