"""Team composition checks: personality quotas, role variety, activity caps.

All functions are *pure*.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from teammate.engine.fit_scoring import MAX_SHARED_ACTIVITY, MAX_THINKERS
from teammate.personality_types import QUOTA_CATEGORIES, PersonalityCategory
from teammate.role_models import MIN_DISTINCT_ROLES
from teammate.team import Team


MIN_TEAM_SIZE = 3

ValidationMode = Literal["strict", "relaxed"]


# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------
class CompositionReport(BaseModel):
    """Summary of one team's composition and any rule violations."""

    team_id: str
    mode: ValidationMode
    size: int = Field(ge=0)
    category_counts: dict[str, int]
    distinct_roles: int = Field(ge=0)
    violations: list[str] = Field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.violations


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------
def _rule_activity_cap(team: Team, violations: list[str]) -> None:
    for activity, count in sorted(team.activity_counts().items()):
        if count > MAX_SHARED_ACTIVITY:
            violations.append(
                f"activity {activity!r} shared by {count} members (max {MAX_SHARED_ACTIVITY})"
            )


def _strict_rules(team: Team, team_size: int, violations: list[str]) -> None:
    counts = team.category_counts()
    leaders = counts[PersonalityCategory.LEADER]
    thinkers = counts[PersonalityCategory.THINKER]

    if team.size() != team_size:
        violations.append(f"size {team.size()} != {team_size}")
    if leaders != 1:
        violations.append(f"{leaders} leaders (need exactly 1)")
    if not 1 <= thinkers <= MAX_THINKERS:
        violations.append(f"{thinkers} thinkers (need 1-{MAX_THINKERS})")
    quota_total = sum(counts[c] for c in QUOTA_CATEGORIES)
    if quota_total != team.size():
        violations.append(
            f"{team.size() - quota_total} members outside leader/thinker/balanced"
        )
    roles = len(team.roles_present())
    if roles < MIN_DISTINCT_ROLES:
        violations.append(f"{roles} distinct roles (need {MIN_DISTINCT_ROLES})")
    _rule_activity_cap(team, violations)


def _relaxed_rules(team: Team, violations: list[str]) -> None:
    if team.size() < MIN_TEAM_SIZE:
        violations.append(f"size {team.size()} < {MIN_TEAM_SIZE}")
    if team.count_category(PersonalityCategory.LEADER) < 1:
        violations.append("no leader")
    if team.count_category(PersonalityCategory.THINKER) < 1:
        violations.append("no thinker")
    _rule_activity_cap(team, violations)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def check_team_composition(
    team: Team,
    team_size: int,
    mode: ValidationMode = "strict",
) -> list[str]:
    """Return rule violations for *team*; an empty list means valid.

    ``strict`` applies to teams built from the whole population, ``relaxed``
    to teams built from leftover (unformed) participants.
    """
    violations: list[str] = []
    if mode == "strict":
        _strict_rules(team, team_size, violations)
    elif mode == "relaxed":
        _relaxed_rules(team, violations)
    else:
        raise ValueError(f"Unknown validation mode: {mode!r}")
    return violations


def is_valid_team(team: Team, team_size: int, mode: ValidationMode = "strict") -> bool:
    return not check_team_composition(team, team_size, mode)


def build_composition_report(
    team: Team,
    team_size: int,
    mode: ValidationMode = "strict",
) -> CompositionReport:
    """Describe *team*'s make-up alongside its violations."""
    counts = team.category_counts()
    return CompositionReport(
        team_id=team.id,
        mode=mode,
        size=team.size(),
        category_counts={c.value: counts.get(c, 0) for c in PersonalityCategory},
        distinct_roles=len(team.roles_present()),
        violations=check_team_composition(team, team_size, mode),
    )
