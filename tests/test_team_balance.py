"""Tests for teammate/engine/team_balance.py: strict and relaxed checks."""

import pytest

from teammate.engine.team_balance import (
    build_composition_report,
    check_team_composition,
    is_valid_team,
)
from teammate.participant import Participant
from teammate.personality_types import PersonalityCategory
from teammate.role_models import Role
from teammate.team import Team


L, T, B, U = (
    PersonalityCategory.LEADER,
    PersonalityCategory.THINKER,
    PersonalityCategory.BALANCED,
    PersonalityCategory.UNCLASSIFIED,
)


def _p(pid, category, role, activity) -> Participant:
    return Participant(
        id=pid, activity=activity, skill_level=50, role=role, personality_override=category,
    )


def _team(*members) -> Team:
    return Team("T1", list(members))


@pytest.fixture
def good_team():
    return _team(
        _p("P1", L, Role.ATTACKER, "CHESS"),
        _p("P2", T, Role.DEFENDER, "FIFA"),
        _p("P3", B, Role.STRATEGIST, "CHESS"),
        _p("P4", T, Role.SUPPORTER, "VALORANT"),
    )


# ---------------------------------------------------------------------------
# strict
# ---------------------------------------------------------------------------
class TestStrict:
    def test_valid_team(self, good_team):
        assert check_team_composition(good_team, 4, "strict") == []
        assert is_valid_team(good_team, 4)

    def test_wrong_size(self, good_team):
        violations = check_team_composition(good_team, 5, "strict")
        assert any("size" in v for v in violations)

    def test_two_leaders(self):
        team = _team(
            _p("P1", L, Role.ATTACKER, "CHESS"),
            _p("P2", T, Role.DEFENDER, "FIFA"),
            _p("P3", L, Role.STRATEGIST, "DOTA 2"),
        )
        assert any("leaders" in v for v in check_team_composition(team, 3))

    def test_three_thinkers(self):
        team = _team(
            _p("P1", L, Role.ATTACKER, "CHESS"),
            _p("P2", T, Role.DEFENDER, "FIFA"),
            _p("P3", T, Role.STRATEGIST, "DOTA 2"),
            _p("P4", T, Role.SUPPORTER, "VALORANT"),
        )
        assert any("thinkers" in v for v in check_team_composition(team, 4))

    def test_unclassified_member_fails(self):
        team = _team(
            _p("P1", L, Role.ATTACKER, "CHESS"),
            _p("P2", T, Role.DEFENDER, "FIFA"),
            _p("P3", U, Role.STRATEGIST, "DOTA 2"),
        )
        violations = check_team_composition(team, 3)
        assert violations == ["1 members outside leader/thinker/balanced"]

    def test_too_few_roles(self):
        team = _team(
            _p("P1", L, Role.ATTACKER, "CHESS"),
            _p("P2", T, Role.ATTACKER, "FIFA"),
            _p("P3", B, Role.DEFENDER, "DOTA 2"),
        )
        assert any("distinct roles" in v for v in check_team_composition(team, 3))

    def test_activity_cap(self):
        team = _team(
            _p("P1", L, Role.ATTACKER, "CHESS"),
            _p("P2", T, Role.DEFENDER, "CHESS"),
            _p("P3", B, Role.STRATEGIST, "CHESS"),
        )
        violations = check_team_composition(team, 3)
        assert any("'CHESS' shared by 3" in v for v in violations)


# ---------------------------------------------------------------------------
# relaxed
# ---------------------------------------------------------------------------
class TestRelaxed:
    def test_balanced_not_required_and_roles_ignored(self):
        team = _team(
            _p("P1", L, Role.ATTACKER, "CHESS"),
            _p("P2", T, Role.ATTACKER, "FIFA"),
            _p("P3", T, Role.ATTACKER, "DOTA 2"),
            _p("P4", T, Role.ATTACKER, "VALORANT"),
        )
        assert check_team_composition(team, 4, "relaxed") == []

    def test_smaller_than_target_is_fine_above_minimum(self, good_team):
        assert check_team_composition(good_team, 6, "relaxed") == []

    def test_below_minimum(self):
        team = _team(_p("P1", L, Role.ATTACKER, "CHESS"), _p("P2", T, Role.DEFENDER, "FIFA"))
        assert any("size" in v for v in check_team_composition(team, 3, "relaxed"))

    def test_needs_leader_and_thinker(self):
        team = _team(
            _p("P1", B, Role.ATTACKER, "CHESS"),
            _p("P2", B, Role.DEFENDER, "FIFA"),
            _p("P3", U, Role.STRATEGIST, "DOTA 2"),
        )
        violations = check_team_composition(team, 3, "relaxed")
        assert "no leader" in violations
        assert "no thinker" in violations

    def test_activity_cap_still_enforced(self):
        team = _team(
            _p("P1", L, Role.ATTACKER, "FIFA"),
            _p("P2", T, Role.DEFENDER, "FIFA"),
            _p("P3", B, Role.STRATEGIST, "FIFA"),
        )
        assert not is_valid_team(team, 3, "relaxed")


class TestReport:
    def test_report_fields(self, good_team):
        report = build_composition_report(good_team, 4)
        assert report.valid
        assert report.team_id == "T1"
        assert report.category_counts == {
            "LEADER": 1, "THINKER": 2, "BALANCED": 1, "UNCLASSIFIED": 0,
        }
        assert report.distinct_roles == 4

    def test_unknown_mode(self, good_team):
        with pytest.raises(ValueError):
            check_team_composition(good_team, 4, "lenient")
