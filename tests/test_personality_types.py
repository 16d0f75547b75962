"""Tests for teammate/personality_types.py: thresholds and survey scaling."""

import pytest

from teammate.personality_types import (
    QUOTA_CATEGORIES,
    PersonalityCategory,
    calculate_personality_score,
    classify_personality,
)
from teammate.role_models import Role


class TestClassifyPersonality:
    @pytest.mark.parametrize(
        ("score", "expected"),
        [
            (95, PersonalityCategory.LEADER),
            (90, PersonalityCategory.LEADER),
            (89, PersonalityCategory.BALANCED),
            (75, PersonalityCategory.BALANCED),
            (70, PersonalityCategory.BALANCED),
            (69, PersonalityCategory.THINKER),
            (55, PersonalityCategory.THINKER),
            (50, PersonalityCategory.THINKER),
            (49, PersonalityCategory.UNCLASSIFIED),
            (10, PersonalityCategory.UNCLASSIFIED),
        ],
    )
    def test_thresholds(self, score, expected):
        assert classify_personality(score) is expected

    def test_out_of_range_scores_still_classify(self):
        assert classify_personality(-5) is PersonalityCategory.UNCLASSIFIED
        assert classify_personality(250) is PersonalityCategory.LEADER

    def test_balanced_sits_between_leader_and_thinker(self):
        order = [classify_personality(s) for s in (100, 80, 60, 0)]
        assert order == [
            PersonalityCategory.LEADER,
            PersonalityCategory.BALANCED,
            PersonalityCategory.THINKER,
            PersonalityCategory.UNCLASSIFIED,
        ]


class TestCategoryParse:
    def test_case_insensitive(self):
        assert PersonalityCategory.parse(" leader ") is PersonalityCategory.LEADER

    def test_unknown_raises(self):
        with pytest.raises(ValueError, match="Unknown personality category"):
            PersonalityCategory.parse("visionary")

    def test_quota_categories_exclude_unclassified(self):
        assert PersonalityCategory.UNCLASSIFIED not in QUOTA_CATEGORIES
        assert len(QUOTA_CATEGORIES) == 3


class TestRoleParse:
    def test_parse(self):
        assert Role.parse("strategist") is Role.STRATEGIST

    def test_unknown_role(self):
        with pytest.raises(ValueError, match="Unknown role"):
            Role.parse("goalkeeper")


class TestCalculatePersonalityScore:
    def test_scales_by_four(self):
        assert calculate_personality_score([5, 5, 5, 5, 5]) == 100
        assert calculate_personality_score([1, 1, 1, 1, 1]) == 20
        assert calculate_personality_score([4, 3, 5, 2, 4]) == 72

    def test_wrong_count(self):
        with pytest.raises(ValueError, match="Expected 5"):
            calculate_personality_score([5, 5, 5])

    def test_answer_out_of_range(self):
        with pytest.raises(ValueError, match="between 1 and 5"):
            calculate_personality_score([5, 5, 0, 5, 5])
