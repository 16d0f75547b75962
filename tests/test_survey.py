"""Tests for teammate/survey.py."""

from pydantic import ValidationError
import pytest

from teammate.personality_types import PersonalityCategory
from teammate.role_models import Role
from teammate.survey import SurveyResponse, default_email, default_name


def _response(**overrides) -> SurveyResponse:
    data = dict(
        participant_id="p101",
        name="Ada",
        email="ada@uni.edu",
        game="valorant",
        role="strategist",
        skill_rating=7,
        answers=[5, 5, 5, 5, 5],
    )
    data.update(overrides)
    return SurveyResponse(**data)


def test_default_email_and_name():
    assert default_email("P101") == "user101@university.edu"
    assert default_name("P015") == "Participant_015"


class TestSurveyResponse:
    def test_normalizes_fields(self):
        r = _response()
        assert r.participant_id == "P101"
        assert r.game == "VALORANT"
        assert r.role is Role.STRATEGIST

    def test_blank_name_and_email_get_defaults(self):
        r = _response(name=" ", email="")
        assert r.name == "Participant_101"
        assert r.email == "user101@university.edu"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"participant_id": "101"},
            {"participant_id": "PX1"},
            {"game": "TETRIS"},
            {"role": "GOALIE"},
            {"skill_rating": 11},
            {"answers": [1, 2, 3, 4]},
            {"answers": [1, 2, 3, 4, 6]},
            {"email": "not-an-email"},
        ],
    )
    def test_rejects_bad_input(self, overrides):
        with pytest.raises(ValidationError):
            _response(**overrides)

    @pytest.mark.parametrize(
        ("answers", "score", "category"),
        [
            ([5, 5, 5, 5, 5], 100, PersonalityCategory.LEADER),
            ([4, 4, 4, 4, 2], 72, PersonalityCategory.BALANCED),
            ([3, 3, 3, 3, 3], 60, PersonalityCategory.THINKER),
            ([1, 1, 1, 1, 1], 20, PersonalityCategory.UNCLASSIFIED),
        ],
    )
    def test_to_participant(self, answers, score, category):
        p = _response(answers=answers).to_participant()
        assert p.id == "P101"
        assert p.activity == "VALORANT"
        assert p.skill_level == 70
        assert p.personality_score == score
        assert p.personality_category is category

    def test_category_follows_later_score_edits(self):
        p = _response(answers=[3, 3, 3, 3, 2]).to_participant()
        assert p.personality_score == 56
        assert p.personality_override is None
        assert p.personality_category is PersonalityCategory.THINKER
        assert p.with_updates(personality_score=95).personality_category is PersonalityCategory.LEADER
