"""Participant survey: validated answers → Participant."""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator, model_validator

from teammate.participant import Participant
from teammate.personality_types import (
    SURVEY_ANSWER_MAX,
    SURVEY_ANSWER_MIN,
    SURVEY_QUESTION_COUNT,
    calculate_personality_score,
)
from teammate.role_models import Role


ALLOWED_GAMES: frozenset[str] = frozenset(
    {"CHESS", "FIFA", "BASKETBALL", "VALORANT", "CS:GO", "DOTA 2"}
)
SKILL_RATING_SCALE = 10

_ID_PATTERN = re.compile(r"^P\d+$")


def default_email(participant_id: str) -> str:
    """``P101`` → ``user101@university.edu``."""
    digits = re.sub(r"\D", "", participant_id)
    return f"user{digits}@university.edu" if digits else "user@university.edu"


def default_name(participant_id: str) -> str:
    """``P015`` → ``Participant_015``."""
    if participant_id.upper().startswith("P"):
        return f"Participant_{participant_id[1:]}"
    return f"Participant_{participant_id}"


class SurveyResponse(BaseModel):
    """One completed participant survey."""

    participant_id: str
    name: str = ""
    email: str = ""
    game: str
    role: Role
    skill_rating: int = Field(..., ge=0, le=SKILL_RATING_SCALE)
    answers: list[int] = Field(
        ..., min_length=SURVEY_QUESTION_COUNT, max_length=SURVEY_QUESTION_COUNT
    )

    @field_validator("participant_id")
    @classmethod
    def validate_participant_id(cls, v: str) -> str:
        v = v.strip().upper()
        if not _ID_PATTERN.match(v):
            raise ValueError("ID must be 'P' followed by digits (e.g. P015)")
        return v

    @field_validator("game")
    @classmethod
    def validate_game(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in ALLOWED_GAMES:
            raise ValueError(f"game must be one of: {', '.join(sorted(ALLOWED_GAMES))}")
        return v

    @field_validator("role", mode="before")
    @classmethod
    def parse_role(cls, v: object) -> object:
        return Role.parse(v) if isinstance(v, str) else v

    @field_validator("answers")
    @classmethod
    def validate_answers(cls, v: list[int]) -> list[int]:
        for answer in v:
            if not SURVEY_ANSWER_MIN <= answer <= SURVEY_ANSWER_MAX:
                raise ValueError(
                    f"answers must be between {SURVEY_ANSWER_MIN} and {SURVEY_ANSWER_MAX}"
                )
        return v

    @model_validator(mode="after")
    def fill_defaults(self) -> SurveyResponse:
        if not self.name.strip():
            self.name = default_name(self.participant_id)
        email = self.email.strip() or default_email(self.participant_id)
        if "@" not in email or "." not in email:
            raise ValueError("a valid email address is required (e.g. user@university.edu)")
        self.email = email
        return self

    @property
    def personality_score(self) -> int:
        return calculate_personality_score(self.answers)

    def to_participant(self) -> Participant:
        """Build the participant; its category follows the score."""
        return Participant(
            id=self.participant_id,
            name=self.name,
            email=self.email,
            activity=self.game,
            skill_level=self.skill_rating * SKILL_RATING_SCALE,
            role=self.role,
            personality_score=self.personality_score,
        )
