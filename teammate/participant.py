"""Participant entity shared by the survey, CSV loader and team builder."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from teammate.personality_types import PersonalityCategory, classify_personality
from teammate.role_models import Role


class Participant(BaseModel):
    """A single tournament participant.

    ``personality_category`` is the explicit override when one was given,
    otherwise it is derived from ``personality_score``. Instances are frozen;
    use :meth:`with_updates` to produce an edited copy.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = ""
    email: str = ""
    activity: str = Field(..., min_length=1)
    skill_level: int = Field(default=0, ge=0, le=100)
    role: Role
    personality_score: int = Field(default=0, ge=0, le=100)
    personality_override: PersonalityCategory | None = None

    @field_validator("id", "activity")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("personality_override")
    @classmethod
    def drop_unclassified_override(
        cls, v: PersonalityCategory | None
    ) -> PersonalityCategory | None:
        """An UNCLASSIFIED override means "classify from score"."""
        if v is PersonalityCategory.UNCLASSIFIED:
            return None
        return v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def personality_category(self) -> PersonalityCategory:
        if self.personality_override is not None:
            return self.personality_override
        return classify_personality(self.personality_score)

    def with_updates(self, **changes: Any) -> Participant:
        """Return a re-validated copy with *changes* applied.

        The id cannot change. A new score re-derives the category unless an
        override is set on the participant or passed in *changes*.
        """
        if "id" in changes and changes["id"] != self.id:
            raise ValueError("Participant id is immutable")
        data = self.model_dump(exclude={"personality_category"})
        data.update(changes)
        return Participant(**data)

    def __str__(self) -> str:
        return (
            f"{self.id} {self.name} (Skill:{self.skill_level}, "
            f"Role:{self.role.value}, Type:{self.personality_category.value})"
        )
