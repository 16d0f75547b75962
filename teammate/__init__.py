"""TeamMate: balanced team formation for tournament participants."""

from .participant import Participant
from .personality_types import PersonalityCategory, classify_personality
from .role_models import Role
from .team import Team, TeamIdCounter

__all__ = [
    "Participant",
    "PersonalityCategory",
    "Role",
    "Team",
    "TeamIdCounter",
    "classify_personality",
]
