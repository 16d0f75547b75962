"""Team entity and the identifier counter that names teams."""

from __future__ import annotations

from collections import Counter
import re
import threading
from typing import Iterable

from teammate.participant import Participant
from teammate.personality_types import PersonalityCategory
from teammate.role_models import Role


TEAM_ID_PREFIX = "T"
_DIGITS = re.compile(r"\D+")


# ---------------------------------------------------------------------------
# Identifier counter
# ---------------------------------------------------------------------------
class TeamIdCounter:
    """Thread-safe monotonic source of team ids (``T1``, ``T2``, ...).

    Ids are never reissued: a team that is rolled back still consumed its id.
    """

    def __init__(self, start: int = 1) -> None:
        self._next = start
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            value = self._next
            self._next += 1
        return f"{TEAM_ID_PREFIX}{value}"

    def peek(self) -> int:
        """Number the next id will carry."""
        with self._lock:
            return self._next

    def reset_to(self, next_number: int = 1) -> None:
        if next_number < 1:
            raise ValueError("Team counter must start at 1 or above")
        with self._lock:
            self._next = next_number

    def initialize_from_existing(self, team_ids: Iterable[str]) -> None:
        """Fast-forward past the highest numbered id in *team_ids*."""
        highest = 0
        for team_id in team_ids:
            digits = _DIGITS.sub("", team_id)
            if digits:
                highest = max(highest, int(digits))
        self.reset_to(highest + 1)


# ---------------------------------------------------------------------------
# Team
# ---------------------------------------------------------------------------
class Team:
    """Ordered group of participants under one id."""

    def __init__(self, team_id: str, members: Iterable[Participant] = ()) -> None:
        if not team_id:
            raise ValueError("Team id cannot be empty")
        self.id = team_id
        self._members: list[Participant] = list(members)

    @property
    def members(self) -> list[Participant]:
        return list(self._members)

    def add_member(self, participant: Participant) -> None:
        self._members.append(participant)

    def remove_member(self, participant_id: str) -> bool:
        """Drop the member with *participant_id*; ``False`` if absent."""
        for i, m in enumerate(self._members):
            if m.id == participant_id:
                del self._members[i]
                return True
        return False

    def replace_member(self, participant: Participant) -> bool:
        """Swap in an edited copy of an existing member (matched by id)."""
        for i, m in enumerate(self._members):
            if m.id == participant.id:
                self._members[i] = participant
                return True
        return False

    def has_member(self, participant_id: str) -> bool:
        return any(m.id == participant_id for m in self._members)

    def size(self) -> int:
        return len(self._members)

    def __len__(self) -> int:
        return len(self._members)

    # -- statistics ---------------------------------------------------------
    def average_skill(self) -> float:
        if not self._members:
            return 0.0
        return sum(m.skill_level for m in self._members) / len(self._members)

    def roles_present(self) -> set[Role]:
        return {m.role for m in self._members}

    def category_counts(self) -> Counter[PersonalityCategory]:
        return Counter(m.personality_category for m in self._members)

    def count_category(self, category: PersonalityCategory) -> int:
        return sum(1 for m in self._members if m.personality_category is category)

    def activity_counts(self) -> Counter[str]:
        return Counter(m.activity for m in self._members)

    def count_activity(self, activity: str) -> int:
        return sum(1 for m in self._members if m.activity == activity)

    def __repr__(self) -> str:
        return f"Team(id={self.id!r}, members={[m.id for m in self._members]!r})"

    def __str__(self) -> str:
        return (
            f"{self.id} size={self.size()} avgSkill={self.average_skill():.1f} "
            f"members={[m.id for m in self._members]}"
        )
