"""Organizer session: the participant pool, committed teams and waiting list.

Every mutation runs under one lock, so at most one team formation is in
flight per session.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from teammate import csv_io
from teammate.config import Settings
from teammate.engine.fit_scoring import RandomSource
from teammate.engine.team_balance import (
    MIN_TEAM_SIZE,
    CompositionReport,
    ValidationMode,
    build_composition_report,
    check_team_composition,
)
from teammate.engine.team_builder import TeamBuilder, TeamFormationResult
from teammate.participant import Participant
from teammate.team import Team, TeamIdCounter


logger = logging.getLogger(__name__)


class OrganizerSession:
    """Owns the participants, teams and unformed cache for one organizer."""

    def __init__(
        self,
        participants: list[Participant] | None = None,
        teams: list[Team] | None = None,
        counter: TeamIdCounter | None = None,
        rng: RandomSource | None = None,
        scoring_workers: int | None = None,
        default_team_size: int = 5,
    ) -> None:
        self._lock = threading.Lock()
        self.default_team_size = default_team_size
        self._participants: list[Participant] = list(participants or [])
        self._teams: list[Team] = list(teams or [])
        self.counter = counter if counter is not None else TeamIdCounter()
        if self._teams:
            self.counter.initialize_from_existing(t.id for t in self._teams)
        self._builder = TeamBuilder(counter=self.counter, rng=rng, max_workers=scoring_workers)

        assigned = {m.id for t in self._teams for m in t.members}
        self._unformed: list[Participant] = [
            p for p in self._participants if p.id not in assigned
        ]

    # ------------------------------------------------------------------
    # Construction / persistence
    # ------------------------------------------------------------------
    @classmethod
    def from_settings(cls, settings: Settings, rng: RandomSource | None = None) -> OrganizerSession:
        """Load participants and teams from the CSVs named in *settings*."""
        try:
            participants = csv_io.load_participants(settings.participants_csv)
        except FileNotFoundError:
            logger.warning("Participants file %s not found; starting empty", settings.participants_csv)
            participants = []
        try:
            teams = csv_io.load_teams(settings.teams_csv, participants)
        except FileNotFoundError:
            logger.warning("No formed teams loaded from %s", settings.teams_csv)
            teams = []
        return cls(
            participants=participants,
            teams=teams,
            rng=rng,
            scoring_workers=settings.scoring_workers,
            default_team_size=settings.team_size,
        )

    def save(self, settings: Settings) -> None:
        with self._lock:
            csv_io.save_participants(self._participants, settings.participants_csv)
            csv_io.save_teams(self._teams, settings.teams_csv)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    @property
    def participants(self) -> list[Participant]:
        with self._lock:
            return sorted(self._participants, key=lambda p: p.id)

    @property
    def teams(self) -> list[Team]:
        with self._lock:
            return list(self._teams)

    @property
    def unformed(self) -> list[Participant]:
        with self._lock:
            return list(self._unformed)

    def find_team_for(self, participant_id: str) -> Team | None:
        """Team holding *participant_id* (case-insensitive), or ``None``."""
        wanted = participant_id.strip().upper()
        with self._lock:
            for team in self._teams:
                if any(m.id.upper() == wanted for m in team.members):
                    return team
        return None

    def describe_teams(self, team_size: int, mode: ValidationMode = "strict") -> list[CompositionReport]:
        with self._lock:
            return [build_composition_report(t, team_size, mode) for t in self._teams]

    # ------------------------------------------------------------------
    # Participants
    # ------------------------------------------------------------------
    def register(self, participant: Participant) -> None:
        """Add a new participant to the pool and the waiting list."""
        with self._lock:
            if self._index_of(participant.id) is not None:
                raise ValueError(f"A participant with id {participant.id} already exists")
            self._participants.append(participant)
            self._unformed.append(participant)
        logger.info("New participant registered: %s", participant.id)

    def edit_participant(self, participant_id: str, **changes: Any) -> Participant:
        """Apply *changes* and swap the edited copy in everywhere it is referenced."""
        with self._lock:
            idx = self._require(participant_id)
            updated = self._participants[idx].with_updates(**changes)
            self._participants[idx] = updated
            self._unformed = [updated if p.id == updated.id else p for p in self._unformed]
            for team in self._teams:
                team.replace_member(updated)
        logger.info("Participant %s updated", updated.id)
        return updated

    def remove_participant(self, participant_id: str) -> None:
        """Remove from the pool, the waiting list and any team; drop emptied teams.

        A committed team that loses a member stays committed; a warning names
        every rule it now breaks against its size before the removal.
        """
        broken: list[tuple[str, list[str]]] = []
        with self._lock:
            idx = self._require(participant_id)
            pid = self._participants.pop(idx).id
            self._unformed = [p for p in self._unformed if p.id != pid]
            for team in self._teams:
                if team.remove_member(pid) and team.size() > 0:
                    broken.append((team.id, check_team_composition(team, team.size() + 1)))
            self._teams = [t for t in self._teams if t.size() > 0]
        logger.warning("Participant %s removed", pid)
        for team_id, violations in broken:
            logger.warning(
                "Team %s no longer meets team rules after removing %s: %s",
                team_id, pid, "; ".join(violations),
            )

    # ------------------------------------------------------------------
    # Team formation
    # ------------------------------------------------------------------
    def form_teams_from_all(self, team_size: int | None = None) -> TeamFormationResult:
        """Strict formation over every participant not already in a team."""
        if team_size is None:
            team_size = self.default_team_size
        with self._lock:
            assigned = {m.id for t in self._teams for m in t.members}
            pool = [p for p in self._participants if p.id not in assigned]
            result = self._builder.build_teams_and_validate(pool, team_size)
            self._teams.extend(result.formed_teams)
            self._unformed = list(result.unformed_participants)
        logger.info(
            "Formed %d team(s) from all participants; %d unformed",
            len(result.formed_teams), len(result.unformed_participants),
        )
        return result

    def form_teams_from_unformed(self, team_size: int | None = None) -> TeamFormationResult:
        """Relaxed formation over the waiting list only."""
        if team_size is None:
            team_size = self.default_team_size
        with self._lock:
            if len(self._unformed) < MIN_TEAM_SIZE:
                raise ValueError("Not enough participants in the waiting list")
            result = self._builder.build_teams_from_unformed(list(self._unformed), team_size)
            self._teams.extend(result.formed_teams)
            self._unformed = list(result.unformed_participants)
        logger.info(
            "Formed %d team(s) from unformed cache", len(result.formed_teams)
        )
        return result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _index_of(self, participant_id: str) -> int | None:
        wanted = participant_id.strip().upper()
        for i, p in enumerate(self._participants):
            if p.id.upper() == wanted:
                return i
        return None

    def _require(self, participant_id: str) -> int:
        idx = self._index_of(participant_id)
        if idx is None:
            raise ValueError(f"Participant {participant_id} not found")
        return idx
