"""JSON-file persistence for participants and committed teams."""

from __future__ import annotations

import json
import logging
from pathlib import Path
import threading

from pydantic import BaseModel, Field

from teammate.config import Settings
from teammate.participant import Participant
from teammate.team import Team, TeamIdCounter


logger = logging.getLogger(__name__)

_DEFAULT_PATH = "teammate_data.json"


class TeamStoreError(Exception):
    """Missing, duplicate or malformed store records."""


class TeamRecord(BaseModel):
    """Serialized team: id plus member ids in order."""

    id: str = Field(..., min_length=1)
    member_ids: list[str] = Field(default_factory=list)


class StoreSnapshot(BaseModel):
    version: str = "1.0"
    participants: list[Participant] = Field(default_factory=list)
    teams: list[TeamRecord] = Field(default_factory=list)


class TeamStore:
    """Thread-safe store, loaded from and saved to one JSON file.

    On load the injected counter is fast-forwarded past every stored team id
    so newly formed teams never collide with persisted ones.
    """

    def __init__(
        self,
        path: str = _DEFAULT_PATH,
        counter: TeamIdCounter | None = None,
    ) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        self.counter = counter if counter is not None else TeamIdCounter()
        self._participants: dict[str, Participant] = {}
        self._teams: dict[str, Team] = {}
        self._load()

    @classmethod
    def from_settings(cls, settings: Settings, counter: TeamIdCounter | None = None) -> TeamStore:
        return cls(path=settings.store_path, counter=counter)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def _load(self) -> None:
        if not self._path.exists():
            logger.info("No existing data file found (%s); starting fresh", self._path)
            return
        try:
            with open(self._path, encoding="utf-8") as fh:
                snapshot = StoreSnapshot(**json.load(fh))
        except Exception as exc:
            raise ValueError(f"Failed to load store {self._path}: {exc}") from exc

        self._participants = {p.id: p for p in snapshot.participants}
        for record in snapshot.teams:
            members = []
            for mid in record.member_ids:
                member = self._participants.get(mid)
                if member is None:
                    logger.warning("Team %s references unknown participant %s", record.id, mid)
                    continue
                members.append(member)
            self._teams[record.id] = Team(record.id, members)
        if self._teams:
            self.counter.initialize_from_existing(self._teams.keys())
        logger.info(
            "Loaded %d participants and %d teams from %s",
            len(self._participants), len(self._teams), self._path,
        )

    def save(self) -> None:
        """Write the whole store to disk (atomic replace)."""
        with self._lock:
            snapshot = StoreSnapshot(
                participants=list(self._participants.values()),
                teams=[
                    TeamRecord(id=t.id, member_ids=[m.id for m in t.members])
                    for t in self._teams.values()
                ],
            )
            tmp = self._path.with_suffix(".tmp")
            try:
                with open(tmp, "w", encoding="utf-8") as fh:
                    json.dump(snapshot.model_dump(mode="json"), fh, indent=2, ensure_ascii=False)
                tmp.replace(self._path)
            except Exception as exc:
                if tmp.exists():
                    tmp.unlink()
                raise ValueError(f"Failed to save store {self._path}: {exc}") from exc
        logger.info("Store saved to %s", self._path)

    # ------------------------------------------------------------------
    # Participants
    # ------------------------------------------------------------------
    def save_participant(self, participant: Participant) -> None:
        with self._lock:
            self._participants[participant.id] = participant
        logger.info("Saved participant %s", participant.id)

    def find_participant(self, participant_id: str) -> Participant:
        if not participant_id or not participant_id.strip():
            raise TeamStoreError("Participant ID cannot be empty")
        with self._lock:
            participant = self._participants.get(participant_id)
        if participant is None:
            raise TeamStoreError(f"Participant {participant_id} not found")
        return participant

    def find_all_participants(self) -> list[Participant]:
        with self._lock:
            return list(self._participants.values())

    def delete_participant(self, participant_id: str) -> None:
        with self._lock:
            if participant_id not in self._participants:
                raise TeamStoreError(f"Participant does not exist: {participant_id}")
            del self._participants[participant_id]
        logger.warning("Deleted participant %s", participant_id)

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------
    def save_team(self, team: Team) -> None:
        with self._lock:
            self._teams[team.id] = team
            for m in team.members:
                self._participants.setdefault(m.id, m)
        logger.info("Saved team %s", team.id)

    def find_team(self, team_id: str) -> Team:
        if not team_id or not team_id.strip():
            raise TeamStoreError("Team ID cannot be empty")
        with self._lock:
            team = self._teams.get(team_id)
        if team is None:
            raise TeamStoreError(f"Team not found: {team_id}")
        return team

    def find_all_teams(self) -> list[Team]:
        with self._lock:
            return list(self._teams.values())

    def delete_team(self, team_id: str) -> None:
        with self._lock:
            if team_id not in self._teams:
                raise TeamStoreError(f"Team does not exist: {team_id}")
            del self._teams[team_id]
        logger.warning("Deleted team %s", team_id)
