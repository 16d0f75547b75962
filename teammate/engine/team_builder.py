"""Team builder: greedy quota-seeded allocation with rollback.

Each team is built in four steps over a private pool:

1. seed one LEADER,
2. seed one THINKER,
3. fill the remaining slots from a fit-score ranking (scored in parallel),
4. validate; commit, or return every pulled member and stop the run.

A run stops on the first team that cannot be seeded or fails validation;
whatever is left is reported as unformed.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
import logging
import random
from typing import Iterable

from teammate.engine.fit_scoring import (
    MAX_LEADERS,
    MAX_SHARED_ACTIVITY,
    MAX_THINKERS,
    RandomSource,
    score_candidate,
)
from teammate.engine.team_balance import (
    MIN_TEAM_SIZE,
    ValidationMode,
    check_team_composition,
)
from teammate.participant import Participant
from teammate.personality_types import QUOTA_CATEGORIES, PersonalityCategory
from teammate.team import Team, TeamIdCounter


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors / results
# ---------------------------------------------------------------------------
class TeamFormationConfigError(ValueError):
    """Team size or population cannot support the requested formation."""


class ScoringError(RuntimeError):
    """A parallel fit-scoring task failed."""


@dataclass
class TeamFormationResult:
    """Committed teams plus every participant left out, sorted by id."""

    formed_teams: list[Team] = field(default_factory=list)
    unformed_participants: list[Participant] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Pool
# ---------------------------------------------------------------------------
class _ParticipantPool:
    """Unassigned participants bucketed by personality category."""

    def __init__(self, participants: Iterable[Participant]) -> None:
        self._buckets: dict[PersonalityCategory, list[Participant]] = {
            c: [] for c in PersonalityCategory
        }
        for p in participants:
            self.push(p)

    def push(self, participant: Participant) -> None:
        self._buckets[participant.personality_category].append(participant)

    def push_all(self, participants: Iterable[Participant]) -> None:
        for p in participants:
            self.push(p)

    def pop(self, category: PersonalityCategory) -> Participant | None:
        bucket = self._buckets[category]
        return bucket.pop(0) if bucket else None

    def take(self, category: PersonalityCategory) -> Participant:
        """Like :meth:`pop`, but an empty bucket raises ``LookupError``."""
        member = self.pop(category)
        if member is None:
            raise LookupError(f"No {category.value} participant left in the pool")
        return member

    def remove(self, participant: Participant) -> None:
        bucket = self._buckets[participant.personality_category]
        for i, p in enumerate(bucket):
            if p.id == participant.id:
                del bucket[i]
                return
        raise ValueError(f"Participant {participant.id} is not in the pool")

    def has(self, category: PersonalityCategory) -> bool:
        return bool(self._buckets[category])

    def members(self) -> list[Participant]:
        return [p for c in PersonalityCategory for p in self._buckets[c]]

    def __len__(self) -> int:
        return sum(len(b) for b in self._buckets.values())


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------
class TeamBuilder:
    """Forms quota-balanced teams from a participant list.

    Args:
        counter: Source of team ids; shared with whatever persists teams.
        rng: Random source for score jitter. Pass ``ZeroRandom()`` for a
            fully deterministic ranking.
        max_workers: Thread count for candidate scoring (``None`` lets the
            executor pick).
        log: Logger for formed / dissolved notices.
    """

    def __init__(
        self,
        counter: TeamIdCounter | None = None,
        rng: RandomSource | None = None,
        max_workers: int | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self.counter = counter if counter is not None else TeamIdCounter()
        self._rng = rng if rng is not None else random.Random()
        self._max_workers = max_workers
        self._log = log if log is not None else logger

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def build_teams_and_validate(
        self,
        participants: list[Participant],
        team_size: int,
    ) -> TeamFormationResult:
        """Form teams from the whole population under strict validation."""
        return self._run(participants, team_size, "strict")

    def build_teams_from_unformed(
        self,
        participants: list[Participant],
        team_size: int,
    ) -> TeamFormationResult:
        """Form teams from a leftover pool under relaxed validation."""
        return self._run(participants, team_size, "relaxed")

    # ------------------------------------------------------------------
    # Run loop
    # ------------------------------------------------------------------
    def _run(
        self,
        participants: list[Participant],
        team_size: int,
        mode: ValidationMode,
    ) -> TeamFormationResult:
        self._preflight(participants, team_size)

        pool = _ParticipantPool(participants)
        formed: list[Team] = []

        with ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="fit-score"
        ) as executor:
            while len(pool) >= team_size:
                if team_size == MIN_TEAM_SIZE:
                    team = self._build_trio(pool, mode)
                else:
                    team = self._build_one(pool, team_size, mode, executor)
                if team is None:
                    break
                formed.append(team)

        unformed = sorted(pool.members(), key=lambda p: p.id)
        self._log.info(
            "Formation (%s, size %d): %d team(s) formed, %d unformed",
            mode, team_size, len(formed), len(unformed),
        )
        return TeamFormationResult(formed_teams=formed, unformed_participants=unformed)

    def _preflight(self, participants: list[Participant], team_size: int) -> None:
        if team_size < MIN_TEAM_SIZE:
            raise TeamFormationConfigError(
                f"Team size must be at least {MIN_TEAM_SIZE}, got {team_size}"
            )
        if team_size == MIN_TEAM_SIZE:
            present = {p.personality_category for p in participants}
            missing = [c.value for c in QUOTA_CATEGORIES if c not in present]
            if missing:
                raise TeamFormationConfigError(
                    "Teams of 3 need at least one LEADER, THINKER and BALANCED "
                    f"participant; missing: {', '.join(missing)}"
                )

    # ------------------------------------------------------------------
    # Per-team construction
    # ------------------------------------------------------------------
    def _build_trio(self, pool: _ParticipantPool, mode: ValidationMode) -> Team | None:
        """One LEADER, one THINKER, one BALANCED; no scoring."""
        if not all(pool.has(c) for c in QUOTA_CATEGORIES):
            return None
        team = Team(self.counter.next_id())
        pulled: list[Participant] = []
        for category in QUOTA_CATEGORIES:
            member = pool.take(category)
            team.add_member(member)
            pulled.append(member)
        return self._finish(team, pulled, pool, MIN_TEAM_SIZE, mode)

    def _build_one(
        self,
        pool: _ParticipantPool,
        team_size: int,
        mode: ValidationMode,
        executor: ThreadPoolExecutor,
    ) -> Team | None:
        team = Team(self.counter.next_id())
        pulled: list[Participant] = []

        leader = pool.pop(PersonalityCategory.LEADER)
        if leader is None:
            self._log.info("No leaders left; stopping before %s", team.id)
            return None
        team.add_member(leader)
        pulled.append(leader)

        thinker = pool.pop(PersonalityCategory.THINKER)
        if thinker is None:
            pool.push_all(pulled)
            self._log.info("No thinkers left; stopping before %s", team.id)
            return None
        team.add_member(thinker)
        pulled.append(thinker)

        slots = team_size - 2
        for candidate in self._rank_candidates(pool.members(), team, team_size, executor):
            if slots == 0:
                break
            if not self._admissible(candidate, team):
                continue
            pool.remove(candidate)
            team.add_member(candidate)
            pulled.append(candidate)
            slots -= 1

        return self._finish(team, pulled, pool, team_size, mode)

    def _finish(
        self,
        team: Team,
        pulled: list[Participant],
        pool: _ParticipantPool,
        team_size: int,
        mode: ValidationMode,
    ) -> Team | None:
        violations = check_team_composition(team, team_size, mode)
        if violations:
            pool.push_all(pulled)
            self._log.warning(
                "Team %s dissolved (%s): %s", team.id, mode, "; ".join(violations)
            )
            return None
        self._log.info(
            "Team %s formed: %s (avg skill %.1f)",
            team.id, ", ".join(m.id for m in team.members), team.average_skill(),
        )
        return team

    @staticmethod
    def _admissible(candidate: Participant, team: Team) -> bool:
        if team.count_activity(candidate.activity) >= MAX_SHARED_ACTIVITY:
            return False
        category = candidate.personality_category
        if category is PersonalityCategory.LEADER:
            return team.count_category(PersonalityCategory.LEADER) < MAX_LEADERS
        if category is PersonalityCategory.THINKER:
            return team.count_category(PersonalityCategory.THINKER) < MAX_THINKERS
        return True

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------
    def _rank_candidates(
        self,
        candidates: list[Participant],
        team: Team,
        team_size: int,
        executor: ThreadPoolExecutor,
    ) -> list[Participant]:
        """Score every candidate against *team* in parallel, best first."""
        if not candidates:
            return []
        snapshot = Team(team.id, team.members)
        futures = [
            executor.submit(score_candidate, c, snapshot, team_size, self._rng)
            for c in candidates
        ]
        scored: list[tuple[float, Participant]] = []
        for candidate, future in zip(candidates, futures):
            try:
                scored.append((future.result(), candidate))
            except Exception as exc:
                for pending in futures:
                    pending.cancel()
                raise ScoringError(
                    f"Scoring {candidate.id} for team {team.id} failed: {exc}"
                ) from exc
        scored.sort(key=lambda item: item[0], reverse=True)
        return [candidate for _, candidate in scored]
