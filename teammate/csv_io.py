"""CSV import / export for participants and formed teams."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from pydantic import ValidationError

from teammate.participant import Participant
from teammate.personality_types import PersonalityCategory
from teammate.role_models import Role
from teammate.team import Team


logger = logging.getLogger(__name__)

PARTICIPANT_COLUMNS = [
    "ID", "Name", "Email", "PreferredGame", "SkillLevel",
    "PreferredRole", "PersonalityScore", "PersonalityType",
]
TEAM_COLUMNS = [
    "teamId", "memberId", "memberName", "memberInterest", "memberRole",
    "skillLevel", "personalityScore", "personalityType",
]
_MIN_PARTICIPANT_COLUMNS = 7


# ---------------------------------------------------------------------------
# Participants
# ---------------------------------------------------------------------------
def _parse_participant_row(row: list[str], line_no: int) -> Participant | None:
    if len(row) < _MIN_PARTICIPANT_COLUMNS:
        logger.warning(
            "Skipping line %d: expected at least %d columns but found %d",
            line_no, _MIN_PARTICIPANT_COLUMNS, len(row),
        )
        return None

    pid, name, email, activity, skill_raw, role_raw, score_raw = (c.strip() for c in row[:7])
    try:
        skill = int(skill_raw)
        score = int(score_raw)
    except ValueError:
        logger.warning("Skipping line %d: non-numeric skill or personality score", line_no)
        return None
    if not 0 <= skill <= 100 or not 0 <= score <= 100:
        logger.warning("Skipping line %d: skill or personality score out of range (0-100)", line_no)
        return None
    try:
        role = Role.parse(role_raw)
    except ValueError:
        logger.warning("Skipping line %d: unknown role %r", line_no, role_raw)
        return None

    override: PersonalityCategory | None = None
    if len(row) > 7 and row[7].strip():
        try:
            override = PersonalityCategory.parse(row[7])
        except ValueError:
            logger.warning(
                "Line %d: unknown personality type %r, classifying from score",
                line_no, row[7],
            )

    try:
        return Participant(
            id=pid,
            name=name,
            email=email,
            activity=activity,
            skill_level=skill,
            role=role,
            personality_score=score,
            personality_override=override,
        )
    except ValidationError as exc:
        logger.warning("Skipping line %d: %s", line_no, exc)
        return None


def load_participants(path: str | Path) -> list[Participant]:
    """Read participants from *path*, skipping malformed rows with a warning.

    Raises:
        FileNotFoundError: If *path* does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"CSV not found: {path}")

    participants: list[Participant] = []
    seen: set[str] = set()
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.reader(f)
        next(reader, None)  # header
        for row in reader:
            if not any(cell.strip() for cell in row):
                continue
            p = _parse_participant_row(row, reader.line_num)
            if p is None:
                continue
            if p.id in seen:
                logger.warning("Skipping line %d: duplicate id %s", reader.line_num, p.id)
                continue
            seen.add(p.id)
            participants.append(p)

    logger.info("Loaded %d participants from %s", len(participants), path)
    return participants


def _override_cell(p: Participant) -> str:
    # blank means "classify from score" on reload
    return p.personality_override.value if p.personality_override is not None else ""


def save_participants(participants: list[Participant], path: str | Path) -> str:
    """Write *participants* to *path*; returns the path written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(PARTICIPANT_COLUMNS)
        for p in participants:
            writer.writerow([
                p.id, p.name, p.email, p.activity, p.skill_level,
                p.role.value, p.personality_score, _override_cell(p),
            ])
    return str(path)


# ---------------------------------------------------------------------------
# Teams
# ---------------------------------------------------------------------------
def save_teams(teams: list[Team], path: str | Path) -> str:
    """Write one row per team member to *path*; returns the path written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(TEAM_COLUMNS)
        for team in teams:
            for m in team.members:
                writer.writerow([
                    team.id, m.id, m.name, m.activity, m.role.value,
                    m.skill_level, m.personality_score, m.personality_category.value,
                ])
    logger.info("Saved %d team(s) to %s", len(teams), path)
    return str(path)


def load_teams(path: str | Path, participants: list[Participant]) -> list[Team]:
    """Rebuild teams from a team CSV, resolving members against *participants*.

    Rows naming unknown participants are skipped. Team order follows first
    appearance in the file.

    Raises:
        FileNotFoundError: If *path* does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"CSV not found: {path}")

    by_id = {p.id: p for p in participants}
    teams: dict[str, Team] = {}
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.reader(f)
        next(reader, None)
        for row in reader:
            if len(row) < 2 or not row[0].strip():
                continue
            team_id, member_id = row[0].strip(), row[1].strip()
            member = by_id.get(member_id)
            if member is None:
                logger.warning(
                    "Line %d: team %s references unknown participant %s",
                    reader.line_num, team_id, member_id,
                )
                continue
            teams.setdefault(team_id, Team(team_id)).add_member(member)

    return list(teams.values())
