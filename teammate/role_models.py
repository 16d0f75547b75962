"""Preferred in-game roles a participant can declare."""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Closed set of role tags; every participant declares exactly one."""

    ATTACKER = "ATTACKER"
    DEFENDER = "DEFENDER"
    STRATEGIST = "STRATEGIST"
    SUPPORTER = "SUPPORTER"
    COORDINATOR = "COORDINATOR"

    @classmethod
    def parse(cls, value: str) -> Role:
        """Case-insensitive lookup; raises ``ValueError`` for unknown tags."""
        try:
            return cls(value.strip().upper())
        except ValueError:
            allowed = "/".join(r.value for r in cls)
            raise ValueError(f"Unknown role {value!r}; must be one of {allowed}") from None


MIN_DISTINCT_ROLES = 3
