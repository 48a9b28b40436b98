"""
Data models for the team roster service.
Domain objects only; no persistence or API logic.

A Team is the stored root record; Players and their Statistics are embedded
values with no identity of their own.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def _parse_datetime(s: str | None) -> datetime | None:
    if s is None:
        return None
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


# ---------- Principal ----------
@dataclass(frozen=True)
class Principal:
    """
    Opaque caller identity. Compared by value; the text form is only used
    for serialization.
    """
    text: str

    ANONYMOUS_TEXT = "2vxsx-fae"

    @classmethod
    def anonymous(cls) -> Principal:
        return cls(cls.ANONYMOUS_TEXT)

    def is_anonymous(self) -> bool:
        return self.text == self.ANONYMOUS_TEXT

    def __str__(self) -> str:
        return self.text


# ---------- Statistics ----------
@dataclass
class Statistics:
    """Per-player performance numbers. Replaced wholesale with its Player."""
    goals_scored: float = 0.0
    assists: float = 0.0
    personal_records: list[str] = field(default_factory=list)

    def copy(self) -> Statistics:
        return Statistics(
            goals_scored=self.goals_scored,
            assists=self.assists,
            personal_records=list(self.personal_records),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "goals_scored": self.goals_scored,
            "assists": self.assists,
            "personal_records": list(self.personal_records),
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Statistics:
        return cls(
            goals_scored=float(d.get("goals_scored", 0.0)),
            assists=float(d.get("assists", 0.0)),
            personal_records=list(d.get("personal_records") or []),
        )


# ---------- Player ----------
@dataclass
class Player:
    """
    A roster entry. name acts as the key within a roster for delete-by-name,
    but uniqueness is not enforced.
    """
    name: str
    position: str
    statistics: Statistics = field(default_factory=Statistics)

    def copy(self) -> Player:
        return Player(name=self.name, position=self.position, statistics=self.statistics.copy())

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "position": self.position,
            "statistics": self.statistics.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Player:
        return cls(
            name=d["name"],
            position=d["position"],
            statistics=Statistics.from_dict(d.get("statistics") or {}),
        )


# ---------- Team ----------
@dataclass
class Team:
    """
    A coach's team with its embedded roster.
    id, owner and created_at are fixed at creation; updated_at stays None
    until the first successful mutation.
    """
    id: str
    owner: Principal
    name: str
    sport_type: str
    roster: list[Player]
    created_at: datetime
    updated_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner": self.owner.text,
            "name": self.name,
            "sport_type": self.sport_type,
            "roster": [p.to_dict() for p in self.roster],
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat() if self.updated_at is not None else None,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Team:
        created_at = _parse_datetime(d.get("created_at"))
        if created_at is None:
            raise ValueError(f"Team record {d.get('id')!r} has no created_at")
        return cls(
            id=d["id"],
            owner=Principal(d["owner"]),
            name=d["name"],
            sport_type=d["sport_type"],
            roster=[Player.from_dict(p) for p in d.get("roster") or []],
            created_at=created_at,
            updated_at=_parse_datetime(d.get("updated_at")),
        )
