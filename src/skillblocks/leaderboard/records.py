from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List

from skillblocks.game import ScoreRecord

DEFAULT_NAME = "Anonymous"


@dataclass(frozen=True)
class LeaderboardEntry:
    """A stored score. ``date`` is the ISO-8601 time the store accepted it."""

    id: int
    name: str
    score: int
    lines: int
    date: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LeaderboardEntry":
        return cls(
            id=int(data["id"]),
            name=str(data.get("name") or DEFAULT_NAME),
            score=int(data.get("score", 0)),
            lines=int(data.get("lines", 0)),
            date=str(data["date"]),
        )

    def payload(self) -> Dict[str, Any]:
        """Public form broadcast to live observers."""
        return {"name": self.name, "score": self.score, "lines": self.lines}


def normalize_record(record: ScoreRecord) -> ScoreRecord:
    name = (record.name or "").strip() or DEFAULT_NAME
    score = int(record.score)
    lines = int(record.lines)
    if score < 0 or lines < 0:
        raise ValueError(f"Score and lines must be non-negative, got {score}/{lines}")
    return ScoreRecord(name=name, score=score, lines=lines)


def rank_entries(entries: Iterable[LeaderboardEntry], limit: int = 50) -> List[LeaderboardEntry]:
    # Highest score first; ties go to whoever got there first.
    ranked = sorted(entries, key=lambda e: (-e.score, e.date, e.id))
    return ranked[: max(0, limit)]
