# Leaderboard persistence.
# JSON file storage: one file holding every accepted score plus the next id.

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from skillblocks.game import ScoreRecord

from .records import LeaderboardEntry, normalize_record, rank_entries

logger = logging.getLogger(__name__)

SCORES_FILE = "scores.json"


def _empty() -> Dict[str, Any]:
    return {"scores": [], "next_id": 1}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LeaderboardStore:
    """Ranked score storage backed by a JSON file."""

    def __init__(self, storage_dir: str = "storage", now: Optional[Callable[[], datetime]] = None):
        self.storage_dir = storage_dir
        os.makedirs(storage_dir, exist_ok=True)
        self.scores_file = os.path.join(storage_dir, SCORES_FILE)
        self._now = now or _utc_now
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, Any]:
        if not os.path.exists(self.scores_file):
            return _empty()
        try:
            with open(self.scores_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Error loading %s: %s", self.scores_file, e)
            return _empty()
        if not isinstance(data, dict) or not isinstance(data.get("scores", []), list):
            logger.error("Unexpected layout in %s, starting from an empty leaderboard", self.scores_file)
            return _empty()
        data.setdefault("scores", [])
        data.setdefault("next_id", len(data["scores"]) + 1)
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        """Write to a temp file in the same directory, then rename over the target."""
        temp_fd, temp_path = tempfile.mkstemp(dir=self.storage_dir, suffix=".tmp")
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(temp_path, self.scores_file)
        except OSError:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

    def add(self, record: ScoreRecord) -> LeaderboardEntry:
        record = normalize_record(record)
        with self._lock:
            data = self._load()
            entry = LeaderboardEntry(
                id=int(data["next_id"]),
                name=record.name,
                score=record.score,
                lines=record.lines,
                date=self._now().isoformat(),
            )
            data["scores"].append(entry.to_dict())
            data["next_id"] = entry.id + 1
            self._save(data)
        logger.info("Stored score %d for %s (id %d)", entry.score, entry.name, entry.id)
        return entry

    def entries(self) -> List[LeaderboardEntry]:
        with self._lock:
            data = self._load()
        result: List[LeaderboardEntry] = []
        for raw in data["scores"]:
            try:
                result.append(LeaderboardEntry.from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed score entry %r: %s", raw, e)
        return result

    def top(self, limit: int = 50) -> List[LeaderboardEntry]:
        return rank_entries(self.entries(), limit)

    def clear(self) -> None:
        with self._lock:
            self._save(_empty())
