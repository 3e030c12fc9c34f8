"""Leaderboard collaborator: ranked score storage and live score broadcast."""

from .records import DEFAULT_NAME, LeaderboardEntry, normalize_record, rank_entries
from .store import LeaderboardStore
from .submitter import LeaderboardConnection, ScoreSubmitter

__all__ = [
    "DEFAULT_NAME",
    "LeaderboardEntry",
    "normalize_record",
    "rank_entries",
    "LeaderboardStore",
    "LeaderboardConnection",
    "ScoreSubmitter",
]
