"""Game module for SkillBlocks.

Exports the core game engine and supporting classes:
- GameGrid: Committed board, collision test and row removal
- Piece: Falling piece (kind, rotation matrix, position)
- TetrominoType: Enum of available piece kinds
- ScoringRules / GravityRules: Line-clear scoring and gravity speed-up
- SkillSet: Slow, clear-random-row and swap-next abilities
- GravityClock: Periodic down-step trigger
- GameSession: Session state machine and command API
- GameLoop: Command queue feeding a session
"""

from .grid import GameGrid
from .pieces import Piece, TetrominoType, base_matrix, rotate_clockwise
from .rules import GravityRules, ScoringRules
from .skills import SkillConfig, SkillKind, SkillSet
from .clock import GravityClock
from .core import (
    Action,
    BoardSnapshot,
    GameConfig,
    GameSession,
    GameStatus,
    ScoreRecord,
)
from .loop import GameLoop

__all__ = [
    "GameGrid",
    "Piece",
    "TetrominoType",
    "base_matrix",
    "rotate_clockwise",
    "ScoringRules",
    "GravityRules",
    "SkillConfig",
    "SkillKind",
    "SkillSet",
    "GravityClock",
    "Action",
    "BoardSnapshot",
    "GameConfig",
    "GameSession",
    "GameStatus",
    "ScoreRecord",
    "GameLoop",
]
