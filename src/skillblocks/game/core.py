from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Callable, Dict, Optional

import numpy as np

from .clock import Clock, GravityClock, monotonic_ms
from .grid import GameGrid
from .pieces import Piece, Shape, TetrominoType, base_matrix, rotate_clockwise
from .rules import GravityRules, ScoringRules
from .skills import SkillConfig, SkillKind, SkillSet

logger = logging.getLogger(__name__)


# Tried in order after a clockwise rotation; the first fit wins.
ROTATION_KICKS = ((0, 0), (-1, 0), (1, 0), (0, -1), (-2, 0), (2, 0))


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    SKILL_SLOW = 5
    SKILL_CLEAR_ROW = 6
    SKILL_SWAP_NEXT = 7
    NONE = 8
    TOGGLE_PAUSE = 9
    RESET = 10


SKILL_ACTIONS = {
    Action.SKILL_SLOW: SkillKind.SLOW,
    Action.SKILL_CLEAR_ROW: SkillKind.CLEAR_RANDOM_ROW,
    Action.SKILL_SWAP_NEXT: SkillKind.SWAP_NEXT,
}


class GameStatus(Enum):
    RUNNING = "running"
    PAUSED = "paused"
    OVER = "over"


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    initial_gravity_ms: int = 800
    min_gravity_ms: int = 80
    gravity_decay: float = 0.98
    player_name: str = "Player"
    skills: SkillConfig = field(default_factory=SkillConfig)


@dataclass(frozen=True)
class ScoreRecord:
    """Finished-game result handed to the leaderboard."""

    name: str
    score: int
    lines: int


@dataclass(frozen=True)
class BoardSnapshot:
    grid: np.ndarray
    score: int
    lines: int
    status: GameStatus
    next_kind: Optional[TetrominoType]
    next_shape: Optional[Shape]
    gravity_interval: int
    skills_ready: Dict[SkillKind, bool]
    skills_remaining_ms: Dict[SkillKind, float]

    @property
    def running(self) -> bool:
        return self.status is GameStatus.RUNNING

    @property
    def paused(self) -> bool:
        return self.status is GameStatus.PAUSED

    @property
    def over(self) -> bool:
        return self.status is GameStatus.OVER


ScoreCallback = Callable[[ScoreRecord], None]


class GameSession:
    """One player's falling-block game.

    Every collaborator goes through this object: input calls the command
    methods (or :meth:`step`), the renderer reads :meth:`snapshot`, and the
    leaderboard receives a :class:`ScoreRecord` through ``on_game_over`` when
    the game ends. Commands never raise for gameplay reasons; an illegal move
    simply leaves the piece where it was.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        clock: Optional[Clock] = None,
        on_game_over: Optional[ScoreCallback] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.gravity_rules = GravityRules(
            initial_ms=self.config.initial_gravity_ms,
            min_ms=self.config.min_gravity_ms,
            decay=self.config.gravity_decay,
        )
        self.clock: Clock = clock or monotonic_ms
        self.on_game_over = on_game_over
        self.rng = random.Random(self.config.random_seed)
        self.grid = GameGrid(self.config.width, self.config.height)
        self.skills = SkillSet(self.config.skills)
        self.gravity_clock = GravityClock()
        self.player_name = self.config.player_name
        self.score = 0
        self.lines_cleared_total = 0
        self.gravity_interval = self.gravity_rules.initial_ms
        self.status = GameStatus.RUNNING
        self.current_piece: Optional[Piece] = None
        self.next_piece: Optional[Piece] = None
        self.reset()

    # State machine

    @property
    def running(self) -> bool:
        return self.status is GameStatus.RUNNING

    @property
    def game_over(self) -> bool:
        return self.status is GameStatus.OVER

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.grid.reset()
        self.score = 0
        self.lines_cleared_total = 0
        self.gravity_interval = self.gravity_rules.initial_ms
        self.skills.cancel_effects()
        self.gravity_clock.reset()
        self.current_piece = self.new_piece()
        self.next_piece = self.new_piece()
        self.status = GameStatus.RUNNING
        logger.debug("Session reset")

    def toggle_pause(self) -> bool:
        if self.status is GameStatus.OVER:
            return False
        if self.status is GameStatus.RUNNING:
            self.status = GameStatus.PAUSED
        else:
            self.status = GameStatus.RUNNING
        logger.debug("Session %s", self.status.value)
        return True

    def _enter_game_over(self) -> None:
        self.status = GameStatus.OVER
        record = self.score_record()
        logger.info("Game over: %s scored %d (%d lines)", record.name, record.score, record.lines)
        if self.on_game_over is None:
            return
        try:
            self.on_game_over(record)
        except Exception:
            logger.exception("Score submission failed; result dropped")

    def score_record(self) -> ScoreRecord:
        return ScoreRecord(name=self.player_name, score=self.score, lines=self.lines_cleared_total)

    # Pieces

    def new_piece(self) -> Piece:
        kind = self.rng.choice(list(TetrominoType))
        return Piece.spawn(kind, self.grid.width)

    def _sync(self, now: float) -> None:
        self.skills.expire(self, now)

    def _playable(self) -> bool:
        self._sync(self.clock())
        return self.status is GameStatus.RUNNING and self.current_piece is not None

    def _move(self, dx: int, dy: int) -> bool:
        if not self._playable():
            return False
        p = self.current_piece
        if self.grid.collides(p.matrix, p.x + dx, p.y + dy):
            return False
        self.current_piece = p.moved(dx, dy)
        return True

    def move_left(self) -> bool:
        return self._move(-1, 0)

    def move_right(self) -> bool:
        return self._move(1, 0)

    def rotate(self) -> bool:
        if not self._playable():
            return False
        p = self.current_piece
        rotated = rotate_clockwise(p.matrix)
        for dx, dy in ROTATION_KICKS:
            if not self.grid.collides(rotated, p.x + dx, p.y + dy):
                self.current_piece = Piece(p.kind, rotated, p.x + dx, p.y + dy)
                return True
        return False

    def soft_drop(self) -> bool:
        """Move down one row, or lock the piece where it is if blocked."""
        if not self._playable():
            return False
        if not self._move(0, 1):
            self._lock_piece()
        return True

    def hard_drop(self) -> bool:
        if not self._playable():
            return False
        p = self.current_piece
        y = p.y
        while not self.grid.collides(p.matrix, p.x, y + 1):
            y += 1
        self.current_piece = Piece(p.kind, p.matrix, p.x, y)
        self._lock_piece()
        return True

    def _lock_piece(self) -> None:
        piece = self.current_piece
        assert piece is not None
        cells = piece.cells()
        if any(y < 0 for _, y in cells):
            # Came to rest sticking out of the top: the board is left untouched.
            self._enter_game_over()
            return
        self.grid.merge(piece)
        cleared = self.grid.clear_full_rows()
        self._apply_line_clear(cleared)
        logger.debug("Locked %s at (%d, %d), cleared %d", piece.kind.name, piece.x, piece.y, cleared)
        self.current_piece = self.next_piece
        self.next_piece = self.new_piece()

    def _apply_line_clear(self, cleared: int) -> int:
        gained = self.rules.score_for_lines(cleared)
        self.score += gained
        self.lines_cleared_total += cleared
        if cleared > 0:
            self.gravity_interval = self.gravity_rules.after_clear(self.gravity_interval)
        return gained

    # Skills

    def use_skill(self, kind: SkillKind) -> bool:
        skill = self.skills[kind]
        now = self.clock()
        self._sync(now)
        if self.status is not GameStatus.RUNNING:
            return False
        return self.skills.use(skill.kind, self, now)

    def skill_ready(self, kind: SkillKind) -> bool:
        return self.skills[kind].can_use(self.clock())

    def skill_remaining_ms(self, kind: SkillKind) -> float:
        return self.skills[kind].remaining_ms(self.clock())

    # Gravity

    def update(self, now: Optional[float] = None) -> bool:
        """Expire timed effects and fire gravity if a period has elapsed."""
        if now is None:
            now = self.clock()
        self._sync(now)
        if self.gravity_clock.poll(now, self.gravity_interval, self.status is GameStatus.RUNNING):
            self.soft_drop()
            return True
        return False

    # Dispatch

    def step(self, action: Action) -> bool:
        action = Action(action)
        if action == Action.LEFT:
            return self.move_left()
        if action == Action.RIGHT:
            return self.move_right()
        if action == Action.ROTATE_CW:
            return self.rotate()
        if action == Action.SOFT_DROP:
            return self.soft_drop()
        if action == Action.HARD_DROP:
            return self.hard_drop()
        if action in SKILL_ACTIONS:
            return self.use_skill(SKILL_ACTIONS[action])
        if action == Action.TOGGLE_PAUSE:
            return self.toggle_pause()
        if action == Action.RESET:
            self.reset()
            return True
        return False

    # Read side

    def snapshot(self) -> BoardSnapshot:
        now = self.clock()
        upcoming = self.next_piece
        return BoardSnapshot(
            grid=self.grid.composite(self.current_piece),
            score=self.score,
            lines=self.lines_cleared_total,
            status=self.status,
            next_kind=upcoming.kind if upcoming else None,
            next_shape=base_matrix(upcoming.kind) if upcoming else None,
            gravity_interval=self.gravity_interval,
            skills_ready={s.kind: s.can_use(now) for s in self.skills},
            skills_remaining_ms={s.kind: s.remaining_ms(now) for s in self.skills},
        )
