"""Time-gated special abilities.

Each skill is gated by a cooldown against the session clock: it is usable once
``now >= ready_at`` and every accepted use pushes ``ready_at`` forward by the
cooldown, whether or not the effect changed anything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Dict, Iterator, Optional

from .pieces import Piece, base_matrix

if TYPE_CHECKING:
    from .core import GameSession

logger = logging.getLogger(__name__)


class SkillKind(IntEnum):
    SLOW = 0
    CLEAR_RANDOM_ROW = 1
    SWAP_NEXT = 2


# Same nudge order as rotation; used when swap validation is enabled.
SWAP_KICKS = ((0, 0), (-1, 0), (1, 0), (0, -1), (-2, 0), (2, 0))


@dataclass
class SkillConfig:
    slow_cooldown_ms: int = 30_000
    slow_duration_ms: int = 10_000
    slow_factor: float = 0.35
    clear_row_cooldown_ms: int = 20_000
    swap_next_cooldown_ms: int = 15_000
    validate_swap: bool = True


@dataclass
class Skill:
    cooldown_ms: int
    ready_at: float = 0.0

    kind = SkillKind.SLOW

    def can_use(self, now: float) -> bool:
        return now >= self.ready_at

    def remaining_ms(self, now: float) -> float:
        return max(0.0, self.ready_at - now)

    def use(self, session: "GameSession", now: float) -> bool:
        """Apply the effect if ready. Returns False (and changes nothing) on cooldown."""
        if not self.can_use(now):
            return False
        self.ready_at = now + self.cooldown_ms
        self.apply(session, now)
        return True

    def apply(self, session: "GameSession", now: float) -> None:
        raise NotImplementedError

    def expire(self, session: "GameSession", now: float) -> None:
        """Hook for skills with a timed effect."""

    def cancel(self) -> None:
        """Drop any pending timed effect."""


@dataclass
class SlowSkill(Skill):
    duration_ms: int = 10_000
    factor: float = 0.35
    restore_at: Optional[float] = field(default=None, repr=False)
    restore_interval: Optional[int] = field(default=None, repr=False)

    kind = SkillKind.SLOW

    @property
    def active(self) -> bool:
        return self.restore_at is not None

    def apply(self, session: "GameSession", now: float) -> None:
        # A second slow inside the window keeps the original interval to restore.
        previous = self.restore_interval if self.active else session.gravity_interval
        session.gravity_interval = session.gravity_rules.slowed(session.gravity_interval, self.factor)
        self.restore_at = now + self.duration_ms
        self.restore_interval = previous
        logger.debug("Slow: gravity %s ms until %.0f (restores %s ms)",
                     session.gravity_interval, self.restore_at, previous)

    def expire(self, session: "GameSession", now: float) -> None:
        if self.restore_at is None or now < self.restore_at:
            return
        assert self.restore_interval is not None
        session.gravity_interval = self.restore_interval
        logger.debug("Slow expired: gravity back to %s ms", self.restore_interval)
        self.cancel()

    def cancel(self) -> None:
        self.restore_at = None
        self.restore_interval = None


@dataclass
class ClearRandomRowSkill(Skill):
    kind = SkillKind.CLEAR_RANDOM_ROW

    def apply(self, session: "GameSession", now: float) -> None:
        rows = session.grid.occupied_rows()
        if not rows:
            logger.debug("Clear row: board empty, nothing removed")
            return
        row = session.rng.choice(rows)
        session.grid.remove_rows([row])
        logger.debug("Clear row: removed row %d", row)


@dataclass
class SwapNextSkill(Skill):
    validate: bool = True

    kind = SkillKind.SWAP_NEXT

    def apply(self, session: "GameSession", now: float) -> None:
        current = session.current_piece
        upcoming = session.next_piece
        if current is None or upcoming is None:
            return
        swapped = Piece(upcoming.kind, base_matrix(upcoming.kind), current.x, current.y)
        if self.validate:
            for dx, dy in SWAP_KICKS:
                if not session.grid.collides(swapped.matrix, swapped.x + dx, swapped.y + dy):
                    swapped = swapped.moved(dx, dy)
                    break
            else:
                logger.debug("Swap next: %s does not fit at (%d, %d), swap rejected",
                             upcoming.kind.name, current.x, current.y)
                return
        session.current_piece = swapped
        session.next_piece = session.new_piece()
        logger.debug("Swap next: active piece is now %s", swapped.kind.name)


class SkillSet:
    """The three skills of one session, keyed by kind."""

    def __init__(self, config: Optional[SkillConfig] = None) -> None:
        self.config = config or SkillConfig()
        self.skills: Dict[SkillKind, Skill] = {
            SkillKind.SLOW: SlowSkill(
                cooldown_ms=self.config.slow_cooldown_ms,
                duration_ms=self.config.slow_duration_ms,
                factor=self.config.slow_factor,
            ),
            SkillKind.CLEAR_RANDOM_ROW: ClearRandomRowSkill(cooldown_ms=self.config.clear_row_cooldown_ms),
            SkillKind.SWAP_NEXT: SwapNextSkill(
                cooldown_ms=self.config.swap_next_cooldown_ms,
                validate=self.config.validate_swap,
            ),
        }

    def __getitem__(self, kind: SkillKind) -> Skill:
        try:
            return self.skills[SkillKind(kind)]
        except ValueError:
            raise ValueError(f"Unknown skill kind: {kind!r}") from None

    def __iter__(self) -> Iterator[Skill]:
        return iter(self.skills.values())

    def use(self, kind: SkillKind, session: "GameSession", now: float) -> bool:
        used = self[kind].use(session, now)
        if not used:
            logger.debug("Skill %s on cooldown", SkillKind(kind).name)
        return used

    def expire(self, session: "GameSession", now: float) -> None:
        for skill in self:
            skill.expire(session, now)

    def cancel_effects(self) -> None:
        for skill in self:
            skill.cancel()

    def reset_cooldowns(self) -> None:
        for skill in self:
            skill.cancel()
            skill.ready_at = 0.0
