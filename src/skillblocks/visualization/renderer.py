from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np
import pygame

from skillblocks.game import BoardSnapshot, SkillKind
from skillblocks.leaderboard import LeaderboardEntry

from .palette import color_for_value


SKILL_LABELS = {
    SkillKind.SLOW: "1 Slow",
    SkillKind.CLEAR_RANDOM_ROW: "2 Clear Row",
    SkillKind.SWAP_NEXT: "3 Swap Next",
}


class Renderer:
    def __init__(self, cell_size: int = 28, margin: int = 20, panel_width: int = 240) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_width = panel_width
        self._font = None

    def window_size(self, board_shape: Tuple[int, int]) -> Tuple[int, int]:
        h, w = board_shape
        width = self.margin * 3 + w * self.cell_size + self.panel_width
        height = self.margin * 2 + h * self.cell_size
        return width, height

    def font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 24)
        return self._font

    def _grid_surface(self, state: np.ndarray) -> pygame.Surface:
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, color_for_value(int(state[y, x])), rect)
        return surf

    def _text(self, screen: pygame.Surface, text: str, pos: Tuple[int, int],
              color: Tuple[int, int, int] = (220, 220, 230)) -> None:
        screen.blit(self.font().render(text, True, color), pos)

    def _draw_next(self, screen: pygame.Surface, snapshot: BoardSnapshot, x0: int, y0: int) -> int:
        self._text(screen, "Next", (x0, y0))
        y0 += 24
        if snapshot.next_shape is None or snapshot.next_kind is None:
            return y0
        preview = self.cell_size // 2
        color = color_for_value(int(snapshot.next_kind))
        for py in range(snapshot.next_shape.shape[0]):
            for px in range(snapshot.next_shape.shape[1]):
                if snapshot.next_shape[py, px]:
                    rect = pygame.Rect(x0 + px * preview, y0 + py * preview, preview - 1, preview - 1)
                    pygame.draw.rect(screen, color, rect)
        return y0 + 4 * preview + 12

    def draw(self, screen: pygame.Surface, snapshot: BoardSnapshot,
             leaderboard: Sequence[LeaderboardEntry] = ()) -> None:
        screen.fill((10, 10, 14))
        screen.blit(self._grid_surface(snapshot.grid), (self.margin, self.margin))

        x0 = self.margin * 2 + snapshot.grid.shape[1] * self.cell_size
        y = self._draw_next(screen, snapshot, x0, self.margin)
        self._text(screen, f"Score: {snapshot.score}", (x0, y))
        self._text(screen, f"Lines: {snapshot.lines}", (x0, y + 22))
        self._text(screen, f"Speed: {snapshot.gravity_interval} ms", (x0, y + 44))
        y += 76
        for kind, label in SKILL_LABELS.items():
            if snapshot.skills_ready[kind]:
                self._text(screen, f"{label}: Ready", (x0, y), (120, 220, 140))
            else:
                secs = snapshot.skills_remaining_ms[kind] / 1000.0
                self._text(screen, f"{label}: {secs:.0f}s", (x0, y), (150, 150, 160))
            y += 22

        y += 12
        self._text(screen, "Leaderboard", (x0, y))
        y += 24
        if not leaderboard:
            self._text(screen, "No scores yet", (x0, y), (150, 150, 160))
        for i, entry in enumerate(leaderboard):
            self._text(screen, f"{i + 1}. {entry.name} {entry.score} ({entry.lines})", (x0, y))
            y += 20

        if snapshot.paused or snapshot.over:
            message = "Paused - P to resume" if snapshot.paused else "Game Over - R to restart"
            text = self.font().render(message, True, (255, 255, 255))
            rect = text.get_rect(center=(self.margin + snapshot.grid.shape[1] * self.cell_size // 2,
                                         screen.get_height() // 2))
            screen.blit(text, rect)
        pygame.display.flip()
