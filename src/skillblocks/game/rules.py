from __future__ import annotations

import math
from dataclasses import dataclass


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (40, 100, 300, 1200)
    overflow_points_per_line: int = 100

    def score_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        if 1 <= lines <= 4:
            return self.line_clear_scores[lines - 1]
        # Not reachable with tetrominoes, kept for custom boards
        return lines * self.overflow_points_per_line


@dataclass
class GravityRules:
    initial_ms: int = 800
    min_ms: int = 80
    decay: float = 0.98

    def after_clear(self, interval_ms: int) -> int:
        return max(self.min_ms, round_half_up(interval_ms * self.decay))

    def slowed(self, interval_ms: int, factor: float) -> int:
        return max(self.min_ms, round_half_up(interval_ms * factor))
