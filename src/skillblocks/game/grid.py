from __future__ import annotations

from typing import Iterable, List, Tuple

import numpy as np

from .pieces import Piece, Shape, occupied_offsets


Coordinate = Tuple[int, int]

EMPTY = 0


class GameGrid:
    """Committed cell grid of the falling-block board.

    Uses 0 for empty cells and the tetromino value (1..7) of the piece that
    filled a cell otherwise. Row 0 is the top edge; rows above it (negative y)
    form the spawn buffer and are never stored.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def collides(self, shape: Shape, x: int, y: int) -> bool:
        for r, c in occupied_offsets(shape):
            nx, ny = x + c, y + r
            if nx < 0 or nx >= self.width or ny >= self.height:
                return True
            # Buffer cells above the board only meet the side walls.
            if ny >= 0 and self.grid[ny, nx] != EMPTY:
                return True
        return False

    def fill(self, cells: Iterable[Coordinate], value: int) -> None:
        for x, y in cells:
            self.grid[y, x] = value

    def merge(self, piece: Piece) -> None:
        """Write the piece's cells in; callers guarantee they are all on the board."""
        self.fill(piece.cells(), int(piece.kind))

    def full_rows(self) -> List[int]:
        return [int(r) for r in np.where(np.all(self.grid != EMPTY, axis=1))[0]]

    def occupied_rows(self) -> List[int]:
        return [int(r) for r in np.where(np.any(self.grid != EMPTY, axis=1))[0]]

    def remove_rows(self, rows: Iterable[int]) -> int:
        """Drop ``rows`` and pad with empty rows on top. Returns how many were removed."""
        rows = sorted(set(int(r) for r in rows))
        if not rows:
            return 0
        kept = np.delete(self.grid, rows, axis=0)
        padding = np.zeros((len(rows), self.width), dtype=np.int8)
        self.grid = np.vstack((padding, kept))
        return len(rows)

    def clear_full_rows(self) -> int:
        return self.remove_rows(self.full_rows())

    def composite(self, piece: Piece | None) -> np.ndarray:
        """Copy of the grid with ``piece`` painted over it (off-board cells skipped)."""
        state = self.grid.copy()
        if piece is not None:
            for x, y in piece.cells():
                if self.is_inside(x, y):
                    state[y, x] = int(piece.kind)
        return state

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
