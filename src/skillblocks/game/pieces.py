from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


# Square matrices: side 4 for I, 2 for O, 3 for the rest.
BASE_SHAPES = {
    TetrominoType.I: np.array(
        [[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]], dtype=np.int8
    ),
    TetrominoType.O: np.array([[1, 1], [1, 1]], dtype=np.int8),
    TetrominoType.T: np.array([[0, 1, 0], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.S: np.array([[0, 1, 1], [1, 1, 0], [0, 0, 0]], dtype=np.int8),
    TetrominoType.Z: np.array([[1, 1, 0], [0, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.J: np.array([[1, 0, 0], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.L: np.array([[0, 0, 1], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
}


def base_matrix(kind: TetrominoType) -> Shape:
    """Fresh copy of the spawn orientation for ``kind``."""
    return BASE_SHAPES[TetrominoType(kind)].copy()


def rotate_clockwise(shape: Shape) -> Shape:
    # result[x][n-1-y] = shape[y][x]
    return np.ascontiguousarray(np.rot90(shape, 1, axes=(1, 0)))


def occupied_offsets(shape: Shape) -> List[Tuple[int, int]]:
    """(row, col) offsets of the filled cells of ``shape``."""
    rows, cols = np.nonzero(shape)
    return [(int(r), int(c)) for r, c in zip(rows, cols)]


@dataclass
class Piece:
    kind: TetrominoType
    matrix: Shape
    x: int = 0
    y: int = 0

    @classmethod
    def spawn(cls, kind: TetrominoType, board_width: int) -> "Piece":
        matrix = base_matrix(kind)
        n = matrix.shape[0]
        x = board_width // 2 - int(math.ceil(n / 2))
        # Enters from above: only the bottom matrix row can reach row 0.
        y = -(n - 1)
        return cls(kind=TetrominoType(kind), matrix=matrix, x=x, y=y)

    def moved(self, dx: int, dy: int) -> "Piece":
        return Piece(self.kind, self.matrix, self.x + dx, self.y + dy)

    def cells_at(self, origin_x: int, origin_y: int) -> List[Tuple[int, int]]:
        return [(origin_x + c, origin_y + r) for r, c in occupied_offsets(self.matrix)]

    def cells(self) -> List[Tuple[int, int]]:
        return self.cells_at(self.x, self.y)

    def copy(self) -> "Piece":
        return Piece(self.kind, self.matrix.copy(), self.x, self.y)
