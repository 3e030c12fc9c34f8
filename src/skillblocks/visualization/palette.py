from __future__ import annotations

from typing import Tuple

from skillblocks.game import TetrominoType


PALETTE = {
    0: (20, 20, 26),
    int(TetrominoType.I): (0, 229, 255),
    int(TetrominoType.O): (255, 212, 0),
    int(TetrominoType.T): (177, 60, 255),
    int(TetrominoType.S): (0, 217, 68),
    int(TetrominoType.Z): (255, 59, 59),
    int(TetrominoType.J): (34, 51, 255),
    int(TetrominoType.L): (255, 151, 0),
}


def color_for_value(v: int) -> Tuple[int, int, int]:
    return PALETTE.get(abs(v), (200, 200, 200))
