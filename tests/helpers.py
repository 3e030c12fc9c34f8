from __future__ import annotations

from skillblocks.game import GameConfig, GameSession, Piece, TetrominoType


class FakeClock:
    def __init__(self, start: float = 0.0) -> None:
        self.value = start

    def advance(self, amount: float) -> None:
        self.value += amount

    def __call__(self) -> float:
        return self.value


def make_session(seed: int = 0, clock: FakeClock | None = None, **config_kwargs) -> GameSession:
    clock = clock or FakeClock()
    records = []
    session = GameSession(
        GameConfig(random_seed=seed, **config_kwargs),
        clock=clock,
        on_game_over=records.append,
    )
    session.test_clock = clock  # type: ignore[attr-defined]
    session.test_records = records  # type: ignore[attr-defined]
    return session


def place_piece(session: GameSession, kind: TetrominoType, x: int | None = None, y: int | None = None) -> Piece:
    """Make ``kind`` the active piece, at its spawn point unless x/y are given."""
    piece = Piece.spawn(kind, session.grid.width)
    if x is not None:
        piece.x = x
    if y is not None:
        piece.y = y
    session.current_piece = piece
    return piece
