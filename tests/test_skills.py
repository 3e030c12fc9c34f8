import numpy as np

from skillblocks.game import Action, Piece, SkillConfig, SkillKind, TetrominoType, base_matrix
from tests.helpers import make_session, place_piece


def test_slow_reduces_gravity_then_restores():
    session = make_session()
    clock = session.test_clock

    assert session.use_skill(SkillKind.SLOW)
    assert session.gravity_interval == 280
    assert session.skills[SkillKind.SLOW].ready_at == 30_000

    clock.advance(9_999)
    session.update()
    assert session.gravity_interval == 280

    clock.advance(1)
    session.update()
    assert session.gravity_interval == 800


def test_slow_restores_interval_captured_at_invocation():
    session = make_session()
    session.gravity_interval = 500
    session.use_skill(SkillKind.SLOW)
    assert session.gravity_interval == 175

    session._apply_line_clear(1)
    assert session.gravity_interval == 172

    session.test_clock.advance(10_000)
    session.move_left()
    assert session.gravity_interval == 500


def test_slow_is_floored():
    session = make_session()
    session.gravity_interval = 100
    session.use_skill(SkillKind.SLOW)
    assert session.gravity_interval == 80


def test_skill_on_cooldown_has_no_effect():
    session = make_session()
    session.grid.grid[19, 0] = 1
    session.grid.grid[18, 0] = 1
    assert session.use_skill(SkillKind.CLEAR_RANDOM_ROW)
    ready_at = session.skills[SkillKind.CLEAR_RANDOM_ROW].ready_at
    board = session.grid.clone_state()
    piece = session.current_piece

    session.test_clock.advance(19_999)
    assert not session.use_skill(SkillKind.CLEAR_RANDOM_ROW)

    assert session.skills[SkillKind.CLEAR_RANDOM_ROW].ready_at == ready_at
    assert np.array_equal(session.grid.grid, board)
    assert session.current_piece is piece

    session.test_clock.advance(1)
    assert session.use_skill(SkillKind.CLEAR_RANDOM_ROW)
    assert session.grid.filled_count() == 0


def test_slow_on_cooldown_leaves_gravity_alone():
    session = make_session()
    slow = session.skills[SkillKind.SLOW]
    assert session.use_skill(SkillKind.SLOW)
    ready_at, restore_at = slow.ready_at, slow.restore_at

    session.test_clock.advance(5_000)
    assert not session.use_skill(SkillKind.SLOW)
    assert session.gravity_interval == 280
    assert slow.ready_at == ready_at
    assert slow.restore_at == restore_at == 10_000
    assert slow.restore_interval == 800

    session.test_clock.advance(5_000)
    assert not session.use_skill(SkillKind.SLOW)
    assert session.gravity_interval == 800


def test_clear_random_row_on_empty_board_still_uses_cooldown():
    session = make_session()
    session.test_clock.advance(500)
    assert session.use_skill(SkillKind.CLEAR_RANDOM_ROW)
    assert session.grid.filled_count() == 0
    assert session.skills[SkillKind.CLEAR_RANDOM_ROW].ready_at == 20_500
    assert not session.skill_ready(SkillKind.CLEAR_RANDOM_ROW)
    assert session.skill_remaining_ms(SkillKind.CLEAR_RANDOM_ROW) == 20_000


def test_clear_random_row_removes_one_occupied_row_without_scoring():
    for seed in range(10):
        session = make_session(seed=seed)
        session.grid.grid[17, 0] = 1
        session.grid.grid[18, 1] = 1
        session.grid.grid[19, 2] = 1

        session.step(Action.SKILL_CLEAR_ROW)

        assert session.grid.filled_count() == 2
        assert session.grid.occupied_rows() == [18, 19]
        assert session.score == 0
        assert session.lines_cleared_total == 0


def test_swap_next_replaces_active_piece_in_place():
    session = make_session()
    place_piece(session, TetrominoType.O, x=4, y=5)
    session.next_piece = Piece.spawn(TetrominoType.T, 10)

    assert session.use_skill(SkillKind.SWAP_NEXT)

    p = session.current_piece
    assert p.kind is TetrominoType.T
    assert (p.x, p.y) == (4, 5)
    assert np.array_equal(p.matrix, base_matrix(TetrominoType.T))
    assert session.next_piece is not None


def test_second_swap_before_cooldown_is_noop():
    session = make_session()
    session.use_skill(SkillKind.SWAP_NEXT)
    after_first = session.current_piece.copy()
    upcoming = session.next_piece

    session.test_clock.advance(1_000)
    assert not session.use_skill(SkillKind.SWAP_NEXT)

    p = session.current_piece
    assert p.kind == after_first.kind
    assert (p.x, p.y) == (after_first.x, after_first.y)
    assert np.array_equal(p.matrix, after_first.matrix)
    assert session.next_piece is upcoming


def _blocked_swap_setup(session):
    session.grid.grid[5, 2:] = 1
    place_piece(session, TetrominoType.O, x=0, y=4)
    session.next_piece = Piece.spawn(TetrominoType.I, 10)


def test_swap_is_nudged_into_a_legal_spot():
    session = make_session()
    _blocked_swap_setup(session)

    assert session.use_skill(SkillKind.SWAP_NEXT)

    p = session.current_piece
    assert p.kind is TetrominoType.I
    assert (p.x, p.y) == (0, 3)
    assert not session.grid.collides(p.matrix, p.x, p.y)


def test_unvalidated_swap_keeps_position_even_if_overlapping():
    session = make_session(skills=SkillConfig(validate_swap=False))
    _blocked_swap_setup(session)

    session.use_skill(SkillKind.SWAP_NEXT)

    p = session.current_piece
    assert p.kind is TetrominoType.I
    assert (p.x, p.y) == (0, 4)
    assert session.grid.collides(p.matrix, p.x, p.y)


def test_rejected_swap_still_consumes_cooldown():
    session = make_session()
    session.grid.grid[:, 2:] = 1
    place_piece(session, TetrominoType.O, x=0, y=10)
    session.next_piece = Piece.spawn(TetrominoType.I, 10)
    upcoming = session.next_piece

    assert session.use_skill(SkillKind.SWAP_NEXT)

    assert session.current_piece.kind is TetrominoType.O
    assert session.next_piece is upcoming
    assert not session.skill_ready(SkillKind.SWAP_NEXT)


def test_skills_do_nothing_while_paused():
    session = make_session()
    session.toggle_pause()
    assert not session.use_skill(SkillKind.SLOW)
    assert session.gravity_interval == 800
    assert session.skill_ready(SkillKind.SLOW)


def test_reset_cancels_pending_slow_but_keeps_cooldowns():
    session = make_session()
    session.use_skill(SkillKind.SLOW)
    session.reset()
    assert session.gravity_interval == 800
    session.test_clock.advance(10_000)
    session.update()
    assert session.gravity_interval == 800
    assert not session.skill_ready(SkillKind.SLOW)
