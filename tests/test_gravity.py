from skillblocks.game import GravityClock, SkillKind, TetrominoType
from tests.helpers import make_session, place_piece


def test_clock_primes_then_fires_each_period():
    clock = GravityClock()
    assert not clock.poll(0, 800, True)
    assert not clock.poll(799, 800, True)
    assert clock.poll(800, 800, True)
    assert not clock.poll(1500, 800, True)
    assert clock.poll(1600, 800, True)


def test_clock_fires_once_per_poll_without_catch_up():
    clock = GravityClock()
    clock.poll(0, 100, True)
    assert clock.poll(1000, 100, True)
    assert not clock.poll(1050, 100, True)


def test_new_interval_applies_to_next_period():
    clock = GravityClock()
    clock.poll(0, 800, True)
    assert clock.poll(800, 800, True)
    assert not clock.poll(1100, 300, True)
    assert not clock.poll(1599, 300, True)
    assert clock.poll(1600, 300, True)
    assert not clock.poll(1899, 300, True)
    assert clock.poll(1900, 300, True)


def test_slowing_mid_period_does_not_fire_early():
    session = make_session()
    place_piece(session, TetrominoType.O, y=5)
    clock = session.test_clock
    session.update()

    clock.advance(700)
    assert session.use_skill(SkillKind.SLOW)
    assert session.gravity_interval == 280
    clock.advance(1)
    assert not session.update()
    assert session.current_piece.y == 5

    clock.advance(99)
    assert session.update()
    assert session.current_piece.y == 6
    clock.advance(279)
    assert not session.update()
    clock.advance(1)
    assert session.update()
    assert session.current_piece.y == 7


def test_inactive_clock_drops_phase():
    clock = GravityClock()
    clock.poll(0, 800, True)
    assert not clock.poll(5000, 800, False)
    assert not clock.poll(5000, 800, True)
    assert clock.time_until_tick(5000) == 800
    assert not clock.poll(5799, 800, True)
    assert clock.poll(5800, 800, True)


def test_session_gravity_moves_piece_down():
    session = make_session()
    place_piece(session, TetrominoType.O, y=5)
    clock = session.test_clock

    assert not session.update()
    clock.advance(800)
    assert session.update()
    assert session.current_piece.y == 6


def test_gravity_locks_piece_when_blocked():
    session = make_session()
    place_piece(session, TetrominoType.O, y=18)
    upcoming = session.next_piece
    session.update()
    session.test_clock.advance(800)
    session.update()
    assert session.current_piece is upcoming
    assert session.grid.filled_count() == 4


def test_gravity_stops_while_paused_and_does_not_make_up_time():
    session = make_session()
    place_piece(session, TetrominoType.O, y=0)
    clock = session.test_clock
    session.update()

    session.toggle_pause()
    clock.advance(10_000)
    assert not session.update()
    assert session.current_piece.y == 0

    session.toggle_pause()
    assert not session.update()
    clock.advance(800)
    assert session.update()
    assert session.current_piece.y == 1
