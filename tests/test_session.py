import pytest

from minesolver.engine import Board, InvalidConfiguration
from minesolver.session import GameSession, SessionStats, flag_leftover_mine
from minesolver.solver import Solver


def session_with_layout(rows, **kwargs):
    session = GameSession(width=len(rows[0]), height=len(rows), mines=1, seed=0, **kwargs)
    session.board = Board.from_layout(rows)
    session.solver = Solver(session.board, seed=0)
    return session


def test_defaults():
    session = GameSession(seed=1)
    assert (session.board.width, session.board.height, session.board.num_mines) == (20, 20, 60)
    assert session.mines_remaining == 60
    assert not session.auto_solve
    assert not session.show_probabilities


def test_invalid_cadence():
    with pytest.raises(InvalidConfiguration):
        GameSession(fps=0)
    with pytest.raises(InvalidConfiguration):
        GameSession(move_every=0)


@pytest.mark.parametrize('ticks,expected', [(0, '0:00'), (60, '0:01'), (60 * 75, '1:15'), (60 * 600, '10:00')])
def test_format_time(ticks, expected):
    session = GameSession(width=5, height=5, mines=3, seed=0)
    session.ticks = ticks
    assert session.format_time() == expected


def test_tick_without_solver_only_advances_clock():
    session = GameSession(width=5, height=5, mines=3, seed=0)
    for _ in range(12):
        assert session.tick() is None
    assert session.ticks == 12
    assert not any(c.is_revealed for c in session.board.cells())


def test_auto_solve_moves_on_cadence():
    session = session_with_layout(['*.*..'])
    session.board.reveal(1, 0)
    session.toggle_auto_solve()
    moves = [session.tick() for _ in range(6)]
    assert moves[:5] == [None] * 5
    assert moves[5] == ('flag', (0, 0))
    assert session.stats.flags == 1


def test_lightning_moves_every_tick():
    session = session_with_layout(['*.*..'], lightning=True)
    session.board.reveal(1, 0)
    session.toggle_auto_solve()
    assert session.tick() == ('flag', (0, 0))
    assert session.tick() == ('flag', (2, 0))


def test_auto_solve_stops_when_won():
    session = session_with_layout(['*.*..'], lightning=True)
    session.board.reveal(1, 0)
    session.toggle_auto_solve()
    session.toggle_probabilities()
    for _ in range(10):
        session.tick()
    assert session.board.won
    assert not session.auto_solve
    assert not session.show_probabilities
    assert session.stats.games == 1
    assert session.stats.wins == 1
    ticks = session.ticks
    session.tick()
    assert session.ticks == ticks
    assert session.stats.games == 1


def test_probability_overlay_does_not_mutate():
    session = session_with_layout(['*.*..'], lightning=True)
    session.board.reveal(1, 0)
    session.toggle_probabilities()
    assert session.tick() is None
    assert session.solver.probabilities[0, 0] == 1.0
    assert session.board.flagged_count == 0


def test_clicks_win_the_game():
    session = session_with_layout(['*.', '..'])
    for x, y in [(1, 0), (0, 1), (1, 1)]:
        session.click(x, y)
    assert not session.board.won
    session.right_click(0, 0)
    assert session.board.won
    assert session.mines_remaining == 0
    assert session.stats.reveals == 3
    assert session.stats.flags == 1
    assert session.stats.win_rate == 1.0


def test_clicking_a_mine_loses():
    session = session_with_layout(['*.', '..'])
    session.toggle_auto_solve()
    session.click(0, 0)
    assert session.board.lost
    assert not session.auto_solve
    assert session.stats.mine_hits == 1
    assert session.stats.mine_hit_rate == 1.0
    assert session.stats.games == 1
    assert session.stats.wins == 0
    session.click(1, 1)
    session.right_click(1, 0)
    assert session.stats.reveals == 1
    assert session.stats.flags == 0


def test_repeated_clicks_are_ignored():
    session = session_with_layout(['*..', '...', '...'])
    session.click(1, 1)
    session.click(1, 1)
    session.right_click(1, 1)
    assert session.stats.reveals == 1
    assert session.stats.flags == 0
    assert not session.board.cell(1, 1).is_flagged


def test_new_game_resets_clock():
    session = GameSession(width=5, height=5, mines=3, seed=2)
    session.ticks = 100
    old = session.board
    session.new_game()
    assert session.ticks == 0
    assert session.board is not old
    assert session.solver.board is session.board


def test_stats_rates_without_games():
    stats = SessionStats()
    assert stats.win_rate == 0.0
    assert stats.mine_hit_rate == 0.0


def test_flag_leftover_mine_only_when_safe_cells_exhausted():
    board = Board.from_layout(['**..'])
    assert flag_leftover_mine(board) is None
    board.reveal(3, 0)
    assert flag_leftover_mine(board) == ('flag', (0, 0))
    assert flag_leftover_mine(board) == ('flag', (1, 0))
    assert flag_leftover_mine(board) is None
    assert board.check_win()
    assert flag_leftover_mine(board) is None


def test_auto_solve_finishes_mine_with_no_clue():
    session = session_with_layout(['**..'], lightning=True)
    session.board.reveal(3, 0)
    session.toggle_auto_solve()
    assert session.tick() == ('flag', (0, 0))
    assert session.tick() == ('flag', (1, 0))
    assert session.tick() is None
    assert session.board.won
    assert not session.board.lost
