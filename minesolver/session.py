from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .engine import Board, InvalidConfiguration
from .solver import Solver, Move

DEFAULT_WIDTH = 20
DEFAULT_HEIGHT = 20
DEFAULT_MINES = 60
DEFAULT_FPS = 60
# One solver move every 1/10 of a second at the default frame rate
DEFAULT_MOVE_EVERY = 6


def flag_leftover_mine(board: Board) -> Optional[Move]:
    """Flag one hidden cell once every safe cell is open, since it must be a mine."""
    if board.is_terminal() or board.revealed_count != board.safe_cells:
        return None
    for x, y in board.hidden_cells():
        board.flag(x, y)
        return ('flag', (x, y))
    return None


@dataclass
class SessionStats:
    games: int = 0
    wins: int = 0
    reveals: int = 0
    flags: int = 0
    mine_hits: int = 0

    @property
    def win_rate(self) -> float:
        return (self.wins / self.games) if self.games > 0 else 0.0

    @property
    def mine_hit_rate(self) -> float:
        return (self.mine_hits / self.reveals) if self.reveals > 0 else 0.0


class GameSession:
    """One game in progress: the board, the solver bound to it, and the frame clock.

    The shell calls :meth:`tick` once per frame and forwards clicks to
    :meth:`click` / :meth:`right_click`; everything it draws comes from
    ``session.board`` and ``session.solver.probabilities``.
    """

    def __init__(self, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT,
                 mines: int = DEFAULT_MINES, seed: Optional[int] = None,
                 fps: int = DEFAULT_FPS, move_every: int = DEFAULT_MOVE_EVERY,
                 lightning: bool = False):
        if fps <= 0 or move_every <= 0:
            raise InvalidConfiguration("fps and move_every must be positive")
        self.width = width
        self.height = height
        self.mines = mines
        self.seed = seed
        self.fps = fps
        self.move_every = move_every
        self.lightning = lightning
        self.auto_solve = False
        self.show_probabilities = False
        self.stats = SessionStats()
        self.new_game()

    def new_game(self) -> None:
        self.board = Board(self.width, self.height, self.mines, seed=self.seed)
        self.solver = Solver(self.board, seed=self.seed)
        self.ticks = 0
        self._recorded = False

    @property
    def mines_remaining(self) -> int:
        return self.board.mines_remaining

    @property
    def elapsed_seconds(self) -> int:
        return round(self.ticks / self.fps)

    def format_time(self) -> str:
        minutes, seconds = divmod(self.elapsed_seconds, 60)
        return f"{minutes}:{seconds:02d}"

    def toggle_auto_solve(self) -> bool:
        self.auto_solve = not self.auto_solve
        return self.auto_solve

    def toggle_probabilities(self) -> bool:
        self.show_probabilities = not self.show_probabilities
        return self.show_probabilities

    def tick(self) -> Optional[Move]:
        if self.board.is_terminal():
            return None
        self.ticks += 1
        move = None
        if self.lightning or self.ticks % self.move_every == 0:
            if self.auto_solve:
                move = flag_leftover_mine(self.board) or self.solver.next_move()
                self._count(move)
            elif self.show_probabilities:
                self.solver.recompute_probabilities()
        self._sync()
        return move

    def click(self, x: int, y: int) -> None:
        if self.board.is_terminal():
            return
        c = self.board.cell(x, y)
        if c.is_revealed or c.is_flagged:
            return
        self.board.reveal(x, y)
        self._count(('reveal', (x, y)))
        self.board.check_win()
        self._sync()

    def right_click(self, x: int, y: int) -> None:
        if self.board.is_terminal() or self.board.cell(x, y).is_revealed:
            return
        self.board.flag(x, y)
        self._count(('flag', (x, y)))
        self.board.check_win()
        self._sync()

    def _count(self, move: Optional[Move]) -> None:
        if move is None:
            return
        kind, (x, y) = move
        if kind == 'flag':
            self.stats.flags += 1
        else:
            self.stats.reveals += 1
            if self.board.exploded == (x, y):
                self.stats.mine_hits += 1

    def _sync(self) -> None:
        if self.board.won:
            self.auto_solve = False
            self.show_probabilities = False
        elif self.board.lost:
            self.auto_solve = False
        if self.board.is_terminal() and not self._recorded:
            self.stats.games += 1
            self.stats.wins += 1 if self.board.won else 0
            self._recorded = True
