from __future__ import annotations
from typing import Tuple, Optional
import numpy as np
from .engine import Board, Coordinate

Move = Tuple[str, Coordinate]

UNKNOWN = 0.5
SAFE = 0.0
MINE = 1.0
REVEALED = -1.0

# Local deduction only, one revealed clue at a time:
# - If a clue's flagged neighbors equal its number, every other hidden neighbor is safe
# - If a clue's remaining mines equal its hidden neighbors, every hidden neighbor is a mine
# Flagged cells never count as hidden and are never written to.


class Solver:
    def __init__(self, board: Board, seed: Optional[int] = None):
        self.board = board
        self.rng = np.random.default_rng(seed)
        self.probabilities = np.full((board.height, board.width), UNKNOWN, dtype=float)

    def recompute_probabilities(self, board: Optional[Board] = None) -> np.ndarray:
        if board is None:
            board = self.board
        elif board is not self.board:
            raise ValueError("solver is bound to a different board")
        probs = self.probabilities
        probs.fill(UNKNOWN)
        for row in board.grid:
            for t in row:
                if not t.is_revealed:
                    continue
                probs[t.y, t.x] = REVEALED
                if t.is_mine:
                    continue
                hidden = t.unrevealed_unflagged_neighbors(board)
                if not hidden:
                    continue
                if t.is_satisfied(board):
                    for n in hidden:
                        probs[n.y, n.x] = SAFE
                elif t.remaining_mine_count(board) == len(hidden):
                    for n in hidden:
                        probs[n.y, n.x] = MINE
        return probs

    def probability_of(self, x: int, y: int) -> float:
        self.board.cell(x, y)
        return float(self.probabilities[y, x])

    def certain_move(self) -> Optional[Move]:
        # Flags take priority over reveals, both in row-major order
        hidden = list(self.board.hidden_cells())
        for x, y in hidden:
            if self.probabilities[y, x] == MINE:
                return ('flag', (x, y))
        for x, y in hidden:
            if self.probabilities[y, x] == SAFE:
                return ('reveal', (x, y))
        return None

    def guess(self) -> Optional[Coordinate]:
        cells = list(self.board.hidden_cells())
        if not cells:
            return None
        weights = np.array([1.0 - self.probabilities[y, x] for x, y in cells], dtype=float)
        weights = np.clip(weights, 0.0, None)
        total = float(weights.sum())
        if total <= 0.0:
            idx = int(self.rng.integers(len(cells)))
        else:
            idx = int(self.rng.choice(len(cells), p=weights / total))
        return cells[idx]

    def next_move(self) -> Optional[Move]:
        board = self.board
        if board.is_terminal():
            return None
        self.recompute_probabilities()
        move = self.certain_move()
        if move is None:
            if board.check_win():
                return None
            xy = self.guess()
            if xy is None:
                return None
            move = ('reveal', xy)
        kind, (x, y) = move
        if kind == 'flag':
            board.flag(x, y)
        else:
            board.reveal(x, y)
        return move


def create_solver(board: Board, seed: Optional[int] = None) -> Solver:
    return Solver(board, seed=seed)
