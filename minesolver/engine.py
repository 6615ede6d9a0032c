from __future__ import annotations
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Optional, Iterable, Iterator, Sequence

Coordinate = Tuple[int, int]

OFFSETS: Tuple[Coordinate, ...] = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if not (dx == 0 and dy == 0)
)


class InvalidConfiguration(ValueError):
    """Board or session settings that cannot describe a playable game."""


class OutOfBounds(IndexError):
    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"({x}, {y}) is outside the {width}x{height} board")
        self.x = x
        self.y = y


@dataclass(frozen=True)
class MineTriggered:
    x: int
    y: int


class CellState(Enum):
    HIDDEN = 'hidden'
    FLAGGED = 'flagged'
    NUMBER = 'number'
    MINE = 'mine'
    EXPLODED = 'exploded'


@dataclass(frozen=True)
class CellView:
    x: int
    y: int
    state: CellState
    number: Optional[int] = None


@dataclass
class Cell:
    x: int
    y: int
    is_mine: bool = False
    is_revealed: bool = False
    is_flagged: bool = False
    adj_mines: int = 0

    @staticmethod
    def adjacent_offsets() -> Tuple[Coordinate, ...]:
        return OFFSETS

    def neighbors(self, board: Board) -> Iterator[Cell]:
        for dx, dy in OFFSETS:
            nx, ny = self.x + dx, self.y + dy
            if board.in_bounds(nx, ny):
                yield board.grid[ny][nx]

    def unrevealed_unflagged_neighbors(self, board: Board) -> List[Cell]:
        return [c for c in self.neighbors(board) if not c.is_revealed and not c.is_flagged]

    def flagged_neighbors(self, board: Board) -> List[Cell]:
        return [c for c in self.neighbors(board) if c.is_flagged]

    def is_satisfied(self, board: Board) -> bool:
        return len(self.flagged_neighbors(board)) == self.adj_mines

    def remaining_mine_count(self, board: Board) -> int:
        return self.adj_mines - len(self.flagged_neighbors(board))


class Board:
    def __init__(self, width: int, height: int, num_mines: int, seed: Optional[int] = None,
                 mines: Optional[Iterable[Coordinate]] = None):
        if width <= 0 or height <= 0:
            raise InvalidConfiguration(f"board must be at least 1x1, got {width}x{height}")
        if not 0 < num_mines < width * height:
            raise InvalidConfiguration(
                f"num_mines must be between 1 and {width * height - 1}, got {num_mines}")
        self.width = width
        self.height = height
        self.num_mines = num_mines
        self.rng = random.Random(int(seed)) if seed is not None else random.Random()
        self.grid: List[List[Cell]] = [[Cell(x, y) for x in range(width)] for y in range(height)]
        self._mines_placed = False
        self.flagged_count = 0
        self.revealed_count = 0
        self.won = False
        self.lost = False
        self.exploded: Optional[Coordinate] = None
        if mines is None:
            self.place_mines(num_mines)
        else:
            self._set_mines(list(mines))

    @classmethod
    def from_layout(cls, rows: Sequence[str]) -> Board:
        # '*' is a mine, anything else is a safe cell
        height = len(rows)
        width = len(rows[0]) if rows else 0
        if any(len(r) != width for r in rows):
            raise InvalidConfiguration("layout rows must all have the same length")
        mines = [(x, y) for y, row in enumerate(rows) for x, ch in enumerate(row) if ch == '*']
        return cls(width, height, len(mines), mines=mines)

    @property
    def game_over(self) -> bool:
        return self.is_terminal()

    @property
    def mines_remaining(self) -> int:
        return self.num_mines - self.flagged_count

    @property
    def safe_cells(self) -> int:
        return self.width * self.height - self.num_mines

    def is_terminal(self) -> bool:
        return self.won or self.lost

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _check_bounds(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise OutOfBounds(x, y, self.width, self.height)

    def cell(self, x: int, y: int) -> Cell:
        self._check_bounds(x, y)
        return self.grid[y][x]

    def cells(self) -> Iterator[Cell]:
        for row in self.grid:
            yield from row

    def place_mines(self, count: int) -> None:
        if self._mines_placed:
            raise InvalidConfiguration("mines have already been placed on this board")
        # Draw from a shrinking pool so no coordinate is picked twice
        pool = [(x, y) for y in range(self.height) for x in range(self.width)]
        chosen = []
        for _ in range(count):
            chosen.append(pool.pop(self.rng.randrange(len(pool))))
        self._set_mines(chosen)

    def _set_mines(self, mines: List[Coordinate]) -> None:
        if self._mines_placed:
            raise InvalidConfiguration("mines have already been placed on this board")
        if len(set(mines)) != len(mines):
            raise InvalidConfiguration("mine coordinates must be distinct")
        if len(mines) != self.num_mines:
            raise InvalidConfiguration(f"expected {self.num_mines} mines, got {len(mines)}")
        for (x, y) in mines:
            if not self.in_bounds(x, y):
                raise InvalidConfiguration(f"mine ({x}, {y}) is outside the board")
        for (x, y) in mines:
            self.grid[y][x].is_mine = True
        # Compute adjacencies
        for c in self.cells():
            if c.is_mine:
                continue
            c.adj_mines = sum(1 for n in c.neighbors(self) if n.is_mine)
        self._mines_placed = True

    def reveal(self, x: int, y: int) -> Optional[MineTriggered]:
        self._check_bounds(x, y)
        if self.is_terminal():
            return None
        c = self.grid[y][x]
        if c.is_flagged or c.is_revealed:
            return None
        if c.is_mine:
            c.is_revealed = True
            self._lose(x, y)
            return MineTriggered(x, y)
        stack = [c]
        while stack:
            cur = stack.pop()
            if cur.is_revealed or cur.is_flagged:
                continue
            cur.is_revealed = True
            self.revealed_count += 1
            if cur.adj_mines == 0:
                stack.extend(n for n in cur.neighbors(self) if not n.is_revealed and not n.is_flagged)
        return None

    def _lose(self, x: int, y: int) -> None:
        self.lost = True
        self.exploded = (x, y)
        for c in self.cells():
            c.is_revealed = True

    def flag(self, x: int, y: int) -> None:
        self._check_bounds(x, y)
        if self.is_terminal():
            return
        c = self.grid[y][x]
        if c.is_revealed:
            return
        c.is_flagged = not c.is_flagged
        self.flagged_count = sum(1 for cell in self.cells() if cell.is_flagged)

    def check_win(self) -> bool:
        if self.lost:
            return False
        if self.won:
            return True
        for c in self.cells():
            if not c.is_mine and not c.is_revealed:
                return False
            if c.is_mine and not c.is_flagged:
                return False
        self.won = True
        # The last safe reveal can finish the board before the counter catches up
        self.flagged_count = self.num_mines
        return True

    def hidden_cells(self) -> Iterable[Coordinate]:
        for y in range(self.height):
            for x in range(self.width):
                if not self.grid[y][x].is_revealed and not self.grid[y][x].is_flagged:
                    yield (x, y)

    def view(self, x: int, y: int) -> CellView:
        c = self.cell(x, y)
        if c.is_flagged and not (self.lost and c.is_mine):
            return CellView(x, y, CellState.FLAGGED)
        if not c.is_revealed:
            return CellView(x, y, CellState.HIDDEN)
        if c.is_mine:
            state = CellState.EXPLODED if self.exploded == (x, y) else CellState.MINE
            return CellView(x, y, state)
        return CellView(x, y, CellState.NUMBER, c.adj_mines)

    def render_ascii(self) -> str:
        symbols = {
            CellState.FLAGGED: 'F',
            CellState.HIDDEN: '#',
            CellState.MINE: '*',
            CellState.EXPLODED: 'X',
        }
        rows = []
        for y in range(self.height):
            row = []
            for x in range(self.width):
                v = self.view(x, y)
                if v.state is CellState.NUMBER:
                    row.append('.' if v.number == 0 else str(v.number))
                else:
                    row.append(symbols[v.state])
            rows.append(' '.join(row))
        return '\n'.join(rows)


def create_board(width: int, height: int, num_mines: int, seed: Optional[int] = None) -> Board:
    return Board(width, height, num_mines, seed=seed)
