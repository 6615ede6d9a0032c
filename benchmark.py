from __future__ import annotations
import argparse
import csv
from pathlib import Path
import numpy as np
from minesolver.engine import Board, InvalidConfiguration
from minesolver.session import flag_leftover_mine
from minesolver.solver import Solver

HEADER = [
    'phase', 'game', 'seed', 'width', 'height', 'mines',
    'win', 'reveal_actions', 'flag_actions', 'guess_actions', 'total_actions',
    'final_revealed', 'final_flagged', 'revealed_fraction',
    'recent_win_rate', 'overall_win_rate',
]


def play_episode(width: int, height: int, mines: int, seed: int | None = None, max_moves: int | None = None):
    board = Board(width, height, mines, seed=seed)
    solver = Solver(board, seed=seed)
    reveal_actions = 0
    flag_actions = 0
    guess_actions = 0
    # Every move flags or reveals at least one cell, so this bounds a finished game
    limit = max_moves if max_moves is not None else 2 * width * height + 1
    while not board.game_over and reveal_actions + flag_actions < limit:
        move = flag_leftover_mine(board)
        if move is None:
            # A move picked while nothing was certain is a guess
            solver.recompute_probabilities()
            guessing = solver.certain_move() is None
            move = solver.next_move()
        else:
            guessing = False
        if move is None:
            break
        if move[0] == 'flag':
            flag_actions += 1
        else:
            reveal_actions += 1
            guess_actions += 1 if guessing else 0
    metrics = {
        'reveal_actions': reveal_actions,
        'flag_actions': flag_actions,
        'guess_actions': guess_actions,
        'total_actions': reveal_actions + flag_actions,
        'final_revealed': board.revealed_count,
        'final_flagged': board.flagged_count,
        'revealed_fraction': board.revealed_count / board.safe_cells,
    }
    return board.won, metrics


def append_csv_row(csv_path: Path, row: dict, header_order: list[str]):
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    write_header = not csv_path.exists()
    with csv_path.open('a', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=header_order)
        if write_header:
            writer.writeheader()
        writer.writerow(row)


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument('--width', type=int, default=20)
    parser.add_argument('--height', type=int, default=20)
    parser.add_argument('--mines', type=int, default=60)
    parser.add_argument('--games', type=int, default=500)
    parser.add_argument('--seed', type=int, default=-1, help='Base RNG seed; <0 uses OS entropy (random every run)')
    parser.add_argument('--eval_every', type=int, default=100)
    parser.add_argument('--log_csv', type=str, default='logs/benchmark_log.csv')
    parser.add_argument('--log_every', type=int, default=1)
    args = parser.parse_args()

    if args.eval_every <= 0 or args.log_every <= 0:
        parser.error('--eval_every and --log_every must be positive')
    try:
        Board(args.width, args.height, args.mines, seed=0)
    except InvalidConfiguration as e:
        parser.error(str(e))

    rng = np.random.default_rng(None if args.seed < 0 else args.seed)
    csv_path = Path(args.log_csv)
    print(f"[benchmark] {args.games} games on {args.width}x{args.height} with {args.mines} mines -> {csv_path}")

    wins_recent = 0
    wins_total = 0
    played = 0
    try:
        for game in range(1, args.games + 1):
            game_seed = int(rng.integers(1_000_000_000))
            win, m = play_episode(args.width, args.height, args.mines, seed=game_seed)
            played = game
            wins_recent += 1 if win else 0
            wins_total += 1 if win else 0
            if game % args.log_every == 0:
                row = {
                    'phase': 'game', 'game': game, 'seed': game_seed,
                    'width': args.width, 'height': args.height, 'mines': args.mines,
                    'win': int(win),
                    **m,
                    'recent_win_rate': None,
                    'overall_win_rate': None,
                }
                append_csv_row(csv_path, row, HEADER)
            if game % args.eval_every == 0:
                recent_rate = wins_recent / args.eval_every
                overall_rate = wins_total / game
                print(f"Game {game}: recent win% {recent_rate:.3f}, overall win% {overall_rate:.3f}")
                wins_recent = 0
                row = {
                    'phase': 'summary', 'game': game, 'seed': None,
                    'width': args.width, 'height': args.height, 'mines': args.mines,
                    'win': None,
                    'recent_win_rate': recent_rate,
                    'overall_win_rate': overall_rate,
                }
                append_csv_row(csv_path, row, HEADER)
    except KeyboardInterrupt:
        print(f"\n[benchmark] Interrupted after {played} games.")

    if played:
        print(f"[benchmark] Won {wins_total}/{played} ({wins_total / played:.3f})")


if __name__ == '__main__':
    main()
