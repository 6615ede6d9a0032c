from __future__ import annotations
import argparse
import time
from minesolver.engine import Board, InvalidConfiguration
from minesolver.session import flag_leftover_mine
from minesolver.solver import Solver


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument('--width', type=int, default=20)
    parser.add_argument('--height', type=int, default=20)
    parser.add_argument('--mines', type=int, default=60)
    parser.add_argument('--seed', type=int, default=-1, help='RNG seed; <0 uses OS entropy (random every run)')
    parser.add_argument('--delay', type=float, default=0.05)
    parser.add_argument('--quiet', action='store_true', help='Only print the final board')
    args = parser.parse_args()

    seed = None if args.seed < 0 else args.seed
    try:
        board = Board(args.width, args.height, args.mines, seed=seed)
    except InvalidConfiguration as e:
        parser.error(str(e))
    solver = Solver(board, seed=seed)
    print(f"[play] {args.width}x{args.height} board with {args.mines} mines")

    moves = 0
    try:
        while not board.game_over:
            move = flag_leftover_mine(board) or solver.next_move()
            if move is None:
                # Nothing left to act on: either won, or only wrong flags remain
                break
            moves += 1
            if not args.quiet:
                kind, (x, y) = move
                print(f"[play] move {moves}: {kind} ({x}, {y})")
                print(board.render_ascii())
                print()
                time.sleep(args.delay)
    except KeyboardInterrupt:
        print("\n[play] Interrupted.")

    print(board.render_ascii())
    print()
    print('WIN' if board.won else 'LOSE' if board.lost else 'STOPPED')


if __name__ == '__main__':
    main()
