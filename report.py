from __future__ import annotations
import argparse
import csv
from pathlib import Path
from statistics import mean


def parse_csv(path: Path):
    rows = []
    with path.open() as f:
        reader = csv.DictReader(f)
        for r in reader:
            rows.append(r)
    return rows


def to_float(x):
    if x is None or x == '' or x == 'None':
        return None
    try:
        return float(x)
    except ValueError:
        return None


def column(rows, name):
    values = [to_float(r.get(name)) for r in rows]
    return [v for v in values if v is not None]


def summarize(rows):
    games = [r for r in rows if r.get('phase') == 'game']
    summaries = [r for r in rows if r.get('phase') == 'summary']
    out = []
    if not games:
        return "No game rows found."
    wins = column(games, 'win')
    win_rate = sum(wins) / len(wins) if wins else 0.0
    guesses = column(games, 'guess_actions')
    actions = column(games, 'total_actions')
    revealed = column(games, 'revealed_fraction')
    lost_revealed = [to_float(r.get('revealed_fraction')) for r in games if r.get('win') == '0']
    lost_revealed = [x for x in lost_revealed if x is not None]

    out.append(f"Games played: {len(games)}")
    out.append(f"Win rate: {win_rate:.3f}")
    if actions:
        out.append(f"Avg actions per game: {mean(actions):.1f}")
    if guesses:
        out.append(f"Avg guesses per game: {mean(guesses):.2f}")
    if revealed:
        out.append(f"Avg fraction of safe cells revealed: {mean(revealed):.3f}")
    if lost_revealed:
        out.append(f"Avg fraction revealed in lost games: {mean(lost_revealed):.3f}")

    if summaries:
        last = summaries[-1]
        out.append("")
        out.append("Last summary:")
        out.append(f"  game: {last.get('game')}")
        out.append(f"  recent_win_rate: {last.get('recent_win_rate')}")
        out.append(f"  overall_win_rate: {last.get('overall_win_rate')}")

    return "\n".join(out)


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument('--log_csv', type=str, default='logs/benchmark_log.csv')
    parser.add_argument('--out', type=str, default='REPORT.md')
    args = parser.parse_args()

    rows = parse_csv(Path(args.log_csv))
    text = summarize(rows)
    Path(args.out).write_text('# Solver Report\n\n' + text + '\n')
    print(text)


if __name__ == '__main__':
    main()
