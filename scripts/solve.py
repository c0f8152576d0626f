#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

# Allow running this script directly via `python scripts/solve.py`
# by adding the repo root (which contains `src/`) to sys.path.
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from src.engine.puzzle import Puzzle, PuzzleError
from src.solver.service import SolverService


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1: {value}")
    return n


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Solve a capture-chain puzzle")
    parser.add_argument("notation", help='Puzzle notation, e.g. "p7/8/8/8/8/8/8/R7 a1"')
    parser.add_argument("--player", type=str, default=None, help="Player square (overrides notation)")
    parser.add_argument(
        "--max-states", type=_positive_int, default=None, help="Give up after this many states"
    )
    parser.add_argument("--draw", action="store_true", help="Print the board before solving")
    parser.add_argument("--json", action="store_true", help="Emit the result as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        puzzle = Puzzle.from_notation(args.notation, args.player)
    except PuzzleError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.draw:
        print(puzzle.draw())

    res = SolverService().solve(puzzle, max_states=args.max_states)
    if args.json:
        print(
            json.dumps(
                {
                    "solved": res.solved,
                    "captures": res.captures,
                    "moves": res.moves(puzzle),
                    "states": res.states,
                    "depth": res.depth,
                    "time_ms": res.time_ms,
                    "truncated": res.truncated,
                }
            )
        )
    elif res.truncated:
        print(f"gave up after {res.states} states depth={res.depth} time_ms={res.time_ms}")
    elif not res.solved:
        print(f"no solution states={res.states} time_ms={res.time_ms}")
    else:
        print(" ".join(res.moves(puzzle)))
        print(f"captures={len(res.captures or [])} states={res.states} time_ms={res.time_ms}")
    return 0 if res.solved else 1


if __name__ == "__main__":
    sys.exit(main())
