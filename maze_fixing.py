#!/usr/bin/env python3
"""Maze fixer: spend a bounded number of cell fixes to route marbles through the maze.

Input (file or stdin): H, then H rows over S/R/U/L/E (anything else is
outside), then the fix budget F. Output: the number of fixes followed by one
"<row> <col> <symbol>" line per fix.
"""

from __future__ import annotations

import argparse
from pathlib import Path
import random
import sys
from typing import List, Optional, Sequence, Tuple

from maze_grid import MAX_COORDINATE, Grid, Vertex
from maze_routing import CELL_OUTSIDE, RULE_TO_SYMBOL, SYMBOL_TO_RULE, Maze, is_fixed
from maze_state import MAX_SAMPLE_ATTEMPTS, MAX_SPLICE_DISTANCE, State


ITERATIONS = 500
DEFAULT_SEED = 0

Fix = Tuple[int, int, str]  # (row, col, symbol)


class ParseError(RuntimeError):
    pass


def build_maze(rows: Sequence[str], strict: bool = False) -> Maze:
    if not rows:
        raise ParseError("empty grid")
    width = len(rows[0])
    height = len(rows)
    if width == 0:
        raise ParseError("empty grid row")
    if width > MAX_COORDINATE or height > MAX_COORDINATE:
        raise ParseError(f"grid {width}x{height} exceeds {MAX_COORDINATE}x{MAX_COORDINATE}")
    grid: Grid[int] = Grid(width, height, CELL_OUTSIDE)
    for y, row in enumerate(rows):
        if len(row) != width:
            raise ParseError(f"grid row length mismatch: {row!r}")
        for x, ch in enumerate(row):
            rule = SYMBOL_TO_RULE.get(ch)
            if rule is None:
                if strict and ch != ".":
                    raise ParseError(f"unknown cell symbol {ch!r} at row {y} col {x}")
                continue
            grid.set(Vertex(x, y), rule)
    return Maze.initialize(grid)


def improve(
    rows: Sequence[str],
    max_fixing: int,
    *,
    iterations: int = ITERATIONS,
    max_distance: int = MAX_SPLICE_DISTANCE,
    max_sample_attempts: int = MAX_SAMPLE_ATTEMPTS,
    seed: Optional[int] = DEFAULT_SEED,
    strict: bool = False,
    verbose: bool = False,
) -> List[Fix]:
    """Greedy hill climbing over splice proposals.

    A proposal replaces the current state when its energy is no worse and it
    stays within max_fixing fixes.
    """
    if max_fixing < 0:
        raise ValueError("max_fixing must be non-negative")
    if iterations <= 0:
        raise ValueError("iterations must be positive")
    rng = random.Random(seed)
    maze = build_maze(rows, strict=strict)
    state = State(maze)
    energy = state.energy()
    accepted = 0
    if verbose:
        print(f"init energy={energy}", file=sys.stderr, flush=True)
    for it in range(iterations):
        new_state = state.propose(
            maze, rng, max_distance=max_distance, max_sample_attempts=max_sample_attempts
        )
        new_energy = new_state.energy()
        if new_energy > energy:
            continue
        n_fixing = new_state.count_fixing(maze)
        if n_fixing > max_fixing:
            continue
        if verbose and new_energy < energy:
            print(
                f"iter {it} energy={new_energy} fixes={n_fixing}",
                file=sys.stderr,
                flush=True,
            )
        state = new_state
        energy = new_energy
        accepted += 1

    fixes: List[Fix] = []
    for v, rule in state.fixes(maze):
        if not is_fixed(rule):
            raise RuntimeError(f"fix at {v} assigns unresolved rule {rule}")
        fixes.append((v.y, v.x, RULE_TO_SYMBOL[rule]))
    if verbose:
        print(
            f"final energy={energy} fixes={len(fixes)} accepted={accepted}",
            file=sys.stderr,
            flush=True,
        )
    return fixes


def format_fixes(fixes: Sequence[Fix]) -> List[str]:
    lines = [str(len(fixes))]
    for row, col, symbol in fixes:
        lines.append(f"{row} {col} {symbol}")
    return lines


def parse_input(text: str) -> Tuple[List[str], int]:
    tokens = text.split()
    if not tokens:
        raise ParseError("empty input")
    try:
        height = int(tokens[0])
    except ValueError:
        raise ParseError(f"invalid height: {tokens[0]!r}") from None
    if height <= 0:
        raise ParseError(f"invalid height: {height}")
    if len(tokens) < height + 2:
        raise ParseError("missing grid rows or fix budget")
    rows = tokens[1 : height + 1]
    try:
        budget = int(tokens[height + 1])
    except ValueError:
        raise ParseError(f"invalid fix budget: {tokens[height + 1]!r}") from None
    if budget < 0:
        raise ParseError(f"invalid fix budget: {budget}")
    return rows, budget


def solve_text(text: str, **kwargs) -> List[str]:
    rows, budget = parse_input(text)
    return format_fixes(improve(rows, budget, **kwargs))


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Fix maze cells to route marbles")
    parser.add_argument("input", nargs="?", default=None, help="input file (default: stdin)")
    parser.add_argument(
        "--iterations", type=int, default=ITERATIONS, help="proposal rounds"
    )
    parser.add_argument(
        "--max-distance",
        type=int,
        default=MAX_SPLICE_DISTANCE,
        help="max manhattan distance between spliced path tails",
    )
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help="random seed")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="reject unknown cell symbols instead of treating them as outside",
    )
    parser.add_argument("--verbose", action="store_true", help="report progress on stderr")
    args = parser.parse_args(argv)

    if args.iterations <= 0:
        raise SystemExit("--iterations must be positive")
    if args.max_distance < 0:
        raise SystemExit("--max-distance must be non-negative")
    text = Path(args.input).read_text() if args.input else sys.stdin.read()
    try:
        lines = solve_text(
            text,
            iterations=args.iterations,
            max_distance=args.max_distance,
            seed=args.seed,
            strict=args.strict,
            verbose=args.verbose,
        )
    except ParseError as exc:
        raise SystemExit(f"invalid input: {exc}")
    for line in lines:
        print(line)


if __name__ == "__main__":
    main()
