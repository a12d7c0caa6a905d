#!/usr/bin/env python3
"""Routing graph over a grid of cell rules: transitions and path enumeration."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from maze_grid import DIR_DELTAS, Grid, Vertex, rotate_dir


# Fixed rules are the rotation applied to the entry direction.
CELL_STRAIGHT = 0
CELL_RIGHT = 1
CELL_TURN = 2
CELL_LEFT = 3
CELL_EVERY = 4
CELL_OUTSIDE = 5

RULE_SYMBOLS = "SRULE"
SYMBOL_TO_RULE: Dict[str, int] = {ch: idx for idx, ch in enumerate(RULE_SYMBOLS)}
RULE_TO_SYMBOL: Dict[int, str] = {idx: ch for idx, ch in enumerate(RULE_SYMBOLS)}
RULE_TO_SYMBOL[CELL_OUTSIDE] = "."

STEP_FORWARD = "forward"
STEP_BACKWARD = "backward"

Path = List[Vertex]


class UnresolvedTraversalError(RuntimeError):
    pass


def is_fixed(rule: int) -> bool:
    return rule != CELL_EVERY and rule != CELL_OUTSIDE


def rotation_rule(d_in: int, d_out: int) -> int:
    """Rule that turns a marble heading d_in into one heading d_out."""
    return rotate_dir(d_out, -d_in)


class Maze:
    """A grid of cell rules with marble transitions.

    Build with Maze.initialize so that every wildcard connected to the
    absorbing region has already been absorbed.
    """

    def __init__(self, grid: Grid[int]):
        self.grid = grid

    @classmethod
    def initialize(cls, grid: Grid[int]) -> "Maze":
        maze = cls(grid.copy())
        width, height = maze.width, maze.height
        stack = [v for v in maze if maze.at(v) == CELL_OUTSIDE]
        while stack:
            v0 = stack.pop()
            for v1 in v0.adjacents(width, height):
                if maze.at(v1) == CELL_EVERY:
                    maze.set(v1, CELL_OUTSIDE)
                    stack.append(v1)
        return maze

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def __iter__(self):
        return iter(self.grid)

    def at(self, v: Vertex) -> int:
        return self.grid.at(v)

    def set(self, v: Vertex, rule: int) -> None:
        self.grid.set(v, rule)

    def copy(self) -> "Maze":
        return Maze(self.grid.copy())

    def render(self) -> List[str]:
        return [
            "".join(RULE_TO_SYMBOL[self.grid.at(Vertex(x, y))] for x in range(self.width))
            for y in range(self.height)
        ]

    def _exit(self, v1: Vertex, direction: int) -> Optional[Vertex]:
        # None when the marble would leave the grid
        dx, dy = DIR_DELTAS[direction]
        if not self.grid.contains(Vertex(v1.x + dx, v1.y + dy)):
            return None
        return v1.move(direction)

    def _rule_at(self, v1: Vertex) -> int:
        rule = self.at(v1)
        if not is_fixed(rule):
            raise UnresolvedTraversalError(
                f"cannot traverse {v1}: rule {RULE_TO_SYMBOL[rule]!r} is not fixed"
            )
        return rule

    def forward(self, v0: Vertex, v1: Vertex) -> Optional[Vertex]:
        """Cell a marble reaches after entering v1 from v0."""
        rule = self._rule_at(v1)
        d0 = v0.direction(v1)
        return self._exit(v1, rotate_dir(d0, rule))

    def backward(self, v0: Vertex, v1: Vertex) -> Optional[Vertex]:
        """Cell a marble must come from to leave v1 towards v0."""
        rule = self._rule_at(v1)
        d0 = v0.direction(v1)
        return self._exit(v1, rotate_dir(d0, -rule))

    def search_complete(self) -> List[Path]:
        return self.search(STEP_FORWARD, True)

    def search_leading(self) -> List[Path]:
        return self.search(STEP_FORWARD, False)

    def search_trailing(self) -> List[Path]:
        return self.search(STEP_BACKWARD, False)

    def search(self, step: str, complete: bool) -> List[Path]:
        """Trace from every unresolved cell into each fixed neighbour.

        A trace that reaches another unresolved cell (or leaves the grid) is
        kept in complete mode; a trace that runs into itself is kept
        otherwise.
        """
        if step == STEP_FORWARD:
            advance: Callable[[Vertex, Vertex], Optional[Vertex]] = self.forward
        elif step == STEP_BACKWARD:
            advance = self.backward
        else:
            raise ValueError(f"unknown step mode: {step!r}")
        width, height = self.width, self.height
        subpaths: List[Path] = []
        for end in self:
            if is_fixed(self.at(end)):
                continue
            for v1 in end.adjacents(width, height):
                if not is_fixed(self.at(v1)):
                    continue
                v0 = end
                visited = {v0, v1}
                subpath = [v0, v1]
                while True:
                    v0, v1 = v1, advance(v0, v1)
                    if v1 is None:
                        if complete:
                            subpaths.append(subpath)
                        break
                    if v1 in visited:
                        if not complete:
                            subpaths.append(subpath)
                        break
                    visited.add(v1)
                    subpath.append(v1)
                    if not is_fixed(self.at(v1)):
                        if complete:
                            subpaths.append(subpath)
                        break
        return subpaths
