#!/usr/bin/env python3
"""Candidate solutions for the maze fixer and the splice proposal move."""

from __future__ import annotations

from collections import deque
import random
from typing import Deque, List, Optional, Tuple

from maze_grid import Grid, Vertex
from maze_routing import CELL_OUTSIDE, Maze, Path, is_fixed, rotation_rule


MAX_SPLICE_DISTANCE = 10
MAX_SAMPLE_ATTEMPTS = 10000


class State:
    """One assignment of rules to every cell.

    A State is only changed through propose(), which works on a copy. The
    energy is cached once known and dropped whenever a splice rewrites cells.
    """

    def __init__(self, maze: Maze, energy: Optional[int] = None):
        self.maze = maze
        self._energy = energy

    def copy(self) -> "State":
        return State(self.maze.copy(), self._energy)

    def fixes(self, original: Maze) -> List[Tuple[Vertex, int]]:
        return [(v, self.maze.at(v)) for v in original if self.maze.at(v) != original.at(v)]

    def count_fixing(self, original: Maze) -> int:
        return sum(1 for v in original if self.maze.at(v) != original.at(v))

    def coverage(self, include_outside: bool = False) -> Grid[bool]:
        covered: Grid[bool] = Grid(self.maze.width, self.maze.height, False)
        for subpath in self.maze.search_complete():
            for v in subpath:
                if include_outside or self.maze.at(v) != CELL_OUTSIDE:
                    covered.set(v, True)
        return covered

    def energy(self) -> int:
        # more negative is better: minus the cells on complete paths
        if self._energy is None:
            self._energy = -self.coverage().count(True)
        return self._energy

    def propose(
        self,
        original: Maze,
        rng: random.Random,
        max_distance: int = MAX_SPLICE_DISTANCE,
        max_sample_attempts: int = MAX_SAMPLE_ATTEMPTS,
    ) -> "State":
        state = self.copy()
        pair = state.sample_subpath_pair(rng, max_distance, max_sample_attempts)
        if pair is None:
            return state
        leading, trailing = pair
        state.connect_subpath_pair(leading, trailing, rng)
        state.clean(original)
        return state

    def sample_subpath_pair(
        self,
        rng: random.Random,
        max_distance: int = MAX_SPLICE_DISTANCE,
        max_attempts: int = MAX_SAMPLE_ATTEMPTS,
    ) -> Optional[Tuple[Path, Path]]:
        leadings = self.maze.search_leading()
        trailings = self.maze.search_trailing()
        if not leadings or not trailings:
            return None
        for _ in range(max_attempts):
            leading = rng.choice(leadings)
            trailing = rng.choice(trailings)
            if leading[-1].manhattan(trailing[-1]) <= max_distance:
                return leading, trailing
        return None

    def connect_subpath_pair(
        self, leading: Path, trailing: Path, rng: random.Random
    ) -> bool:
        """Breadth-first splice from the tail of leading to the tail of trailing.

        Only fixed cells off both seed paths may be crossed. On success every
        cell between leading[-2] and trailing[-2] is rewritten so the marble
        follows the splice; returns False when no splice exists.
        """
        width, height = self.maze.width, self.maze.height
        target = trailing[-1]
        visited = set(leading)
        visited.update(trailing)
        queue: Deque[Path] = deque([[leading[-2], leading[-1]]])
        while queue:
            subpath = queue.popleft()
            adjacents = subpath[-1].adjacents(width, height)
            rng.shuffle(adjacents)
            for v1 in adjacents:
                if v1 == target:
                    chain = subpath + [v1, trailing[-2]]
                    for u0, u1, u2 in zip(chain, chain[1:], chain[2:]):
                        self.maze.set(u1, rotation_rule(u0.direction(u1), u1.direction(u2)))
                    self._energy = None
                    return True
                if v1 not in visited and is_fixed(self.maze.at(v1)):
                    visited.add(v1)
                    queue.append(subpath + [v1])
        return False

    def clean(self, original: Maze) -> None:
        # cells off every complete path go back to their original rule
        covered = self.coverage(include_outside=True)
        reverted = False
        for v in self.maze:
            if not covered.at(v) and self.maze.at(v) != original.at(v):
                self.maze.set(v, original.at(v))
                reverted = True
        if reverted:
            # a reverted cell can open or close other paths
            self._energy = None
        else:
            self._energy = -sum(
                1 for v in self.maze if covered.at(v) and self.maze.at(v) != CELL_OUTSIDE
            )
