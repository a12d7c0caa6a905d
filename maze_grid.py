#!/usr/bin/env python3
"""Grid substrate for the maze fixer: coordinates, directions and a dense grid."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterator, List, TypeVar


MAX_COORDINATE = 80
GRID_CAPACITY = MAX_COORDINATE * MAX_COORDINATE

# Directions: 0=N(up),1=E(right),2=S(down),3=W(left)
UP = 0
RIGHT = 1
DOWN = 2
LEFT = 3
DIRS = "NESW"
DIR_DELTAS = ((0, -1), (1, 0), (0, 1), (-1, 0))

T = TypeVar("T")


class InvalidDirectionError(RuntimeError):
    pass


def rotate_dir(direction: int, steps: int) -> int:
    return (direction + steps) % 4


@dataclass(frozen=True)
class Vertex:
    x: int
    y: int

    @staticmethod
    def pack_xy(x: int, y: int) -> int:
        return x + y * MAX_COORDINATE

    @staticmethod
    def unpack(key: int) -> "Vertex":
        return Vertex(key % MAX_COORDINATE, key // MAX_COORDINATE)

    def pack(self) -> int:
        return self.x + self.y * MAX_COORDINATE

    def adjacents(self, width: int, height: int) -> List["Vertex"]:
        # N, E, S, W order; neighbours outside the grid are dropped
        vs = []
        if self.y > 0:
            vs.append(Vertex(self.x, self.y - 1))
        if self.x < width - 1:
            vs.append(Vertex(self.x + 1, self.y))
        if self.y < height - 1:
            vs.append(Vertex(self.x, self.y + 1))
        if self.x > 0:
            vs.append(Vertex(self.x - 1, self.y))
        return vs

    def move(self, direction: int) -> "Vertex":
        if direction not in (UP, RIGHT, DOWN, LEFT):
            raise InvalidDirectionError(f"invalid direction: {direction!r}")
        dx, dy = DIR_DELTAS[direction]
        x, y = self.x + dx, self.y + dy
        if x < 0 or y < 0:
            raise InvalidDirectionError(f"cannot move {DIRS[direction]} from {self}")
        return Vertex(x, y)

    def direction(self, adjacent: "Vertex") -> int:
        dx = adjacent.x - self.x
        dy = adjacent.y - self.y
        for direction, delta in enumerate(DIR_DELTAS):
            if delta == (dx, dy):
                return direction
        raise InvalidDirectionError(f"{adjacent} is not adjacent to {self}")

    def manhattan(self, other: "Vertex") -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)


class Grid(Generic[T]):
    """Dense width x height grid addressed by Vertex or by packed key.

    Storage is sized to the full MAX_COORDINATE capacity so packed keys index
    it directly; only the width x height extent is ever enumerated.
    """

    def __init__(self, width: int, height: int, value: T):
        if not (0 < width <= MAX_COORDINATE and 0 < height <= MAX_COORDINATE):
            raise ValueError(
                f"grid size {width}x{height} outside 1..{MAX_COORDINATE}"
            )
        self.width = width
        self.height = height
        self.cells: List[T] = [value] * GRID_CAPACITY

    def __getitem__(self, key: int) -> T:
        return self.cells[key]

    def __setitem__(self, key: int, value: T) -> None:
        self.cells[key] = value

    def __iter__(self) -> Iterator[Vertex]:
        for y in range(self.height):
            for x in range(self.width):
                yield Vertex(x, y)

    def contains(self, v: Vertex) -> bool:
        return 0 <= v.x < self.width and 0 <= v.y < self.height

    def at(self, v: Vertex) -> T:
        return self.cells[v.pack()]

    def set(self, v: Vertex, value: T) -> None:
        self.cells[v.pack()] = value

    def copy(self) -> "Grid[T]":
        grid = Grid.__new__(Grid)
        grid.width = self.width
        grid.height = self.height
        grid.cells = self.cells[:]
        return grid

    def count(self, value: T) -> int:
        return sum(1 for v in self if self.at(v) == value)
