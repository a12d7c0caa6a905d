import pytest

from maze_grid import (
    DOWN,
    LEFT,
    MAX_COORDINATE,
    RIGHT,
    UP,
    Grid,
    InvalidDirectionError,
    Vertex,
    rotate_dir,
)


def test_pack_unpack_roundtrip():
    for v in (Vertex(0, 0), Vertex(3, 7), Vertex(MAX_COORDINATE - 1, MAX_COORDINATE - 1)):
        assert Vertex.unpack(v.pack()) == v
    assert Vertex(2, 1).pack() == 2 + MAX_COORDINATE
    assert Vertex.pack_xy(2, 1) == Vertex(2, 1).pack()


def test_adjacents_drop_out_of_grid():
    assert Vertex(0, 0).adjacents(3, 3) == [Vertex(1, 0), Vertex(0, 1)]
    assert Vertex(1, 1).adjacents(3, 3) == [
        Vertex(1, 0),
        Vertex(2, 1),
        Vertex(1, 2),
        Vertex(0, 1),
    ]
    assert Vertex(2, 2).adjacents(3, 3) == [Vertex(2, 1), Vertex(1, 2)]
    assert Vertex(0, 0).adjacents(1, 1) == []


def test_direction_and_move_roundtrip():
    for y in range(4):
        for x in range(4):
            v0 = Vertex(x, y)
            for v1 in v0.adjacents(4, 4):
                direction = v0.direction(v1)
                assert v0.move(direction) == v1
                assert v1.direction(v0) == rotate_dir(direction, 2)


def test_direction_values():
    v = Vertex(1, 1)
    assert v.direction(Vertex(1, 0)) == UP
    assert v.direction(Vertex(2, 1)) == RIGHT
    assert v.direction(Vertex(1, 2)) == DOWN
    assert v.direction(Vertex(0, 1)) == LEFT


def test_direction_requires_adjacent():
    with pytest.raises(InvalidDirectionError):
        Vertex(0, 0).direction(Vertex(2, 0))
    with pytest.raises(InvalidDirectionError):
        Vertex(0, 0).direction(Vertex(1, 1))
    with pytest.raises(InvalidDirectionError):
        Vertex(0, 0).direction(Vertex(0, 0))


def test_move_rejects_negative():
    with pytest.raises(InvalidDirectionError):
        Vertex(0, 0).move(UP)
    with pytest.raises(InvalidDirectionError):
        Vertex(0, 3).move(LEFT)
    with pytest.raises(InvalidDirectionError):
        Vertex(1, 1).move(4)


def test_grid_iterates_row_major_and_restarts():
    grid = Grid(3, 2, 0)
    expected = [Vertex(x, y) for y in range(2) for x in range(3)]
    assert list(grid) == expected
    assert list(grid) == expected


def test_grid_access_and_copy():
    grid = Grid(4, 4, False)
    grid.set(Vertex(1, 2), True)
    assert grid.at(Vertex(1, 2))
    assert grid[Vertex(1, 2).pack()]
    grid[Vertex(3, 0).pack()] = True
    assert grid.at(Vertex(3, 0))
    grid[Vertex(3, 0).pack()] = False
    assert grid.count(True) == 1
    other = grid.copy()
    other.set(Vertex(0, 0), True)
    assert grid.count(True) == 1
    assert other.count(True) == 2
    assert (other.width, other.height) == (4, 4)


def test_grid_size_bounds():
    with pytest.raises(ValueError):
        Grid(0, 3, 0)
    with pytest.raises(ValueError):
        Grid(MAX_COORDINATE + 1, 3, 0)


def test_grid_contains():
    grid = Grid(3, 2, 0)
    assert grid.contains(Vertex(0, 0))
    assert grid.contains(Vertex(2, 1))
    assert not grid.contains(Vertex(3, 0))
    assert not grid.contains(Vertex(0, 2))
    assert not grid.contains(Vertex(-1, 0))


def test_rotate_dir_wraps_both_ways():
    assert rotate_dir(UP, 1) == RIGHT
    assert rotate_dir(LEFT, 1) == UP
    assert rotate_dir(UP, -1) == LEFT
    assert rotate_dir(DOWN, -3) == LEFT
    assert rotate_dir(RIGHT, 2) == LEFT
