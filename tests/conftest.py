import pytest

from models import Obstacle, Position, Tile


def build_grid(rows):
    """grid from rows of values, None for an empty cell"""
    return [
        [Tile(f"t{x}{y}", value, Position(x, y)) if value is not None else None
         for x, value in enumerate(row)]
        for y, row in enumerate(rows)
    ]


def grid_values(grid):
    return [[tile.value if tile is not None else None for tile in row] for row in grid]


def obstacle(obstacle_type, x, y):
    return Obstacle(f"{obstacle_type}_{x}_{y}", obstacle_type, Position(x, y))


class FixedRandom:
    """rng stand-in: choice takes the element at index, random returns roll"""

    def __init__(self, roll=0.0, index=0):
        self.roll = roll
        self.index = index

    def random(self):
        return self.roll

    def choice(self, seq):
        return seq[self.index if self.index >= 0 else len(seq) + self.index]


@pytest.fixture
def make_grid():
    return build_grid


@pytest.fixture
def values_of():
    return grid_values


@pytest.fixture
def make_obstacle():
    return obstacle


@pytest.fixture
def fixed_random():
    return FixedRandom


@pytest.fixture
def empty_4x4():
    return build_grid([[None] * 4 for _ in range(4)])


@pytest.fixture
def checkerboard():
    """4x4 board with no empty cell and no equal neighbours"""
    return build_grid([[2 if (x + y) % 2 == 0 else 4 for x in range(4)] for y in range(4)])
