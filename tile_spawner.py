"""
random tile injection after a move, and win / game-over detection
"""
import random

from exceptions import ConfigurationError
from grid_utils import (
    copy_grid,
    empty_cells,
    empty_grid,
    has_obstacle,
    index_obstacles,
    validate_grid,
)
from id_generator import default_id_source
from models import WALL, Position, Tile

# 90% chance for 2 and 10% chance for 4
DEFAULT_SPAWN_TILES = {2: 0.9, 4: 0.1}


def pick_spawn_value(spawn_tiles, rng):
    """draw a tile value from a {value: probability} table"""
    roll = rng.random()
    cumulative = 0.0
    value = None
    for value, probability in spawn_tiles.items():
        cumulative += probability
        if roll < cumulative:
            return int(value)
    if value is None:
        raise ConfigurationError("Spawn table is empty")
    # rounding left the probabilities just short of 1
    return int(value)


def spawn_random_tile(grid, obstacles, grid_size, rng=None, id_source=None, spawn_tiles=None):
    """
    place a new 2 or 4 on a uniformly chosen empty cell

    returns a new grid; with no empty cell the result equals the input
    """
    validate_grid(grid, grid_size)
    rng = rng or random
    id_source = id_source or default_id_source

    new_grid = copy_grid(grid)
    cells = empty_cells(grid, obstacles)
    if not cells:
        return new_grid

    position = rng.choice(cells)
    value = pick_spawn_value(spawn_tiles or DEFAULT_SPAWN_TILES, rng)
    new_grid[position.y][position.x] = Tile(id_source(), value, position, is_new=True)
    return new_grid


def initialize_grid(obstacles, grid_size, rng=None, id_source=None, spawn_tiles=None):
    """empty board with the two starting tiles"""
    grid = empty_grid(grid_size)
    for _ in range(2):
        grid = spawn_random_tile(grid, obstacles, grid_size, rng, id_source, spawn_tiles)
    return grid


def is_game_over(grid, obstacles, grid_size):
    """
    true when no empty cell is left and no two neighbouring tiles match

    each tile is compared with its right and lower neighbour only, which
    covers every pair once; a wall cell in between breaks the pair
    """
    validate_grid(grid, grid_size)
    obstacle_map = index_obstacles(obstacles)

    for y in range(grid_size):
        for x in range(grid_size):
            tile = grid[y][x]
            if tile is None:
                if Position(x, y) not in obstacle_map:
                    return False
                continue

            for nx, ny in ((x + 1, y), (x, y + 1)):
                if nx >= grid_size or ny >= grid_size:
                    continue
                if has_obstacle(obstacle_map, Position(nx, ny), WALL):
                    continue
                neighbour = grid[ny][nx]
                if neighbour is not None and neighbour.value == tile.value:
                    return False

    return True


def has_won(grid, winning_value):
    return any(tile is not None and tile.value >= winning_value
               for row in grid for tile in row)
