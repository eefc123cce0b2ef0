"""
grid lookups and helpers, none of which modify the grid they are given
"""
import numpy as np

from exceptions import InvalidStateError
from models import DIRECTIONS, Position

# Unit steps per direction, y grows downwards
DIRECTION_VECTORS = {
    'up': (0, -1),
    'right': (1, 0),
    'down': (0, 1),
    'left': (-1, 0)
}


def check_direction(direction):
    if direction not in DIRECTION_VECTORS:
        raise InvalidStateError(
            f"Unknown direction {direction!r}, expected one of {', '.join(DIRECTIONS)}")
    return direction


def position_in_direction(position, direction):
    """the neighbouring cell one step away in direction"""
    dx, dy = DIRECTION_VECTORS[check_direction(direction)]
    return Position(position.x + dx, position.y + dy)


def is_valid_position(position, grid_size):
    return 0 <= position.x < grid_size and 0 <= position.y < grid_size


def index_obstacles(obstacles):
    """map each occupied position to its obstacle"""
    return {obstacle.position: obstacle for obstacle in obstacles}


def obstacle_at(obstacles, position, obstacle_type=None):
    """
    obstacle occupying position, or None

    accepts either a sequence of obstacles or a map built by index_obstacles;
    with obstacle_type only an obstacle of that type counts
    """
    if isinstance(obstacles, dict):
        obstacle = obstacles.get(position)
    else:
        obstacle = next((o for o in obstacles if o.position == position), None)

    if obstacle is not None and obstacle_type is not None and obstacle.type != obstacle_type:
        return None
    return obstacle


def has_obstacle(obstacles, position, obstacle_type=None):
    return obstacle_at(obstacles, position, obstacle_type) is not None


def empty_grid(grid_size):
    return [[None for _ in range(grid_size)] for _ in range(grid_size)]


def copy_grid(grid):
    """new row lists, same (immutable) tiles"""
    return [list(row) for row in grid]


def validate_grid(grid, grid_size):
    """raise InvalidStateError unless grid is grid_size x grid_size"""
    if grid_size < 1:
        raise InvalidStateError(f"Grid size must be at least 1, got {grid_size}")
    if len(grid) != grid_size or any(len(row) != grid_size for row in grid):
        shape = [len(row) for row in grid]
        raise InvalidStateError(
            f"Grid does not match size {grid_size}: row lengths {shape}")
    return grid


def iter_tiles(grid):
    """occupied cells in row-major order"""
    for row in grid:
        for tile in row:
            if tile is not None:
                yield tile


def empty_cells(grid, obstacles):
    """all positions holding neither a tile nor an obstacle, row-major"""
    blocked = index_obstacles(obstacles)
    cells = []
    for y, row in enumerate(grid):
        for x, tile in enumerate(row):
            position = Position(x, y)
            if tile is None and position not in blocked:
                cells.append(position)
    return cells


def values_matrix(grid):
    """tile values as an int matrix, 0 for empty cells"""
    return np.array(
        [[tile.value if tile is not None else 0 for tile in row] for row in grid],
        dtype=np.int64
    ).reshape(len(grid), len(grid[0]) if grid else 0)
