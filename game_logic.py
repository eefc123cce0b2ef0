"""
move resolution: slides, merges and obstacle interactions for one move
"""
from typing import NamedTuple

from grid_utils import (
    check_direction,
    copy_grid,
    has_obstacle,
    index_obstacles,
    is_valid_position,
    iter_tiles,
    position_in_direction,
    validate_grid,
)
from id_generator import default_id_source
from models import MULTIPLIER, WALL, Tile

# Coordinate that orders processing, and whether the largest one goes first
_SORT_KEYS = {
    'up': (lambda tile: tile.position.y, False),
    'down': (lambda tile: tile.position.y, True),
    'left': (lambda tile: tile.position.x, False),
    'right': (lambda tile: tile.position.x, True)
}


class MoveResult(NamedTuple):
    grid: list
    score: int
    moved: bool


def sort_tiles_for_direction(tiles, direction):
    """tiles nearest the edge being moved towards come first"""
    key, reverse = _SORT_KEYS[direction]
    return sorted(tiles, key=key, reverse=reverse)


def find_farthest_position(start, direction, grid, obstacles, grid_size):
    """
    walk from start one cell at a time in direction

    returns (farthest, next_position, multiplied):
    - farthest: last free cell reached (start itself if blocked at once)
    - next_position: the occupied cell that stopped the walk, or None when a
      wall or the grid edge did
    - multiplied: whether the walk entered a multiplier cell; the tile is
      doubled once when it comes to rest, however many it crossed
    """
    position = start
    multiplied = False

    while True:
        candidate = position_in_direction(position, direction)

        if not is_valid_position(candidate, grid_size):
            return position, None, multiplied

        if has_obstacle(obstacles, candidate, WALL):
            return position, None, multiplied

        if grid[candidate.y][candidate.x] is not None:
            return position, candidate, multiplied

        if has_obstacle(obstacles, candidate, MULTIPLIER):
            multiplied = True

        position = candidate


def resolve_move(grid, direction, obstacles, score, grid_size, id_source=None):
    """
    apply a move in direction

    returns MoveResult(grid, score, moved). The input grid is never modified;
    when nothing moves the returned grid holds exactly the input tiles.
    """
    check_direction(direction)
    validate_grid(grid, grid_size)
    id_source = id_source or default_id_source
    obstacle_map = index_obstacles(obstacles)

    # Work on a copy with the presentation flags cleared
    new_grid = [[tile.settled() if tile is not None else None for tile in row]
                for row in grid]
    new_score = score
    moved = False
    # merge results of this pass, which must not merge a second time
    merged_ids = set()

    for tile in sort_tiles_for_direction(list(iter_tiles(new_grid)), direction):
        start = tile.position
        new_grid[start.y][start.x] = None

        farthest, next_position, multiplied = find_farthest_position(
            start, direction, new_grid, obstacle_map, grid_size)

        value = tile.value
        if farthest != start:
            moved = True
            if multiplied:
                value *= 2
            tile = Tile(tile.id, value, farthest)

        if next_position is not None:
            next_tile = new_grid[next_position.y][next_position.x]

            if next_tile.value == value and next_tile.id not in merged_ids:
                merged = Tile(
                    id=id_source(),
                    value=value * 2,
                    position=next_position,
                    merged_from=(tile, next_tile)
                )
                new_grid[next_position.y][next_position.x] = merged
                merged_ids.add(merged.id)
                new_score += merged.value
                moved = True
                continue

        new_grid[farthest.y][farthest.x] = tile

    if not moved:
        return MoveResult(copy_grid(grid), score, False)

    return MoveResult(new_grid, new_score, True)
