import random
from collections import Counter

import pytest

from exceptions import InvalidStateError
from game_logic import resolve_move, sort_tiles_for_direction
from grid_utils import iter_tiles
from id_generator import SequentialIdGenerator
from models import DIRECTIONS, MULTIPLIER, PORTAL, WALL, Position, Tile
from tile_spawner import spawn_random_tile


def _row(values_of, grid, y=0):
    return values_of(grid)[y]


def test_adjacent_pair_merges_left(make_grid, values_of):
    grid = make_grid([[2, 2, None, None]] + [[None] * 4 for _ in range(3)])

    result = resolve_move(grid, 'left', [], 10, 4, SequentialIdGenerator())

    assert result.moved
    assert result.score == 14
    assert _row(values_of, result.grid) == [4, None, None, None]
    merged = result.grid[0][0]
    assert merged.id == 'tile_1'
    assert merged.position == Position(0, 0)
    assert [t.value for t in merged.merged_from] == [2, 2]


def test_tile_next_to_wall_does_not_move(make_grid, make_obstacle, values_of):
    grid = make_grid([[2, None, None, None]] + [[None] * 4 for _ in range(3)])

    result = resolve_move(grid, 'right', [make_obstacle(WALL, 1, 0)], 0, 4)

    assert not result.moved
    assert result.score == 0
    assert _row(values_of, result.grid) == [2, None, None, None]


def test_noop_returns_input_tiles_unchanged(make_grid):
    grid = make_grid([[2, 4, None, None]] + [[None] * 4 for _ in range(3)])
    grid[0][1] = Tile('fresh', 4, Position(1, 0), is_new=True)

    result = resolve_move(grid, 'up', [], 0, 4)

    assert not result.moved
    assert result.grid == grid
    assert result.grid is not grid
    assert result.grid[0][1].is_new


def test_input_grid_is_not_mutated(make_grid, values_of):
    grid = make_grid([[2, 2, 4, None]] + [[None] * 4 for _ in range(3)])
    before = values_of(grid)

    resolve_move(grid, 'left', [], 0, 4)

    assert values_of(grid) == before
    assert grid[0][1].position == Position(1, 0)


def test_merged_tile_does_not_merge_again(make_grid, values_of):
    grid = make_grid([[2, 2, 4, None]] + [[None] * 4 for _ in range(3)])

    result = resolve_move(grid, 'left', [], 0, 4)

    assert _row(values_of, result.grid) == [4, 4, None, None]
    assert result.score == 4


def test_full_row_merges_in_pairs(make_grid, values_of):
    grid = make_grid([[2, 2, 2, 2]] + [[None] * 4 for _ in range(3)])

    result = resolve_move(grid, 'right', [], 0, 4)

    assert _row(values_of, result.grid) == [None, None, 4, 4]
    assert result.score == 8


def test_vertical_moves_use_columns(make_grid, values_of):
    grid = make_grid([
        [2, None, None, None],
        [None, None, None, None],
        [2, None, None, None],
        [None, None, None, 8],
    ])

    down = resolve_move(grid, 'down', [], 0, 4)
    assert [row[0] for row in values_of(down.grid)] == [None, None, None, 4]
    assert down.grid[3][3].value == 8

    up = resolve_move(grid, 'up', [], 0, 4)
    assert [row[0] for row in values_of(up.grid)] == [4, None, None, None]
    assert up.grid[0][3].value == 8


def test_equal_tiles_across_wall_never_merge(make_grid, make_obstacle, values_of):
    grid = make_grid([[2, None, 2, None]] + [[None] * 4 for _ in range(3)])
    walls = [make_obstacle(WALL, 1, 0)]

    left = resolve_move(grid, 'left', walls, 0, 4)
    assert not left.moved

    right = resolve_move(grid, 'right', walls, 0, 4)
    assert right.moved
    assert right.score == 0
    assert _row(values_of, right.grid) == [2, None, None, 2]


def test_multiplier_doubles_sliding_tile(make_grid, make_obstacle, values_of):
    grid = make_grid([[2, None, None, None]] + [[None] * 4 for _ in range(3)])

    result = resolve_move(grid, 'right', [make_obstacle(MULTIPLIER, 1, 0)], 0, 4)

    assert result.moved
    assert _row(values_of, result.grid) == [None, None, None, 4]
    # doubling by a multiplier is not a merge
    assert result.score == 0


def test_crossing_two_multipliers_doubles_once(make_grid, make_obstacle, values_of):
    grid = make_grid([[2, None, None, None]] + [[None] * 4 for _ in range(3)])
    obstacles = [make_obstacle(MULTIPLIER, 1, 0), make_obstacle(MULTIPLIER, 2, 0)]

    result = resolve_move(grid, 'right', obstacles, 0, 4)

    assert _row(values_of, result.grid) == [None, None, None, 4]
    assert result.score == 0


def test_multiplier_under_blocking_tile_does_not_double(make_grid, make_obstacle, values_of):
    grid = make_grid([[2, None, None, 8]] + [[None] * 4 for _ in range(3)])

    result = resolve_move(grid, 'right', [make_obstacle(MULTIPLIER, 3, 0)], 0, 4)

    # the 2 stops next to the 8 without entering the multiplier cell
    assert _row(values_of, result.grid) == [None, None, 2, 8]


def test_tile_can_stop_on_multiplier_at_edge(make_grid, make_obstacle):
    grid = make_grid([[2, None, None, None]] + [[None] * 4 for _ in range(3)])

    result = resolve_move(grid, 'right', [make_obstacle(MULTIPLIER, 3, 0)], 0, 4)

    assert result.grid[0][3].value == 4


def test_multiplied_tile_merges_with_its_new_value(make_grid, make_obstacle, values_of):
    grid = make_grid([[2, None, None, 4]] + [[None] * 4 for _ in range(3)])

    result = resolve_move(grid, 'right', [make_obstacle(MULTIPLIER, 1, 0)], 0, 4)

    assert _row(values_of, result.grid) == [None, None, None, 8]
    assert result.score == 8


def test_portal_is_passable_and_inert(make_grid, make_obstacle, values_of):
    grid = make_grid([[2, None, None, None]] + [[None] * 4 for _ in range(3)])

    result = resolve_move(grid, 'right', [make_obstacle(PORTAL, 1, 0)], 0, 4)

    assert _row(values_of, result.grid) == [None, None, None, 2]


def test_presentation_flags_are_cleared(make_grid):
    grid = make_grid([[None] * 4 for _ in range(4)])
    grid[0][3] = Tile('fresh', 2, Position(3, 0), is_new=True)

    result = resolve_move(grid, 'left', [], 0, 4)

    assert result.grid[0][0] == Tile('fresh', 2, Position(0, 0))


def test_sort_order_follows_direction(make_grid):
    tiles = list(iter_tiles(make_grid([[2, None, 4], [None, 8, None], [16, None, 32]])))

    assert [t.position.x for t in sort_tiles_for_direction(tiles, 'left')] == [0, 0, 1, 2, 2]
    assert [t.position.x for t in sort_tiles_for_direction(tiles, 'right')] == [2, 2, 1, 0, 0]
    assert [t.position.y for t in sort_tiles_for_direction(tiles, 'up')] == [0, 0, 1, 2, 2]
    assert [t.position.y for t in sort_tiles_for_direction(tiles, 'down')] == [2, 2, 1, 0, 0]


def test_invalid_input_fails_fast(make_grid):
    grid = make_grid([[None] * 4 for _ in range(4)])
    with pytest.raises(InvalidStateError):
        resolve_move(grid, 'sideways', [], 0, 4)
    with pytest.raises(InvalidStateError):
        resolve_move(grid, 'left', [], 0, 5)


@pytest.mark.parametrize('seed', range(20))
def test_values_are_conserved_without_multipliers(seed):
    rng = random.Random(seed)
    grid = [[None] * 4 for _ in range(4)]
    for _ in range(rng.randint(2, 14)):
        grid = spawn_random_tile(grid, [], 4, rng)

    for direction in DIRECTIONS:
        result = resolve_move(grid, direction, [], 0, 4)
        if not result.moved:
            continue

        before = Counter(t.value for t in iter_tiles(grid))
        merges = [t for t in iter_tiles(result.grid) if t.merged_from]
        for merged in merges:
            for source in merged.merged_from:
                before[source.value] -= 1
            before[merged.value] += 1

        after = Counter(t.value for t in iter_tiles(result.grid))
        assert +before == after
        assert result.score == sum(t.value for t in merges)
