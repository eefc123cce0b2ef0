"""
board quality metrics used by the AI personas

all metrics work on the value matrix of a candidate grid, empty cells are 0
"""
from typing import NamedTuple

import numpy as np

from grid_utils import index_obstacles, values_matrix


class EvaluationWeights(NamedTuple):
    score_delta: float = 0.0
    empty_cells: float = 0.0
    monotonicity: float = 0.0
    smoothness: float = 0.0
    highest_tile: float = 0.0


def log_values(board):
    """log2 of every tile, 0 where the cell is empty"""
    return np.log2(np.maximum(board, 1))


def count_empty_cells(grid, obstacles=()):
    """unoccupied cells that are not obstacle cells"""
    board = values_matrix(grid)
    free = board == 0
    for position in index_obstacles(obstacles):
        if 0 <= position.y < board.shape[0] and 0 <= position.x < board.shape[1]:
            free[position.y, position.x] = False
    return int(np.count_nonzero(free))


def highest_tile(grid):
    board = values_matrix(grid)
    return int(board.max()) if board.size else 0


def monotonicity(grid):
    """
    sum of log2 drops along every row (left to right) and every column
    (top to bottom); rewards boards sorted one way along each line
    """
    logs = log_values(values_matrix(grid))
    row_drops = logs[:, :-1] - logs[:, 1:]
    col_drops = logs[:-1, :] - logs[1:, :]
    return float(row_drops[row_drops > 0].sum() + col_drops[col_drops > 0].sum())


def smoothness(grid):
    """minus the log2 gap between every pair of occupied neighbours"""
    board = values_matrix(grid)
    logs = log_values(board)
    occupied = board > 0

    row_pairs = occupied[:, :-1] & occupied[:, 1:]
    col_pairs = occupied[:-1, :] & occupied[1:, :]
    row_gaps = np.abs(logs[:, :-1] - logs[:, 1:])[row_pairs]
    col_gaps = np.abs(logs[:-1, :] - logs[1:, :])[col_pairs]
    return -float(row_gaps.sum() + col_gaps.sum())


def evaluate_board(grid, obstacles, score_delta, weights):
    """weighted sum of the metrics, skipping the ones a persona ignores"""
    total = weights.score_delta * score_delta
    if weights.empty_cells:
        total += weights.empty_cells * count_empty_cells(grid, obstacles)
    if weights.monotonicity:
        total += weights.monotonicity * monotonicity(grid)
    if weights.smoothness:
        total += weights.smoothness * smoothness(grid)
    if weights.highest_tile:
        total += weights.highest_tile * highest_tile(grid)
    return float(total)
