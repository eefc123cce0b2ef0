import logging

from game_logic import resolve_move
from models import DIRECTIONS
from tile_spawner import is_game_over
from .base_persona import BasePersona
from .evaluation import EvaluationWeights, evaluate_board

logger = logging.getLogger(__name__)

STRATEGIC_WEIGHTS = EvaluationWeights(score_delta=0.3, empty_cells=15, monotonicity=5, smoothness=3)
LOOKAHEAD_DEPTH = 2


def look_ahead(grid, obstacles, score, depth, grid_size, root_score=0,
               weights=STRATEGIC_WEIGHTS, id_source=None):
    """
    best evaluation reachable within depth further moves

    no random tiles are spawned along the way. A position with no move left
    (or depth 0) is scored on its own board, with score - root_score as the
    score gain.
    """
    leaf_score = None
    if depth > 0 and not is_game_over(grid, obstacles, grid_size):
        for direction in DIRECTIONS:
            result = resolve_move(grid, direction, obstacles, score, grid_size, id_source)
            if not result.moved:
                continue
            branch_score = look_ahead(result.grid, obstacles, result.score, depth - 1,
                                      grid_size, root_score, weights, id_source)
            if leaf_score is None or branch_score > leaf_score:
                leaf_score = branch_score

    if leaf_score is None:
        leaf_score = evaluate_board(grid, obstacles, score - root_score, weights)
    return leaf_score


class StrategicPersona(BasePersona):
    """Ranks candidates by a look-ahead search instead of a one-shot score"""

    def __init__(self, name, weights=STRATEGIC_WEIGHTS, depth=LOOKAHEAD_DEPTH):
        super().__init__(name, weights)
        self.depth = depth

    def select_move(self, candidates, obstacles, score, grid_size, rng=None, id_source=None):
        best_score = float('-inf')
        best_move = None

        for direction, result in candidates:
            move_score = look_ahead(result.grid, obstacles, result.score, self.depth,
                                    grid_size, root_score=score, weights=self.weights,
                                    id_source=id_source)
            logger.debug("%s: %s looks ahead to %.2f", self.name, direction, move_score)

            if move_score > best_score:
                best_score = move_score
                best_move = direction

        return best_move
