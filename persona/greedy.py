import logging

from .base_persona import BasePersona
from .evaluation import evaluate_board

logger = logging.getLogger(__name__)


class GreedyPersona(BasePersona):
    """Scores each candidate board once with its weights and keeps the best.
    Ties go to the earliest candidate."""

    def select_move(self, candidates, obstacles, score, grid_size, rng=None, id_source=None):
        best_score = float('-inf')
        best_move = None

        for direction, result in candidates:
            move_score = evaluate_board(result.grid, obstacles, result.score - score, self.weights)
            logger.debug("%s: %s scores %.2f", self.name, direction, move_score)

            if move_score > best_score:
                best_score = move_score
                best_move = direction

        return best_move
