import random

from .base_persona import BasePersona


class RandomPersona(BasePersona):
    """Uniform choice among the directions that move something"""

    def select_move(self, candidates, obstacles, score, grid_size, rng=None, id_source=None):
        rng = rng or random
        direction, _ = rng.choice(candidates)
        return direction
