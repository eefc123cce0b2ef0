from abc import ABC, abstractmethod


class BasePersona(ABC):
    def __init__(self, name, weights=None):
        self.name = name
        self.weights = weights

    @abstractmethod
    def select_move(self, candidates, obstacles, score, grid_size, rng=None, id_source=None) -> str:
        """Pick a direction from candidates, a list of (direction, MoveResult)
        pairs in evaluation order, all of which moved at least one tile"""
        pass

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"
