"""
value types shared by the move engine, the spawner and the AI
"""
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Tuple

DIRECTIONS = ('up', 'right', 'down', 'left')

WALL = 'wall'
PORTAL = 'portal'
MULTIPLIER = 'multiplier'
OBSTACLE_TYPES = (WALL, PORTAL, MULTIPLIER)


class Position(NamedTuple):
    x: int
    y: int


@dataclass(frozen=True)
class Tile:
    id: str
    value: int
    position: Position
    is_new: bool = False
    # the two tiles consumed by the merge that produced this one
    merged_from: Optional[Tuple['Tile', 'Tile']] = None

    def settled(self):
        """copy with the per-move presentation flags cleared"""
        if not self.is_new and self.merged_from is None:
            return self
        return Tile(self.id, self.value, self.position)


@dataclass(frozen=True)
class Obstacle:
    id: str
    type: str
    position: Position


@dataclass(frozen=True)
class Level:
    name: str
    grid_size: int
    winning_value: int
    obstacles: Tuple[Obstacle, ...] = ()
    description: str = ''


@dataclass
class BoardState:
    """One side of a match: the player's board or the AI's board"""
    grid: List[List[Optional[Tile]]] = field(default_factory=list)
    obstacles: Tuple[Obstacle, ...] = ()
    score: int = 0
    best_score: int = 0
    won: bool = False
    over: bool = False
    keep_playing: bool = False
