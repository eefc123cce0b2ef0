"""
AI decision engine: picks a direction for the AI board
"""
import logging
from typing import NamedTuple, Optional

from game_logic import resolve_move
from models import DIRECTIONS
from persona import get_persona, look_ahead
from tile_spawner import is_game_over

logger = logging.getLogger(__name__)


class AIMove(NamedTuple):
    direction: Optional[str]
    grid: list
    score: int


def valid_moves(grid, obstacles, score, grid_size, id_source=None):
    """(direction, MoveResult) for every direction that moves something"""
    candidates = []
    for direction in DIRECTIONS:
        result = resolve_move(grid, direction, obstacles, score, grid_size, id_source)
        if result.moved:
            candidates.append((direction, result))
    return candidates


def choose_ai_move(grid, obstacles, score, persona, grid_size, rng=None, id_source=None):
    """
    choose and play the AI's move without spawning a tile

    persona is a persona key, a display name or a persona object. Returns
    AIMove(None, grid, score) when the board has no move left.
    """
    persona = get_persona(persona)

    if is_game_over(grid, obstacles, grid_size):
        return AIMove(None, grid, score)

    candidates = valid_moves(grid, obstacles, score, grid_size, id_source)
    if not candidates:
        return AIMove(None, grid, score)

    direction = persona.select_move(candidates, obstacles, score, grid_size, rng, id_source)
    result = dict(candidates)[direction]
    logger.debug("%s plays %s (+%d)", persona.name, direction, result.score - score)

    return AIMove(direction, result.grid, result.score)


__all__ = ['AIMove', 'choose_ai_move', 'look_ahead', 'valid_moves']
