"""
saving and restoring a GameSession as plain JSON data
"""
import json
import logging
from pathlib import Path

from exceptions import ConfigurationError, InvalidStateError
from game_config import is_power_of_two, obstacle_to_dict, parse_obstacle, validate_obstacles
from game_session import AI_IDLE, GameSession
from models import WALL, BoardState, Position, Tile

logger = logging.getLogger(__name__)


def tile_to_dict(tile):
    return {
        'id': tile.id,
        'value': tile.value,
        'position': {'x': tile.position.x, 'y': tile.position.y},
        'is_new': tile.is_new,
        'merged_from': [tile_to_dict(t) for t in tile.merged_from] if tile.merged_from else None
    }


def tile_from_dict(data):
    try:
        position = Position(int(data['position']['x']), int(data['position']['y']))
        value = data['value']
        merged_from = data.get('merged_from')
        tile = Tile(
            id=str(data['id']),
            value=value,
            position=position,
            is_new=bool(data.get('is_new', False)),
            merged_from=tuple(tile_from_dict(t) for t in merged_from) if merged_from else None
        )
    except (KeyError, TypeError, ValueError, OverflowError) as e:
        raise InvalidStateError(f"Malformed tile: {data!r}") from e

    if not is_power_of_two(value):
        raise InvalidStateError(f"Tile {tile.id} has invalid value {value!r}")
    return tile


def serialize_grid(grid):
    return [[tile_to_dict(tile) if tile is not None else None for tile in row] for row in grid]


def deserialize_grid(data, grid_size, obstacles=()):
    """rebuild a grid, rejecting anything that does not fit grid_size"""
    if not isinstance(data, list) or len(data) != grid_size:
        raise InvalidStateError(f"Saved grid does not have {grid_size} rows")

    walls = {o.position for o in obstacles if o.type == WALL}
    grid = []
    for y, row in enumerate(data):
        if not isinstance(row, list) or len(row) != grid_size:
            raise InvalidStateError(f"Saved grid row {y} does not have {grid_size} cells")
        cells = []
        for x, cell in enumerate(row):
            tile = tile_from_dict(cell) if cell is not None else None
            if tile is not None:
                if tile.position != Position(x, y):
                    raise InvalidStateError(
                        f"Tile {tile.id} claims {tuple(tile.position)} but sits at ({x}, {y})")
                if tile.position in walls:
                    raise InvalidStateError(f"Tile {tile.id} sits on a wall at ({x}, {y})")
            cells.append(tile)
        grid.append(cells)
    return grid


def board_to_dict(board):
    return {
        'grid': serialize_grid(board.grid),
        'obstacles': [obstacle_to_dict(o) for o in board.obstacles],
        'score': board.score,
        'best_score': board.best_score,
        'won': board.won,
        'over': board.over,
        'keep_playing': board.keep_playing
    }


def board_from_dict(data, grid_size):
    try:
        obstacles = tuple(parse_obstacle(o) for o in data.get('obstacles', []))
        validate_obstacles(obstacles, grid_size, 'saved board')
        score = int(data['score'])
        board = BoardState(
            grid=deserialize_grid(data['grid'], grid_size, obstacles),
            obstacles=obstacles,
            score=score,
            best_score=max(int(data.get('best_score', 0)), score),
            won=bool(data.get('won', False)),
            over=bool(data.get('over', False)),
            keep_playing=bool(data.get('keep_playing', False))
        )
    except ConfigurationError as e:
        raise InvalidStateError(str(e)) from e
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
        raise InvalidStateError(f"Malformed saved board: {e}") from e

    if board.score < 0:
        raise InvalidStateError(f"Saved score {board.score} is negative")
    return board


def session_to_dict(session):
    return {
        'level': session.level,
        'grid_size': session.grid_size,
        'player': board_to_dict(session.player),
        'ai': dict(board_to_dict(session.ai), persona=session.persona),
        'ai_status': session.ai_status
    }


def session_from_dict(data, **session_kwargs):
    """
    rebuild a session from session_to_dict output

    session_kwargs go to GameSession (config_path, config_dict, rng, id_source)
    """
    if not isinstance(data, dict):
        raise InvalidStateError("Saved state is not an object")
    try:
        level = int(data['level'])
        player_data = data['player']
        ai_data = data['ai']
        persona = ai_data.get('persona')
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
        raise InvalidStateError(f"Malformed saved state: {e!r}") from e

    try:
        session = GameSession(level=level, persona=persona,
                              new_game=False, **session_kwargs)
    except ConfigurationError as e:
        raise InvalidStateError(f"Saved level {level} is not available: {e}") from e

    grid_size = session.grid_size
    if data.get('grid_size', grid_size) != grid_size:
        raise InvalidStateError(
            f"Saved grid size {data['grid_size']} does not match level size {grid_size}")

    session.player = board_from_dict(player_data, grid_size)
    session.ai = board_from_dict(ai_data, grid_size)
    session.ai_status = data.get('ai_status', AI_IDLE)
    return session


def save_state(path, session):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(session_to_dict(session), f)


def load_state(path, **session_kwargs):
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidStateError(f"Saved state {path} is not readable JSON: {e}") from e
    return session_from_dict(data, **session_kwargs)


def load_or_initialize(path, **session_kwargs):
    """
    restore a saved session, or start a fresh one when the save is missing
    or unusable
    """
    try:
        return load_state(path, **session_kwargs)
    except FileNotFoundError:
        logger.debug("No saved state at %s, starting a new game", path)
    except (OSError, InvalidStateError) as e:
        logger.warning("Discarding saved state %s: %s", path, e)
    return GameSession(**session_kwargs)
