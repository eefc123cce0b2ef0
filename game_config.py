"""
loading and validation of config.json (rules, AI defaults, levels)
"""
import json
import logging
import math
from pathlib import Path

from exceptions import ConfigurationError
from models import OBSTACLE_TYPES, Level, Obstacle, Position

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).with_name('config.json')


def load_config(config_path=None, config_dict=None):
    """
    Load config either from file or dict; with neither, the bundled
    config.json is used
    """
    if config_dict is not None:
        config = config_dict
    else:
        path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
        try:
            with open(path, 'r') as f:
                config = json.load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read config {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Config {path} is not valid JSON: {e}") from e
        logger.debug("Configuration loaded from %s", path)

    for section in ('game', 'levels'):
        if section not in config:
            raise ConfigurationError(f"Config is missing the '{section}' section")

    spawn_tiles(config)
    return config


def spawn_tiles(config):
    """spawn table as {int value: probability}"""
    table = config['game'].get('spawn_tiles', {'2': 0.9, '4': 0.1})
    try:
        spawn = {int(value): float(p) for value, p in table.items()}
    except (TypeError, ValueError, AttributeError) as e:
        raise ConfigurationError(f"Malformed spawn_tiles: {table!r}") from e

    if not spawn:
        raise ConfigurationError("spawn_tiles must list at least one value")
    for value, p in spawn.items():
        if not is_power_of_two(value):
            raise ConfigurationError(f"Spawn value {value} is not a power of two")
        if p < 0:
            raise ConfigurationError(f"Spawn probability for {value} is negative")
    if not math.isclose(sum(spawn.values()), 1.0, abs_tol=1e-6):
        raise ConfigurationError(
            f"Spawn probabilities must sum to 1, got {sum(spawn.values())}")
    return spawn


def is_power_of_two(value):
    return isinstance(value, int) and value > 0 and value & (value - 1) == 0


def parse_position(data):
    try:
        return Position(int(data['x']), int(data['y']))
    except (KeyError, TypeError, ValueError, OverflowError) as e:
        raise ConfigurationError(f"Malformed position: {data!r}") from e


def parse_obstacle(data):
    try:
        obstacle_id = str(data['id'])
        obstacle_type = data['type']
        position = data['position']
    except (KeyError, TypeError) as e:
        raise ConfigurationError(f"Malformed obstacle: {data!r}") from e

    if obstacle_type not in OBSTACLE_TYPES:
        raise ConfigurationError(
            f"Obstacle {obstacle_id} has unknown type {obstacle_type!r}")
    return Obstacle(obstacle_id, obstacle_type, parse_position(position))


def validate_obstacles(obstacles, grid_size, label='level'):
    """bounds, overlap and spawn room checks for an obstacle layout"""
    seen = {}
    for obstacle in obstacles:
        x, y = obstacle.position
        if not (0 <= x < grid_size and 0 <= y < grid_size):
            raise ConfigurationError(
                f"{label}: obstacle {obstacle.id} at ({x}, {y}) lies outside the "
                f"{grid_size}x{grid_size} grid")
        if obstacle.position in seen:
            raise ConfigurationError(
                f"{label}: obstacles {seen[obstacle.position]} and {obstacle.id} "
                f"share cell ({x}, {y})")
        seen[obstacle.position] = obstacle.id

    if len(seen) >= grid_size * grid_size:
        raise ConfigurationError(f"{label}: obstacles leave no cell to spawn tiles on")


def parse_level(data, index=0):
    label = data.get('name', f"level {index}") if isinstance(data, dict) else f"level {index}"
    try:
        grid_size = data['grid_size']
        winning_value = data['winning_value']
    except (KeyError, TypeError) as e:
        raise ConfigurationError(f"{label}: missing grid_size or winning_value") from e

    if not isinstance(grid_size, int) or grid_size < 1:
        raise ConfigurationError(f"{label}: grid_size must be a positive integer")
    if not is_power_of_two(winning_value):
        raise ConfigurationError(f"{label}: winning_value must be a power of two")

    obstacles = tuple(parse_obstacle(o) for o in data.get('obstacles', []))
    validate_obstacles(obstacles, grid_size, label)

    return Level(
        name=label,
        grid_size=grid_size,
        winning_value=winning_value,
        obstacles=obstacles,
        description=data.get('description', '')
    )


def load_levels(config):
    levels = [parse_level(data, i) for i, data in enumerate(config['levels'])]
    if not levels:
        raise ConfigurationError("Config defines no levels")
    return levels


def obstacle_to_dict(obstacle):
    return {
        'id': obstacle.id,
        'type': obstacle.type,
        'position': {'x': obstacle.position.x, 'y': obstacle.position.y}
    }
