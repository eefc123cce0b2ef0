class GameError(Exception):
    """Base class for errors raised by the game engine"""


class InvalidStateError(GameError):
    """A grid, position or direction that cannot belong to a valid game"""


class ConfigurationError(GameError, ValueError):
    """Malformed game, level or simulation configuration"""
