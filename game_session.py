"""
a match between the player and the AI on the same level

each side has its own board; the AI plays its own game rather than copying
the player's moves
"""
import logging
import random

from ai_logic import choose_ai_move
from exceptions import ConfigurationError
from game_config import load_config, load_levels, spawn_tiles
from game_logic import resolve_move
from grid_utils import copy_grid
from id_generator import IdGenerator
from models import BoardState
from persona import DEFAULT_PERSONA
from tile_spawner import has_won, initialize_grid, is_game_over, spawn_random_tile

logger = logging.getLogger(__name__)

AI_IDLE = 'idle'
AI_THINKING = 'thinking'
AI_RESOLVED = 'resolved'


class GameSession:
    def __init__(self, config_path=None, config_dict=None, level=None, persona=None,
                 rng=None, id_source=None, new_game=True):
        self.config = load_config(config_path, config_dict)
        self.levels = load_levels(self.config)
        self.spawn_tiles = spawn_tiles(self.config)
        self.rng = rng or random.Random()
        self.id_source = id_source or IdGenerator()

        if level is None:
            level = self.config['game'].get('default_level', 0)
        if not 0 <= level < len(self.levels):
            raise ConfigurationError(f"Level {level} does not exist")
        self.level = level

        self.persona = persona or self.config.get('ai', {}).get('default_persona', DEFAULT_PERSONA)
        self.player = BoardState()
        self.ai = BoardState()
        self.ai_status = AI_IDLE

        if new_game:
            self.initialize_game()

    @property
    def current_level(self):
        return self.levels[self.level]

    @property
    def grid_size(self):
        return self.current_level.grid_size

    def initialize_game(self):
        """fresh boards for both sides; best scores are kept"""
        level = self.current_level
        grid = initialize_grid(level.obstacles, level.grid_size, self.rng,
                               self.id_source, self.spawn_tiles)

        self.player = BoardState(grid=grid, obstacles=level.obstacles,
                                 best_score=self.player.best_score)
        # the AI starts from the same opening position
        self.ai = BoardState(grid=copy_grid(grid), obstacles=level.obstacles,
                             best_score=self.ai.best_score)
        self.ai_status = AI_IDLE
        logger.debug("New game on level %s (%dx%d)", level.name, level.grid_size, level.grid_size)

    def restart_game(self):
        self.initialize_game()

    def _spawn(self, board, grid):
        return spawn_random_tile(grid, board.obstacles, self.grid_size, self.rng,
                                 self.id_source, self.spawn_tiles)

    def _settle(self, board, grid, score):
        """store a post-move grid and update the won / over flags"""
        just_won = (not board.won and not board.keep_playing
                    and has_won(grid, self.current_level.winning_value))
        over = is_game_over(grid, board.obstacles, self.grid_size)

        board.grid = grid
        board.score = score
        board.best_score = max(board.best_score, score)
        board.won = board.won or just_won
        board.over = over and not just_won
        return just_won

    def move(self, direction):
        """
        play the player's move

        returns True when tiles moved (and a new tile was spawned)
        """
        board = self.player
        if board.over:
            return False

        result = resolve_move(board.grid, direction, board.obstacles, board.score,
                              self.grid_size, self.id_source)
        if not result.moved:
            return False

        if self._settle(board, self._spawn(board, result.grid), result.score):
            logger.info("Player reached %d", self.current_level.winning_value)
        return True

    def run_ai_move(self):
        """
        let the AI play one move on its own board

        returns the direction played, or None when the AI could not move
        """
        board = self.ai
        if board.over or (board.won and not board.keep_playing):
            return None

        self.ai_status = AI_THINKING
        direction, grid, score = choose_ai_move(board.grid, board.obstacles, board.score,
                                                self.persona, self.grid_size, self.rng,
                                                self.id_source)
        self.ai_status = AI_RESOLVED

        if direction is None:
            board.over = True
            return None

        if self._settle(board, self._spawn(board, grid), score):
            logger.info("AI (%s) reached %d", self.persona, self.current_level.winning_value)
        return direction

    def continue_game(self):
        """keep playing after the player has won"""
        self.player.keep_playing = True

    def set_persona(self, persona):
        self.persona = persona

    def set_level(self, level):
        if 0 <= level < len(self.levels):
            self.level = level
            self.restart_game()
