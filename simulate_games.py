"""
headless persona tournament: every configured persona plays AI-only games
on one level and the results are compared
"""
import json
import logging
import multiprocessing as mp
import os
import random
import sys
import time
from datetime import datetime
from multiprocessing import Pool

import numpy as np

from exceptions import ConfigurationError
from game_config import load_config
from game_session import GameSession
from grid_utils import values_matrix
from models import MULTIPLIER, PORTAL, WALL, Position
from persona import persona_key

logger = logging.getLogger(__name__)

OBSTACLE_MARKS = {WALL: '#', MULTIPLIER: 'x2', PORTAL: '@'}


def load_simulation_config(config_path='simulation_config.json'):
    with open(config_path, 'r') as f:
        config = json.load(f)
    if 'simulation' not in config:
        raise ConfigurationError(f"{config_path} is missing the 'simulation' section")
    return config


def progress_bar(done, total, eta=None, width=50):
    progress = done / total if total else 1.0
    filled = int(width * progress)
    bar = '=' * (filled - 1) + '>' if filled > 0 else ''
    bar = bar.ljust(width, '.')
    eta_str = f"ETA: {eta:.1f}s" if eta is not None else "ETA: calculating..."

    sys.stdout.write(f"\rGames [{bar}] {done}/{total} {eta_str}")
    sys.stdout.flush()


def board_to_string(grid, obstacles=()):
    marks = {o.position: OBSTACLE_MARKS.get(o.type, '?') for o in obstacles}
    lines = []
    for y, row in enumerate(grid):
        cells = []
        for x, tile in enumerate(row):
            if tile is not None:
                cells.append(str(tile.value))
            else:
                cells.append(marks.get(Position(x, y), '0'))
        lines.append(' '.join(cells))
    return '\n'.join(lines)


def save_game_to_txt(game_history, score, filename, max_tile, persona):
    with open(filename, 'w') as f:
        f.write(f"Persona: {persona}\n")
        f.write(f"Final Score: {score}\n")
        f.write(f"Max Tile: {max_tile}\n")
        f.write(f"Number of Moves: {len(game_history)}\n\n")

        for i, (board, move) in enumerate(game_history, 1):
            f.write(f"Move {i}:\n")
            f.write(board)
            f.write(f"\nAction: {move}\n\n")


def play_ai_game(persona, game_config, sim_config, seed=None):
    """
    let persona play one game on its own, spawning after every move just
    like a live match
    """
    settings = sim_config['simulation']
    max_moves = settings['max_moves']
    patience = settings['early_termination']['moves_without_progress']

    session = GameSession(config_dict=game_config, level=settings['level'],
                          persona=persona, rng=random.Random(seed))
    board = session.ai
    game_history = []
    moves_without_progress = 0
    last_max = 0

    while len(game_history) < max_moves:
        current_max = int(values_matrix(board.grid).max())

        # Progress tracking
        if current_max > last_max:
            moves_without_progress = 0
            last_max = current_max
        else:
            moves_without_progress += 1

        if moves_without_progress > patience:
            logger.debug("%s stalled at %d after %d moves", persona, current_max, len(game_history))
            break

        snapshot = board_to_string(board.grid, board.obstacles)
        move = session.run_ai_move()
        if move is None:
            break
        game_history.append((snapshot, move))

    return {
        'persona': persona,
        'score': board.score,
        'max_tile': int(values_matrix(board.grid).max()),
        'moves': len(game_history),
        'won': board.won,
        'history': game_history
    }


def worker_play_game(args):
    persona, game_config, sim_config, seed = args
    return play_ai_game(persona, game_config, sim_config, seed)


def summarize(results):
    """per persona statistics over finished games"""
    summary = {}
    for persona in sorted({r['persona'] for r in results}):
        games = [r for r in results if r['persona'] == persona]
        scores = np.array([g['score'] for g in games])
        tiles = np.array([g['max_tile'] for g in games])
        summary[persona] = {
            'games': len(games),
            'mean_score': float(scores.mean()),
            'max_score': int(scores.max()),
            'highest_tile': int(tiles.max()),
            'median_tile': float(np.median(tiles)),
            'win_rate': float(np.mean([g['won'] for g in games]))
        }
    return summary


def resolve_worker_count(sim_config, num_workers=None):
    worker_config = sim_config['simulation']['workers']
    if num_workers is not None:
        return num_workers
    if worker_config['mode'] == 'auto':
        return min(mp.cpu_count(), worker_config['max_workers'])
    return worker_config['count']


def run_tournament(game_config, sim_config, num_workers=None):
    settings = sim_config['simulation']
    personas = [persona_key(p) for p in settings['personas']]
    base_seed = settings.get('seed')
    seeds = random.Random(base_seed)

    tasks = [(persona, game_config, sim_config, seeds.getrandbits(32))
             for persona in personas
             for _ in range(settings['games_per_persona'])]

    num_workers = resolve_worker_count(sim_config, num_workers)
    print(f"Playing {len(tasks)} games with {len(personas)} personas using {num_workers} workers...")

    results = []
    start_time = time.time()
    if settings.get('save_winning_games'):
        os.makedirs(settings['output_dir'], exist_ok=True)

    with Pool(num_workers) as pool:
        for result in pool.imap_unordered(worker_play_game, tasks):
            results.append(result)

            if result['won'] and settings.get('save_winning_games'):
                timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
                filename = os.path.join(
                    settings['output_dir'],
                    f"game_{result['persona']}_{result['max_tile']}_{result['score']}_{timestamp}.txt")
                save_game_to_txt(result['history'], result['score'], filename,
                                 result['max_tile'], result['persona'])

            elapsed = time.time() - start_time
            eta = elapsed / len(results) * (len(tasks) - len(results))
            progress_bar(len(results), len(tasks), eta)

    print("\n")
    return summarize(results)


def print_summary(summary):
    print(f"{'Persona':<12} {'Games':>6} {'Mean':>10} {'Best':>8} {'Top tile':>9} {'Win %':>7}")
    print("-" * 56)
    for persona, stats in sorted(summary.items(), key=lambda item: -item[1]['mean_score']):
        print(f"{persona:<12} {stats['games']:>6} {stats['mean_score']:>10.1f} "
              f"{stats['max_score']:>8} {stats['highest_tile']:>9} {stats['win_rate'] * 100:>6.1f}%")


def main():
    logging.basicConfig(
        level=logging.INFO,
        format='%(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    game_config = load_config('config.json')
    sim_config = load_simulation_config('simulation_config.json')
    summary = run_tournament(game_config, sim_config)
    print_summary(summary)


if __name__ == '__main__':
    main()
