"""
AI personas: each one is a selection rule plus the weights it evaluates with,
so adding a persona means adding an entry to PERSONAS
"""
import logging

from .base_persona import BasePersona
from .evaluation import EvaluationWeights
from .greedy import GreedyPersona
from .random_persona import RandomPersona
from .strategic import STRATEGIC_WEIGHTS, StrategicPersona, look_ahead

logger = logging.getLogger(__name__)

BALANCED_WEIGHTS = EvaluationWeights(score_delta=0.5, empty_cells=10, monotonicity=2, smoothness=2)
AGGRESSIVE_WEIGHTS = EvaluationWeights(score_delta=1.0, empty_cells=5, highest_tile=0.1)
DEFENSIVE_WEIGHTS = EvaluationWeights(empty_cells=20)

DEFAULT_PERSONA = 'balanced'

PERSONAS = {
    'balanced': GreedyPersona('Balanced Betty', BALANCED_WEIGHTS),
    'aggressive': GreedyPersona('Aggressive Alex', AGGRESSIVE_WEIGHTS),
    'defensive': GreedyPersona('Defensive Dana', DEFENSIVE_WEIGHTS),
    'strategic': StrategicPersona('Strategic Sam', STRATEGIC_WEIGHTS),
    'random': RandomPersona('Random Randy')
}

# display names shown in the app
PERSONA_ALIASES = {persona.name: key for key, persona in PERSONAS.items()}


def persona_key(name):
    """canonical key for a persona name, falling back to the default"""
    if name in PERSONAS:
        return name
    if name in PERSONA_ALIASES:
        return PERSONA_ALIASES[name]
    logger.debug("Unknown persona %r, playing as %s", name, DEFAULT_PERSONA)
    return DEFAULT_PERSONA


def get_persona(persona):
    if isinstance(persona, BasePersona):
        return persona
    return PERSONAS[persona_key(persona)]


__all__ = [
    'BasePersona',
    'EvaluationWeights',
    'GreedyPersona',
    'RandomPersona',
    'StrategicPersona',
    'PERSONAS',
    'PERSONA_ALIASES',
    'DEFAULT_PERSONA',
    'get_persona',
    'persona_key',
    'look_ahead'
]
