import itertools
import time


class IdGenerator:
    """Hands out tile ids unique within the running process.

    An id combines a millisecond timestamp with a per-generator counter, so a
    generator never repeats itself even when many tiles are created within
    the same millisecond.
    """

    def __init__(self, prefix='id', clock=None):
        self.prefix = prefix
        self.clock = clock or time.time
        self._counter = itertools.count(1)

    def __call__(self):
        return f"{self.prefix}_{int(self.clock() * 1000)}_{next(self._counter)}"


class SequentialIdGenerator:
    """Deterministic ids (tile_1, tile_2, ...) for replays and tests"""

    def __init__(self, prefix='tile'):
        self.prefix = prefix
        self._counter = itertools.count(1)

    def __call__(self):
        return f"{self.prefix}_{next(self._counter)}"


# Shared fallback for callers that do not pass their own id source
default_id_source = IdGenerator()
