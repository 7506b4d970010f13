"""Weighted, shuffled source of cell types for refills."""
from __future__ import annotations

import random
from typing import Dict, Iterator, List, Mapping, Sequence

from tilefall.errors import InvalidConfiguration


def build_type_buffer(weights: Mapping[str, float], expected_draws: int) -> List[str]:
    """Return an unshuffled buffer where each type appears ``round(weight * N)`` times.

    Every type with a positive weight appears at least once so small boards
    still see rare types.
    """
    positive: Dict[str, float] = {name: w for name, w in weights.items() if w > 0}
    if not positive:
        raise InvalidConfiguration("Spawn weights sum to zero")
    size = max(1, int(expected_draws))
    buffer: List[str] = []
    for name, weight in positive.items():
        buffer.extend([name] * max(1, round(weight * size)))
    return buffer


class WeightedTypeGenerator:
    """Infinite cursor over a reshuffled, weight-proportional buffer of type names.

    The buffer is sized from ``expected_draws`` only; output is unbounded.
    Each time the cursor reaches the end the buffer is reshuffled and the
    cursor restarts at zero, so long-run frequencies follow the weights while
    short windows stay irregular. Single consumer.
    """

    def __init__(
        self,
        weights: Mapping[str, float],
        expected_draws: int,
        rng: random.Random | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._buffer: List[str] = build_type_buffer(weights, expected_draws)
        self._cursor = 0
        self._buffer.sort()
        self._rng.shuffle(self._buffer)

    @property
    def buffer(self) -> Sequence[str]:
        return tuple(self._buffer)

    @property
    def cursor(self) -> int:
        return self._cursor

    def next(self) -> str:
        if self._cursor >= len(self._buffer):
            self._rng.shuffle(self._buffer)
            self._cursor = 0
        value = self._buffer[self._cursor]
        self._cursor += 1
        return value

    def take(self, count: int) -> List[str]:
        return [self.next() for _ in range(max(0, count))]

    def reset(self, rng: random.Random | None = None) -> None:
        """Reshuffle and rewind; pass a freshly seeded rng for a repeatable sequence."""
        if rng is not None:
            self._rng = rng
        self._buffer.sort()
        self._rng.shuffle(self._buffer)
        self._cursor = 0

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        return self.next()
