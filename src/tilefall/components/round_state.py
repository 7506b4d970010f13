"""Round state: score, remaining moves and outcome."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from tilefall.errors import RoundOver


class Outcome(Enum):
    """Round outcome; only ``PLAYING`` accepts moves."""
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


@dataclass(slots=True)
class RoundState:
    """Singleton component tracking the active round.

    score never decreases and moves_remaining never increases within a round;
    once outcome leaves PLAYING it stays there until ``reset``.
    """
    target_score: int
    max_moves: int
    score: int = 0
    moves_remaining: int = -1
    outcome: Outcome = Outcome.PLAYING
    turns: int = 0

    def __post_init__(self) -> None:
        if self.moves_remaining < 0:
            self.moves_remaining = self.max_moves

    @property
    def is_over(self) -> bool:
        return self.outcome is not Outcome.PLAYING

    @property
    def progress(self) -> float:
        """Fraction of the target reached, clamped to 1.0."""
        if self.target_score <= 0:
            return 1.0
        return min(self.score / self.target_score, 1.0)

    def reset(self, target_score: Optional[int] = None, max_moves: Optional[int] = None) -> None:
        if target_score is not None:
            self.target_score = target_score
        if max_moves is not None:
            self.max_moves = max_moves
        self.score = 0
        self.moves_remaining = self.max_moves
        self.outcome = Outcome.PLAYING
        self.turns = 0

    def record_move(self, points: int) -> Outcome:
        """Apply one successful move worth ``points`` and re-evaluate the outcome."""
        if self.is_over:
            raise RoundOver(f"round already {self.outcome.value}")
        self.score += max(0, points)
        self.moves_remaining = max(0, self.moves_remaining - 1)
        self.turns += 1
        if self.score >= self.target_score:
            self.outcome = Outcome.WON
        elif self.moves_remaining <= 0:
            self.outcome = Outcome.LOST
        return self.outcome
