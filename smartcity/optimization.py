"""
Quantum annealing progress score.

A single scalar that only ever moves up, saturating at 1.0. Its value is the
upward bias fed into the city portfolio walks.
"""

from .constants import OPTIMIZATION_STEP_MAX
from .walk import saturating_increment


class OptimizationProcess:
    """Monotone annealing score in [0, 1]"""

    def __init__(self):
        self.score: float = 0.0

    def update(self, rng) -> float:
        """score = min(1, score + u * 0.05)"""
        self.score = saturating_increment(self.score, rng, OPTIMIZATION_STEP_MAX)
        return self.score

    @property
    def converged(self) -> bool:
        return self.score >= 1.0

    def reset(self):
        self.score = 0.0
