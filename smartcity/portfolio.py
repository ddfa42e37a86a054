"""
City efficiency portfolio.

Building, infrastructure and traffic efficiencies are symmetric random walks
clamped to [0, 1], each nudged upward by the current optimization score.
"""

import numpy as np

from .constants import (
    BUILDING_COUNT,
    EFFICIENCY_INITIAL,
    BUILDING_NOISE_SCALE,
    BUILDING_SCORE_BIAS,
    UTILITY_NOISE_SCALE,
    UTILITY_SCORE_BIAS,
)
from .walk import biased_step, biased_steps


class CityPortfolio:
    """Efficiency state of the city's buildings and shared utilities"""

    def __init__(self, building_count: int = BUILDING_COUNT):
        self.building_count = building_count
        self.building_efficiencies: np.ndarray = np.full(building_count, EFFICIENCY_INITIAL, dtype=np.float64)
        self.infrastructure_efficiency: float = EFFICIENCY_INITIAL
        self.traffic_efficiency: float = EFFICIENCY_INITIAL

    def update(self, optimization_score: float, rng):
        """
        Step every walk once using this tick's optimization score.

        Draw order: buildings (index order), infrastructure, traffic.
        """
        self.building_efficiencies = biased_steps(
            self.building_efficiencies, rng,
            BUILDING_NOISE_SCALE, optimization_score * BUILDING_SCORE_BIAS
        )

        utility_bias = optimization_score * UTILITY_SCORE_BIAS
        self.infrastructure_efficiency = biased_step(
            self.infrastructure_efficiency, rng, UTILITY_NOISE_SCALE, utility_bias
        )
        self.traffic_efficiency = biased_step(
            self.traffic_efficiency, rng, UTILITY_NOISE_SCALE, utility_bias
        )

    def average_building_efficiency(self) -> float:
        if self.building_count == 0:
            return 0.0
        return float(np.mean(self.building_efficiencies))

    def reset(self):
        self.building_efficiencies = np.full(self.building_count, EFFICIENCY_INITIAL, dtype=np.float64)
        self.infrastructure_efficiency = EFFICIENCY_INITIAL
        self.traffic_efficiency = EFFICIENCY_INITIAL
