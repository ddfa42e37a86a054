"""
Performance history for the dashboard charts.

One sample per tick, capped to the most recent HISTORY_CAP samples. The
step counter keeps running after old samples are dropped, so retained
steps are always consecutive.
"""

from collections import deque
from typing import Deque, Optional, Sequence, Tuple

import numpy as np

from .constants import HISTORY_CAP
from .data_types import PerformanceSample


class PerformanceHistory:
    """Capped time series of aggregated display metrics"""

    def __init__(self, cap: int = HISTORY_CAP):
        self.cap = cap
        self.samples: Deque[PerformanceSample] = deque(maxlen=cap)
        self._step: int = 0

    def append(
        self,
        avg_building_efficiency: float,
        depin_volumes: Sequence[float],
        optimization_score: float,
        traffic_efficiency: float
    ) -> PerformanceSample:
        """
        Aggregate current values into a sample and append it.

        Args:
            avg_building_efficiency: Mean building efficiency in [0, 1]
            depin_volumes: Per-node DePIN transaction volume
            optimization_score: Score in [0, 1]
            traffic_efficiency: Efficiency in [0, 1]

        Returns:
            The appended sample
        """
        self._step += 1

        sample = PerformanceSample(
            step=self._step,
            avg_energy_efficiency=float(avg_building_efficiency) * 100.0,
            depin_volume_sum=float(np.sum(np.asarray(depin_volumes, dtype=np.float64))),
            optimization_score=float(optimization_score) * 100.0,
            traffic_efficiency=float(traffic_efficiency) * 100.0,
        )
        self.samples.append(sample)
        return sample

    def latest(self) -> Optional[PerformanceSample]:
        return self.samples[-1] if self.samples else None

    def as_tuple(self) -> Tuple[PerformanceSample, ...]:
        return tuple(self.samples)

    def __len__(self) -> int:
        return len(self.samples)

    def reset(self):
        self.samples.clear()
        self._step = 0
