"""
Traffic layer: vehicle lanes whose speed follows traffic efficiency.

Vehicles are a per-frame presentation aid. The engine state they read is
the traffic efficiency from the latest snapshot.
"""

import numpy as np
from typing import Tuple

from .constants import VEHICLE_LANES, VEHICLE_WRAP_X


def lane_start_positions() -> np.ndarray:
    """(L,) starting x coordinate of each lane"""
    return np.array([x for x, _ in VEHICLE_LANES], dtype=np.float64)


def vehicle_speeds(traffic_efficiency: float) -> np.ndarray:
    """(L,) per-frame x displacement: base speed scaled by efficiency"""
    base = np.array([speed for _, speed in VEHICLE_LANES], dtype=np.float64)
    return base * traffic_efficiency


def advance_vehicles(xs: np.ndarray, speeds: np.ndarray, wrap_x: float = VEHICLE_WRAP_X) -> np.ndarray:
    """
    Move each vehicle by its speed; past +wrap_x it re-enters at -wrap_x.

    Returns:
        New (L,) array of x coordinates
    """
    moved = np.asarray(xs, dtype=np.float64) + np.asarray(speeds, dtype=np.float64)
    return np.where(moved > wrap_x, -wrap_x, moved)


class TrafficLayer:
    """Frame-stepped vehicle positions driven by snapshot efficiency"""

    def __init__(self):
        self.xs = lane_start_positions()

    def step(self, traffic_efficiency: float) -> Tuple[float, ...]:
        self.xs = advance_vehicles(self.xs, vehicle_speeds(traffic_efficiency))
        return tuple(float(x) for x in self.xs)

    def reset(self):
        self.xs = lane_start_positions()
