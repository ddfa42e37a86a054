"""
Clamped random-walk primitives shared by every subsystem.

Small, focused functions with no simulation state. Array variants operate
on float64 numpy arrays and draw one uniform value per element, in index
order, so a fixed random source produces the same sequence as a scalar loop.
"""
from __future__ import annotations

import numpy as np

from .rng import uniform


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp a scalar into [lo, hi]."""
    return lo if value < lo else (hi if value > hi else value)


def clamp01(value: float) -> float:
    """Clamp a scalar into [0, 1]."""
    return clamp(value, 0.0, 1.0)


def centered_noise(rng, scale: float) -> float:
    """Symmetric increment (u - 0.5) * scale."""
    return (uniform(rng) - 0.5) * scale


def biased_step(value: float, rng, noise_scale: float, bias: float) -> float:
    """
    One step of a [0, 1]-clamped walk with a constant upward bias.

    value' = clamp01(value + (u - 0.5) * noise_scale + bias)
    """
    return clamp01(value + centered_noise(rng, noise_scale) + bias)


def biased_steps(values: np.ndarray, rng, noise_scale: float, bias: float) -> np.ndarray:
    """
    Vector form of ``biased_step``: one draw per element, in order.

    Returns:
        New float64 array (input is not modified)
    """
    values = np.asarray(values, dtype=np.float64)
    draws = np.fromiter((uniform(rng) for _ in range(len(values))),
                        dtype=np.float64, count=len(values))
    return np.clip(values + (draws - 0.5) * noise_scale + bias, 0.0, 1.0)


def saturating_increment(value: float, rng, step_max: float, ceiling: float = 1.0) -> float:
    """Non-decreasing walk: min(ceiling, value + u * step_max)."""
    return min(ceiling, value + uniform(rng) * step_max)


def floored_deltas(values: np.ndarray, mask: np.ndarray, gain: float, decay: float) -> np.ndarray:
    """
    Add ``gain`` where mask is true and subtract ``decay`` elsewhere,
    then floor at zero (no upper bound).
    """
    values = np.asarray(values, dtype=np.float64)
    deltas = np.where(mask, gain, -decay)
    return np.maximum(0.0, values + deltas)
