"""
Quantum bit register.

Each tick every bit is "measured": an independent coin flip with no memory
of the previous value.
"""

import numpy as np

from .constants import QUBIT_COUNT, QUBIT_FLIP_THRESHOLD
from .rng import uniform


class QuantumRegister:
    """Fixed-length register of boolean qubits"""

    def __init__(self, size: int = QUBIT_COUNT):
        if size < 1:
            raise ValueError(f"Register size must be positive, got {size}")
        self.size = size
        self.bits: np.ndarray = np.zeros(size, dtype=bool)

    def update(self, rng) -> np.ndarray:
        """
        Reassign every bit as u > 0.5, one draw per bit in index order.

        Returns:
            The new (size,) bool array
        """
        self.bits = np.array([uniform(rng) > QUBIT_FLIP_THRESHOLD for _ in range(self.size)],
                             dtype=bool)
        return self.bits

    def gate(self, index: int) -> bool:
        """Gating bit for a downstream node: bits[index mod size]"""
        return bool(self.bits[index % self.size])

    def reset(self):
        self.bits = np.zeros(self.size, dtype=bool)
