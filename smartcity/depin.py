"""
DePIN sensor network.

Nine nodes on a 3x3 grid. A node can only be active while its gating qubit
(index mod N) is set, and then with 70% probability. Active nodes accrue
transaction volume; idle nodes bleed it down to zero.

Layout (scene units, origin offset DEPIN_ORIGIN):

    0 - 1 - 2
    |   |   |
    3 - 4 - 5
    |   |   |
    6 - 7 - 8
"""

import numpy as np
from typing import List, Tuple

from .constants import (
    DEPIN_GRID_SIZE,
    DEPIN_NODE_COUNT,
    DEPIN_SPACING,
    DEPIN_ORIGIN,
    DEPIN_ACTIVITY_THRESHOLD,
    DEPIN_VOLUME_GAIN,
    DEPIN_VOLUME_DECAY,
)
from .data_types import DePINConnection, DePINNodeState, Vec3
from .quantum import QuantumRegister
from .rng import uniform
from .walk import floored_deltas


def grid_positions(node_count: int = DEPIN_NODE_COUNT,
                   columns: int = DEPIN_GRID_SIZE,
                   spacing: float = DEPIN_SPACING,
                   origin: Vec3 = DEPIN_ORIGIN) -> List[Vec3]:
    """
    World positions of grid nodes.

    Node i sits at column i % columns, row i // columns.

    Returns:
        List of (x, y, z) tuples
    """
    ox, oy, oz = origin
    return [
        (ox + (i % columns) * spacing, oy, oz + (i // columns) * spacing)
        for i in range(node_count)
    ]


def grid_connections(positions: List[Vec3], columns: int = DEPIN_GRID_SIZE) -> List[DePINConnection]:
    """
    Right- and down-neighbour edges of a rectangular grid.

    Right edge when the node is not in the last column, down edge when a
    node exists one row below. Edges are ordered by source node, right
    before down.
    """
    count = len(positions)
    connections = []
    for i in range(count):
        if i % columns < columns - 1 and i + 1 < count:
            connections.append(DePINConnection(start=positions[i], end=positions[i + 1]))
        if i + columns < count:
            connections.append(DePINConnection(start=positions[i], end=positions[i + columns]))
    return connections


class DePINNetwork:
    """Quantum-gated DePIN node grid with per-node transaction volume"""

    def __init__(self, node_count: int = DEPIN_NODE_COUNT):
        self.node_count = node_count
        self.active: np.ndarray = np.zeros(node_count, dtype=bool)
        self.volumes: np.ndarray = np.zeros(node_count, dtype=np.float64)

        # Topology is static; computed once
        self.positions: List[Vec3] = grid_positions(node_count)
        self.connections: List[DePINConnection] = grid_connections(self.positions)

    def update(self, register: QuantumRegister, rng) -> Tuple[np.ndarray, np.ndarray]:
        """
        Advance node activity and volumes from this tick's qubits.

        One draw per node is always consumed, even when the gate is closed.

        Args:
            register: Quantum register (already updated this tick)
            rng: Random source

        Returns:
            (active, volumes) arrays
        """
        active = np.zeros(self.node_count, dtype=bool)
        for i in range(self.node_count):
            draw = uniform(rng)
            active[i] = register.gate(i) and draw > DEPIN_ACTIVITY_THRESHOLD

        self.active = active
        self.volumes = floored_deltas(self.volumes, active, DEPIN_VOLUME_GAIN, DEPIN_VOLUME_DECAY)
        return self.active, self.volumes

    def total_volume(self) -> float:
        return float(np.sum(self.volumes))

    def node_states(self) -> Tuple[DePINNodeState, ...]:
        return tuple(
            DePINNodeState(
                index=i,
                position=self.positions[i],
                active=bool(self.active[i]),
                transaction_volume=float(self.volumes[i]),
            )
            for i in range(self.node_count)
        )

    def reset(self):
        self.active = np.zeros(self.node_count, dtype=bool)
        self.volumes = np.zeros(self.node_count, dtype=np.float64)
