"""
Scene geometry derived from engine snapshots.

Small, focused functions with no simulation state. Renderers call these to
turn a snapshot into line segments, boxes and surfaces. Coordinate triples
are validated before they are handed out: malformed segments are logged and
omitted, never raised.
"""
from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence, Tuple

import numpy as np

from .constants import (
    CITY_ORIGIN,
    BUILDING_SPACING,
    BUILDING_BASE_HEIGHT,
    BUILDING_HEIGHT_SCALE,
    ENERGY_FLOW_SOURCES,
    ENERGY_FLOW_SINK,
    OPTIMIZATION_FIELD_SCALE,
    OPTIMIZATION_FIELD_SEGMENTS,
    OPTIMIZATION_FIELD_AMPLITUDE,
    INFRASTRUCTURE_SPAN,
    INFRASTRUCTURE_PEAK_SCALE,
)
from .data_types import Vec3

logger = logging.getLogger(__name__)

Segment = Tuple[Vec3, Vec3]


def is_valid_triple(value) -> bool:
    """
    True when value is a sequence of exactly three finite real numbers.

    Booleans and strings are rejected even though they index like sequences.
    """
    if isinstance(value, (str, bytes)):
        return False
    try:
        if len(value) != 3:
            return False
    except TypeError:
        return False
    for coord in value:
        if isinstance(coord, bool) or not isinstance(coord, numbers.Real):
            return False
        if not math.isfinite(float(coord)):
            return False
    return True


def valid_segments(segments: Iterable[Sequence], label: str = "segments") -> Iterator[Segment]:
    """
    Yield only segments whose two endpoints are valid triples.

    Each rejected segment is logged at WARNING with its index and dropped.

    Args:
        segments: Iterable of (start, end) pairs
        label: Name used in log messages (e.g. "depin_connections")
    """
    for i, segment in enumerate(segments):
        try:
            start, end = segment
        except (TypeError, ValueError):
            logger.warning("%s[%d]: malformed segment %r", label, i, segment)
            continue
        if not (is_valid_triple(start) and is_valid_triple(end)):
            logger.warning("%s[%d]: invalid connection points %r -> %r", label, i, start, end)
            continue
        yield (tuple(float(c) for c in start), tuple(float(c) for c in end))


def connection_segments(connections) -> List[Segment]:
    """Validated segments for DePIN connections (objects with start/end)"""
    return list(valid_segments(((c.start, c.end) for c in connections), "depin_connections"))


def transfer_segments(transfers) -> List[Segment]:
    """Validated segments for ledger transfers"""
    return list(valid_segments(((t.from_position, t.to_position) for t in transfers), "ledger_transfers"))


@dataclass(frozen=True)
class BuildingBox:
    """Box primitive for one building"""
    index: int
    position: Vec3  # Base centre
    height: float
    opacity: float


def building_layout(efficiencies: Sequence[float], origin: Vec3 = CITY_ORIGIN) -> List[BuildingBox]:
    """
    Boxes for a 3x3 block of buildings centred on the city origin.

    Height grows with efficiency (3 + 10e), as does opacity (0.6 + 0.4e).
    """
    ox, oy, oz = origin
    boxes = []
    for i, eff in enumerate(efficiencies):
        x = ox + (i % 3 - 1) * BUILDING_SPACING
        z = oz + (i // 3) * BUILDING_SPACING - BUILDING_SPACING
        boxes.append(BuildingBox(
            index=i,
            position=(x, oy, z),
            height=BUILDING_BASE_HEIGHT + eff * BUILDING_HEIGHT_SCALE,
            opacity=0.6 + eff * 0.4,
        ))
    return boxes


def infrastructure_polyline(efficiency: float) -> List[Vec3]:
    """Three-point power line whose middle rises with efficiency"""
    return [
        (-INFRASTRUCTURE_SPAN, 0.0, 0.0),
        (0.0, efficiency * INFRASTRUCTURE_PEAK_SCALE, 0.0),
        (INFRASTRUCTURE_SPAN, 0.0, 0.0),
    ]


def energy_flow_segments() -> List[Segment]:
    """Fixed energy feeds from the compute and DePIN corners to the city"""
    return [(source, ENERGY_FLOW_SINK) for source in ENERGY_FLOW_SOURCES]


def optimization_field(
    score: float,
    scale: float = OPTIMIZATION_FIELD_SCALE,
    segments: int = OPTIMIZATION_FIELD_SEGMENTS
) -> np.ndarray:
    """
    Wave surface whose phase follows the optimization score.

    y = sin(2*pi*(x + z + score)) * 0.5 over a (segments+1)^2 lattice
    spanning [-scale/2, scale/2] in x and z.

    Returns:
        ((segments+1)^2, 3) float64 array, x-major order
    """
    t = np.linspace(0.0, 1.0, segments + 1)
    coords = (t - 0.5) * scale
    xs, zs = np.meshgrid(coords, coords, indexing='ij')
    ys = np.sin(xs * np.pi * 2 + zs * np.pi * 2 + score * np.pi * 2) * OPTIMIZATION_FIELD_AMPLITUDE
    return np.stack([xs.ravel(), ys.ravel(), zs.ravel()], axis=1)
