"""
Deterministic RNG utilities for the smart city simulation.

Uses SHA256 hashing to derive stable seeds from hierarchical components
(world_seed, subsystem name, ...). All engine randomness flows through a
single injected source; by default numpy.random.Generator(PCG64).

A random source is any object with a ``random()`` method returning a float
in [0, 1). numpy Generators satisfy this.
"""

import hashlib
import numpy as np
from typing import Any, Optional

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def make_seed(*components: Any) -> int:
    """
    Generate deterministic 64-bit seed from hierarchical components.

    Args:
        *components: Seed components (world_seed, subsystem name, etc.)

    Returns:
        64-bit integer seed for numpy RNG

    Example:
        engine_seed = make_seed(world_seed, "engine")
    """
    hash_input = ":".join(str(c) for c in components)

    hash_bytes = hashlib.sha256(hash_input.encode('utf-8')).digest()
    seed = int.from_bytes(hash_bytes[:8], byteorder='big')

    return seed


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """
    Create the default random source.

    Args:
        seed: RNG seed (None = fresh OS entropy, non-reproducible)

    Returns:
        numpy Generator backed by PCG64
    """
    return np.random.Generator(np.random.PCG64(seed))


def uniform(rng) -> float:
    """Draw one float in [0, 1) from any random source."""
    return float(rng.random())


def uniform_index(rng, n: int) -> int:
    """Draw an integer in [0, n) as floor(u * n)."""
    index = int(uniform(rng) * n)
    # Guard against u * n rounding up to n for u just below 1.0
    return min(index, n - 1)


def base36_fraction(u: float, length: int) -> str:
    """
    Render the fractional digits of ``u`` in base 36.

    Produces the same shape as JavaScript ``Math.random().toString(36)``
    without the leading ``0.``. Trailing zero digits are dropped, so the
    result can be shorter than ``length``.

    Args:
        u: Value in [0, 1)
        length: Maximum number of digits

    Returns:
        Lowercase base-36 string
    """
    digits = []
    frac = float(u)
    for _ in range(length):
        if frac <= 0.0:
            break
        frac *= 36.0
        digit = int(frac)
        digits.append(_BASE36_DIGITS[digit])
        frac -= digit
    return "".join(digits)

