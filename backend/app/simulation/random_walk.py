"""Gaussian random-walk increments via the Box-Muller transform."""
from __future__ import annotations

import math
import random


def sample(rng: random.Random, drift: float, volatility: float) -> float:
    """Return one increment drawn from N(drift, volatility^2).

    Consumes two uniform draws from ``rng``. ``u1`` is redrawn while it is
    exactly 0 so ``log(u1)`` stays finite.
    """
    u1 = rng.random()
    while u1 == 0.0:
        u1 = rng.random()
    u2 = rng.random()
    z0 = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
    return drift + volatility * z0
