"""
utils.py
--------------------
Pure numeric helpers shared across modules.
No heavy dependencies beyond numpy.
"""

import math

import numpy as np


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _round_half(value: float) -> int:
    """Round to nearest, ties away from zero (2.5 → 3, -2.5 → -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _round_half_array(values: np.ndarray) -> np.ndarray:
    """Vectorized _round_half(), returning int64."""
    return (np.sign(values) * np.floor(np.abs(values) + 0.5)).astype(np.int64)
