from __future__ import annotations

import math
from typing import Any, Optional

import numpy as np


def to_float(value: Any) -> Optional[float]:
    """
    Lenient numeric coercion: numbers and numeric strings become floats,
    anything else (None, blanks, garbage, NaN, inf) becomes None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    return out if math.isfinite(out) else None


def finite_or(value: Any, default: float) -> float:
    """Return value as float when it is a finite number, else default."""
    out = to_float(value)
    return default if out is None else out


def excel_round(x, decimals: int = 2):
    """Excel ROUND: half away from zero (vectorized)."""
    m = 10 ** decimals
    x = np.asarray(x, dtype=float)
    return np.sign(x) * (np.floor(np.abs(x) * m + 0.5) / m)


def round_half_away(x: float, decimals: int = 2) -> float:
    """Scalar excel_round returning a plain float."""
    return float(excel_round(x, decimals))


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def is_near_zero(x: float, eps: float = 1e-9) -> bool:
    return abs(x) <= eps
