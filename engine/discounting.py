"""
Discounting — NPV of a yearly cashflow series and IRR by damped Newton-Raphson.

IRR is best-effort: series with several sign changes can have several real
roots or none. The solver always returns a finite rate and reports whether it
actually converged, so callers can decide whether to trust or flag the value.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

from core.config import DEFAULT_CONFIG

logger = logging.getLogger(__name__)

CashflowLike = Union[Sequence[float], np.ndarray]

_ZERO_DERIVATIVE = 1e-9


@dataclass(frozen=True)
class IRRResult:
    """Outcome of the IRR root search."""
    rate: float
    converged: bool
    iterations: int

    def __float__(self) -> float:
        return float(self.rate)


def npv(rate: float, cashflows: CashflowLike) -> float:
    """
    Net present value: sum of cashflows[t] / (1 + rate)^t for t = 0..N.

    The rate is a fraction (0.10 = 10%). An empty series is worth 0.
    """
    cf = np.asarray(cashflows, dtype=float)
    if cf.size == 0:
        return 0.0
    t = np.arange(cf.size, dtype=float)
    return float(np.sum(cf / np.power(1.0 + rate, t)))


def npv_derivative(rate: float, cashflows: CashflowLike) -> float:
    """d NPV / d rate = sum over t >= 1 of -t * cashflows[t] / (1 + rate)^(t + 1)."""
    cf = np.asarray(cashflows, dtype=float)
    if cf.size < 2:
        return 0.0
    t = np.arange(1, cf.size, dtype=float)
    return float(np.sum(-t * cf[1:] / np.power(1.0 + rate, t + 1.0)))


def solve_irr(
    cashflows: CashflowLike,
    guess: float = DEFAULT_CONFIG.irr_guess,
    *,
    tolerance: float = DEFAULT_CONFIG.irr_tolerance,
    max_iterations: int = DEFAULT_CONFIG.irr_max_iterations,
    rate_floor: float = DEFAULT_CONFIG.irr_rate_floor,
) -> IRRResult:
    """
    Find the rate that zeroes the NPV of a cashflow series.

    Each step: r_new = r - f(r) / f'(r), with f' == 0 replaced by 1e-9.
    A non-finite step stops the search at the last finite rate. Rates are
    floored at rate_floor so (1 + r) stays positive. Converges when
    |r_new - r| < tolerance; otherwise returns the last iterate after
    max_iterations.
    """
    cf = np.asarray(cashflows, dtype=float)
    r = float(guess)
    if cf.size == 0:
        return IRRResult(rate=r, converged=False, iterations=0)

    for i in range(1, max_iterations + 1):
        f = npv(r, cf)
        df = npv_derivative(r, cf)
        if df == 0:
            df = _ZERO_DERIVATIVE

        r_new = r - f / df
        if not math.isfinite(r_new):
            logger.debug("IRR step %d produced non-finite rate; keeping r=%.6g", i, r)
            return IRRResult(rate=r, converged=False, iterations=i)

        step = abs(r_new - r)
        r = max(rate_floor, r_new)
        if step < tolerance:
            return IRRResult(rate=r, converged=True, iterations=i)

    logger.debug("IRR did not converge within %d iterations; best effort r=%.6g", max_iterations, r)
    return IRRResult(rate=r, converged=False, iterations=max_iterations)


def irr(cashflows: CashflowLike, guess: float = DEFAULT_CONFIG.irr_guess) -> float:
    """Best-effort IRR as a bare float."""
    return solve_irr(cashflows, guess).rate
