from __future__ import annotations

from core.utils import round_half_away, to_float


def calculate_market_share(revenue: float, total_addressable_market: float) -> float:
    """
    Company revenue as a percentage of the total addressable market, 2 dp.
    Returns 0.0 when either figure is missing or the TAM is not positive.
    """
    rev = to_float(revenue)
    tam = to_float(total_addressable_market)
    if rev is None or tam is None or tam <= 0:
        return 0.0
    return round_half_away(rev / tam * 100.0, 2)
