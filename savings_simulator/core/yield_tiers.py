"""Pick the annual yield that applies to a given term."""

from typing import Optional

TIER_10_PLUS_YEARS = 10
TIER_5_PLUS_YEARS = 5


def applicable_yield(
    term_years: int,
    annual_yield_percent: float,
    yield_5_plus_years: Optional[float] = None,
    yield_10_plus_years: Optional[float] = None,
) -> float:
    """Return the highest tier the term qualifies for, falling back to the base yield."""
    if term_years >= TIER_10_PLUS_YEARS and yield_10_plus_years is not None:
        return yield_10_plus_years
    if term_years >= TIER_5_PLUS_YEARS and yield_5_plus_years is not None:
        return yield_5_plus_years
    return annual_yield_percent
