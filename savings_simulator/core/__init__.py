"""Pure projection engine and the adapters that read its output."""

from savings_simulator.core.projection import (
    AnnualContributionCap,
    InvalidProjectionInput,
    MonthlyPoint,
    ProductTerms,
    ProjectionResult,
    calculate_future_value,
    project,
    round_currency,
)
from savings_simulator.core.yield_tiers import applicable_yield

__all__ = [
    "AnnualContributionCap",
    "InvalidProjectionInput",
    "MonthlyPoint",
    "ProductTerms",
    "ProjectionResult",
    "applicable_yield",
    "calculate_future_value",
    "project",
    "round_currency",
]
