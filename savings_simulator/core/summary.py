"""Summary figures shown next to the projection chart."""

from __future__ import annotations

from dataclasses import dataclass

from savings_simulator.core.projection import (
    MONTHS_PER_YEAR,
    ProjectionResult,
    round_currency,
)


@dataclass(frozen=True)
class ProjectionSummary:
    final_amount: float
    total_contributions: float
    generated_interest: float
    term_months: int


def generated_interest(result: ProjectionResult) -> float:
    """Final amount minus the principal the engine actually credited."""
    return round_currency(result.final_amount - result.total_contributions)


def summarize(result: ProjectionResult, term_years: int) -> ProjectionSummary:
    return ProjectionSummary(
        final_amount=result.final_amount,
        total_contributions=result.total_contributions,
        generated_interest=generated_interest(result),
        term_months=term_years * MONTHS_PER_YEAR,
    )
