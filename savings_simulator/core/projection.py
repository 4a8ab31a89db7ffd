"""Month-by-month future value projection for a single savings product."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from savings_simulator.core.yield_tiers import applicable_yield

MONTHS_PER_YEAR = 12


class InvalidProjectionInput(ValueError):
    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


@dataclass(frozen=True)
class AnnualContributionCap:
    """Ceiling on principal contributed during the first 12 months of the term.

    The initial deposit counts against the allowance. From month 13 onward the
    monthly deposit is no longer capped.
    """

    limit: float


@dataclass(frozen=True)
class ProductTerms:
    initial_deposit: float
    monthly_deposit: float
    term_years: int
    annual_yield_percent: float
    yield_5_plus_years: Optional[float] = None
    yield_10_plus_years: Optional[float] = None
    max_total_contribution: Optional[float] = None
    annual_contribution_cap: Optional[AnnualContributionCap] = None

    @property
    def term_months(self) -> int:
        return self.term_years * MONTHS_PER_YEAR

    def resolved_yield(self) -> float:
        return applicable_yield(
            self.term_years,
            self.annual_yield_percent,
            yield_5_plus_years=self.yield_5_plus_years,
            yield_10_plus_years=self.yield_10_plus_years,
        )


@dataclass(frozen=True)
class MonthlyPoint:
    month: int
    value: float


@dataclass(frozen=True)
class ProjectionResult:
    final_amount: float
    monthly_series: Tuple[MonthlyPoint, ...]
    total_contributions: float


@dataclass(frozen=True)
class AccrualState:
    """Carried from one month to the next.

    `value` is never rounded. `contributed` and `year_contributions` are kept
    in cents; `contributed` includes the initial deposit.
    """

    value: float
    contributed: float
    current_year: int = 1
    year_contributions: float = 0.0


def round_currency(value: float) -> float:
    """Round half up to cents."""
    return math.floor(value * 100 + 0.5) / 100


def initial_state(initial_deposit: float) -> AccrualState:
    return AccrualState(
        value=initial_deposit,
        contributed=round_currency(initial_deposit),
        current_year=1,
        year_contributions=round_currency(initial_deposit),
    )


def apply_annual_cap(
    state: AccrualState,
    month: int,
    requested: float,
    annual_cap: Optional[AnnualContributionCap],
) -> Tuple[AccrualState, float]:
    """Return the state after this month's cap bookkeeping and the allowed amount.

    Only months 1-12 are capped. Once the term crosses into year 2 the
    tracking is reset and the requested amount passes through.
    """
    if annual_cap is None:
        return state, requested

    current_year = (month - 1) // MONTHS_PER_YEAR + 1
    if current_year != state.current_year:
        state = replace(state, current_year=current_year, year_contributions=0.0)

    if state.current_year > 1:
        return state, requested

    remaining = round_currency(annual_cap.limit - state.year_contributions)
    allowed = 0.0 if remaining <= 0 else min(requested, remaining)
    return replace(state, year_contributions=round_currency(state.year_contributions + allowed)), allowed


def advance_month(
    state: AccrualState,
    month: int,
    monthly_deposit: float,
    monthly_rate: float,
    max_total_contribution: Optional[float] = None,
    annual_cap: Optional[AnnualContributionCap] = None,
) -> AccrualState:
    """Compound one month of interest, then credit the month-end contribution."""
    grown = state.value * (1 + monthly_rate)

    state, contribution = apply_annual_cap(state, month, monthly_deposit, annual_cap)

    # whole contribution is skipped once it would overflow the ceiling; compared in cents
    if (
        max_total_contribution is not None
        and round_currency(state.contributed + contribution) > round_currency(max_total_contribution)
    ):
        contribution = 0.0

    return replace(
        state,
        value=grown + contribution,
        contributed=round_currency(state.contributed + contribution),
    )


def _amount_errors(amounts: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    for name, amount in amounts.items():
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            errors.append(f"{name} must be a number")
        elif not math.isfinite(amount):
            errors.append(f"{name} must be finite")
        elif amount < 0:
            errors.append(f"{name} must be non-negative")
    return errors


def _validate(
    initial_deposit: float,
    monthly_deposit: float,
    term_years: int,
    annual_yield_percent: float,
    max_total_contribution: Optional[float],
    annual_cap: Optional[AnnualContributionCap],
) -> None:
    errors: List[str] = []

    amounts = {
        "initial_deposit": initial_deposit,
        "monthly_deposit": monthly_deposit,
        "annual_yield_percent": annual_yield_percent,
    }
    if max_total_contribution is not None:
        amounts["max_total_contribution"] = max_total_contribution
    if annual_cap is not None:
        amounts["annual_contribution_cap"] = annual_cap.limit

    errors.extend(_amount_errors(amounts))

    if isinstance(term_years, bool) or not isinstance(term_years, int):
        errors.append("term_years must be an integer")
    elif term_years < 1:
        errors.append("term_years must be at least 1")

    if errors:
        raise InvalidProjectionInput(errors)


def calculate_future_value(
    initial_deposit: float,
    monthly_deposit: float,
    term_years: int,
    annual_yield_percent: float,
    max_total_contribution: Optional[float] = None,
    annual_cap: Optional[AnnualContributionCap] = None,
) -> ProjectionResult:
    """
    Project a balance month by month over `term_years`.

    Per month (1..term_years*12):
      1) Grow the running value by annual_yield_percent / 100 / 12.
      2) Work out the month-end contribution (annual cap in year 1, then the
         total contribution ceiling, which never partially applies).
      3) Record the value rounded to cents; the running value keeps full
         precision.

    Month 0 is the initial deposit with no interest and no contribution.
    """
    _validate(
        initial_deposit,
        monthly_deposit,
        term_years,
        annual_yield_percent,
        max_total_contribution,
        annual_cap,
    )

    monthly_rate = annual_yield_percent / 100 / MONTHS_PER_YEAR
    state = initial_state(float(initial_deposit))
    series: List[MonthlyPoint] = [MonthlyPoint(month=0, value=state.value)]

    for month in range(1, term_years * MONTHS_PER_YEAR + 1):
        state = advance_month(
            state,
            month,
            monthly_deposit,
            monthly_rate,
            max_total_contribution=max_total_contribution,
            annual_cap=annual_cap,
        )
        series.append(MonthlyPoint(month=month, value=round_currency(state.value)))

    return ProjectionResult(
        final_amount=round_currency(state.value),
        monthly_series=tuple(series),
        total_contributions=round_currency(state.contributed),
    )


def project(terms: ProductTerms) -> ProjectionResult:
    """Resolve the yield tier for the term and run the projection."""
    tiers = {
        name: getattr(terms, name)
        for name in ("yield_5_plus_years", "yield_10_plus_years")
        if getattr(terms, name) is not None
    }
    errors = _amount_errors(tiers)
    if errors:
        raise InvalidProjectionInput(errors)

    return calculate_future_value(
        terms.initial_deposit,
        terms.monthly_deposit,
        terms.term_years,
        terms.resolved_yield(),
        max_total_contribution=terms.max_total_contribution,
        annual_cap=terms.annual_contribution_cap,
    )
