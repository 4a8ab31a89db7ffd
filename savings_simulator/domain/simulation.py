"""Run the projection engine for the products a user picked."""

from __future__ import annotations

import math
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from savings_simulator.core.chart import ChartRow, build_chart_data, highest_final_amount
from savings_simulator.core.projection import MONTHS_PER_YEAR, ProjectionResult, project
from savings_simulator.core.summary import summarize
from savings_simulator.domain.catalog import DEFAULT_MIN_TERM_MONTHS, Product, find_product
from savings_simulator.domain.limits import ContributionLimitNotice, contribution_limit_notice
from savings_simulator.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_SELECTED_PRODUCTS = 3


class SimulationError(ValueError):
    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class SimulationInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    product_id: str
    initial_deposit: float = Field(ge=0)
    monthly_deposit: float = Field(ge=0)
    term_years: int = Field(ge=1)


class MonthlyValue(BaseModel):
    month: int
    value: float


class SimulationResult(BaseModel):
    product_id: str
    name: str
    initial_deposit: float
    monthly_deposit: float
    term_years: int
    term_months: int
    annual_yield: float
    final_amount: float
    total_contributions: float
    generated_interest: float
    monthly_data: List[MonthlyValue]
    taxation: str
    url: Optional[str] = None
    disclaimer: Optional[str] = None
    max_total_contribution: Optional[float] = None
    annual_contribution_limit: Optional[float] = None
    contribution_limit: Optional[ContributionLimitNotice] = None


class SimulationOutcome(BaseModel):
    results: List[SimulationResult]
    chart_data: List[ChartRow]
    highest_final_amount: float


def check_input(product: Product, selection: SimulationInput) -> List[str]:
    """Bounds the simulation form enforces before anything is projected."""
    errors: List[str] = []
    label = product.id

    if selection.initial_deposit < product.min_initial_deposit:
        errors.append(f"{label} initial_deposit below minimum {product.min_initial_deposit:g}")
    if product.max_initial_deposit is not None and selection.initial_deposit > product.max_initial_deposit:
        errors.append(f"{label} initial_deposit above maximum {product.max_initial_deposit:g}")

    # a product without monthly bounds takes no periodic contributions
    if selection.monthly_deposit > 0 and selection.monthly_deposit < product.min_monthly_deposit:
        errors.append(f"{label} monthly_deposit below minimum {product.min_monthly_deposit:g}")
    if product.max_monthly_deposit is not None and selection.monthly_deposit > product.max_monthly_deposit:
        errors.append(f"{label} monthly_deposit above maximum {product.max_monthly_deposit:g}")

    min_term_months = (
        product.min_term_months
        if product.min_term_months is not None
        else DEFAULT_MIN_TERM_MONTHS
    )
    min_years = max(1, math.ceil(min_term_months / MONTHS_PER_YEAR))
    if selection.term_years < min_years:
        errors.append(f"{label} term_years below minimum {min_years}")
    if product.max_term_years is not None and selection.term_years > product.max_term_years:
        errors.append(f"{label} term_years above maximum {product.max_term_years}")

    return errors


def build_result(
    product: Product,
    selection: SimulationInput,
    projection: ProjectionResult,
    annual_yield: float,
) -> SimulationResult:
    summary = summarize(projection, selection.term_years)

    return SimulationResult(
        product_id=product.id,
        name=product.name,
        initial_deposit=selection.initial_deposit,
        monthly_deposit=selection.monthly_deposit,
        term_years=selection.term_years,
        term_months=summary.term_months,
        annual_yield=annual_yield,
        final_amount=summary.final_amount,
        total_contributions=summary.total_contributions,
        generated_interest=summary.generated_interest,
        monthly_data=[MonthlyValue(month=p.month, value=p.value) for p in projection.monthly_series],
        taxation=product.taxation,
        url=product.url,
        disclaimer=product.disclaimer,
        max_total_contribution=product.max_total_contribution,
        annual_contribution_limit=product.annual_contribution_limit,
        contribution_limit=contribution_limit_notice(
            product,
            selection.initial_deposit,
            selection.monthly_deposit,
            selection.term_years,
        ),
    )


def run_simulation(
    products: Sequence[Product],
    selections: Sequence[SimulationInput],
    max_selected: int = DEFAULT_MAX_SELECTED_PRODUCTS,
) -> SimulationOutcome:
    errors: List[str] = []
    if not selections:
        errors.append("select at least one product")
    if len(selections) > max_selected:
        errors.append(f"select at most {max_selected} products")

    seen: set = set()
    resolved: List[tuple] = []
    for selection in selections:
        if selection.product_id in seen:
            errors.append(f"{selection.product_id} selected more than once")
            continue
        seen.add(selection.product_id)

        product = find_product(products, selection.product_id)
        if product is None:
            errors.append(f"unknown product {selection.product_id}")
            continue
        errors.extend(check_input(product, selection))
        resolved.append((product, selection))

    if errors:
        raise SimulationError(errors)

    results: List[SimulationResult] = []
    projections: Dict[str, ProjectionResult] = {}
    all_projections: List[ProjectionResult] = []
    for product, selection in resolved:
        terms = product.to_terms(
            selection.initial_deposit,
            selection.monthly_deposit,
            selection.term_years,
        )
        projection = project(terms)
        results.append(build_result(product, selection, projection, terms.resolved_yield()))
        projections[product.id] = projection
        all_projections.append(projection)

    logger.info(
        "simulated %d products: %s",
        len(results),
        ", ".join(f"{r.product_id}={r.final_amount:.2f}" for r in results),
    )

    return SimulationOutcome(
        results=results,
        chart_data=build_chart_data(projections),
        highest_final_amount=highest_final_amount(all_projections),
    )
