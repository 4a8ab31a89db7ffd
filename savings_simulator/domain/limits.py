from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel

from savings_simulator.core.projection import MONTHS_PER_YEAR
from savings_simulator.domain.catalog import Product


class ContributionLimitNotice(BaseModel):
    """What the form tells the user about a product's contribution limits."""

    annual_limit: Optional[float] = None
    first_year_allowance: Optional[float] = None
    full_first_year_months: Optional[int] = None
    partial_first_year_amount: Optional[float] = None
    max_total_contribution: Optional[float] = None
    planned_total_contribution: float
    exceeds_max_total: bool = False


def contribution_limit_notice(
    product: Product,
    initial_deposit: float,
    monthly_deposit: float,
    term_years: int,
) -> Optional[ContributionLimitNotice]:
    if product.annual_contribution_limit is None and product.max_total_contribution is None:
        return None

    planned = initial_deposit + monthly_deposit * term_years * MONTHS_PER_YEAR
    notice = ContributionLimitNotice(
        max_total_contribution=product.max_total_contribution,
        planned_total_contribution=planned,
        exceeds_max_total=(
            product.max_total_contribution is not None
            and planned > product.max_total_contribution
        ),
    )

    if product.annual_contribution_limit is None:
        return notice

    allowance = max(0.0, product.annual_contribution_limit - initial_deposit)
    full_months = 0
    partial = 0.0
    if monthly_deposit > 0:
        full_months = min(MONTHS_PER_YEAR, math.floor(allowance / monthly_deposit))
        if full_months < MONTHS_PER_YEAR:
            partial = allowance - full_months * monthly_deposit

    return notice.model_copy(
        update={
            "annual_limit": product.annual_contribution_limit,
            "first_year_allowance": allowance,
            "full_first_year_months": full_months,
            "partial_first_year_amount": partial,
        }
    )
