"""Data contracts for the raw projection endpoint."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from savings_simulator.core.projection import AnnualContributionCap, ProductTerms
from savings_simulator.domain.simulation import MonthlyValue


class ProjectionRequest(BaseModel):
    """Inputs for a single-product projection."""

    model_config = ConfigDict(extra="forbid")

    initial_deposit: float = Field(..., ge=0, description="Balance at month 0.")
    monthly_deposit: float = Field(0.0, ge=0, description="Contribution credited at each month end.")
    term_years: int = Field(..., ge=1, le=100, description="Number of years to project.")
    annual_yield_percent: float = Field(
        ...,
        ge=0,
        description="Annual yield as a percentage (e.g. 3.5 for 3.5%).",
    )
    yield_5_plus_years: Optional[float] = Field(None, ge=0)
    yield_10_plus_years: Optional[float] = Field(None, ge=0)
    max_total_contribution: Optional[float] = Field(
        None,
        ge=0,
        description="Ceiling on cumulative principal, initial deposit included.",
    )
    annual_contribution_limit: Optional[float] = Field(
        None,
        ge=0,
        description="First-year contribution ceiling, initial deposit included.",
    )

    def to_terms(self) -> ProductTerms:
        return ProductTerms(
            initial_deposit=self.initial_deposit,
            monthly_deposit=self.monthly_deposit,
            term_years=self.term_years,
            annual_yield_percent=self.annual_yield_percent,
            yield_5_plus_years=self.yield_5_plus_years,
            yield_10_plus_years=self.yield_10_plus_years,
            max_total_contribution=self.max_total_contribution,
            annual_contribution_cap=(
                AnnualContributionCap(limit=self.annual_contribution_limit)
                if self.annual_contribution_limit is not None
                else None
            ),
        )


class ProjectionResponse(BaseModel):
    """Projected monthly trajectory and its summary."""

    annual_yield: float
    final_amount: float
    total_contributions: float
    generated_interest: float
    term_months: int
    monthly_series: List[MonthlyValue]
    yearly_series: List[MonthlyValue]
