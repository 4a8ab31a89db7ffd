"""Resample monthly projections into the yearly rows the chart plots."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from savings_simulator.core.projection import (
    MONTHS_PER_YEAR,
    MonthlyPoint,
    ProjectionResult,
)

ChartRow = Dict[str, Any]


def _value_at(result: ProjectionResult, month: int) -> Optional[float]:
    # series is indexed by month, but shorter terms simply stop earlier
    if 0 <= month < len(result.monthly_series):
        return result.monthly_series[month].value
    return None


def yearly_points(result: ProjectionResult) -> List[MonthlyPoint]:
    """Month 0 followed by the value at the end of every year."""
    return [point for point in result.monthly_series if point.month % MONTHS_PER_YEAR == 0]


def build_chart_data(results: Mapping[str, ProjectionResult]) -> List[ChartRow]:
    """
    Build one row per year boundary across several keyed projections.

    Each row is {"month": m, <key>: value, ...}; a product only appears in
    the rows its term covers. The last month of the longest term is always
    present even if it does not fall on a year boundary.
    """
    if not results:
        return []

    max_months = max(len(result.monthly_series) - 1 for result in results.values())

    months = list(range(0, max_months + 1, MONTHS_PER_YEAR))
    if months[-1] != max_months:
        months.append(max_months)

    rows: List[ChartRow] = []
    for month in months:
        row: ChartRow = {"month": month}
        for key, result in results.items():
            value = _value_at(result, month)
            if value is not None:
                row[key] = value
        rows.append(row)
    return rows


def highest_final_amount(results: Sequence[ProjectionResult]) -> float:
    if not results:
        return 0.0
    return max(result.final_amount for result in results)
